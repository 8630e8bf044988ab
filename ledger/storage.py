# ledger/storage.py
import json
import os
import tempfile
import threading
from pathlib import Path

from config.settings import LEDGER_FILE
from ledger.entry import LedgerEntry
from ledger.errors import StorageReadFailure


class LedgerStore:
    """
    Append-only sequence of LedgerEntry, insertion order = chain order.
    No update or delete.
    """

    def append(self, entry: LedgerEntry):
        raise NotImplementedError

    def read_all(self, strict=False) -> list:
        raise NotImplementedError

    def last_entry(self, strict=False):
        entries = self.read_all(strict=strict)
        return entries[-1] if entries else None

    def count(self) -> int:
        return len(self.read_all())


class MemoryLedgerStore(LedgerStore):
    def __init__(self, entries=None):
        self._raw = [e.to_dict() for e in entries or []]
        self._lock = threading.Lock()

    def append(self, entry: LedgerEntry):
        raw = entry.to_dict()
        with self._lock:
            self._raw.append(raw)

    def read_all(self, strict=False) -> list:
        with self._lock:
            raw = list(self._raw)
        return [LedgerEntry.from_dict(r) for r in raw]


class FileLedgerStore(LedgerStore):
    def __init__(self, path=LEDGER_FILE):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load_raw(self) -> list:
        if not self.path.exists():
            return []

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StorageReadFailure(f"Ledger unreadable: {e}")

        if not isinstance(raw, list):
            raise StorageReadFailure("Ledger is not a list of entries")

        return raw

    def _parse(self, raw: list) -> list:
        try:
            return [LedgerEntry.from_dict(r) for r in raw]
        except (KeyError, TypeError, ValueError) as e:
            raise StorageReadFailure(f"Ledger entry malformed: {e}")

    def read_all(self, strict=False) -> list:
        try:
            return self._parse(self._load_raw())
        except StorageReadFailure as e:
            if strict:
                raise
            print("❌ LEDGER READ FAILED:", e)
            return []

    def append(self, entry: LedgerEntry):
        with self._lock:
            # never overwrite history we cannot read
            raw = self._load_raw()
            self._parse(raw)

            raw.append(entry.to_dict())
            self._write_atomic(raw)

    def _write_atomic(self, raw: list):
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=self.path.name,
            suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(raw, f, separators=(",", ":"))
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
