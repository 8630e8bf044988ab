# ledger/sealer.py
import asyncio
import threading

from ledger.block import GENESIS, create_block
from ledger.entry import LedgerEntry, new_entry_id
from ledger.errors import InputIncomplete


class Sealer:
    """
    Digest, encrypt, link and append a ballot as one step.
    Either a complete entry is appended or the ledger is left unchanged.
    """

    def __init__(self, store, crypto, clock=None, nonce_source=None):
        self.store = store
        self.crypto = crypto
        self.clock = clock
        self.nonce_source = nonce_source
        # one writer per ledger: prev_hash is read against a stable tail
        self._lock = threading.Lock()

    def seal_sync(self, ballot) -> LedgerEntry:
        missing = ballot.missing_fields()
        if missing:
            raise InputIncomplete(missing)

        # 1. digest of the plaintext
        data_hash = ballot.digest()

        # 2. encrypt (CryptoFailure aborts here, nothing written)
        encrypted = self.crypto.encrypt_payload(ballot)

        with self._lock:
            # 3. chain tail
            tail = self.store.last_entry(strict=True)
            prev_hash = tail.block.hash if tail else GENESIS

            # 4. link
            block = create_block(
                prev_hash,
                data_hash,
                clock=self.clock,
                nonce_source=self.nonce_source
            )

            # 5. append
            entry = LedgerEntry(
                id=new_entry_id(block.timestamp),
                encrypted=encrypted,
                block=block,
            )
            self.store.append(entry)

        return entry

    async def seal(self, ballot) -> LedgerEntry:
        return await asyncio.to_thread(self.seal_sync, ballot)
