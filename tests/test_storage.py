"""Ledger stores."""
import json

import pytest

from ledger.entry import LedgerEntry, new_entry_id
from ledger.errors import StorageReadFailure
from ledger.sealer import Sealer
from ledger.storage import FileLedgerStore, MemoryLedgerStore


def test_memory_store_starts_empty(store):
    assert store.read_all() == []
    assert store.last_entry() is None
    assert store.count() == 0


def test_memory_store_keeps_insertion_order(sealer, store, make_ballot):
    first = sealer.seal_sync(make_ballot("X"))
    second = sealer.seal_sync(make_ballot("Y"))

    assert [e.id for e in store.read_all()] == [first.id, second.id]
    assert store.last_entry().id == second.id


def test_memory_store_returns_copies(sealer, store, make_ballot):
    sealer.seal_sync(make_ballot())
    store.read_all()[0].block.prev_hash = "tampered"
    assert store.read_all()[0].block.prev_hash == "GENESIS"


def test_never_written_file_store_is_empty(tmp_path):
    assert FileLedgerStore(tmp_path / "ledger.json").read_all() == []


def test_file_store_survives_restart(tmp_path, crypto, make_ballot):
    path = tmp_path / "data" / "ledger.json"
    sealer = Sealer(FileLedgerStore(path), crypto)
    e1 = sealer.seal_sync(make_ballot("X"))
    e2 = sealer.seal_sync(make_ballot("Y"))

    reopened = FileLedgerStore(path).read_all()
    assert [e.id for e in reopened] == [e1.id, e2.id]
    assert reopened[1].block.prev_hash == e1.block.hash
    assert reopened[1].encrypted.data == e2.encrypted.data


def test_file_store_persists_wire_shape(tmp_path, sealer, make_ballot):
    entry = sealer.seal_sync(make_ballot())
    path = tmp_path / "ledger.json"
    FileLedgerStore(path).append(entry)

    raw = json.loads(path.read_text())
    assert raw[0]["id"] == entry.id
    assert set(raw[0]["encrypted"]) == {"iv", "data"}
    assert set(raw[0]["block"]) == {"prevHash", "timestamp", "nonce", "dataHash", "hash"}


def test_file_store_leaves_no_temp_files(tmp_path, sealer, make_ballot):
    store = FileLedgerStore(tmp_path / "ledger.json")
    store.append(sealer.seal_sync(make_ballot()))
    assert [p.name for p in tmp_path.iterdir()] == ["ledger.json"]


@pytest.mark.parametrize("content", ["{not json", '{"id": 1}', '[{"id": "x"}]', '[{"id": "x", "encrypted": {"iv": [999], "data": []}, "block": {}}]'])
def test_corrupt_store_reads_as_empty(tmp_path, capsys, content):
    path = tmp_path / "ledger.json"
    path.write_text(content)

    assert FileLedgerStore(path).read_all() == []
    assert "LEDGER READ FAILED" in capsys.readouterr().out


def test_corrupt_store_strict_read_raises(tmp_path):
    path = tmp_path / "ledger.json"
    path.write_text("{not json")

    with pytest.raises(StorageReadFailure):
        FileLedgerStore(path).read_all(strict=True)


def test_append_refuses_to_overwrite_corrupt_store(tmp_path, sealer, make_ballot):
    path = tmp_path / "ledger.json"
    path.write_text("{not json")
    entry = sealer.seal_sync(make_ballot())

    with pytest.raises(StorageReadFailure):
        FileLedgerStore(path).append(entry)
    assert path.read_text() == "{not json"


def test_entry_round_trips_through_dict(sealer, make_ballot):
    entry = sealer.seal_sync(make_ballot())
    restored = LedgerEntry.from_dict(entry.to_dict())
    assert restored.to_dict() == entry.to_dict()


def test_entry_ids_are_time_based_and_unique():
    a = new_entry_id(1_700_000_000_000)
    b = new_entry_id(1_700_000_000_000)
    assert a.startswith("vote-1700000000000-")
    assert a != b


def test_memory_store_can_be_seeded(sealer, make_ballot):
    entries = [sealer.seal_sync(make_ballot("X")), sealer.seal_sync(make_ballot("Y"))]
    seeded = MemoryLedgerStore(entries)
    assert [e.id for e in seeded.read_all()] == [e.id for e in entries]


@pytest.mark.parametrize("encrypted", [{"iv": 12, "data": []}, {"iv": [0] * 12, "data": 16}, {"iv": "abc", "data": []}])
def test_payload_fields_must_be_byte_arrays(tmp_path, sealer, make_ballot, encrypted):
    raw = sealer.seal_sync(make_ballot()).to_dict()
    raw["encrypted"] = encrypted
    path = tmp_path / "ledger.json"
    path.write_text(json.dumps([raw]))

    assert FileLedgerStore(path).read_all() == []
    with pytest.raises(StorageReadFailure):
        FileLedgerStore(path).read_all(strict=True)
