"""Sealing a ballot into the ledger."""
import asyncio
import hashlib
from concurrent.futures import ThreadPoolExecutor

import pytest

from ledger.block import GENESIS
from ledger.errors import CryptoFailure, InputIncomplete, StorageReadFailure
from ledger.sealer import Sealer
from ledger.storage import FileLedgerStore, MemoryLedgerStore
from ledger.validator import verify_chain

from conftest import FIXED_NONCE, T0


class ExplodingCrypto:
    def __init__(self):
        self.calls = 0

    def encrypt_payload(self, ballot):
        self.calls += 1
        raise CryptoFailure("cipher unavailable")


def test_first_entry_links_to_genesis(sealer, make_ballot):
    ballot = make_ballot("X")
    entry = sealer.seal_sync(ballot)

    expected = hashlib.sha256(f"GENESIS|{T0}|{FIXED_NONCE}|{ballot.digest()}".encode()).hexdigest()
    assert entry.block.prev_hash == GENESIS
    assert entry.block.data_hash == ballot.digest()
    assert entry.block.hash == expected
    assert entry.id.startswith(f"vote-{T0}-")


def test_example_scenario(sealer, store, make_ballot, crypto):
    e1 = sealer.seal_sync(make_ballot("X"))
    e2 = sealer.seal_sync(make_ballot("Y"))

    assert e1.block.prev_hash == "GENESIS"
    assert e2.block.prev_hash == e1.block.hash
    assert verify_chain([e1, e2]).ok
    assert crypto.decrypt_payload(e2.encrypted)["candidate"] == "Y"


def test_many_seals_verify(sealer, store, make_ballot):
    for i in range(10):
        sealer.seal_sync(make_ballot(f"C{i}"))

    entries = store.read_all()
    assert len(entries) == 10
    assert entries[0].block.prev_hash == GENESIS
    assert verify_chain(entries, recompute=True).ok


def test_cleartext_is_never_stored(sealer, store, make_ballot):
    sealer.seal_sync(make_ballot("Very Secret Candidate"))
    raw = repr(store.read_all()[0].to_dict())
    assert "Very Secret Candidate" not in raw


def test_incomplete_ballot_is_rejected_before_crypto(store, make_ballot):
    crypto = ExplodingCrypto()
    sealer = Sealer(store, crypto)

    with pytest.raises(InputIncomplete) as exc:
        sealer.seal_sync(make_ballot(fingerprint_hash=""))

    assert exc.value.missing == ("fingerprintHash",)
    assert crypto.calls == 0
    assert store.count() == 0


def test_crypto_failure_leaves_ledger_unchanged(store, make_ballot):
    sealer = Sealer(store, ExplodingCrypto())

    with pytest.raises(CryptoFailure):
        sealer.seal_sync(make_ballot())
    assert store.read_all() == []


def test_corrupt_file_store_aborts_seal(tmp_path, crypto, make_ballot):
    path = tmp_path / "ledger.json"
    path.write_text("garbage")

    with pytest.raises(StorageReadFailure):
        Sealer(FileLedgerStore(path), crypto).seal_sync(make_ballot())
    assert path.read_text() == "garbage"


def test_async_seal(sealer, store, make_ballot):
    entry = asyncio.run(sealer.seal(make_ballot()))
    assert store.last_entry().id == entry.id


def test_concurrent_seals_keep_a_single_chain(crypto, make_ballot):
    store = MemoryLedgerStore()
    sealer = Sealer(store, crypto)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda i: sealer.seal_sync(make_ballot(f"C{i}")), range(16)))

    entries = store.read_all()
    assert len(entries) == 16
    assert verify_chain(entries).ok
