import itertools

import pytest

from ledger.crypto import CryptoStore
from ledger.payload import Ballot
from ledger.sealer import Sealer
from ledger.storage import MemoryLedgerStore

T0 = 1_700_000_000_000
FIXED_NONCE = 42


@pytest.fixture(scope="session")
def crypto():
    """Derived once: PBKDF2 at 100k iterations is the slow part of the suite."""
    return CryptoStore()


@pytest.fixture
def store():
    return MemoryLedgerStore()


@pytest.fixture
def clock():
    ticks = itertools.count(T0)
    return lambda: next(ticks)


@pytest.fixture
def sealer(store, crypto, clock):
    return Sealer(store, crypto, clock=clock, nonce_source=lambda: FIXED_NONCE)


@pytest.fixture
def make_ballot():
    def _make(candidate="X", **overrides):
        fields = {
            "aadhaar": "123412341234",
            "candidate": candidate,
            "fingerprint_hash": "ab" * 32,
            "face_data_url": "data:image/png;base64,iVBORw0KGgo=",
            "ts": T0,
        }
        fields.update(overrides)
        return Ballot(**fields)
    return _make
