# ledger/block

import random

from ledger.utils import now_ms, sha256_hex

GENESIS = "GENESIS"
HASH_DELIMITER = "|"
MAX_NONCE = 1_000_000_000


def random_nonce() -> int:
    # diversifies the block hash, not a secret
    return random.randrange(MAX_NONCE)


class Block:
    def __init__(
        self,
        prev_hash: str,
        timestamp: int,
        nonce: int,
        data_hash: str,
    ):
        self.prev_hash = prev_hash
        self.timestamp = timestamp
        self.nonce = nonce
        self.data_hash = data_hash

        # hash
        self.hash = self.compute_hash()

    # --------------------------------------------------

    def compute_hash(self) -> str:
        """
        sha256 of "prevHash|timestamp|nonce|dataHash".
        Field order and delimiter are part of the wire format.
        """
        payload = HASH_DELIMITER.join((
            str(self.prev_hash),
            str(self.timestamp),
            str(self.nonce),
            str(self.data_hash),
        ))
        return sha256_hex(payload.encode("utf-8"))

    def is_genesis(self) -> bool:
        return self.prev_hash == GENESIS

    # --------------------------------------------------

    def to_dict(self):
        return {
            "prevHash": self.prev_hash,
            "timestamp": self.timestamp,
            "nonce": self.nonce,
            "dataHash": self.data_hash,
            "hash": self.hash,
        }

    @classmethod
    def from_dict(cls, data: dict):
        obj = cls.__new__(cls)  # bypass __init__

        obj.prev_hash = data["prevHash"]
        obj.timestamp = data["timestamp"]
        obj.nonce = data["nonce"]
        obj.data_hash = data["dataHash"]

        # keep the recorded hash as is, verification decides
        obj.hash = data["hash"]

        return obj


def create_block(prev_hash: str, data_hash: str, clock=None, nonce_source=None) -> Block:
    """
    Links a new block to prev_hash.
    clock and nonce_source are injectable so block hashes can be fixed in tests.
    """
    clock = clock or now_ms
    nonce_source = nonce_source or random_nonce

    return Block(
        prev_hash=prev_hash or GENESIS,
        timestamp=int(clock()),
        nonce=int(nonce_source()),
        data_hash=data_hash,
    )
