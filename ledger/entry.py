# ledger/entry.py
import uuid

from ledger.block import Block
from ledger.payload import EncryptedPayload
from ledger.utils import now_ms


def new_entry_id(timestamp=None) -> str:
    """Time based, with a random suffix for votes sealed in the same millisecond"""
    timestamp = now_ms() if timestamp is None else timestamp
    return f"vote-{timestamp}-{uuid.uuid4().hex[:8]}"


class LedgerEntry:
    def __init__(self, id: str, encrypted: EncryptedPayload, block: Block):
        self.id = id
        self.encrypted = encrypted
        self.block = block

    def to_dict(self):
        return {
            "id": self.id,
            "encrypted": self.encrypted.to_dict(),
            "block": self.block.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict):
        return cls(
            id=data["id"],
            encrypted=EncryptedPayload.from_dict(data["encrypted"]),
            block=Block.from_dict(data["block"]),
        )
