# ledger/payload.py

from dataclasses import dataclass

from ledger.utils import canonical_ballot, sha256_hex


@dataclass(frozen=True)
class Ballot:
    """
    Finished ballot handed over by the identity flow.
    Never persisted in cleartext: the sealer digests and encrypts it.
    """
    aadhaar: str
    candidate: str
    fingerprint_hash: str
    face_data_url: str
    ts: int

    def missing_fields(self) -> list:
        return [key for key, value in self.to_dict().items() if value is None or value == ""]

    def canonical_bytes(self) -> bytes:
        return canonical_ballot(self.to_dict())

    def digest(self) -> str:
        return sha256_hex(self.canonical_bytes())

    def to_dict(self):
        return {
            "aadhaar": self.aadhaar,
            "candidate": self.candidate,
            "fingerprintHash": self.fingerprint_hash,
            "faceDataUrl": self.face_data_url,
            "ts": self.ts,
        }

    @classmethod
    def from_dict(cls, data: dict):
        return cls(
            aadhaar=data.get("aadhaar"),
            candidate=data.get("candidate"),
            fingerprint_hash=data.get("fingerprintHash"),
            face_data_url=data.get("faceDataUrl"),
            ts=data.get("ts"),
        )


class EncryptedPayload:
    def __init__(self, iv: bytes, data: bytes):
        self.iv = bytes(iv)
        self.data = bytes(data)

    def to_dict(self):
        # plain byte arrays, same as the browser client
        return {
            "iv": list(self.iv),
            "data": list(self.data),
        }

    @classmethod
    def from_dict(cls, data: dict):
        iv, ciphertext = data["iv"], data["data"]

        # bytes(12) would silently become 12 zero bytes
        if not isinstance(iv, list) or not isinstance(ciphertext, list):
            raise ValueError("Encrypted payload fields must be byte arrays")

        return cls(iv=bytes(iv), data=bytes(ciphertext))
