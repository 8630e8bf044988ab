# ledger/validator.py
from typing import NamedTuple, Optional

from ledger.block import GENESIS
from ledger.errors import CryptoFailure
from ledger.utils import canonical_ballot, sha256_hex


class VerificationResult(NamedTuple):
    ok: bool
    failure_index: Optional[int] = None
    reason: Optional[str] = None

    @property
    def message(self) -> str:
        if self.ok:
            return "Ledger OK"
        return f"Mismatch at index {self.failure_index}"


def verify_chain(entries, recompute=False, crypto=None) -> VerificationResult:
    """
    Walks the ledger in stored order and reports the first broken entry.

    The default check is linkage only: every prevHash must equal the recorded
    hash of its predecessor, and the first must be GENESIS.

    recompute=True also checks that each block hash is the digest of its own
    fields. Passing a CryptoStore additionally decrypts every payload and
    compares its digest with dataHash. Both are off by default: an entry
    whose payload or hash field was altered still passes if its links hold.
    """
    for i, entry in enumerate(entries):
        block = entry.block

        # --------------------------------------------------
        # 1. Linkage
        # --------------------------------------------------
        expected_prev = GENESIS if i == 0 else entries[i - 1].block.hash

        if block.prev_hash != expected_prev:
            return VerificationResult(False, i, "Invalid prev_hash")

        # --------------------------------------------------
        # 2. Self consistency (opt-in)
        # --------------------------------------------------
        if recompute and block.compute_hash() != block.hash:
            return VerificationResult(False, i, "Invalid hash")

        # --------------------------------------------------
        # 3. Payload binding (opt-in)
        # --------------------------------------------------
        if crypto is not None:
            try:
                plaintext = crypto.decrypt_payload(entry.encrypted)
            except CryptoFailure:
                return VerificationResult(False, i, "Payload authentication failed")

            if not isinstance(plaintext, dict):
                return VerificationResult(False, i, "Payload is not a ballot")

            if sha256_hex(canonical_ballot(plaintext)) != block.data_hash:
                return VerificationResult(False, i, "Invalid data_hash")

    return VerificationResult(True)
