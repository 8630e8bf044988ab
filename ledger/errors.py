# ledger/errors.py


class LedgerError(Exception):
    """Base class for every ledger failure"""


class CryptoFailure(LedgerError):
    """Key derivation or cipher operation failed"""


class AuthenticationFailure(CryptoFailure):
    """Ciphertext, tag or nonce was altered"""


class StorageReadFailure(LedgerError):
    """The underlying store is unreadable or corrupt"""


class InputIncomplete(LedgerError, ValueError):
    def __init__(self, missing):
        self.missing = tuple(missing)
        super().__init__(f"Missing fields: {', '.join(self.missing)}")


class IdentityRejected(LedgerError, ValueError):
    pass


class ArtifactUnavailable(LedgerError):
    pass
