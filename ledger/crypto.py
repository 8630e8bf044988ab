# ledger/crypto.py

import json
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from config.settings import KDF_HASH, KDF_ITERATIONS, KDF_SALT, KEY_PASSPHRASE
from ledger.errors import AuthenticationFailure, CryptoFailure
from ledger.payload import EncryptedPayload

NONCE_SIZE = 12
KEY_SIZE = 32

HASH_ALGORITHMS = {
    "SHA-256": hashes.SHA256,
    "SHA-384": hashes.SHA384,
    "SHA-512": hashes.SHA512,
}


def derive_key(secret, salt: bytes, iterations: int, algorithm: str = "SHA-256") -> bytes:
    """
    PBKDF2 derivation of the AES-256 key.
    Same inputs always yield the same key, so sealed records stay decryptable.
    """
    if isinstance(secret, str):
        secret = secret.encode("utf-8")

    try:
        kdf = PBKDF2HMAC(
            algorithm=HASH_ALGORITHMS[algorithm](),
            length=KEY_SIZE,
            salt=salt,
            iterations=iterations,
        )
        return kdf.derive(secret)
    except KeyError:
        raise CryptoFailure(f"Unsupported hash algorithm: {algorithm}")
    except (TypeError, ValueError) as e:
        raise CryptoFailure(f"Key derivation failed: {e}")


def encrypt(key: bytes, plaintext: bytes) -> tuple[bytes, bytes]:
    """Returns (nonce, ciphertext || tag) with a fresh 12 byte nonce"""
    nonce = os.urandom(NONCE_SIZE)

    try:
        ciphertext = AESGCM(key).encrypt(nonce, plaintext, None)
    except (TypeError, ValueError) as e:
        raise CryptoFailure(f"Encryption failed: {e}")

    return nonce, ciphertext


def decrypt(key: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
    if len(nonce) != NONCE_SIZE:
        raise CryptoFailure(f"Invalid nonce length: {len(nonce)}")

    try:
        return AESGCM(key).decrypt(nonce, ciphertext, None)
    except InvalidTag:
        raise AuthenticationFailure("Authentication failed: payload was altered")
    except (TypeError, ValueError) as e:
        raise CryptoFailure(f"Decryption failed: {e}")


class CryptoStore:
    def __init__(
        self,
        secret=KEY_PASSPHRASE,
        salt=KDF_SALT,
        iterations=KDF_ITERATIONS,
        algorithm=KDF_HASH
    ):
        self.key = derive_key(secret, salt, iterations, algorithm)

    def encrypt_payload(self, ballot) -> EncryptedPayload:
        nonce, ciphertext = encrypt(self.key, ballot.canonical_bytes())
        return EncryptedPayload(iv=nonce, data=ciphertext)

    def decrypt_payload(self, encrypted: EncryptedPayload) -> dict:
        raw = decrypt(self.key, encrypted.iv, encrypted.data)

        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CryptoFailure(f"Decrypted payload is not a ballot: {e}")
