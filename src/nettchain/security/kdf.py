"""Key derivation for the NettChain encryption helpers."""
import hashlib
import os
from typing import Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from nettchain.core.exceptions import DerivationError

KEY_SIZE = 32  # AES-256
SALT_SIZE = 16
IV_SIZE = 16
MIN_ITERATIONS = 100_000


def _to_bytes(passphrase: Union[str, bytes]) -> bytes:
    if isinstance(passphrase, str):
        return passphrase.encode("utf-8")
    return bytes(passphrase)


def generate_salt(length: int = SALT_SIZE) -> bytes:
    """Return a cryptographically secure random salt."""
    return os.urandom(length)


def generate_iv(length: int = IV_SIZE) -> bytes:
    """Return a cryptographically secure random IV."""
    return os.urandom(length)


def derive_key(
    passphrase: Union[str, bytes],
    salt: bytes,
    length: int = KEY_SIZE,
    iterations: int = MIN_ITERATIONS,
) -> bytes:
    """
    Turn a passphrase into a ``length``-byte key.

    A passphrase that is already at least ``length`` bytes long is used
    directly (its first ``length`` bytes). Shorter ones are stretched with
    PBKDF2-HMAC-SHA256 over ``salt``.
    """
    if iterations < MIN_ITERATIONS:
        raise DerivationError(f"PBKDF2 needs at least {MIN_ITERATIONS} iterations")

    secret = _to_bytes(passphrase)
    if len(secret) >= length:
        return secret[:length]

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=length,
        salt=salt,
        iterations=iterations,
    )
    try:
        return kdf.derive(secret)
    except Exception as exc:
        raise DerivationError("key derivation failed") from exc


def derive_legacy_key(passphrase: Union[str, bytes]) -> bytes:
    """
    SHA-256 of the passphrase, always 32 bytes.

    No salt and no stretching: this only exists so blobs written by the
    AES-256-CBC scheme keep decrypting.
    """
    return hashlib.sha256(_to_bytes(passphrase)).digest()


def scrub(buf: bytearray) -> None:
    """Overwrite a mutable key buffer with zeros (best effort)."""
    for i in range(len(buf)):
        buf[i] = 0

