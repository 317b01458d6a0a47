"""
Passphrase-based encryption of secrets (e.g. exported private keys) before
they are handed to the NettChain API.

Two schemes live side by side and are selected by the method the caller uses:

- :meth:`Encryption.encrypt` / :meth:`Encryption.decrypt`: AES-256-GCM with a
  per-call salt and IV. Use this for anything new.
- :meth:`Encryption.encrypt_legacy` / :meth:`Encryption.decrypt_legacy`:
  AES-256-CBC keyed with SHA-256(passphrase). Kept so blobs written by older
  clients stay readable. Blobs are never routed to a scheme by their shape.

Every failure leaves this module as a plain :class:`EncryptionError` with the
same message whatever the stage; the stage error is chained as ``__cause__``.
"""

from __future__ import annotations

import logging
from typing import Union

from nettchain.core.exceptions import CryptoError, EncryptionError

from .codec import pack_authenticated, pack_legacy, unpack_authenticated, unpack_legacy
from .crypto import open_cbc, open_gcm, seal_cbc, seal_gcm
from .kdf import (
    KEY_SIZE,
    MIN_ITERATIONS,
    derive_key,
    derive_legacy_key,
    generate_iv,
    generate_salt,
    scrub,
)

logger = logging.getLogger(__name__)

Secret = Union[str, bytes]


def _to_bytes(value: Secret) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    # bytes(int) would silently produce a zero-filled buffer
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"expected str or bytes, got {type(value).__name__}")
    return bytes(value)


def _decode_text(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CryptoError("plaintext is not valid UTF-8") from exc


class Encryption:
    """
    Facade over key derivation, the AES ciphers and the blob codec.

    Instances only hold the PBKDF2 iteration count and are safe to share
    between threads. Passphrases and derived keys are never stored on the
    instance; the derived key buffer is zeroed before each call returns
    (best effort, the interpreter may still hold copies).
    """

    def __init__(self, iterations: int = MIN_ITERATIONS):
        if iterations < MIN_ITERATIONS:
            raise ValueError(f"iterations must be at least {MIN_ITERATIONS}")
        self.iterations = iterations

    # ------------------------------------------------------------------
    # Authenticated scheme (AES-256-GCM)
    # ------------------------------------------------------------------

    def encrypt_bytes(self, plaintext: bytes, passphrase: Secret) -> str:
        """Encrypt raw bytes and return the base64 ``IV||salt||tag||ct`` blob."""
        self._check_passphrase(passphrase, "encryption")
        key = bytearray()
        try:
            data = _to_bytes(plaintext)
            iv = generate_iv()
            salt = generate_salt()
            key = bytearray(derive_key(passphrase, salt, KEY_SIZE, self.iterations))
            ciphertext, tag = seal_gcm(data, bytes(key), iv)
            blob = pack_authenticated(iv, salt, tag, ciphertext)
        except (CryptoError, TypeError, ValueError) as exc:
            raise EncryptionError("encryption failed") from exc
        finally:
            scrub(key)
        logger.debug("sealed %d bytes with AES-256-GCM", len(data))
        return blob

    def decrypt_bytes(self, blob: Secret, passphrase: Secret) -> bytes:
        """Decrypt a blob produced by :meth:`encrypt_bytes`."""
        self._check_passphrase(passphrase, "decryption")
        key = bytearray()
        try:
            fields = unpack_authenticated(blob)
            key = bytearray(derive_key(passphrase, fields.salt, KEY_SIZE, self.iterations))
            plaintext = open_gcm(fields.ciphertext, bytes(key), fields.iv, fields.tag)
        except (CryptoError, TypeError, ValueError) as exc:
            logger.debug("AES-256-GCM decryption rejected")
            raise EncryptionError("decryption failed") from exc
        finally:
            scrub(key)
        return plaintext

    def encrypt(self, plaintext: Secret, passphrase: Secret) -> str:
        """Encrypt text (UTF-8) or bytes with the authenticated scheme."""
        return self.encrypt_bytes(plaintext, passphrase)

    def decrypt(self, blob: Secret, passphrase: Secret) -> str:
        """Decrypt an authenticated blob back to text."""
        data = self.decrypt_bytes(blob, passphrase)
        try:
            return _decode_text(data)
        except CryptoError as exc:
            raise EncryptionError("decryption failed") from exc

    # ------------------------------------------------------------------
    # Legacy scheme (AES-256-CBC, unauthenticated)
    # ------------------------------------------------------------------

    def encrypt_legacy(self, plaintext: Secret, passphrase: Secret) -> str:
        """
        Encrypt with the old AES-256-CBC scheme.

        Only for peers that cannot read the authenticated format yet: the
        result carries no integrity protection and its key is an unsalted
        SHA-256 of the passphrase.
        """
        self._check_passphrase(passphrase, "encryption")
        logger.warning("writing a blob with the unauthenticated legacy scheme")
        key = bytearray()
        try:
            iv = generate_iv()
            key = bytearray(derive_legacy_key(passphrase))
            ciphertext = seal_cbc(_to_bytes(plaintext), bytes(key), iv)
            return pack_legacy(iv, ciphertext)
        except (CryptoError, TypeError, ValueError) as exc:
            raise EncryptionError("encryption failed") from exc
        finally:
            scrub(key)

    def decrypt_legacy(self, blob: Secret, passphrase: Secret) -> str:
        """
        Decrypt a blob written by the AES-256-CBC scheme.

        Success does not prove the blob was not tampered with.
        """
        self._check_passphrase(passphrase, "decryption")
        key = bytearray()
        try:
            fields = unpack_legacy(blob)
            key = bytearray(derive_legacy_key(passphrase))
            return _decode_text(open_cbc(fields.ciphertext, bytes(key), fields.iv))
        except (CryptoError, TypeError, ValueError) as exc:
            logger.debug("AES-256-CBC decryption rejected")
            raise EncryptionError("decryption failed") from exc
        finally:
            scrub(key)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_passphrase(passphrase: Secret, operation: str) -> None:
        if not isinstance(passphrase, (str, bytes, bytearray, memoryview)):
            raise EncryptionError(f"{operation} failed") from TypeError("passphrase must be str or bytes")
        if len(passphrase) == 0:
            raise EncryptionError(f"{operation} failed") from ValueError("passphrase must not be empty")
