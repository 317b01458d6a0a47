"""AES-256 primitives behind the two NettChain blob schemes.

Authenticated scheme (preferred):
- AES-256-GCM, 16-byte IV, 16-byte tag, no associated data
- ciphertext is the same length as the plaintext; the tag is returned apart

Legacy scheme:
- AES-256-CBC with PKCS#7 padding, 16-byte IV
- no integrity check: a tampered blob decrypts to garbage or fails on padding

The two are not interchangeable. Callers choose one explicitly.
"""
from typing import Tuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from nettchain.core.exceptions import AuthenticationFailureError, MalformedBlobError

from .kdf import IV_SIZE, KEY_SIZE

TAG_SIZE = 16
BLOCK_SIZE_BITS = 128


def _check_key_iv(key: bytes, iv: bytes) -> None:
    if len(key) != KEY_SIZE:
        raise ValueError(f"key must be {KEY_SIZE} bytes, got {len(key)}")
    if len(iv) != IV_SIZE:
        raise ValueError(f"IV must be {IV_SIZE} bytes, got {len(iv)}")


def seal_gcm(plaintext: bytes, key: bytes, iv: bytes) -> Tuple[bytes, bytes]:
    """Encrypt with AES-256-GCM and return ``(ciphertext, tag)``."""
    _check_key_iv(key, iv)
    ct_full = AESGCM(key).encrypt(iv, plaintext, None)
    return ct_full[:-TAG_SIZE], ct_full[-TAG_SIZE:]


def open_gcm(ciphertext: bytes, key: bytes, iv: bytes, tag: bytes) -> bytes:
    """
    Decrypt AES-256-GCM output.

    Raises :class:`AuthenticationFailureError` when the tag does not verify;
    nothing is returned in that case.
    """
    _check_key_iv(key, iv)
    if len(tag) != TAG_SIZE:
        raise AuthenticationFailureError("authentication tag has the wrong length")
    try:
        return AESGCM(key).decrypt(iv, ciphertext + tag, None)
    except InvalidTag:
        raise AuthenticationFailureError("authentication tag mismatch") from None


def seal_cbc(plaintext: bytes, key: bytes, iv: bytes) -> bytes:
    """Encrypt with AES-256-CBC after PKCS#7 padding."""
    _check_key_iv(key, iv)
    padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
    padded = padder.update(plaintext) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def open_cbc(ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
    """
    Decrypt AES-256-CBC output and strip the padding.

    A successful return says nothing about authenticity.
    """
    _check_key_iv(key, iv)
    if not ciphertext or len(ciphertext) % (BLOCK_SIZE_BITS // 8):
        raise MalformedBlobError("ciphertext is not a whole number of AES blocks")

    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()
    unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
    try:
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError:
        raise MalformedBlobError("invalid padding") from None
