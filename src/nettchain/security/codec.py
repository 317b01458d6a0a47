"""Pack and unpack the base64 blobs produced by :mod:`nettchain.security.crypto`.

Authenticated layout: ``IV(16) || salt(16) || tag(16) || ciphertext``
Legacy layout:        ``IV(16) || ciphertext``

Both are standard base64 (RFC 4648) with padding.
"""
import base64
import binascii
from typing import Union

from nettchain.core.exceptions import MalformedBlobError
from nettchain.core.models import AuthenticatedBlob, LegacyBlob

from .crypto import TAG_SIZE
from .kdf import IV_SIZE, SALT_SIZE

AUTHENTICATED_HEADER_SIZE = IV_SIZE + SALT_SIZE + TAG_SIZE
LEGACY_HEADER_SIZE = IV_SIZE


def _b64decode(blob: Union[str, bytes]) -> bytes:
    if isinstance(blob, str):
        try:
            blob = blob.strip().encode("ascii")
        except UnicodeEncodeError:
            raise MalformedBlobError("blob is not valid base64") from None
    else:
        blob = bytes(blob).strip()
    try:
        return base64.b64decode(blob, validate=True)
    except (binascii.Error, ValueError):
        raise MalformedBlobError("blob is not valid base64") from None


def pack_authenticated(iv: bytes, salt: bytes, tag: bytes, ciphertext: bytes) -> str:
    if len(iv) != IV_SIZE or len(salt) != SALT_SIZE or len(tag) != TAG_SIZE:
        raise ValueError("IV, salt and tag must each be 16 bytes")
    return base64.b64encode(iv + salt + tag + ciphertext).decode("ascii")


def unpack_authenticated(blob: Union[str, bytes]) -> AuthenticatedBlob:
    raw = _b64decode(blob)
    if len(raw) < AUTHENTICATED_HEADER_SIZE:
        raise MalformedBlobError(
            f"blob too short: {len(raw)} bytes, need at least {AUTHENTICATED_HEADER_SIZE}"
        )
    return AuthenticatedBlob(
        iv=raw[:IV_SIZE],
        salt=raw[IV_SIZE:IV_SIZE + SALT_SIZE],
        tag=raw[IV_SIZE + SALT_SIZE:AUTHENTICATED_HEADER_SIZE],
        ciphertext=raw[AUTHENTICATED_HEADER_SIZE:],
    )


def pack_legacy(iv: bytes, ciphertext: bytes) -> str:
    if len(iv) != IV_SIZE:
        raise ValueError("IV must be 16 bytes")
    return base64.b64encode(iv + ciphertext).decode("ascii")


def unpack_legacy(blob: Union[str, bytes]) -> LegacyBlob:
    raw = _b64decode(blob)
    if len(raw) < LEGACY_HEADER_SIZE:
        raise MalformedBlobError(
            f"blob too short: {len(raw)} bytes, need at least {LEGACY_HEADER_SIZE}"
        )
    return LegacyBlob(iv=raw[:IV_SIZE], ciphertext=raw[IV_SIZE:])
