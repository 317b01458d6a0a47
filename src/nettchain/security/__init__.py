"""Security helpers: passphrase KDF and blob encryption for NettChain secrets.

This package provides:
- PBKDF2-SHA256 key derivation (with a direct-key shortcut for long secrets)
- AES-256-GCM authenticated blobs for new data
- AES-256-CBC legacy blobs kept readable for older clients
- optional OS keystore storage of API credentials

Application code should go through :class:`Encryption`; the lower modules are
exposed for tests and for callers that need the raw fields.
"""

from .kdf import generate_salt, generate_iv, derive_key, derive_legacy_key
from .crypto import seal_gcm, open_gcm, seal_cbc, open_cbc
from .codec import pack_authenticated, unpack_authenticated, pack_legacy, unpack_legacy
from .encryption import Encryption
from .keystore import save_secret, load_secret, delete_secret, assess_keyring_backend

__all__ = [
    "generate_salt",
    "generate_iv",
    "derive_key",
    "derive_legacy_key",
    "seal_gcm",
    "open_gcm",
    "seal_cbc",
    "open_cbc",
    "pack_authenticated",
    "unpack_authenticated",
    "pack_legacy",
    "unpack_legacy",
    "Encryption",
    "save_secret",
    "load_secret",
    "delete_secret",
    "assess_keyring_backend",
]
