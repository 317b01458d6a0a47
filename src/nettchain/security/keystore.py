"""OS keystore integration using keyring for optional API credential storage.

A tiny wrapper around `keyring` to store and retrieve the NettChain API key
or a default wallet password under a service/account pair. Use this only for
opt-in convenience storage; do not assume keyring provides hardware-backed
security on all platforms.
"""
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from nettchain.core.exceptions import KeystoreError

DEFAULT_SERVICE = "nettchain"


def assess_keyring_backend() -> tuple[bool, str]:
    """Return (is_secure, message) describing the current keyring backend.

    Heuristics are used because the `keyring` package exposes different backends
    across platforms.
    """
    try:
        backend = keyring.get_keyring()
    except KeyringError as e:
        return False, f"failed to get keyring backend: {e}"

    name = backend.__class__.__name__
    priority = getattr(backend, "priority", None)

    insecure_indicators = ("Plaintext", "Uncrypted", "Null", "File")
    if any(tok in name for tok in insecure_indicators):
        return False, f"insecure backend detected: {name}"

    if priority is not None and priority <= 0:
        return False, f"no suitable secure keyring backend available (priority={priority}, backend={name})"

    # treat known platform backends as acceptable
    if "Win" in name or "Keychain" in name or "SecretService" in name or "KWallet" in name:
        return True, f"backend looks acceptable: {name} (priority={priority})"

    return True, f"unknown backend '{name}', treat with caution (priority={priority})"


def save_secret(account: str, secret: str, service: str = DEFAULT_SERVICE, force: bool = False) -> None:
    """Persist ``secret`` in the OS keystore under (service, account).

    Refuses backends flagged by :func:`assess_keyring_backend` unless ``force``.
    """
    if not force:
        secure, msg = assess_keyring_backend()
        if not secure:
            raise KeystoreError(
                f"refusing to store secret in OS keystore: {msg}; "
                "pass force=True to override if you understand the risk"
            )
    try:
        keyring.set_password(service, account, secret)
    except KeyringError as e:
        raise KeystoreError(f"failed to store secret: {e}") from e


def load_secret(account: str, service: str = DEFAULT_SERVICE) -> Optional[str]:
    """Load a stored secret from the OS keystore; returns None if absent."""
    try:
        return keyring.get_password(service, account)
    except KeyringError as e:
        raise KeystoreError(f"failed to load secret: {e}") from e


def delete_secret(account: str, service: str = DEFAULT_SERVICE) -> None:
    """Remove the secret from the OS keystore; a missing entry is not an error."""
    try:
        keyring.delete_password(service, account)
    except PasswordDeleteError:
        pass
    except KeyringError as e:
        raise KeystoreError(f"failed to delete secret: {e}") from e
