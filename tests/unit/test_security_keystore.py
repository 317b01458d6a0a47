"""
Unit tests for the keystore module.
"""

import pytest
from unittest.mock import patch

from keyring.errors import KeyringError, PasswordDeleteError

from nettchain.core.exceptions import KeystoreError
from nettchain.security import keystore


# ==============================================================================
# Fixtures
# ==============================================================================

@pytest.fixture
def mock_keyring_lib():
    """Patches the keyring module within nettchain.security.keystore."""
    with patch("nettchain.security.keystore.keyring", autospec=True) as mock_lib:
        yield mock_lib


def _backend(name, priority=1):
    # keyring backends are identified by class name
    return type(name, (), {"priority": priority})()


@pytest.fixture
def secure_backend(mock_keyring_lib):
    mock_keyring_lib.get_keyring.return_value = _backend("SecretServiceKeyring", priority=5)
    return mock_keyring_lib


# ==============================================================================
# Tests: Save Secret
# ==============================================================================

def test_save_secret_stores_under_default_service(secure_backend):
    keystore.save_secret("alice", "api-key-123")
    secure_backend.set_password.assert_called_once_with("nettchain", "alice", "api-key-123")


def test_save_secret_custom_service(secure_backend):
    keystore.save_secret("alice", "pw", service="nettchain-test")
    secure_backend.set_password.assert_called_once_with("nettchain-test", "alice", "pw")


def test_save_secret_refuses_insecure_backend(mock_keyring_lib):
    mock_keyring_lib.get_keyring.return_value = _backend("PlaintextKeyring")
    with pytest.raises(KeystoreError, match="refusing to store secret"):
        keystore.save_secret("alice", "api-key-123")
    mock_keyring_lib.set_password.assert_not_called()


def test_save_secret_force_skips_assessment(mock_keyring_lib):
    mock_keyring_lib.get_keyring.return_value = _backend("PlaintextKeyring")
    keystore.save_secret("alice", "api-key-123", force=True)
    mock_keyring_lib.set_password.assert_called_once()


def test_save_secret_wraps_backend_error(secure_backend):
    secure_backend.set_password.side_effect = KeyringError("locked")
    with pytest.raises(KeystoreError, match="failed to store secret"):
        keystore.save_secret("alice", "api-key-123")


# ==============================================================================
# Tests: Load / Delete
# ==============================================================================

def test_load_secret_returns_value(mock_keyring_lib):
    mock_keyring_lib.get_password.return_value = "api-key-123"
    assert keystore.load_secret("alice") == "api-key-123"
    mock_keyring_lib.get_password.assert_called_once_with("nettchain", "alice")


def test_load_secret_returns_none_if_missing(mock_keyring_lib):
    mock_keyring_lib.get_password.return_value = None
    assert keystore.load_secret("alice") is None


def test_load_secret_wraps_backend_error(mock_keyring_lib):
    mock_keyring_lib.get_password.side_effect = KeyringError("dbus down")
    with pytest.raises(KeystoreError, match="failed to load secret"):
        keystore.load_secret("alice")


def test_delete_secret_calls_backend(mock_keyring_lib):
    keystore.delete_secret("alice")
    mock_keyring_lib.delete_password.assert_called_once_with("nettchain", "alice")


def test_delete_secret_missing_entry_is_ignored(mock_keyring_lib):
    mock_keyring_lib.delete_password.side_effect = PasswordDeleteError("not found")
    keystore.delete_secret("alice")


def test_delete_secret_other_errors_propagate(mock_keyring_lib):
    mock_keyring_lib.delete_password.side_effect = KeyringError("locked")
    with pytest.raises(KeystoreError):
        keystore.delete_secret("alice")


# ==============================================================================
# Tests: Backend Assessment
# ==============================================================================

def test_assess_backend_handles_exception(mock_keyring_lib):
    mock_keyring_lib.get_keyring.side_effect = KeyringError("DBus error")
    is_secure, msg = keystore.assess_keyring_backend()
    assert is_secure is False
    assert "failed to get keyring backend" in msg


@pytest.mark.parametrize("name", ["PlaintextKeyring", "NullKeyring", "EncryptedFileKeyring"])
def test_assess_backend_insecure_names(mock_keyring_lib, name):
    mock_keyring_lib.get_keyring.return_value = _backend(name)
    is_secure, msg = keystore.assess_keyring_backend()
    assert is_secure is False
    assert "insecure backend detected" in msg


def test_assess_backend_low_priority(mock_keyring_lib):
    mock_keyring_lib.get_keyring.return_value = _backend("SomeGenericBackend", priority=0)
    is_secure, msg = keystore.assess_keyring_backend()
    assert is_secure is False
    assert "no suitable secure keyring backend" in msg


@pytest.mark.parametrize("name", ["KeychainKeyring", "WinVaultKeyring", "SecretServiceKeyring", "KWalletKeyring"])
def test_assess_backend_secure_names(mock_keyring_lib, name):
    mock_keyring_lib.get_keyring.return_value = _backend(name)
    is_secure, msg = keystore.assess_keyring_backend()
    assert is_secure is True
    assert "looks acceptable" in msg


def test_assess_backend_unknown_but_high_priority(mock_keyring_lib):
    mock_keyring_lib.get_keyring.return_value = _backend("HardwareTokenKeyring", priority=5)
    is_secure, msg = keystore.assess_keyring_backend()
    assert is_secure is True
    assert "treat with caution" in msg
