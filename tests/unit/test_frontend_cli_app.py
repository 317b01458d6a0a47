"""Unit tests for the nettchain command line front end."""

import json

import pytest
from unittest.mock import MagicMock, patch

from nettchain.frontend.cli import app
from nettchain.security.encryption import Encryption

LEGACY_BLOB = "AAECAwQFBgcICQoLDA0ODxiHgK+pUORu/uoMJSO1CEQ="


# --- Fixtures ---

@pytest.fixture
def passphrase_env(monkeypatch):
    monkeypatch.setenv("NETTCHAIN_PASSWORD", "correct horse battery staple")
    return "correct horse battery staple"


@pytest.fixture
def mock_client():
    """Patch NettChainClient in the CLI module and return the instance mock."""
    with patch("nettchain.frontend.cli.app.NettChainClient") as cls, patch(
        "nettchain.frontend.cli.app.ClientConfig"
    ):
        instance = MagicMock()
        cls.return_value.__enter__.return_value = instance
        yield instance


# --- Encryption commands ---

def test_encrypt_prints_blob(passphrase_env, capsys):
    assert app.main(["encrypt", "--text", "hello world"]) == 0
    blob = capsys.readouterr().out.strip()
    assert Encryption().decrypt(blob, passphrase_env) == "hello world"


def test_encrypt_reads_stdin(passphrase_env, capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", MagicMock(read=MagicMock(return_value="from stdin\n")))
    assert app.main(["encrypt"]) == 0
    blob = capsys.readouterr().out.strip()
    assert Encryption().decrypt(blob, passphrase_env) == "from stdin"


def test_encrypt_legacy_flag(monkeypatch, capsys):
    monkeypatch.setenv("NETTCHAIN_PASSWORD", "pw")
    assert app.main(["encrypt", "--legacy", "--text", "legacy-secret"]) == 0
    blob = capsys.readouterr().out.strip()
    assert Encryption().decrypt_legacy(blob, "pw") == "legacy-secret"


def test_encrypt_copy_uses_clipboard(passphrase_env, capsys):
    with patch("nettchain.frontend.cli.app.copy_to_clipboard") as mock_copy:
        assert app.main(["encrypt", "--text", "x", "--copy"]) == 0
    mock_copy.assert_called_once()
    assert capsys.readouterr().out == ""


def test_passphrase_prompt_when_env_missing(monkeypatch, capsys):
    monkeypatch.delenv("NETTCHAIN_PASSWORD", raising=False)
    with patch("nettchain.frontend.cli.app.getpass.getpass", return_value="pw") as mock_prompt:
        assert app.main(["decrypt", "--legacy", LEGACY_BLOB]) == 0
    mock_prompt.assert_called_once()
    assert capsys.readouterr().out.strip() == "legacy-secret"


def test_encrypt_prompt_mismatch_fails(monkeypatch, capsys):
    monkeypatch.delenv("NETTCHAIN_PASSWORD", raising=False)
    with patch("nettchain.frontend.cli.app.getpass.getpass", side_effect=["one", "two"]):
        assert app.main(["encrypt", "--text", "x"]) == 1
    assert "do not match" in capsys.readouterr().err


def test_custom_passphrase_env(monkeypatch, capsys):
    monkeypatch.setenv("MY_SECRET", "pw")
    assert app.main(["decrypt", "--legacy", "--passphrase-env", "MY_SECRET", LEGACY_BLOB]) == 0
    assert capsys.readouterr().out.strip() == "legacy-secret"


def test_decrypt_wrong_passphrase_exit_code(passphrase_env, capsys):
    blob = Encryption().encrypt("hello world", "another passphrase")
    assert app.main(["decrypt", blob]) == 1
    err = capsys.readouterr().err
    assert "decryption failed" in err
    assert passphrase_env not in err


# --- API commands ---

def test_price_prints_json(mock_client, capsys):
    mock_client.get_coin_price.return_value = {"symbol": "BTC", "price": 1}
    assert app.main(["price", "BTC"]) == 0
    mock_client.get_coin_price.assert_called_once_with("BTC")
    assert json.loads(capsys.readouterr().out) == {"price": 1, "symbol": "BTC"}


def test_validate_argument_order(mock_client):
    mock_client.validate_address.return_value = {"valid": True}
    assert app.main(["validate", "ETH", "0xabc"]) == 0
    mock_client.validate_address.assert_called_once_with("0xabc", "ETH")


def test_balance_and_status(mock_client):
    mock_client.get_balance.return_value = {}
    mock_client.get_network_status.return_value = {}
    assert app.main(["balance", "0xabc"]) == 0
    assert app.main(["status"]) == 0
    mock_client.get_balance.assert_called_once_with("0xabc")


def test_missing_api_key_reports_error(monkeypatch, capsys):
    monkeypatch.delenv("NETTCHAIN_API_KEY", raising=False)
    assert app.main(["status"]) == 1
    assert "NETTCHAIN_API_KEY" in capsys.readouterr().err


def test_no_command_is_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        app.main([])
    assert excinfo.value.code == 2
