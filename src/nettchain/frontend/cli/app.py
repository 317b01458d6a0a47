"""Command line front end for the NettChain SDK.

Start here with `python -m nettchain.frontend.cli.app` or `python main.py`.

Examples:
  nettchain encrypt --text "my private key" --copy
  nettchain decrypt <blob>
  nettchain decrypt --legacy <blob>
  nettchain price BTC
  nettchain validate ETH 0xabc...

Passphrases come from the environment variable named by --passphrase-env
(NETTCHAIN_PASSWORD by default) or an interactive prompt; they are never
accepted as command line arguments.
"""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import os
import sys
from typing import Optional, Sequence

from nettchain.core.config import ENV_PASSWORD, ClientConfig
from nettchain.core.exceptions import NettChainError
from nettchain.frontend.cli.clipboard import copy_to_clipboard
from nettchain.frontend.cli.logging_config import configure_logging
from nettchain.network.client import NettChainClient
from nettchain.security.encryption import Encryption

logger = logging.getLogger(__name__)


def _read_passphrase(env_var: str, confirm: bool = False) -> str:
    passphrase = os.environ.get(env_var)
    if passphrase:
        return passphrase
    passphrase = getpass.getpass("Passphrase: ")
    if confirm and getpass.getpass("Repeat passphrase: ") != passphrase:
        raise NettChainError("passphrases do not match")
    return passphrase


def _print_json(doc) -> None:
    print(json.dumps(doc, indent=2, sort_keys=True))


# === Commands ===


def cmd_encrypt(args: argparse.Namespace) -> int:
    plaintext = args.text if args.text is not None else sys.stdin.read().rstrip("\n")
    passphrase = _read_passphrase(args.passphrase_env, confirm=True)
    enc = Encryption()
    blob = enc.encrypt_legacy(plaintext, passphrase) if args.legacy else enc.encrypt(plaintext, passphrase)
    if args.copy:
        copy_to_clipboard(blob)
        print("Encrypted blob copied to clipboard.", file=sys.stderr)
    else:
        print(blob)
    return 0


def cmd_decrypt(args: argparse.Namespace) -> int:
    passphrase = _read_passphrase(args.passphrase_env)
    enc = Encryption()
    plaintext = enc.decrypt_legacy(args.blob, passphrase) if args.legacy else enc.decrypt(args.blob, passphrase)
    print(plaintext)
    return 0


def cmd_price(args: argparse.Namespace) -> int:
    with NettChainClient(ClientConfig.from_env()) as client:
        _print_json(client.get_coin_price(args.symbol))
    return 0


def cmd_balance(args: argparse.Namespace) -> int:
    with NettChainClient(ClientConfig.from_env()) as client:
        _print_json(client.get_balance(args.address))
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    with NettChainClient(ClientConfig.from_env()) as client:
        _print_json(client.validate_address(args.address, args.blockchain))
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    with NettChainClient(ClientConfig.from_env()) as client:
        _print_json(client.get_network_status())
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nettchain",
        description="Encrypt wallet secrets locally and query the NettChain API.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("encrypt", help="encrypt text (from --text or stdin)")
    p.add_argument("--text", default=None, help="plaintext; read from stdin when omitted")
    p.add_argument("--legacy", action="store_true", help="write the old unauthenticated AES-256-CBC format")
    p.add_argument("--copy", action="store_true", help="copy the blob to the clipboard instead of printing it")
    p.add_argument("--passphrase-env", default=ENV_PASSWORD, help=f"variable holding the passphrase (default: {ENV_PASSWORD})")
    p.set_defaults(func=cmd_encrypt)

    p = sub.add_parser("decrypt", help="decrypt a blob")
    p.add_argument("blob")
    p.add_argument("--legacy", action="store_true", help="read the old AES-256-CBC format")
    p.add_argument("--passphrase-env", default=ENV_PASSWORD, help=f"variable holding the passphrase (default: {ENV_PASSWORD})")
    p.set_defaults(func=cmd_decrypt)

    p = sub.add_parser("price", help="current price of a coin")
    p.add_argument("symbol")
    p.set_defaults(func=cmd_price)

    p = sub.add_parser("balance", help="balance of an address")
    p.add_argument("address")
    p.set_defaults(func=cmd_balance)

    p = sub.add_parser("validate", help="validate an address on a blockchain")
    p.add_argument("blockchain")
    p.add_argument("address")
    p.set_defaults(func=cmd_validate)

    p = sub.add_parser("status", help="network status")
    p.set_defaults(func=cmd_status)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        return args.func(args)
    except (NettChainError, ValueError) as exc:
        logger.debug("command %s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
