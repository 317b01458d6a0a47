"""
Base data models shared by the encryption subsystem and the API client
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


# Ticker and long-name spellings accepted for the API chain codes
_BLOCKCHAIN_ALIASES = {
    "BITCOIN": "BTC",
    "LITECOIN": "LTC",
    "ETHEREUM": "ETH",
    "TRX": "TRON",
    "SOL": "SOLANA",
    "BNB": "BSC",
    "DOGECOIN": "DOGE",
    "POLYGON": "MATIC",
    "RIPPLE": "XRP",
    "AVALANCHE": "AVAX",
}


class Blockchain(Enum):
    # Chains the remote API can create wallets for and send on
    BTC = "BTC"
    LTC = "LTC"
    ETH = "ETH"
    TRON = "TRON"
    SOLANA = "SOLANA"
    BSC = "BSC"
    DOGE = "DOGE"
    MATIC = "MATIC"
    XRP = "XRP"
    AVAX = "AVAX"

    @classmethod
    def parse(cls, value: Union["Blockchain", str]) -> "Blockchain":
        """Accept an enum member, its string value or a known alias (case-insensitive)."""
        if isinstance(value, cls):
            return value
        name = str(value).upper()
        try:
            return cls(_BLOCKCHAIN_ALIASES.get(name, name))
        except ValueError:
            raise ValueError(f"Unsupported blockchain: {value!r}") from None


class Network(Enum):
    # Network a wallet lives on when it is imported
    MAINNET = "mainnet"
    TESTNET = "testnet"

    @classmethod
    def parse(cls, value: Union["Network", str]) -> "Network":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unsupported network: {value!r}") from None


@dataclass(frozen=True)
class AuthenticatedBlob:
    """Decoded fields of an AES-256-GCM blob: ``IV || salt || tag || ciphertext``."""

    iv: bytes
    salt: bytes
    tag: bytes
    ciphertext: bytes = field(repr=False)


@dataclass(frozen=True)
class LegacyBlob:
    """Decoded fields of an AES-256-CBC blob: ``IV || ciphertext``."""

    iv: bytes
    ciphertext: bytes = field(repr=False)
