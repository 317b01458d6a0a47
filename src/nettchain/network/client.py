"""
HTTP client for the NettChain multi-blockchain API.

Every call is a single JSON request with the ``x-api-key`` header:

  POST /wallet/create            -> create a custodial wallet
  POST /<chain>/send             -> send coins (ETH, ERC20, TRX, TRC20, SOL, DOGE, XRP, AVAX)
  GET  /wallet/get, /wallet/find/<address>, /wallet/findBy/<name>
  GET  /price/<symbol>, /balance/<address>, /validate/<chain>/<address>
  POST /wallet/import, /wallet/export
  POST/PUT/DELETE /webhook/...

Private keys are encrypted locally (see :mod:`nettchain.security.encryption`)
before they are put in a request body. There is no retry: a failed call raises
and the caller decides what to do.

Usage:
  with NettChainClient(ClientConfig.from_env()) as client:
      client.get_coin_price("BTC")
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional, Union
from urllib.parse import quote

import requests

from nettchain.core.config import ClientConfig
from nettchain.core.exceptions import (
    HttpStatusError,
    InvalidResponseError,
    TransportError,
)
from nettchain.core.models import Blockchain, Network
from nettchain.security.encryption import Encryption

logger = logging.getLogger(__name__)

ChainLike = Union[Blockchain, str]


def _segment(value: Any) -> str:
    # path parameters come from callers; never let them add path components
    return quote(str(value), safe="")


class NettChainClient:
    """
    Thin wrapper around :class:`requests.Session` for the NettChain API.

    Args:
        config: connection settings and the default wallet password.
        session: optional pre-built session (tests pass a mock here).
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.encryption = Encryption(iterations=config.kdf_iterations)
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "x-api-key": config.api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    def __enter__(self) -> "NettChainClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    def __repr__(self) -> str:
        return f"NettChainClient(base_url={self.config.base_url!r})"

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _request(self, method: str, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Any:
        """Send one request and return the decoded JSON body."""
        url = self.config.base_url + endpoint
        kwargs: Dict[str, Any] = {"timeout": self.config.timeout}
        if method in ("POST", "PUT"):
            kwargs["json"] = data or {}

        try:
            response = self._session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            logger.debug("%s %s failed before a response arrived", method, endpoint)
            raise TransportError(f"{method} {endpoint} failed: {exc}") from exc

        logger.debug("%s %s -> %s", method, endpoint, response.status_code)
        if response.status_code >= 400:
            raise HttpStatusError(response.status_code, response.text, url=url)
        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as exc:
            raise InvalidResponseError(f"{method} {endpoint} returned a non-JSON body") from exc

    def _send(self, endpoint: str, body: Dict[str, Any], password: Optional[str]) -> Any:
        # password-protected sends: resolve before any network I/O
        body["password"] = self.config.resolve_password(password)
        return self._request("POST", endpoint, body)

    # ------------------------------------------------------------------
    # Wallets
    # ------------------------------------------------------------------

    def create_wallet(self, name: str, blockchain: ChainLike, password: Optional[str] = None) -> Any:
        """Create a wallet; ``password`` (1-32 chars) falls back to the configured default."""
        chain = Blockchain.parse(blockchain)
        return self._send("/wallet/create", {"name": name, "blockchain": chain.value}, password)

    def get_all_wallets(self) -> Any:
        return self._request("GET", "/wallet/get")

    def get_wallet_by_address(self, address: str) -> Any:
        return self._request("GET", f"/wallet/find/{_segment(address)}")

    def get_wallet_by_name(self, name: str) -> Any:
        return self._request("GET", f"/wallet/findBy/{_segment(name)}")

    def import_wallet(
        self,
        name: str,
        blockchain: ChainLike,
        network: Union[Network, str],
        address: str,
        encrypted_key: str,
    ) -> Any:
        """Import an existing wallet; ``encrypted_key`` is an opaque encrypted blob."""
        return self._request(
            "POST",
            "/wallet/import",
            {
                "name": name,
                "blockchain": Blockchain.parse(blockchain).value,
                "network": Network.parse(network).value,
                "address": address,
                "encrypted_key": encrypted_key,
            },
        )

    def export_wallet(self, address: str) -> Any:
        return self._request("POST", "/wallet/export", {"address": address})

    # ------------------------------------------------------------------
    # Transfers
    # ------------------------------------------------------------------

    def send_eth(
        self,
        from_: str,
        to: str,
        amount: float,
        gas_price: int,
        gas_limit: int,
        password: Optional[str] = None,
    ) -> Any:
        """Send ETH; ``gas_price`` is in wei."""
        body = {"from": from_, "to": to, "amount": amount, "gasPrice": gas_price, "gasLimit": gas_limit}
        return self._send("/eth/send", body, password)

    def send_erc20(
        self,
        from_: str,
        to: str,
        amount: float,
        gas_price: int,
        gas_limit: int,
        password: Optional[str] = None,
    ) -> Any:
        body = {"from": from_, "to": to, "amount": amount, "gasPrice": gas_price, "gasLimit": gas_limit}
        return self._send("/eth/erc20/send", body, password)

    def send_tron(self, from_: str, to: str, amount: float, password: Optional[str] = None) -> Any:
        return self._send("/tron/send", {"from": from_, "to": to, "amount": amount}, password)

    def send_trc20(
        self, from_: str, to: str, amount: float, token_id: str, password: Optional[str] = None
    ) -> Any:
        body = {"from": from_, "to": to, "amount": amount, "token_id": token_id}
        return self._send("/tron/trc20/send", body, password)

    def send_solana(self, from_: str, to: str, amount: float, password: Optional[str] = None) -> Any:
        return self._send("/solana/send", {"from": from_, "to": to, "amount": amount}, password)

    def send_doge(
        self,
        from_: str,
        to: str,
        amount: float,
        address_return: str,
        fee: float,
        password: Optional[str] = None,
    ) -> Any:
        """Send DOGE; change goes back to ``address_return``."""
        body = {"from": from_, "to": to, "amount": amount, "address_return": address_return, "fee": fee}
        return self._send("/doge/send", body, password)

    def send_ripple(self, from_: str, to: str, amount: float, password: Optional[str] = None) -> Any:
        return self._send("/xrp/send", {"from": from_, "to": to, "amount": amount}, password)

    def send_avax(self, from_: str, to: str, amount: float, password: Optional[str] = None) -> Any:
        return self._send("/avalanche/send", {"from": from_, "to": to, "amount": amount}, password)

    def send_transaction(self, from_: str, to: str, amount: float) -> Any:
        return self._request("POST", "/send", {"from": from_, "to": to, "amount": amount})

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_doge_utxos(self, address: str) -> Any:
        return self._request("GET", f"/doge/utxos/{_segment(address)}")

    def get_coin_price(self, symbol: str) -> Any:
        return self._request("GET", f"/price/{_segment(symbol)}")

    def validate_address(self, address: str, blockchain: ChainLike) -> Any:
        chain = Blockchain.parse(blockchain)
        return self._request("GET", f"/validate/{_segment(chain.value)}/{_segment(address)}")

    def get_balance(self, address: str) -> Any:
        return self._request("GET", f"/balance/{_segment(address)}")

    def get_transaction_history(self, address: str) -> Any:
        return self._request("GET", f"/transactions/{_segment(address)}")

    def get_block_info(self, block_hash: str) -> Any:
        return self._request("GET", f"/block/{_segment(block_hash)}")

    def get_network_status(self) -> Any:
        return self._request("GET", "/network/status")

    # ------------------------------------------------------------------
    # Webhooks
    # ------------------------------------------------------------------

    def register_webhook(self, url: str, events: Iterable[str], address: Optional[str] = None) -> Any:
        body: Dict[str, Any] = {"url": url, "events": list(events)}
        if address is not None:
            body["address"] = address
        return self._request("POST", "/webhook/register", body)

    def update_webhook(
        self, webhook_id: str, url: Optional[str] = None, events: Optional[Iterable[str]] = None
    ) -> Any:
        body: Dict[str, Any] = {}
        if url is not None:
            body["url"] = url
        if events is not None:
            body["events"] = list(events)
        if not body:
            raise ValueError("update_webhook needs url or events")
        return self._request("PUT", f"/webhook/{_segment(webhook_id)}", body)

    def delete_webhook(self, webhook_id: str) -> Any:
        return self._request("DELETE", f"/webhook/{_segment(webhook_id)}")

    # ------------------------------------------------------------------
    # Local encryption
    # ------------------------------------------------------------------

    def encrypt(self, plaintext: Union[str, bytes], passphrase: Optional[str] = None) -> str:
        """Encrypt locally with AES-256-GCM; no request is made."""
        return self.encryption.encrypt(plaintext, self.config.resolve_password(passphrase))

    def decrypt(self, blob: str, passphrase: Optional[str] = None) -> str:
        return self.encryption.decrypt(blob, self.config.resolve_password(passphrase))

    def decrypt_legacy(self, blob: str, passphrase: Optional[str] = None) -> str:
        """Decrypt a blob written by the older AES-256-CBC scheme."""
        return self.encryption.decrypt_legacy(blob, self.config.resolve_password(passphrase))

    def import_wallet_with_private_key(
        self,
        name: str,
        blockchain: ChainLike,
        network: Union[Network, str],
        address: str,
        private_key: str,
        passphrase: Optional[str] = None,
    ) -> Any:
        """Encrypt ``private_key`` locally, then import the wallet with the blob."""
        encrypted_key = self.encrypt(private_key, passphrase)
        return self.import_wallet(name, blockchain, network, address, encrypted_key)

    def decrypt_exported_key(self, encrypted_key: str, passphrase: Optional[str] = None) -> str:
        return self.decrypt(encrypted_key, passphrase)
