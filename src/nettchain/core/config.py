"""Client settings for the NettChain SDK.

Settings are passed explicitly to :class:`nettchain.network.client.NettChainClient`;
nothing is read from process-wide state after construction. Environment
variables are only consulted by :meth:`ClientConfig.from_env`:

- ``NETTCHAIN_API_KEY`` (required)
- ``NETTCHAIN_BASE_URL``
- ``NETTCHAIN_PASSWORD`` default wallet password
- ``NETTCHAIN_TIMEOUT`` seconds
- ``NETTCHAIN_KDF_ITERATIONS``
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from nettchain.core.exceptions import ConfigurationError, PasswordRequiredError
from nettchain.security.kdf import MIN_ITERATIONS

DEFAULT_BASE_URL = "https://api.nettchain.com/v1"
DEFAULT_TIMEOUT = 30.0

ENV_API_KEY = "NETTCHAIN_API_KEY"
ENV_BASE_URL = "NETTCHAIN_BASE_URL"
ENV_PASSWORD = "NETTCHAIN_PASSWORD"
ENV_TIMEOUT = "NETTCHAIN_TIMEOUT"
ENV_KDF_ITERATIONS = "NETTCHAIN_KDF_ITERATIONS"


def _mask(value: Optional[str]) -> str:
    if not value:
        return repr(value)
    return "'***'"


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings plus the default wallet password."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    default_password: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    kdf_iterations: int = MIN_ITERATIONS

    def __post_init__(self):
        if not self.api_key:
            raise ConfigurationError("api_key is required")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")
        if self.kdf_iterations < MIN_ITERATIONS:
            raise ConfigurationError(f"kdf_iterations must be at least {MIN_ITERATIONS}")
        # keep "https://host/v1/" and "https://host/v1" equivalent
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    def __repr__(self) -> str:
        return (
            f"ClientConfig(api_key={_mask(self.api_key)}, base_url={self.base_url!r}, "
            f"default_password={_mask(self.default_password)}, timeout={self.timeout!r}, "
            f"kdf_iterations={self.kdf_iterations!r})"
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """Build a config from ``NETTCHAIN_*`` variables (``os.environ`` by default)."""
        env = os.environ if environ is None else environ

        api_key = env.get(ENV_API_KEY)
        if not api_key:
            raise ConfigurationError(f"{ENV_API_KEY} is not set")

        try:
            timeout = float(env.get(ENV_TIMEOUT, DEFAULT_TIMEOUT))
            iterations = int(env.get(ENV_KDF_ITERATIONS, MIN_ITERATIONS))
        except ValueError as exc:
            raise ConfigurationError(f"invalid numeric setting: {exc}") from exc

        return cls(
            api_key=api_key,
            base_url=env.get(ENV_BASE_URL, DEFAULT_BASE_URL),
            default_password=env.get(ENV_PASSWORD) or None,
            timeout=timeout,
            kdf_iterations=iterations,
        )

    @classmethod
    def from_keyring(cls, service: str, account: str, **overrides) -> "ClientConfig":
        """Build a config whose API key is read from the OS keystore."""
        from nettchain.security import keystore

        api_key = keystore.load_secret(account, service=service)
        if api_key is None:
            raise ConfigurationError(f"no API key stored in OS keystore for {service!r}/{account!r}")
        return cls(api_key=api_key, **overrides)

    def with_password(self, password: Optional[str]) -> "ClientConfig":
        """Return a copy that uses ``password`` as the default wallet password."""
        return replace(self, default_password=password)

    def resolve_password(self, override: Optional[str] = None) -> str:
        """Per-call password wins over the configured default."""
        password = override if override is not None else self.default_password
        if password is None:
            raise PasswordRequiredError("Password is required. Set it globally or in the operation.")
        return password
