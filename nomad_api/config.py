"""Connection settings for a Nomad agent."""

from __future__ import annotations

import os
import ssl
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

DEFAULT_ADDRESS = "http://127.0.0.1:4646"
DEFAULT_REGION = "global"

# Environment variables understood by `Config.from_env`, matching the Nomad CLI
ENV_ADDRESS = "NOMAD_ADDR"
ENV_ADDRESS_LEGACY = "NOMAD_ADDRESS"
ENV_REGION = "NOMAD_REGION"
ENV_NAMESPACE = "NOMAD_NAMESPACE"
ENV_TOKEN = "NOMAD_TOKEN"
ENV_CA_CERT = "NOMAD_CACERT"
ENV_CLIENT_CERT = "NOMAD_CLIENT_CERT"
ENV_CLIENT_KEY = "NOMAD_CLIENT_KEY"
ENV_SKIP_VERIFY = "NOMAD_SKIP_VERIFY"

_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Settings used to reach a Nomad agent.

    A `Config` is immutable once constructed; build a new one to talk to a
    different agent.

    Attributes:
        address: The address of the Nomad API (e.g. `http://127.0.0.1:4646`).
        region: The default Nomad region to use.
        namespace: The default Nomad namespace to use.
        token: The ACL token for authenticating with Nomad.
        tls_ca_cert: Path to the CA certificate for TLS verification.
        tls_client_cert: Path to the client certificate for mutual TLS.
        tls_client_key: Path to the client key for mutual TLS.
        tls_skip_verify: Whether to skip TLS certificate verification.
        timeout: Request timeout in seconds.

    Example:
        Build a configuration from the standard Nomad environment variables:
        ```python
        from nomad_api import Config, Nomad

        async with Nomad(Config.from_env()) as nomad:
            leader = await nomad.status.leader()
        ```
    """

    model_config = ConfigDict(frozen=True)

    address: str = Field(
        default=DEFAULT_ADDRESS,
        description="The address of the Nomad API.",
        examples=["http://127.0.0.1:4646", "https://nomad.example.com:4646"],
    )
    region: str = Field(
        default=DEFAULT_REGION,
        description="The default Nomad region to use.",
    )
    namespace: str | None = Field(
        default=None,
        description="The default Nomad namespace to use.",
    )
    token: SecretStr | None = Field(
        default=None,
        description="The ACL token for authenticating with Nomad.",
    )
    tls_ca_cert: str | None = Field(
        default=None,
        description="Path to the CA certificate for TLS verification.",
    )
    tls_client_cert: str | None = Field(
        default=None,
        description="Path to the client certificate for mutual TLS.",
    )
    tls_client_key: str | None = Field(
        default=None,
        description="Path to the client key for mutual TLS.",
    )
    tls_skip_verify: bool = Field(
        default=False,
        description="Whether to skip TLS certificate verification.",
    )
    timeout: float = Field(
        default=5,
        description="Request timeout in seconds.",
        gt=0,
    )

    @field_validator("address")
    @classmethod
    def _validate_address(cls, value: str) -> str:
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as exc:
            raise ValueError(f"Invalid Nomad address {value!r}: {exc}") from exc

        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(
                f"Invalid Nomad address {value!r}. "
                "Expected a base URL such as 'http://127.0.0.1:4646'"
            )

        return value.rstrip("/")

    @classmethod
    def from_env(cls) -> Config:
        """Creates a configuration from the standard Nomad environment variables.

        Unset or empty variables keep the defaults. `NOMAD_ADDRESS` is read
        when `NOMAD_ADDR` is not set.
        """
        values: dict[str, Any] = {}

        address = os.environ.get(ENV_ADDRESS) or os.environ.get(ENV_ADDRESS_LEGACY)
        if address:
            values["address"] = address

        for key, env_var in (
            ("region", ENV_REGION),
            ("namespace", ENV_NAMESPACE),
            ("token", ENV_TOKEN),
            ("tls_ca_cert", ENV_CA_CERT),
            ("tls_client_cert", ENV_CLIENT_CERT),
            ("tls_client_key", ENV_CLIENT_KEY),
        ):
            value = os.environ.get(env_var)
            if value:
                values[key] = value

        skip_verify = os.environ.get(ENV_SKIP_VERIFY)
        if skip_verify:
            values["tls_skip_verify"] = skip_verify.strip().lower() in _TRUTHY

        return cls(**values)

    @property
    def secure(self) -> bool:
        return self.address.startswith("https://")

    def get_client_kwargs(self) -> dict[str, Any]:
        """Builds the keyword arguments for the underlying `httpx.AsyncClient`.

        Returns:
            A dictionary with the base URL, timeout and, for `https` addresses,
            the TLS verification setting.
        """
        kwargs: dict[str, Any] = {
            "base_url": self.address,
            "timeout": self.timeout,
        }

        # TLS configuration
        if self.secure:
            kwargs["verify"] = self._build_ssl_context()

        return kwargs

    def _build_ssl_context(self) -> ssl.SSLContext | bool:
        if not self.tls_client_cert:
            if self.tls_skip_verify:
                return False
            if not self.tls_ca_cert:
                return True

        context = ssl.create_default_context(cafile=self.tls_ca_cert)
        if self.tls_skip_verify:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE

        if self.tls_client_cert:
            context.load_cert_chain(self.tls_client_cert, self.tls_client_key)

        return context
