"""
The Nomad API client.

A `Nomad` client is created once per `Config` and reused across calls. It owns
a single `httpx.AsyncClient`, so connections are pooled between requests.
Operations are grouped by API area and exposed as attributes:

```python
from nomad_api import Config, Nomad, QueryOptions

async with Nomad(Config(address="http://127.0.0.1:4646")) as nomad:
    jobs = await nomad.job.list(opts=QueryOptions().with_namespace("batch"))
    evaluation = await nomad.evaluation.get(jobs[0].id)
```

Every request carries the configured region, namespace and ACL token. Per-call
`QueryOptions` and `WriteOptions` override those values for one request only.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

import httpx
import pydantic

from ._version import __version__
from .acl_policy import ACLPolicyEndpoint
from .acl_token import ACLTokenEndpoint
from .allocation import AllocationEndpoint
from .base import NomadModel
from .config import Config
from .deployment import DeploymentEndpoint
from .evaluation import EvaluationEndpoint
from .exceptions import (
    NomadDeserializationError,
    NomadNetworkError,
    NomadNotFoundError,
    NomadRequestError,
    NomadServerError,
)
from .job import JobEndpoint
from .logging import get_logger
from .namespace import NamespaceEndpoint
from .node_pool import NodePoolEndpoint
from .options import TOKEN_HEADER, QueryOptions, WriteOptions
from .region import RegionEndpoint
from .service import ServiceEndpoint
from .status import StatusEndpoint

logger = get_logger(__name__)

USER_AGENT = f"nomad-api-python/{__version__}"


@lru_cache(maxsize=None)
def _type_adapter(response_type: Any) -> pydantic.TypeAdapter:
    return pydantic.TypeAdapter(response_type)


class Nomad:
    """Async client for the Nomad HTTP API.

    Args:
        config: Connection settings. When omitted, settings are read from the
            standard Nomad environment variables (`NOMAD_ADDR`, `NOMAD_TOKEN`,
            ...).
        transport: Optional `httpx` transport, mainly useful for tests.

    Attributes:
        config: The immutable configuration this client was built from.
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config if config is not None else Config.from_env()
        self._http_client = httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            transport=transport,
            **self.config.get_client_kwargs(),
        )

        self.acl_policy = ACLPolicyEndpoint(self)
        self.acl_token = ACLTokenEndpoint(self)
        self.allocation = AllocationEndpoint(self)
        self.deployment = DeploymentEndpoint(self)
        self.evaluation = EvaluationEndpoint(self)
        self.job = JobEndpoint(self)
        self.namespace = NamespaceEndpoint(self)
        self.node_pool = NodePoolEndpoint(self)
        self.region = RegionEndpoint(self)
        self.service = ServiceEndpoint(self)
        self.status = StatusEndpoint(self)

    async def __aenter__(self) -> "Nomad":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Closes the underlying connection pool."""
        await self._http_client.aclose()

    def build_request(
        self,
        method: str,
        path: str,
        *,
        opts: QueryOptions | WriteOptions | None = None,
        params: dict[str, Any] | None = None,
        body: NomadModel | dict[str, Any] | list[Any] | None = None,
    ) -> httpx.Request:
        """Builds a request against the Nomad API.

        Query parameters are layered in order: configured defaults, `params`
        from the calling operation, then the per-call options.

        Args:
            method: The HTTP method.
            path: The API path, starting with `/v1/`.
            opts: Per-call query or write options.
            params: Operation-specific query parameters.
            body: JSON request body.

        Returns:
            The request, ready to be passed to `send`.

        Raises:
            NomadRequestError: If the request cannot be built.
        """
        query: dict[str, Any] = {"region": self.config.region}
        if self.config.namespace:
            query["namespace"] = self.config.namespace

        headers = httpx.Headers()
        if self.config.token is not None:
            headers[TOKEN_HEADER] = self.config.token.get_secret_value()

        if params:
            query.update(params)

        if opts is not None:
            query.update(opts.query_params())
            headers.update(opts.request_headers())

        kwargs: dict[str, Any] = {"params": query, "headers": headers}

        # Blocking queries hold the connection open for up to `wait_time`
        if isinstance(opts, QueryOptions) and opts.wait_time:
            kwargs["timeout"] = self.config.timeout + opts.wait_time

        if body is not None:
            kwargs["json"] = body.to_api() if isinstance(body, NomadModel) else body

        try:
            return self._http_client.build_request(method, path, **kwargs)
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise NomadRequestError(
                f"Failed to build {method} request for {path!r}: {exc}"
            ) from exc

    async def send(self, request: httpx.Request, response_type: Any = None) -> Any:
        """Sends a request and decodes the response body.

        Args:
            request: A request created by `build_request`.
            response_type: The type the JSON body is validated into. When
                `None`, the body is ignored and `None` is returned.

        Returns:
            The decoded response, or `None` if no response type was given.

        Raises:
            NomadNetworkError: If the Nomad API cannot be reached.
            NomadNotFoundError: If the API answers with a 404.
            NomadServerError: If the API answers with any other non-2xx status.
            NomadDeserializationError: If the body does not match `response_type`.
        """
        logger.debug(f"{request.method} {request.url.path}")

        try:
            response = await self._http_client.send(request)
        except httpx.TransportError as exc:
            raise NomadNetworkError(
                f"Failed to reach Nomad at {self.config.address}: {exc}"
            ) from exc

        logger.debug(
            f"{request.method} {request.url.path} returned {response.status_code}"
        )

        if not response.is_success:
            if response.status_code == 404:
                raise NomadNotFoundError(response.status_code, response.text)
            raise NomadServerError(response.status_code, response.text)

        if response_type is None:
            return None

        try:
            return _type_adapter(response_type).validate_json(
                response.content or b"null"
            )
        except pydantic.ValidationError as exc:
            raise NomadDeserializationError(
                f"Unexpected response body for {request.method} "
                f"{request.url.path}: {exc}"
            ) from exc

    async def request(
        self,
        method: str,
        path: str,
        response_type: Any = None,
        *,
        opts: QueryOptions | WriteOptions | None = None,
        params: dict[str, Any] | None = None,
        body: NomadModel | dict[str, Any] | list[Any] | None = None,
    ) -> Any:
        """Builds and sends a request in one step. See `build_request` and `send`."""
        request = self.build_request(method, path, opts=opts, params=params, body=body)
        return await self.send(request, response_type)
