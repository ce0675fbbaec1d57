"""Per-request options layered onto Nomad API calls.

Both option types are mutable builders: every `with_*` method sets one field
and returns the same instance, so options can be assembled in a single
expression:

```python
opts = QueryOptions().with_namespace("batch").with_per_page(20)
jobs = await nomad.job.list(opts=opts)
```

Unset fields are left off the request entirely, so the defaults of the
`Config` the client was built with apply.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

TOKEN_HEADER = "X-Nomad-Token"


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


class QueryOptions(BaseModel):
    """Options for read requests.

    Attributes:
        region: Region to forward the request to.
        namespace: Namespace to query.
        allow_stale: Allow any server, not only the leader, to answer.
        wait_index: Index to block on for a blocking query.
        wait_time: Maximum number of seconds a blocking query may wait.
        prefix: Only return objects whose ID starts with this prefix.
        params: Extra query parameters sent as-is.
        headers: Extra HTTP headers sent as-is.
        auth_token: ACL token overriding the client token for this request.
        filter: Filter expression applied server-side.
        per_page: Maximum number of results per page.
        next_token: Pagination token returned by a previous page.
        reverse: Reverse the default result order.
    """

    model_config = ConfigDict(validate_assignment=True)

    region: str | None = None
    namespace: str | None = None
    allow_stale: bool | None = None
    wait_index: int | None = Field(default=None, ge=0)
    wait_time: int | None = Field(default=None, ge=0)
    prefix: str | None = None
    params: dict[str, str] | None = None
    headers: dict[str, str] | None = None
    auth_token: str | None = None
    filter: str | None = None
    per_page: int | None = None
    next_token: str | None = None
    reverse: bool | None = None

    def with_region(self, region: str) -> "QueryOptions":
        self.region = region
        return self

    def with_namespace(self, namespace: str) -> "QueryOptions":
        self.namespace = namespace
        return self

    def with_allow_stale(self, allow_stale: bool) -> "QueryOptions":
        self.allow_stale = allow_stale
        return self

    def with_wait_index(self, wait_index: int) -> "QueryOptions":
        self.wait_index = wait_index
        return self

    def with_wait_time(self, wait_time: int) -> "QueryOptions":
        self.wait_time = wait_time
        return self

    def with_prefix(self, prefix: str) -> "QueryOptions":
        self.prefix = prefix
        return self

    def with_params(self, params: dict[str, str]) -> "QueryOptions":
        self.params = params
        return self

    def with_headers(self, headers: dict[str, str]) -> "QueryOptions":
        self.headers = headers
        return self

    def with_auth_token(self, auth_token: str) -> "QueryOptions":
        self.auth_token = auth_token
        return self

    def with_filter(self, filter: str) -> "QueryOptions":
        self.filter = filter
        return self

    def with_per_page(self, per_page: int) -> "QueryOptions":
        self.per_page = per_page
        return self

    def with_next_token(self, next_token: str) -> "QueryOptions":
        self.next_token = next_token
        return self

    def with_reverse(self, reverse: bool) -> "QueryOptions":
        self.reverse = reverse
        return self

    def query_params(self) -> dict[str, str]:
        """Returns the query parameters for the fields that are set."""
        params: dict[str, str] = {}

        if self.region is not None:
            params["region"] = self.region
        if self.namespace is not None:
            params["namespace"] = self.namespace
        if self.allow_stale is not None:
            params["stale"] = _format_bool(self.allow_stale)
        if self.wait_index is not None:
            params["index"] = str(self.wait_index)
        if self.wait_time is not None:
            params["wait"] = f"{self.wait_time}s"
        if self.prefix is not None:
            params["prefix"] = self.prefix
        if self.filter is not None:
            params["filter"] = self.filter
        if self.per_page is not None:
            params["per_page"] = str(self.per_page)
        if self.next_token is not None:
            params["next_token"] = self.next_token
        if self.reverse is not None:
            params["reverse"] = _format_bool(self.reverse)
        if self.params:
            params.update(self.params)

        return params

    def request_headers(self) -> dict[str, str]:
        """Returns the HTTP headers for the fields that are set."""
        headers: dict[str, str] = dict(self.headers or {})
        if self.auth_token is not None:
            headers[TOKEN_HEADER] = self.auth_token
        return headers


class WriteOptions(BaseModel):
    """Options for requests that modify cluster state.

    Attributes:
        region: Region to forward the request to.
        namespace: Namespace the write applies to.
        auth_token: ACL token overriding the client token for this request.
        headers: Extra HTTP headers sent as-is.
        idempotency_token: Token that makes a retried write a no-op.
    """

    model_config = ConfigDict(validate_assignment=True)

    region: str | None = None
    namespace: str | None = None
    auth_token: str | None = None
    headers: dict[str, str] | None = None
    idempotency_token: str | None = None

    def with_region(self, region: str) -> "WriteOptions":
        self.region = region
        return self

    def with_namespace(self, namespace: str) -> "WriteOptions":
        self.namespace = namespace
        return self

    def with_auth_token(self, auth_token: str) -> "WriteOptions":
        self.auth_token = auth_token
        return self

    def with_headers(self, headers: dict[str, str]) -> "WriteOptions":
        self.headers = headers
        return self

    def with_idempotency_token(self, idempotency_token: str) -> "WriteOptions":
        self.idempotency_token = idempotency_token
        return self

    def query_params(self) -> dict[str, str]:
        """Returns the query parameters for the fields that are set."""
        params: dict[str, str] = {}

        if self.region is not None:
            params["region"] = self.region
        if self.namespace is not None:
            params["namespace"] = self.namespace
        if self.idempotency_token is not None:
            params["idempotency_token"] = self.idempotency_token

        return params

    def request_headers(self) -> dict[str, str]:
        """Returns the HTTP headers for the fields that are set."""
        headers: dict[str, str] = dict(self.headers or {})
        if self.auth_token is not None:
            headers[TOKEN_HEADER] = self.auth_token
        return headers
