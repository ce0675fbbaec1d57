"""ACL token management and ACL system bootstrapping."""

from __future__ import annotations

from datetime import datetime

from pydantic import AwareDatetime, Field

from .base import Endpoint, NomadModel, escape
from .options import QueryOptions, WriteOptions

TOKEN_TYPE_CLIENT = "client"
TOKEN_TYPE_MANAGEMENT = "management"


class ACLTokenRoleLink(NomadModel):
    id: str | None = Field(default=None, alias="ID")
    name: str | None = None


class ACLTokenBootstrapRequest(NomadModel):
    """Bootstrap parameters that pin the secret ID of the bootstrap token."""

    bootstrap_secret: str


class ACLTokenCreateRequest(NomadModel):
    """Describes the ACL token to create.

    Attributes:
        type: Either `client` or `management`.
        global_: Whether the token is replicated to every region.
        name: Human readable name.
        policies: Policy names attached to a `client` token.
        roles: Roles attached to the token.
        expiration_time: Absolute expiry time. Must be timezone-aware since
            Nomad rejects timestamps without a UTC offset.
        expiration_ttl: Time to live in nanoseconds, converted by Nomad into
            an expiration time.
    """

    type: str = Field(default=TOKEN_TYPE_CLIENT, alias="Type")
    global_: bool = Field(default=False, alias="Global")
    name: str | None = None
    policies: list[str] | None = None
    roles: list[ACLTokenRoleLink] | None = None
    expiration_time: AwareDatetime | None = None
    expiration_ttl: int | None = Field(default=None, alias="ExpirationTTL")


class ACLToken(NomadModel):
    accessor_id: str = Field(alias="AccessorID")
    secret_id: str = Field(default="", alias="SecretID")
    name: str | None = None
    type: str = Field(default=TOKEN_TYPE_CLIENT, alias="Type")
    policies: list[str] | None = None
    roles: list[ACLTokenRoleLink] | None = None
    global_: bool = Field(default=False, alias="Global")
    create_time: datetime | None = None
    expiration_time: datetime | None = None
    expiration_ttl: int | None = Field(default=None, alias="ExpirationTTL")
    create_index: int | None = None
    modify_index: int | None = None


class ACLTokenStub(NomadModel):
    """An ACL token as returned by list calls, without its secret ID."""

    accessor_id: str = Field(alias="AccessorID")
    name: str | None = None
    type: str = Field(default=TOKEN_TYPE_CLIENT, alias="Type")
    policies: list[str] | None = None
    roles: list[ACLTokenRoleLink] | None = None
    global_: bool = Field(default=False, alias="Global")
    hash: str = ""
    create_time: datetime | None = None
    expiration_time: datetime | None = None
    create_index: int | None = None
    modify_index: int | None = None


class ACLTokenEndpoint(Endpoint):
    async def bootstrap(
        self,
        request: ACLTokenBootstrapRequest | None = None,
        opts: WriteOptions | None = None,
    ) -> ACLToken:
        """Bootstraps the ACL system and returns the initial management token.

        Args:
            request: Optional bootstrap parameters which allow specifying the
                secret ID of the bootstrap token.
            opts: Optional write options for the request.
        """
        return await self._client.request(
            "POST", "/v1/acl/bootstrap", ACLToken, opts=opts, body=request
        )

    async def create(
        self, request: ACLTokenCreateRequest, opts: WriteOptions | None = None
    ) -> ACLToken:
        return await self._client.request(
            "POST", "/v1/acl/token", ACLToken, opts=opts, body=request
        )

    async def delete(self, accessor_id: str, opts: WriteOptions | None = None) -> None:
        await self._client.request(
            "DELETE", f"/v1/acl/token/{escape(accessor_id)}", opts=opts
        )

    async def get(self, accessor_id: str, opts: QueryOptions | None = None) -> ACLToken:
        return await self._client.request(
            "GET", f"/v1/acl/token/{escape(accessor_id)}", ACLToken, opts=opts
        )

    async def get_self(self, opts: QueryOptions | None = None) -> ACLToken:
        """Returns the token used to authenticate the request."""
        return await self._client.request(
            "GET", "/v1/acl/token/self", ACLToken, opts=opts
        )

    async def list(self, opts: QueryOptions | None = None) -> list[ACLTokenStub]:
        return await self._client.request(
            "GET", "/v1/acl/tokens", list[ACLTokenStub], opts=opts
        )
