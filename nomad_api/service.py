"""Nomad native service discovery registrations."""

from __future__ import annotations

from pydantic import Field

from .base import Endpoint, NomadModel, escape
from .options import QueryOptions, WriteOptions


class ServiceRegistrationStub(NomadModel):
    service_name: str
    tags: list[str] | None = None


class ServiceRegistrationList(NomadModel):
    """The services registered in a single namespace."""

    namespace: str
    services: list[ServiceRegistrationStub] = Field(default_factory=list)


class ServiceRegistration(NomadModel):
    """A single instance of a service, registered by an allocation."""

    id: str = Field(alias="ID")
    service_name: str
    namespace: str
    node_id: str = Field(default="", alias="NodeID")
    datacenter: str = ""
    job_id: str = Field(default="", alias="JobID")
    alloc_id: str = Field(default="", alias="AllocID")
    tags: list[str] | None = None
    address: str = ""
    port: int = 0
    create_index: int = 0
    modify_index: int = 0


class ServiceEndpoint(Endpoint):
    async def list(
        self, opts: QueryOptions | None = None
    ) -> list[ServiceRegistrationList]:
        """Lists registered services, grouped by namespace."""
        return await self._client.request(
            "GET", "/v1/services", list[ServiceRegistrationList], opts=opts
        )

    async def get(
        self, name: str, opts: QueryOptions | None = None
    ) -> list[ServiceRegistration]:
        """Returns every registration of the service called `name`."""
        return await self._client.request(
            "GET",
            f"/v1/service/{escape(name)}",
            list[ServiceRegistration],
            opts=opts,
        )

    async def delete(
        self, name: str, service_id: str, opts: WriteOptions | None = None
    ) -> None:
        """Removes a single service registration.

        Args:
            name: The service name.
            service_id: The ID of the registration to remove.
            opts: Optional write options for the request.
        """
        await self._client.request(
            "DELETE",
            f"/v1/service/{escape(name)}/{escape(service_id)}",
            opts=opts,
        )
