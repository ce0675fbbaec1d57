from __future__ import annotations

from .base import Endpoint, NomadModel, escape
from .options import QueryOptions, WriteOptions


class NamespaceCapabilities(NomadModel):
    enabled_task_drivers: list[str] | None = None
    disabled_task_drivers: list[str] | None = None
    enabled_network_modes: list[str] | None = None
    disabled_network_modes: list[str] | None = None


class NamespaceNodePoolConfiguration(NomadModel):
    default: str | None = None
    allowed: list[str] | None = None
    denied: list[str] | None = None


class NamespaceVaultConfiguration(NomadModel):
    default: str
    allowed: list[str] | None = None
    denied: list[str] | None = None


class NamespaceConsulConfiguration(NomadModel):
    default: str
    allowed: list[str] | None = None
    denied: list[str] | None = None


class Namespace(NomadModel):
    """A Nomad namespace.

    Attributes:
        name: The namespace name.
        description: Human readable description.
        quota: Name of the resource quota attached to the namespace.
        capabilities: Task drivers and network modes allowed in the namespace.
        node_pool_configuration: Node pools jobs in the namespace may use.
        vault_configuration: Vault clusters jobs in the namespace may use.
        consul_configuration: Consul clusters jobs in the namespace may use.
        meta: Arbitrary metadata.
    """

    name: str
    description: str | None = None
    quota: str | None = None
    capabilities: NamespaceCapabilities | None = None
    node_pool_configuration: NamespaceNodePoolConfiguration | None = None
    vault_configuration: NamespaceVaultConfiguration | None = None
    consul_configuration: NamespaceConsulConfiguration | None = None
    meta: dict[str, str] | None = None
    create_index: int | None = None
    modify_index: int | None = None


class NamespaceEndpoint(Endpoint):
    async def create(
        self, namespace: Namespace, opts: WriteOptions | None = None
    ) -> None:
        """Creates a namespace, or updates the namespace with the same name."""
        await self._client.request(
            "PUT", "/v1/namespace", opts=opts, body=namespace
        )

    async def delete(self, name: str, opts: WriteOptions | None = None) -> None:
        await self._client.request(
            "DELETE", f"/v1/namespace/{escape(name)}", opts=opts
        )

    async def get(self, name: str, opts: QueryOptions | None = None) -> Namespace:
        return await self._client.request(
            "GET", f"/v1/namespace/{escape(name)}", Namespace, opts=opts
        )

    async def list(self, opts: QueryOptions | None = None) -> list[Namespace]:
        return await self._client.request(
            "GET", "/v1/namespaces", list[Namespace], opts=opts
        )
