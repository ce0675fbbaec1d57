from __future__ import annotations

from .base import Endpoint, NomadModel, escape
from .options import QueryOptions, WriteOptions


class NodePoolSchedulerConfiguration(NomadModel):
    scheduler_algorithm: str | None = None
    memory_oversubscription_enabled: bool | None = None


class NodePool(NomadModel):
    """A named group of client nodes that jobs can target."""

    name: str
    description: str | None = None
    meta: dict[str, str] | None = None
    scheduler_configuration: NodePoolSchedulerConfiguration | None = None
    create_index: int | None = None
    modify_index: int | None = None


class NodePoolEndpoint(Endpoint):
    async def list(self, opts: QueryOptions | None = None) -> list[NodePool]:
        return await self._client.request(
            "GET", "/v1/node/pools", list[NodePool], opts=opts
        )

    async def get(self, name: str, opts: QueryOptions | None = None) -> NodePool:
        return await self._client.request(
            "GET", f"/v1/node/pool/{escape(name)}", NodePool, opts=opts
        )

    async def create(
        self, node_pool: NodePool, opts: WriteOptions | None = None
    ) -> None:
        """Creates a node pool, or updates the pool with the same name."""
        await self._client.request(
            "PUT", "/v1/node/pools", opts=opts, body=node_pool
        )

    async def delete(self, name: str, opts: WriteOptions | None = None) -> None:
        await self._client.request(
            "DELETE", f"/v1/node/pool/{escape(name)}", opts=opts
        )
