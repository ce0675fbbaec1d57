from __future__ import annotations

from .base import Endpoint
from .options import QueryOptions


class StatusEndpoint(Endpoint):
    """Cluster status: the current Raft leader and its peers."""

    async def leader(self, opts: QueryOptions | None = None) -> str:
        """Returns the RPC address of the current cluster leader."""
        return await self._client.request(
            "GET", "/v1/status/leader", str, opts=opts
        )

    async def peers(self, opts: QueryOptions | None = None) -> list[str]:
        """Returns the RPC addresses of the Raft peers in the local region."""
        return await self._client.request(
            "GET", "/v1/status/peers", list[str], opts=opts
        )
