from __future__ import annotations

from .base import Endpoint
from .options import QueryOptions


class RegionEndpoint(Endpoint):
    async def list(self, opts: QueryOptions | None = None) -> list[str]:
        """Returns the names of all regions known to the cluster."""
        return await self._client.request("GET", "/v1/regions", list[str], opts=opts)
