from __future__ import annotations

from .base import BaseApi
from .models import Collection


class CollectionsApi(BaseApi):
    """收藏集端點。"""

    async def get_collection(self, address: str) -> Collection:
        payload = await self._request("GET", f"/v1/collections/{address.lower()}")
        return self._parse(Collection, payload, "get collection")
