from __future__ import annotations

from urllib.parse import quote

from .base import BaseApi
from .models import (
    CreateTransferRequest,
    CreateTransferResponse,
    GetSignableTransferRequest,
    GetSignableTransferResponse,
    Transfer,
)


class TransfersApi(BaseApi):
    """轉帳相關端點。"""

    async def get_signable_transfer_v1(self, request: GetSignableTransferRequest) -> GetSignableTransferResponse:
        """取得待簽章的轉帳內容。"""

        payload = await self._request(
            "POST",
            "/v1/signable-transfer-details",
            json=request.model_dump(mode="json", exclude_none=True),
        )
        return self._parse(GetSignableTransferResponse, payload, "signable-transfer-details")

    async def create_transfer_v1(
        self,
        request: CreateTransferRequest,
        *,
        x_imx_eth_address: str,
        x_imx_eth_signature: str,
    ) -> CreateTransferResponse:
        """送出已簽章的轉帳。"""

        payload = await self._request(
            "POST",
            "/v1/transfers",
            json=request.model_dump(mode="json"),
            headers={
                "x-imx-eth-address": x_imx_eth_address,
                "x-imx-eth-signature": x_imx_eth_signature,
            },
        )
        return self._parse(CreateTransferResponse, payload, "create transfer")

    async def get_transfer(self, id: str) -> Transfer:
        """查詢單筆轉帳。"""

        payload = await self._request("GET", f"/v1/transfers/{quote(str(id), safe='')}")
        return self._parse(Transfer, payload, "get transfer")
