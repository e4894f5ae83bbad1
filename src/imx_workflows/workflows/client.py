from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from ..api.models import CreateTransferResponse, GetSignableTransferRequest, Transfer
from ..api.transfers import TransfersApi
from ..signing.eth import EthSigner
from ..signing.stark import StarkSigner
from .burn import burn_workflow, get_burn_workflow
from .transfer import transfer_workflow
from .types import GetBurnRequest, GetSignableBurnRequest


class Workflows:
    """綁定 API client 的流程入口；除注入的依賴外不保存任何狀態。"""

    def __init__(self, transfers_api: TransfersApi, *, stark_signer: Optional[StarkSigner] = None) -> None:
        self._transfers_api = transfers_api
        self._stark_signer = stark_signer

    async def transfer(
        self,
        signer: EthSigner,
        request: Union[GetSignableTransferRequest, Mapping[str, Any]],
    ) -> CreateTransferResponse:
        return await transfer_workflow(signer, request, self._transfers_api, stark_signer=self._stark_signer)

    async def burn(
        self,
        signer: EthSigner,
        request: Union[GetSignableBurnRequest, Mapping[str, Any]],
    ) -> CreateTransferResponse:
        return await burn_workflow(signer, request, self._transfers_api, stark_signer=self._stark_signer)

    async def get_burn(self, request: Union[GetBurnRequest, Mapping[str, Any]]) -> Transfer:
        return await get_burn_workflow(request, self._transfers_api)
