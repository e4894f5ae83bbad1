from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from ..api.models import CreateTransferResponse, GetSignableTransferRequest, Transfer
from ..api.transfers import TransfersApi
from ..signing.eth import EthSigner
from ..signing.stark import StarkSigner
from .constants import BURN_ETH_ADDRESS
from .transfer import transfer_workflow
from .types import GetBurnRequest, GetSignableBurnRequest


async def burn_workflow(
    signer: EthSigner,
    request: Union[GetSignableBurnRequest, Mapping[str, Any]],
    transfers_api: TransfersApi,
    *,
    stark_signer: Optional[StarkSigner] = None,
) -> CreateTransferResponse:
    """將代幣轉至燒毀地址；呼叫端提供的 receiver 一律忽略。"""

    if isinstance(request, Mapping):
        request = GetSignableBurnRequest.model_validate(dict(request))

    transfer_request = GetSignableTransferRequest(
        sender=request.sender,
        token=request.token,
        amount=request.amount,
        receiver=BURN_ETH_ADDRESS,
    )
    return await transfer_workflow(signer, transfer_request, transfers_api, stark_signer=stark_signer)


async def get_burn_workflow(
    request: Union[GetBurnRequest, Mapping[str, Any]],
    transfers_api: TransfersApi,
) -> Transfer:
    """查詢燒毀（轉帳）狀態，不需簽章。"""

    if isinstance(request, Mapping):
        request = GetBurnRequest.model_validate(dict(request))
    return await transfers_api.get_transfer(request.id)
