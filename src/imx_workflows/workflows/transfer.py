from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from ..api.models import (
    CreateTransferRequest,
    CreateTransferResponse,
    GetSignableTransferRequest,
    GetSignableTransferResponse,
)
from ..api.transfers import TransfersApi
from ..core.errors import InvalidServerResponse
from ..signing.eth import EthSigner, sign_raw
from ..signing.stark import StarkCurveSigner, StarkSigner

logger = logging.getLogger(__name__)

_REQUIRED_TRANSFER_FIELDS = (
    "sender_stark_key",
    "sender_vault_id",
    "receiver_stark_key",
    "receiver_vault_id",
    "asset_id",
    "amount",
    "nonce",
    "expiration_timestamp",
)


async def transfer_workflow(
    signer: EthSigner,
    request: Union[GetSignableTransferRequest, Mapping[str, Any]],
    transfers_api: TransfersApi,
    *,
    stark_signer: Optional[StarkSigner] = None,
) -> CreateTransferResponse:
    """取得待簽章內容、以 L1 與 L2 金鑰各簽一次後送出轉帳。

    遠端呼叫或簽章的錯誤都原樣往上拋，不重試。
    """

    if isinstance(request, Mapping):
        request = GetSignableTransferRequest.model_validate(dict(request))
    stark_signer = stark_signer or StarkCurveSigner()

    signable = await transfers_api.get_signable_transfer_v1(request)
    signable_message, payload_hash = _require_signable_fields(signable)

    stark_wallet = await stark_signer.generate_wallet(signer)
    eth_signature = await sign_raw(signable_message, signer)
    stark_signature = await stark_signer.sign_hash(stark_wallet, payload_hash)

    # 遠端服務對此欄位大小寫敏感。
    eth_address = (await signer.get_address()).lower()

    submission = CreateTransferRequest(
        sender_stark_key=signable.sender_stark_key,
        sender_vault_id=signable.sender_vault_id,
        receiver_stark_key=signable.receiver_stark_key,
        receiver_vault_id=signable.receiver_vault_id,
        asset_id=signable.asset_id,
        amount=signable.amount,
        nonce=signable.nonce,
        expiration_timestamp=signable.expiration_timestamp,
        stark_signature=stark_signature,
    )

    response = await transfers_api.create_transfer_v1(
        submission,
        x_imx_eth_address=eth_address,
        x_imx_eth_signature=eth_signature,
    )
    logger.info(
        "transfer_submitted",
        extra={"transfer_id": response.transfer_id, "status": response.status, "receiver": request.receiver},
    )

    return CreateTransferResponse(
        sent_signature=response.sent_signature,
        status=str(response.status) if response.status is not None else None,
        time=response.time,
        transfer_id=response.transfer_id,
    )


def _require_signable_fields(signable: GetSignableTransferResponse) -> tuple[str, str]:
    if signable.signable_message is None or signable.payload_hash is None:
        raise InvalidServerResponse("待簽章轉帳回應缺少 signable_message 或 payload_hash")
    missing = [name for name in _REQUIRED_TRANSFER_FIELDS if getattr(signable, name) is None]
    if missing:
        raise InvalidServerResponse(f"待簽章轉帳回應缺少欄位：{', '.join(missing)}")
    return signable.signable_message, signable.payload_hash
