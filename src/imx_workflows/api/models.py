from __future__ import annotations

from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

TokenType = Literal["ETH", "ERC20", "ERC721"]

# 金庫 ID、nonce 與到期時間在 API 上是整數，但原樣轉送，不做型別轉換。
WireInt = Union[int, str]


def _stringify_scalar(value: Any) -> Any:
    """數值狀態轉為字串；缺席（None）維持缺席。"""

    if isinstance(value, (int, float)):
        return str(value)
    return value


class TokenData(BaseModel):
    """代幣細節；ETH 不需任何欄位。"""

    model_config = ConfigDict(frozen=True)

    token_address: Optional[str] = None
    token_id: Optional[str] = None
    decimals: Optional[int] = None


class Token(BaseModel):
    """資產描述。"""

    model_config = ConfigDict(frozen=True)

    type: TokenType
    data: TokenData = Field(default_factory=TokenData)


class GetSignableTransferRequest(BaseModel):
    """`POST /v1/signable-transfer-details` 的請求內容。"""

    model_config = ConfigDict(frozen=True)

    sender: str
    token: Token
    amount: str
    receiver: str


class GetSignableTransferResponse(BaseModel):
    """伺服器簽發的待簽章轉帳內容；所有欄位皆可能缺席。"""

    model_config = ConfigDict(frozen=True, extra="ignore")

    signable_message: Optional[str] = None
    payload_hash: Optional[str] = None
    sender_stark_key: Optional[str] = None
    sender_vault_id: Optional[WireInt] = None
    receiver_stark_key: Optional[str] = None
    receiver_vault_id: Optional[WireInt] = None
    asset_id: Optional[str] = None
    amount: Optional[str] = None
    nonce: Optional[WireInt] = None
    expiration_timestamp: Optional[WireInt] = None


class CreateTransferRequest(BaseModel):
    """已簽章的轉帳送出內容；組裝時每個欄位都必須存在。"""

    model_config = ConfigDict(frozen=True)

    sender_stark_key: str
    sender_vault_id: WireInt
    receiver_stark_key: str
    receiver_vault_id: WireInt
    asset_id: str
    amount: str
    nonce: WireInt
    expiration_timestamp: WireInt
    stark_signature: str


class CreateTransferResponse(BaseModel):
    """轉帳建立結果。"""

    sent_signature: Optional[str] = None
    status: Optional[str] = None
    time: Optional[WireInt] = None
    transfer_id: Optional[WireInt] = None

    @field_validator("status", mode="before")
    @classmethod
    def _status_as_text(cls, value: Any) -> Any:
        return _stringify_scalar(value)


class Transfer(BaseModel):
    """單筆轉帳狀態紀錄，未知欄位一併保留。"""

    model_config = ConfigDict(extra="allow")

    transaction_id: Optional[WireInt] = None
    status: Optional[str] = None
    user: Optional[str] = None
    receiver: Optional[str] = None
    token: Optional[Dict[str, Any]] = None
    timestamp: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def _status_as_text(cls, value: Any) -> Any:
        return _stringify_scalar(value)


class Collection(BaseModel):
    """ERC721 收藏集資訊。"""

    model_config = ConfigDict(extra="ignore")

    address: str
    name: str
    description: Optional[str] = None
    icon_url: Optional[str] = None
    collection_image_url: Optional[str] = None
    metadata_api_url: Optional[str] = None
    project_id: int
