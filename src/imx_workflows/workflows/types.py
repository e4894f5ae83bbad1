from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from ..api.models import Token


class GetSignableBurnRequest(BaseModel):
    """燒毀請求：接收方固定為燒毀地址，因此不含 receiver。"""

    model_config = ConfigDict(frozen=True)

    sender: str
    token: Token
    amount: str


class GetBurnRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str

    # burn 回傳的 transfer_id 在 API 上是整數。
    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value
