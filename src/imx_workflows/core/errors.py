from __future__ import annotations

from typing import Optional


class ImxError(Exception):
    """SDK 所有例外的基底類別。"""


class ConfigurationError(ImxError):
    """設定或環境變數錯誤。"""


class TransportFailure(ImxError):
    """遠端 API 呼叫失敗（網路錯誤或非 2xx 回應）。"""

    def __init__(self, message: str, *, status_code: Optional[int] = None, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class InvalidServerResponse(ImxError):
    """伺服器回應缺少必要欄位或欄位格式不符。"""


class SigningFailure(ImxError):
    """主要錢包或衍生 Stark 金鑰簽章失敗。"""
