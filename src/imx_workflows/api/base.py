from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..core.errors import InvalidServerResponse, TransportFailure

logger = logging.getLogger(__name__)

USER_AGENT = "imx-workflows/0.1.0"

ApiT = TypeVar("ApiT", bound="BaseApi")
ModelT = TypeVar("ModelT", bound=BaseModel)


class BaseApi:
    """Immutable X REST API 的共用 HTTP 層，不重試。"""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            headers={"User-Agent": USER_AGENT, "accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )
        self._owns_client = client is None

    async def aclose(self) -> None:
        """關閉底層 HTTP 連線。"""

        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self: ApiT) -> ApiT:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, path, json=json, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise TransportFailure(f"IMX API 請求失敗：{method} {path}: {exc}") from exc

        logger.debug(
            "imx_api_response",
            extra={"method": method, "path": path, "status_code": response.status_code},
        )
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as error:
            body = response.text
            raise TransportFailure(
                f"IMX API 回應錯誤：{response.status_code} {method} {path} - body: {body}",
                status_code=response.status_code,
                body=body,
            ) from error

        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportFailure(f"IMX API 回傳非 JSON 內容：{method} {path}") from exc
        if not isinstance(payload, dict):
            raise TransportFailure(f"IMX API 回傳格式非物件：{method} {path}")
        return payload

    @staticmethod
    def _parse(model: Type[ModelT], payload: Dict[str, Any], context: str) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise InvalidServerResponse(f"IMX API 回應欄位格式不符：{context}: {exc}") from exc
