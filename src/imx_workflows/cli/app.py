from __future__ import annotations

import asyncio
from typing import Awaitable, NoReturn, Optional, TypeVar

import typer
from pydantic import BaseModel

from ..api.collections import CollectionsApi
from ..api.models import Token, TokenData, TokenType
from ..api.transfers import TransfersApi
from ..config.settings import AppSettings, get_settings
from ..core.errors import ConfigurationError, ImxError
from ..core.logging import configure_logging
from ..signing.eth import EthAccountSigner
from ..signing.stark import generate_stark_wallet
from ..workflows.burn import burn_workflow, get_burn_workflow
from ..workflows.types import GetBurnRequest, GetSignableBurnRequest

T = TypeVar("T")

app = typer.Typer(help="Immutable X 轉帳／燒毀工具")


@app.callback()
def main_callback() -> None:
    """依設定初始化日誌。"""

    configure_logging(get_settings().log_level)


@app.command("burn")
def command_burn(
    token_type: str = typer.Option("ERC721", "--token-type", help="ETH、ERC20 或 ERC721"),
    token_address: Optional[str] = typer.Option(None, "--token-address", help="代幣合約地址"),
    token_id: Optional[str] = typer.Option(None, "--token-id", help="ERC721 token ID"),
    decimals: Optional[int] = typer.Option(None, "--decimals", help="ETH/ERC20 小數位數"),
    amount: str = typer.Option("1", "--amount", help="燒毀數量"),
    sender: Optional[str] = typer.Option(None, "--sender", help="送出地址，預設為設定私鑰的地址"),
) -> None:
    """將代幣轉至燒毀地址。"""

    settings = get_settings()
    token = _build_token(token_type, token_address, token_id, decimals)

    async def run() -> BaseModel:
        signer = _build_signer(settings)
        request = GetSignableBurnRequest(
            sender=sender or await signer.get_address(),
            token=token,
            amount=amount,
        )
        async with _build_transfers_api(settings) as transfers_api:
            return await burn_workflow(signer, request, transfers_api)

    _print_model(_run(run()))


@app.command("get-burn")
def command_get_burn(transfer_id: str = typer.Argument(..., help="轉帳 ID")) -> None:
    """查詢燒毀狀態。"""

    settings = get_settings()

    async def run() -> BaseModel:
        async with _build_transfers_api(settings) as transfers_api:
            return await get_burn_workflow(GetBurnRequest(id=transfer_id), transfers_api)

    _print_model(_run(run()))


@app.command("stark-key")
def command_stark_key() -> None:
    """顯示由設定私鑰衍生的 Stark 公鑰。"""

    settings = get_settings()

    async def run() -> tuple[str, str]:
        wallet = await generate_stark_wallet(_build_signer(settings))
        return wallet.stark_public_key, wallet.path

    stark_key, path = _run(run())
    typer.echo(f"stark_key: {stark_key}")
    typer.echo(f"path: {path}")


@app.command("collection")
def command_collection(address: str = typer.Argument(..., help="ERC721 合約地址")) -> None:
    """查詢收藏集資訊。"""

    settings = get_settings()

    async def run() -> BaseModel:
        async with _build_collections_api(settings) as collections_api:
            return await collections_api.get_collection(address)

    _print_model(_run(run()))


def _build_token(
    token_type: str,
    token_address: Optional[str],
    token_id: Optional[str],
    decimals: Optional[int],
) -> Token:
    normalized: str = token_type.upper()
    if normalized not in ("ETH", "ERC20", "ERC721"):
        _exit_with_error(ConfigurationError(f"不支援的代幣類型：{token_type}"))
    if normalized == "ERC721" and (not token_address or not token_id):
        _exit_with_error(ConfigurationError("ERC721 需要 --token-address 與 --token-id"))
    if normalized == "ERC20" and not token_address:
        _exit_with_error(ConfigurationError("ERC20 需要 --token-address"))
    token_kind: TokenType = normalized  # type: ignore[assignment]
    return Token(
        type=token_kind,
        data=TokenData(token_address=token_address, token_id=token_id, decimals=decimals),
    )


def _build_signer(settings: AppSettings) -> EthAccountSigner:
    if settings.eth_private_key is None:
        raise ConfigurationError("未設定 ETH_PRIVATE_KEY")
    return EthAccountSigner.from_key(settings.eth_private_key.get_secret_value())


def _build_transfers_api(settings: AppSettings) -> TransfersApi:
    return TransfersApi(settings.api_base_url, timeout=settings.imx_http_timeout)


def _build_collections_api(settings: AppSettings) -> CollectionsApi:
    return CollectionsApi(settings.api_base_url, timeout=settings.imx_http_timeout)


def _run(coroutine: Awaitable[T]) -> T:
    try:
        return asyncio.run(coroutine)  # type: ignore[arg-type]
    except ImxError as error:
        _exit_with_error(error)


def _exit_with_error(error: ImxError) -> NoReturn:
    """輸出錯誤訊息並以代碼 1 結束程式。"""

    typer.echo(f"[{type(error).__name__}] {error}", err=True)
    raise typer.Exit(code=1)


def _print_model(model: BaseModel) -> None:
    typer.echo(model.model_dump_json(indent=2))
