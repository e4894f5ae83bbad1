from __future__ import annotations

from typing import Protocol, runtime_checkable

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from web3 import Web3

from ..core.errors import SigningFailure

# r、s 各 32 bytes，加上 1 byte 的 v。
_ETH_SIGNATURE_HEX_LENGTH = 130


@runtime_checkable
class EthSigner(Protocol):
    """主要錢包（L1）的簽章能力。"""

    async def sign_message(self, message: str) -> str:
        ...

    async def get_address(self) -> str:
        ...


class EthAccountSigner:
    """以本地私鑰實作 `EthSigner`。"""

    def __init__(self, account: LocalAccount) -> None:
        self._account = account

    @classmethod
    def from_key(cls, private_key: str) -> "EthAccountSigner":
        try:
            account = Account.from_key(private_key)
        except (ValueError, TypeError) as exc:
            raise SigningFailure("無法由私鑰建立以太坊帳戶") from exc
        return cls(account)

    async def get_address(self) -> str:
        return self._account.address

    async def sign_message(self, message: str) -> str:
        try:
            signed = self._account.sign_message(encode_defunct(text=message))
        except (ValueError, TypeError) as exc:
            raise SigningFailure(f"以太坊訊息簽章失敗：{exc}") from exc
        return Web3.to_hex(signed.signature)


async def sign_raw(message: str, signer: EthSigner) -> str:
    """以主要錢包簽署原始訊息，回傳 0x 開頭的十六進位字串。

    標準 65 bytes 簽章的 recovery id 會正規化為 0/1，其餘格式原樣回傳。
    """

    signature = await signer.sign_message(message)
    return normalize_eth_signature(signature)


def normalize_eth_signature(signature: str) -> str:
    body = signature[2:] if signature.startswith(("0x", "0X")) else signature
    if len(body) != _ETH_SIGNATURE_HEX_LENGTH:
        return signature
    try:
        int(body, 16)
    except ValueError:
        return signature
    v = int(body[128:], 16)
    if v >= 27:
        v -= 27
    return "0x" + body[:128].lower() + f"{v:02x}"
