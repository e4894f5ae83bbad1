from __future__ import annotations

from typing import Iterator, List, Type

import pytest
from eth_account import Account

from imx_workflows.config.settings import get_settings
from imx_workflows.core.errors import SigningFailure
from imx_workflows.signing.eth import EthAccountSigner
from imx_workflows.signing.stark import StarkWallet

TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a4b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = Account.from_key(TEST_PRIVATE_KEY).address


class FakeEthSigner:
    """回傳可預期字串的 L1 signer。"""

    def __init__(self, address: str = "0xABCDEF0000000000000000000000000000000001", fail: bool = False) -> None:
        self.address = address
        self.fail = fail
        self.messages: List[str] = []

    async def get_address(self) -> str:
        return self.address

    async def sign_message(self, message: str) -> str:
        if self.fail:
            raise SigningFailure("user rejected")
        self.messages.append(message)
        return f"eth-sig:{message}"


class FakeStarkSigner:
    """以簽章者地址決定金鑰的 L2 signer。"""

    def __init__(self) -> None:
        self.generated: List[StarkWallet] = []
        self.signed: List[str] = []

    async def generate_wallet(self, signer) -> StarkWallet:
        address = (await signer.get_address()).lower()
        wallet = StarkWallet(path="m/test", stark_public_key=f"stark:{address}", private_key=int(address, 16))
        self.generated.append(wallet)
        return wallet

    async def sign_hash(self, wallet: StarkWallet, payload_hash: str) -> str:
        self.signed.append(payload_hash)
        return f"stark-sig:{payload_hash}:{wallet.private_key}"


@pytest.fixture
def eth_signer() -> EthAccountSigner:
    return EthAccountSigner.from_key(TEST_PRIVATE_KEY)


@pytest.fixture
def fake_eth_signer() -> FakeEthSigner:
    return FakeEthSigner()


@pytest.fixture
def fake_eth_signer_cls() -> Type[FakeEthSigner]:
    return FakeEthSigner


@pytest.fixture
def fake_stark_signer() -> FakeStarkSigner:
    return FakeStarkSigner()


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def eth_address() -> str:
    return TEST_ADDRESS
