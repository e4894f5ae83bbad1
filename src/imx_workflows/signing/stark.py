"""Stark 曲線（L2）金鑰衍生與簽章。

金鑰由主要錢包對固定訊息的簽章決定性衍生：同一個錢包每次都會得到同一把
Stark 金鑰，遠端服務以此將 Stark 公鑰對應到以太坊帳戶。

衍生流程：

1. 主要錢包簽署 ``DEFAULT_SIGNATURE_MESSAGE``。
2. 依錢包地址組出 BIP-32 路徑
   ``m/2645'/<layer>'/<application>'/<addr_lo>'/<addr_hi>'/<index>``。
3. 以簽章為種子沿路徑衍生私鑰，再 grind 到 Stark 曲線的階數以內。

簽章使用 RFC 6979 決定性 k，直接對雜湊整數簽署，輸出為 ``0x`` + r + s
（各 64 個十六進位字元）。
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from ecdsa import ecdsa as ecdsa_core
from ecdsa import rfc6979
from ecdsa.ellipticcurve import CurveFp, PointJacobi
from ecdsa.numbertheory import SquareRootError, square_root_mod_prime
from eth_account.hdaccount import key_from_seed

from ..core.errors import SigningFailure
from .eth import EthSigner

FIELD_PRIME = 0x800000000000011000000000000000000000000000000000000000000000001
ALPHA = 1
BETA = 0x6F21413EFBE40DE150E596D72F7A8C5609AD26C15C915C1F4CDFCB99CEE9E89
EC_ORDER = 0x800000000000010FFFFFFFFFFFFFFFFB781126DCAE7B2321E66A241ADC64D2F
EC_GEN_X = 0x1EF15C18599971B7BECED415A40F0C7DEACFD9B0D1819E03D723D8BC943CFCA
EC_GEN_Y = 0x5668060AA49730B7BE4801DF46EC62DE53ECD11ABE43A32873000C36E8DC1F

# r、w 與被簽署的雜湊都必須小於 2**251。
N_ELEMENT_BITS_ECDSA = 251

STARK_CURVE = CurveFp(FIELD_PRIME, ALPHA, BETA, 1)
GENERATOR = PointJacobi(STARK_CURVE, EC_GEN_X, EC_GEN_Y, 1, EC_ORDER, generator=True)

DEFAULT_SIGNATURE_MESSAGE = "Only sign this request if you’ve initiated an action with Immutable X."
DEFAULT_ACCOUNT_LAYER = "starkex"
DEFAULT_ACCOUNT_APPLICATION = "immutablex"
DEFAULT_ACCOUNT_INDEX = "1"

_MAX_K_ATTEMPTS = 64
_BITS_31 = (1 << 31) - 1


@dataclass(frozen=True, slots=True)
class StarkSignature:
    r: int
    s: int


@dataclass(frozen=True, slots=True)
class StarkWallet:
    """單次流程專用的 Stark 金鑰組，不快取也不保存。"""

    path: str
    stark_public_key: str
    private_key: int = field(repr=False)


@runtime_checkable
class StarkSigner(Protocol):
    """衍生 L2 金鑰並簽署雜湊的能力。"""

    async def generate_wallet(self, signer: EthSigner) -> StarkWallet:
        ...

    async def sign_hash(self, wallet: StarkWallet, payload_hash: str) -> str:
        ...


class StarkCurveSigner:
    """預設的 `StarkSigner`。"""

    async def generate_wallet(self, signer: EthSigner) -> StarkWallet:
        return await generate_stark_wallet(signer)

    async def sign_hash(self, wallet: StarkWallet, payload_hash: str) -> str:
        return serialize_signature(sign(wallet.private_key, payload_hash))


async def generate_stark_wallet(signer: EthSigner) -> StarkWallet:
    """由主要錢包決定性衍生 Stark 金鑰組。"""

    eth_address = (await signer.get_address()).lower()
    signature = await signer.sign_message(DEFAULT_SIGNATURE_MESSAGE)
    path = get_account_path(
        DEFAULT_ACCOUNT_LAYER,
        DEFAULT_ACCOUNT_APPLICATION,
        eth_address,
        DEFAULT_ACCOUNT_INDEX,
    )
    private_key = get_private_key_from_path(signature, path)
    return StarkWallet(
        path=path,
        stark_public_key=private_to_stark_key(private_key),
        private_key=private_key,
    )


def get_account_path(layer: str, application: str, eth_address: str, index: str) -> str:
    layer_int = _int_from_digest(layer)
    application_int = _int_from_digest(application)
    address_value = _parse_hex(eth_address, "以太坊地址")
    address_low = address_value & _BITS_31
    address_high = (address_value >> 31) & _BITS_31
    return f"m/2645'/{layer_int}'/{application_int}'/{address_low}'/{address_high}'/{index}"


def get_private_key_from_path(seed: str, path: str) -> int:
    seed_hex = _strip_hex_prefix(seed)
    try:
        seed_bytes = bytes.fromhex(seed_hex)
    except ValueError as exc:
        raise SigningFailure("主要錢包簽章不是合法的十六進位字串") from exc
    if not seed_bytes:
        raise SigningFailure("主要錢包簽章為空")
    derived = key_from_seed(seed_bytes, path)
    return grind_key(int.from_bytes(derived, "big"))


def grind_key(key_seed: int) -> int:
    """將任意 256 位元種子均勻映射到 [0, EC_ORDER)。"""

    sha256_max_digest = 1 << 256
    max_allowed = sha256_max_digest - (sha256_max_digest % EC_ORDER)
    index = 0
    while True:
        key = _hash_key_with_index(key_seed, index)
        if key < max_allowed:
            return key % EC_ORDER
        index += 1


def private_to_stark_key(private_key: int) -> str:
    """回傳公鑰 x 座標（Stark key）。"""

    point = GENERATOR * private_key
    return "0x" + format(point.x(), "064x")


def sign(private_key: int, payload_hash: str) -> StarkSignature:
    msg_hash = _parse_hex(payload_hash, "payload hash")
    if not 0 <= msg_hash < (1 << N_ELEMENT_BITS_ECDSA):
        raise SigningFailure("payload hash 超出 Stark 簽章可接受的範圍")
    if not 1 <= private_key < EC_ORDER:
        raise SigningFailure("Stark 私鑰超出曲線階數")

    signing_key = _private_key(private_key)
    data = _rfc6979_data(msg_hash)
    for attempt in range(_MAX_K_ATTEMPTS):
        k = rfc6979.generate_k(EC_ORDER, private_key, hashlib.sha256, data, retry_gen=attempt)
        try:
            signature = signing_key.sign(msg_hash, k)
        except ecdsa_core.RSZeroError:
            continue
        if not 1 <= signature.r < (1 << N_ELEMENT_BITS_ECDSA):
            continue
        w = pow(signature.s, -1, EC_ORDER)
        if not 1 <= w < (1 << N_ELEMENT_BITS_ECDSA):
            continue
        return StarkSignature(r=signature.r, s=signature.s)
    raise SigningFailure("無法產生有效的 Stark 簽章")


def verify(stark_public_key: str, payload_hash: str, signature: StarkSignature) -> bool:
    """以 Stark key（x 座標）驗證簽章；y 座標正負兩種皆嘗試。"""

    msg_hash = _parse_hex(payload_hash, "payload hash")
    x = _parse_hex(stark_public_key, "Stark key")
    y_squared = (pow(x, 3, FIELD_PRIME) + ALPHA * x + BETA) % FIELD_PRIME
    y = _sqrt_mod_field(y_squared)
    if y is None:
        return False
    candidate = ecdsa_core.Signature(signature.r, signature.s)
    for y_value in (y, FIELD_PRIME - y):
        point = PointJacobi(STARK_CURVE, x, y_value, 1, EC_ORDER)
        public_key = ecdsa_core.Public_key(GENERATOR, point, verify=False)
        if public_key.verifies(msg_hash, candidate):
            return True
    return False


def serialize_signature(signature: StarkSignature) -> str:
    return "0x" + format(signature.r, "064x") + format(signature.s, "064x")


def deserialize_signature(serialized: str) -> StarkSignature:
    body = _strip_hex_prefix(serialized)
    if len(body) != 128:
        raise ValueError("Stark 簽章長度必須為 64 bytes")
    return StarkSignature(r=int(body[:64], 16), s=int(body[64:], 16))


# --- Helpers ---------------------------------------------------------


def _private_key(secret: int) -> ecdsa_core.Private_key:
    public_key = ecdsa_core.Public_key(GENERATOR, GENERATOR * secret, verify=False)
    return ecdsa_core.Private_key(public_key, secret)


def _rfc6979_data(msg_hash: int) -> bytes:
    # 與 StarkEx 的 k 產生方式一致：長度介於 248 與 251 位元且非整 byte 時左移 4 位。
    if 1 <= msg_hash.bit_length() % 8 <= 4 and msg_hash.bit_length() >= 248:
        msg_hash *= 16
    return msg_hash.to_bytes((msg_hash.bit_length() + 7) // 8, "big")


def _hash_key_with_index(key_seed: int, index: int) -> int:
    key_hex = format(key_seed, "x")
    index_hex = format(index, "x")
    if len(index_hex) % 2:
        index_hex = "0" + index_hex
    payload = key_hex + index_hex
    if len(payload) % 2:
        payload = "0" + payload
    return int.from_bytes(hashlib.sha256(bytes.fromhex(payload)).digest(), "big")


def _int_from_digest(value: str) -> int:
    digest = hashlib.sha256(value.encode("utf-8")).digest()
    return int.from_bytes(digest, "big") & _BITS_31


def _sqrt_mod_field(value: int) -> int | None:
    try:
        return square_root_mod_prime(value, FIELD_PRIME)
    except SquareRootError:
        return None


def _parse_hex(value: str, label: str) -> int:
    body = _strip_hex_prefix(value)
    try:
        return int(body, 16)
    except ValueError as exc:
        raise SigningFailure(f"{label} 不是合法的十六進位字串：{value!r}") from exc


def _strip_hex_prefix(value: str) -> str:
    value = value.strip()
    if value.startswith(("0x", "0X")):
        return value[2:]
    return value
