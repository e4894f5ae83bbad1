"""Signing package exports."""

from .eth import EthAccountSigner, EthSigner, sign_raw
from .stark import (
    StarkCurveSigner,
    StarkSignature,
    StarkSigner,
    StarkWallet,
    generate_stark_wallet,
    serialize_signature,
    sign,
    verify,
)

__all__ = [
    "EthAccountSigner",
    "EthSigner",
    "StarkCurveSigner",
    "StarkSignature",
    "StarkSigner",
    "StarkWallet",
    "generate_stark_wallet",
    "serialize_signature",
    "sign",
    "sign_raw",
    "verify",
]
