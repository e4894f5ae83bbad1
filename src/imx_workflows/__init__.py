"""Immutable X 轉帳／燒毀流程 SDK。"""

from .api import CreateTransferResponse, Token, TokenData, Transfer, TransfersApi
from .core.errors import (
    ConfigurationError,
    ImxError,
    InvalidServerResponse,
    SigningFailure,
    TransportFailure,
)
from .signing import EthAccountSigner, EthSigner, StarkCurveSigner, StarkSigner
from .workflows import (
    BURN_ETH_ADDRESS,
    GetBurnRequest,
    GetSignableBurnRequest,
    Workflows,
    burn_workflow,
    get_burn_workflow,
    transfer_workflow,
)

__version__ = "0.1.0"

__all__ = [
    "BURN_ETH_ADDRESS",
    "ConfigurationError",
    "CreateTransferResponse",
    "EthAccountSigner",
    "EthSigner",
    "GetBurnRequest",
    "GetSignableBurnRequest",
    "ImxError",
    "InvalidServerResponse",
    "SigningFailure",
    "StarkCurveSigner",
    "StarkSigner",
    "Token",
    "TokenData",
    "Transfer",
    "TransfersApi",
    "TransportFailure",
    "Workflows",
    "burn_workflow",
    "get_burn_workflow",
    "transfer_workflow",
]
