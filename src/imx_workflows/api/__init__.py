"""API package exports."""

from .collections import CollectionsApi
from .models import (
    Collection,
    CreateTransferRequest,
    CreateTransferResponse,
    GetSignableTransferRequest,
    GetSignableTransferResponse,
    Token,
    TokenData,
    Transfer,
)
from .transfers import TransfersApi

__all__ = [
    "Collection",
    "CollectionsApi",
    "CreateTransferRequest",
    "CreateTransferResponse",
    "GetSignableTransferRequest",
    "GetSignableTransferResponse",
    "Token",
    "TokenData",
    "Transfer",
    "TransfersApi",
]
