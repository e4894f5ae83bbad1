from .burn import burn_workflow, get_burn_workflow
from .client import Workflows
from .constants import BURN_ETH_ADDRESS
from .transfer import transfer_workflow
from .types import GetBurnRequest, GetSignableBurnRequest

__all__ = [
    "BURN_ETH_ADDRESS",
    "GetBurnRequest",
    "GetSignableBurnRequest",
    "Workflows",
    "burn_workflow",
    "get_burn_workflow",
    "transfer_workflow",
]
