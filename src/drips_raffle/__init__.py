"""
Drips raffle client for Sui.

Reads raffle state from a Sui fullnode, derives lifecycle status, discovers
raffles from events and owned objects, and finds rafflable NFTs.
"""

from __future__ import annotations

from .classify import Classification, CompatibilityRule, classify
from .client import DripsClient
from .config import Settings
from .discovery import Diagnostic, DiscoveryEngine
from .errors import (
    ConfigurationError,
    DripsError,
    InvalidRaffleStateError,
    NetworkError,
    RaffleNotFoundError,
)
from .models import (
    NFTMetadata,
    RafflableNFT,
    RafflableNFTsOptions,
    RafflableNFTsResult,
    RaffleDetails,
    RaffleQueryOptions,
    RaffleQueryResult,
    RaffleRecord,
    RaffleRef,
    RaffleStatus,
    StatusFilter,
)
from .rpc import LedgerQueryService, RpcClient
from .status import derive_status

__all__ = [
    "DripsClient",
    "Settings",
    "DiscoveryEngine",
    "Diagnostic",
    "LedgerQueryService",
    "RpcClient",
    "derive_status",
    "classify",
    "Classification",
    "CompatibilityRule",
    # Errors
    "DripsError",
    "ConfigurationError",
    "RaffleNotFoundError",
    "InvalidRaffleStateError",
    "NetworkError",
    # Models
    "NFTMetadata",
    "RafflableNFT",
    "RafflableNFTsOptions",
    "RafflableNFTsResult",
    "RaffleDetails",
    "RaffleQueryOptions",
    "RaffleQueryResult",
    "RaffleRecord",
    "RaffleRef",
    "RaffleStatus",
    "StatusFilter",
]
