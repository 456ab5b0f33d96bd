from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

T = TypeVar("T")


class StatusFilter(str, enum.Enum):
    ACTIVE = "active"
    ENDED = "ended"
    ALL = "all"


# ---------------------------------------------------------------------------
# Ledger shapes (what the query service hands back)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LedgerObject:
    object_id: Optional[str]
    type: Optional[str]
    version: Optional[str] = None
    digest: Optional[str] = None
    fields: Optional[Dict[str, Any]] = None
    display: Optional[Dict[str, Any]] = None
    has_content: bool = False


@dataclass(frozen=True)
class LedgerEvent:
    type: str
    parsed_json: Any
    tx_digest: Optional[str] = None
    timestamp_ms: Optional[int] = None


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    has_next_page: bool = False
    next_cursor: Any = None


# ---------------------------------------------------------------------------
# Raffle state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RaffleRecord:
    """
    Contract-observed state of one raffle, reconstructed on every fetch.

    Integer fields are in MIST / counts; optional caps and costs are None when
    the Move Option is empty.
    """

    id: str
    balance: int
    deadline_ms: int
    is_paused: bool
    is_item_locked: bool
    participants_count: int
    entry_cost: Optional[int] = None
    max_capacity: Optional[int] = None
    max_per_participant: Optional[int] = None
    prize_item_id: Optional[str] = None
    winner_address: Optional[str] = None
    operator_cap_id: Optional[str] = None
    type: str = ""
    version: Optional[str] = None
    digest: Optional[str] = None
    raw_fields: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RaffleStatus:
    is_active: bool
    is_ended: bool
    has_winner: bool
    is_past_deadline: bool
    is_paused: bool
    is_joinable: bool


@dataclass(frozen=True)
class NFTMetadata:
    object_id: str
    name: str
    description: str
    image_url: str
    symbol: Optional[str] = None
    creator: Optional[str] = None
    collection: Optional[str] = None
    attributes: Optional[List[Any]] = None


@dataclass(frozen=True)
class RaffleDetails:
    record: RaffleRecord
    status: RaffleStatus
    formatted_deadline: str
    formatted_balance: str
    nft_metadata: Optional[NFTMetadata] = None

    @property
    def object_id(self) -> str:
        return self.record.id

    @property
    def participants_count(self) -> int:
        return self.record.participants_count


@dataclass(frozen=True)
class RaffleRef:
    """Bare identifier stand-in returned when details are not requested."""

    object_id: str


RaffleEntry = Union[RaffleDetails, RaffleRef]


# ---------------------------------------------------------------------------
# Query options / results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RaffleQueryOptions:
    limit: int = 50
    cursor: Optional[str] = None
    include_details: bool = True
    status: StatusFilter = StatusFilter.ALL

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError(f"limit must be at least 1, got {self.limit}")


@dataclass(frozen=True)
class RaffleQueryResult:
    raffles: List[RaffleEntry]
    has_next_page: bool = False
    next_cursor: Optional[str] = None
    total_count: Optional[int] = None


@dataclass(frozen=True)
class RafflableNFT:
    object_id: str
    type: str
    is_compatible: bool
    incompatibility_reason: Optional[str] = None
    version: Optional[str] = None
    digest: Optional[str] = None
    metadata: Optional[NFTMetadata] = None


@dataclass(frozen=True)
class RafflableNFTsOptions:
    include_metadata: bool = True
    only_compatible: bool = True
    limit: int = 50
    cursor: Optional[str] = None

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError(f"limit must be at least 1, got {self.limit}")


@dataclass(frozen=True)
class RafflableNFTsResult:
    nfts: List[RafflableNFT]
    total: int
    has_next_page: bool = False
    next_cursor: Any = None
