from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

from .errors import DripsError, NetworkError, RaffleNotFoundError
from .models import LedgerObject, NFTMetadata, RaffleDetails, RaffleRecord
from .rpc import LedgerQueryService
from .status import derive_status
from .utils import format_deadline, format_sui_amount

log = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def unwrap_option(value: Any) -> Any:
    """Move Option<T> arrives as null, the bare value, or {"vec": [...]}."""
    if isinstance(value, dict) and "vec" in value:
        vec = value["vec"]
        return vec[0] if vec else None
    return value


def _optional_int(value: Any) -> Optional[int]:
    value = unwrap_option(value)
    return int(value) if value is not None else None


def _optional_id(value: Any) -> Optional[str]:
    value = unwrap_option(value)
    if isinstance(value, dict):
        value = value.get("id")
    return str(value) if value else None


def parse_raffle_record(obj: LedgerObject) -> RaffleRecord:
    """
    Build a RaffleRecord from a raffle object's Move fields.

    Missing balance / participants_count count as zero. A missing deadline
    raises ValueError; a non-integer one raises ValueError or TypeError.
    """
    fields: Dict[str, Any] = obj.fields or {}
    if fields.get("deadline") is None:
        raise ValueError(f"raffle {obj.object_id} has no deadline field")
    return RaffleRecord(
        id=str(obj.object_id),
        balance=int(fields.get("balance") or 0),
        deadline_ms=int(fields["deadline"]),
        is_paused=bool(fields.get("is_raffle_paused")),
        is_item_locked=bool(fields.get("is_raffle_item_locked")),
        participants_count=int(fields.get("participants_count") or 0),
        entry_cost=_optional_int(fields.get("cost")),
        max_capacity=_optional_int(fields.get("max_capacity")),
        max_per_participant=_optional_int(fields.get("max_per_participant")),
        prize_item_id=_optional_id(fields.get("raffle_item_id")),
        winner_address=unwrap_option(fields.get("winner_address")) or None,
        operator_cap_id=_optional_id(fields.get("operator_cap_id")),
        type=obj.type or "",
        version=obj.version,
        digest=obj.digest,
        raw_fields=dict(fields),
    )


def _text(source: Dict[str, Any], key: str) -> Optional[str]:
    # Move structs arrive as nested mappings; only plain strings are usable text.
    value = source.get(key)
    return value if isinstance(value, str) and value else None


def metadata_from_object(obj: LedgerObject) -> NFTMetadata:
    """Prefer Display fields, fall back to the object's own content fields."""
    display = obj.display or {}
    fields = obj.fields or {}
    return NFTMetadata(
        object_id=str(obj.object_id),
        name=_text(display, "name") or _text(fields, "name") or "Unknown NFT",
        description=_text(display, "description")
        or _text(fields, "description")
        or "No description available",
        image_url=_text(display, "image_url")
        or _text(fields, "url")
        or _text(fields, "image_url")
        or "",
        symbol=_text(fields, "symbol"),
        creator=_text(display, "creator") or _text(fields, "creator"),
        collection=_text(fields, "collection"),
        attributes=fields.get("attributes") or None,
    )


class RaffleDetailFetcher:
    def __init__(
        self,
        ledger: LedgerQueryService,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.ledger = ledger
        self.clock = clock

    async def get_nft_metadata(self, nft_id: str) -> Optional[NFTMetadata]:
        try:
            obj = await self.ledger.get_object(nft_id)
        except Exception as e:
            raise NetworkError(f"Failed to fetch NFT metadata: {e}") from e
        if obj is None:
            return None
        return metadata_from_object(obj)

    async def fetch_details(self, raffle_id: str) -> RaffleDetails:
        try:
            obj = await self.ledger.get_object(raffle_id)
            if obj is None or obj.fields is None:
                raise RaffleNotFoundError(raffle_id)

            record = parse_raffle_record(obj)
            status = derive_status(record, self.clock())

            nft_metadata = None
            if record.prize_item_id:
                nft_metadata = await self._try_prize_metadata(record)

            return RaffleDetails(
                record=record,
                status=status,
                formatted_deadline=format_deadline(record.deadline_ms),
                formatted_balance=format_sui_amount(record.balance),
                nft_metadata=nft_metadata,
            )
        except DripsError:
            raise
        except Exception as e:
            raise NetworkError(str(e) or "Failed to fetch raffle details") from e

    async def _try_prize_metadata(self, record: RaffleRecord) -> Optional[NFTMetadata]:
        # Prize metadata never decides raffle status.
        try:
            return await self.get_nft_metadata(str(record.prize_item_id))
        except Exception as e:
            log.warning(
                "Prize metadata unavailable for raffle %s (item %s): %s",
                record.id,
                record.prize_item_id,
                e,
            )
            return None
