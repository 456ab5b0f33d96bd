"""
Raffle discovery.

Raffle ids are not indexed anywhere on-chain, so they are reconstructed from
whatever the ledger exposes, trying each source in turn:

1. events emitted by the raffle module
2. operator capabilities owned by the house address
3. raffle objects owned by the house address

The first source that yields ids wins. Ids are deduplicated in first-seen
order and paginated client-side; the cursor is the last id of the previous
page. The ledger offers no snapshot, so paging across calls can skip or repeat
raffles while new events arrive.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import (
    Any,
    Awaitable,
    Callable,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
)

from .config import Settings
from .details import RaffleDetailFetcher, unwrap_option
from .errors import NetworkError
from .models import (
    LedgerObject,
    NFTMetadata,
    RaffleDetails,
    RaffleEntry,
    RaffleQueryOptions,
    RaffleQueryResult,
    RaffleRef,
    RaffleStatus,
    StatusFilter,
)
from .rpc import LedgerQueryService

log = logging.getLogger(__name__)

RAFFLE_ID_KEYS = ("raffle_id", "raffleId")
OWNED_PAGE_SIZE = 50


@dataclass(frozen=True)
class Diagnostic:
    source: str
    message: str
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class TierOutcome:
    tier: str
    ids: List[str]
    skipped_reason: Optional[str] = None
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def dedupe(ids: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(ids))


def paginate(
    ids: Sequence[str], cursor: Optional[str], limit: int
) -> Tuple[List[str], bool]:
    """
    Slice `limit` ids following `cursor`.

    An unknown cursor restarts from the beginning.
    """
    start = 0
    if cursor is not None:
        try:
            start = list(ids).index(cursor) + 1
        except ValueError:
            start = 0
    page = list(ids[start : start + limit])
    return page, start + limit < len(ids)


def _as_id(value: Any) -> Optional[str]:
    """ID fields arrive as '0x..', {"id": '0x..'}, {"id": {"id": '0x..'}} or {"bytes": '0x..'}."""
    value = unwrap_option(value)
    for _ in range(2):
        if isinstance(value, dict):
            value = value.get("id", value.get("bytes"))
    if isinstance(value, str) and value:
        return value
    return None


def extract_event_raffle_id(payload: Any) -> Optional[str]:
    """Raffle id from an event payload or from one level of nested payload."""
    if not isinstance(payload, dict):
        return None
    candidates = [payload] + [v for v in payload.values() if isinstance(v, dict)]
    for candidate in candidates:
        for key in RAFFLE_ID_KEYS:
            value = candidate.get(key)
            if isinstance(value, str) and value:
                return value
    return None


def is_operator_cap(obj: LedgerObject) -> bool:
    return "OperatorCap" in (obj.type or "")


def is_raffle_object(obj: LedgerObject) -> bool:
    t = obj.type or ""
    return "raffle::Raffle" in t and not is_operator_cap(obj)


def extract_cap_raffle_id(obj: LedgerObject) -> Optional[str]:
    fields = obj.fields or {}
    for key in RAFFLE_ID_KEYS:
        raffle_id = _as_id(fields.get(key))
        if raffle_id:
            return raffle_id
    return None


def matches_status(status: RaffleStatus, wanted: StatusFilter) -> bool:
    if wanted == StatusFilter.ACTIVE:
        return status.is_active
    if wanted == StatusFilter.ENDED:
        return status.is_ended
    return True


def matches_term(metadata: Optional[NFTMetadata], term: str) -> bool:
    if metadata is None:
        return False
    needle = term.casefold()
    haystacks = (metadata.name, metadata.description, metadata.collection)
    return any(needle in h.casefold() for h in haystacks if isinstance(h, str))


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class DiscoveryEngine:
    def __init__(
        self,
        ledger: LedgerQueryService,
        settings: Settings,
        fetcher: Optional[RaffleDetailFetcher] = None,
        on_diagnostic: Optional[Callable[[Diagnostic], None]] = None,
    ) -> None:
        self.ledger = ledger
        self.settings = settings
        self.fetcher = fetcher or RaffleDetailFetcher(ledger)
        self.on_diagnostic = on_diagnostic

    async def query_raffles(
        self, options: Optional[RaffleQueryOptions] = None
    ) -> RaffleQueryResult:
        options = options or RaffleQueryOptions()
        ids = await self.discover_ids(limit=options.limit, cursor=options.cursor)
        page, has_next = paginate(ids, options.cursor, options.limit)

        raffles: List[RaffleEntry]
        if options.include_details:
            fetched = await self._fetch_all(page)
            raffles = [r for r in fetched if matches_status(r.status, options.status)]
        else:
            raffles = [RaffleRef(object_id=i) for i in page]

        return RaffleQueryResult(
            raffles=raffles,
            has_next_page=has_next,
            next_cursor=page[-1] if page else None,
            total_count=len(ids),
        )

    async def get_raffles_by_creator(
        self, address: str, options: Optional[RaffleQueryOptions] = None
    ) -> RaffleQueryResult:
        """Raffles whose operator capability is held by `address`."""
        options = options or RaffleQueryOptions()
        try:
            owned = await self._collect_owned(address)
        except Exception as e:
            raise NetworkError(f"Failed to fetch raffles by creator: {e}") from e

        ids = dedupe(
            raffle_id
            for raffle_id in (extract_cap_raffle_id(o) for o in owned if is_operator_cap(o))
            if raffle_id
        )
        page, has_next = paginate(ids, options.cursor, options.limit)

        raffles: List[RaffleEntry] = []
        # A single owner holds few caps; resolve one at a time.
        for raffle_id in page:
            if not options.include_details:
                raffles.append(RaffleRef(object_id=raffle_id))
                continue
            try:
                details = await self.fetcher.fetch_details(raffle_id)
            except Exception as e:
                self._report("creator", f"skipping raffle {raffle_id}", e)
                continue
            if matches_status(details.status, options.status):
                raffles.append(details)

        return RaffleQueryResult(
            raffles=raffles,
            has_next_page=has_next,
            next_cursor=page[-1] if page else None,
            total_count=len(ids),
        )

    async def search_raffles(
        self, term: str, options: Optional[RaffleQueryOptions] = None
    ) -> RaffleQueryResult:
        """
        Case-insensitive match on prize name, description and collection.

        Filters a single discovery page client-side; raffles without prize
        metadata never match.
        """
        options = replace(options or RaffleQueryOptions(), include_details=True)
        result = await self.query_raffles(options)
        matches: List[RaffleEntry] = [
            r
            for r in result.raffles
            if isinstance(r, RaffleDetails) and matches_term(r.nft_metadata, term)
        ]
        return RaffleQueryResult(
            raffles=matches,
            has_next_page=result.has_next_page,
            next_cursor=result.next_cursor,
            total_count=len(matches),
        )

    async def discover_ids(self, limit: int, cursor: Optional[str] = None) -> List[str]:
        # Both house tiers scan the same owned objects; read them once per call.
        house_owned: List[List[LedgerObject]] = []

        async def owned_by_house() -> List[LedgerObject]:
            if not house_owned:
                house_owned.append(await self._collect_owned(self.settings.house_id))
            return house_owned[0]

        tiers: List[Tuple[str, Callable[[], Awaitable[List[str]]]]] = [
            ("events", lambda: self._event_ids(limit, cursor)),
            ("operator_caps", lambda: self._operator_cap_ids(owned_by_house)),
            ("house_objects", lambda: self._house_raffle_ids(owned_by_house)),
        ]

        outcomes: List[TierOutcome] = []
        for name, run in tiers:
            outcome = await self._run_tier(name, run)
            outcomes.append(outcome)
            if outcome.ids:
                log.debug("Discovered %d raffle ids via %s", len(outcome.ids), name)
                return dedupe(outcome.ids)

        if all(o.failed for o in outcomes):
            last = outcomes[-1].error
            raise NetworkError(f"All raffle discovery sources failed: {last}") from last

        log.info("No raffles found")
        return []

    # ------------------------------------------------------------------
    # Tiers
    # ------------------------------------------------------------------

    async def _run_tier(
        self, name: str, run: Callable[[], Awaitable[List[str]]]
    ) -> TierOutcome:
        try:
            ids = await run()
        except Exception as e:
            self._report(name, "discovery source failed", e)
            return TierOutcome(tier=name, ids=[], skipped_reason=str(e), error=e)
        if not ids:
            self._report(name, "discovery source returned no raffle ids")
            return TierOutcome(tier=name, ids=[], skipped_reason="empty")
        return TierOutcome(tier=name, ids=ids)

    async def _event_ids(self, limit: int, cursor: Optional[str]) -> List[str]:
        # Several events per raffle, so over-fetch.
        batch = max(1, 2 * limit)
        ids: List[str] = []
        seen = set()
        event_cursor: Any = None

        for _ in range(self.settings.max_event_pages):
            page = await self.ledger.query_events(
                self.settings.package_id,
                self.settings.raffle_module,
                batch,
                descending=True,
                cursor=event_cursor,
            )
            for event in page.items:
                try:
                    raffle_id = extract_event_raffle_id(event.parsed_json)
                except Exception as e:
                    self._report("events", f"unreadable event {event.tx_digest}", e)
                    continue
                if raffle_id and raffle_id not in seen:
                    seen.add(raffle_id)
                    ids.append(raffle_id)

            if _enough_after_cursor(ids, cursor, limit):
                break
            if not page.has_next_page or page.next_cursor is None:
                break
            event_cursor = page.next_cursor

        return ids

    async def _operator_cap_ids(
        self, load_owned: Callable[[], Awaitable[List[LedgerObject]]]
    ) -> List[str]:
        owned = await load_owned()
        return [
            raffle_id
            for raffle_id in (extract_cap_raffle_id(o) for o in owned if is_operator_cap(o))
            if raffle_id
        ]

    async def _house_raffle_ids(
        self, load_owned: Callable[[], Awaitable[List[LedgerObject]]]
    ) -> List[str]:
        owned = await load_owned()
        return [str(o.object_id) for o in owned if o.object_id and is_raffle_object(o)]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _collect_owned(self, owner: str) -> List[LedgerObject]:
        out: List[LedgerObject] = []
        cursor = None
        for _ in range(self.settings.max_owned_pages):
            page = await self.ledger.get_owned_objects(
                owner, cursor=cursor, limit=OWNED_PAGE_SIZE
            )
            out.extend(page.items)
            if not page.has_next_page or page.next_cursor is None:
                break
            cursor = page.next_cursor
        return out

    async def _fetch_all(self, ids: Sequence[str]) -> List[RaffleDetails]:
        results = await asyncio.gather(*(self._fetch_or_none(i) for i in ids))
        return [r for r in results if r is not None]

    async def _fetch_or_none(self, raffle_id: str) -> Optional[RaffleDetails]:
        try:
            return await self.fetcher.fetch_details(raffle_id)
        except Exception as e:
            self._report("details", f"dropping raffle {raffle_id}", e)
            return None

    def _report(
        self, source: str, message: str, error: Optional[BaseException] = None
    ) -> None:
        if error is not None:
            log.warning("%s: %s: %s", source, message, error)
        else:
            log.debug("%s: %s", source, message)
        if self.on_diagnostic is not None:
            self.on_diagnostic(Diagnostic(source=source, message=message, error=error))


def _enough_after_cursor(ids: List[str], cursor: Optional[str], limit: int) -> bool:
    """True once `ids` holds a full page after `cursor` plus one to prove a next page."""
    if cursor is None:
        return len(ids) > limit
    if cursor not in ids:
        return False
    return len(ids) - (ids.index(cursor) + 1) > limit
