from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional

from .config import Settings
from .details import RaffleDetailFetcher, now_ms
from .discovery import Diagnostic, DiscoveryEngine
from .errors import InvalidRaffleStateError
from .models import (
    NFTMetadata,
    RafflableNFTsOptions,
    RafflableNFTsResult,
    RaffleDetails,
    RaffleQueryOptions,
    RaffleQueryResult,
)
from .nfts import RafflableNFTScanner
from .rpc import LedgerQueryService, RpcClient

log = logging.getLogger(__name__)


class DripsClient:
    """
    Read-side entry point for Drips raffles.

    Construct with `from_settings(...)` for a live Sui fullnode, or pass any
    LedgerQueryService directly.
    """

    def __init__(
        self,
        settings: Settings,
        ledger: LedgerQueryService,
        clock: Callable[[], int] = now_ms,
        on_diagnostic: Optional[Callable[[Diagnostic], None]] = None,
    ) -> None:
        self.settings = settings
        self.ledger = ledger
        self.fetcher = RaffleDetailFetcher(ledger, clock=clock)
        self.discovery = DiscoveryEngine(
            ledger, settings, fetcher=self.fetcher, on_diagnostic=on_diagnostic
        )
        self.scanner = RafflableNFTScanner(ledger, fetcher=self.fetcher)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "DripsClient":
        rpc = RpcClient(settings.rpc_url, timeout_s=settings.timeout_s)
        return cls(settings, rpc, **kwargs)

    async def aclose(self) -> None:
        close = getattr(self.ledger, "aclose", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "DripsClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def get_raffle_details(self, raffle_id: str) -> RaffleDetails:
        return await self.fetcher.fetch_details(raffle_id)

    async def get_nft_metadata(self, nft_id: str) -> Optional[NFTMetadata]:
        return await self.fetcher.get_nft_metadata(nft_id)

    async def query_raffles(
        self, options: Optional[RaffleQueryOptions] = None
    ) -> RaffleQueryResult:
        return await self.discovery.query_raffles(options)

    async def get_raffles_by_creator(
        self, address: str, options: Optional[RaffleQueryOptions] = None
    ) -> RaffleQueryResult:
        return await self.discovery.get_raffles_by_creator(address, options)

    async def search_raffles(
        self, term: str, options: Optional[RaffleQueryOptions] = None
    ) -> RaffleQueryResult:
        return await self.discovery.search_raffles(term, options)

    async def get_rafflable_nfts(
        self, owner: str, options: Optional[RafflableNFTsOptions] = None
    ) -> RafflableNFTsResult:
        return await self.scanner.scan(owner, options)

    async def ensure_joinable(self, raffle_id: str) -> RaffleDetails:
        """Pre-flight check before building a join transaction."""
        details = await self.get_raffle_details(raffle_id)
        if details.status.is_paused:
            raise InvalidRaffleStateError("Raffle is paused")
        if not details.status.is_joinable:
            raise InvalidRaffleStateError("Raffle is not joinable")
        return details

    async def get_active_raffles(self, raffle_ids: Iterable[str]) -> List[RaffleDetails]:
        return [d for d in await self._details_for(raffle_ids) if d.status.is_active]

    async def get_ended_raffles(self, raffle_ids: Iterable[str]) -> List[RaffleDetails]:
        return [d for d in await self._details_for(raffle_ids) if d.status.is_ended]

    async def _details_for(self, raffle_ids: Iterable[str]) -> List[RaffleDetails]:
        out: List[RaffleDetails] = []
        for raffle_id in raffle_ids:
            try:
                out.append(await self.fetcher.fetch_details(raffle_id))
            except Exception as e:
                # Skip raffles that can't be fetched
                log.warning("Skipping raffle %s: %s", raffle_id, e)
        return out
