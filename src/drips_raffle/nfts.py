from __future__ import annotations

import logging
from typing import List, Optional

from .classify import classify
from .details import RaffleDetailFetcher
from .errors import NetworkError
from .models import RafflableNFT, RafflableNFTsOptions, RafflableNFTsResult
from .rpc import LedgerQueryService

log = logging.getLogger(__name__)


class RafflableNFTScanner:
    """
    Walks one page of an address's owned objects and classifies each as a
    possible raffle prize. Pagination is the ledger's own cursor, passed through.
    """

    def __init__(
        self,
        ledger: LedgerQueryService,
        fetcher: Optional[RaffleDetailFetcher] = None,
    ) -> None:
        self.ledger = ledger
        self.fetcher = fetcher or RaffleDetailFetcher(ledger)

    async def scan(
        self, owner: str, options: Optional[RafflableNFTsOptions] = None
    ) -> RafflableNFTsResult:
        options = options or RafflableNFTsOptions()
        try:
            page = await self.ledger.get_owned_objects(
                owner, cursor=options.cursor, limit=options.limit
            )
        except Exception as e:
            raise NetworkError(f"Failed to fetch owned objects: {e}") from e

        nfts: List[RafflableNFT] = []
        for obj in page.items:
            if not obj.object_id or not obj.type:
                continue

            verdict = classify(obj)
            if options.only_compatible and not verdict.is_compatible:
                continue

            metadata = None
            if options.include_metadata and verdict.is_compatible:
                try:
                    metadata = await self.fetcher.get_nft_metadata(obj.object_id)
                except Exception as e:
                    log.warning("Metadata unavailable for %s: %s", obj.object_id, e)

            nfts.append(
                RafflableNFT(
                    object_id=obj.object_id,
                    type=obj.type,
                    is_compatible=verdict.is_compatible,
                    incompatibility_reason=verdict.reason,
                    version=obj.version,
                    digest=obj.digest,
                    metadata=metadata,
                )
            )

        log.debug(
            "Owner %s: %d of %d objects kept", owner, len(nfts), len(page.items)
        )
        return RafflableNFTsResult(
            nfts=nfts,
            total=len(nfts),
            has_next_page=page.has_next_page,
            next_cursor=page.next_cursor,
        )
