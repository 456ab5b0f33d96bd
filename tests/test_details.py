"""
Tests for drips_raffle.details.

Tests cover:
- RaffleDetailFetcher.fetch_details (status, formatting, defaults, errors)
- prize metadata enrichment and its failure isolation
- RaffleDetailFetcher.get_nft_metadata
- Move Option unwrapping
"""

import pytest

from drips_raffle.details import RaffleDetailFetcher, parse_raffle_record, unwrap_option
from drips_raffle.errors import NetworkError, RaffleNotFoundError
from drips_raffle.models import LedgerObject
from tests.helpers.fakes import HOUR_MS, NOW_MS, FakeLedger, nft_object, raffle_object


class TestFetchDetails:
    """Tests for RaffleDetailFetcher.fetch_details."""

    @pytest.mark.asyncio
    async def test_open_raffle(self, ledger: FakeLedger, fetcher: RaffleDetailFetcher) -> None:
        """Test an open raffle is active with formatted balance and counts."""
        ledger.add(
            raffle_object(
                "0x1",
                balance="500000000",
                deadline_ms=NOW_MS + HOUR_MS,
                participants="3",
            )
        )

        details = await fetcher.fetch_details("0x1")

        assert details.status.is_active
        assert details.status.is_joinable
        assert not details.status.is_ended
        assert not details.status.has_winner
        assert not details.status.is_past_deadline
        assert not details.status.is_paused
        assert details.formatted_balance == "0.5 SUI"
        assert details.participants_count == 3
        assert details.object_id == "0x1"
        assert details.record.balance == 500_000_000

    @pytest.mark.asyncio
    async def test_expired_raffle(self, ledger: FakeLedger, fetcher: RaffleDetailFetcher) -> None:
        ledger.add(raffle_object("0x1", deadline_ms=NOW_MS - HOUR_MS, paused=True))

        details = await fetcher.fetch_details("0x1")

        assert details.status.is_ended
        assert details.status.is_past_deadline
        assert not details.status.is_active
        assert not details.status.is_joinable

    @pytest.mark.asyncio
    async def test_winner_selected(self, ledger: FakeLedger, fetcher: RaffleDetailFetcher) -> None:
        ledger.add(raffle_object("0x1", winner="0x" + "9" * 64))

        details = await fetcher.fetch_details("0x1")

        assert details.status.has_winner
        assert details.status.is_ended
        assert not details.status.is_active

    @pytest.mark.asyncio
    async def test_formatted_deadline(self, ledger: FakeLedger, fetcher: RaffleDetailFetcher) -> None:
        ledger.add(raffle_object("0x1", deadline_ms=1_700_003_600_000))

        details = await fetcher.fetch_details("0x1")

        assert details.formatted_deadline == "2023-11-14T23:13:20.000Z"

    @pytest.mark.asyncio
    async def test_missing_counters_default_to_zero(
        self, ledger: FakeLedger, fetcher: RaffleDetailFetcher
    ) -> None:
        ledger.add(raffle_object("0x1", balance=None, participants=None))

        details = await fetcher.fetch_details("0x1")

        assert details.record.balance == 0
        assert details.participants_count == 0
        assert details.formatted_balance == "0 SUI"

    @pytest.mark.asyncio
    async def test_absent_object(self, fetcher: RaffleDetailFetcher) -> None:
        with pytest.raises(RaffleNotFoundError, match="Raffle not found: 0xmissing"):
            await fetcher.fetch_details("0xmissing")

    @pytest.mark.asyncio
    async def test_object_without_fields(
        self, ledger: FakeLedger, fetcher: RaffleDetailFetcher
    ) -> None:
        ledger.add(LedgerObject(object_id="0x1", type="0x2::package::Package"))

        with pytest.raises(RaffleNotFoundError):
            await fetcher.fetch_details("0x1")

    @pytest.mark.asyncio
    async def test_transport_failure_wrapped(
        self, ledger: FakeLedger, fetcher: RaffleDetailFetcher
    ) -> None:
        ledger.failing_ids.add("0x1")

        with pytest.raises(NetworkError, match="Network error: connection reset") as exc:
            await fetcher.fetch_details("0x1")
        assert isinstance(exc.value.__cause__, RuntimeError)
        assert exc.value.code == "NETWORK_ERROR"

    @pytest.mark.asyncio
    async def test_unparsable_deadline(self, ledger: FakeLedger, fetcher: RaffleDetailFetcher) -> None:
        obj = raffle_object("0x1")
        obj.fields["deadline"] = "soon"  # type: ignore[index]
        ledger.add(obj)

        with pytest.raises(NetworkError):
            await fetcher.fetch_details("0x1")


    @pytest.mark.asyncio
    async def test_missing_deadline_named(
        self, ledger: FakeLedger, fetcher: RaffleDetailFetcher
    ) -> None:
        obj = raffle_object("0x1")
        del obj.fields["deadline"]  # type: ignore[union-attr]
        ledger.add(obj)

        with pytest.raises(NetworkError, match="raffle 0x1 has no deadline field"):
            await fetcher.fetch_details("0x1")


class TestPrizeMetadata:
    """Prize enrichment is best-effort."""

    @pytest.mark.asyncio
    async def test_enriched(self, ledger: FakeLedger, fetcher: RaffleDetailFetcher) -> None:
        ledger.add(raffle_object("0x1", prize="0xnft"))
        ledger.add(nft_object("0xnft", display={"name": "Dragon #7"}, fields={"name": "x"}))

        details = await fetcher.fetch_details("0x1")

        assert details.nft_metadata is not None
        assert details.nft_metadata.name == "Dragon #7"

    @pytest.mark.asyncio
    async def test_failure_swallowed(self, ledger: FakeLedger, fetcher: RaffleDetailFetcher) -> None:
        ledger.add(raffle_object("0x1", prize="0xnft"))
        ledger.failing_ids.add("0xnft")

        details = await fetcher.fetch_details("0x1")

        assert details.nft_metadata is None
        assert details.status.is_active

    @pytest.mark.asyncio
    async def test_no_prize_no_lookup(self, ledger: FakeLedger, fetcher: RaffleDetailFetcher) -> None:
        ledger.add(raffle_object("0x1", prize=None))

        details = await fetcher.fetch_details("0x1")

        assert details.nft_metadata is None
        assert ledger.count("get_object") == 1


class TestGetNftMetadata:
    """Tests for RaffleDetailFetcher.get_nft_metadata."""

    @pytest.mark.asyncio
    async def test_display_preferred(self, ledger: FakeLedger, fetcher: RaffleDetailFetcher) -> None:
        ledger.add(
            nft_object(
                "0xnft",
                display={"name": "Shown", "image_url": "https://img", "creator": "studio"},
                fields={"name": "Raw", "description": "From fields", "collection": "Drips"},
            )
        )

        meta = await fetcher.get_nft_metadata("0xnft")

        assert meta is not None
        assert meta.name == "Shown"
        assert meta.description == "From fields"
        assert meta.image_url == "https://img"
        assert meta.creator == "studio"
        assert meta.collection == "Drips"

    @pytest.mark.asyncio
    async def test_defaults(self, ledger: FakeLedger, fetcher: RaffleDetailFetcher) -> None:
        ledger.add(nft_object("0xnft", fields={"url": "ipfs://x"}))

        meta = await fetcher.get_nft_metadata("0xnft")

        assert meta is not None
        assert meta.name == "Unknown NFT"
        assert meta.description == "No description available"
        assert meta.image_url == "ipfs://x"
        assert meta.symbol is None

    @pytest.mark.asyncio
    async def test_struct_valued_fields_ignored(
        self, ledger: FakeLedger, fetcher: RaffleDetailFetcher
    ) -> None:
        ledger.add(
            nft_object(
                "0xnft",
                fields={
                    "name": {"fields": {"value": "Blob"}},
                    "collection": {"type": "0xbeef::nft::Collection", "fields": {}},
                    "creator": 7,
                },
            )
        )

        meta = await fetcher.get_nft_metadata("0xnft")

        assert meta is not None
        assert meta.name == "Unknown NFT"
        assert meta.collection is None
        assert meta.creator is None

    @pytest.mark.asyncio
    async def test_absent(self, fetcher: RaffleDetailFetcher) -> None:
        assert await fetcher.get_nft_metadata("0xnothing") is None

    @pytest.mark.asyncio
    async def test_failure_raises_network_error(
        self, ledger: FakeLedger, fetcher: RaffleDetailFetcher
    ) -> None:
        ledger.failing_ids.add("0xnft")
        with pytest.raises(NetworkError, match="Failed to fetch NFT metadata"):
            await fetcher.get_nft_metadata("0xnft")


class TestParseRaffleRecord:
    def test_option_encodings(self) -> None:
        obj = raffle_object(
            "0x1",
            cost={"vec": ["1000"]},
            max_capacity={"vec": []},
            max_per_participant="5",
            winner={"vec": []},
            raffle_item_id={"id": "0xnft"},
        )

        record = parse_raffle_record(obj)

        assert record.entry_cost == 1000
        assert record.max_capacity is None
        assert record.max_per_participant == 5
        assert record.winner_address is None
        assert record.prize_item_id == "0xnft"
        assert record.operator_cap_id == "0xcap"

    def test_unwrap_option(self) -> None:
        assert unwrap_option(None) is None
        assert unwrap_option("7") == "7"
        assert unwrap_option({"vec": []}) is None
        assert unwrap_option({"vec": ["0xa"]}) == "0xa"
