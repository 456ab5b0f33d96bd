import pytest

from drips_raffle.config import Settings
from drips_raffle.details import RaffleDetailFetcher
from drips_raffle.discovery import DiscoveryEngine
from tests.helpers.fakes import HOUSE_ID, NOW_MS, PACKAGE_ID, FakeLedger


@pytest.fixture
def settings() -> Settings:
    return Settings(
        network="testnet",
        rpc_url="http://localhost:9000",
        package_id=PACKAGE_ID,
        house_id=HOUSE_ID,
    )


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def fetcher(ledger: FakeLedger) -> RaffleDetailFetcher:
    return RaffleDetailFetcher(ledger, clock=lambda: NOW_MS)


@pytest.fixture
def engine(
    ledger: FakeLedger, settings: Settings, fetcher: RaffleDetailFetcher
) -> DiscoveryEngine:
    return DiscoveryEngine(ledger, settings, fetcher=fetcher)
