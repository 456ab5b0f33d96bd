from __future__ import annotations

import os
from dataclasses import dataclass
from dotenv import load_dotenv

from .errors import ConfigurationError
from .project_constants import (
    DEFAULT_NETWORK,
    FULLNODE_URLS,
    HOUSE_IDS,
    PACKAGE_IDS,
    RAFFLE_MODULE,
    SUPPORTED_NETWORKS,
)


@dataclass(frozen=True)
class Settings:
    network: str
    rpc_url: str
    package_id: str
    house_id: str
    raffle_module: str = RAFFLE_MODULE
    max_event_pages: int = 10
    max_owned_pages: int = 5
    timeout_s: float = 60.0

    @staticmethod
    def for_network(network: str, rpc_url: str | None = None) -> "Settings":
        """Settings from the built-in deployment tables, no environment lookup."""
        if network not in SUPPORTED_NETWORKS:
            raise ConfigurationError(f"Unsupported network: {network}")

        package_id = PACKAGE_IDS[network]
        house_id = HOUSE_IDS[network]
        if not package_id:
            raise ConfigurationError(f"Package ID not available for network: {network}")
        if not house_id:
            raise ConfigurationError(f"House ID not available for network: {network}")

        return Settings(
            network=network,
            rpc_url=rpc_url or FULLNODE_URLS[network],
            package_id=package_id,
            house_id=house_id,
        )

    @staticmethod
    def from_env(
        network: str | None = None,
        rpc_url_override: str | None = None,
    ) -> "Settings":
        load_dotenv()

        network = network or os.getenv("DRIPS_NETWORK", "").strip() or DEFAULT_NETWORK
        if network not in SUPPORTED_NETWORKS:
            raise ConfigurationError(
                f"Unsupported network {network!r}; expected one of {', '.join(SUPPORTED_NETWORKS)}"
            )

        # If user provides --rpc-url, trust it.
        rpc_url = rpc_url_override or os.getenv("SUI_RPC_URL", "").strip()
        if not rpc_url:
            rpc_url = FULLNODE_URLS[network]

        package_id = os.getenv("DRIPS_PACKAGE_ID", "").strip() or PACKAGE_IDS[network]
        house_id = os.getenv("DRIPS_HOUSE_ID", "").strip() or HOUSE_IDS[network]
        if not package_id:
            raise ConfigurationError(
                f"Missing DRIPS_PACKAGE_ID for {network}. Put it in .env or export it."
            )
        if not house_id:
            raise ConfigurationError(
                f"Missing DRIPS_HOUSE_ID for {network}. Put it in .env or export it."
            )

        return Settings(
            network=network,
            rpc_url=rpc_url,
            package_id=package_id,
            house_id=house_id,
        )
