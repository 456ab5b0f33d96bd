"""
Network-wide immutable parameters for the Drips raffle contracts.

These values identify the deployed package and house object on each network.
A redeployment changes them and MUST be reflected here.
"""

SUPPORTED_NETWORKS = ("testnet", "mainnet", "devnet")

DEFAULT_NETWORK = "testnet"

# Public Sui fullnodes
FULLNODE_URLS = {
    "testnet": "https://fullnode.testnet.sui.io:443",
    "mainnet": "https://fullnode.mainnet.sui.io:443",
    "devnet": "https://fullnode.devnet.sui.io:443",
}

# Raffle package per network (empty until deployed)
PACKAGE_IDS = {
    "testnet": "0xf1a54310356e2a90d896462e19ce926eae5903bce26bd4a37b7c8553b628f71d",
    "mainnet": "",
    "devnet": "",
}

# House object / address that owns raffle bookkeeping objects
HOUSE_IDS = {
    "testnet": "0x33940b0b58b225b6f3673608c16acca032ceb3107aa47204ee33fa6f827b0452",
    "mainnet": "",
    "devnet": "",
}

RAFFLE_MODULE = "raffle"

# SUI uses 9 decimals (1 SUI = 1e9 MIST)
SUI_DECIMALS = 9
MIST_PER_SUI = 10**SUI_DECIMALS

# Owned objects that can never be escrowed as a prize
SYSTEM_TYPE_DENYLIST = (
    "0x2::coin::Coin",
    "0x2::coin::TreasuryCap",
    "0x2::package::UpgradeCap",
    "0x2::kiosk::KioskOwnerCap",
    "0x3::staking_pool::StakedSui",
    "AdminCap",
    "OperatorCap",
)

NON_RAFFLABLE_KEYWORDS = (
    "Cap",
    "Authority",
    "Treasury",
    "Config",
    "Registry",
    "Witness",
    "Publisher",
    "TreasuryCap",
    "CoinMetadata",
)

NFT_FIELD_NAMES = ("name", "description", "url", "image_url", "metadata")
