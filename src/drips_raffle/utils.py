from __future__ import annotations

import re
from datetime import datetime, timezone
from decimal import Decimal
from typing import Union

from .project_constants import MIST_PER_SUI

_SUI_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{64}$")
_RAFFLE_TYPE_RE = re.compile(r"Raffle<[^,]+,\s*(.+)>$")


def mist_to_sui(raw_amount: Union[int, str]) -> Decimal:
    return Decimal(int(raw_amount)) / Decimal(MIST_PER_SUI)


def sui_to_mist(sui_amount: Union[int, float, str, Decimal]) -> int:
    return int(Decimal(str(sui_amount)) * MIST_PER_SUI)


def format_sui_amount(raw_amount: Union[int, str]) -> str:
    """500000000 -> '0.5 SUI'"""
    return f"{format(mist_to_sui(raw_amount).normalize(), 'f')} SUI"


def format_deadline(deadline_ms: int) -> str:
    """Epoch millis as an ISO-8601 UTC string with millisecond precision."""
    dt = datetime.fromtimestamp(deadline_ms / 1000, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def time_remaining(deadline_ms: int, now_ms: int) -> str:
    diff = deadline_ms - now_ms
    if diff <= 0:
        return "Expired"

    minutes_total = diff // 60_000
    days, rem = divmod(minutes_total, 24 * 60)
    hours, minutes = divmod(rem, 60)
    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def shorten_address(address: str, prefix_length: int = 6, suffix_length: int = 4) -> str:
    if len(address) <= prefix_length + suffix_length:
        return address
    return f"{address[:prefix_length]}...{address[-suffix_length:]}"


def is_valid_sui_address(address: str) -> bool:
    return bool(_SUI_ADDRESS_RE.match(address))


def extract_nft_type(raffle_type: str) -> str:
    """
    '0x..::raffle::Raffle<0x2::sui::SUI, 0x..::nft::Nft>' -> '0x..::nft::Nft'

    Returns '' when the type is not a two-parameter Raffle.
    """
    m = _RAFFLE_TYPE_RE.search(raffle_type)
    return m.group(1).strip() if m else ""
