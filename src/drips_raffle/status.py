from __future__ import annotations

from .models import RaffleRecord, RaffleStatus


def derive_status(record: RaffleRecord, now_ms: int) -> RaffleStatus:
    """
    Lifecycle flags of a raffle at `now_ms`.

    A winner or a passed deadline is terminal regardless of the pause flag.
    Pure; recompute on every read.
    """
    is_past_deadline = now_ms >= record.deadline_ms
    has_winner = record.winner_address is not None
    is_active = not record.is_paused and not has_winner and now_ms < record.deadline_ms
    return RaffleStatus(
        is_active=is_active,
        is_ended=has_winner or is_past_deadline,
        has_winner=has_winner,
        is_past_deadline=is_past_deadline,
        is_paused=record.is_paused,
        # Same as is_active; kept as its own field for callers that test it.
        is_joinable=is_active and not record.is_paused,
    )


def describe_status(status: RaffleStatus) -> str:
    if status.has_winner:
        return "Winner Selected"
    if status.is_past_deadline:
        return "Expired"
    if status.is_paused:
        return "Paused"
    if status.is_active:
        return "Active"
    return "Unknown"


def needs_winner_selection(status: RaffleStatus, participants_count: int) -> bool:
    return status.is_past_deadline and not status.has_winner and participants_count > 0
