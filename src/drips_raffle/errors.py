from __future__ import annotations


class DripsError(Exception):
    """Base class for all raffle client errors."""

    code: str | None = None

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class ConfigurationError(DripsError, RuntimeError):
    """Raised when network, package or house identifiers cannot be resolved."""

    code = "CONFIGURATION_ERROR"


class RaffleNotFoundError(DripsError, LookupError):
    """Raised when a raffle object does not exist or has no structured fields."""

    code = "RAFFLE_NOT_FOUND"

    def __init__(self, raffle_id: str) -> None:
        super().__init__(f"Raffle not found: {raffle_id}")
        self.raffle_id = raffle_id


class InvalidRaffleStateError(DripsError, RuntimeError):
    """Raised when the derived raffle status forbids the requested operation."""

    code = "INVALID_RAFFLE_STATE"


class NetworkError(DripsError, RuntimeError):
    """
    Raised when a ledger query fails for transport or parsing reasons.

    The underlying exception is chained as ``__cause__``.
    """

    code = "NETWORK_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(f"Network error: {message}")
