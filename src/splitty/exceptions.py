"""Custom exceptions for Splitty."""

from datetime import date


class SplittyError(Exception):
    """Base exception for all Splitty errors."""

    pass


class ConfigurationError(SplittyError):
    """Raised when configuration is invalid or missing."""

    pass


class ConversionUnavailable(SplittyError):
    """Raised when no exchange rate can be resolved for a date and currency pair."""

    def __init__(
        self,
        on: date,
        from_currency: str,
        to_currency: str,
        message: str | None = None,
    ):
        self.on = on
        self.from_currency = from_currency
        self.to_currency = to_currency
        super().__init__(
            message
            or f"No exchange rate available for {from_currency}->{to_currency} on {on}"
        )


class InvalidParticipantSet(SplittyError):
    """Raised when an allocation's participants are empty, duplicated or miss the payee."""

    pass


class InvalidAmount(SplittyError):
    """Raised when an amount is negative or cannot be parsed."""

    pass


class ParticipantNotFoundError(SplittyError):
    """Raised when a participant reference does not match anyone in the event."""

    def __init__(self, participant_ref: str | int, message: str | None = None):
        self.participant_ref = participant_ref
        super().__init__(message or f"No participant matches '{participant_ref}'")


class APIError(SplittyError):
    """Base class for API-related errors."""

    pass


class RatesAPIError(APIError):
    """Raised when the exchange-rate API response is unusable."""

    pass
