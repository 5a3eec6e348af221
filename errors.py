"""
Domain exceptions for the marketplace core.

Services raise these; routers translate them into HTTP responses.
"""


class MarketplaceError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class NotFoundError(MarketplaceError):
    """A referenced ambassador, brand or contract does not exist."""


class ValidationError(MarketplaceError):
    """Schema constraint violation (duplicate email, missing field, bad transition)."""


class NotOnboardedError(MarketplaceError):
    """The ambassador has no linked payout destination."""


class CsrfMismatchError(MarketplaceError):
    """The account-linking state token did not match the one stored in the session."""


class ProcessorError(MarketplaceError):
    """Any failure reported by the payment processor."""


class ExchangeError(ProcessorError):
    """The OAuth code exchange returned an error payload or could not be reached."""


class AlreadySettledError(MarketplaceError):
    """The contract has already been settled."""


class SettlementInProgressError(MarketplaceError):
    """Another request is currently settling the contract."""
