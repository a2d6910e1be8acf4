class MarketplaceError(Exception):
    """Base exception for marketplace backend errors."""


class InvalidRequestingUserError(MarketplaceError, ValueError):
    """Conversations were requested without a usable user id."""


class NotFoundError(MarketplaceError, LookupError):
    """A referenced user or listing does not exist."""
