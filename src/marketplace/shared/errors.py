"""Domain failures that Protean has no exception type for.

Validation failures use ``protean.exceptions.ValidationError`` and missing
records use ``protean.exceptions.ObjectNotFoundError``; everything else a
caller can be refused for is one of the classes below.
"""


class MarketplaceError(Exception):
    """Base class for refusals raised by the marketplace domain."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthenticated(MarketplaceError):
    """No caller identity could be resolved for the request."""

    status_code = 401


class Forbidden(MarketplaceError):
    """The caller lacks the role or the ownership the operation requires."""

    status_code = 403


class Conflict(MarketplaceError):
    """The operation clashes with the current state of a record."""

    status_code = 409


class Expired(MarketplaceError):
    """A deadline attached to the record has passed."""

    status_code = 410
