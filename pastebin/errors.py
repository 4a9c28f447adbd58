"""
Error taxonomy for the paste lifecycle engine.

Client errors describe bad input or a missing/expired paste and map to 4xx
responses. Server errors describe infrastructure trouble and map to 5xx.
"""


class PasteError(Exception):
    """Base class for all paste store errors."""


class ClientError(PasteError):
    """Expected outcome caused by the caller's input."""


class ServerError(PasteError):
    """Infrastructure failure; callers may retry."""


class InvalidLength(ClientError):
    """Requested slug length is below the minimum."""


class EmptyText(ClientError):
    """Attempt to create a paste with no content."""


class InvalidTTL(ClientError):
    """Time-to-live is outside the representable range."""


class NotFound(ClientError):
    """No paste is stored under the slug."""


class Expired(ClientError):
    """The paste exists but is past its expiry."""


class SlugExhausted(ServerError):
    """Every generated slug collided with an existing paste."""


class StorageUnavailable(ServerError):
    """The backing store could not be reached."""
