class DigestError(Exception):
    """Base class for daily digest errors."""


class FeedFetchError(DigestError):
    """Raised when a feed or API response cannot be fetched."""


class FeedParseError(DigestError):
    """Raised when a feed document cannot be parsed into records."""


class TranslationError(DigestError):
    """Raised when a translation provider fails or is misconfigured."""


class PublishError(DigestError):
    """Raised when the chat card cannot be delivered."""
