"""Error taxonomy shared by the ingestion and read paths."""


class RankingError(Exception):
    """Base class for all ranking pipeline errors."""


class InvalidArgument(RankingError, ValueError):
    """Bad unit, range or request parameter. Never retried."""


class TransportFailure(RankingError):
    """Content-source or store I/O failed."""


class NotFound(RankingError):
    """Requested blob or key does not exist."""


class DecodeFailure(RankingError):
    """Stored payload exists but cannot be decoded."""


class ConfigurationError(RankingError):
    """A required deployment setting (bucket, table) is missing."""
