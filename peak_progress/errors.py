class ClimbLogError(Exception):
    pass


class LoadFailure(ClimbLogError):
    """Persisted climb data is missing, unreadable or not a JSON object."""


class WriteFailure(ClimbLogError):
    """The store rejected a write; the in-memory log stays authoritative."""
