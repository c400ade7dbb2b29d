from slowapi import Limiter
from slowapi.util import get_remote_address

DEFAULT_AUTH_RATE_LIMIT = "20/minute"


def create_limiter() -> Limiter:
    """Per-app limiter keyed on client address, with its own in-memory counters."""
    return Limiter(key_func=get_remote_address)
