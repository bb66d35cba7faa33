"""Rate limiting shared by the whole API."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from jobbee.config import Config

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[Config.RATE_LIMIT],
    enabled=Config.RATE_LIMIT_ENABLED,
)
