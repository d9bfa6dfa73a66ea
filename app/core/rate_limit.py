"""Rate limiting for the claims API."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

# In-memory storage is per process; point RATE_LIMIT_STORAGE_URI at Redis
# when running more than one worker.
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.RATE_LIMIT_ENABLED,
)
