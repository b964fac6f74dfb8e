"""
Token Revocation using Redis.

Logout blacklists the presented JWT until it would have expired anyway.
Lookups fail open: if Redis is unreachable the token is treated as live.
"""

import logging
import redis.asyncio as redis
from globaltrack.app.core.config import settings

logger = logging.getLogger("globaltrack.auth")

# Redis key prefix for blacklisted tokens
TOKEN_BLACKLIST_PREFIX = "blacklist:token:"

redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)


async def ping_redis() -> bool:
    """Return True when Redis answers a PING."""
    try:
        return bool(await redis_client.ping())
    except Exception:
        return False


async def revoke_token(token: str, subject: str) -> bool:
    """
    Revoke a specific JWT token by adding it to the blacklist.

    Args:
        token: The JWT token string to revoke
        subject: Token subject, stored for auditing

    Returns:
        True if successfully revoked, False otherwise
    """
    try:
        ttl_seconds = settings.access_token_expire_minutes * 60
        await redis_client.setex(f"{TOKEN_BLACKLIST_PREFIX}{token}", ttl_seconds, subject)
        return True
    except Exception as e:
        logger.warning("Error revoking token for %s: %s", subject, e)
        return False


async def is_token_revoked(token: str) -> bool:
    """
    Check if a token has been revoked.

    Args:
        token: JWT token string to check

    Returns:
        True if token is revoked, False otherwise
    """
    try:
        exists = await redis_client.exists(f"{TOKEN_BLACKLIST_PREFIX}{token}")
        return exists > 0
    except Exception as e:
        logger.warning("Error checking token revocation: %s", e)
        return False
