"""
Tracking ID generation.

Tracking IDs look like ``GT-7K2M9QX4AB``: the ``GT-`` prefix followed by ten
symbols drawn uniformly (with replacement) from 0-9A-Z, a space of 36**10.
"""

import logging
import random
import re
import string
from typing import Callable, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from globaltrack.app.core.exceptions import TrackingIdGenerationError
from globaltrack.app.models.shipment import Shipment

logger = logging.getLogger("globaltrack.tracking_id")

TRACKING_ID_PREFIX = "GT-"
TRACKING_ID_ALPHABET = string.digits + string.ascii_uppercase
TRACKING_ID_LENGTH = 10
MAX_GENERATION_ATTEMPTS = 5

TRACKING_ID_PATTERN = re.compile(r"^GT-[0-9A-Z]{10}$")


def is_valid_tracking_id(value: str) -> bool:
    return bool(TRACKING_ID_PATTERN.match(value))


def make_tracking_id(rng: Optional[random.Random] = None) -> str:
    """Build one random candidate. Not cryptographically secure."""
    rng = rng or random
    return TRACKING_ID_PREFIX + "".join(rng.choices(TRACKING_ID_ALPHABET, k=TRACKING_ID_LENGTH))


async def tracking_id_exists(db: AsyncSession, tracking_id: str) -> bool:
    result = await db.execute(
        select(Shipment.id).where(Shipment.tracking_id == tracking_id)
    )
    return result.first() is not None


async def generate_unique_tracking_id(
    db: AsyncSession,
    max_attempts: int = MAX_GENERATION_ATTEMPTS,
    make_candidate: Callable[[], str] = make_tracking_id,
) -> str:
    """
    Return a tracking ID not yet used by any stored shipment.

    Args:
        db: Database session used for the uniqueness lookup
        max_attempts: Number of candidates to try before giving up
        make_candidate: Candidate factory

    Raises:
        TrackingIdGenerationError: every candidate collided with a stored shipment
    """
    for attempt in range(1, max_attempts + 1):
        candidate = make_candidate()
        if not await tracking_id_exists(db, candidate):
            return candidate
        logger.warning(
            "Tracking ID %s already exists, generating a new one (attempt %d/%d)",
            candidate, attempt, max_attempts
        )

    raise TrackingIdGenerationError(attempts=max_attempts)
