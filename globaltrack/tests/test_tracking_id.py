"""
Tests for tracking ID generation and its collision retry.
"""

import random
from datetime import datetime, timedelta, timezone

import pytest

from globaltrack.app.core.exceptions import TrackingIdGenerationError
from globaltrack.app.models.shipment import Shipment
from globaltrack.app.models.shipment_enums import ShipmentStatus, ShipmentType
from globaltrack.app.services.tracking_id import (
    MAX_GENERATION_ATTEMPTS,
    TRACKING_ID_ALPHABET,
    TRACKING_ID_PATTERN,
    generate_unique_tracking_id,
    is_valid_tracking_id,
    make_tracking_id,
)

LOCATION = {"latitude": 0.0, "longitude": 0.0, "name": "Null Island"}
CONTACT = {"name": "Test", "email": "test@globaltrack.io", "phone": "1"}


async def store_shipment(db_session, tracking_id):
    now = datetime.now(timezone.utc)
    db_session.add(Shipment(
        tracking_id=tracking_id,
        shipment_type=ShipmentType.STANDARD,
        shipment_date=now,
        estimated_delivery=now + timedelta(days=2),
        weight=1.0,
        current_status=ShipmentStatus.PROCESSING,
        progress=10,
        sender=CONTACT,
        receiver=CONTACT,
        origin=LOCATION,
        destination=LOCATION,
        history=[],
    ))
    await db_session.commit()


def candidates(*values):
    """Candidate factory that hands out the given IDs in order and counts calls."""
    queue = list(values)

    def make():
        make.calls += 1
        return queue.pop(0)

    make.calls = 0
    return make


def test_make_tracking_id_format():
    for _ in range(200):
        assert TRACKING_ID_PATTERN.match(make_tracking_id())


def test_make_tracking_id_draws_from_full_alphabet():
    rng = random.Random(1234)
    seen = set()
    for _ in range(500):
        seen.update(make_tracking_id(rng)[3:])
    assert seen == set(TRACKING_ID_ALPHABET)


def test_make_tracking_id_uses_given_rng():
    assert make_tracking_id(random.Random(42)) == make_tracking_id(random.Random(42))
    assert make_tracking_id(None).startswith("GT-")


@pytest.mark.parametrize("value,valid", [
    ("GT-0123456789", True),
    ("GT-ABCDEFGHIJ", True),
    ("GT-abcdefghij", False),
    ("GT-123456789", False),
    ("GT-12345678901", False),
    ("XX-0123456789", False),
    ("GT-01234567-9", False),
])
def test_is_valid_tracking_id(value, valid):
    assert is_valid_tracking_id(value) is valid


@pytest.mark.asyncio
async def test_generate_returns_first_free_candidate(db_session):
    make = candidates("GT-AAAAAAAAAA")
    assert await generate_unique_tracking_id(db_session, make_candidate=make) == "GT-AAAAAAAAAA"
    assert make.calls == 1


@pytest.mark.asyncio
async def test_generate_retries_on_collision(db_session):
    await store_shipment(db_session, "GT-AAAAAAAAAA")
    await store_shipment(db_session, "GT-BBBBBBBBBB")

    make = candidates("GT-AAAAAAAAAA", "GT-BBBBBBBBBB", "GT-CCCCCCCCCC")
    assert await generate_unique_tracking_id(db_session, make_candidate=make) == "GT-CCCCCCCCCC"
    assert make.calls == 3


@pytest.mark.asyncio
async def test_generate_gives_up_after_retry_budget(db_session):
    await store_shipment(db_session, "GT-AAAAAAAAAA")

    make = candidates(*["GT-AAAAAAAAAA"] * (MAX_GENERATION_ATTEMPTS + 1))
    with pytest.raises(TrackingIdGenerationError) as exc_info:
        await generate_unique_tracking_id(db_session, make_candidate=make)

    assert make.calls == MAX_GENERATION_ATTEMPTS
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_generate_id_endpoint_requires_auth(client):
    response = await client.get("/api/tracking/generate-id")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_generate_id_endpoint(client, auth_headers):
    """The static route must not be captured by /{shipment_id}."""
    response = await client.get("/api/tracking/generate-id", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert TRACKING_ID_PATTERN.match(body["data"]["trackingId"])


@pytest.mark.asyncio
async def test_generation_failure_maps_to_server_error(client, auth_headers, shipment_payload, monkeypatch):
    import globaltrack.app.services.tracking as tracking_module

    async def exhausted(db):
        raise TrackingIdGenerationError(attempts=MAX_GENERATION_ATTEMPTS)

    monkeypatch.setattr(tracking_module, "generate_unique_tracking_id", exhausted)

    response = await client.post("/api/tracking/", json=shipment_payload(), headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to generate unique tracking ID"}
