"""
Tests for dashboard statistics.
"""

from datetime import datetime, timedelta, timezone

import pytest

from globaltrack.app.services.analytics import RECENT_LIMIT, AnalyticsService


def today_at_noon():
    now = datetime.now(timezone.utc)
    return now.replace(hour=12, minute=0, second=0, microsecond=0)


@pytest.mark.asyncio
async def test_dashboard_requires_auth(client):
    response = await client.get("/api/tracking/stats/dashboard")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_dashboard_on_empty_database(client, auth_headers):
    response = await client.get("/api/tracking/stats/dashboard", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data == {
        "totalTrackings": 0,
        "activeTrackings": 0,
        "deliveredTrackings": 0,
        "arrivingToday": 0,
        "statusStats": {},
        "recentTrackings": [],
    }


@pytest.mark.asyncio
async def test_dashboard_counts(client, auth_headers, create_shipment):
    await create_shipment()
    await create_shipment()
    await create_shipment(currentStatus="in-transit")
    await create_shipment(currentStatus="delivered")
    await create_shipment(currentStatus="cancelled")
    await create_shipment(currentStatus="on-hold")

    response = await client.get("/api/tracking/stats/dashboard", headers=auth_headers)

    data = response.json()["data"]
    assert data["totalTrackings"] == 6
    assert data["activeTrackings"] == 3
    assert data["deliveredTrackings"] == 1
    assert data["statusStats"] == {
        "processing": 2,
        "in-transit": 1,
        "delivered": 1,
        "cancelled": 1,
        "on-hold": 1,
    }


@pytest.mark.asyncio
async def test_arriving_today_excludes_delivered(client, auth_headers, create_shipment):
    noon = today_at_noon()
    await create_shipment(estimatedDelivery=noon.isoformat())
    await create_shipment(estimatedDelivery=noon.isoformat(), currentStatus="delayed")
    await create_shipment(estimatedDelivery=noon.isoformat(), currentStatus="delivered")
    await create_shipment(estimatedDelivery=(noon + timedelta(days=1)).isoformat())
    await create_shipment(estimatedDelivery=(noon - timedelta(days=1)).isoformat())

    response = await client.get("/api/tracking/stats/dashboard", headers=auth_headers)

    assert response.json()["data"]["arrivingToday"] == 2


@pytest.mark.asyncio
async def test_recent_trackings_newest_first(client, auth_headers, create_shipment):
    created = [await create_shipment() for _ in range(RECENT_LIMIT + 2)]

    response = await client.get("/api/tracking/stats/dashboard", headers=auth_headers)

    recent = response.json()["data"]["recentTrackings"]
    assert [s["id"] for s in recent] == [s["id"] for s in reversed(created)][:RECENT_LIMIT]


@pytest.mark.asyncio
async def test_arriving_today_uses_reference_time(db_session, create_shipment):
    await create_shipment(estimatedDelivery="2026-05-20T23:30:00Z")

    on_the_day = await AnalyticsService.get_dashboard_stats(
        db_session, now=datetime(2026, 5, 20, 1, 0, tzinfo=timezone.utc)
    )
    day_after = await AnalyticsService.get_dashboard_stats(
        db_session, now=datetime(2026, 5, 21, 1, 0, tzinfo=timezone.utc)
    )

    assert on_the_day.arriving_today == 1
    assert day_after.arriving_today == 0
