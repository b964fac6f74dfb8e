"""
Dashboard analytics.

Read-only aggregate queries. Each count is computed on its own, so the
"active" count overlaps the per-status counts.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from globaltrack.app.models.shipment import Shipment
from globaltrack.app.models.shipment_enums import ACTIVE_STATUSES, ShipmentStatus
from globaltrack.app.schemas.shipment import DashboardStats, ShipmentResponse

RECENT_LIMIT = 5


class AnalyticsService:

    @staticmethod
    async def count_by_status(db: AsyncSession) -> Dict[str, int]:
        rows = await db.execute(
            select(Shipment.current_status, func.count(Shipment.id))
            .group_by(Shipment.current_status)
        )
        return {ShipmentStatus(status).value: count for status, count in rows.all()}

    @staticmethod
    async def get_dashboard_stats(db: AsyncSession, now: Optional[datetime] = None) -> DashboardStats:
        """Totals, per-status counts, today's arrivals and the newest shipments."""
        now = now or datetime.now(timezone.utc)
        today = now.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
        tomorrow = today + timedelta(days=1)

        status_stats = await AnalyticsService.count_by_status(db)

        total = (await db.execute(select(func.count(Shipment.id)))).scalar() or 0

        active = (await db.execute(
            select(func.count(Shipment.id)).where(Shipment.current_status.in_(ACTIVE_STATUSES))
        )).scalar() or 0

        delivered = (await db.execute(
            select(func.count(Shipment.id)).where(Shipment.current_status == ShipmentStatus.DELIVERED)
        )).scalar() or 0

        arriving_today = (await db.execute(
            select(func.count(Shipment.id)).where(
                Shipment.estimated_delivery >= today,
                Shipment.estimated_delivery < tomorrow,
                Shipment.current_status != ShipmentStatus.DELIVERED,
            )
        )).scalar() or 0

        recent = (await db.execute(
            select(Shipment)
            .order_by(Shipment.created_at.desc(), Shipment.id.desc())
            .limit(RECENT_LIMIT)
        )).scalars().all()

        return DashboardStats(
            total_trackings=total,
            active_trackings=active,
            delivered_trackings=delivered,
            arriving_today=arriving_today,
            status_stats=status_stats,
            recent_trackings=[ShipmentResponse.model_validate(s) for s in recent],
        )
