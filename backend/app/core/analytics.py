"""Aggregates behind the analytics page, its Excel export and the dashboard cards."""

from __future__ import annotations

from datetime import datetime, timedelta

from app.core.alerts import HIGH, generate_alerts
from app.core.records import ProductRecord, ShipmentRecord, SupplierRecord
from app.models.product import RiskLevel
from app.models.shipment import ShipmentStatus
from app.models.supplier import SupplierStatus

TIME_RANGES = {"7d": 7, "30d": 30, "90d": 90, "1y": 365}
DEFAULT_TIME_RANGE = "30d"
TREND_MONTHS = 12
TOP_N = 5


def range_start(time_range: str, now: datetime) -> datetime:
    return now - timedelta(days=TIME_RANGES.get(time_range, TIME_RANGES[DEFAULT_TIME_RANGE]))


def _in_range(created_at: datetime | None, start: datetime) -> bool:
    return created_at is not None and created_at >= start


def _pct(part: float, whole: float) -> float:
    return part / whole * 100 if whole else 0.0


def _status_bucket() -> dict:
    return {"total": 0, "onTime": 0, "delayed": 0, "stuck": 0}


def _count_status(bucket: dict, status: str) -> None:
    bucket["total"] += 1
    if status == ShipmentStatus.ON_TIME:
        bucket["onTime"] += 1
    elif status == ShipmentStatus.DELAYED:
        bucket["delayed"] += 1
    elif status == ShipmentStatus.STUCK:
        bucket["stuck"] += 1


def _month_starts(now: datetime, count: int) -> list[datetime]:
    starts = []
    for i in range(count - 1, -1, -1):
        y, m = divmod(now.year * 12 + now.month - 1 - i, 12)
        starts.append(datetime(y, m + 1, 1))
    return starts


def _next_month(d: datetime) -> datetime:
    return datetime(d.year + d.month // 12, d.month % 12 + 1, 1)


def _supplier_stat(s: SupplierRecord) -> dict:
    return {
        "name": s.name,
        "rating": s.rating,
        "status": s.status,
        "riskLevel": s.risk_level,
        "leadTime": s.lead_time,
        "specialties": len(s.specialties),
    }


def build_analytics(
    shipments: list[ShipmentRecord],
    products: list[ProductRecord],
    suppliers: list[SupplierRecord],
    time_range: str = DEFAULT_TIME_RANGE,
    now: datetime | None = None,
) -> dict:
    now = now or datetime.utcnow()
    if time_range not in TIME_RANGES:
        time_range = DEFAULT_TIME_RANGE
    start = range_start(time_range, now)

    shipments = [s for s in shipments if _in_range(s.created_at, start)]
    products = [p for p in products if _in_range(p.created_at, start)]
    suppliers = [s for s in suppliers if _in_range(s.created_at, start)]

    total_revenue = sum(s.total_value or 0 for s in shipments)
    on_time = sum(1 for s in shipments if s.status == ShipmentStatus.ON_TIME)
    avg_lead_time = (
        sum(p.lead_time or 0 for p in products) / len(products) if products else 0
    )
    total_cost = sum(p.unit_cost for p in products)
    cost_efficiency = _pct(total_revenue - total_cost, total_revenue)

    method_stats: dict[str, dict] = {}
    route_stats: dict[str, dict] = {}
    for s in shipments:
        method = s.shipping_method or "Unknown"
        _count_status(method_stats.setdefault(method, _status_bucket()), s.status)

        route = f"{s.origin} → {s.destination}"
        bucket = route_stats.setdefault(route, {**_status_bucket(), "totalValue": 0.0})
        _count_status(bucket, s.status)
        bucket["totalValue"] += s.total_value or 0

    supplier_stats = [_supplier_stat(s) for s in suppliers]

    monthly_trends = []
    for month_start in _month_starts(now, TREND_MONTHS):
        month_end = _next_month(month_start)
        in_month = [
            s
            for s in shipments
            if s.created_at is not None and month_start <= s.created_at < month_end
        ]
        monthly_trends.append(
            {
                "month": month_start.strftime("%b %Y"),
                "revenue": sum(s.total_value or 0 for s in in_month),
                "onTimeRate": _pct(
                    sum(1 for s in in_month if s.status == ShipmentStatus.ON_TIME),
                    len(in_month),
                ),
                "totalShipments": len(in_month),
            }
        )

    risk_analysis = {
        "highRiskShipments": sum(1 for s in shipments if s.status == ShipmentStatus.STUCK),
        "mediumRiskShipments": sum(
            1 for s in shipments if s.status == ShipmentStatus.DELAYED
        ),
        "lowRiskShipments": on_time,
        "highRiskProducts": sum(1 for p in products if p.risk_level == RiskLevel.HIGH),
        "highRiskSuppliers": sum(1 for s in suppliers if s.risk_level == RiskLevel.HIGH),
    }

    top_routes = sorted(
        (
            {
                "route": route,
                "onTimeRate": _pct(stats["onTime"], stats["total"]),
                "totalValue": stats["totalValue"],
                "totalShipments": stats["total"],
            }
            for route, stats in route_stats.items()
        ),
        key=lambda r: r["onTimeRate"],
        reverse=True,
    )[:TOP_N]

    top_suppliers = sorted(
        (s for s in supplier_stats if s["status"] == SupplierStatus.ACTIVE),
        key=lambda s: s["rating"],
        reverse=True,
    )[:TOP_N]

    return {
        "keyMetrics": {
            "totalRevenue": total_revenue,
            "onTimeRate": round(_pct(on_time, len(shipments)), 2),
            "avgLeadTime": round(avg_lead_time),
            "costEfficiency": round(cost_efficiency, 2),
            "totalShipments": len(shipments),
            "activeProducts": len(products),
            "activeSuppliers": sum(
                1 for s in suppliers if s.status == SupplierStatus.ACTIVE
            ),
        },
        "shippingMethodStats": method_stats,
        "geographicStats": route_stats,
        "supplierStats": supplier_stats,
        "monthlyTrends": monthly_trends,
        "riskAnalysis": risk_analysis,
        "topRoutes": top_routes,
        "topSuppliers": top_suppliers,
        "timeRange": time_range,
    }


def _delivery_deviation_days(s: ShipmentRecord, now: datetime) -> float:
    reference = s.actual_delivery or now
    return abs((reference - s.expected_delivery).total_seconds()) / 86400


def build_dashboard_stats(
    shipments: list[ShipmentRecord],
    products: list[ProductRecord],
    suppliers: list[SupplierRecord],
    now: datetime | None = None,
) -> dict:
    now = now or datetime.utcnow()
    total = len(shipments)

    on_time = sum(
        1
        for s in shipments
        if s.status in (ShipmentStatus.ON_TIME, ShipmentStatus.DELIVERED)
    )
    delayed = sum(1 for s in shipments if s.status == ShipmentStatus.DELAYED)
    in_transit = sum(1 for s in shipments if s.status == ShipmentStatus.STUCK)
    total_value = sum(s.total_value or 0 for s in shipments)
    avg_deviation = (
        sum(_delivery_deviation_days(s, now) for s in shipments) / total if total else 0.0
    )
    high_risk_suppliers = sum(1 for s in suppliers if s.risk_level == RiskLevel.HIGH)
    active_alerts = sum(
        1 for a in generate_alerts(shipments, now) if a.risk_level == HIGH
    )

    risk_score = (
        (delayed / total * 30 if total else 0)
        + (high_risk_suppliers / len(suppliers) * 25 if suppliers else 0)
        + active_alerts * 5
        + ((total - on_time) / total * 20 if total else 0)
    )
    risk_score = min(100.0, max(0.0, risk_score))

    return {
        "totalShipments": total,
        "onTimeDeliveries": on_time,
        "delayedShipments": delayed,
        "inTransitShipments": in_transit,
        "totalValue": round(total_value),
        "averageDeliveryTime": round(avg_deviation, 1),
        "highRiskSuppliers": high_risk_suppliers,
        "totalProducts": len(products),
        "activeAlerts": active_alerts,
        "riskScore": round(risk_score),
        "onTimeDeliveryRate": round(_pct(on_time, total), 1),
        "averageOrderValue": round(total_value / total) if total else 0,
        "lastUpdated": now.isoformat(),
    }
