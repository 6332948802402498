"""Rule-based alert generation for in-flight shipments."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from app.core.records import ShipmentRecord
from app.models.product import RiskLevel as ProductRiskLevel
from app.models.shipment import ShipmentStatus, ShippingMethod

_SECONDS_PER_DAY = 24 * 60 * 60

HIGH_VALUE_THRESHOLD = 10_000
EXTENDED_DELAY_DAYS = 7
MODERATE_DELAY_DAYS = 3
LEAD_TIME_DELAY_RATIO = 0.5

LOW = "Low"
MEDIUM = "Medium"
HIGH = "High"

_RISK_RANK = {LOW: 1, MEDIUM: 2, HIGH: 3}

_SUGGESTIONS: dict[str, list[str]] = {
    "extended_delay": [
        "Consider alternate supplier for future orders",
        "Expedite shipping method",
        "Communicate with customer about delay",
        "Investigate supply chain bottlenecks",
        "Review carrier performance and consider alternatives",
    ],
    "moderate_delay": [
        "Monitor closely for further delays",
        "Contact shipping provider for updates",
        "Prepare customer communication",
        "Check for weather or route issues",
    ],
    "minor_delay": [
        "Continue monitoring",
        "Check with logistics provider",
        "Verify tracking information",
    ],
    "stuck_shipment": [
        "Check customs clearance documentation",
        "Contact customs broker",
        "Review import/export compliance",
        "Consider alternate routing for future shipments",
        "Escalate to logistics manager",
        "Verify all required permits and licenses",
    ],
    "high_value": [
        "Consider additional insurance coverage",
        "Implement enhanced tracking and monitoring",
    ],
    "express_shipping": ["Verify express service guarantees"],
    "multiple_risk_factors": ["Review and address identified risk factors"],
    "international_shipment": [
        "Monitor customs and border clearance",
        "Verify international shipping documentation",
    ],
    "high_risk_product": [
        "Implement additional quality checks",
        "Consider supplier diversification",
    ],
    "significant_lead_time_delay": ["Review supplier lead time commitments"],
}

_FLOORS: dict[str, str] = {
    "extended_delay": HIGH,
    "moderate_delay": MEDIUM,
    "minor_delay": LOW,
    "stuck_shipment": HIGH,
    "high_value": MEDIUM,
    "express_shipping": MEDIUM,
    "multiple_risk_factors": MEDIUM,
    "international_shipment": MEDIUM,
    "high_risk_product": MEDIUM,
    "significant_lead_time_delay": MEDIUM,
}


@dataclass
class Alert:
    shipment_id: str
    product_name: str
    status: str
    origin: str
    destination: str
    expected_delivery: datetime
    risk_level: str
    days_overdue: int
    risk_factors: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "shipmentId": self.shipment_id,
            "productName": self.product_name,
            "status": self.status,
            "origin": self.origin,
            "destination": self.destination,
            "expectedDelivery": self.expected_delivery.isoformat(),
            "riskLevel": self.risk_level,
            "daysOverdue": self.days_overdue,
            "riskFactors": self.risk_factors,
            "suggestions": self.suggestions,
        }


def days_overdue(expected_delivery: datetime, now: datetime) -> int:
    """Whole days past the expected delivery, rounded up (negative when early)."""
    return math.ceil((now - expected_delivery).total_seconds() / _SECONDS_PER_DAY)


def escalate(current: str, floor: str) -> str:
    return floor if _RISK_RANK[floor] > _RISK_RANK[current] else current


def _is_international(shipment: ShipmentRecord) -> bool:
    return shipment.origin != shipment.destination and (
        "," in shipment.origin or "," in shipment.destination
    )


def detect_risk_factors(shipment: ShipmentRecord, overdue: int) -> list[str]:
    factors: list[str] = []

    if shipment.status == ShipmentStatus.DELAYED:
        if overdue > EXTENDED_DELAY_DAYS:
            factors.append("extended_delay")
        elif overdue > MODERATE_DELAY_DAYS:
            factors.append("moderate_delay")
        else:
            factors.append("minor_delay")

    if shipment.status == ShipmentStatus.STUCK:
        factors.append("stuck_shipment")

    if shipment.total_value and shipment.total_value > HIGH_VALUE_THRESHOLD:
        factors.append("high_value")

    if shipment.shipping_method == ShippingMethod.EXPRESS:
        factors.append("express_shipping")

    if len(shipment.risk_factors) > 2:
        factors.append("multiple_risk_factors")

    if _is_international(shipment):
        factors.append("international_shipment")

    product = shipment.product
    if product is not None:
        if product.risk_level == ProductRiskLevel.HIGH:
            factors.append("high_risk_product")
        if product.lead_time and overdue / product.lead_time > LEAD_TIME_DELAY_RATIO:
            factors.append("significant_lead_time_delay")

    return factors


def build_alert(shipment: ShipmentRecord, now: datetime) -> Alert | None:
    if shipment.status == ShipmentStatus.DELIVERED:
        return None

    overdue = days_overdue(shipment.expected_delivery, now)
    factors = detect_risk_factors(shipment, overdue)

    in_trouble = shipment.status in (ShipmentStatus.DELAYED, ShipmentStatus.STUCK)
    if not in_trouble and not factors:
        return None

    risk_level = LOW
    suggestions: list[str] = []
    for factor in factors:
        risk_level = escalate(risk_level, _FLOORS[factor])
        suggestions.extend(_SUGGESTIONS[factor])

    return Alert(
        shipment_id=shipment.id,
        product_name=shipment.product.name if shipment.product else "Unknown Product",
        status=shipment.status,
        origin=shipment.origin,
        destination=shipment.destination,
        expected_delivery=shipment.expected_delivery,
        risk_level=risk_level,
        days_overdue=overdue,
        risk_factors=factors,
        suggestions=list(dict.fromkeys(suggestions)),
    )


def generate_alerts(
    shipments: Iterable[ShipmentRecord], now: datetime | None = None
) -> list[Alert]:
    """Return alerts ordered by risk level, then by days overdue (both descending)."""
    now = now or datetime.utcnow()
    alerts = [a for a in (build_alert(s, now) for s in shipments) if a is not None]
    alerts.sort(key=lambda a: (_RISK_RANK[a.risk_level], a.days_overdue), reverse=True)
    return alerts


def calculate_alert_summary(alerts: list[Alert]) -> dict[str, int]:
    return {
        "total": len(alerts),
        "high": sum(1 for a in alerts if a.risk_level == HIGH),
        "medium": sum(1 for a in alerts if a.risk_level == MEDIUM),
        "low": sum(1 for a in alerts if a.risk_level == LOW),
    }
