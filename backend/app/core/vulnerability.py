from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field

from app.core.records import (
    ProductRecord,
    ShipmentRecord,
    SupplierRecord,
    SupplyChainSnapshot,
)
from app.models.product import RiskLevel
from app.models.shipment import ShipmentStatus, ShippingMethod
from app.models.supplier import SupplierStatus

# A node is a chokepoint when it carries at least this many distinct routes
# and at least this share of all routes.
CHOKEPOINT_MIN_ROUTES = 2
CHOKEPOINT_MIN_SHARE = 0.3

NODE_TYPES = ("shipment", "product", "supplier")


def _level_from_score(score: float) -> str:
    if score >= 75:
        return "critical"
    if score >= 50:
        return "high"
    if score >= 25:
        return "medium"
    return "low"


def _clamp_score(v: float) -> float:
    return min(100.0, max(0.0, float(v)))


def _risk_points(level: str, high: float, medium: float) -> float:
    if level == RiskLevel.HIGH:
        return high
    if level == RiskLevel.MEDIUM:
        return medium
    return 0.0


def _delay_frequency(shipments: list[ShipmentRecord]) -> float:
    if not shipments:
        return 0.0
    troubled = sum(
        1
        for s in shipments
        if s.status in (ShipmentStatus.DELAYED, ShipmentStatus.STUCK)
    )
    return troubled / len(shipments)


def _value_share(value: float, total: float) -> float:
    return value / total if total > 0 else 0.0


def _norm(name: str) -> str:
    return (name or "").strip().lower()


def _suppliers_by_category(products: list[ProductRecord]) -> dict[str, set[str]]:
    by_category: dict[str, set[str]] = defaultdict(set)
    for p in products:
        by_category[_norm(p.category)].add(_norm(p.supplier))
    return by_category


@dataclass
class VulnerabilityScore:
    node_id: str
    node_type: str
    node_name: str
    risk_score: float
    risk_level: str
    factors: dict[str, float] = field(default_factory=dict)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "nodeId": self.node_id,
            "nodeType": self.node_type,
            "nodeName": self.node_name,
            "riskScore": self.risk_score,
            "riskLevel": self.risk_level,
            "factors": self.factors,
            "recommendations": self.recommendations,
        }


def _shipment_factors(
    shipment: ShipmentRecord, ctx: SupplyChainSnapshot
) -> dict[str, float]:
    status_points = {
        ShipmentStatus.STUCK.value: 40.0,
        ShipmentStatus.DELAYED.value: 25.0,
    }.get(shipment.status, 0.0)
    product_level = shipment.product.risk_level if shipment.product else ""
    return {
        "status": status_points,
        "valueConcentration": _value_share(shipment.total_value or 0, ctx.total_value)
        * 30,
        "productRisk": _risk_points(product_level, 20, 10),
        "expressMethod": 10.0
        if shipment.shipping_method == ShippingMethod.EXPRESS
        else 0.0,
    }


def _product_factors(
    product: ProductRecord, ctx: SupplyChainSnapshot
) -> dict[str, float]:
    own = [s for s in ctx.shipments if s.product and s.product.id == product.id]
    own_value = sum(s.total_value or 0 for s in own)
    category_suppliers = _suppliers_by_category(ctx.products).get(
        _norm(product.category), set()
    )
    return {
        "delayFrequency": _delay_frequency(own) * 40,
        "valueConcentration": _value_share(own_value, ctx.total_value) * 20,
        "riskLevel": _risk_points(product.risk_level, 25, 12),
        "singleSource": 15.0 if len(category_suppliers) <= 1 else 0.0,
    }


def _supplier_factors(
    supplier: SupplierRecord, ctx: SupplyChainSnapshot
) -> dict[str, float]:
    name = _norm(supplier.name)
    own = [s for s in ctx.shipments if s.product and _norm(s.product.supplier) == name]
    rating = min(5.0, max(0.0, supplier.rating))
    status_points = {
        SupplierStatus.INACTIVE.value: 10.0,
        SupplierStatus.PENDING.value: 5.0,
    }.get(supplier.status, 0.0)

    sole_categories = 0
    supplied_categories = 0
    for category, names in _suppliers_by_category(ctx.products).items():
        if name in names:
            supplied_categories += 1
            if len(names) == 1:
                sole_categories += 1
    sole_share = sole_categories / supplied_categories if supplied_categories else 0.0

    return {
        "ratingDeficit": (5.0 - rating) / 5.0 * 30,
        "riskLevel": _risk_points(supplier.risk_level, 25, 12),
        "delayFrequency": _delay_frequency(own) * 25,
        "status": status_points,
        "singleSource": sole_share * 10,
    }


_RECOMMENDATIONS = {
    "status": "Escalate open shipment issues with the carrier",
    "valueConcentration": "Spread high-value volume across more shipments or lanes",
    "productRisk": "Add quality checks for high-risk products in transit",
    "expressMethod": "Confirm express service guarantees with the carrier",
    "delayFrequency": "Review carrier and lane performance for repeated delays",
    "riskLevel": "Run a formal risk review and agree mitigation actions",
    "singleSource": "Qualify an alternative supplier for this category",
    "ratingDeficit": "Schedule a supplier performance review",
}


def calculate_vulnerability_score(
    node_id: str,
    node_type: str,
    node_name: str,
    entity: ShipmentRecord | ProductRecord | SupplierRecord,
    ctx: SupplyChainSnapshot,
) -> VulnerabilityScore:
    if node_type == "shipment":
        factors = _shipment_factors(entity, ctx)
    elif node_type == "product":
        factors = _product_factors(entity, ctx)
    elif node_type == "supplier":
        factors = _supplier_factors(entity, ctx)
    else:
        raise ValueError(f"Unknown node type: {node_type}")

    factors = {k: round(v, 1) for k, v in factors.items()}
    score = round(_clamp_score(sum(factors.values())), 1)
    recommendations = [
        _RECOMMENDATIONS[k]
        for k, v in sorted(factors.items(), key=lambda kv: kv[1], reverse=True)
        if v > 0
    ][:3]
    return VulnerabilityScore(
        node_id=node_id,
        node_type=node_type,
        node_name=node_name,
        risk_score=score,
        risk_level=_level_from_score(score),
        factors=factors,
        recommendations=recommendations,
    )


def find_chokepoints(shipments: list[ShipmentRecord]) -> list[dict]:
    """Rank origin, destination and carrier nodes by distinct routes through them."""
    routes_by_node: dict[tuple[str, str], set[tuple[str, str]]] = defaultdict(set)
    labels: dict[tuple[str, str], str] = {}
    all_routes: set[tuple[str, str]] = set()

    for s in shipments:
        route = (_norm(s.origin), _norm(s.destination))
        all_routes.add(route)
        for kind, label in (
            ("origin", s.origin),
            ("destination", s.destination),
            ("carrier", s.carrier or ""),
        ):
            if not label:
                continue
            key = (kind, _norm(label))
            routes_by_node[key].add(route)
            labels.setdefault(key, label)

    total = len(all_routes)
    chokepoints = []
    for key, routes in routes_by_node.items():
        share = len(routes) / total if total else 0.0
        if len(routes) >= CHOKEPOINT_MIN_ROUTES and share >= CHOKEPOINT_MIN_SHARE:
            chokepoints.append(
                {
                    "node": labels[key],
                    "nodeKind": key[0],
                    "routeCount": len(routes),
                    "routeShare": round(share * 100, 1),
                }
            )
    chokepoints.sort(key=lambda c: (c["routeCount"], c["node"]), reverse=True)
    return chokepoints


def find_single_source_risks(
    products: list[ProductRecord], suppliers: list[SupplierRecord]
) -> list[dict]:
    risks = []
    for category, names in sorted(_suppliers_by_category(products).items()):
        if len(names) == 1:
            supplier_name = next(
                p.supplier for p in products if _norm(p.category) == category
            )
            risks.append(
                {
                    "type": "single_supplier_category",
                    "category": category,
                    "supplier": supplier_name,
                }
            )

    known = {_norm(s.name) for s in suppliers}
    for p in products:
        if _norm(p.supplier) not in known:
            risks.append(
                {
                    "type": "unregistered_supplier",
                    "productId": p.id,
                    "productName": p.name,
                    "supplier": p.supplier,
                }
            )
    return risks


def analyze_network_vulnerabilities(ctx: SupplyChainSnapshot) -> dict:
    chokepoints = find_chokepoints(ctx.shipments)
    single_source = find_single_source_risks(ctx.products, ctx.suppliers)

    total_nodes = len(ctx.shipments) + len(ctx.products) + len(ctx.suppliers)
    network_score = _clamp_score(
        len(chokepoints) * 10
        + len(single_source) * 5
        + _delay_frequency(ctx.shipments) * 40
    )

    recommendations: list[str] = []
    if chokepoints:
        recommendations.append(
            f"Add alternative lanes around {chokepoints[0]['node']}"
        )
    if single_source:
        recommendations.append("Qualify secondary suppliers for single-source categories")
    if _delay_frequency(ctx.shipments) > 0.25:
        recommendations.append("Investigate lanes with recurring delays")
    if not recommendations:
        recommendations.append("No structural weaknesses detected; keep monitoring")

    return {
        "chokepoints": chokepoints,
        "singleSourceRisks": single_source,
        "networkRiskScore": round(network_score, 1),
        "networkRiskLevel": _level_from_score(network_score),
        "totalNodes": total_nodes,
        "recommendations": recommendations,
    }
