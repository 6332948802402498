from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.api.responses import envelope
from app.core.vulnerability import (
    analyze_network_vulnerabilities,
    calculate_vulnerability_score,
)
from app.database import get_db
from app.models.user import User
from app.services.snapshot import load_snapshot

router = APIRouter(prefix="/vulnerabilities", tags=["vulnerabilities"])

SCORED_PER_TYPE = 5


@router.get("")
def get_vulnerabilities(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    ctx = load_snapshot(db, user.id)
    network = analyze_network_vulnerabilities(ctx)

    scores = []
    for s in ctx.shipments[:SCORED_PER_TYPE]:
        label = f"Shipment {s.tracking_number or s.id}"
        scores.append(calculate_vulnerability_score(s.id, "shipment", label, s, ctx))
    for p in ctx.products[:SCORED_PER_TYPE]:
        scores.append(calculate_vulnerability_score(p.id, "product", p.name, p, ctx))
    for s in ctx.suppliers[:SCORED_PER_TYPE]:
        scores.append(calculate_vulnerability_score(s.id, "supplier", s.name, s, ctx))

    average = sum(v.risk_score for v in scores) / len(scores) if scores else 0
    return envelope(
        {
            "vulnerabilities": [v.to_dict() for v in scores],
            "networkAnalysis": network,
            "summary": {
                "totalVulnerabilities": len(scores),
                "averageRiskScore": round(average, 1),
                "criticalVulnerabilities": sum(
                    1 for v in scores if v.risk_level == "critical"
                ),
                "chokepoints": len(network["chokepoints"]),
                "singleSourceRisks": len(network["singleSourceRisks"]),
            },
        },
        "Vulnerability analysis completed successfully",
    )
