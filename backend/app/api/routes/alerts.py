from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.api.responses import envelope
from app.core.alerts import calculate_alert_summary, generate_alerts
from app.database import get_db
from app.models.user import User
from app.services.snapshot import load_snapshot

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.get("")
def list_alerts(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    alerts = generate_alerts(load_snapshot(db, user.id).shipments)
    return envelope(
        {
            "alerts": [a.to_dict() for a in alerts],
            "summary": calculate_alert_summary(alerts),
        }
    )
