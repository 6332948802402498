from datetime import datetime

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.api.responses import envelope
from app.core.analytics import DEFAULT_TIME_RANGE, build_analytics, build_dashboard_stats
from app.core.excel_export import export_analytics_workbook, export_filename
from app.database import get_db
from app.models.user import User
from app.services.snapshot import load_snapshot

router = APIRouter(tags=["analytics"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _analytics(db: Session, user: User, time_range: str, now: datetime) -> dict:
    snap = load_snapshot(db, user.id)
    return build_analytics(snap.shipments, snap.products, snap.suppliers, time_range, now)


@router.get("/analytics")
def get_analytics(
    time_range: str = Query(DEFAULT_TIME_RANGE, alias="timeRange"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return envelope(_analytics(db, user, time_range, datetime.utcnow()))


@router.get("/analytics/export")
def export_analytics(
    time_range: str = Query(DEFAULT_TIME_RANGE, alias="timeRange"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    now = datetime.utcnow()
    content = export_analytics_workbook(_analytics(db, user, time_range, now), now)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(now)}"'
        },
    )


@router.get("/dashboard-stats")
def dashboard_stats(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    snap = load_snapshot(db, user.id)
    return envelope(build_dashboard_stats(snap.shipments, snap.products, snap.suppliers))
