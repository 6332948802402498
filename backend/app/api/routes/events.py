from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_event_store, get_llm, get_search
from app.api.responses import envelope
from app.core.event_intelligence import EventNotFoundError, EventStore
from app.database import get_db
from app.models.user import User
from app.schemas.event import NewsEventRequest, NewsScanRequest
from app.services.llm_client import BaseLLMAdapter
from app.services.search_client import SearchClient
from app.services.snapshot import load_snapshot

router = APIRouter(prefix="/events", tags=["events"])


@router.get("")
def list_events(
    user: User = Depends(get_current_user),
    store: EventStore = Depends(get_event_store),
):
    return envelope(
        {
            "activeEvents": store.get_active_events(),
            "statistics": store.get_event_statistics(),
        },
        "Events retrieved successfully",
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def ingest_event(
    body: NewsEventRequest,
    user: User = Depends(get_current_user),
    store: EventStore = Depends(get_event_store),
    llm: BaseLLMAdapter = Depends(get_llm),
):
    event = await store.ingest_news_event(body.newsText, llm)
    if event is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to process news event",
        )
    return envelope(event, "Event ingested successfully")


@router.get("/search")
def search_events(
    location: str | None = Query(None),
    type: str | None = Query(None),
    user: User = Depends(get_current_user),
    store: EventStore = Depends(get_event_store),
):
    if location:
        events = store.get_events_by_location(location)
    elif type:
        events = store.get_events_by_type(type)
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Either location or type is required",
        )
    return envelope(events)


@router.post("/scan", status_code=status.HTTP_201_CREATED)
async def scan_news(
    body: NewsScanRequest,
    user: User = Depends(get_current_user),
    store: EventStore = Depends(get_event_store),
    llm: BaseLLMAdapter = Depends(get_llm),
    search: SearchClient = Depends(get_search),
):
    events = await store.scan_news(body.query, search, llm)
    return envelope(events, f"{len(events)} events ingested from news scan")


@router.get("/{event_id}/impact")
async def event_impact(
    event_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    store: EventStore = Depends(get_event_store),
    llm: BaseLLMAdapter = Depends(get_llm),
):
    shipments = load_snapshot(db, user.id).shipments
    try:
        impact = await store.calculate_event_impact(event_id, shipments, llm)
    except EventNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return envelope(impact)
