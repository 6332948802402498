"""Disruption event store: seeded demo events, LLM news ingestion and impact.

The store is owned by the application (``app.state.event_store``) and handed
to routes through a dependency. Events are only ever appended.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from datetime import datetime, timedelta
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from app.core.records import ShipmentRecord
from app.services.llm_client import extract_json_object

logger = logging.getLogger(__name__)

EventType = Literal[
    "port_closure",
    "weather",
    "strike",
    "sanction",
    "cyber_attack",
    "natural_disaster",
    "geopolitical",
]
Severity = Literal["low", "medium", "high", "critical"]

EVENT_DELAY_SHARE = 0.7
EVENT_COST_SHARE = 0.15

FALLBACK_ROUTES = ["Alternative Route 1", "Alternative Route 2", "Alternative Route 3"]
FALLBACK_RECOMMENDATIONS = [
    "Contact affected carriers for status updates",
    "Notify customers about potential delays",
    "Activate contingency shipping routes",
]


class EventNotFoundError(LookupError):
    pass


class ExtractedEvent(BaseModel):
    """Fields the language model is asked to pull out of a news item."""

    type: EventType
    severity: Severity
    location: str
    country: str = ""
    title: str
    description: str = ""
    durationDays: int = Field(7, ge=0)
    affectedPorts: list[str] = Field(default_factory=list)
    affectedRoutes: list[str] = Field(default_factory=list)
    impactRadius: float = Field(0, ge=0)
    sources: list[str] = Field(default_factory=list)
    confidence: float = Field(0.5, ge=0, le=1)


class DisruptionEvent(ExtractedEvent):
    id: str
    startDate: datetime
    endDate: datetime | None = None
    createdAt: datetime = Field(default_factory=datetime.utcnow)

    @property
    def effective_end(self) -> datetime:
        return self.endDate or self.startDate + timedelta(days=self.durationDays)

    def is_active(self, now: datetime) -> bool:
        return self.startDate <= now <= self.effective_end


class EventImpact(BaseModel):
    eventId: str
    affectedShipments: list[str]
    delayDays: float
    additionalCost: float
    riskLevel: Severity
    alternativeRoutes: list[str]
    recommendations: list[str]


def new_event_id() -> str:
    """``event_<ms timestamp>_<random suffix>``; unique within one millisecond."""
    return f"event_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"


def demo_events() -> list[DisruptionEvent]:
    now = datetime.utcnow()
    return [
        DisruptionEvent(
            id="event_001",
            type="geopolitical",
            severity="high",
            location="Red Sea",
            country="Yemen",
            title="Red Sea Shipping Disruption",
            description="Ongoing geopolitical tensions affecting major shipping routes "
            "through the Red Sea, causing vessels to reroute via Cape of Good Hope",
            startDate=datetime(2024, 1, 15),
            durationDays=45,
            affectedPorts=["Jeddah", "Aqaba", "Eilat"],
            affectedRoutes=["Asia-Europe", "Asia-Mediterranean"],
            impactRadius=5000,
            sources=["Maritime Intelligence", "Trade Reports", "Shipping Lines"],
            confidence=0.95,
            createdAt=now,
        ),
        DisruptionEvent(
            id="event_002",
            type="weather",
            severity="medium",
            location="Shanghai Port",
            country="China",
            title="Shanghai Port Congestion",
            description="High congestion at Shanghai port affecting container "
            "availability and causing extended waiting times",
            startDate=datetime(2024, 2, 1),
            durationDays=14,
            affectedPorts=["Shanghai", "Ningbo"],
            affectedRoutes=["Asia-Pacific", "Asia-Americas"],
            impactRadius=1000,
            sources=["Port Authorities", "Shipping Lines", "Container Tracking"],
            confidence=0.85,
            createdAt=now,
        ),
        DisruptionEvent(
            id="event_003",
            type="strike",
            severity="medium",
            location="Los Angeles Port",
            country="USA",
            title="LA Port Labor Dispute",
            description="Labor negotiations affecting port operations and container "
            "handling efficiency",
            startDate=datetime(2024, 2, 10),
            durationDays=7,
            affectedPorts=["Los Angeles", "Long Beach"],
            affectedRoutes=["Asia-Americas", "Europe-Americas"],
            impactRadius=500,
            sources=["Port Authorities", "Labor Unions", "Trade Publications"],
            confidence=0.80,
            createdAt=now,
        ),
        DisruptionEvent(
            id="event_004",
            type="natural_disaster",
            severity="high",
            location="Pacific Ocean",
            country="International Waters",
            title="Tropical Storm Warning",
            description="Tropical storm developing in Pacific affecting shipping "
            "routes and vessel schedules",
            startDate=datetime(2024, 2, 15),
            durationDays=5,
            affectedPorts=["Manila", "Hong Kong", "Taipei"],
            affectedRoutes=["Asia-Pacific", "Asia-Americas"],
            impactRadius=3000,
            sources=["Weather Services", "Maritime Alerts", "Vessel Tracking"],
            confidence=0.90,
            createdAt=now,
        ),
    ]


def _extraction_prompt(news_text: str) -> str:
    return f"""Analyze this news text and extract supply chain disruption information:

"{news_text}"

Return a JSON object with the following structure:
{{
  "type": "port_closure|weather|strike|sanction|cyber_attack|natural_disaster|geopolitical",
  "severity": "low|medium|high|critical",
  "location": "specific location",
  "country": "country name",
  "title": "brief title",
  "description": "detailed description",
  "durationDays": estimated_duration_in_days,
  "affectedPorts": ["port1", "port2"],
  "affectedRoutes": ["route1", "route2"],
  "impactRadius": radius_in_km,
  "sources": ["source1", "source2"],
  "confidence": confidence_score_0_to_1
}}

If this is not a supply chain disruption, return null."""


def _touches_event(shipment: ShipmentRecord, event: DisruptionEvent) -> bool:
    origin = shipment.origin.lower()
    destination = shipment.destination.lower()
    location = event.location.lower()
    if location and (location in origin or location in destination):
        return True
    return any(
        port.lower() in origin or port.lower() in destination
        for port in event.affectedPorts
        if port
    )


class EventStore:
    def __init__(self, events: list[DisruptionEvent] | None = None):
        self._events: list[DisruptionEvent] = list(events or [])
        self._lock = threading.Lock()

    @classmethod
    def with_demo_events(cls) -> "EventStore":
        return cls(demo_events())

    @property
    def events(self) -> list[DisruptionEvent]:
        with self._lock:
            return list(self._events)

    def add(self, event: DisruptionEvent) -> DisruptionEvent:
        with self._lock:
            self._events.append(event)
        logger.info("Stored disruption event id=%s type=%s", event.id, event.type)
        return event

    def get(self, event_id: str) -> DisruptionEvent:
        for e in self.events:
            if e.id == event_id:
                return e
        raise EventNotFoundError(f"Event not found: {event_id}")

    def get_active_events(self, now: datetime | None = None) -> list[DisruptionEvent]:
        now = now or datetime.utcnow()
        return [e for e in self.events if e.is_active(now)]

    def get_events_by_location(self, location: str) -> list[DisruptionEvent]:
        needle = location.lower()
        return [
            e
            for e in self.events
            if needle in e.location.lower() or needle in e.country.lower()
        ]

    def get_events_by_type(self, event_type: str) -> list[DisruptionEvent]:
        return [e for e in self.events if e.type == event_type]

    def get_event_statistics(self, now: datetime | None = None) -> dict:
        events = self.events
        by_type: dict[str, int] = {}
        by_severity: dict[str, int] = {}
        for e in events:
            by_type[e.type] = by_type.get(e.type, 0) + 1
            by_severity[e.severity] = by_severity.get(e.severity, 0) + 1
        avg_confidence = (
            sum(e.confidence for e in events) / len(events) if events else 0.0
        )
        return {
            "totalEvents": len(events),
            "activeEvents": len(self.get_active_events(now)),
            "eventsByType": by_type,
            "eventsBySeverity": by_severity,
            "averageConfidence": round(avg_confidence, 3),
        }

    async def ingest_news_event(self, news_text: str, llm) -> DisruptionEvent | None:
        """Ask the model to structure ``news_text``; store and return the event.

        Returns None when the model declines (``null``), the reply holds no
        JSON object, the fields fail validation, or the call itself fails.
        """
        try:
            raw = await llm.invoke(_extraction_prompt(news_text))
        except Exception:
            logger.exception("News ingestion failed during LLM call")
            return None

        if raw.strip().lower() == "null":
            logger.info("News text is not a supply chain disruption")
            return None
        data = extract_json_object(raw)
        if data is None:
            logger.warning("Could not parse event JSON from LLM reply: %.200s", raw)
            return None
        try:
            extracted = ExtractedEvent.model_validate(data)
        except ValidationError as e:
            logger.warning("LLM event failed validation: %s", e.errors()[:3])
            return None

        now = datetime.utcnow()
        event = DisruptionEvent(
            **extracted.model_dump(),
            id=new_event_id(),
            startDate=now,
            createdAt=now,
        )
        return self.add(event)

    async def scan_news(self, query: str, search, llm) -> list[DisruptionEvent]:
        """Search the web for ``query`` and ingest every snippet as a news item."""
        try:
            snippets = await search.search(query)
        except Exception:
            logger.exception("News search failed for query=%r", query)
            return []
        created = []
        for text in snippets:
            event = await self.ingest_news_event(text, llm)
            if event is not None:
                created.append(event)
        logger.info(
            "News scan query=%r: %d snippets, %d events", query, len(snippets), len(created)
        )
        return created

    async def calculate_event_impact(
        self, event_id: str, shipments: list[ShipmentRecord], llm=None
    ) -> EventImpact:
        event = self.get(event_id)
        affected = [s for s in shipments if _touches_event(s, event)]
        return EventImpact(
            eventId=event.id,
            affectedShipments=[s.id for s in affected],
            delayDays=round(event.durationDays * EVENT_DELAY_SHARE, 2),
            additionalCost=round(
                sum(s.total_value or 0 for s in affected) * EVENT_COST_SHARE, 2
            ),
            riskLevel=event.severity,
            alternativeRoutes=await _alternative_routes(event, llm),
            recommendations=await _event_recommendations(event, len(affected), llm),
        )


async def _ask_lines(prompt: str, llm, fallback: list[str], what: str) -> list[str]:
    if llm is None:
        return list(fallback)
    try:
        lines = await llm.invoke_lines(prompt, limit=3)
    except Exception:
        logger.exception("Event %s generation failed", what)
        return list(fallback)
    return lines or list(fallback)


async def _alternative_routes(event: DisruptionEvent, llm) -> list[str]:
    prompt = f"""Given this disruption event:
Location: {event.location}
Type: {event.type}
Affected Routes: {', '.join(event.affectedRoutes)}

Suggest 3 alternative routes that avoid this disruption. Focus on practical, realistic alternatives.

Return as a simple list of route names."""
    return await _ask_lines(prompt, llm, FALLBACK_ROUTES, "route")


async def _event_recommendations(event: DisruptionEvent, affected: int, llm) -> list[str]:
    prompt = f"""Given this disruption event affecting {affected} shipments:
Event: {event.title}
Type: {event.type}
Severity: {event.severity}

Provide 3 specific, actionable recommendations for managing this disruption.
Focus on immediate actions, communication strategies, and contingency planning."""
    return await _ask_lines(prompt, llm, FALLBACK_RECOMMENDATIONS, "recommendation")
