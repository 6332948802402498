from typing import Literal

from pydantic import BaseModel, Field

ScenarioType = Literal[
    "port_closure",
    "supplier_disruption",
    "route_blockage",
    "weather_event",
    "geopolitical",
]
Severity = Literal["low", "medium", "high", "critical"]


class CustomScenario(BaseModel):
    """Partial scenario; omitted fields take the what-if defaults."""

    name: str | None = None
    description: str | None = None
    type: ScenarioType | None = None
    location: str | None = None
    duration: int | None = Field(None, ge=1)
    severity: Severity | None = None
    affectedElements: list[str] = Field(default_factory=list)
    probability: float | None = Field(None, ge=0, le=1)


class SimulationRequest(BaseModel):
    scenarioId: str | None = None
    customScenario: CustomScenario | None = None


class CompareRequest(BaseModel):
    scenarioIds: list[str] = Field(..., min_length=1)
