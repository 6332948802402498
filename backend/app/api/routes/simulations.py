from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_llm
from app.api.responses import envelope
from app.core.impact_simulator import (
    ScenarioNotFoundError,
    available_scenarios,
    compare_scenarios,
    run_what_if,
    simulate,
)
from app.database import get_db
from app.models.user import User
from app.schemas.simulation import CompareRequest, SimulationRequest
from app.services.llm_client import BaseLLMAdapter
from app.services.snapshot import load_snapshot

router = APIRouter(prefix="/simulations", tags=["simulations"])


@router.get("")
def list_scenarios(
    user: User = Depends(get_current_user),
):
    scenarios = [s.to_dict() for s in available_scenarios()]
    return envelope(
        {"scenarios": scenarios, "totalScenarios": len(scenarios)},
        "Available scenarios retrieved successfully",
    )


@router.post("")
async def run_simulation(
    body: SimulationRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    llm: BaseLLMAdapter = Depends(get_llm),
):
    if not body.scenarioId and body.customScenario is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Either scenarioId or customScenario is required",
        )
    ctx = load_snapshot(db, user.id)
    try:
        if body.scenarioId:
            result = await simulate(body.scenarioId, ctx, llm)
        else:
            result = await run_what_if(
                body.customScenario.model_dump(exclude_none=True), ctx, llm
            )
    except ScenarioNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return envelope(result.to_dict(), "Simulation completed successfully")


@router.post("/compare")
async def compare(
    body: CompareRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    llm: BaseLLMAdapter = Depends(get_llm),
):
    ctx = load_snapshot(db, user.id)
    try:
        comparison = await compare_scenarios(body.scenarioIds, ctx, llm)
    except ScenarioNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return envelope(comparison, "Scenario comparison completed successfully")
