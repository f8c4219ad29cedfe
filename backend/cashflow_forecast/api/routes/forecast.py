from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from cashflow_forecast.api.deps import get_db, get_today
from cashflow_forecast.models.forecast import CrunchDay, ForecastResult
from cashflow_forecast.models.scenario import ScenarioRequest, ScenarioResponse
from cashflow_forecast.services.forecast_service import run_baseline, run_crunch_days, run_scenario

router = APIRouter(tags=["forecast"])


@router.get("/forecast/baseline", response_model=ForecastResult)
def get_baseline(
    file_id: str = Query(..., alias="fileId", min_length=1),
    horizon: Optional[int] = Query(None, description="Days to simulate; clamped to [1, 730]"),
    starting_balance: int = Query(0, alias="startingBalance", description="Cents"),
    conn=Depends(get_db),
    today: date = Depends(get_today),
):
    """Project the balance of a budget file from its stored obligations."""
    return run_baseline(conn, file_id, horizon, starting_balance, today)


@router.post("/forecast/scenario", response_model=ScenarioResponse)
def post_scenario(
    request: ScenarioRequest,
    conn=Depends(get_db),
    today: date = Depends(get_today),
):
    """Compare the baseline forecast against one with what-if mutations applied."""
    if not request.mutations:
        raise HTTPException(status_code=400, detail="missing-mutations")
    return run_scenario(
        conn,
        request.file_id,
        request.mutations,
        horizon=request.horizon,
        starting_balance=request.starting_balance,
        today=today,
    )


@router.get("/forecast/crunch-days", response_model=list[CrunchDay])
def get_crunch_days(
    file_id: str = Query(..., alias="fileId", min_length=1),
    horizon: Optional[int] = Query(None),
    starting_balance: int = Query(0, alias="startingBalance"),
    conn=Depends(get_db),
    today: date = Depends(get_today),
):
    """Days in the baseline forecast with many payments or a large net movement."""
    return run_crunch_days(conn, file_id, horizon, starting_balance, today)
