from datetime import date as DateType

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from app.core.orchestrator import DashboardOrchestrator
from app.core.view import DashboardView, UserOption, build_dashboard_view, user_options

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def get_orchestrator(request: Request) -> DashboardOrchestrator:
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(503, "Dashboard not initialised")
    return orchestrator


class SelectionIn(BaseModel):
    login_email: str
    date: str | None = None


def _parse_date(date: str | None) -> DateType | None:
    if date is None:
        return None
    try:
        return DateType.fromisoformat(date)
    except ValueError:
        raise HTTPException(400, f"Invalid date format: {date}, expected YYYY-MM-DD")


@router.get("", response_model=DashboardView)
def get_dashboard(orchestrator: DashboardOrchestrator = Depends(get_orchestrator)):
    return build_dashboard_view(orchestrator.snapshot)


@router.get("/users", response_model=list[UserOption])
def get_users(orchestrator: DashboardOrchestrator = Depends(get_orchestrator)):
    """Options for the user picker: value is the login email, label is "Name (email)"."""
    return user_options(orchestrator.snapshot)


@router.post("/users/reload", response_model=DashboardView)
async def reload_users(orchestrator: DashboardOrchestrator = Depends(get_orchestrator)):
    """
    Re-fetch the user list from the Vitalz API.
    Any current selection is dropped.
    """
    snapshot = await orchestrator.load_users()
    return build_dashboard_view(snapshot)


@router.put("/selection", response_model=DashboardView)
async def select_user(
    payload: SelectionIn,
    orchestrator: DashboardOrchestrator = Depends(get_orchestrator),
):
    """
    Select a user and load their sleep, score and heart-rate statistics.

    `date` (YYYY-MM-DD) picks the statistics day; it defaults to
    VITALZ_STATISTICS_DATE, or today when that is unset.
    """
    on_date = _parse_date(payload.date)
    snapshot = await orchestrator.select(payload.login_email, on_date)
    return build_dashboard_view(snapshot)


@router.delete("/selection", response_model=DashboardView)
def clear_selection(orchestrator: DashboardOrchestrator = Depends(get_orchestrator)):
    return build_dashboard_view(orchestrator.clear())
