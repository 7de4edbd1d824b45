from fastapi import APIRouter, Request
from app.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request):
    orchestrator = getattr(request.app.state, "orchestrator", None)
    snapshot = orchestrator.snapshot if orchestrator else None
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "vitalz_api": settings.VITALZ_API_BASE,
        "users_loaded": len(snapshot.users) if snapshot else 0,
        "user_list_error": snapshot.user_list_error if snapshot else None,
        "selected_user": snapshot.selected_user.login_email if snapshot and snapshot.selected_user else None,
    }
