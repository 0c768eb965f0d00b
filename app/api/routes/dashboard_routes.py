"""
Dashboard Routes

GET /dashboard - Scores, counts, profile completion and recent activity
"""

from fastapi import APIRouter, Depends

from app.core.auth import get_current_user
from app.services.dashboard_service import DashboardService, get_dashboard_service
from app.schemas.schemas import DashboardResponse

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    user: dict = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service)
):
    return service.summary(user)
