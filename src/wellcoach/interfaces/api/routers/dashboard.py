# src/wellcoach/interfaces/api/routers/dashboard.py

from fastapi import APIRouter, Depends

from wellcoach.application.services import AnalyticsService, DashboardService
from wellcoach.infrastructure.db.uow import session_scope
from wellcoach.interfaces.api.deps import (
    CurrentUser, get_analytics_service, get_current_user, get_dashboard_service,
)
from wellcoach.interfaces.api.schemas import DashboardOut, WeeklyAnalyticsOut

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/analytics", response_model=WeeklyAnalyticsOut)
def get_weekly_analytics(
    user: CurrentUser = Depends(get_current_user),
    analytics: AnalyticsService = Depends(get_analytics_service),
):
    """Weekly rollup across all four modules, recomputed on every call."""
    with session_scope() as session:
        return WeeklyAnalyticsOut.model_validate(analytics.weekly_analytics(session, user.id))


@router.get("", response_model=DashboardOut)
def get_dashboard(
    user: CurrentUser = Depends(get_current_user),
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    with session_scope() as session:
        return DashboardOut.model_validate(dashboard.compose(session, user.id))
