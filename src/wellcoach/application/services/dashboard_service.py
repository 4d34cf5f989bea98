# src/wellcoach/application/services/dashboard_service.py

from __future__ import annotations
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from wellcoach.config import settings
from wellcoach.domain.entities import Dashboard
from .analytics_service import AnalyticsService
from .inbox_service import InboxService


class DashboardService:
    """Combines the weekly analytics with the top of the recommendation inbox."""

    def __init__(self, analytics_service: AnalyticsService, inbox_service: InboxService, top_n: Optional[int] = None):
        self.analytics_service = analytics_service
        self.inbox_service = inbox_service
        self.top_n = settings.DASHBOARD_TOP_RECOMMENDATIONS if top_n is None else top_n

    def compose(self, session: Session, user_id: str, now: Optional[datetime] = None) -> Dashboard:
        return Dashboard(
            analytics=self.analytics_service.weekly_analytics(session, user_id, now=now),
            recommendations=self.inbox_service.top(session, user_id, self.top_n),
        )
