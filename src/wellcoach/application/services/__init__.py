# src/wellcoach/application/services/__init__.py

from .recommendation_engine import RecommendationEngine
from .event_service import EventService, EventCreationResult
from .inbox_service import InboxService
from .analytics_service import AnalyticsService, Goals
from .dashboard_service import DashboardService
from .billing_service import BillingService
from .profile_service import ProfileService

__all__ = [
    "RecommendationEngine",
    "EventService",
    "EventCreationResult",
    "InboxService",
    "AnalyticsService",
    "Goals",
    "DashboardService",
    "BillingService",
    "ProfileService",
]
