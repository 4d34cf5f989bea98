# src/wellcoach/boot.py
"""Service container wiring for the API process."""

import logging
from typing import Dict, Any

from wellcoach.application.services import (
    RecommendationEngine,
    EventService,
    InboxService,
    AnalyticsService,
    DashboardService,
    BillingService,
    ProfileService,
)
from wellcoach.infrastructure.db.repository import (
    UserRepository,
    ProfileRepository,
    EventRepository,
    RecommendationRepository,
)

log = logging.getLogger(__name__)


def build_services() -> Dict[str, Any]:
    """Build and wire all application services and dependencies."""
    log.info("Building application services...")
    services: Dict[str, Any] = {}

    try:
        # --- Repository Classes (for UoW) ---
        services["user_repo_class"] = UserRepository
        services["profile_repo_class"] = ProfileRepository
        services["event_repo_class"] = EventRepository
        services["recommendation_repo_class"] = RecommendationRepository

        # --- Core Services ---
        recommendation_engine = RecommendationEngine(recommendation_repo_class=RecommendationRepository)
        inbox_service = InboxService(repo_class=RecommendationRepository)
        analytics_service = AnalyticsService(event_repo_class=EventRepository)

        services["recommendation_engine"] = recommendation_engine
        services["event_service"] = EventService(engine=recommendation_engine, event_repo_class=EventRepository)
        services["inbox_service"] = inbox_service
        services["analytics_service"] = analytics_service
        services["dashboard_service"] = DashboardService(
            analytics_service=analytics_service,
            inbox_service=inbox_service,
        )
        services["billing_service"] = BillingService(user_repo_class=UserRepository)
        services["profile_service"] = ProfileService(repo_class=ProfileRepository)

        log.info("All services built and wired successfully.")
        return services

    except Exception as e:
        log.critical(f"Service building failed: {e}", exc_info=True)
        raise
