# src/wellcoach/application/services/event_service.py
"""
Module event creation.

Two separate transactions:
1. the event is stored and committed;
2. the recommendation engine runs as a post-commit hook in its own scope.

A failure in step 2 is logged and reported back as a warning. It never rolls
back or fails step 1.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, ContextManager, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wellcoach.domain.entities import Module
from wellcoach.domain.errors import DependencyError, RecommendationGenerationError
from wellcoach.infrastructure.db.models import AiRecommendation
from wellcoach.infrastructure.db.repository import EventRepository
from wellcoach.infrastructure.db.uow import session_scope
from .recommendation_engine import RecommendationEngine, module_of

log = logging.getLogger(__name__)

RECOMMENDATION_WARNING = "Recommendations could not be generated for this entry."


@dataclass
class EventCreationResult:
    event: Any
    recommendations: List[AiRecommendation] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


class EventService:

    def __init__(
        self,
        engine: RecommendationEngine,
        event_repo_class: type[EventRepository] = EventRepository,
        session_factory: Callable[[], ContextManager[Session]] = session_scope,
    ):
        self.engine = engine
        self.event_repo_class = event_repo_class
        self.session_factory = session_factory

    def create_event(
        self,
        user_id: str,
        module: Any,
        fields: Dict[str, Any],
        generate_recommendations: bool = True,
    ) -> EventCreationResult:
        """
        Store a validated event and, unless deferred, run the rule engine on it.
        `fields` must already be validated; nothing here re-checks the payload.
        """
        module = Module(module)
        try:
            with self.session_factory() as session:
                event = self.event_repo_class(session).add(module, user_id, **fields)
        except SQLAlchemyError as e:
            log.error("Failed to store %s event for user %s: %s", module.value, user_id, e, exc_info=True)
            raise DependencyError("Failed to store event") from e

        log.info("Created %s event %s for user %s", module.value, event.id, user_id)
        result = EventCreationResult(event=event)
        if not generate_recommendations:
            return result

        try:
            result.recommendations = self.generate_recommendations(event)
        except RecommendationGenerationError:
            result.warnings.append(RECOMMENDATION_WARNING)
        return result

    def generate_recommendations(self, event: Any) -> List[AiRecommendation]:
        try:
            with self.session_factory() as session:
                return self.engine.on_event_created(session, event)
        except Exception as e:
            log.error(
                "Recommendation generation failed for %s event %s (user %s): %s",
                module_of(event).value, event.id, event.user_id, e, exc_info=True,
            )
            raise RecommendationGenerationError(str(e)) from e

    def generate_recommendations_background(self, event: Any) -> Optional[List[AiRecommendation]]:
        """Entry point for FastAPI background tasks. Returns None when the run failed."""
        try:
            return self.generate_recommendations(event)
        except RecommendationGenerationError as e:
            log.warning("Background recommendation run for event %s dropped: %s", event.id, e)
            return None

    def list_events(self, session: Session, user_id: str, module: Any) -> List[Any]:
        return self.event_repo_class(session).list_for_user(module, user_id)
