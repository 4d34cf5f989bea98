# src/wellcoach/application/services/recommendation_engine.py
"""
Rule-based coaching recommendations.

A freshly committed module event is handed to the subscriber registered for
its module. Subscribers turn the event (plus, for nutrition, the same-day
totals) into `RecommendationDraft`s; the engine then stores the whole set with
a single flush. Rules never look at another module's data and never touch
existing recommendations.

The rule functions (`training_rules`, `nutrition_rules`, ...) are pure and can
be tested without a database.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Protocol

from sqlalchemy import text
from sqlalchemy.orm import Session

from wellcoach.config import settings
from wellcoach.domain.entities import Module, RecommendationDraft
from wellcoach.domain.value_objects import Macros, as_utc, end_of_utc_day, start_of_utc_day, to_number, utcnow
from wellcoach.infrastructure.db.models import AiRecommendation
from wellcoach.infrastructure.db.repository import EventRepository, RecommendationRepository

log = logging.getLogger(__name__)

# --- Policy constants ---
LOW_CALORIE_BURN = 200
INTENSITY_BOOST_FACTOR = 1.15
MIN_TRAINING_DURATION = 20
TARGET_TRAINING_DURATION = 30

DAILY_CALORIE_CEILING = 2500
DAILY_CALORIE_TARGET = 2000
DAILY_PROTEIN_FLOOR = 100
DAILY_PROTEIN_TARGET = 120

LOW_MOOD = 5
MOOD_GAIN = 3
MOOD_BOOST_MINUTES = 10

LOW_FOCUS = 6
TARGET_FOCUS = 8


def module_of(event: Any) -> Module:
    return Module(getattr(event, "MODULE", None) or getattr(event, "module"))


# --- Rule sets ---

def training_rules(session: Any) -> List[RecommendationDraft]:
    drafts = []
    calories = session.calories_burned
    if calories is not None and calories < LOW_CALORIE_BURN:
        drafts.append(RecommendationDraft(
            module=Module.TRAINING,
            recommendation_type="intensity_boost",
            title="Increase the intensity",
            description="Your last session burned few calories. Try raising the intensity by 15%.",
            action_data={"targetCalories": calories * INTENSITY_BOOST_FACTOR},
            priority=7,
        ))
    if session.duration is not None and session.duration < MIN_TRAINING_DURATION:
        drafts.append(RecommendationDraft(
            module=Module.TRAINING,
            recommendation_type="duration_increase",
            title="Extend your sessions",
            description=f"Longer sessions build endurance. Aim for at least {TARGET_TRAINING_DURATION} minutes.",
            action_data={"targetDuration": TARGET_TRAINING_DURATION},
            priority=6,
        ))
    return drafts


@dataclass(frozen=True)
class DayNutritionTotals:
    calories: float = 0.0
    protein: float = 0.0

    @classmethod
    def from_entries(cls, entries: Iterable[Any]) -> "DayNutritionTotals":
        calories = 0.0
        macros = Macros()
        for entry in entries:
            calories += to_number(entry.total_calories)
            macros = macros + Macros.from_json(entry.macros)
        return cls(calories=calories, protein=macros.protein)


def nutrition_rules(totals: DayNutritionTotals) -> List[RecommendationDraft]:
    """Rules over the whole day's intake, not the single entry."""
    drafts = []
    if totals.calories > DAILY_CALORIE_CEILING:
        drafts.append(RecommendationDraft(
            module=Module.NUTRITION,
            recommendation_type="calorie_reduction",
            title="Cut back on calories",
            description="You are over your calorie goal for today. Favour vegetables for your next meal.",
            action_data={"currentCalories": totals.calories, "targetCalories": DAILY_CALORIE_TARGET},
            priority=8,
        ))
    if totals.protein < DAILY_PROTEIN_FLOOR:
        drafts.append(RecommendationDraft(
            module=Module.NUTRITION,
            recommendation_type="protein_boost",
            title="Add more protein",
            description="Your protein intake is low today. Add eggs, chicken or legumes.",
            action_data={"currentProtein": totals.protein, "targetProtein": DAILY_PROTEIN_TARGET},
            priority=7,
        ))
    return drafts


def mental_rules(session: Any) -> List[RecommendationDraft]:
    drafts = []
    if session.mood_before < LOW_MOOD:
        drafts.append(RecommendationDraft(
            module=Module.MENTAL,
            recommendation_type="mood_boost",
            title="Take an extra wellbeing break",
            description=f"Your mood was low. A {MOOD_BOOST_MINUTES}-minute breathing session could help.",
            action_data={"recommendedDuration": MOOD_BOOST_MINUTES, "technique": "breathing"},
            priority=9,
        ))
    if session.mood_after - session.mood_before > MOOD_GAIN:
        drafts.append(RecommendationDraft(
            module=Module.MENTAL,
            recommendation_type="technique_success",
            title="This technique works for you",
            description=f"Your {session.session_type} session lifted your mood. Repeat it regularly.",
            action_data={"successfulTechnique": session.session_type},
            priority=5,
        ))
    return drafts


def productivity_rules(session: Any) -> List[RecommendationDraft]:
    drafts = []
    if session.focus_score < LOW_FOCUS:
        drafts.append(RecommendationDraft(
            module=Module.PRODUCTIVITY,
            recommendation_type="focus_improvement",
            title="Sharpen your focus",
            description="Your focus score was low. Try the Pomodoro technique.",
            action_data={"recommendedTechnique": "pomodoro", "targetScore": TARGET_FOCUS},
            priority=7,
        ))
    if session.tasks_completed == 0:
        drafts.append(RecommendationDraft(
            module=Module.PRODUCTIVITY,
            recommendation_type="task_completion",
            title="Set smaller goals",
            description="No tasks were finished. Break your goals into simpler sub-tasks.",
            action_data={"strategy": "break_down_tasks"},
            priority=8,
        ))
    return drafts


# --- Subscribers (post-commit hooks) ---

class RuleSubscriber(Protocol):
    module: Module

    def on_event_created(self, session: Session, event: Any) -> List[RecommendationDraft]:
        ...


class TrainingRules:
    module = Module.TRAINING

    def on_event_created(self, session: Session, event: Any) -> List[RecommendationDraft]:
        return training_rules(event)


class NutritionRules:
    """Sums every entry of the event's UTC day `[00:00, 24:00)`, the new one included."""
    module = Module.NUTRITION

    def __init__(self, event_repo_class: type = EventRepository):
        self.event_repo_class = event_repo_class

    def on_event_created(self, session: Session, event: Any) -> List[RecommendationDraft]:
        logged_at = getattr(event, "logged_at", None) or utcnow()
        since = start_of_utc_day(as_utc(logged_at))
        until = end_of_utc_day(since)
        entries = self.event_repo_class(session).list_since(Module.NUTRITION, event.user_id, since, until)
        # Read-then-decide: a concurrent entry may be missed.
        if not any(e.id == event.id for e in entries):
            entries.append(event)
        totals = DayNutritionTotals.from_entries(entries)
        log.debug("Nutrition totals for user %s since %s: %s", event.user_id, since.isoformat(), totals)
        return nutrition_rules(totals)


class MentalRules:
    module = Module.MENTAL

    def on_event_created(self, session: Session, event: Any) -> List[RecommendationDraft]:
        return mental_rules(event)


class ProductivityRules:
    module = Module.PRODUCTIVITY

    def on_event_created(self, session: Session, event: Any) -> List[RecommendationDraft]:
        return productivity_rules(event)


def default_subscribers() -> List[RuleSubscriber]:
    return [TrainingRules(), NutritionRules(), MentalRules(), ProductivityRules()]


class RecommendationEngine:
    """
    Dispatches new events to their module's subscriber and persists the drafts.
    Must run in its own transaction, after the event has been committed.
    """

    def __init__(
        self,
        subscribers: Optional[Iterable[RuleSubscriber]] = None,
        recommendation_repo_class: type = RecommendationRepository,
        ttl_days: Optional[int] = None,
        timeout_ms: Optional[int] = None,
    ):
        self._subscribers: Dict[Module, RuleSubscriber] = {}
        self.recommendation_repo_class = recommendation_repo_class
        self.ttl_days = settings.RECOMMENDATION_TTL_DAYS if ttl_days is None else ttl_days
        self.timeout_ms = settings.RECOMMENDATION_TIMEOUT_MS if timeout_ms is None else timeout_ms
        for subscriber in (default_subscribers() if subscribers is None else subscribers):
            self.subscribe(subscriber)

    def subscribe(self, subscriber: RuleSubscriber) -> None:
        """Register (or replace) the rule set for one module."""
        self._subscribers[Module(subscriber.module)] = subscriber

    def evaluate(self, session: Session, event: Any) -> List[RecommendationDraft]:
        module = module_of(event)
        subscriber = self._subscribers.get(module)
        if subscriber is None:
            log.debug("No rule set registered for module %s", module.value)
            return []
        return list(subscriber.on_event_created(session, event))

    def on_event_created(self, session: Session, event: Any) -> List[AiRecommendation]:
        self._bound_statement_time(session)
        drafts = self.evaluate(session, event)
        if not drafts:
            return []
        recs = self.recommendation_repo_class(session).add_many(
            event.user_id, drafts, ttl_days=self.ttl_days
        )
        log.info(
            "Generated %d %s recommendation(s) for user %s: %s",
            len(recs), module_of(event).value, event.user_id,
            ", ".join(d.recommendation_type for d in drafts),
        )
        return recs

    def _bound_statement_time(self, session: Session) -> None:
        """Keep a slow day-aggregate query from holding the request (PostgreSQL only)."""
        if not self.timeout_ms:
            return
        bind = session.get_bind()
        if bind.dialect.name == "postgresql":
            session.execute(text(f"SET LOCAL statement_timeout = {int(self.timeout_ms)}"))
