# src/wellcoach/application/services/analytics_service.py
"""
Weekly analytics aggregator.

Everything is recomputed from the event store on each call; nothing is cached
between requests, so two calls with no writes in between return the same
figures.

Windows (UTC):
- training, mental, productivity: trailing seven days, `[now - 7d, now)`
- nutrition: the current UTC day, `[00:00, 24:00)`

Events dated after these windows are ignored until their time comes.

Weekly score: each module's goal attainment is clamped to [0, 100] and the four
values are averaged without weights, then rounded half-up.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Set
import logging

from sqlalchemy.orm import Session

from wellcoach.config import settings
from wellcoach.domain.entities import (
    Module, TrainingSummary, NutritionSummary, MentalSummary, ProductivitySummary, WeeklyAnalytics,
)
from wellcoach.domain.value_objects import (
    Macros, as_utc, end_of_utc_day, start_of_utc_day, to_number, utcnow, week_start,
)
from wellcoach.infrastructure.db.repository import EventRepository

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Goals:
    training_sessions_per_week: int = 5
    calories_per_day: int = 2000
    mental_sessions_per_week: int = 7
    productivity_minutes_per_week: int = 240

    @classmethod
    def from_settings(cls) -> "Goals":
        return cls(
            training_sessions_per_week=settings.TRAINING_WEEKLY_GOAL_SESSIONS,
            calories_per_day=settings.NUTRITION_DAILY_GOAL_CALORIES,
            mental_sessions_per_week=settings.MENTAL_WEEKLY_GOAL_SESSIONS,
            productivity_minutes_per_week=settings.PRODUCTIVITY_WEEKLY_GOAL_MINUTES,
        )


def _mean(values: Iterable[float], default: float) -> float:
    values = list(values)
    if not values:
        return default
    return sum(values) / len(values)


def goal_attainment(actual: float, goal: float) -> float:
    """Percentage of goal reached, clamped to [0, 100]."""
    if goal <= 0:
        return 100.0
    return min(max(actual / goal * 100.0, 0.0), 100.0)


def weekly_score(
    training: TrainingSummary,
    nutrition: NutritionSummary,
    mental: MentalSummary,
    productivity: ProductivitySummary,
) -> int:
    parts = [
        goal_attainment(training.completed, training.weekly_goal),
        goal_attainment(nutrition.consumed, nutrition.daily_calorie_goal),
        goal_attainment(mental.completed, mental.weekly_meditation_goal),
        goal_attainment(productivity.achieved, productivity.weekly_focus_goal),
    ]
    mean = Decimal(str(sum(parts) / len(parts)))
    return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_streak(active_dates: Set[date], today: date) -> int:
    """Consecutive active days ending today; 0 when today has no activity."""
    streak = 0
    day = today
    while day in active_dates:
        streak += 1
        day -= timedelta(days=1)
    return streak


class AnalyticsService:
    """
    Provides the dashboard analytics.
    All methods require an external SQLAlchemy Session (Unit of Work pattern).
    """

    def __init__(self, event_repo_class: type[EventRepository] = EventRepository, goals: Optional[Goals] = None):
        self.event_repo_class = event_repo_class
        self.goals = goals or Goals.from_settings()

    def training_summary(self, session: Session, user_id: str, now: datetime) -> TrainingSummary:
        sessions = self.event_repo_class(session).list_since(Module.TRAINING, user_id, week_start(now), now)
        return TrainingSummary(
            weekly_goal=self.goals.training_sessions_per_week,
            completed=len(sessions),
            calories_burned=int(sum(to_number(s.calories_burned) for s in sessions)),
            avg_duration=_mean((to_number(s.duration) for s in sessions), default=0.0),
        )

    def nutrition_summary(self, session: Session, user_id: str, now: datetime) -> NutritionSummary:
        entries = self.event_repo_class(session).list_since(
            Module.NUTRITION, user_id, start_of_utc_day(now), end_of_utc_day(now)
        )
        macros = Macros()
        for entry in entries:
            macros = macros + Macros.from_json(entry.macros)
        return NutritionSummary(
            daily_calorie_goal=self.goals.calories_per_day,
            consumed=int(sum(to_number(e.total_calories) for e in entries)),
            protein=macros.protein,
            carbs=macros.carbs,
            fat=macros.fat,
            fiber=macros.fiber,
            meals_logged=len(entries),
        )

    def mental_summary(self, session: Session, user_id: str, now: datetime) -> MentalSummary:
        sessions = self.event_repo_class(session).list_since(Module.MENTAL, user_id, week_start(now), now)
        return MentalSummary(
            weekly_meditation_goal=self.goals.mental_sessions_per_week,
            completed=len(sessions),
            avg_mood_before=_mean((to_number(s.mood_before) for s in sessions), default=5.0),
            avg_mood_after=_mean((to_number(s.mood_after) for s in sessions), default=5.0),
        )

    def productivity_summary(self, session: Session, user_id: str, now: datetime) -> ProductivitySummary:
        sessions = self.event_repo_class(session).list_since(Module.PRODUCTIVITY, user_id, week_start(now), now)
        return ProductivitySummary(
            weekly_focus_goal=self.goals.productivity_minutes_per_week,
            achieved=int(sum(to_number(s.duration) for s in sessions)),
            tasks_completed=int(sum(to_number(s.tasks_completed) for s in sessions)),
            avg_focus_score=_mean((to_number(s.focus_score) for s in sessions), default=0.0),
        )

    def streak_days(self, session: Session, user_id: str, now: Optional[datetime] = None) -> int:
        now = as_utc(now or utcnow())
        dates = self.event_repo_class(session).activity_dates(user_id)
        return compute_streak(dates, now.date())

    def weekly_analytics(self, session: Session, user_id: str, now: Optional[datetime] = None) -> WeeklyAnalytics:
        now = as_utc(now or utcnow())
        training = self.training_summary(session, user_id, now)
        nutrition = self.nutrition_summary(session, user_id, now)
        mental = self.mental_summary(session, user_id, now)
        productivity = self.productivity_summary(session, user_id, now)
        analytics = WeeklyAnalytics(
            training=training,
            nutrition=nutrition,
            mental=mental,
            productivity=productivity,
            weekly_score=weekly_score(training, nutrition, mental, productivity),
            streak_days=self.streak_days(session, user_id, now),
        )
        log.debug("Weekly analytics for user %s: score=%d streak=%d", user_id, analytics.weekly_score, analytics.streak_days)
        return analytics
