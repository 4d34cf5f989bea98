from datetime import date, datetime, timedelta, timezone

import pytest

from wellcoach.application.services.analytics_service import (
    AnalyticsService, compute_streak, goal_attainment,
)
from wellcoach.domain.entities import Module
from wellcoach.infrastructure.db.uow import session_scope

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _analytics(user_id="u1", now=NOW):
    with session_scope() as session:
        return AnalyticsService().weekly_analytics(session, user_id, now=now)


def _training(add_event, at, **extra):
    fields = {"workout_type": "run", "duration": 30, "calories_burned": 300, "completed_at": at}
    fields.update(extra)
    return add_event(Module.TRAINING, "u1", **fields)


def _hit_every_goal(add_event):
    for day in range(5):
        _training(add_event, NOW - timedelta(days=day, hours=1))
    add_event(Module.NUTRITION, "u1", meal_type="breakfast", total_calories=1200, logged_at=NOW - timedelta(hours=4))
    add_event(Module.NUTRITION, "u1", meal_type="lunch", total_calories=800, logged_at=NOW - timedelta(hours=1))
    for day in range(7):
        add_event(Module.MENTAL, "u1", session_type="meditation", mood_before=4, mood_after=6,
                  completed_at=NOW - timedelta(days=day, minutes=5))
    for day in range(4):
        add_event(Module.PRODUCTIVITY, "u1", session_type="deep_work", duration=60, tasks_completed=2,
                  focus_score=8, completed_at=NOW - timedelta(days=day, hours=2))

# --- Pure helpers ---

@pytest.mark.parametrize("actual,goal,expected", [
    (0, 5, 0.0),
    (5, 5, 100.0),
    (10, 5, 100.0),
    (1, 4, 25.0),
    (-3, 5, 0.0),
    (3, 0, 100.0),
])
def test_goal_attainment_is_clamped(actual, goal, expected):
    assert goal_attainment(actual, goal) == expected


def test_streak_counts_back_from_today():
    today = date(2026, 10, 18)
    active = {today, today - timedelta(days=1), today - timedelta(days=2), today - timedelta(days=4)}
    assert compute_streak(active, today) == 3


def test_streak_is_zero_without_activity_today():
    today = date(2026, 10, 18)
    assert compute_streak({today - timedelta(days=1)}, today) == 0

# --- Aggregation over the event store ---

def test_exact_goal_amounts_score_100(make_user, add_event):
    make_user("u1")
    _hit_every_goal(add_event)

    analytics = _analytics()

    assert analytics.training.completed == 5
    assert analytics.nutrition.consumed == 2000
    assert analytics.mental.completed == 7
    assert analytics.productivity.achieved == 240
    assert analytics.weekly_score == 100


def test_above_goal_training_still_contributes_only_100(make_user, add_event):
    make_user("u1")
    for i in range(10):
        _training(add_event, NOW - timedelta(hours=i + 1))

    analytics = _analytics()

    assert analytics.training.completed == 10
    # 100 for training, 0 for the other three modules.
    assert analytics.weekly_score == 25


def test_empty_week_uses_defaults(make_user):
    make_user("u1")
    analytics = _analytics()

    assert analytics.training.avg_duration == 0.0
    assert analytics.training.weekly_goal == 5
    assert analytics.nutrition.daily_calorie_goal == 2000
    assert analytics.mental.avg_mood_before == 5.0
    assert analytics.mental.avg_mood_after == 5.0
    assert analytics.productivity.avg_focus_score == 0.0
    assert analytics.productivity.weekly_focus_goal == 240
    assert analytics.weekly_score == 0
    assert analytics.streak_days == 0


def test_training_window_is_trailing_seven_days_inclusive(make_user, add_event):
    make_user("u1")
    _training(add_event, NOW - timedelta(days=7))
    _training(add_event, NOW - timedelta(days=7, seconds=1))
    _training(add_event, NOW - timedelta(days=1), calories_burned=None, duration=60)

    training = _analytics().training

    assert training.completed == 2
    assert training.calories_burned == 300
    assert training.avg_duration == 45.0


def test_nutrition_counts_only_the_current_utc_day(make_user, add_event):
    make_user("u1")
    midnight = NOW.replace(hour=0, minute=0)
    add_event(Module.NUTRITION, "u1", meal_type="dinner", total_calories=900,
              macros={"protein": 40}, logged_at=midnight - timedelta(minutes=1))
    add_event(Module.NUTRITION, "u1", meal_type="breakfast", total_calories=400,
              macros={"protein": 20, "carbs": 50, "fat": 10, "fiber": 5}, logged_at=midnight)
    add_event(Module.NUTRITION, "u1", meal_type="snack", total_calories=150, logged_at=NOW - timedelta(hours=1))

    nutrition = _analytics().nutrition

    assert nutrition.consumed == 550
    assert nutrition.meals_logged == 2
    assert (nutrition.protein, nutrition.carbs, nutrition.fat, nutrition.fiber) == (20, 50, 10, 5)


def test_events_dated_after_now_do_not_count(make_user, add_event):
    make_user("u1")
    for i in range(5):
        _training(add_event, NOW + timedelta(days=30, hours=i))
    add_event(Module.NUTRITION, "u1", meal_type="lunch", total_calories=900, logged_at=NOW + timedelta(days=1))
    add_event(Module.MENTAL, "u1", session_type="yoga", mood_before=3, mood_after=9,
              completed_at=NOW + timedelta(minutes=1))
    add_event(Module.PRODUCTIVITY, "u1", session_type="deep_work", duration=240, tasks_completed=3,
              focus_score=9, completed_at=NOW + timedelta(hours=2))

    analytics = _analytics()

    assert analytics.training.completed == 0
    assert analytics.nutrition.consumed == 0
    assert analytics.mental.completed == 0
    assert analytics.productivity.achieved == 0
    assert analytics.weekly_score == 0


def test_mental_and_productivity_averages(make_user, add_event):
    make_user("u1")
    add_event(Module.MENTAL, "u1", session_type="yoga", mood_before=2, mood_after=6, completed_at=NOW - timedelta(hours=3))
    add_event(Module.MENTAL, "u1", session_type="yoga", mood_before=4, mood_after=8, completed_at=NOW - timedelta(hours=2))
    add_event(Module.PRODUCTIVITY, "u1", session_type="focus", duration=25, tasks_completed=1,
              focus_score=6, completed_at=NOW - timedelta(days=2))
    add_event(Module.PRODUCTIVITY, "u1", session_type="focus", duration=35, tasks_completed=3,
              focus_score=9, completed_at=NOW - timedelta(days=3))

    analytics = _analytics()

    assert (analytics.mental.avg_mood_before, analytics.mental.avg_mood_after) == (3.0, 7.0)
    assert analytics.productivity.achieved == 60
    assert analytics.productivity.tasks_completed == 4
    assert analytics.productivity.avg_focus_score == 7.5


def test_streak_spans_modules(make_user, add_event):
    make_user("u1")
    _training(add_event, NOW - timedelta(hours=1))
    add_event(Module.NUTRITION, "u1", meal_type="lunch", total_calories=500, logged_at=NOW - timedelta(days=1))
    add_event(Module.MENTAL, "u1", session_type="yoga", mood_before=5, mood_after=6, completed_at=NOW - timedelta(days=2))
    add_event(Module.PRODUCTIVITY, "u1", session_type="focus", duration=25, tasks_completed=1,
              focus_score=7, completed_at=NOW - timedelta(days=4))

    assert _analytics().streak_days == 3


def test_other_users_events_are_not_counted(make_user, add_event):
    make_user("u1")
    make_user("u2")
    add_event(Module.TRAINING, "u2", workout_type="run", duration=30, completed_at=NOW - timedelta(hours=1))

    analytics = _analytics("u1")

    assert analytics.training.completed == 0
    assert analytics.streak_days == 0


def test_analytics_are_identical_without_writes(make_user, add_event):
    make_user("u1")
    _hit_every_goal(add_event)

    assert _analytics() == _analytics()
