from types import SimpleNamespace

import pytest

from wellcoach.application.services.recommendation_engine import (
    DayNutritionTotals,
    mental_rules,
    nutrition_rules,
    productivity_rules,
    training_rules,
)
from wellcoach.domain.entities import Module, RecommendationDraft
from wellcoach.domain.errors import format_field_errors
from wellcoach.domain.value_objects import Macros, to_number


def _types(drafts):
    return [d.recommendation_type for d in drafts]


def training(duration=45, calories_burned=350):
    return SimpleNamespace(duration=duration, calories_burned=calories_burned)


# --- Training ---

def test_low_calorie_training_gets_one_intensity_boost():
    drafts = training_rules(training(calories_burned=150))
    assert _types(drafts) == ["intensity_boost"]
    assert drafts[0].priority == 7
    assert drafts[0].module == Module.TRAINING
    assert drafts[0].action_data["targetCalories"] == 150 * 1.15


def test_zero_calories_still_counts_as_low():
    assert _types(training_rules(training(calories_burned=0))) == ["intensity_boost"]


def test_missing_calories_never_fires_intensity_rule():
    assert training_rules(training(calories_burned=None)) == []


@pytest.mark.parametrize("duration", [20, 30, 90])
def test_long_enough_sessions_never_get_duration_increase(duration):
    assert "duration_increase" not in _types(training_rules(training(duration=duration)))


def test_short_low_burn_session_fires_both_rules():
    drafts = training_rules(training(duration=15, calories_burned=120))
    assert _types(drafts) == ["intensity_boost", "duration_increase"]
    assert drafts[1].action_data == {"targetDuration": 30}
    assert drafts[1].priority == 6

# --- Nutrition ---

def test_day_over_calorie_ceiling_gets_reduction():
    drafts = nutrition_rules(DayNutritionTotals(calories=2600, protein=130))
    assert _types(drafts) == ["calorie_reduction"]
    assert drafts[0].action_data == {"currentCalories": 2600, "targetCalories": 2000}
    assert drafts[0].priority == 8


def test_exactly_at_ceiling_is_not_over():
    assert nutrition_rules(DayNutritionTotals(calories=2500, protein=100)) == []


def test_low_protein_day_gets_protein_boost():
    drafts = nutrition_rules(DayNutritionTotals(calories=1800, protein=40))
    assert _types(drafts) == ["protein_boost"]
    assert drafts[0].action_data == {"currentProtein": 40, "targetProtein": 120}


def test_day_totals_treat_missing_macros_as_zero():
    entries = [
        SimpleNamespace(total_calories=500, macros={"protein": 30, "carbs": 50}),
        SimpleNamespace(total_calories=700, macros=None),
        SimpleNamespace(total_calories=None, macros={"fat": 10}),
    ]
    totals = DayNutritionTotals.from_entries(entries)
    assert totals.calories == 1200
    assert totals.protein == 30

# --- Mental ---

def test_low_mood_and_big_lift_fire_both_rules():
    session = SimpleNamespace(mood_before=3, mood_after=8, session_type="meditation")
    drafts = mental_rules(session)
    assert _types(drafts) == ["mood_boost", "technique_success"]
    assert drafts[0].priority == 9
    assert drafts[0].action_data == {"recommendedDuration": 10, "technique": "breathing"}
    assert drafts[1].action_data == {"successfulTechnique": "meditation"}


def test_mood_lift_of_exactly_three_is_not_a_success():
    session = SimpleNamespace(mood_before=5, mood_after=8, session_type="journaling")
    assert mental_rules(session) == []

# --- Productivity ---

def test_unfocused_session_without_tasks_fires_both_rules():
    session = SimpleNamespace(focus_score=4, tasks_completed=0)
    drafts = productivity_rules(session)
    assert _types(drafts) == ["focus_improvement", "task_completion"]
    assert drafts[0].action_data == {"recommendedTechnique": "pomodoro", "targetScore": 8}
    assert drafts[1].action_data == {"strategy": "break_down_tasks"}


def test_focused_productive_session_gets_nothing():
    assert productivity_rules(SimpleNamespace(focus_score=6, tasks_completed=3)) == []

# --- Value objects / drafts ---

@pytest.mark.parametrize("priority", [0, 11, -1])
def test_draft_rejects_priority_outside_range(priority):
    with pytest.raises(ValueError):
        RecommendationDraft(
            module=Module.MENTAL, recommendation_type="x", title="t", description="d", priority=priority
        )


def test_macros_clamp_negative_and_garbage_values():
    macros = Macros.from_json({"protein": -5, "carbs": "12.5", "fat": "abc"})
    assert macros == Macros(protein=0.0, carbs=12.5, fat=0.0, fiber=0.0)


def test_to_number_defaults():
    assert to_number(None) == 0.0
    assert to_number(None, default=5.0) == 5.0
    assert to_number("7") == 7.0


def test_format_field_errors_drops_body_prefix():
    errors = format_field_errors([{"loc": ("body", "workoutType"), "msg": "Field required", "type": "missing"}])
    assert errors == [{"field": "workoutType", "message": "Field required", "type": "missing"}]
