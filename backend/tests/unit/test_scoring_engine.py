"""
Tests for the unified scoring engine and meal-level scores
"""

from dataclasses import replace

import pytest

from nutrisync.core.errors import InvalidArgumentError
from nutrisync.models.enums import TrainingLoad, MealType, ExperienceLevel, PenaltyProfileName, SessionIntensity
from nutrisync.models.scoring import (
    ScoringContext, NutritionTargets, NutritionActuals, WindowStatus, FuelingWindows,
    TrainingPlan, TrainingActual, ScoringFlags, MealLogEntry
)
from nutrisync.services.scoring_context import resolve_context
from nutrisync.services.scoring_engine import (
    UnifiedScoringEngine, calculate_unified_score, calculate_macro_score, calculate_timing_score,
    calculate_structure_score, calculate_penalties, calculate_bonuses, calculate_meal_scores
)
from nutrisync.core.scoring_profiles import PENALTY_PROFILES
from nutrisync.services.targets_engine import compute_day_target

ALL_MEALS = (MealType.BREAKFAST, MealType.LUNCH, MealType.DINNER, MealType.SNACK)


@pytest.fixture
def perfect_moderate_context(moderate_day_targets):
    """Moderate day, food and training both exactly on plan, no heart-rate data"""
    return ScoringContext(
        target=moderate_day_targets,
        actual=NutritionActuals(
            calories=2970, protein=126, carbs=490, fat=66,
            pre_cho=175, post_cho=70, post_pro=21,
        ),
        load=TrainingLoad.MODERATE,
        meals_present=ALL_MEALS,
        training_plan=TrainingPlan(duration_min=60, type="tempo"),
        training_actual=TrainingActual(duration_min=60, type="tempo"),
    )


@pytest.mark.unit
class TestMacroScore:

    def test_exact(self):
        assert calculate_macro_score(100, 100) == 100

    def test_zero_target_never_perfect(self):
        assert calculate_macro_score(0, 0) == 0
        assert calculate_macro_score(-5, 10) == 0

    @pytest.mark.parametrize("actual,expected", [
        (107, 100), (115, 80), (80, 60), (130, 40), (140, 20), (150, 0),
    ])
    def test_intermediate_ladder(self, actual, expected):
        assert calculate_macro_score(100, actual) == expected

    def test_experience_levels(self):
        # 12% off
        assert calculate_macro_score(100, 112, ExperienceLevel.BEGINNER) == 80
        assert calculate_macro_score(100, 112, ExperienceLevel.INTERMEDIATE) == 80
        assert calculate_macro_score(100, 112, ExperienceLevel.ADVANCED) == 60


@pytest.mark.unit
class TestScenarios:

    def test_perfect_rest_day(self, perfect_rest_context):
        breakdown = calculate_unified_score(perfect_rest_context)

        assert 90 <= breakdown.total <= 100
        assert breakdown.total == 96
        assert breakdown.nutrition.macros == 100
        assert breakdown.nutrition.timing == 100
        assert breakdown.nutrition.structure == 75
        assert breakdown.weights.training == 0
        assert breakdown.penalties == 0
        assert breakdown.data_completeness.reliable

    def test_overconsumption(self, perfect_rest_context):
        over = replace(perfect_rest_context, actual=replace(perfect_rest_context.actual, calories=2772))
        breakdown = calculate_unified_score(over)

        assert breakdown.overconsumption_penalty == 10
        # macros: 60 * 0.3 + 100 * 0.7 = 88 -> nutrition 90.25
        assert breakdown.total == 80
        assert breakdown.total < breakdown.nutrition.total

    def test_slight_excess_not_penalised(self, perfect_rest_context):
        over = replace(perfect_rest_context, actual=replace(perfect_rest_context.actual, calories=2587))
        assert calculate_unified_score(over).overconsumption_penalty == 0

    def test_general_strategy_threshold(self, perfect_rest_context):
        over = replace(
            perfect_rest_context,
            strategy="general",
            actual=replace(perfect_rest_context.actual, calories=2587),
        )
        assert calculate_unified_score(over).overconsumption_penalty == 5

    def test_no_food_logs_reduced(self, perfect_rest_context):
        context = replace(perfect_rest_context, has_food_logs=False)
        breakdown = calculate_unified_score(context)

        assert breakdown.total == 96 - 15
        assert breakdown.penalties == -15
        assert not breakdown.data_completeness.reliable
        assert "food logs" in breakdown.data_completeness.missing_data

    def test_no_food_logs_strict(self, perfect_rest_context):
        context = replace(perfect_rest_context, has_food_logs=False)
        breakdown = UnifiedScoringEngine(PenaltyProfileName.STRICT).score(context)
        assert breakdown.total == 96 - 30

    def test_perfect_training_day(self, perfect_moderate_context):
        breakdown = calculate_unified_score(perfect_moderate_context)

        assert breakdown.total == 100
        assert breakdown.training.total == 100
        assert breakdown.weights.nutrition == 0.6
        assert breakdown.weights.training == 0.4


@pytest.mark.unit
class TestTraining:

    def test_without_heart_rate_completion_takes_intensity_weight(self, perfect_moderate_context):
        context = replace(perfect_moderate_context, training_actual=TrainingActual(duration_min=48, type="tempo"))
        breakdown = calculate_unified_score(context)

        # ratio 0.8 -> 60 * 0.75 + 100 * 0.25
        assert breakdown.training.completion == 60
        assert breakdown.training.total == 70
        assert breakdown.total == 88

    def test_heart_rate_enables_intensity(self, perfect_moderate_context):
        context = replace(
            perfect_moderate_context,
            training_actual=TrainingActual(duration_min=60, type="tempo", avg_hr=150),
            intensity_near=True,
        )
        breakdown = calculate_unified_score(context)

        assert breakdown.training.intensity == 60
        # 100 * 0.6 + 100 * 0.25 + 60 * 0.15 = 94
        assert breakdown.training.total == 94

    def test_heart_rate_intensity_missed(self, perfect_moderate_context):
        context = replace(
            perfect_moderate_context,
            training_actual=TrainingActual(duration_min=60, type="tempo", avg_hr=150),
        )
        assert calculate_unified_score(context).training.total == 85

    def test_type_mismatch(self, perfect_moderate_context):
        context = replace(perfect_moderate_context, type_family_match=False)
        breakdown = calculate_unified_score(context)
        assert breakdown.training.type_match == 0
        assert breakdown.training.total == 75

    def test_way_off_plan(self, perfect_moderate_context):
        context = replace(perfect_moderate_context, training_actual=TrainingActual(duration_min=30))
        assert calculate_unified_score(context).training.completion == 0

    def test_no_plan_full_completion(self, perfect_moderate_context):
        context = replace(perfect_moderate_context, training_plan=None, training_actual=None)
        assert calculate_unified_score(context).training.completion == 100

    @pytest.mark.parametrize("load", [TrainingLoad.MODERATE, TrainingLoad.LONG, TrainingLoad.QUALITY])
    def test_training_day_without_training_data(self, perfect_moderate_context, load):
        context = replace(perfect_moderate_context, load=load, training_plan=None, training_actual=None)
        breakdown = calculate_unified_score(context)

        assert breakdown.training.type_match == 0
        assert breakdown.training.total == 75
        assert "training data" in breakdown.data_completeness.missing_data

    def test_rest_day_needs_no_training_data(self, perfect_rest_context):
        breakdown = calculate_unified_score(perfect_rest_context)
        assert "training data" not in breakdown.data_completeness.missing_data

    @pytest.mark.parametrize("planned,completed,expected", [
        ("recovery", "Easy", 100),
        ("tempo", "tempo", 100),
        ("tempo", "interval", 0),
        ("hill repeats", "hill repeats", 100),
        ("tempo", None, 0),
    ])
    def test_type_family_from_session_types(self, perfect_moderate_context, planned, completed, expected):
        context = replace(
            perfect_moderate_context,
            training_plan=TrainingPlan(duration_min=60, type=planned),
            training_actual=TrainingActual(duration_min=60, type=completed),
        )
        assert calculate_unified_score(context).training.type_match == expected

    @pytest.mark.parametrize("avg_hr,expected_intensity,expected_total", [
        (150, 100, 100),  # 79% of 190 -> moderate
        (170, 60, 94),    # 89% -> high, one zone off
        (110, 60, 94),    # 58% -> low, one zone off
    ])
    def test_intensity_from_heart_rate_and_age(self, perfect_moderate_context, profile_70kg_male,
                                               avg_hr, expected_intensity, expected_total):
        context = replace(
            perfect_moderate_context,
            profile=profile_70kg_male,
            training_plan=TrainingPlan(duration_min=60, type="tempo", intensity=SessionIntensity.MODERATE),
            training_actual=TrainingActual(duration_min=60, type="tempo", avg_hr=avg_hr),
        )
        breakdown = calculate_unified_score(context)

        assert breakdown.training.intensity == expected_intensity
        assert breakdown.training.total == expected_total

    def test_two_zones_off(self, perfect_moderate_context, profile_70kg_male):
        context = replace(
            perfect_moderate_context,
            profile=profile_70kg_male,
            training_plan=TrainingPlan(duration_min=60, type="tempo", intensity="low"),
            training_actual=TrainingActual(duration_min=60, type="tempo", avg_hr=170),
        )
        assert calculate_unified_score(context).training.intensity == 0

    def test_explicit_intensity_flags_win(self, perfect_moderate_context, profile_70kg_male):
        context = replace(
            perfect_moderate_context,
            profile=profile_70kg_male,
            training_plan=TrainingPlan(duration_min=60, type="tempo", intensity=SessionIntensity.MODERATE),
            training_actual=TrainingActual(duration_min=60, type="tempo", avg_hr=150),
            intensity_ok=False,
        )
        assert calculate_unified_score(context).training.total == 85


@pytest.mark.unit
class TestTiming:

    def _windows(self, pre=True, during=False, post=True, pre_in_window=True):
        return FuelingWindows(
            pre=WindowStatus(applicable=pre, in_window=pre_in_window),
            during=WindowStatus(applicable=during),
            post=WindowStatus(applicable=post),
        )

    def test_out_of_window_capped(self, perfect_moderate_context):
        context = replace(perfect_moderate_context, windows=self._windows(pre_in_window=False))
        # pre 60 * 0.4 + 100 * 0.4 + 100 * 0.2
        assert calculate_timing_score(resolve_context(context)) == pytest.approx(84)

    def test_partial_pre_dose(self, perfect_moderate_context):
        actual = replace(perfect_moderate_context.actual, pre_cho=90)
        context = replace(perfect_moderate_context, actual=actual)
        assert calculate_timing_score(resolve_context(context)) == pytest.approx(60 * 0.4 + 60)

    def test_missed_pre_dose(self, perfect_moderate_context):
        actual = replace(perfect_moderate_context.actual, pre_cho=None)
        context = replace(perfect_moderate_context, actual=actual)
        assert calculate_timing_score(resolve_context(context)) == pytest.approx(60)

    def test_post_uses_weaker_dose(self, perfect_moderate_context):
        actual = replace(perfect_moderate_context.actual, post_pro=0)
        context = replace(perfect_moderate_context, actual=actual)
        assert calculate_timing_score(resolve_context(context)) == pytest.approx(80)

    def test_during_linear(self):
        context = ScoringContext(
            target=NutritionTargets(calories=3300, protein=133, carbs=630, fat=74, during_cho_per_hour=45),
            actual=NutritionActuals(calories=3300, protein=133, carbs=630, fat=74, during_cho_per_hour=60),
            load=TrainingLoad.LONG,
            windows=self._windows(pre=False, during=True, post=False),
        )
        # delta 15 g/h -> 75
        assert calculate_timing_score(resolve_context(context)) == pytest.approx(75 * 0.4 + 40 + 20)

    def test_rest_day_windows_not_applicable(self, perfect_rest_context):
        assert calculate_timing_score(resolve_context(perfect_rest_context)) == pytest.approx(100)


@pytest.mark.unit
class TestStructure:

    def test_rest_day_snack_adds_nothing(self, perfect_rest_context):
        context = replace(perfect_rest_context, meals_present=ALL_MEALS)
        assert calculate_structure_score(resolve_context(context)) == 75

    def test_training_day_all_meals(self, perfect_moderate_context):
        assert calculate_structure_score(resolve_context(perfect_moderate_context)) == 100

    def test_single_big_meal_capped(self, perfect_moderate_context):
        context = replace(perfect_moderate_context, single_meal_over_60pct=True)
        assert calculate_structure_score(resolve_context(context)) == 70

    def test_meal_strings_accepted(self, perfect_rest_context):
        context = replace(perfect_rest_context, meals_present=("breakfast", "dinner"))
        assert calculate_structure_score(resolve_context(context)) == 50


@pytest.mark.unit
class TestModifiers:

    def test_bonus_cap(self, perfect_rest_context):
        flags = ScoringFlags(window_sync_all=True, streak_days=7, hydration_ok=True)
        context = replace(perfect_rest_context, flags=flags)

        assert calculate_bonuses(resolve_context(context)) == 10
        assert calculate_unified_score(context).total == 100

    def test_streak_bonus(self, perfect_rest_context):
        context = replace(perfect_rest_context, flags=ScoringFlags(streak_days=3))
        assert calculate_bonuses(resolve_context(context)) == 3

    def _all_penalties_context(self, context):
        return replace(
            context,
            actual=replace(context.actual, carbs=300),
            training_actual=TrainingActual(duration_min=95),
            flags=ScoringFlags(is_hard_day=True, big_deficit=True, missed_post_window=True),
        )

    def test_reduced_combined_floor(self, perfect_moderate_context):
        resolved = resolve_context(self._all_penalties_context(perfect_moderate_context))
        assert calculate_penalties(resolved, PENALTY_PROFILES[PenaltyProfileName.REDUCED]) == -8

    def test_strict_combined_floor(self, perfect_moderate_context):
        resolved = resolve_context(self._all_penalties_context(perfect_moderate_context))
        assert calculate_penalties(resolved, PENALTY_PROFILES[PenaltyProfileName.STRICT]) == -15

    def test_big_deficit_needs_long_session(self, perfect_moderate_context):
        context = replace(perfect_moderate_context, flags=ScoringFlags(big_deficit=True))
        resolved = resolve_context(context)
        assert calculate_penalties(resolved, PENALTY_PROFILES[PenaltyProfileName.STRICT]) == 0

    def test_hard_day_fuelled_properly(self, perfect_moderate_context):
        context = replace(perfect_moderate_context, flags=ScoringFlags(is_hard_day=True))
        resolved = resolve_context(context)
        assert calculate_penalties(resolved, PENALTY_PROFILES[PenaltyProfileName.STRICT]) == 0


@pytest.mark.unit
class TestBoundsAndProfiles:

    def test_floor_at_zero(self):
        context = ScoringContext(
            target=NutritionTargets(calories=2500, protein=120, carbs=300, fat=80),
            actual=NutritionActuals(calories=0, protein=0, carbs=0, fat=0),
            has_food_logs=False,
            flags=ScoringFlags(is_hard_day=True, missed_post_window=True),
        )
        breakdown = calculate_unified_score(context, penalty_profile="strict")
        assert breakdown.total == 0

    @pytest.mark.parametrize("profile", list(PenaltyProfileName))
    @pytest.mark.parametrize("load", list(TrainingLoad))
    def test_always_bounded(self, perfect_rest_context, profile, load):
        context = replace(
            perfect_rest_context,
            load=load,
            flags=ScoringFlags(window_sync_all=True, streak_days=10, hydration_ok=True),
        )
        total = calculate_unified_score(context, profile).total
        assert 0 <= total <= 100

    def test_deterministic(self, perfect_moderate_context):
        engine = UnifiedScoringEngine()
        assert engine.score(perfect_moderate_context) == engine.score(perfect_moderate_context)

    def test_profile_is_per_engine(self, perfect_rest_context):
        context = replace(perfect_rest_context, has_food_logs=False)
        strict = UnifiedScoringEngine("strict")
        reduced = UnifiedScoringEngine("reduced")
        assert strict.score(context).total < reduced.score(context).total
        assert reduced.score(context).total == 81

    def test_unknown_profile(self):
        with pytest.raises(InvalidArgumentError):
            UnifiedScoringEngine("lenient")

    def test_negative_intake_rejected(self, perfect_rest_context):
        context = replace(perfect_rest_context, actual=replace(perfect_rest_context.actual, fat=-1))
        with pytest.raises(InvalidArgumentError):
            calculate_unified_score(context)


@pytest.mark.unit
class TestMealScores:

    @pytest.fixture
    def meals(self, profile_70kg_male):
        return compute_day_target(profile_70kg_male, TrainingLoad.MODERATE, "2025-10-12").meals

    def test_exact_meal(self, meals):
        breakfast = meals[0]
        logs = [MealLogEntry(MealType.BREAKFAST, breakfast.kcal, breakfast.protein_g,
                             breakfast.cho_g, breakfast.fat_g)]
        scores = calculate_meal_scores(meals, logs)

        assert scores[0].meal_type == MealType.BREAKFAST
        assert scores[0].score == 100

    def test_unlogged_meals_score_zero(self, meals):
        scores = calculate_meal_scores(meals, [])
        assert len(scores) == 4
        assert all(score.score == 0 for score in scores)
        assert scores[1].breakdown.calories == 0

    def test_entries_are_summed(self, meals):
        breakfast = meals[0]
        logs = [
            MealLogEntry(MealType.BREAKFAST, 400, 20, 70, 9),
            MealLogEntry("breakfast", breakfast.kcal - 400, breakfast.protein_g - 20,
                         breakfast.cho_g - 70, breakfast.fat_g - 9),
        ]
        assert calculate_meal_scores(meals, logs)[0].score == 100

    def test_calories_off(self, meals):
        breakfast = meals[0]
        logs = [MealLogEntry(MealType.BREAKFAST, breakfast.kcal * 1.2, breakfast.protein_g,
                             breakfast.cho_g, breakfast.fat_g)]
        # 60 * 0.4 + 100 * 0.6
        assert calculate_meal_scores(meals, logs)[0].score == 84

    def test_negative_log_rejected(self, meals):
        with pytest.raises(InvalidArgumentError):
            calculate_meal_scores(meals, [MealLogEntry(MealType.LUNCH, -100)])
