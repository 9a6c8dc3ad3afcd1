# backend/conftest.py
"""
Pytest configuration and fixtures for NutriSync tests
Provides reusable profiles, targets and scoring contexts
"""

import pytest
from fastapi.testclient import TestClient

from nutrisync.main import app
from nutrisync.models.enums import Sex, TrainingLoad, MealType
from nutrisync.models.scoring import NutritionTargets, NutritionActuals, ScoringContext
from nutrisync.models.targets import UserProfile

# ===== PROFILE FIXTURES =====

@pytest.fixture
def profile_70kg_male():
    """Reference athlete: 70 kg, 175 cm, 30 y, male (BMR 1648.75)"""
    return UserProfile(weight_kg=70, height_cm=175, age=30, sex=Sex.MALE)


@pytest.fixture
def profile_58kg_female():
    return UserProfile(weight_kg=58, height_cm=165, age=34, sex=Sex.FEMALE)


# ===== SCORING FIXTURES =====

@pytest.fixture
def rest_day_targets():
    return NutritionTargets(calories=2310, protein=112, carbs=245, fat=98)


@pytest.fixture
def perfect_rest_context(rest_day_targets):
    """Rest day where every logged macro equals its target"""
    return ScoringContext(
        target=rest_day_targets,
        actual=NutritionActuals(calories=2310, protein=112, carbs=245, fat=98),
        load=TrainingLoad.REST,
        meals_present=(MealType.BREAKFAST, MealType.LUNCH, MealType.DINNER),
    )


@pytest.fixture
def moderate_day_targets():
    return NutritionTargets(
        calories=2970, protein=126, carbs=490, fat=66,
        pre_cho=175, post_cho=70, post_pro=21,
    )


# ===== API FIXTURES =====

@pytest.fixture
def client():
    """FastAPI test client"""
    return TestClient(app)


def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, isolated)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (services working together)"
    )
    config.addinivalue_line(
        "markers", "api: HTTP endpoint tests"
    )
