"""Tests for MCP tools - called directly against a fresh in-memory store."""

import pytest
from datetime import date
from zoneinfo import ZoneInfo

from src.core.store import NutritionStore
from src.shell import mcp_server
from src.shell.mcp_server import (
    get_day,
    get_goals,
    get_store,
    get_today,
    load_store_config,
    log_meal,
    set_goals,
)


@pytest.fixture(autouse=True)
def fresh_store(monkeypatch):
    """Give each test its own empty store."""
    store = NutritionStore()
    monkeypatch.setattr(mcp_server, "_store", store)
    yield store


class TestGoalTools:
    """Tests for set_goals and get_goals."""

    def test_set_then_get(self):
        """Saved goals are returned by get_goals."""
        message = set_goals(calories=2000, protein=150, carbs=200, fat=65)
        assert "Goals saved" in message
        assert get_goals() == {"calories": 2000, "protein": 150, "carbs": 200, "fat": 65}

    def test_negative_goal_reports_error(self, fresh_store):
        """Negative goal is rejected without changing the stored goal."""
        before = fresh_store.current_goal()
        message = set_goals(calories=-1, protein=150, carbs=200, fat=65)
        assert "not saved" in message
        assert fresh_store.current_goal() == before


class TestLogMeal:
    """Tests for log_meal."""

    def test_returns_meal_and_summary(self):
        """Logged meal comes back with its day's summary."""
        result = log_meal(
            name="Overnight Oats",
            calories=430,
            protein=30,
            carbs=55,
            fat=10,
            eaten_at="2024-12-28T08:00:00",
        )

        assert result["meal"]["name"] == "Overnight Oats"
        assert result["daily_summary"]["date"] == "2024-12-28"
        assert result["daily_summary"]["totals"]["calories"] == 430

    def test_defaults_to_now(self, fresh_store):
        """Without eaten_at the meal lands on today."""
        result = log_meal(name="Snack", calories=100, protein=5, carbs=10, fat=3)
        assert result["daily_summary"]["date"] == fresh_store.today().isoformat()

    def test_invalid_meal_returns_error(self, fresh_store):
        """Negative values return an error dict and log nothing."""
        result = log_meal(name="Bad", calories=-10, protein=1, carbs=1, fat=1)
        assert result["error"] == "Invalid meal"
        assert result["details"][0]["field"] == "calories"
        assert fresh_store.all_meals() == []

    def test_invalid_timestamp_returns_error(self, fresh_store):
        """Unparseable eaten_at is reported."""
        result = log_meal(name="Food", calories=1, protein=1, carbs=1, fat=1, eaten_at="yesterday")
        assert "error" in result
        assert fresh_store.all_meals() == []


class TestDayQueries:
    """Tests for get_today and get_day."""

    def test_empty_today(self):
        """Today with no meals has zero totals and 0% labels."""
        result = get_today()
        assert result["meals"] == []
        assert result["totals"] == {"calories": 0, "protein": 0, "carbs": 0, "fat": 0}
        assert result["progress"]["protein"]["percentage_text"] == "0%"

    def test_get_day_scenario(self):
        """A day's meals roll up with progress against the goal."""
        set_goals(calories=2200, protein=140, carbs=220, fat=70)
        log_meal("Overnight Oats", 430, 30, 55, 10, eaten_at="2024-12-28T08:00:00")
        log_meal("Chicken & Rice Bowl", 650, 50, 70, 15, eaten_at="2024-12-28T12:00:00")
        log_meal("Greek Yogurt & Berries", 220, 18, 25, 4, eaten_at="2024-12-28T15:00:00")
        log_meal("Late Pizza", 900, 35, 100, 40, eaten_at="2024-12-29T21:00:00")

        result = get_day("2024-12-28")

        assert result["totals"] == {"calories": 1300, "protein": 98, "carbs": 150, "fat": 29}
        assert result["remaining"]["calories"] == 900
        assert result["progress"]["protein"]["percentage_text"] == "70%"
        assert len(result["meals"]) == 3

    def test_get_day_invalid_date(self):
        """Invalid date string returns an error."""
        assert get_day("28/12/2024") == {"error": "Invalid date format. Use YYYY-MM-DD."}

    def test_get_day_without_meals(self):
        """A day without meals is empty, not an error."""
        result = get_day(date(2020, 1, 1).isoformat())
        assert result["meals"] == []


class TestStoreConfig:
    """Tests for environment-driven store setup."""

    def test_timezone_from_env(self, monkeypatch):
        """MACROMETER_TIMEZONE selects the calendar zone."""
        monkeypatch.setenv("MACROMETER_TIMEZONE", "UTC")
        assert load_store_config().timezone == ZoneInfo("UTC")

    def test_no_timezone_uses_host(self, monkeypatch):
        """Without MACROMETER_TIMEZONE the host zone is used."""
        monkeypatch.delenv("MACROMETER_TIMEZONE", raising=False)
        assert load_store_config().timezone is None

    def test_seed_sample(self, monkeypatch):
        """MACROMETER_SEED_SAMPLE logs the sample meals for today."""
        monkeypatch.setattr(mcp_server, "_store", None)
        monkeypatch.delenv("MACROMETER_TIMEZONE", raising=False)
        monkeypatch.setenv("MACROMETER_SEED_SAMPLE", "true")

        store = get_store()

        assert len(store.meals_on(store.today())) == 3
