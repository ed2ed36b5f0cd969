"""MCP Server - Tool definitions for Claude integration.

Defines the MCP tools that drive the nutrition store: setting goals,
logging meals and reading a day's progress. This is the presentation
layer for the store; all math lives in the core module.
"""

import logging
import os
from datetime import date, datetime
from zoneinfo import ZoneInfo

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from ..core.aggregator import summarize_day
from ..core.errors import NutritionError
from ..core.models import DailySummary, Meal
from ..core.store import NutritionStore, StoreConfig, seed_sample_data


logger = logging.getLogger(__name__)

transport_security = TransportSecuritySettings(
    enable_dns_rebinding_protection=True,
    allowed_hosts=[
        "localhost:*",
        "127.0.0.1:*",
        *[h.strip() for h in os.environ.get("ALLOWED_HOSTS", "").split(",") if h.strip()],
    ],
)

mcp = FastMCP(
    "macrometer",
    instructions="""MacroMeter - Personal macro tracking assistant.

Use these tools to set the user's daily calorie and macro goals, log meals,
and show progress toward the goals for today or any given day.

After logging a meal, always show the updated daily summary.""",
    stateless_http=True,
    transport_security=transport_security,
)

# Lazy-initialized store
_store: NutritionStore | None = None


def load_store_config() -> StoreConfig:
    """Build store configuration from environment variables."""
    tz_name = os.environ.get("MACROMETER_TIMEZONE")
    return StoreConfig(timezone=ZoneInfo(tz_name) if tz_name else None)


def get_store() -> NutritionStore:
    """Get or create the nutrition store."""
    global _store
    if _store is None:
        _store = NutritionStore(load_store_config())
        if os.environ.get("MACROMETER_SEED_SAMPLE", "").lower() in ("1", "true", "yes"):
            seeded = seed_sample_data(_store)
            logger.info("Seeded %d sample meals", len(seeded))
    return _store


def _meal_dict(meal: Meal) -> dict:
    return {
        "id": meal.id,
        "name": meal.name,
        "eaten_at": meal.eaten_at.isoformat(),
        "calories": meal.calories,
        "protein": meal.protein,
        "carbs": meal.carbs,
        "fat": meal.fat,
    }


def _summary_dict(summary: DailySummary) -> dict:
    return {
        "date": summary.day.isoformat(),
        "meals": [_meal_dict(m) for m in summary.meals],
        "goals": summary.goal.model_dump(),
        "totals": summary.totals.model_dump(),
        "remaining": summary.remaining.model_dump(),
        "progress": {
            "calories": summary.calories.model_dump(),
            "protein": summary.protein.model_dump(),
            "carbs": summary.carbs.model_dump(),
            "fat": summary.fat.model_dump(),
        },
    }


def _day_summary(store: NutritionStore, day: date) -> DailySummary:
    return summarize_day(store.meals_on(day), store.current_goal(), day)


# ==================== Goal Tools ====================


@mcp.tool()
def set_goals(calories: int, protein: int, carbs: int, fat: int) -> str:
    """Set the user's daily calorie and macro goals.

    Args:
        calories: Daily calorie target (e.g., 2200)
        protein: Daily protein target in grams (e.g., 140)
        carbs: Daily carbohydrate target in grams (e.g., 220)
        fat: Daily fat target in grams (e.g., 70)

    Returns:
        Confirmation message with stored goals
    """
    store = get_store()

    try:
        goal = store.set_goals(calories=calories, protein=protein, carbs=carbs, fat=fat)
    except NutritionError as e:
        return f"Goals not saved: {e.message}. All values must be zero or more."

    return (
        f"Goals saved!\n"
        f"Goals: {goal.calories} cal, {goal.protein}g protein, "
        f"{goal.carbs}g carbs, {goal.fat}g fat"
    )


@mcp.tool()
def get_goals() -> dict:
    """Retrieve the user's current daily goals.

    Returns:
        Dictionary with calorie, protein, carb and fat goals
    """
    return get_store().current_goal().model_dump()


# ==================== Logging Tools ====================


@mcp.tool()
def log_meal(
    name: str,
    calories: int,
    protein: int,
    carbs: int,
    fat: int,
    eaten_at: str | None = None,
) -> dict:
    """Log a meal.

    Args:
        name: Name of the meal (e.g., "Overnight Oats")
        calories: Total calories for the meal
        protein: Protein in grams
        carbs: Carbohydrates in grams
        fat: Fat in grams
        eaten_at: Optional ISO 8601 time the meal was eaten (defaults to now)

    Returns:
        The created meal and the summary for the day it was logged on
    """
    store = get_store()

    if eaten_at is None:
        when = store.now()
    else:
        try:
            when = datetime.fromisoformat(eaten_at)
        except ValueError:
            return {"error": "Invalid eaten_at. Use ISO 8601, e.g. 2025-01-31T12:30."}

    try:
        meal = store.add_meal(
            name=name,
            eaten_at=when,
            calories=calories,
            protein=protein,
            carbs=carbs,
            fat=fat,
        )
    except NutritionError as e:
        return e.to_dict()

    summary = _day_summary(store, store.local_day(meal.eaten_at))

    return {
        "meal": _meal_dict(meal),
        "daily_summary": _summary_dict(summary),
    }


# ==================== Query Tools ====================


@mcp.tool()
def get_today() -> dict:
    """Get today's meals with totals and progress toward goals.

    Returns:
        Dictionary with date, meals, goals, totals, remaining and progress
    """
    store = get_store()
    return _summary_dict(_day_summary(store, store.today()))


@mcp.tool()
def get_day(date_str: str) -> dict:
    """Get a specific day's meals with totals and progress.

    Args:
        date_str: Date in YYYY-MM-DD format

    Returns:
        Dictionary with date, meals, goals, totals, remaining and progress
    """
    try:
        day = date.fromisoformat(date_str)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    return _summary_dict(_day_summary(get_store(), day))
