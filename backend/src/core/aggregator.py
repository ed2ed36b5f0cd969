"""Daily Aggregator - Pure functions for per-day nutrition math.

All functions are pure: same input always produces same output, no side effects.
"""

import math
from collections.abc import Iterable
from datetime import date

from .models import DailySummary, Goal, MacroProgress, MacroRemaining, MacroTotals, Meal


def totals(meals: Iterable[Meal]) -> MacroTotals:
    """Sum calories and macros across meals.

    Args:
        meals: Meals to sum (may be empty)

    Returns:
        MacroTotals, all zero for no meals
    """
    calories = protein = carbs = fat = 0
    for meal in meals:
        calories += meal.calories
        protein += meal.protein
        carbs += meal.carbs
        fat += meal.fat

    return MacroTotals(calories=calories, protein=protein, carbs=carbs, fat=fat)


def progress_ratio(value: int, goal: int) -> float:
    """Fraction of a goal reached, for progress rings and bars.

    A goal of zero or less counts as a goal of 1. The result is clamped
    to [0.0, 1.0] so overshooting never draws past a full ring.

    Args:
        value: Amount consumed
        goal: Target amount

    Returns:
        Ratio between 0.0 and 1.0
    """
    ratio = value / max(goal, 1)
    return max(0.0, min(ratio, 1.0))


def progress_percent(value: int, goal: int) -> int:
    """Clamped progress ratio as a whole percentage (0-100)."""
    return _round_half_up(progress_ratio(value, goal) * 100)


def percentage_text(value: int, goal: int) -> str:
    """Percentage label shown next to a macro row.

    Unlike progress_ratio, a missing goal reads as "0%" rather than being
    divided by 1, and values over the goal are not clamped.

    Args:
        value: Amount consumed
        goal: Target amount

    Returns:
        Label such as "70%"
    """
    if goal <= 0:
        return "0%"
    return f"{_round_half_up(value / goal * 100)}%"


def macro_progress(value: int, goal: int) -> MacroProgress:
    """Bundle every progress view of one nutrient."""
    return MacroProgress(
        value=value,
        goal=goal,
        ratio=progress_ratio(value, goal),
        percent=progress_percent(value, goal),
        percentage_text=percentage_text(value, goal),
    )


def summarize_day(meals: list[Meal], goal: Goal, day: date) -> DailySummary:
    """Calculate the summary for one day's meals against the goal.

    Args:
        meals: Meals already filtered to `day`
        goal: The active goal
        day: Calendar day being summarized

    Returns:
        DailySummary with totals, remaining amounts and progress
    """
    day_totals = totals(meals)

    return DailySummary(
        day=day,
        meals=list(meals),
        goal=goal,
        totals=day_totals,
        remaining=MacroRemaining(
            calories=goal.calories - day_totals.calories,
            protein=goal.protein - day_totals.protein,
            carbs=goal.carbs - day_totals.carbs,
            fat=goal.fat - day_totals.fat,
        ),
        calories=macro_progress(day_totals.calories, goal.calories),
        protein=macro_progress(day_totals.protein, goal.protein),
        carbs=macro_progress(day_totals.carbs, goal.carbs),
        fat=macro_progress(day_totals.fat, goal.fat),
    )


def _round_half_up(x: float) -> int:
    # round() would send 12.5 to 12
    return math.floor(x + 0.5)
