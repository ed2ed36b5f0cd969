"""Nutrition Store - In-memory owner of the active goal and the meal log.

The store is the single source of truth for goals and meals. Every
operation takes one lock, so each call is atomic and a meal added by
add_meal is visible to the next meals_on call.
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Any

from pydantic import ValidationError

from .errors import InvalidGoal, InvalidMeal
from .models import DEFAULT_GOAL, Goal, Meal, StoreSnapshot


logger = logging.getLogger(__name__)


@dataclass
class StoreConfig:
    """Configuration for a nutrition store.

    Attributes:
        timezone: Zone used to bucket meals into calendar days (None for host local time)
        default_goal: Goal active until set_goals is first called
    """

    timezone: tzinfo | None = None
    default_goal: Goal = field(default_factory=lambda: DEFAULT_GOAL)


class NutritionStore:
    """Holds the active Goal and the meal log for one user.

    Meals are kept in insertion order. Queries bucket them by local
    calendar day, never by storage position.
    """

    def __init__(self, config: StoreConfig | None = None) -> None:
        self.config = config or StoreConfig()
        self._lock = threading.Lock()
        self._goal: Goal = self.config.default_goal
        self._meals: list[Meal] = []
        self._ids: set[str] = set()

    # ==================== Goal Operations ====================

    def current_goal(self) -> Goal:
        """Return the active goal."""
        with self._lock:
            return self._goal

    def set_goals(self, goal: Goal | dict[str, Any] | None = None, **fields: Any) -> Goal:
        """Replace the active goal.

        Args:
            goal: A Goal or goal-shaped mapping, or None to build one from keyword fields
            **fields: calories, protein, carbs and fat when goal is None

        Returns:
            The goal now active

        Raises:
            InvalidGoal: If any field is negative, missing or not an integer
            TypeError: If both a goal and keyword fields are given
        """
        if goal is not None and fields:
            raise TypeError("Pass either a Goal or keyword fields, not both")

        if goal is None:
            data = fields
        elif isinstance(goal, Goal):
            # model_construct skips validation, so check the values again
            data = goal.model_dump()
        else:
            data = goal

        try:
            goal = Goal.model_validate(data)
        except ValidationError as e:
            logger.warning("Rejected goal: %s", data)
            raise InvalidGoal.from_validation_error("Invalid goal", e) from e

        with self._lock:
            self._goal = goal

        logger.info(
            "Goals set: %d cal, %dg protein, %dg carbs, %dg fat",
            goal.calories, goal.protein, goal.carbs, goal.fat,
        )
        return goal

    # ==================== Meal Operations ====================

    def add_meal(
        self,
        name: str,
        eaten_at: datetime,
        calories: int,
        protein: int,
        carbs: int,
        fat: int,
    ) -> Meal:
        """Validate and append a meal to the log.

        Args:
            name: Display name (must not be blank)
            eaten_at: When the meal was eaten
            calories: Total calories
            protein: Protein in grams
            carbs: Carbohydrates in grams
            fat: Fat in grams

        Returns:
            The created Meal with its generated id

        Raises:
            InvalidMeal: If the name is empty or any value is negative or not an integer
        """
        try:
            meal = Meal(
                id=str(uuid.uuid4()),
                name=name,
                eaten_at=eaten_at,
                calories=calories,
                protein=protein,
                carbs=carbs,
                fat=fat,
            )
        except ValidationError as e:
            logger.warning("Rejected meal: %r", name)
            raise InvalidMeal.from_validation_error("Invalid meal", e) from e

        with self._lock:
            if meal.id in self._ids:
                meal = meal.model_copy(update={"id": self._new_id()})
            self._meals.append(meal)
            self._ids.add(meal.id)
            count = len(self._meals)

        logger.info("Meal added: %s (%s), %d in log", meal.name, meal.id[:8], count)
        return meal

    def meals_on(self, day: date | datetime) -> list[Meal]:
        """Return meals eaten on the same calendar day as `day`.

        Args:
            day: A date, or a datetime whose local day is used

        Returns:
            Matching meals in insertion order (empty if none)
        """
        target = self.local_day(day)
        with self._lock:
            matches = [m for m in self._meals if self.local_day(m.eaten_at) == target]
        logger.debug("Found %d meals on %s", len(matches), target)
        return matches

    def all_meals(self) -> list[Meal]:
        """Return every logged meal in insertion order."""
        with self._lock:
            return list(self._meals)

    # ==================== Calendar Days ====================

    def local_day(self, moment: date | datetime) -> date:
        """Map a date or datetime to its calendar day in the configured zone.

        Naive datetimes are taken as wall-clock time already in that zone.
        """
        if isinstance(moment, datetime):
            if moment.tzinfo is None:
                return moment.date()
            if self.config.timezone is None:
                return moment.astimezone().date()
            return moment.astimezone(self.config.timezone).date()
        return moment

    def today(self) -> date:
        """Current calendar day in the configured zone."""
        return self.local_day(datetime.now(timezone.utc))

    def now(self) -> datetime:
        """Current time in the configured zone."""
        if self.config.timezone is None:
            return datetime.now().astimezone()
        return datetime.now(self.config.timezone)

    # ==================== Snapshots ====================

    def snapshot(self) -> StoreSnapshot:
        """Capture the goal and meal log for an external persistence layer."""
        with self._lock:
            return StoreSnapshot(goal=self._goal, meals=list(self._meals))

    @classmethod
    def restore(
        cls, snapshot: StoreSnapshot, config: StoreConfig | None = None
    ) -> "NutritionStore":
        """Build a store from a snapshot, keeping its meal ids.

        Raises:
            InvalidMeal: If two meals in the snapshot share an id
        """
        store = cls(config)
        seen: set[str] = set()
        for meal in snapshot.meals:
            if meal.id in seen:
                raise InvalidMeal(
                    "Duplicate meal id",
                    [{"field": "id", "message": f"{meal.id} appears more than once"}],
                )
            seen.add(meal.id)

        store._goal = snapshot.goal
        store._meals = list(snapshot.meals)
        store._ids = seen
        logger.info("Restored store with %d meals", len(store._meals))
        return store

    def _new_id(self) -> str:
        meal_id = str(uuid.uuid4())
        while meal_id in self._ids:
            meal_id = str(uuid.uuid4())
        return meal_id


# Sample meals the app starts with when seeding is enabled
SAMPLE_MEALS = [
    ("Overnight Oats", 430, 30, 55, 10),
    ("Chicken & Rice Bowl", 650, 50, 70, 15),
    ("Greek Yogurt & Berries", 220, 18, 25, 4),
]


def seed_sample_data(store: NutritionStore, day: date | None = None) -> list[Meal]:
    """Log the three sample meals on `day` (defaults to today).

    Meals are spaced through the day at breakfast, lunch and snack times.
    """
    if day is None:
        day = store.today()

    start = datetime(day.year, day.month, day.day, 8, 0)
    meals = []
    for offset, (name, calories, protein, carbs, fat) in zip((0, 4, 7), SAMPLE_MEALS):
        meals.append(
            store.add_meal(
                name=name,
                eaten_at=start + timedelta(hours=offset),
                calories=calories,
                protein=protein,
                carbs=carbs,
                fat=fat,
            )
        )
    return meals
