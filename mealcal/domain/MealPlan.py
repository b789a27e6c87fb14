"""MealPlan aggregate: one user's calendar week of (date, meal type) -> recipe snapshot entries.

The cached totals are derived state. Every mutation recomputes them, and the
repository recomputes them again right before writing, so callers never see a
stale ``total_calories``.
"""
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from mealcal.domain.MealEntry import MealEntry, RecipeSnapshot, validate_meal_type, validate_servings
from mealcal.domain.Recipe import Recipe
from mealcal.domain.errors import ValidationError
from mealcal.logic.reporting.nutrition import nutrition_for_date, weekly_nutrition_summary
from mealcal.logic.shopping.list_builder import build_grocery_list
from mealcal.utilities.constants import DAYS_PER_WEEK, MEAL_TYPES
from mealcal.utilities.dates import DateLike, as_date, date_key, is_same_day, week_start, week_id


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class MealPlan:
    def __init__(self, user_id: str, week_start_date: date, meals: Optional[List[MealEntry]] = None,
                 notes: str = "", is_active: bool = True, id: str = "", version: int = 0,
                 created_at: Optional[str] = None, updated_at: Optional[str] = None):
        if not user_id:
            raise ValidationError("user_id is required")
        self.id = id or uuid4().hex
        self.user_id = str(user_id)
        self.week_start = week_start(week_start_date)
        self.week_end = self.week_start + timedelta(days=DAYS_PER_WEEK - 1)
        self.week_id = MealPlan.week_id_for(self.week_start)
        self.meals: List[MealEntry] = meals[:] if meals else []
        self.notes = (notes or "").strip()
        self.is_active = bool(is_active)
        self.version = version
        self.created_at = created_at or _now_iso()
        self.updated_at = updated_at or self.created_at
        self._total_calories = 0
        self._total_cost = 0
        self.recompute_totals()

    @classmethod
    def new(cls, user_id: str, any_date: DateLike) -> "MealPlan":
        '''Empty plan for the Sunday..Saturday week containing ``any_date``.'''
        return cls(user_id, as_date(any_date))

    @staticmethod
    def week_id_for(any_date: DateLike) -> str:
        '''Storage week id of the plan covering ``any_date`` (numbered from its Sunday).'''
        return week_id(week_start(any_date))

    # --- Derived totals (read-only) ---------------------------------------
    @property
    def total_calories(self):
        return self._total_calories

    @property
    def total_cost(self):
        return self._total_cost

    def recompute_totals(self):
        self._total_calories = sum(e.snapshot.nutrition.calories * e.servings for e in self.meals)
        # No pricing data exists for recipes; the cost total stays 0 until it does
        self._total_cost = 0
        return self

    # --- Mutations ----------------------------------------------------------
    def add_meal(self, date: DateLike, meal_type: str, recipe: Recipe, servings: int = 1, notes: str = "") -> MealEntry:
        '''
        Schedules ``recipe`` in the (date, meal_type) slot, replacing whatever was there.
        '''
        if date is None:
            raise ValidationError("date is required")
        validate_meal_type(meal_type)
        validate_servings(servings)
        if recipe is None:
            raise ValidationError("recipe is required")
        day = as_date(date)
        entry = MealEntry(
            date=day,
            meal_type=meal_type,
            recipe_id=recipe.id,
            snapshot=RecipeSnapshot.from_recipe(recipe),
            servings=servings,
            notes=notes,
        )
        self.meals = [m for m in self.meals if m.slot != entry.slot]
        self.meals.append(entry)
        self.recompute_totals()
        return entry

    def remove_meal(self, date: DateLike, meal_type: str) -> bool:
        '''
        Removes the (date, meal_type) entry; removing an empty slot is a no-op.
        '''
        if date is None:
            raise ValidationError("date is required")
        slot = (date_key(date), validate_meal_type(meal_type))
        remaining = [m for m in self.meals if m.slot != slot]
        removed = len(remaining) != len(self.meals)
        self.meals = remaining
        self.recompute_totals()
        return removed

    def clear(self):
        self.meals = []
        self.recompute_totals()
        return self

    # --- Queries ------------------------------------------------------------
    def meals_for_date(self, date: DateLike) -> List[MealEntry]:
        return [m for m in self.meals if is_same_day(m.date, date)]

    def get_meal(self, date: DateLike, meal_type: str) -> Optional[MealEntry]:
        slot = (date_key(date), meal_type)
        for m in self.meals:
            if m.slot == slot:
                return m
        return None

    def contains_date(self, date: DateLike) -> bool:
        return self.week_start <= as_date(date) <= self.week_end

    def fill_state(self) -> str:
        """'empty', 'partial' or 'full' (every meal type on all 7 days); observational only."""
        if not self.meals:
            return "empty"
        filled = {m.slot for m in self.meals if self.contains_date(m.date)}
        return "full" if len(filled) == DAYS_PER_WEEK * len(MEAL_TYPES) else "partial"

    def grocery_list(self, start_date: Optional[DateLike] = None, end_date: Optional[DateLike] = None) -> List[str]:
        return build_grocery_list(self.meals, start_date, end_date)

    def nutrition_for_date(self, date: Optional[DateLike] = None) -> Dict[str, float]:
        return nutrition_for_date(self.meals, date)

    def weekly_nutrition_summary(self) -> Dict[str, Any]:
        return weekly_nutrition_summary(self)

    @property
    def date_range_label(self) -> str:
        start, end = self.week_start, self.week_end
        return f"{start:%b} {start.day} - {end:%b} {end.day}, {end.year}"

    def __str__(self) -> str:
        return f"MealPlan {self.week_id} for {self.user_id} - {len(self.meals)} meals - {self.total_calories} kcal"

    __repr__ = __str__

    # --- Persistence shape --------------------------------------------------
    @staticmethod
    def from_dict(data) -> "MealPlan":
        d = dict(data) if isinstance(data, dict) else {}
        # Stored totals are ignored; the constructor recomputes them from the entries
        return MealPlan(
            id=d.get('id') or '',
            user_id=d.get('user_id'),
            week_start_date=as_date(d.get('week_start')),
            meals=[MealEntry.from_dict(m) for m in d.get('meals') or []],
            notes=d.get('notes', ''),
            is_active=d.get('is_active', True),
            version=int(d.get('version') or 0),
            created_at=d.get('created_at'),
            updated_at=d.get('updated_at'),
        )

    def to_dict(self) -> Dict[str, Any]:
        self.recompute_totals()
        return {
            "id": self.id,
            "user_id": self.user_id,
            "week_id": self.week_id,
            "week_start": date_key(self.week_start),
            "week_end": date_key(self.week_end),
            "date_range": self.date_range_label,
            "meals": [m.to_dict() for m in self.meals],
            "notes": self.notes,
            "is_active": self.is_active,
            "total_calories": self.total_calories,
            "total_cost": self.total_cost,
            "version": self.version,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
