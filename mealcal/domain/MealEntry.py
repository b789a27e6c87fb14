"""Meal entry value objects: a scheduled (date, meal type) slot holding a recipe snapshot."""
from dataclasses import dataclass, field
from datetime import date
from typing import Tuple

from mealcal.domain.Nutrition import Nutrition
from mealcal.domain.Recipe import Recipe, DetailedIngredient
from mealcal.domain.errors import ValidationError
from mealcal.utilities.constants import MEAL_TYPES
from mealcal.utilities.dates import as_date, date_key


@dataclass(frozen=True)
class RecipeSnapshot:
    """Copy of a recipe's display fields taken when the meal was scheduled.

    Later edits to the source recipe never reach an existing snapshot.
    """
    title: str = ""
    image: str = ""
    ingredients: Tuple[str, ...] = ()
    detailed_ingredients: Tuple[DetailedIngredient, ...] = ()
    nutrition: Nutrition = field(default_factory=Nutrition)
    category: str = ""
    area: str = ""

    @staticmethod
    def from_recipe(recipe: Recipe) -> "RecipeSnapshot":
        return RecipeSnapshot(
            title=recipe.title,
            image=recipe.image,
            ingredients=tuple(recipe.simple_ingredients()),
            detailed_ingredients=tuple(DetailedIngredient.from_dict(i.to_dict()) for i in recipe.detailed_ingredients),
            nutrition=Nutrition.from_dict(recipe.nutrition.to_dict()),
            category=recipe.category,
            area=recipe.area,
        )

    @staticmethod
    def from_dict(data) -> "RecipeSnapshot":
        d = data if isinstance(data, dict) else {}
        raw_ingredients = d.get('ingredients')
        if isinstance(raw_ingredients, str):
            ingredients = (raw_ingredients,)
        else:
            ingredients = tuple(i for i in (raw_ingredients or []) if isinstance(i, str))
        return RecipeSnapshot(
            title=d.get('title', '') or '',
            image=d.get('image', '') or '',
            ingredients=ingredients,
            detailed_ingredients=tuple(DetailedIngredient.from_dict(i) for i in d.get('detailed_ingredients') or []),
            nutrition=Nutrition.from_dict(d.get('nutrition')),
            category=d.get('category', '') or '',
            area=d.get('area', '') or '',
        )

    def to_dict(self):
        return {
            "title": self.title,
            "image": self.image,
            "ingredients": list(self.ingredients),
            "detailed_ingredients": [i.to_dict() for i in self.detailed_ingredients],
            "nutrition": self.nutrition.to_dict(),
            "category": self.category,
            "area": self.area,
        }


def validate_meal_type(meal_type) -> str:
    if meal_type not in MEAL_TYPES:
        raise ValidationError(f"Invalid meal type '{meal_type}', expected one of {', '.join(MEAL_TYPES)}")
    return meal_type


def validate_servings(servings) -> int:
    # bool is an int subclass but never a serving count
    if isinstance(servings, bool) or not isinstance(servings, int):
        raise ValidationError(f"Servings must be a whole number, got {servings!r}")
    if servings < 1:
        raise ValidationError(f"Servings must be at least 1, got {servings}")
    return servings


class MealEntry:
    def __init__(self, date: date, meal_type: str, recipe_id: str, snapshot: RecipeSnapshot,
                 servings: int = 1, notes: str = "", completed: bool = False):
        self.date = as_date(date)
        self.meal_type = validate_meal_type(meal_type)
        self.recipe_id = recipe_id
        self.snapshot = snapshot
        self.servings = validate_servings(servings)
        self.notes = (notes or "").strip()
        self.completed = bool(completed)

    @property
    def date_key(self) -> str:
        return date_key(self.date)

    @property
    def slot(self) -> Tuple[str, str]:
        return self.date_key, self.meal_type

    def __str__(self) -> str:
        return f"{self.date_key} {self.meal_type}: {self.snapshot.title} (x{self.servings})"

    __repr__ = __str__

    @staticmethod
    def from_dict(data) -> "MealEntry":
        d = dict(data) if isinstance(data, dict) else {}
        return MealEntry(
            date=d.get('date_key') or d.get('date'),
            meal_type=d.get('meal_type'),
            recipe_id=str(d.get('recipe_id') or ''),
            snapshot=RecipeSnapshot.from_dict(d.get('recipe_snapshot')),
            servings=d.get('servings', 1),
            notes=d.get('notes', ''),
            completed=d.get('completed', False),
        )

    def to_dict(self):
        return {
            "date": self.date_key,
            "date_key": self.date_key,
            "meal_type": self.meal_type,
            "recipe_id": self.recipe_id,
            "recipe_snapshot": self.snapshot.to_dict(),
            "servings": self.servings,
            "notes": self.notes,
            "completed": self.completed,
        }
