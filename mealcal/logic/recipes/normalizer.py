"""TheMealDB payload -> canonical Recipe.

TheMealDB exposes up to 20 ``strIngredientN`` / ``strMeasureN`` pairs and no
nutrition data, so nutrition is estimated from the category and a few
ingredient keywords. The estimate is a pure function of (ingredients,
category).
"""
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from mealcal.domain.Nutrition import Nutrition
from mealcal.domain.Recipe import Recipe
from mealcal.utilities.constants import (
    BASE_NUTRITION, CATEGORY_NUTRITION_DELTAS, DIET_CATEGORIES, INGREDIENT_NUTRITION_RULES,
    MAX_INGREDIENT_SLOTS, NUTRITION_FIELDS, SOURCE_DIET_TAGS,
)

__all__ = ["parse_ingredients", "parse_tags", "extract_diet_tags", "estimate_nutrition", "normalize_meal"]


def _clean(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def parse_ingredients(meal: Dict[str, Any]) -> List[str]:
    ingredients = []
    for i in range(1, MAX_INGREDIENT_SLOTS + 1):
        ingredient = _clean(meal.get(f"strIngredient{i}"))
        if not ingredient:
            continue
        measure = _clean(meal.get(f"strMeasure{i}"))
        ingredients.append(f"{measure} {ingredient}" if measure else ingredient)
    return ingredients


def parse_tags(raw: Optional[str]) -> List[str]:
    return [tag.strip() for tag in raw.split(',') if tag.strip()] if isinstance(raw, str) else []


def extract_diet_tags(category: Optional[str], tags: Iterable[str]) -> List[str]:
    diet = [category] if category in DIET_CATEGORIES else []
    for tag in tags:
        if tag in SOURCE_DIET_TAGS and tag not in diet:
            diet.append(tag)
    return diet


def estimate_nutrition(ingredients: Iterable[str], category: Optional[str]) -> Nutrition:
    values = dict(BASE_NUTRITION)
    for field, delta in CATEGORY_NUTRITION_DELTAS.get(category or "", {}).items():
        values[field] += delta

    text = " ".join(ingredients).lower()
    for keywords, deltas in INGREDIENT_NUTRITION_RULES:
        if any(keyword in text for keyword in keywords):
            for field, delta in deltas.items():
                values[field] += delta

    return Nutrition(**{field: round(values[field]) for field in NUTRITION_FIELDS})


def normalize_meal(meal: Dict[str, Any], now: Optional[datetime] = None) -> Recipe:
    """Convert a raw TheMealDB meal into a Recipe (data_source='themealdb')."""
    ingredients = parse_ingredients(meal)
    category = _clean(meal.get("strCategory"))
    tags = parse_tags(meal.get("strTags"))
    meal_db_id = str(meal.get("idMeal") or "").strip()
    recipe = Recipe(
        id=meal_db_id,
        title=_clean(meal.get("strMeal")),
        ingredients=ingredients,
        category=category,
        area=_clean(meal.get("strArea")),
        tags=tags,
        diet=extract_diet_tags(category, tags),
        nutrition=estimate_nutrition(ingredients, category),
        image=_clean(meal.get("strMealThumb")),
        instructions=_clean(meal.get("strInstructions")),
        youtube_url=_clean(meal.get("strYoutube")),
        source=_clean(meal.get("strSource")),
        meal_db_id=meal_db_id or None,
        data_source="themealdb",
    )
    return recipe.touch(now)
