"""Recipe lookup port: local cache first, TheMealDB on a miss.

The lookup is the only place the planner touches the network. Callers get a
``Recipe`` or one of ``NotFoundError`` / ``UpstreamUnavailableError``.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from mealcal.domain.Recipe import Recipe
from mealcal.domain.errors import NotFoundError, UpstreamUnavailableError, ValidationError
from mealcal.infra.Recipe_Repository import RecipeRepository
from mealcal.infra.mealdb_client import MealDBClient
from mealcal.logic.recipes.normalizer import normalize_meal

logger = logging.getLogger(__name__)


class RecipeLookup:
    def __init__(self, repository: RecipeRepository, client: MealDBClient):
        self.repository = repository
        self.client = client

    def get_recipe_by_id(self, recipe_id: str, refresh: bool = False, now: Optional[datetime] = None) -> Recipe:
        recipe_id = str(recipe_id or '').strip()
        if not recipe_id:
            raise ValidationError("recipe_id is required")

        cached = self.repository.find(recipe_id)
        if cached is not None:
            if refresh and cached.data_source == 'themealdb' and cached.is_stale(now):
                return self._refresh(cached, now)
            return cached

        if not recipe_id.isdigit():
            raise NotFoundError("Recipe not found")

        meal = self.client.get_meal_by_id(recipe_id)
        if meal is None:
            raise NotFoundError("Recipe not found")
        recipe = normalize_meal(meal, now)
        logger.info("Cached TheMealDB recipe %s (%s)", recipe.id, recipe.title)
        return self.repository.upsert(recipe)

    def _refresh(self, cached: Recipe, now: Optional[datetime]) -> Recipe:
        try:
            meal = self.client.get_meal_by_id(cached.meal_db_id or cached.id)
        except UpstreamUnavailableError as e:
            logger.warning("Serving stale recipe %s, refresh failed: %s", cached.id, e)
            return cached
        if meal is None:
            logger.warning("Recipe %s no longer exists upstream, keeping cached copy", cached.id)
            return cached
        fresh = normalize_meal(meal, now)
        fresh.id = cached.id
        return self.repository.upsert(fresh)

    def import_from_payload(self, payload: Dict[str, Any], now: Optional[datetime] = None) -> Recipe:
        """Find-or-create a recipe from a raw TheMealDB meal payload."""
        if not isinstance(payload, dict) or not str(payload.get('idMeal') or '').strip():
            raise ValidationError("TheMealDB payload needs an idMeal")
        meal_db_id = str(payload['idMeal']).strip()
        existing = self.repository.find_by_meal_db_id(meal_db_id)
        if existing is not None and not existing.is_stale(now):
            return existing
        recipe = normalize_meal(payload, now)
        if existing is not None:
            recipe.id = existing.id
        return self.repository.upsert(recipe)

    def search(self, query: Optional[str] = None, category: Optional[str] = None,
               area: Optional[str] = None, ingredient: Optional[str] = None,
               count: int = 10, letter: Optional[str] = None) -> List[Recipe]:
        if letter and not (query or category or area or ingredient):
            return self.by_first_letter(letter)[:count]
        meals = self.client.search_meals(query=query, category=category, area=area,
                                         ingredient=ingredient, count=count)
        return [normalize_meal(meal) for meal in meals[:count]]

    def random(self, count: int = 10) -> List[Recipe]:
        return [normalize_meal(meal) for meal in self.client.get_random_meals(count)]

    def by_first_letter(self, letter: str) -> List[Recipe]:
        letter = (letter or '').strip()
        if len(letter) != 1 or not letter.isalpha():
            raise ValidationError("letter must be a single alphabetic character")
        return [normalize_meal(meal) for meal in self.client.get_meals_by_first_letter(letter.lower())]

    # --- TheMealDB reference lists ---
    def categories(self, detailed: bool = False) -> List[Any]:
        """Category names, or TheMealDB's full category records when ``detailed``."""
        if detailed:
            return self.client.get_categories()
        return _names(self.client.get_category_list(), 'strCategory')

    def areas(self) -> List[str]:
        return _names(self.client.get_area_list(), 'strArea')

    def ingredients(self, limit: int = 100) -> List[Dict[str, str]]:
        return [
            {
                'id': str(item.get('idIngredient') or ''),
                'name': item['strIngredient'].strip(),
                'description': item.get('strDescription') or '',
            }
            for item in self.client.get_ingredient_list()
            if isinstance(item.get('strIngredient'), str) and item['strIngredient'].strip()
        ][:limit]


def _names(records: List[Dict[str, Any]], field: str) -> List[str]:
    return [r[field].strip() for r in records if isinstance(r.get(field), str) and r[field].strip()]
