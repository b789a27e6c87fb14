"""Thin TheMealDB (v1 JSON API) client on top of httpx.

Every endpoint answers ``{"meals": [...]}`` or ``{"meals": null}``; the null
form is turned into an empty list (or ``None`` for single-meal lookups).
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from mealcal.domain.errors import UpstreamUnavailableError
from mealcal.utilities.config import MEALDB_BASE_URL, MEALDB_TIMEOUT

logger = logging.getLogger(__name__)


class MealDBClient:
    def __init__(self, base_url: str = MEALDB_BASE_URL, timeout: float = MEALDB_TIMEOUT,
                 transport: Optional[httpx.BaseTransport] = None):
        self._client = httpx.Client(
            base_url=base_url.rstrip('/'),
            timeout=timeout,
            transport=transport,
            headers={'Content-Type': 'application/json'},
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        try:
            response = self._client.get(path, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("TheMealDB %s answered %s", path, e.response.status_code)
            raise UpstreamUnavailableError(f"TheMealDB returned {e.response.status_code} for {path}") from e
        except httpx.HTTPError as e:
            logger.error("TheMealDB request %s failed: %s", path, e)
            raise UpstreamUnavailableError(f"TheMealDB request failed: {e}") from e
        except ValueError as e:
            logger.error("TheMealDB %s returned a non-JSON body", path)
            raise UpstreamUnavailableError("TheMealDB returned an invalid response") from e
        return data if isinstance(data, dict) else {}

    def _meals(self, path: str, params: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
        return self._get(path, params).get('meals') or []

    # --- search / lookup ---
    def search_meals_by_name(self, name: str) -> List[Dict[str, Any]]:
        return self._meals('/search.php', {'s': name})

    def get_meals_by_first_letter(self, letter: str) -> List[Dict[str, Any]]:
        return self._meals('/search.php', {'f': letter[:1]})

    def get_meal_by_id(self, meal_id) -> Optional[Dict[str, Any]]:
        meals = self._meals('/lookup.php', {'i': str(meal_id)})
        return meals[0] if meals else None

    def get_random_meal(self) -> Optional[Dict[str, Any]]:
        meals = self._meals('/random.php')
        return meals[0] if meals else None

    def get_random_meals(self, count: int = 10) -> List[Dict[str, Any]]:
        meals = []
        for _ in range(max(count, 0)):
            meal = self.get_random_meal()
            if meal:
                meals.append(meal)
        return meals

    # --- lists ---
    def get_categories(self) -> List[Dict[str, Any]]:
        return self._get('/categories.php').get('categories') or []

    def get_category_list(self) -> List[Dict[str, Any]]:
        return self._meals('/list.php', {'c': 'list'})

    def get_area_list(self) -> List[Dict[str, Any]]:
        return self._meals('/list.php', {'a': 'list'})

    def get_ingredient_list(self) -> List[Dict[str, Any]]:
        return self._meals('/list.php', {'i': 'list'})

    # --- filters (summary records: idMeal, strMeal, strMealThumb) ---
    def get_meals_by_ingredient(self, ingredient: str) -> List[Dict[str, Any]]:
        return self._meals('/filter.php', {'i': ingredient})

    def get_meals_by_category(self, category: str) -> List[Dict[str, Any]]:
        return self._meals('/filter.php', {'c': category})

    def get_meals_by_area(self, area: str) -> List[Dict[str, Any]]:
        return self._meals('/filter.php', {'a': area})

    def search_meals(self, query: Optional[str] = None, category: Optional[str] = None,
                     area: Optional[str] = None, ingredient: Optional[str] = None,
                     count: int = 10) -> List[Dict[str, Any]]:
        """First matching filter wins: query, then category, area, ingredient; random meals otherwise."""
        if query:
            return self.search_meals_by_name(query)
        if category:
            return self.get_meals_by_category(category)
        if area:
            return self.get_meals_by_area(area)
        if ingredient:
            return self.get_meals_by_ingredient(ingredient)
        return self.get_random_meals(count)
