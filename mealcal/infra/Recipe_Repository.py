import logging
from typing import List, Optional

from mealcal.domain.Recipe import Recipe
from mealcal.domain.errors import NotFoundError
from mealcal.infra.json_store import JsonStore
from mealcal.infra.paths import RECIPES_FILE

logger = logging.getLogger(__name__)


class RecipeRepository:
    """Recipe cache and authored recipes, keyed by recipe id."""

    def __init__(self, path=RECIPES_FILE):
        self.store = JsonStore(path)

    def find(self, recipe_id: str) -> Optional[Recipe]:
        with self.store.snapshot() as store:
            doc = store.get(str(recipe_id))
        return Recipe.from_dict(doc) if doc else None

    def get(self, recipe_id: str) -> Recipe:
        recipe = self.find(recipe_id)
        if recipe is None:
            raise NotFoundError("Recipe not found")
        return recipe

    def find_by_meal_db_id(self, meal_db_id: str) -> Optional[Recipe]:
        with self.store.snapshot() as store:
            for doc in store.values():
                if doc.get('meal_db_id') == str(meal_db_id):
                    return Recipe.from_dict(doc)
        return None

    def upsert(self, recipe: Recipe) -> Recipe:
        with self.store.transaction() as store:
            store[recipe.id] = recipe.to_dict()
        logger.info("Stored recipe %s (%s)", recipe.id, recipe.title)
        return recipe

    def list_all(self) -> List[Recipe]:
        with self.store.snapshot() as store:
            docs = list(store.values())
        return sorted((Recipe.from_dict(d) for d in docs), key=lambda r: r.title.lower())

    def delete(self, recipe_id: str) -> None:
        with self.store.transaction() as store:
            if store.pop(str(recipe_id), None) is None:
                raise NotFoundError("Recipe not found")
        logger.info("Deleted recipe %s", recipe_id)

    def filter(self, search: Optional[str] = None, diet: Optional[List[str]] = None,
               category: Optional[str] = None, area: Optional[str] = None) -> List[Recipe]:
        """Local recipes matching every given criterion.

        ``search`` is a case-insensitive substring of the title, a tag or an
        ingredient; ``diet`` matches when the recipe carries any of the tags.
        """
        recipes = self.list_all()
        if search:
            needle = search.strip().lower()
            recipes = [r for r in recipes if any(
                needle in text.lower() for text in [r.title] + r.tags + r.simple_ingredients()
            )]
        if diet:
            wanted = set(diet)
            recipes = [r for r in recipes if wanted.intersection(r.diet)]
        if category:
            recipes = [r for r in recipes if r.category.lower() == category.strip().lower()]
        if area:
            recipes = [r for r in recipes if r.area.lower() == area.strip().lower()]
        return recipes

    def all_tags(self) -> List[str]:
        return sorted({tag for recipe in self.list_all() for tag in recipe.tags})
