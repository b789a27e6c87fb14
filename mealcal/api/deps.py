"""FastAPI dependency providers; tests swap them through ``app.dependency_overrides``."""
from typing import Iterator

from fastapi import Depends

from mealcal.infra.GroceryList_Repository import GroceryListRepository
from mealcal.infra.Plan_Repository import PlanRepository
from mealcal.infra.Recipe_Repository import RecipeRepository
from mealcal.infra.mealdb_client import MealDBClient
from mealcal.infra.recipe_lookup import RecipeLookup


def get_plan_repository() -> PlanRepository:
    return PlanRepository()


def get_recipe_repository() -> RecipeRepository:
    return RecipeRepository()


def get_grocery_list_repository() -> GroceryListRepository:
    return GroceryListRepository()


def get_mealdb_client() -> Iterator[MealDBClient]:
    with MealDBClient() as client:
        yield client


def get_recipe_lookup(
    repository: RecipeRepository = Depends(get_recipe_repository),
    client: MealDBClient = Depends(get_mealdb_client),
) -> RecipeLookup:
    return RecipeLookup(repository, client)
