import httpx
import pytest

from mealcal.infra.GroceryList_Repository import GroceryListRepository
from mealcal.infra.Plan_Repository import PlanRepository
from mealcal.infra.Recipe_Repository import RecipeRepository
from mealcal.infra.mealdb_client import MealDBClient


def mealdb_meal(meal_id="52772", title="Teriyaki Chicken Casserole", category="Chicken", ingredients=None):
    """Raw TheMealDB meal payload."""
    meal = {
        "idMeal": meal_id,
        "strMeal": title,
        "strCategory": category,
        "strArea": "Japanese",
        "strInstructions": "Preheat oven to 350 F.",
        "strMealThumb": f"https://www.themealdb.com/images/media/meals/{meal_id}.jpg",
        "strTags": "Meat,Casserole",
        "strYoutube": "",
    }
    for i, (measure, name) in enumerate(ingredients or [("3/4 cup", "soy sauce"), ("2", "chicken breasts")], start=1):
        meal[f"strIngredient{i}"] = name
        meal[f"strMeasure{i}"] = measure
    return meal


LISTS = {
    "c": [{"strCategory": "Chicken"}, {"strCategory": "Seafood"}],
    "a": [{"strArea": "Japanese"}],
    "i": [
        {"idIngredient": "1", "strIngredient": "Chicken", "strDescription": "The chicken is a domesticated bird."},
        {"idIngredient": "2", "strIngredient": "Salmon", "strDescription": None},
        {"idIngredient": "3", "strIngredient": " ", "strDescription": None},
    ],
}


class FakeMealDB:
    """Minimal TheMealDB stand-in served through httpx.MockTransport."""

    def __init__(self, meals=None):
        self.meals = {m["idMeal"]: m for m in (meals or [])}
        self.requests = []
        self.fail = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail:
            return httpx.Response(503, json={"error": "unavailable"})
        path, params = request.url.path, request.url.params
        if path.endswith("/lookup.php"):
            meal = self.meals.get(params.get("i"))
            return httpx.Response(200, json={"meals": [meal] if meal else None})
        if path.endswith("/search.php"):
            if "f" in params:
                letter = params["f"].lower()
                found = [m for m in self.meals.values() if m["strMeal"].lower().startswith(letter)]
            else:
                term = params.get("s", "").lower()
                found = [m for m in self.meals.values() if term in m["strMeal"].lower()]
            return httpx.Response(200, json={"meals": found or None})
        if path.endswith("/filter.php"):
            category = params.get("c")
            found = [
                {"idMeal": m["idMeal"], "strMeal": m["strMeal"], "strMealThumb": m["strMealThumb"]}
                for m in self.meals.values() if m.get("strCategory") == category
            ]
            return httpx.Response(200, json={"meals": found or None})
        if path.endswith("/random.php"):
            meals = list(self.meals.values())[:1]
            return httpx.Response(200, json={"meals": meals or None})
        if path.endswith("/categories.php"):
            return httpx.Response(200, json={"categories": [{"strCategory": "Chicken"}]})
        if path.endswith("/list.php"):
            return httpx.Response(200, json={"meals": LISTS.get(next(iter(params.keys()), ""))})
        return httpx.Response(404)

    def client(self) -> MealDBClient:
        return MealDBClient(base_url="https://mealdb.test/api/json/v1/1", transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_mealdb():
    return FakeMealDB([mealdb_meal(), mealdb_meal("52959", "Baked salmon with fennel", "Seafood")])


@pytest.fixture
def plan_repo(tmp_path):
    return PlanRepository(tmp_path / "meal_plans.json")


@pytest.fixture
def recipe_repo(tmp_path):
    return RecipeRepository(tmp_path / "recipes.json")


@pytest.fixture
def grocery_repo(tmp_path):
    return GroceryListRepository(tmp_path / "grocery_lists.json")


@pytest.fixture
def meal_payload():
    return mealdb_meal
