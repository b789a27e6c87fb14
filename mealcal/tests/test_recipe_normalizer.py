from datetime import datetime, timezone

from mealcal.logic.recipes.normalizer import (
    estimate_nutrition, extract_diet_tags, normalize_meal, parse_ingredients, parse_tags,
)

ARRABIATA = {
    "idMeal": "52771",
    "strMeal": "Spicy Arrabiata Penne",
    "strCategory": "Vegetarian",
    "strArea": "Italian",
    "strInstructions": "Bring a large pot of water to a boil.",
    "strMealThumb": "https://www.themealdb.com/images/media/meals/ustsqw1468250014.jpg",
    "strTags": "Pasta,Curry, Vegan ,",
    "strYoutube": "https://www.youtube.com/watch?v=1IszT_guI08",
    "strIngredient1": "penne rigate",
    "strMeasure1": "1 pound",
    "strIngredient2": "olive oil",
    "strMeasure2": "1/4 cup",
    "strIngredient3": "garlic",
    "strMeasure3": " ",
    "strIngredient4": "",
    "strMeasure4": "",
    "strIngredient5": None,
    "strMeasure5": None,
}


def test_parse_ingredients_skips_blank_slots_and_joins_measure():
    assert parse_ingredients(ARRABIATA) == ["1 pound penne rigate", "1/4 cup olive oil", "garlic"]


def test_parse_tags_trims_and_drops_empty():
    assert parse_tags("Pasta,Curry, Vegan ,") == ["Pasta", "Curry", "Vegan"]
    assert parse_tags(None) == []


def test_diet_tags_from_category_and_tags():
    assert extract_diet_tags("Vegetarian", ["Vegan", "Pasta"]) == ["Vegetarian", "Vegan"]
    assert extract_diet_tags("Beef", ["Keto", "Keto"]) == ["Keto"]
    assert extract_diet_tags(None, []) == []


def test_estimate_nutrition_base_and_category():
    n = estimate_nutrition([], "Chicken")
    assert n.to_dict() == {"calories": 450, "protein": 35, "fat": 15, "carbs": 30}


def test_estimate_nutrition_unknown_category_is_base():
    assert estimate_nutrition([], "Miscellaneous").to_dict() == {"calories": 300, "protein": 15, "fat": 10, "carbs": 30}


def test_estimate_nutrition_is_deterministic():
    ingredients = ["200g cheddar cheese", "2 tbsp butter"]
    assert estimate_nutrition(ingredients, "Pasta") == estimate_nutrition(list(ingredients), "Pasta")


def test_normalize_meal_builds_cached_recipe():
    now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    recipe = normalize_meal(ARRABIATA, now)
    assert recipe.id == "52771"
    assert recipe.meal_db_id == "52771"
    assert recipe.data_source == "themealdb"
    assert recipe.title == "Spicy Arrabiata Penne"
    assert recipe.area == "Italian"
    assert recipe.tags == ["Pasta", "Curry", "Vegan"]
    assert recipe.diet == ["Vegetarian", "Vegan"]
    assert recipe.ingredients == ["1 pound penne rigate", "1/4 cup olive oil", "garlic"]
    assert recipe.last_updated == now
    assert not recipe.is_stale(now)


def test_normalize_meal_tolerates_sparse_payload():
    recipe = normalize_meal({"idMeal": "1", "strMeal": "Toast"})
    assert recipe.ingredients == []
    assert recipe.category == ""
    assert recipe.nutrition.calories == 300
