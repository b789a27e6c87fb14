from typing import Final, Dict, Tuple

DATE_KEY_FORMAT: Final[str] = "%Y-%m-%d"

MEAL_TYPES: Final[Tuple[str, ...]] = ("Breakfast", "Lunch", "Dinner", "Snack")
DAYS_PER_WEEK: Final[int] = 7

# TheMealDB payloads carry at most 20 ingredient/measure pairs
MAX_INGREDIENT_SLOTS: Final[int] = 20

DIET_TAGS: Final[Tuple[str, ...]] = (
    "Vegan", "Vegetarian", "Gluten-Free", "Keto", "Low-Carb", "High-Protein", "Quick", "Budget-Friendly",
)
# Tags a TheMealDB payload may contribute through its comma separated strTags field
SOURCE_DIET_TAGS: Final[Tuple[str, ...]] = (
    "Vegetarian", "Vegan", "Gluten-Free", "Keto", "Low-Carb", "High-Protein",
)
DIET_CATEGORIES: Final[Tuple[str, ...]] = ("Vegetarian", "Vegan")

DATA_SOURCES: Final[Tuple[str, ...]] = ("themealdb", "custom", "imported")
GROCERY_CATEGORIES: Final[Tuple[str, ...]] = (
    "Produce", "Dairy", "Meat", "Pantry", "Frozen", "Beverages", "Other",
)
DEFAULT_GROCERY_CATEGORY: Final[str] = "Other"

# --- Nutrition estimation policy (calories, protein, fat, carbs) ---
NUTRITION_FIELDS: Final[Tuple[str, ...]] = ("calories", "protein", "fat", "carbs")
BASE_NUTRITION: Final[Dict[str, int]] = {"calories": 300, "protein": 15, "fat": 10, "carbs": 30}
CATEGORY_NUTRITION_DELTAS: Final[Dict[str, Dict[str, int]]] = {
    "Chicken": {"calories": 150, "protein": 20, "fat": 5},
    "Beef": {"calories": 200, "protein": 25, "fat": 10},
    "Seafood": {"calories": 100, "protein": 25, "fat": 3},
    "Vegetarian": {"calories": 50, "protein": 5, "carbs": 20},
    "Vegan": {"calories": 50, "protein": 5, "carbs": 20},
    "Dessert": {"calories": 250, "fat": 15, "carbs": 40},
    "Pasta": {"calories": 200, "carbs": 50},
}
# (keywords, deltas): a rule fires when any keyword occurs in the joined ingredient text
INGREDIENT_NUTRITION_RULES: Final[Tuple[Tuple[Tuple[str, ...], Dict[str, int]], ...]] = (
    (("cheese",), {"calories": 80, "fat": 6, "protein": 5}),
    (("oil", "butter"), {"calories": 100, "fat": 11}),
    (("rice", "pasta"), {"calories": 150, "carbs": 30}),
)

# --- Grocery list placeholders ---
NO_MEALS_PLACEHOLDER: Final[str] = "No meals planned yet. Add some recipes to generate a grocery list!"
NO_INGREDIENTS_PLACEHOLDER: Final[str] = (
    "No ingredients found in planned meals. The recipes might not have ingredient data."
)
