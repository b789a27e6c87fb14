from pathlib import Path

from mealcal.utilities.config import DATA_DIR as _CONFIG_DATA_DIR

# Centralized paths for data files (single source of truth)
DATA_DIR = Path(_CONFIG_DATA_DIR).resolve()
PLANS_FILE = DATA_DIR / 'meal_plans.json'
RECIPES_FILE = DATA_DIR / 'recipes.json'
GROCERY_LISTS_FILE = DATA_DIR / 'grocery_lists.json'

__all__ = ['DATA_DIR', 'PLANS_FILE', 'RECIPES_FILE', 'GROCERY_LISTS_FILE']
