"""Grocery list derivation from scheduled meals.

Two strategies share the same entry selection (inclusive date range by date key):

- ``build_grocery_list``: flat display list. Ingredients are opaque text,
  deduplicated case-insensitively and annotated with how many times they are
  needed. Used by the calendar views and the range grocery list endpoint.
- ``build_structured_grocery_list`` / ``build_structured_from_week_data``:
  structured items (name/amount/unit/category) whose amounts are concatenated
  (``"2 cups + 1 cup"``). Used to produce saved grocery list documents.

Both are pure: they never mutate the entries or the plan they read.
"""
import re
from typing import Any, Dict, Iterable, List, Optional

from mealcal.domain.GroceryList import GroceryItem
from mealcal.domain.MealEntry import MealEntry
from mealcal.utilities.constants import (
    DEFAULT_GROCERY_CATEGORY, MEAL_TYPES, NO_INGREDIENTS_PLACEHOLDER, NO_MEALS_PLACEHOLDER,
)
from mealcal.utilities.dates import DateLike, date_range_includes, parse_date_key
from mealcal.domain.errors import ValidationError

__all__ = [
    "select_entries", "ingredient_texts", "expand_entry_ingredients", "build_grocery_list",
    "build_grocery_list_for_plans", "is_placeholder_list", "merge_structured_ingredients", "build_structured_grocery_list",
    "build_structured_from_week_data", "items_to_grocery_items",
]

PLACEHOLDERS = (NO_MEALS_PLACEHOLDER, NO_INGREDIENTS_PLACEHOLDER)
# Legacy week maps used "Snacks" as the slot name
WEEK_DATA_MEAL_TYPES = MEAL_TYPES + ("Snacks",)
_SPLIT_PATTERN = re.compile(r"[,;\n]")


def _normalize(name: str) -> str:
    return (name or '').strip().lower()


def ingredient_texts(raw) -> List[str]:
    """Clean ingredient strings; a single string is split on common delimiters."""
    if isinstance(raw, str):
        raw = _SPLIT_PATTERN.split(raw)
    if not isinstance(raw, (list, tuple)):
        return []
    return [item.strip() for item in raw if isinstance(item, str) and item.strip()]


def select_entries(entries: Iterable[MealEntry], start: Optional[DateLike] = None,
                   end: Optional[DateLike] = None) -> List[MealEntry]:
    return [e for e in entries if date_range_includes(e.date_key, start, end)]


def expand_entry_ingredients(entry: MealEntry) -> List[str]:
    """Snapshot ingredients with a ``(xN)`` suffix when the meal has N > 1 servings."""
    return [f"{text} (x{entry.servings})" if entry.servings > 1 else text
            for text in ingredient_texts(entry.snapshot.ingredients)]


def is_placeholder_list(lines: List[str]) -> bool:
    return len(lines) == 1 and lines[0] in PLACEHOLDERS


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def build_grocery_list(entries: Iterable[MealEntry], start: Optional[DateLike] = None,
                       end: Optional[DateLike] = None) -> List[str]:
    """Flat, count-annotated grocery list for the entries inside [start, end].

    The dedup key is the trimmed, lower-cased base ingredient, so the servings
    annotation never splits one ingredient into several lines. Every meal that
    uses an ingredient counts once. An ingredient needed by a single meal keeps
    that meal's ``(xN)`` servings suffix. Lines are sorted by key.
    """
    selected = select_entries(entries, start, end)
    if not selected:
        return [NO_MEALS_PLACEHOLDER]

    occurrences: Dict[str, List[str]] = {}
    for entry in selected:
        texts = ingredient_texts(entry.snapshot.ingredients)
        for text, line in zip(texts, expand_entry_ingredients(entry)):
            occurrences.setdefault(_normalize(text), []).append(line)
    if not occurrences:
        return [NO_INGREDIENTS_PLACEHOLDER]

    lines = []
    for key in sorted(occurrences):
        found = occurrences[key]
        if len(found) > 1:
            lines.append(f"{_capitalize(key)} (needed {len(found)} times)")
        else:
            lines.append(_capitalize(_normalize(found[0])))
    return lines


def build_grocery_list_for_plans(plans: Iterable[Any], start: Optional[DateLike] = None,
                                 end: Optional[DateLike] = None) -> List[str]:
    """Flat grocery list over several weekly plans (ranges spanning more than one week)."""
    entries: List[MealEntry] = []
    for plan in plans:
        entries.extend(plan.meals)
    return build_grocery_list(entries, start, end)


# --- Structured strategy -------------------------------------------------------

def _structured_item(raw) -> Optional[Dict[str, str]]:
    if isinstance(raw, str):
        name, amount, unit, category = raw, '', '', ''
    elif isinstance(raw, dict):
        name = raw.get('name') or ''
        amount = raw.get('amount') or ''
        unit = raw.get('unit') or ''
        category = raw.get('category') or ''
    elif hasattr(raw, 'name'):
        name = getattr(raw, 'name', '') or ''
        amount = getattr(raw, 'amount', '') or ''
        unit = getattr(raw, 'unit', '') or ''
        category = ''
    else:
        return None
    if not isinstance(name, str) or not name.strip():
        return None
    return {
        'name': name.strip(),
        'amount': str(amount).strip(),
        'unit': str(unit).strip(),
        'category': category or DEFAULT_GROCERY_CATEGORY,
    }


def merge_structured_ingredients(ingredients: Iterable[Any]) -> List[Dict[str, str]]:
    """Deduplicate structured ingredients by name, concatenating their amounts.

    The first occurrence fixes display name, unit and category; output keeps
    first-seen order.
    """
    merged: Dict[str, Dict[str, str]] = {}
    for raw in ingredients:
        item = _structured_item(raw)
        if item is None:
            continue
        key = _normalize(item['name'])
        existing = merged.get(key)
        if existing is None:
            merged[key] = item
        elif item['amount']:
            existing['amount'] = f"{existing['amount']} + {item['amount']}" if existing['amount'] else item['amount']
    return list(merged.values())


def _entry_structured_ingredients(entry: MealEntry) -> List[Any]:
    if entry.snapshot.detailed_ingredients:
        return list(entry.snapshot.detailed_ingredients)
    return ingredient_texts(entry.snapshot.ingredients)


def build_structured_grocery_list(entries: Iterable[MealEntry], start: Optional[DateLike] = None,
                                  end: Optional[DateLike] = None) -> List[Dict[str, str]]:
    ingredients: List[Any] = []
    for entry in select_entries(entries, start, end):
        ingredients.extend(_entry_structured_ingredients(entry))
    return merge_structured_ingredients(ingredients)


def _day_in_range(day_key: str, start, end) -> bool:
    if start is None and end is None:
        return True
    try:
        day = parse_date_key(day_key)
    except ValidationError:
        # Day-name keys ("Monday") carry no date and are always included
        return True
    return date_range_includes(day, start, end)


def build_structured_from_week_data(week_data: Dict[str, Any], start: Optional[DateLike] = None,
                                    end: Optional[DateLike] = None) -> List[Dict[str, str]]:
    """Structured grocery list from a raw ``{day: {meal_type: recipe}}`` week map."""
    ingredients: List[Any] = []
    for day_key, day in (week_data or {}).items():
        if not isinstance(day, dict) or not _day_in_range(str(day_key), start, end):
            continue
        meals = day.get('meals') if isinstance(day.get('meals'), dict) else day
        for meal_type in WEEK_DATA_MEAL_TYPES:
            recipe = meals.get(meal_type)
            if not isinstance(recipe, dict):
                continue
            nested = recipe.get('recipe') if isinstance(recipe.get('recipe'), dict) else {}
            raw = recipe.get('ingredients') or nested.get('ingredients') or []
            ingredients.extend(_SPLIT_PATTERN.split(raw) if isinstance(raw, str) else raw)
    return merge_structured_ingredients(ingredients)


def items_to_grocery_items(items: Iterable[Dict[str, str]]) -> List[GroceryItem]:
    return [GroceryItem.from_dict(item) for item in items]
