"""Planning use cases on top of the MealPlan aggregate.

Each mutation is load -> mutate -> version-checked save. When the save loses
a race (``ConflictError``) the plan is reloaded and the same change is applied
again, up to ``retries`` times.
"""
import logging
from datetime import date as _date, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple

from mealcal.domain.MealPlan import MealPlan
from mealcal.domain.Nutrition import Nutrition
from mealcal.domain.Recipe import DetailedIngredient, Recipe
from mealcal.domain.errors import ConflictError, DuplicateKeyError, NotFoundError, ValidationError
from mealcal.domain.MealEntry import validate_meal_type, validate_servings
from mealcal.events.event_helpers import publish_plan_updated
from mealcal.logic.shopping.list_builder import WEEK_DATA_MEAL_TYPES, build_grocery_list_for_plans, ingredient_texts
from mealcal.utilities.config import SAVE_RETRIES
from mealcal.utilities.constants import DAYS_PER_WEEK
from mealcal.utilities.dates import DateLike, as_date, date_key, week_dates, week_start

logger = logging.getLogger(__name__)

__all__ = [
    "find_or_create_week_plan", "create_week_plan", "add_meal", "remove_meal", "set_plan_meal", "remove_plan_meal",
    "update_plan", "save_week_data", "get_week_overview", "grocery_list_for_range",
]


def find_or_create_week_plan(repo, user_id: str, any_date: DateLike) -> MealPlan:
    """The user's plan for the week containing ``any_date``, created empty if missing."""
    if not user_id:
        raise ValidationError("user_id is required")
    day = as_date(any_date)
    plan = repo.load(user_id, MealPlan.week_id_for(day))
    if plan is not None:
        return plan
    try:
        return repo.create(MealPlan.new(user_id, day))
    except DuplicateKeyError:
        # Another request created it first; use the stored one
        logger.info("Concurrent create of plan %s for %s, reloading", MealPlan.week_id_for(day), user_id)
        return repo.load(user_id, MealPlan.week_id_for(day))


def _save_with_retry(repo, load: Callable[[], MealPlan], mutate: Callable[[MealPlan], Any],
                     retries: int) -> MealPlan:
    plan = load()
    attempt = 0
    while True:
        mutate(plan)
        try:
            return repo.save(plan)
        except ConflictError:
            attempt += 1
            if attempt > retries:
                logger.error("Giving up on plan %s after %d conflicts", plan.week_id, attempt)
                raise
            logger.warning("Version conflict on plan %s, retry %d/%d", plan.week_id, attempt, retries)
            plan = load()


def add_meal(repo, lookup, user_id: str, date: DateLike, meal_type: str, recipe_id: str,
             servings: int = 1, notes: str = "", retries: int = SAVE_RETRIES) -> MealPlan:
    if not user_id:
        raise ValidationError("user_id is required")
    if date is None:
        raise ValidationError("date is required")
    day = as_date(date)
    validate_meal_type(meal_type)
    validate_servings(servings)
    if not recipe_id:
        raise ValidationError("recipe_id is required")

    # Resolved before touching the plan so a lookup failure writes nothing
    recipe = lookup.get_recipe_by_id(recipe_id)

    plan = _save_with_retry(
        repo,
        lambda: find_or_create_week_plan(repo, user_id, day),
        lambda p: p.add_meal(day, meal_type, recipe, servings, notes),
        retries,
    )
    logger.info("Added %s to %s %s for %s", recipe.title, date_key(day), meal_type, user_id)
    publish_plan_updated(plan, 'add_meal')
    return plan


def remove_meal(repo, user_id: str, date: DateLike, meal_type: str, retries: int = SAVE_RETRIES) -> MealPlan:
    if not user_id:
        raise ValidationError("user_id is required")
    if date is None:
        raise ValidationError("date is required")
    day = as_date(date)
    validate_meal_type(meal_type)

    def load() -> MealPlan:
        plan = repo.load(user_id, MealPlan.week_id_for(day))
        if plan is None:
            raise NotFoundError("Meal plan not found")
        return plan

    plan = _save_with_retry(repo, load, lambda p: p.remove_meal(day, meal_type), retries)
    logger.info("Removed %s %s for %s", date_key(day), meal_type, user_id)
    publish_plan_updated(plan, 'remove_meal')
    return plan


def get_week_overview(repo, user_id: str, date: Optional[DateLike] = None) -> Dict[str, Any]:
    day = as_date(date) if date is not None else _date.today()
    plan = find_or_create_week_plan(repo, user_id, day)
    return {
        'meal_plan': plan.to_dict(),
        'nutrition_summary': plan.weekly_nutrition_summary(),
        'grocery_list': plan.grocery_list(),
        'week_info': {
            'start': date_key(plan.week_start),
            'end': date_key(plan.week_end),
            'week_id': plan.week_id,
        },
    }


def grocery_list_for_range(repo, user_id: str, start: DateLike, end: Optional[DateLike] = None) -> Dict[str, Any]:
    """Flat grocery list over every plan of ``user_id`` that overlaps [start, end]."""
    if not user_id:
        raise ValidationError("user_id is required")
    first = as_date(start)
    last = as_date(end) if end is not None else first + timedelta(days=DAYS_PER_WEEK - 1)
    if last < first:
        raise ValidationError("end_date must not be before start_date")
    plans = repo.find_overlapping(user_id, first, last)
    return {
        'grocery_list': build_grocery_list_for_plans(plans, first, last),
        'date_range': {'start': date_key(first), 'end': date_key(last)},
    }


def create_week_plan(repo, user_id: str, any_date: DateLike, notes: str = "") -> MealPlan:
    """Explicitly create the plan for the week of ``any_date``; a second one raises ``DuplicateKeyError``."""
    plan = MealPlan(user_id, as_date(any_date), notes=notes)
    plan = repo.create(plan)
    publish_plan_updated(plan, 'create_plan')
    return plan


def _plan_loader(repo, plan_id: str) -> Callable[[], MealPlan]:
    return lambda: repo.get(plan_id)


def update_plan(repo, plan_id: str, updates: Dict[str, Any], retries: int = SAVE_RETRIES) -> MealPlan:
    def mutate(plan: MealPlan):
        if 'notes' in updates:
            plan.notes = (updates['notes'] or "").strip()
        if updates.get('is_active') is not None:
            plan.is_active = bool(updates['is_active'])

    plan = _save_with_retry(repo, _plan_loader(repo, plan_id), mutate, retries)
    publish_plan_updated(plan, 'update_plan')
    return plan


def _require_in_week(plan: MealPlan, day) -> None:
    if not plan.contains_date(day):
        raise ValidationError(f"{date_key(day)} is outside the plan week {plan.date_range_label}")


def set_plan_meal(repo, lookup, plan_id: str, date: DateLike, meal_type: str, recipe_id: str,
                  servings: int = 1, notes: str = "", retries: int = SAVE_RETRIES) -> MealPlan:
    """Like ``add_meal`` but addressed by plan id; the date must fall inside that plan's week."""
    if date is None:
        raise ValidationError("date is required")
    day = as_date(date)
    validate_meal_type(meal_type)
    validate_servings(servings)
    if not recipe_id:
        raise ValidationError("recipe_id is required")
    recipe = lookup.get_recipe_by_id(recipe_id)

    def mutate(plan: MealPlan):
        _require_in_week(plan, day)
        plan.add_meal(day, meal_type, recipe, servings, notes)

    plan = _save_with_retry(repo, _plan_loader(repo, plan_id), mutate, retries)
    publish_plan_updated(plan, 'add_meal')
    return plan


def remove_plan_meal(repo, plan_id: str, date: DateLike, meal_type: str, retries: int = SAVE_RETRIES) -> MealPlan:
    if date is None:
        raise ValidationError("date is required")
    day = as_date(date)
    validate_meal_type(meal_type)

    def mutate(plan: MealPlan):
        _require_in_week(plan, day)
        plan.remove_meal(day, meal_type)

    plan = _save_with_retry(repo, _plan_loader(repo, plan_id), mutate, retries)
    publish_plan_updated(plan, 'remove_meal')
    return plan


# --- Whole-week saves -----------------------------------------------------------

def _week_days(sunday) -> Dict[str, Any]:
    days = {}
    for day in week_dates(sunday):
        days[date_key(day)] = day
        days[day.strftime('%A').lower()] = day
    return days


def _embedded_recipe(raw: Dict[str, Any]) -> Recipe:
    title = str(raw.get('title') or '').strip()
    if not title:
        raise ValidationError("Recipes in week data need a title or an id")
    ingredients = raw.get('ingredients') or []
    if isinstance(ingredients, str):
        ingredients = ingredient_texts(ingredients)
    flat = [i.strip() for i in ingredients if isinstance(i, str) and i.strip()]
    detailed = [DetailedIngredient.from_dict(i) for i in ingredients if isinstance(i, dict)]
    return Recipe(
        id=str(raw.get('id') or ''),
        title=title,
        ingredients=flat if flat or not detailed else None,
        detailed_ingredients=detailed,
        category=raw.get('category', ''),
        area=raw.get('area', ''),
        image=raw.get('image', ''),
        nutrition=Nutrition.from_dict(raw.get('nutrition')),
    )


def _slot_recipe(lookup, raw) -> Optional[Recipe]:
    if isinstance(raw, (str, int)) and not isinstance(raw, bool):
        return lookup.get_recipe_by_id(str(raw)) if str(raw).strip() else None
    if not isinstance(raw, dict):
        return None
    if isinstance(raw.get('recipe'), dict):
        raw = raw['recipe']
    if raw.get('title'):
        return _embedded_recipe(raw)
    if raw.get('id'):
        return lookup.get_recipe_by_id(str(raw['id']))
    raise ValidationError("Recipes in week data need a title or an id")


def _parse_week_data(lookup, sunday, week_data: Dict[str, Any]) -> List[Tuple[Any, str, Recipe, int]]:
    days = _week_days(sunday)
    slots = []
    for day_key, day_meals in (week_data or {}).items():
        day = days.get(str(day_key).strip().lower())
        if day is None:
            raise ValidationError(f"'{day_key}' is not a day of the week starting {date_key(sunday)}")
        if not isinstance(day_meals, dict):
            continue
        meals = day_meals.get('meals') if isinstance(day_meals.get('meals'), dict) else day_meals
        for meal_type in WEEK_DATA_MEAL_TYPES:
            raw = meals.get(meal_type)
            servings = validate_servings(raw.get('servings', 1) if isinstance(raw, dict) else 1)
            recipe = _slot_recipe(lookup, raw)
            if recipe is None:
                continue
            slots.append((day, 'Snack' if meal_type == 'Snacks' else meal_type, recipe, servings))
    return slots


def save_week_data(repo, lookup, user_id: str, week_start_date: DateLike, week_data: Dict[str, Any],
                   notes: str = "", retries: int = SAVE_RETRIES) -> MealPlan:
    """Replace every meal of the week with the ``{day: {meal_type: recipe}}`` map.

    Days are date keys or weekday names. A slot holds a recipe id, a
    ``{"id": ...}`` reference or an embedded recipe with a title. All recipes
    are resolved before the plan is touched.
    """
    if not user_id:
        raise ValidationError("user_id is required")
    if week_start_date is None:
        raise ValidationError("week_start_date is required")
    sunday = week_start(week_start_date)
    slots = _parse_week_data(lookup, sunday, week_data)

    def mutate(plan: MealPlan):
        plan.clear()
        for day, meal_type, recipe, servings in slots:
            plan.add_meal(day, meal_type, recipe, servings)
        plan.notes = (notes or "").strip()

    plan = _save_with_retry(repo, lambda: find_or_create_week_plan(repo, user_id, sunday), mutate, retries)
    logger.info("Saved %d meals for week %s of %s", len(slots), plan.week_id, user_id)
    publish_plan_updated(plan, 'save_plan')
    return plan
