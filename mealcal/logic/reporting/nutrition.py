"""Nutrition aggregation over scheduled meals.

Every field is summed as ``nutrition.field * servings``; malformed values
count as 0 so totals are always computable.
"""
from typing import Any, Dict, Iterable, Optional

from mealcal.domain.MealEntry import MealEntry
from mealcal.domain.Nutrition import Nutrition
from mealcal.utilities.dates import DateLike, date_key, date_range


def nutrition_for_date(entries: Iterable[MealEntry], date: Optional[DateLike] = None) -> Dict[str, float]:
    """Totals for the meals on ``date``, or for every meal when ``date`` is None."""
    key = date_key(date) if date is not None else None
    total = Nutrition()
    for entry in entries:
        if key is not None and entry.date_key != key:
            continue
        total = total + Nutrition.from_dict(entry.snapshot.nutrition).scaled(entry.servings)
    return total.to_dict()


def weekly_nutrition_summary(plan) -> Dict[str, Any]:
    """Per-day totals for the plan's 7 days (Sunday first) plus the grand total.

    Returns structure:
    {
      'daily_nutrition': [ { 'date': 'YYYY-MM-DD', 'date_key': ..., 'day_name': 'Sunday',
                             'nutrition': { 'calories', 'protein', 'fat', 'carbs' } }, ... x7 ],
      'weekly_total': { 'calories', 'protein', 'fat', 'carbs' }
    }
    """
    daily = []
    for day in date_range(plan.week_start, plan.week_end):
        daily.append({
            'date': date_key(day),
            'date_key': date_key(day),
            'day_name': day.strftime('%A'),
            'nutrition': nutrition_for_date(plan.meals, day),
        })
    return {
        'daily_nutrition': daily,
        'weekly_total': nutrition_for_date(plan.meals),
    }


__all__ = ["nutrition_for_date", "weekly_nutrition_summary"]
