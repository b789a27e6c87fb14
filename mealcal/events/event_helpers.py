"""Event helper utilities.

Helpers that publish planner events on the global event bus.

Quick import:
    from mealcal.events.event_helpers import (
        publish_plan_updated, publish_grocery_list_generated,
        MEALPLAN_UPDATED, GROCERY_LIST_GENERATED
    )
"""
from __future__ import annotations
from typing import Any
from .Event_Bus import create_event, MEALPLAN_UPDATED, GROCERY_LIST_GENERATED

__all__ = [
    'publish_plan_updated', 'publish_grocery_list_generated',
    'MEALPLAN_UPDATED', 'GROCERY_LIST_GENERATED', 'create_event'
]


def publish_plan_updated(plan: Any, action: str):
    """Publish a mealplan.updated event.

    Payload structure:
        {
          'action': 'add_meal' | 'remove_meal' | 'create_plan' | 'update_plan' | 'save_plan',
          'meal_plan': <plan dict>,
          'grocery_list': [ <line>, ... ],
          'nutrition_summary': { 'daily_nutrition': [...], 'weekly_total': {...} }
        }
    """
    create_event(MEALPLAN_UPDATED, {
        'action': action,
        'meal_plan': plan.to_dict(),
        'grocery_list': plan.grocery_list(),
        'nutrition_summary': plan.weekly_nutrition_summary(),
    })


def publish_grocery_list_generated(grocery_list: Any):
    """Publish a grocery_list.generated event."""
    create_event(GROCERY_LIST_GENERATED, {'grocery_list': grocery_list.to_dict()})
