"""Meal plan persistence: one JSON file, documents keyed by (user_id, week_id).

The key is unique: ``create`` refuses a second plan for the same user and
week. ``save`` is version-checked, so a plan loaded before someone else's
write cannot overwrite it.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from mealcal.domain.MealPlan import MealPlan
from mealcal.domain.errors import ConflictError, DuplicateKeyError, NotFoundError
from mealcal.infra.json_store import JsonStore
from mealcal.infra.paths import PLANS_FILE
from mealcal.utilities.dates import DateLike, weeks_in_range

logger = logging.getLogger(__name__)


def _plan_key(user_id: str, week_id: str) -> str:
    return f"{user_id}:{week_id}"


class PlanRepository:
    def __init__(self, path=PLANS_FILE):
        self.store = JsonStore(path)

    def load(self, user_id: str, week_id: str) -> Optional[MealPlan]:
        with self.store.snapshot() as store:
            doc = store.get(_plan_key(user_id, week_id))
        return MealPlan.from_dict(doc) if doc else None

    def get(self, plan_id: str) -> MealPlan:
        with self.store.snapshot() as store:
            for doc in store.values():
                if doc.get('id') == plan_id:
                    return MealPlan.from_dict(doc)
        raise NotFoundError("Meal plan not found")

    def create(self, plan: MealPlan) -> MealPlan:
        key = _plan_key(plan.user_id, plan.week_id)
        with self.store.transaction() as store:
            if key in store:
                raise DuplicateKeyError(f"Meal plan {plan.week_id} already exists for user {plan.user_id}")
            plan.version = 1
            store[key] = plan.to_dict()
        logger.info("Created meal plan %s for user %s", plan.week_id, plan.user_id)
        return plan

    def save(self, plan: MealPlan) -> MealPlan:
        """Write the whole plan back if nobody saved it since it was loaded."""
        key = _plan_key(plan.user_id, plan.week_id)
        with self.store.transaction() as store:
            current = store.get(key)
            stored_version = int(current.get('version') or 0) if current else 0
            if current is None or stored_version != plan.version:
                raise ConflictError(
                    f"Meal plan {plan.week_id} changed concurrently "
                    f"(expected version {plan.version}, found {stored_version})"
                )
            plan.version = stored_version + 1
            plan.updated_at = datetime.now(timezone.utc).isoformat()
            plan.recompute_totals()
            store[key] = plan.to_dict()
        logger.debug("Saved meal plan %s v%s", plan.week_id, plan.version)
        return plan

    def delete(self, plan_id: str) -> None:
        with self.store.transaction() as store:
            for key, doc in list(store.items()):
                if doc.get('id') == plan_id:
                    del store[key]
                    return
            raise NotFoundError("Meal plan not found")

    def list_for_user(self, user_id: Optional[str] = None, is_active: Optional[bool] = None) -> List[MealPlan]:
        """Plans newest week first, optionally filtered by owner and active flag."""
        with self.store.snapshot() as store:
            docs = list(store.values())
        if user_id is not None:
            docs = [d for d in docs if d.get('user_id') == user_id]
        if is_active is not None:
            docs = [d for d in docs if bool(d.get('is_active', True)) == is_active]
        docs.sort(key=lambda d: d.get('week_start', ''), reverse=True)
        return [MealPlan.from_dict(d) for d in docs]

    def find_overlapping(self, user_id: str, start: DateLike, end: DateLike) -> List[MealPlan]:
        """Plans of ``user_id`` whose week intersects [start, end], oldest first."""
        keys = [_plan_key(user_id, MealPlan.week_id_for(sunday)) for sunday in weeks_in_range(start, end)]
        with self.store.snapshot() as store:
            docs = [store[key] for key in keys if key in store]
        return [MealPlan.from_dict(d) for d in docs]
