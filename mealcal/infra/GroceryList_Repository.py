"""Saved grocery list persistence (JSON file, keyed by list id)."""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from mealcal.domain.GroceryList import GroceryList
from mealcal.domain.errors import NotFoundError
from mealcal.infra.json_store import JsonStore
from mealcal.infra.paths import GROCERY_LISTS_FILE

logger = logging.getLogger(__name__)


class GroceryListRepository:
    def __init__(self, path=GROCERY_LISTS_FILE):
        self.store = JsonStore(path)

    def get(self, list_id: str) -> GroceryList:
        with self.store.snapshot() as store:
            doc = store.get(list_id)
        if not doc:
            raise NotFoundError("Grocery list not found")
        return GroceryList.from_dict(doc)

    def save(self, grocery_list: GroceryList) -> GroceryList:
        grocery_list.updated_at = datetime.now(timezone.utc).isoformat()
        with self.store.transaction() as store:
            store[grocery_list.id] = grocery_list.to_dict()
        logger.info("Saved grocery list %s (%d items)", grocery_list.id, len(grocery_list.items))
        return grocery_list

    def delete(self, list_id: str) -> None:
        with self.store.transaction() as store:
            if list_id not in store:
                raise NotFoundError("Grocery list not found")
            del store[list_id]

    def list(self, user_id: Optional[str] = None, is_active: Optional[bool] = None) -> List[GroceryList]:
        """Newest first."""
        with self.store.snapshot() as store:
            docs = list(store.values())
        if user_id is not None:
            docs = [d for d in docs if d.get('user_id') == user_id]
        if is_active is not None:
            docs = [d for d in docs if bool(d.get('is_active', True)) == is_active]
        docs.sort(key=lambda d: d.get('created_at', ''), reverse=True)
        return [GroceryList.from_dict(d) for d in docs]
