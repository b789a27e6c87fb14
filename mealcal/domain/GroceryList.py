"""GroceryList aggregate: saved shopping list with checkable items and estimated cost."""
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from mealcal.domain.Nutrition import to_number
from mealcal.domain.errors import NotFoundError, ValidationError
from mealcal.utilities.constants import GROCERY_CATEGORIES, DEFAULT_GROCERY_CATEGORY
from mealcal.utilities.dates import as_date, date_key


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class GroceryItem:
    def __init__(self, name: str, amount: str = "", unit: str = "", category: str = DEFAULT_GROCERY_CATEGORY,
                 is_checked: bool = False, estimated_cost: Optional[float] = None, id: str = ""):
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Grocery item name is required")
        self.id = id or uuid4().hex
        self.name = name.strip()
        self.amount = str(amount).strip() if amount not in (None, "") else ""
        self.unit = (unit or "").strip()
        self.category = category if category in GROCERY_CATEGORIES else DEFAULT_GROCERY_CATEGORY
        self.is_checked = bool(is_checked)
        self.estimated_cost = to_number(estimated_cost) if estimated_cost is not None else None

    def update(self, updates: Dict[str, Any]):
        '''Applies a partial update; the id never changes.'''
        merged = {**self.to_dict(), **{k: v for k, v in updates.items() if k != 'id'}}
        replacement = GroceryItem.from_dict(merged)
        self.__dict__.update(replacement.__dict__)
        return self

    def __str__(self) -> str:
        amount = f"{self.amount} {self.unit}".strip()
        return f"{'[x]' if self.is_checked else '[ ]'} {self.name}" + (f" - {amount}" if amount else "")

    __repr__ = __str__

    @staticmethod
    def from_dict(data) -> "GroceryItem":
        d = data if isinstance(data, dict) else {}
        return GroceryItem(
            id=d.get('id') or '',
            name=d.get('name', ''),
            amount=d.get('amount', ''),
            unit=d.get('unit', ''),
            category=d.get('category') or DEFAULT_GROCERY_CATEGORY,
            is_checked=d.get('is_checked', False),
            estimated_cost=d.get('estimated_cost'),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "amount": self.amount,
            "unit": self.unit,
            "category": self.category,
            "is_checked": self.is_checked,
            "estimated_cost": self.estimated_cost,
        }


class GroceryList:
    def __init__(self, user_id: Optional[str] = None, meal_plan_id: Optional[str] = None,
                 items: Optional[List[GroceryItem]] = None, notes: str = "",
                 shopping_date: Optional[date] = None, is_active: bool = True, id: str = "",
                 created_at: Optional[str] = None, updated_at: Optional[str] = None):
        self.id = id or uuid4().hex
        self.user_id = user_id
        self.meal_plan_id = meal_plan_id
        self.items = items[:] if items else []
        self.notes = (notes or "").strip()
        self.shopping_date = as_date(shopping_date) if shopping_date else None
        self.is_active = bool(is_active)
        self.created_at = created_at or _now_iso()
        self.updated_at = updated_at or self.created_at
        self.total_estimated_cost = 0
        self.calculate_total_cost()

    def calculate_total_cost(self):
        self.total_estimated_cost = sum(item.estimated_cost or 0 for item in self.items)
        return self.total_estimated_cost

    def get_item(self, item_id: str) -> GroceryItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise NotFoundError(f"Item '{item_id}' not found")

    def update_item(self, item_id: str, updates: Dict[str, Any]) -> GroceryItem:
        item = self.get_item(item_id).update(updates)
        self.calculate_total_cost()
        return item

    def check_all(self, checked: bool = True):
        for item in self.items:
            item.is_checked = bool(checked)
        return self

    def update(self, updates: Dict[str, Any]):
        '''Replaces the editable fields present in ``updates``.'''
        if 'items' in updates:
            self.items = [GroceryItem.from_dict(i) for i in updates.get('items') or []]
        if 'notes' in updates:
            self.notes = (updates['notes'] or "").strip()
        if 'is_active' in updates:
            self.is_active = bool(updates['is_active'])
        if 'meal_plan_id' in updates:
            self.meal_plan_id = updates['meal_plan_id']
        if 'shopping_date' in updates:
            self.shopping_date = as_date(updates['shopping_date']) if updates['shopping_date'] else None
        self.calculate_total_cost()
        return self

    def __str__(self) -> str:
        items_str = ",\n\t".join(str(item) for item in self.items)
        return f"Grocery List {self.id}:\n\t{items_str}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data) -> "GroceryList":
        d = data if isinstance(data, dict) else {}
        return GroceryList(
            id=d.get('id') or '',
            user_id=d.get('user_id'),
            meal_plan_id=d.get('meal_plan_id'),
            items=[GroceryItem.from_dict(i) for i in d.get('items') or []],
            notes=d.get('notes', ''),
            shopping_date=d.get('shopping_date'),
            is_active=d.get('is_active', True),
            created_at=d.get('created_at'),
            updated_at=d.get('updated_at'),
        )

    def to_dict(self):
        self.calculate_total_cost()
        return {
            "id": self.id,
            "user_id": self.user_id,
            "meal_plan_id": self.meal_plan_id,
            "items": [item.to_dict() for item in self.items],
            "total_estimated_cost": self.total_estimated_cost,
            "is_active": self.is_active,
            "notes": self.notes,
            "shopping_date": date_key(self.shopping_date) if self.shopping_date else None,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
