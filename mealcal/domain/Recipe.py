"""Recipe domain entity: canonical in-app recipe record, from TheMealDB or authored by hand."""
from datetime import datetime, timedelta, timezone
from typing import List, Dict, Optional
from uuid import uuid4

from mealcal.domain.Nutrition import Nutrition, to_number
from mealcal.domain.errors import ValidationError
from mealcal.utilities.constants import DIET_TAGS, DATA_SOURCES
from mealcal.utilities.config import RECIPE_STALE_HOURS


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            return None
    return None


class DetailedIngredient:
    """Structured ingredient of an authored recipe; amount and unit stay free text."""

    def __init__(self, name: str = "", amount: str = "", unit: str = ""):
        self.name = (name or "").strip()
        self.amount = str(amount).strip() if amount not in (None, "") else ""
        self.unit = (unit or "").strip()

    def display(self) -> str:
        return f"{self.amount} {self.unit} {self.name}" if self.amount and self.unit else self.name

    @staticmethod
    def from_dict(data):
        d = data if isinstance(data, dict) else {}
        return DetailedIngredient(d.get('name', ''), d.get('amount', ''), d.get('unit', ''))

    def to_dict(self):
        return {"name": self.name, "amount": self.amount, "unit": self.unit}

    def __eq__(self, other):
        return isinstance(other, DetailedIngredient) and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"DetailedIngredient({self.display()!r})"


class Recipe:
    def __init__(self, id: str = "", title: str = "", ingredients: Optional[List[str]] = None,
                 detailed_ingredients: Optional[List[DetailedIngredient]] = None,
                 category: str = "", area: str = "", tags: Optional[List[str]] = None,
                 diet: Optional[List[str]] = None, nutrition: Optional[Nutrition] = None,
                 image: str = "", instructions: str = "", youtube_url: str = "", source: str = "",
                 servings: int = 4, prep_time: Optional[int] = None, cook_time: Optional[int] = None,
                 meal_db_id: Optional[str] = None, data_source: str = "custom",
                 last_updated: Optional[datetime] = None):
        self.id = id or uuid4().hex
        self.title = (title or "").strip()
        # None means "no flat list stored", which lets simple_ingredients fall back to detailed ones
        self.ingredients = list(ingredients) if ingredients is not None else None
        self.detailed_ingredients = detailed_ingredients[:] if detailed_ingredients else []
        self.category = category or ""
        self.area = area or ""
        self.tags = tags[:] if tags else []
        self.diet = [d for d in (diet or []) if d in DIET_TAGS]
        self.nutrition = nutrition if nutrition is not None else Nutrition()
        self.image = image or ""
        self.instructions = instructions or ""
        self.youtube_url = youtube_url or ""
        self.source = source or ""
        self.servings = servings if isinstance(servings, int) and servings >= 1 else 4
        self.prep_time = prep_time
        self.cook_time = cook_time
        self.meal_db_id = meal_db_id
        self.data_source = data_source if data_source in DATA_SOURCES else "custom"
        self.last_updated = last_updated or _utcnow()

    def __str__(self) -> str:
        return f"{self.title} - {self.category or 'Uncategorized'} - Diet: {', '.join(self.diet)} - {self.nutrition}"

    __repr__ = __str__

    @property
    def total_time(self) -> int:
        return int(to_number(self.prep_time)) + int(to_number(self.cook_time))

    def simple_ingredients(self) -> List[str]:
        '''Flat ingredient strings; authored recipes project their structured ingredients.'''
        if self.ingredients is not None:
            return list(self.ingredients)
        return [ing.display() for ing in self.detailed_ingredients if ing.name]

    def is_stale(self, now: Optional[datetime] = None) -> bool:
        """Advisory freshness check: cached source data older than RECIPE_STALE_HOURS."""
        if self.last_updated is None:
            return True
        now = now or _utcnow()
        last = self.last_updated
        if (last.tzinfo is None) != (now.tzinfo is None):
            # Compare naive timestamps as UTC
            last = last.replace(tzinfo=timezone.utc) if last.tzinfo is None else last
            now = now.replace(tzinfo=timezone.utc) if now.tzinfo is None else now
        return now - last > timedelta(hours=RECIPE_STALE_HOURS)

    def touch(self, now: Optional[datetime] = None):
        self.last_updated = now or _utcnow()
        return self

    def update(self, updates: Dict, now: Optional[datetime] = None):
        '''Replaces the editable fields present in ``updates``; id and source stay fixed.'''
        if 'title' in updates:
            title = (updates['title'] or "").strip()
            if not title:
                raise ValidationError("Recipe title cannot be empty")
            self.title = title
        for field in ('category', 'area', 'image', 'instructions'):
            if field in updates:
                setattr(self, field, (updates[field] or "").strip())
        if 'ingredients' in updates:
            ingredients = updates['ingredients']
            self.ingredients = list(ingredients) if ingredients is not None else None
        if 'detailed_ingredients' in updates:
            self.detailed_ingredients = [DetailedIngredient.from_dict(i) for i in updates['detailed_ingredients'] or []]
        if 'tags' in updates:
            self.tags = list(updates['tags'] or [])
        if 'diet' in updates:
            self.diet = [d for d in (updates['diet'] or []) if d in DIET_TAGS]
        if 'nutrition' in updates:
            self.nutrition = Nutrition.from_dict(updates['nutrition'])
        if updates.get('servings') is not None:
            self.servings = updates['servings']
        for field in ('prep_time', 'cook_time'):
            if field in updates:
                setattr(self, field, updates[field])
        return self.touch(now)

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        ingredients = d.get('ingredients')
        recipe = Recipe(
            id=str(d.get('id') or ''),
            title=d.get('title', ''),
            ingredients=[str(i) for i in ingredients] if isinstance(ingredients, list) else None,
            detailed_ingredients=[DetailedIngredient.from_dict(i) for i in d.get('detailed_ingredients') or []],
            category=d.get('category', ''),
            area=d.get('area', ''),
            tags=d.get('tags') or [],
            diet=d.get('diet') or [],
            nutrition=Nutrition.from_dict(d.get('nutrition')),
            image=d.get('image', ''),
            instructions=d.get('instructions', ''),
            youtube_url=d.get('youtube_url', ''),
            source=d.get('source', ''),
            servings=d.get('servings', 4),
            prep_time=d.get('prep_time'),
            cook_time=d.get('cook_time'),
            meal_db_id=d.get('meal_db_id'),
            data_source=d.get('data_source', 'custom'),
        )
        # Records without a timestamp count as stale, not as fresh
        recipe.last_updated = _parse_timestamp(d.get('last_updated'))
        return recipe

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "title": self.title,
            "ingredients": self.ingredients,
            "detailed_ingredients": [ing.to_dict() for ing in self.detailed_ingredients],
            "category": self.category,
            "area": self.area,
            "tags": self.tags,
            "diet": self.diet,
            "nutrition": self.nutrition.to_dict(),
            "image": self.image,
            "instructions": self.instructions,
            "youtube_url": self.youtube_url,
            "source": self.source,
            "servings": self.servings,
            "prep_time": self.prep_time,
            "cook_time": self.cook_time,
            "total_time": self.total_time,
            "meal_db_id": self.meal_db_id,
            "data_source": self.data_source,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
        }
