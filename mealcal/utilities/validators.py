"""
Input validation schemas using Pydantic for better data integrity.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional, Union

from mealcal.utilities.constants import DEFAULT_GROCERY_CATEGORY, GROCERY_CATEGORIES


def _strip(v):
    return v.strip() if isinstance(v, str) else v


class AddMealInput(BaseModel):
    """Schema for scheduling a recipe into a (date, meal type) slot."""
    user_id: str = Field(..., min_length=1)
    date: str = Field(..., min_length=10)
    meal_type: str = Field(..., min_length=1)
    recipe_id: str = Field(..., min_length=1)
    servings: int = Field(1, ge=1, strict=True)
    notes: str = Field("", max_length=1000)

    @field_validator('recipe_id', mode='before')
    @classmethod
    def coerce_recipe_id(cls, v):
        """TheMealDB ids may arrive as numbers."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator('user_id', 'date', 'meal_type', 'recipe_id', 'notes')
    @classmethod
    def strip_whitespace(cls, v):
        return _strip(v)


class DetailedIngredientInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    amount: str = ""
    unit: str = Field("", max_length=20)

    @field_validator('amount', mode='before')
    @classmethod
    def amount_as_text(cls, v):
        return "" if v is None else str(v)


class NutritionInput(BaseModel):
    calories: float = Field(0, ge=0)
    protein: float = Field(0, ge=0)
    fat: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)


class RecipeInput(BaseModel):
    """Schema for an authored (custom) recipe."""
    title: str = Field(..., min_length=1, max_length=200)
    ingredients: Optional[List[str]] = None
    detailed_ingredients: List[DetailedIngredientInput] = Field(default_factory=list)
    category: str = ""
    area: str = ""
    tags: List[str] = Field(default_factory=list)
    diet: List[str] = Field(default_factory=list)
    nutrition: NutritionInput = Field(default_factory=NutritionInput)
    image: str = ""
    instructions: str = ""
    servings: int = Field(4, ge=1, le=50)
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        """Validate recipe title."""
        if not v.strip():
            raise ValueError('Recipe title cannot be empty')
        return v.strip()

    @field_validator('tags', 'ingredients')
    @classmethod
    def drop_blank(cls, v):
        if v is None:
            return v
        return [item.strip() for item in v if item and item.strip()]


class GroceryItemInput(BaseModel):
    """Schema for grocery list item validation."""
    name: str = Field(..., min_length=1, max_length=100)
    amount: str = ""
    unit: str = Field("", max_length=20)
    category: str = DEFAULT_GROCERY_CATEGORY
    is_checked: bool = False
    estimated_cost: float = Field(0, ge=0)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        if not v.strip():
            raise ValueError('Item name cannot be empty')
        return v.strip()

    @field_validator('category')
    @classmethod
    def known_category(cls, v):
        return v if v in GROCERY_CATEGORIES else DEFAULT_GROCERY_CATEGORY


class GroceryListInput(BaseModel):
    user_id: Optional[str] = None
    meal_plan_id: Optional[str] = None
    items: List[GroceryItemInput] = Field(default_factory=list)
    notes: str = ""
    shopping_date: Optional[str] = None


class GroceryListUpdateInput(BaseModel):
    """Partial update; only the fields that are sent are applied."""
    items: Optional[List[GroceryItemInput]] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None
    meal_plan_id: Optional[str] = None
    shopping_date: Optional[str] = None


class GroceryItemUpdateInput(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    amount: Optional[str] = None
    unit: Optional[str] = None
    category: Optional[str] = None
    is_checked: Optional[bool] = None
    estimated_cost: Optional[float] = Field(None, ge=0)


class GenerateGroceryListInput(BaseModel):
    meal_plan_id: str = Field(..., min_length=1)
    user_id: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class WeekDataInput(BaseModel):
    """Raw ``{day: {meal_type: recipe}}`` week map sent by clients."""
    week_data: Dict[str, Any]

    @field_validator('week_data')
    @classmethod
    def not_empty(cls, v):
        if not v:
            raise ValueError('Week data is required')
        return v


class CheckAllInput(BaseModel):
    checked: bool = True


class ImportRecipeInput(BaseModel):
    """Raw TheMealDB meal payload; only idMeal is required."""
    model_config = {'extra': 'allow'}

    idMeal: Union[str, int]

    @field_validator('idMeal')
    @classmethod
    def id_as_text(cls, v):
        text = str(v).strip()
        if not text:
            raise ValueError('idMeal cannot be empty')
        return text


class RecipeUpdateInput(BaseModel):
    """Partial recipe update; only the fields that are sent are applied."""
    title: Optional[str] = Field(None, max_length=200)
    ingredients: Optional[List[str]] = None
    detailed_ingredients: Optional[List[DetailedIngredientInput]] = None
    category: Optional[str] = None
    area: Optional[str] = None
    tags: Optional[List[str]] = None
    diet: Optional[List[str]] = None
    nutrition: Optional[NutritionInput] = None
    image: Optional[str] = None
    instructions: Optional[str] = None
    servings: Optional[int] = Field(None, ge=1, le=50)
    prep_time: Optional[int] = Field(None, ge=0)
    cook_time: Optional[int] = Field(None, ge=0)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Recipe title cannot be empty')
        return _strip(v)

    @field_validator('tags', 'ingredients')
    @classmethod
    def drop_blank(cls, v):
        if v is None:
            return v
        return [item.strip() for item in v if item and item.strip()]


class MealPlanInput(BaseModel):
    """Schema for creating an empty plan for the week containing ``date``."""
    user_id: str = Field(..., min_length=1)
    date: str = Field(..., min_length=10)
    notes: str = Field("", max_length=1000)

    @field_validator('user_id', 'date', 'notes')
    @classmethod
    def strip_whitespace(cls, v):
        return _strip(v)


class MealPlanUpdateInput(BaseModel):
    notes: Optional[str] = Field(None, max_length=1000)
    is_active: Optional[bool] = None


class PlanMealInput(BaseModel):
    """Schema for setting one slot of a known plan."""
    date: str = Field(..., min_length=10)
    meal_type: str = Field(..., min_length=1)
    recipe_id: str = Field(..., min_length=1)
    servings: int = Field(1, ge=1, strict=True)
    notes: str = Field("", max_length=1000)

    @field_validator('recipe_id', mode='before')
    @classmethod
    def coerce_recipe_id(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator('date', 'meal_type', 'recipe_id', 'notes')
    @classmethod
    def strip_whitespace(cls, v):
        return _strip(v)


class SavePlanInput(BaseModel):
    """Whole-week save: ``week_data`` replaces every meal of the week."""
    user_id: str = Field(..., min_length=1)
    week_start_date: str = Field(..., min_length=10)
    week_data: Dict[str, Any] = Field(default_factory=dict)
    notes: str = Field("", max_length=1000)

    @field_validator('user_id', 'week_start_date', 'notes')
    @classmethod
    def strip_whitespace(cls, v):
        return _strip(v)
