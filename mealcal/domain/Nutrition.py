"""Nutrition value object: calories, protein, fat, carbs (estimates, never negative)."""
from typing import Any, Dict

from mealcal.utilities.constants import NUTRITION_FIELDS


def to_number(value: Any) -> float:
    """Coerce a loose numeric field; malformed or negative values count as 0."""
    if isinstance(value, bool) or value is None:
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if number != number or number < 0:  # NaN or negative
        return 0
    return int(number) if number.is_integer() else number


class Nutrition:
    __slots__ = NUTRITION_FIELDS

    def __init__(self, calories: float = 0, protein: float = 0, fat: float = 0, carbs: float = 0):
        self.calories = to_number(calories)
        self.protein = to_number(protein)
        self.fat = to_number(fat)
        self.carbs = to_number(carbs)

    @staticmethod
    def from_dict(data) -> "Nutrition":
        '''Builds Nutrition from a loose mapping, accepting 'fats' and 'carbohydrates' synonyms.'''
        if isinstance(data, Nutrition):
            return data
        d = data if isinstance(data, dict) else {}
        return Nutrition(
            calories=d.get('calories', 0),
            protein=d.get('protein', 0),
            fat=d.get('fat', d.get('fats', 0)),
            carbs=d.get('carbs', d.get('carbohydrates', 0)),
        )

    def to_dict(self) -> Dict[str, float]:
        return {field: getattr(self, field) for field in NUTRITION_FIELDS}

    def scaled(self, factor: float) -> "Nutrition":
        return Nutrition(**{field: getattr(self, field) * factor for field in NUTRITION_FIELDS})

    def __add__(self, other: "Nutrition") -> "Nutrition":
        return Nutrition(**{field: getattr(self, field) + getattr(other, field) for field in NUTRITION_FIELDS})

    def __eq__(self, other) -> bool:
        if not isinstance(other, Nutrition):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash(tuple(self.to_dict().values()))

    def __str__(self) -> str:
        return f"Kcal: {self.calories} - Protein: {self.protein}g, Fat: {self.fat}g, Carbs: {self.carbs}g"

    __repr__ = __str__
