import unittest

from mealcal.domain.MealEntry import MealEntry, RecipeSnapshot
from mealcal.domain.Recipe import DetailedIngredient
from mealcal.logic.shopping.list_builder import (
    build_structured_from_week_data, build_structured_grocery_list, items_to_grocery_items,
    merge_structured_ingredients,
)


class TestStructuredMerge(unittest.TestCase):

    def test_amounts_are_concatenated(self):
        items = merge_structured_ingredients([
            {"name": "Milk", "amount": "2 cups"},
            {"name": " milk ", "amount": "1 cup"},
        ])
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0]["name"], "Milk")
        self.assertEqual(items[0]["amount"], "2 cups + 1 cup")
        self.assertEqual(items[0]["category"], "Other")

    def test_first_seen_order_and_plain_strings(self):
        items = merge_structured_ingredients(["Onion", {"name": "Garlic", "amount": "2", "unit": "cloves"}, "onion"])
        self.assertEqual([i["name"] for i in items], ["Onion", "Garlic"])
        self.assertEqual(items[1]["unit"], "cloves")

    def test_nameless_items_are_ignored(self):
        self.assertEqual(merge_structured_ingredients([{"amount": "1"}, {"name": "  "}, None, 3]), [])

    def test_entries_prefer_detailed_ingredients(self):
        detailed = RecipeSnapshot(title="A", ingredients=("1 cup Flour",),
                                  detailed_ingredients=(DetailedIngredient("Flour", "1", "cup"),))
        flat = RecipeSnapshot(title="B", ingredients=("Sugar",))
        entries = [
            MealEntry("2024-01-08", "Breakfast", "a", detailed),
            MealEntry("2024-01-09", "Breakfast", "a", detailed),
            MealEntry("2024-01-09", "Snack", "b", flat),
            MealEntry("2024-01-20", "Snack", "b", RecipeSnapshot(title="C", ingredients=("Late",))),
        ]
        items = build_structured_grocery_list(entries, "2024-01-07", "2024-01-13")
        self.assertEqual(items, [
            {"name": "Flour", "amount": "1 + 1", "unit": "cup", "category": "Other"},
            {"name": "Sugar", "amount": "", "unit": "", "category": "Other"},
        ])

    def test_items_to_grocery_items(self):
        grocery_items = items_to_grocery_items([{"name": "Flour", "amount": "1", "unit": "cup", "category": "Pantry"}])
        self.assertEqual(grocery_items[0].name, "Flour")
        self.assertEqual(grocery_items[0].category, "Pantry")
        self.assertFalse(grocery_items[0].is_checked)


class TestWeekData(unittest.TestCase):

    def test_week_data_with_day_names_and_snacks(self):
        week_data = {
            "Monday": {
                "Breakfast": {"ingredients": [{"name": "Egg", "amount": "2"}]},
                "Snacks": {"ingredients": ["Apple"]},
            },
            "Tuesday": {
                "Breakfast": {"ingredients": [{"name": "egg", "amount": "3"}]},
                "Lunch": None,
            },
        }
        items = build_structured_from_week_data(week_data)
        self.assertEqual([(i["name"], i["amount"]) for i in items], [("Egg", "2 + 3"), ("Apple", "")])

    def test_week_data_nested_recipe_and_meals_key(self):
        week_data = {
            "2024-01-08": {"meals": {"Dinner": {"recipe": {"ingredients": ["Rice", "Beans"]}}}},
            "2024-01-20": {"Dinner": {"ingredients": ["Skipped"]}},
        }
        items = build_structured_from_week_data(week_data, "2024-01-07", "2024-01-13")
        self.assertEqual([i["name"] for i in items], ["Rice", "Beans"])

    def test_empty_week_data(self):
        self.assertEqual(build_structured_from_week_data({}), [])


if __name__ == '__main__':
    unittest.main()
