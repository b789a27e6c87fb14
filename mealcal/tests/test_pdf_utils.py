from datetime import date
import unittest

from mealcal.domain.MealPlan import MealPlan
from mealcal.domain.Recipe import Recipe
from mealcal.infra.pdf_utils import generate_pdf_for_grocery_list, generate_pdf_for_week
from mealcal.utilities.constants import NO_MEALS_PLACEHOLDER


class TestPdfExport(unittest.TestCase):

    def test_week_pdf(self):
        plan = MealPlan.new("user-1", date(2024, 1, 10))
        plan.add_meal("2024-01-08", "Dinner", Recipe(id="1", title="Chili", ingredients=["Beans"]), servings=3)
        pdf = generate_pdf_for_week(plan)
        self.assertTrue(pdf.startswith(b"%PDF"))

    def test_empty_week_pdf(self):
        self.assertTrue(generate_pdf_for_week(MealPlan.new("user-1", date(2024, 1, 10))).startswith(b"%PDF"))

    def test_grocery_pdf(self):
        pdf = generate_pdf_for_grocery_list(["Beans (needed 2 times)", "Rice"], "2024-01-07", "2024-01-13")
        self.assertTrue(pdf.startswith(b"%PDF"))

    def test_placeholder_grocery_pdf(self):
        pdf = generate_pdf_for_grocery_list([NO_MEALS_PLACEHOLDER], date(2024, 1, 7), date(2024, 1, 13))
        self.assertTrue(pdf.startswith(b"%PDF"))


if __name__ == '__main__':
    unittest.main()
