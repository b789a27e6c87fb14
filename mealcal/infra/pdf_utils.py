import io
from reportlab.lib.pagesizes import A4, landscape
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from mealcal.logic.shopping.list_builder import is_placeholder_list
from mealcal.utilities.constants import MEAL_TYPES
from mealcal.utilities.dates import as_date, date_key, week_dates

HEADER_STYLE = [
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4CAF50")),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("FONTSIZE", (0, 0), (-1, 0), 12),
    ("BOTTOMPADDING", (0, 0), (-1, 0), 10),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
]


def _slot_text(entry) -> str:
    if entry is None:
        return "-"
    title = entry.snapshot.title or entry.recipe_id
    return f"{title} (x{entry.servings})" if entry.servings > 1 else title


def generate_pdf_for_week(plan):
    """Generate a PDF table: Day / Breakfast / Lunch / Dinner / Snack for the plan's 7 days."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=landscape(A4),
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    elements = [
        Paragraph(f"Meal Plan - Week {plan.week_id} ({plan.date_range_label})", styles["Title"]),
        Spacer(1, 16),
    ]

    data = [["Day"] + list(MEAL_TYPES)]
    for day in week_dates(plan.week_start):
        row = [f"{day.strftime('%A')} ({date_key(day)})"]
        row.extend(_slot_text(plan.get_meal(day, meal_type)) for meal_type in MEAL_TYPES)
        data.append(row)

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle(HEADER_STYLE + [("ALIGN", (0, 0), (-1, -1), "CENTER")]))

    elements.append(table)
    elements.append(Spacer(1, 12))
    elements.append(Paragraph(f"Total calories: {plan.total_calories}", styles["Normal"]))
    doc.build(elements)
    return buf.getvalue()


def generate_pdf_for_grocery_list(lines, start, end):
    """Checklist PDF for a flat grocery list; a placeholder list becomes a single note."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=A4,
        rightMargin=30, leftMargin=30, topMargin=30, bottomMargin=30
    )

    styles = getSampleStyleSheet()
    elements = [
        Paragraph(f"Grocery List - {date_key(as_date(start))} to {date_key(as_date(end))}", styles["Title"]),
        Spacer(1, 16),
    ]

    if not lines or is_placeholder_list(lines):
        note = lines[0] if lines else "Nothing to buy."
        elements.append(Paragraph(note, styles["Italic"]))
    else:
        data = [["", "Item"]] + [["[ ]", line] for line in lines]
        table = Table(data, colWidths=[40, 460], repeatRows=1)
        table.setStyle(TableStyle(HEADER_STYLE + [("ALIGN", (0, 0), (0, -1), "CENTER")]))
        elements.append(table)

    doc.build(elements)
    return buf.getvalue()
