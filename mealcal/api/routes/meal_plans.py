import logging
from datetime import date as _date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from mealcal.api.deps import get_plan_repository, get_recipe_lookup
from mealcal.api.pagination import paginate
from mealcal.infra.Plan_Repository import PlanRepository
from mealcal.infra.pdf_utils import generate_pdf_for_grocery_list, generate_pdf_for_week
from mealcal.infra.recipe_lookup import RecipeLookup
from mealcal.logic.planning import scheduler
from mealcal.logic.shopping.list_builder import is_placeholder_list
from mealcal.utilities.validators import (
    AddMealInput, MealPlanInput, MealPlanUpdateInput, PlanMealInput, SavePlanInput,
)

router = APIRouter(prefix="/api/meal-plans", tags=["meal-plans"])
logger = logging.getLogger(__name__)


@router.post("/add-meal", status_code=201)
def add_meal(payload: AddMealInput,
             repo: PlanRepository = Depends(get_plan_repository),
             lookup: RecipeLookup = Depends(get_recipe_lookup)):
    plan = scheduler.add_meal(
        repo, lookup, payload.user_id, payload.date, payload.meal_type,
        payload.recipe_id, payload.servings, payload.notes,
    )
    return {"success": True, "meal_plan": plan.to_dict(), "message": "Meal added successfully"}


@router.delete("/remove-meal")
def remove_meal(user_id: str = Query(..., min_length=1),
                date: str = Query(...),
                meal_type: str = Query(...),
                repo: PlanRepository = Depends(get_plan_repository)):
    plan = scheduler.remove_meal(repo, user_id, date, meal_type)
    return {"success": True, "meal_plan": plan.to_dict(), "message": "Meal removed successfully"}


@router.post("/save-plan", status_code=201)
def save_plan(payload: SavePlanInput,
              repo: PlanRepository = Depends(get_plan_repository),
              lookup: RecipeLookup = Depends(get_recipe_lookup)):
    """Replace a whole week from a {day: {meal_type: recipe}} map."""
    plan = scheduler.save_week_data(
        repo, lookup, payload.user_id, payload.week_start_date, payload.week_data, payload.notes,
    )
    return plan.to_dict()


@router.get("/week")
def get_week(user_id: str = Query(..., min_length=1),
             date: Optional[str] = Query(default=None),
             repo: PlanRepository = Depends(get_plan_repository)):
    return scheduler.get_week_overview(repo, user_id, date)


@router.get("/week/pdf")
def get_week_pdf(user_id: str = Query(..., min_length=1),
                 date: Optional[str] = Query(default=None),
                 repo: PlanRepository = Depends(get_plan_repository)):
    plan = scheduler.find_or_create_week_plan(repo, user_id, date or _date.today())
    pdf = generate_pdf_for_week(plan)
    filename = f"meal_plan_{plan.week_id}.pdf"
    return Response(content=pdf, media_type="application/pdf",
                    headers={"Content-Disposition": f'attachment; filename="{filename}"'})


@router.get("/grocery-list")
def get_grocery_list(user_id: str = Query(..., min_length=1),
                     start_date: str = Query(...),
                     end_date: Optional[str] = Query(default=None),
                     repo: PlanRepository = Depends(get_plan_repository)):
    result = scheduler.grocery_list_for_range(repo, user_id, start_date, end_date)
    lines = result['grocery_list']
    result['total_items'] = 0 if is_placeholder_list(lines) else len(lines)
    return result


@router.get("/grocery-list/pdf")
def get_grocery_list_pdf(user_id: str = Query(..., min_length=1),
                         start_date: str = Query(...),
                         end_date: Optional[str] = Query(default=None),
                         repo: PlanRepository = Depends(get_plan_repository)):
    result = scheduler.grocery_list_for_range(repo, user_id, start_date, end_date)
    span = result['date_range']
    pdf = generate_pdf_for_grocery_list(result['grocery_list'], span['start'], span['end'])
    filename = f"grocery_list_{span['start']}_{span['end']}.pdf"
    return Response(content=pdf, media_type="application/pdf",
                    headers={"Content-Disposition": f'attachment; filename="{filename}"'})


@router.get("/")
def list_meal_plans(user_id: Optional[str] = Query(default=None),
                    is_active: Optional[bool] = Query(default=None),
                    limit: int = Query(default=10, ge=1, le=100),
                    page: int = Query(default=1, ge=1),
                    repo: PlanRepository = Depends(get_plan_repository)):
    plans, pagination = paginate(repo.list_for_user(user_id, is_active), limit, page)
    return {"meal_plans": [p.to_dict() for p in plans], "pagination": pagination}


@router.get("/{plan_id}")
def get_meal_plan(plan_id: str, repo: PlanRepository = Depends(get_plan_repository)):
    return repo.get(plan_id).to_dict()


@router.delete("/{plan_id}")
def delete_meal_plan(plan_id: str, repo: PlanRepository = Depends(get_plan_repository)):
    repo.delete(plan_id)
    logger.info("Deleted meal plan %s", plan_id)
    return {"message": "Meal plan deleted successfully"}


@router.post("/", status_code=201)
def create_meal_plan(payload: MealPlanInput, repo: PlanRepository = Depends(get_plan_repository)):
    plan = scheduler.create_week_plan(repo, payload.user_id, payload.date, payload.notes)
    return plan.to_dict()


@router.put("/{plan_id}")
def update_meal_plan(plan_id: str, payload: MealPlanUpdateInput,
                     repo: PlanRepository = Depends(get_plan_repository)):
    return scheduler.update_plan(repo, plan_id, payload.model_dump(exclude_unset=True)).to_dict()


@router.put("/{plan_id}/meal")
def set_plan_meal(plan_id: str, payload: PlanMealInput,
                  repo: PlanRepository = Depends(get_plan_repository),
                  lookup: RecipeLookup = Depends(get_recipe_lookup)):
    plan = scheduler.set_plan_meal(
        repo, lookup, plan_id, payload.date, payload.meal_type,
        payload.recipe_id, payload.servings, payload.notes,
    )
    return plan.to_dict()


@router.delete("/{plan_id}/meal")
def remove_plan_meal(plan_id: str,
                     date: str = Query(...),
                     meal_type: str = Query(...),
                     repo: PlanRepository = Depends(get_plan_repository)):
    return scheduler.remove_plan_meal(repo, plan_id, date, meal_type).to_dict()
