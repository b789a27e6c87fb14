import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from mealcal.api.deps import get_grocery_list_repository, get_plan_repository
from mealcal.api.pagination import paginate
from mealcal.domain.GroceryList import GroceryList
from mealcal.events.event_helpers import publish_grocery_list_generated
from mealcal.infra.GroceryList_Repository import GroceryListRepository
from mealcal.infra.Plan_Repository import PlanRepository
from mealcal.logic.shopping.list_builder import (
    build_structured_from_week_data, build_structured_grocery_list, items_to_grocery_items,
)
from mealcal.utilities.validators import (
    CheckAllInput, GenerateGroceryListInput, GroceryItemUpdateInput, GroceryListInput,
    GroceryListUpdateInput, WeekDataInput,
)

router = APIRouter(prefix="/api/grocery-lists", tags=["grocery-lists"])
logger = logging.getLogger(__name__)


@router.get("/")
def list_grocery_lists(user_id: Optional[str] = Query(default=None),
                       is_active: Optional[bool] = Query(default=None),
                       limit: int = Query(default=10, ge=1, le=100),
                       page: int = Query(default=1, ge=1),
                       repo: GroceryListRepository = Depends(get_grocery_list_repository)):
    lists, pagination = paginate(repo.list(user_id, is_active), limit, page)
    return {"grocery_lists": [gl.to_dict() for gl in lists], "pagination": pagination}


@router.post("/", status_code=201)
def create_grocery_list(payload: GroceryListInput,
                        repo: GroceryListRepository = Depends(get_grocery_list_repository)):
    grocery_list = GroceryList.from_dict(payload.model_dump())
    return repo.save(grocery_list).to_dict()


@router.post("/generate", status_code=201)
def generate_grocery_list(payload: GenerateGroceryListInput,
                          plans: PlanRepository = Depends(get_plan_repository),
                          repo: GroceryListRepository = Depends(get_grocery_list_repository)):
    """Structured grocery list from a stored meal plan, saved as a new list."""
    plan = plans.get(payload.meal_plan_id)
    items = build_structured_grocery_list(plan.meals, payload.start_date, payload.end_date)
    grocery_list = GroceryList(
        user_id=payload.user_id or plan.user_id,
        meal_plan_id=plan.id,
        items=items_to_grocery_items(items),
        notes=f"Generated from meal plan for {plan.date_range_label}",
    )
    repo.save(grocery_list)
    logger.info("Generated grocery list %s from plan %s (%d items)", grocery_list.id, plan.id, len(items))
    publish_grocery_list_generated(grocery_list)
    return grocery_list.to_dict()


@router.post("/generate-grocery-list")
def generate_from_week_data(payload: WeekDataInput):
    """Structured grocery list from raw week data; nothing is stored."""
    items = build_structured_from_week_data(payload.week_data)
    return {"grocery_list": items}


@router.get("/{list_id}")
def get_grocery_list(list_id: str, repo: GroceryListRepository = Depends(get_grocery_list_repository)):
    return repo.get(list_id).to_dict()


@router.put("/{list_id}")
def update_grocery_list(list_id: str, payload: GroceryListUpdateInput,
                        repo: GroceryListRepository = Depends(get_grocery_list_repository)):
    grocery_list = repo.get(list_id)
    grocery_list.update(payload.model_dump(exclude_unset=True))
    return repo.save(grocery_list).to_dict()


@router.delete("/{list_id}")
def delete_grocery_list(list_id: str, repo: GroceryListRepository = Depends(get_grocery_list_repository)):
    repo.delete(list_id)
    return {"message": "Grocery list deleted successfully"}


@router.put("/{list_id}/items/{item_id}")
def update_grocery_item(list_id: str, item_id: str, payload: GroceryItemUpdateInput,
                        repo: GroceryListRepository = Depends(get_grocery_list_repository)):
    grocery_list = repo.get(list_id)
    grocery_list.update_item(item_id, payload.model_dump(exclude_unset=True))
    return repo.save(grocery_list).to_dict()


@router.put("/{list_id}/check-all")
def check_all_items(list_id: str, payload: CheckAllInput,
                    repo: GroceryListRepository = Depends(get_grocery_list_repository)):
    grocery_list = repo.get(list_id)
    grocery_list.check_all(payload.checked)
    return repo.save(grocery_list).to_dict()
