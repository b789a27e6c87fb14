from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query

from mealcal.api.deps import get_recipe_lookup, get_recipe_repository
from mealcal.api.pagination import paginate
from mealcal.domain.Nutrition import Nutrition
from mealcal.domain.Recipe import DetailedIngredient, Recipe
from mealcal.infra.Recipe_Repository import RecipeRepository
from mealcal.infra.recipe_lookup import RecipeLookup
from mealcal.utilities.validators import ImportRecipeInput, RecipeInput, RecipeUpdateInput

router = APIRouter(prefix="/api/recipes", tags=["recipes"])
logger = logging.getLogger(__name__)


@router.get("/")
def list_recipes(search: Optional[str] = Query(default=None),
                 tags: Optional[str] = Query(default=None, description="Comma separated diet tags"),
                 category: Optional[str] = Query(default=None),
                 area: Optional[str] = Query(default=None),
                 limit: int = Query(default=20, ge=1, le=100),
                 page: int = Query(default=1, ge=1),
                 repo: RecipeRepository = Depends(get_recipe_repository)):
    """Recipes stored locally (cached TheMealDB meals and authored ones)."""
    diet = [t.strip() for t in tags.split(',') if t.strip()] if tags else None
    recipes, pagination = paginate(repo.filter(search, diet, category, area), limit, page)
    return {"recipes": [r.to_dict() for r in recipes], "source": "local", "pagination": pagination}


@router.get("/search")
def search_recipes(query: Optional[str] = Query(default=None),
                   category: Optional[str] = Query(default=None),
                   area: Optional[str] = Query(default=None),
                   ingredient: Optional[str] = Query(default=None),
                   letter: Optional[str] = Query(default=None, max_length=1),
                   count: int = Query(default=10, ge=1, le=50),
                   lookup: RecipeLookup = Depends(get_recipe_lookup)):
    recipes = lookup.search(query=query, category=category, area=area, ingredient=ingredient,
                            count=count, letter=letter)
    return {"recipes": [r.to_dict() for r in recipes], "count": len(recipes)}


@router.get("/random")
def random_recipes(count: int = Query(default=10, ge=1, le=50),
                   lookup: RecipeLookup = Depends(get_recipe_lookup)):
    recipes = lookup.random(count)
    return {"recipes": [r.to_dict() for r in recipes], "count": len(recipes)}


@router.get("/categories")
def list_categories(detailed: bool = Query(default=False),
                    lookup: RecipeLookup = Depends(get_recipe_lookup)):
    return lookup.categories(detailed)


@router.get("/areas")
def list_areas(lookup: RecipeLookup = Depends(get_recipe_lookup)):
    return lookup.areas()


@router.get("/ingredients")
def list_ingredients(limit: int = Query(default=100, ge=1, le=1000),
                     lookup: RecipeLookup = Depends(get_recipe_lookup)):
    return lookup.ingredients(limit)


@router.get("/tags/all")
def list_tags(repo: RecipeRepository = Depends(get_recipe_repository)):
    return repo.all_tags()


@router.get("/{recipe_id}")
def get_recipe(recipe_id: str, refresh: bool = Query(default=False),
               lookup: RecipeLookup = Depends(get_recipe_lookup)):
    return lookup.get_recipe_by_id(recipe_id, refresh=refresh).to_dict()


@router.post("/", status_code=201)
def create_recipe(payload: RecipeInput, repo: RecipeRepository = Depends(get_recipe_repository)):
    """Store a recipe authored in the app (data_source='custom')."""
    recipe = Recipe(
        title=payload.title,
        ingredients=payload.ingredients,
        detailed_ingredients=[DetailedIngredient(i.name, i.amount, i.unit) for i in payload.detailed_ingredients],
        category=payload.category,
        area=payload.area,
        tags=payload.tags,
        diet=payload.diet,
        nutrition=Nutrition.from_dict(payload.nutrition.model_dump()),
        image=payload.image,
        instructions=payload.instructions,
        servings=payload.servings,
        prep_time=payload.prep_time,
        cook_time=payload.cook_time,
        data_source="custom",
    )
    return repo.upsert(recipe).to_dict()


@router.post("/import", status_code=201)
def import_recipe(payload: ImportRecipeInput, lookup: RecipeLookup = Depends(get_recipe_lookup)):
    return lookup.import_from_payload(payload.model_dump()).to_dict()


@router.put("/{recipe_id}")
def update_recipe(recipe_id: str, payload: RecipeUpdateInput,
                  repo: RecipeRepository = Depends(get_recipe_repository)):
    recipe = repo.get(recipe_id).update(payload.model_dump(exclude_unset=True))
    return repo.upsert(recipe).to_dict()


@router.delete("/{recipe_id}")
def delete_recipe(recipe_id: str, repo: RecipeRepository = Depends(get_recipe_repository)):
    repo.delete(recipe_id)
    return {"message": "Recipe deleted successfully"}
