from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

from mealcal.domain.errors import (
    ConflictError,
    MealPlannerError,
    NotFoundError,
    UpstreamUnavailableError,
    ValidationError,
)

# Routers
from mealcal.api.routes import grocery_lists, meal_plans, recipes

# Logging
logger = logging.getLogger("mealcal_app")

app = FastAPI(title="mealcal", description="Weekly meal planning, grocery lists and nutrition summaries")

# Include routers
app.include_router(meal_plans.router)
app.include_router(recipes.router)
app.include_router(grocery_lists.router)

ERROR_STATUS = (
    (NotFoundError, 404),
    (ValidationError, 400),
    (ConflictError, 409),
    (UpstreamUnavailableError, 502),
)


@app.exception_handler(MealPlannerError)
async def planner_error_handler(request: Request, exc: MealPlannerError):
    status = next((code for cls, code in ERROR_STATUS if isinstance(exc, cls)), 500)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, status, exc)
    return JSONResponse(status_code=status, content={"detail": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
    message = f"{field}: {first.get('msg', 'invalid input')}" if field else first.get('msg', 'Invalid input')
    logger.info("%s %s -> 400: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"detail": message})
