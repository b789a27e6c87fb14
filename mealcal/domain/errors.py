"""Error taxonomy shared by the domain, the repositories and the API layer."""


class MealPlannerError(Exception):
    """Base class for every error the planner surfaces to its callers."""


class NotFoundError(MealPlannerError):
    """A referenced recipe, meal plan, grocery list or item does not exist."""


class ValidationError(MealPlannerError, ValueError):
    """Input rejected before any mutation was attempted."""


class ConflictError(MealPlannerError):
    """Concurrent write detected; reload and retry the operation."""


class DuplicateKeyError(ConflictError):
    """A document with the same unique key already exists."""


class UpstreamUnavailableError(MealPlannerError):
    """The recipe source failed or timed out."""


__all__ = [
    'MealPlannerError', 'NotFoundError', 'ValidationError',
    'ConflictError', 'DuplicateKeyError', 'UpstreamUnavailableError',
]
