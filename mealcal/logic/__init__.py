"""Core business logic layer.

Subpackages:
- shopping: grocery list derivation (flat and structured)
- reporting: nutrition summaries
- recipes: TheMealDB payload normalization
- planning: week plan workflows on top of the repositories
"""
__all__ = ["shopping", "reporting", "recipes", "planning"]
