"""Re-export individual schema modules for easy imports."""

from .common import Ack
from .recipe import RecipeCreate, RecipePatch
from .meal import MealCreate, MealItemCreate, MealPatch
from .ai import ParseRequest, ParseResponse, SuggestRequest, SuggestResponse

__all__ = [
    "Ack",
    "RecipeCreate",
    "RecipePatch",
    "MealCreate",
    "MealItemCreate",
    "MealPatch",
    "ParseRequest",
    "ParseResponse",
    "SuggestRequest",
    "SuggestResponse",
]
