from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

# Suggested in the UI and in the extraction prompt; storage accepts anything.
RECIPE_CATEGORIES = (
    "main",
    "side",
    "appetizer",
    "dessert",
    "breakfast",
    "bread",
    "soup",
    "salad",
    "condiment",
    "drink",
    "snack",
)


class RecipeDraft(BaseModel):
    """A recipe as handed to storage: everything except id and timestamps."""

    name: str
    description: str | None = None
    author: str | None = None
    source_url: str | None = None
    image_url: str | None = None
    notes: str | None = None
    prep_time: int | None = None     # minutes
    cook_time: int | None = None
    total_time: int | None = None
    servings: str | None = None      # free text: "4", "6-8 servings"
    recipe_category: str | None = None
    recipe_cuisine: str | None = None
    ingredients: list[str] = []
    instructions: list[str] = []
    is_favorite: bool = False
    raw_text: str | None = None


class Recipe(RecipeDraft):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RecipeFilter(BaseModel):
    category: str | None = None
    cuisine: str | None = None
    cuisines: list[str] | None = None
    search: str | None = None
    favorites: bool = False
