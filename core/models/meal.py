from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

ItemType = Literal["recipe", "simple"]

# UI convention for simple items; not enforced server-side
SIMPLE_ITEM_CATEGORIES = ("carb", "protein", "veggie", "other")


class MealDraft(BaseModel):
    name: str
    servings: str | None = None
    notes: str | None = None


class Meal(MealDraft):
    id: int
    created_at: datetime
    updated_at: datetime


class MealItemDraft(BaseModel):
    item_type: ItemType
    recipe_id: int | None = None
    simple_item_name: str | None = None
    simple_item_category: str | None = None
    order_index: int | None = None   # None → append


class MealItemRecipe(BaseModel):
    """Snapshot of the referenced recipe, joined at read time."""

    id: int
    name: str
    description: str | None = None
    ingredients: list[str] = []
    instructions: list[str] = []
    recipe_category: str | None = None
    recipe_cuisine: str | None = None
    prep_time: int | None = None
    cook_time: int | None = None
    servings: str | None = None


class MealItem(BaseModel):
    id: int
    meal_id: int
    item_type: ItemType
    recipe_id: int | None = None
    simple_item_name: str | None = None
    simple_item_category: str | None = None
    order_index: int
    created_at: datetime
    recipe: MealItemRecipe | None = None   # None for simple items and dangling refs


class MealWithItems(Meal):
    items: list[MealItem] = []
