"""
services/storage.py
────────────────────────────────────────────────────────────────────────
The storage interface the routers depend on.

One implementation ships (`services.db.SqlStorage`, SQLite or PostgreSQL
underneath); the routers only ever see this base class, handed to them
through `api.v1.deps.get_storage`.

Conventions
-----------
* every method is one unit of work (one session / transaction)
* single-entity reads return ``None`` when the row is absent
* writes return the new id, or ``True``/``False`` for "something changed"
* no validation happens here – that is the HTTP layer's job
"""
from __future__ import annotations

import abc
from typing import Any, Mapping, Sequence

from core.models.meal import Meal, MealDraft, MealItem, MealItemDraft, MealWithItems
from core.models.recipe import Recipe, RecipeDraft, RecipeFilter


class Storage(abc.ABC):
    # ───────── lifecycle ─────────────────────────────────────────────
    @abc.abstractmethod
    async def create_schema(self) -> None: ...

    @abc.abstractmethod
    async def close(self) -> None: ...

    # ───────── recipes ───────────────────────────────────────────────
    @abc.abstractmethod
    async def insert_recipe(self, recipe: RecipeDraft) -> int: ...

    @abc.abstractmethod
    async def get_all_recipes(self) -> list[Recipe]: ...

    @abc.abstractmethod
    async def get_recipe_by_id(self, recipe_id: int) -> Recipe | None: ...

    @abc.abstractmethod
    async def filter_recipes(self, filters: RecipeFilter) -> list[Recipe]: ...

    @abc.abstractmethod
    async def update_recipe(self, recipe_id: int, changes: Mapping[str, Any]) -> bool:
        """Write only the keys present in `changes`; touch `updated_at`."""

    @abc.abstractmethod
    async def delete_recipe(self, recipe_id: int) -> bool: ...

    @abc.abstractmethod
    async def get_categories(self) -> list[str]: ...

    @abc.abstractmethod
    async def get_cuisines(self) -> list[str]: ...

    # ───────── meals ─────────────────────────────────────────────────
    @abc.abstractmethod
    async def insert_meal(
        self, meal: MealDraft, items: Sequence[MealItemDraft] = ()
    ) -> int:
        """Create a meal and, optionally, its items in one transaction."""

    @abc.abstractmethod
    async def get_all_meals(self) -> list[Meal]: ...

    @abc.abstractmethod
    async def get_meal_by_id(self, meal_id: int) -> Meal | None: ...

    @abc.abstractmethod
    async def update_meal(self, meal_id: int, changes: Mapping[str, Any]) -> bool: ...

    @abc.abstractmethod
    async def delete_meal(self, meal_id: int) -> bool: ...

    # ───────── meal items ────────────────────────────────────────────
    @abc.abstractmethod
    async def insert_meal_item(self, meal_id: int, item: MealItemDraft) -> int: ...

    @abc.abstractmethod
    async def get_meal_items(self, meal_id: int) -> list[MealItem]: ...

    @abc.abstractmethod
    async def delete_meal_item(self, item_id: int, meal_id: int | None = None) -> bool: ...

    async def get_meal_with_items(self, meal_id: int) -> MealWithItems | None:
        meal = await self.get_meal_by_id(meal_id)
        if meal is None:
            return None
        items = await self.get_meal_items(meal_id)
        return MealWithItems(**meal.model_dump(), items=items)
