from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from core.models.meal import MealDraft, MealItemDraft


class MealItemCreate(MealItemDraft):
    order_index: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def _variant_fields(self) -> "MealItemCreate":
        if self.item_type == "recipe" and self.recipe_id is None:
            raise ValueError("recipe_id required for recipe items")
        if self.item_type == "simple" and not (self.simple_item_name or "").strip():
            raise ValueError("simple_item_name required for simple items")
        return self


class MealCreate(MealDraft):
    name: str = Field(..., min_length=1, examples=["Sunday dinner"])
    items: list[MealItemCreate] = []


class MealPatch(BaseModel):
    name: str | None = Field(None, min_length=1)
    servings: str | None = None
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v
