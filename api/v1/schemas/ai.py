from __future__ import annotations

from pydantic import AliasChoices, BaseModel, Field, field_validator

from core.dish_suggester import DishSuggestion, MealContext, MealContextItem
from core.recipe_parser import ParsedRecipe


class ParseRequest(BaseModel):
    raw_text: str = Field(..., validation_alias=AliasChoices("raw_text", "rawText"))
    save_to_db: bool = Field(
        False, validation_alias=AliasChoices("save_to_db", "saveToDb")
    )

    @field_validator("raw_text")
    @classmethod
    def _has_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("raw_text must not be empty")
        return v


class ParseResponse(ParsedRecipe):
    id: int | None = None
    saved: bool = False


class SuggestRequest(MealContext):
    # required here, even if empty
    current_items: list[MealContextItem] = Field(
        ..., validation_alias=AliasChoices("current_items", "currentItems")
    )


class SuggestResponse(BaseModel):
    suggestions: list[DishSuggestion]
