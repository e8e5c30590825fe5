from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from core.models.recipe import RecipeDraft


def _no_blank_lines(lines):
    if not isinstance(lines, list):
        return lines
    # non-strings are left for type validation to reject
    return [
        s.strip() if isinstance(s, str) else s
        for s in lines
        if not (isinstance(s, str) and not s.strip())
    ]


class RecipeCreate(RecipeDraft):
    name: str = Field(..., min_length=1, examples=["Tabbouleh"])
    prep_time: int | None = Field(None, ge=0)
    cook_time: int | None = Field(None, ge=0)
    total_time: int | None = Field(None, ge=0)
    ingredients: list[str] = Field(
        ..., min_length=1, examples=[["1/2 cup fine bulgur", "2 bunches parsley"]]
    )
    instructions: list[str] = Field(
        ..., min_length=1, examples=[["Soak the bulgur.", "Chop and toss."]]
    )

    _clean_lines = field_validator("ingredients", "instructions", mode="before")(
        _no_blank_lines
    )


class RecipePatch(BaseModel):
    """Every field optional; only the ones sent are written."""

    name: str | None = Field(None, min_length=1)
    description: str | None = None
    author: str | None = None
    source_url: str | None = None
    image_url: str | None = None
    notes: str | None = None
    prep_time: int | None = Field(None, ge=0)
    cook_time: int | None = Field(None, ge=0)
    total_time: int | None = Field(None, ge=0)
    servings: str | None = None
    recipe_category: str | None = None
    recipe_cuisine: str | None = None
    ingredients: list[str] | None = Field(None, min_length=1)
    instructions: list[str] | None = Field(None, min_length=1)
    is_favorite: bool | None = None

    _clean_lines = field_validator("ingredients", "instructions", mode="before")(
        _no_blank_lines
    )

    @field_validator("name", "ingredients", "instructions", "is_favorite")
    @classmethod
    def _not_null(cls, v):
        # these columns cannot be cleared, only replaced
        if v is None:
            raise ValueError("may not be null")
        return v
