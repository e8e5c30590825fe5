"""
core/recipe_parser.py
────────────────────────────────────────────────────────────────────────
Turn a pasted block of recipe text into structured fields.

    raw text ──► prompt ──► LLM ──► strip ``` fence ──► JSON ──► ParsedRecipe

`parse_recipe()` either returns a recipe with a name, at least one
ingredient and at least one instruction, or raises
`MalformedResponseError`.  It never hands back a partial object.
Upstream failures surface as `UpstreamServiceError`; nothing is retried.
"""
from __future__ import annotations

import logging
import math
import re
from typing import Any, List

from pydantic import BaseModel, Field, ValidationError, field_validator

from core.errors import MalformedResponseError
from core.models.recipe import RECIPE_CATEGORIES, RecipeDraft
from scripts.helpers import load_json_reply
from services.gemini import LLMClient

_LOG = logging.getLogger(__name__)

_REQUIRED = ("name", "ingredients", "instructions")
_LEADING_INT = re.compile(r"\d+")

PARSE_PROMPT = """Parse this recipe text into a structured JSON format. Follow the Schema.org Recipe standard.

Extract the following fields:
- name: Recipe title
- description: Brief intro/description (optional)
- prep_time: Preparation time in minutes (optional, number only)
- cook_time: Cooking time in minutes (optional, number only)
- total_time: Total time in minutes (optional, number only)
- servings: Number of servings as a string (e.g., "4", "6-8 servings")
- recipe_category: Type of dish - choose the MOST SPECIFIC category that applies:
  * "main" - Main course dishes (entrees, casseroles, etc.)
  * "side" - Side dishes (roasted vegetables, rice dishes, etc.)
  * "appetizer" - Appetizers and starters
  * "dessert" - Desserts and sweets
  * "breakfast" - Breakfast dishes
  * "bread" - Bread, rolls, biscuits, muffins, and other baked goods
  * "soup" - Soups, stews, and chilis (NOT main course, even if hearty)
  * "salad" - Salads (NOT side, even if served as one)
  * "condiment" - Sauces, dressings, spreads, salsas, and condiments (NOT side)
  * "drink" - Beverages and cocktails
  * "snack" - Snacks and small bites
- recipe_cuisine: Cuisine type - use SPECIFIC cuisines when possible (e.g., "Japanese" not "Asian", "Italian" not "European"):
  * Asian cuisines: Japanese, Chinese, Thai, Korean, Vietnamese, Indian, Filipino, etc.
  * European cuisines: Italian, French, Spanish, Greek, German, British, etc.
  * Americas: Mexican, American, Brazilian, Peruvian, etc.
  * Middle Eastern: Lebanese, Turkish, Israeli, etc.
  * African cuisines: Ethiopian, Moroccan, etc.
  * Only use broad terms like "Asian" or "European" if the recipe is a fusion or doesn't fit a specific country
- ingredients: Array of ingredient strings, each on a separate line as written
- instructions: Array of step strings, numbered or separated
- notes: Any additional notes, tips, or variations (optional)

Return ONLY valid JSON in this exact format:
{{
  "name": "Recipe Name",
  "description": "Optional description",
  "prep_time": 15,
  "cook_time": 30,
  "total_time": 45,
  "servings": "4 servings",
  "recipe_category": "bread",
  "recipe_cuisine": "Italian",
  "ingredients": ["ingredient 1", "ingredient 2"],
  "instructions": ["Step 1", "Step 2"],
  "notes": "Optional notes"
}}

Recipe text:
{raw_text}"""


class ParsedRecipe(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    prep_time: int | None = None
    cook_time: int | None = None
    total_time: int | None = None
    servings: str | None = None
    recipe_category: str | None = None
    recipe_cuisine: str | None = None
    ingredients: List[str] = Field(min_length=1)
    instructions: List[str] = Field(min_length=1)
    notes: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("prep_time", "cook_time", "total_time", mode="before")
    @classmethod
    def _minutes(cls, v: Any) -> int | None:
        # models like "15 minutes" or 15.0 as much as 15
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, (int, float)):
            # json.loads lets Infinity and NaN through
            return int(v) if math.isfinite(v) and v >= 0 else None
        if isinstance(v, str):
            m = _LEADING_INT.search(v)
            return int(m.group()) if m else None
        return None

    @field_validator("servings", mode="before")
    @classmethod
    def _servings_text(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("recipe_category", mode="before")
    @classmethod
    def _known_category(cls, v: Any) -> str | None:
        if not isinstance(v, str):
            return None
        cat = v.strip().lower()
        if cat not in RECIPE_CATEGORIES:
            _LOG.warning("Dropping unknown recipe_category %r", v)
            return None
        return cat

    @field_validator("ingredients", "instructions", mode="before")
    @classmethod
    def _lines(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.splitlines()
        if isinstance(v, list):
            return [str(s).strip() for s in v if s is not None and str(s).strip()]
        return v

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_text(cls, v: Any) -> Any:
        if isinstance(v, list):
            return "\n".join(str(n) for n in v)
        return v


def build_parse_prompt(raw_text: str) -> str:
    return PARSE_PROMPT.format(raw_text=raw_text)


async def parse_recipe(raw_text: str, llm: LLMClient) -> ParsedRecipe:
    prompt = build_parse_prompt(raw_text)
    _LOG.debug("Parsing recipe text (%d chars)", len(raw_text))
    reply = await llm.generate(prompt, temperature=0.2, max_output_tokens=2000)

    data = load_json_reply(reply)
    if not isinstance(data, dict):
        raise MalformedResponseError("Model reply is not a JSON object")

    try:
        return ParsedRecipe.model_validate(data)
    except ValidationError as exc:
        bad = sorted({str(e["loc"][0]) for e in exc.errors() if e["loc"]})
        missing = [f for f in _REQUIRED if f in bad]
        if missing:
            msg = f"Parsed recipe missing required fields: {', '.join(missing)}"
        else:
            msg = f"Parsed recipe has invalid fields: {', '.join(bad)}"
        _LOG.warning("%s", msg)
        raise MalformedResponseError(msg) from exc


def to_recipe_draft(parsed: ParsedRecipe, raw_text: str) -> RecipeDraft:
    """Everything the model extracted, plus the original paste for audit."""
    return RecipeDraft(**parsed.model_dump(), raw_text=raw_text)
