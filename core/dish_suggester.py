"""
core/dish_suggester.py
────────────────────────────────────────────────────────────────────────
Advisory "what else should go with this?" suggestions for a meal that is
still being composed.

The prompt lists the current items plus the category / cuisine vocabulary
that actually exists in storage, so each suggestion's `searchQuery` has a
fair chance of hitting a saved recipe.  Nothing is persisted; callers
regenerate whenever the item list changes and treat failure as "no
suggestions".
"""
from __future__ import annotations

import logging
from typing import Any, List, Literal, Sequence

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    model_validator,
)

from core.errors import MalformedResponseError
from core.models.meal import SIMPLE_ITEM_CATEGORIES
from scripts.helpers import load_json_reply
from services.gemini import LLMClient

_LOG = logging.getLogger(__name__)


class MealContextItem(BaseModel):
    type: Literal["recipe", "simple"]
    name: str
    category: str | None = None
    cuisine: str | None = None


class MealContext(BaseModel):
    current_items: List[MealContextItem] = Field(
        default_factory=list,
        validation_alias=AliasChoices("current_items", "currentItems"),
    )
    servings: str | None = None


class DishSuggestion(BaseModel):
    name: str
    rationale: str = ""
    category: str = ""
    search_query: str = Field(
        "",
        alias="searchQuery",
        validation_alias=AliasChoices("searchQuery", "search_query"),
    )

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def _default_query(self) -> "DishSuggestion":
        if not self.search_query.strip():
            self.search_query = self.name.lower()
        return self


def _describe(item: MealContextItem) -> str:
    if item.type == "recipe":
        return (
            f"- {item.name} ({item.category or 'unknown category'}, "
            f"{item.cuisine or 'unknown cuisine'})"
        )
    return f"- {item.name} (simple item, {item.category or 'unspecified'})"


def build_suggestion_prompt(
    context: MealContext,
    categories: Sequence[str],
    cuisines: Sequence[str],
) -> str:
    items_list = "\n".join(_describe(i) for i in context.current_items)
    return f"""You are a meal planning assistant. Analyze the current meal and suggest 3-5 complementary dishes to create a balanced, cohesive meal.

Current meal items:
{items_list or '(empty meal - suggest a complete meal)'}

Servings: {context.servings or 'not specified'}

Available recipe categories in database: {', '.join(categories) or 'none'}
Available cuisines in database: {', '.join(cuisines) or 'none'}
Simple (non-recipe) items are tagged as one of: {', '.join(SIMPLE_ITEM_CATEGORIES)}

Guidelines:
1. For BALANCED meals, suggest items that provide:
   - Protein (if missing)
   - Carbohydrate/starch (if missing)
   - Vegetables (if missing)
   - Consider cultural/cuisine compatibility

2. For CONTEXTUAL suggestions:
   - If there's a hearty stew/soup → suggest bread or rice
   - If there's a main protein → suggest appropriate sides
   - If there's Italian cuisine → suggest Italian-compatible sides
   - If meal is incomplete → suggest core components

3. Prioritize suggestions that match recipes in the database categories/cuisines listed above

4. searchQuery is run as a prefix word search against recipe names, ingredients and steps; keep it to one to three plain words

Return ONLY valid JSON in this exact format:
{{
  "suggestions": [
    {{
      "name": "Garlic Bread",
      "rationale": "Complements the tomato-based pasta dish and adds a carbohydrate component",
      "category": "side",
      "searchQuery": "garlic bread"
    }},
    {{
      "name": "Green Salad",
      "rationale": "Adds fresh vegetables to balance the richness of the main dish",
      "category": "veggie",
      "searchQuery": "salad green"
    }}
  ]
}}"""


def _suggestion_list(data: Any) -> list[Any]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("suggestions"), list):
        return data["suggestions"]
    raise MalformedResponseError("Model reply has no suggestions array")


async def suggest_dishes(
    context: MealContext,
    llm: LLMClient,
    categories: Sequence[str],
    cuisines: Sequence[str],
) -> list[DishSuggestion]:
    prompt = build_suggestion_prompt(context, categories, cuisines)
    _LOG.debug("Requesting suggestions for %d item(s)", len(context.current_items))
    reply = await llm.generate(prompt, temperature=0.7, max_output_tokens=1500)

    raw = _suggestion_list(load_json_reply(reply))
    try:
        return [DishSuggestion.model_validate(s) for s in raw]
    except ValidationError as exc:
        _LOG.warning("Unusable suggestion in model reply: %s", exc)
        raise MalformedResponseError(f"Model returned an invalid suggestion: {exc}") from exc
