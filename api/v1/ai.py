# api/v1/ai.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from api.v1.deps import get_llm, get_storage
from api.v1.schemas import ParseRequest, ParseResponse, SuggestRequest, SuggestResponse
from core.dish_suggester import suggest_dishes
from core.recipe_parser import parse_recipe, to_recipe_draft
from services.gemini import LLMClient
from services.storage import Storage

router = APIRouter()


@router.post(
    "/parse-recipe",
    response_model=ParseResponse,
    status_code=status.HTTP_200_OK,
    summary="Extract structured fields from pasted recipe text",
)
async def parse_recipe_text(
    body: ParseRequest,
    llm: LLMClient = Depends(get_llm),
    storage: Storage = Depends(get_storage),
) -> ParseResponse:
    """
    Upstream failures and unusable model replies are turned into a 502
    by the handlers registered in `main`.
    """
    parsed = await parse_recipe(body.raw_text, llm)
    if not body.save_to_db:
        return ParseResponse(**parsed.model_dump(), saved=False)

    recipe_id = await storage.insert_recipe(to_recipe_draft(parsed, body.raw_text))
    return ParseResponse(**parsed.model_dump(), id=recipe_id, saved=True)


@router.post(
    "/suggest-dishes",
    response_model=SuggestResponse,
    summary="Advisory complementary dishes for a meal in progress",
)
async def suggest_complementary_dishes(
    body: SuggestRequest,
    llm: LLMClient = Depends(get_llm),
    storage: Storage = Depends(get_storage),
) -> SuggestResponse:
    categories = await storage.get_categories()
    cuisines = await storage.get_cuisines()
    suggestions = await suggest_dishes(body, llm, categories, cuisines)
    return SuggestResponse(suggestions=suggestions)
