import json

import pytest

from core.errors import MalformedResponseError, UpstreamServiceError
from core.recipe_parser import ParsedRecipe, parse_recipe, to_recipe_draft

RAW = """Grandma's Focaccia
Serves 8. Prep 20 min, bake 25 min.

500 g bread flour
400 ml warm water
7 g yeast

Mix. Rest overnight. Bake at 230C."""

GOOD_REPLY = {
    "name": "Grandma's Focaccia",
    "prep_time": "20 minutes",
    "cook_time": 25.0,
    "servings": 8,
    "recipe_category": "Bread",
    "recipe_cuisine": "Italian",
    "ingredients": ["500 g bread flour", " ", "400 ml warm water", "7 g yeast"],
    "instructions": ["Mix.", "Rest overnight.", "Bake at 230C."],
    "notes": ["Use good oil", "Flaky salt on top"],
}


@pytest.mark.asyncio
async def test_well_formed_reply(fake_llm):
    fake_llm.queue("```json\n" + json.dumps(GOOD_REPLY) + "\n```")

    parsed = await parse_recipe(RAW, fake_llm)

    assert parsed.name == "Grandma's Focaccia"
    assert parsed.ingredients == ["500 g bread flour", "400 ml warm water", "7 g yeast"]
    assert len(parsed.instructions) == 3
    assert parsed.prep_time == 20
    assert parsed.cook_time == 25
    assert parsed.servings == "8"
    assert parsed.recipe_category == "bread"
    assert parsed.notes == "Use good oil\nFlaky salt on top"


@pytest.mark.asyncio
async def test_prompt_carries_text_and_low_temperature(fake_llm):
    fake_llm.queue(GOOD_REPLY)
    await parse_recipe(RAW, fake_llm)

    call = fake_llm.calls[0]
    assert RAW in call["prompt"]
    assert call["temperature"] == 0.2
    assert call["max_output_tokens"] == 2000


@pytest.mark.asyncio
async def test_unknown_category_is_dropped(fake_llm):
    fake_llm.queue({**GOOD_REPLY, "recipe_category": "entree-ish"})
    parsed = await parse_recipe(RAW, fake_llm)
    assert parsed.recipe_category is None


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["name", "ingredients", "instructions"])
async def test_missing_required_field_names_it(fake_llm, field):
    reply = dict(GOOD_REPLY)
    reply.pop(field)
    fake_llm.queue(reply)

    with pytest.raises(MalformedResponseError) as exc:
        await parse_recipe(RAW, fake_llm)
    assert "missing required fields" in str(exc.value)
    assert field in str(exc.value)


@pytest.mark.asyncio
async def test_empty_ingredient_list_is_rejected(fake_llm):
    fake_llm.queue({**GOOD_REPLY, "ingredients": ["", "  "]})
    with pytest.raises(MalformedResponseError, match="ingredients"):
        await parse_recipe(RAW, fake_llm)


@pytest.mark.asyncio
async def test_non_json_and_non_object_replies(fake_llm):
    fake_llm.queue("I could not find a recipe in that text.", "[1, 2, 3]")
    with pytest.raises(MalformedResponseError):
        await parse_recipe(RAW, fake_llm)
    with pytest.raises(MalformedResponseError, match="not a JSON object"):
        await parse_recipe(RAW, fake_llm)


@pytest.mark.asyncio
async def test_upstream_failure_propagates(fake_llm):
    fake_llm.queue(UpstreamServiceError("quota exceeded"))
    with pytest.raises(UpstreamServiceError, match="quota"):
        await parse_recipe(RAW, fake_llm)


def test_to_recipe_draft_keeps_raw_text():
    parsed = ParsedRecipe.model_validate(GOOD_REPLY)
    draft = to_recipe_draft(parsed, RAW)
    assert draft.raw_text == RAW
    assert draft.name == parsed.name
    assert draft.is_favorite is False


@pytest.mark.asyncio
async def test_non_finite_minutes_are_dropped(fake_llm):
    body = json.dumps(GOOD_REPLY)[:-1]
    fake_llm.queue(body + ', "prep_time": Infinity, "cook_time": NaN, "total_time": -Infinity}')

    parsed = await parse_recipe(RAW, fake_llm)
    assert parsed.prep_time is None
    assert parsed.cook_time is None
    assert parsed.total_time is None
