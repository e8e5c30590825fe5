import pytest

from core.dish_suggester import (
    DishSuggestion,
    MealContext,
    build_suggestion_prompt,
    suggest_dishes,
)
from core.errors import MalformedResponseError

CONTEXT = MealContext.model_validate(
    {
        "currentItems": [
            {"type": "recipe", "name": "Beef Stew", "category": "soup", "cuisine": "Irish"},
            {"type": "simple", "name": "Butter", "category": "other"},
        ],
        "servings": "4",
    }
)


def test_prompt_lists_items_and_vocabulary():
    prompt = build_suggestion_prompt(CONTEXT, ["bread", "soup"], ["Irish"])
    assert "- Beef Stew (soup, Irish)" in prompt
    assert "- Butter (simple item, other)" in prompt
    assert "bread, soup" in prompt
    assert "Servings: 4" in prompt
    assert "tagged as one of: carb, protein, veggie, other" in prompt


def test_empty_meal_prompt():
    prompt = build_suggestion_prompt(MealContext(), [], [])
    assert "(empty meal - suggest a complete meal)" in prompt
    assert "categories in database: none" in prompt


@pytest.mark.asyncio
async def test_object_reply(fake_llm):
    fake_llm.queue(
        {
            "suggestions": [
                {
                    "name": "Soda Bread",
                    "rationale": "Something to mop up the stew",
                    "category": "bread",
                    "searchQuery": "soda bread",
                },
                {"name": "Green Salad", "category": "salad"},
            ]
        }
    )
    got = await suggest_dishes(CONTEXT, fake_llm, ["bread"], ["Irish"])

    assert [s.name for s in got] == ["Soda Bread", "Green Salad"]
    assert got[0].search_query == "soda bread"
    assert got[1].search_query == "green salad"
    assert fake_llm.calls[0]["temperature"] == 0.7


@pytest.mark.asyncio
async def test_bare_array_reply_for_empty_meal(fake_llm):
    fake_llm.queue('```json\n[{"name": "Rice", "searchQuery": "rice"}]\n```')
    got = await suggest_dishes(MealContext(), fake_llm, [], [])
    assert got == [DishSuggestion(name="Rice", search_query="rice")]


@pytest.mark.asyncio
async def test_reply_without_suggestions(fake_llm):
    fake_llm.queue({"ideas": []})
    with pytest.raises(MalformedResponseError):
        await suggest_dishes(CONTEXT, fake_llm, [], [])


def test_suggestion_serialises_camel_case():
    s = DishSuggestion(name="Naan")
    assert s.model_dump(by_alias=True)["searchQuery"] == "naan"
