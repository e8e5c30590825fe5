"""
Seed a few demo recipes so the catalog is not empty on first run.

Usage
-----

    # default hard-coded handful of recipes
    python -m scripts.seed_recipes

    # custom list (same field names as the API) in a JSON file
    python -m scripts.seed_recipes --file path/to/recipes.json
"""
from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
from typing import Any, List

from config import configure_logging, get_settings
from core.models.recipe import RecipeDraft
from services.db import SqlStorage

# ────────────────────────────────────────────────────────────────────
_DEFAULT_RECIPES: List[dict[str, Any]] = [
    {
        "name": "Tabbouleh",
        "recipe_category": "salad",
        "recipe_cuisine": "Lebanese",
        "servings": "4",
        "prep_time": 25,
        "ingredients": [
            "1/2 cup fine bulgur",
            "2 bunches flat-leaf parsley, chopped",
            "3 tomatoes, diced",
            "1 lemon, juiced",
            "1/4 cup olive oil",
        ],
        "instructions": [
            "Soak the bulgur in boiling water for 15 minutes, then drain.",
            "Toss with parsley, tomato, lemon juice and olive oil.",
        ],
    },
    {
        "name": "Miso Soup",
        "recipe_category": "soup",
        "recipe_cuisine": "Japanese",
        "servings": "2",
        "cook_time": 10,
        "ingredients": ["3 cups dashi", "3 tbsp white miso", "1/2 block silken tofu", "2 scallions"],
        "instructions": [
            "Warm the dashi without boiling.",
            "Whisk in the miso, add cubed tofu and sliced scallions.",
        ],
    },
    {
        "name": "Focaccia",
        "recipe_category": "bread",
        "recipe_cuisine": "Italian",
        "servings": "8",
        "prep_time": 20,
        "cook_time": 25,
        "ingredients": ["500 g bread flour", "400 ml warm water", "7 g dry yeast", "10 g salt", "olive oil"],
        "instructions": [
            "Mix, then rest the dough overnight in the fridge.",
            "Stretch into an oiled pan, dimple, and bake at 230 °C.",
        ],
    },
    {
        "name": "Pad Krapow",
        "recipe_category": "main",
        "recipe_cuisine": "Thai",
        "servings": "2",
        "total_time": 20,
        "ingredients": ["300 g ground pork", "4 cloves garlic", "2 bird's eye chilies", "1 cup holy basil", "2 tbsp oyster sauce"],
        "instructions": [
            "Pound garlic and chilies.",
            "Stir-fry with the pork, season, and fold in the basil.",
        ],
    },
]


async def _seed(recipes: list[dict[str, Any]]) -> None:
    storage = SqlStorage.from_settings(get_settings())
    try:
        await storage.create_schema()
        for r in recipes:
            await storage.insert_recipe(RecipeDraft.model_validate(r))
    finally:
        await storage.close()
    print(f"✓ inserted {len(recipes)} recipes")


def _load_json(path: Path) -> list[dict[str, Any]]:
    data = json.loads(path.read_text())
    if not isinstance(data, list):
        raise ValueError("JSON file must contain a list of recipe dictionaries")
    return data


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--file",
        type=Path,
        help="optional JSON file with recipes to seed (overrides defaults)",
    )
    args = parser.parse_args()
    configure_logging(get_settings())

    recipes = _load_json(args.file) if args.file else _DEFAULT_RECIPES
    asyncio.run(_seed(recipes))


if __name__ == "__main__":
    main()
