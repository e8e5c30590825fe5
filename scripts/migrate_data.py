#!/usr/bin/env python3
"""
Copy every recipe, meal and meal item from a local SQLite file into the
configured database (normally the hosted PostgreSQL one).

    python -m scripts.migrate_data --source-sqlite recipes.db

Target ids are assigned fresh; meal items are re-pointed at the new
recipe ids.  Rows are copied oldest first so listing order survives.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from config import Settings, configure_logging, get_settings
from core.models.meal import MealDraft, MealItemDraft
from core.models.recipe import RecipeDraft
from services.db import SqlStorage

_LOG = logging.getLogger(__name__)


async def migrate(source: SqlStorage, target: SqlStorage) -> tuple[int, int]:
    """Returns (recipes copied, meals copied)."""
    await target.create_schema()

    id_map: dict[int, int] = {}
    for recipe in reversed(await source.get_all_recipes()):
        draft = RecipeDraft.model_validate(recipe.model_dump(exclude={"id", "created_at", "updated_at"}))
        id_map[recipe.id] = await target.insert_recipe(draft)
        print(f"✓ recipe «{recipe.name}» ({recipe.id} → {id_map[recipe.id]})")

    meals = list(reversed(await source.get_all_meals()))
    for meal in meals:
        items = [
            MealItemDraft(
                item_type=i.item_type,
                recipe_id=id_map.get(i.recipe_id) if i.recipe_id is not None else None,
                simple_item_name=i.simple_item_name,
                simple_item_category=i.simple_item_category,
                order_index=i.order_index,
            )
            for i in await source.get_meal_items(meal.id)
        ]
        new_id = await target.insert_meal(
            MealDraft(name=meal.name, servings=meal.servings, notes=meal.notes), items
        )
        print(f"✓ meal «{meal.name}» ({meal.id} → {new_id}, {len(items)} items)")

    return len(id_map), len(meals)


async def _run(source_path: Path) -> None:
    settings = get_settings()
    if not settings.database_url:
        raise SystemExit("DATABASE_URL is not set; nothing to migrate into")

    source = SqlStorage.from_settings(Settings(database_url=None, sqlite_path=source_path))
    target = SqlStorage.from_settings(settings)
    try:
        recipes, meals = await migrate(source, target)
    finally:
        await source.close()
        await target.close()
    print(f"\nMigration complete: {recipes} recipes, {meals} meals")


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--source-sqlite", type=Path, required=True, help="local SQLite file")
    args = parser.parse_args()
    configure_logging(get_settings())

    if not args.source_sqlite.exists():
        print(f"Error: {args.source_sqlite} does not exist")
        sys.exit(1)
    asyncio.run(_run(args.source_sqlite))


if __name__ == "__main__":
    main()
