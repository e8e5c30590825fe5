"""
Extract a recipe from a plain-text file through Gemini and save it.

    python -m scripts.import_recipe path/to/recipe.txt
    python -m scripts.import_recipe path/to/recipe.txt --dry-run   # print only
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from config import configure_logging, get_settings
from core.errors import RecipeBookError
from core.recipe_parser import parse_recipe, to_recipe_draft
from services.db import SqlStorage
from services.gemini import GeminiClient


async def _import(path: Path, dry_run: bool) -> None:
    settings = get_settings()
    raw_text = path.read_text(encoding="utf-8")
    parsed = await parse_recipe(raw_text, GeminiClient.from_settings(settings))

    if dry_run:
        print(parsed.model_dump_json(indent=2))
        return

    storage = SqlStorage.from_settings(settings)
    try:
        await storage.create_schema()
        recipe_id = await storage.insert_recipe(to_recipe_draft(parsed, raw_text))
    finally:
        await storage.close()
    print(f"✓ saved «{parsed.name}» as recipe {recipe_id}")


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("path", type=Path, help="text file holding one recipe")
    parser.add_argument("--dry-run", action="store_true", help="print, do not save")
    args = parser.parse_args()
    configure_logging(get_settings())

    try:
        asyncio.run(_import(args.path, args.dry_run))
    except RecipeBookError as exc:
        print(f"✗ {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
