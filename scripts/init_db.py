"""
Create the tables (and the full-text search index) for whichever backend
the environment points at.  Safe to re-run.

    python -m scripts.init_db
"""
from __future__ import annotations

import argparse
import asyncio
import logging

from config import configure_logging, get_settings
from services.db import SqlStorage

_LOG = logging.getLogger(__name__)


async def _init() -> None:
    settings = get_settings()
    storage = SqlStorage.from_settings(settings)
    try:
        await storage.create_schema()
    finally:
        await storage.close()
    print(f"✓ schema ready on {storage.engine.dialect.name}")


def main() -> None:
    argparse.ArgumentParser(description=__doc__).parse_args()
    configure_logging(get_settings())
    asyncio.run(_init())


if __name__ == "__main__":
    main()
