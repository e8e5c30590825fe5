"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 setup (SQLite file locally, PostgreSQL when hosted)
* Models for the three tables: recipes, meals, meal_items
* `SqlStorage` – the `services.storage.Storage` implementation
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    delete,
    event,
    false,
    func,
    or_,
    select,
    update,
)
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from config import Settings
from core.models.meal import (
    Meal,
    MealDraft,
    MealItem,
    MealItemDraft,
    MealItemRecipe,
)
from core.models.recipe import Recipe, RecipeDraft, RecipeFilter
from services.search import SearchBackend, backend_for, search_terms
from services.storage import Storage

_LOG = logging.getLogger(__name__)

# columns stored as JSON-encoded ordered lists
_LIST_COLUMNS = ("ingredients", "instructions")

# the only columns a recipe update may write
_RECIPE_COLUMNS = frozenset(RecipeDraft.model_fields)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ───────── declarative base ──────────────────────────────────────────
Base = declarative_base(cls=AsyncAttrs)


class RecipeRow(Base):
    __tablename__ = "recipes"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text)
    author: Mapped[str | None] = mapped_column(String)
    source_url: Mapped[str | None] = mapped_column(Text)
    image_url: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)
    prep_time: Mapped[int | None] = mapped_column(Integer)
    cook_time: Mapped[int | None] = mapped_column(Integer)
    total_time: Mapped[int | None] = mapped_column(Integer)
    servings: Mapped[str | None] = mapped_column(String)
    recipe_category: Mapped[str | None] = mapped_column(String, index=True)
    recipe_cuisine: Mapped[str | None] = mapped_column(String, index=True)
    ingredients: Mapped[str] = mapped_column(Text)    # serialized list
    instructions: Mapped[str] = mapped_column(Text)   # serialized list
    is_favorite: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false())
    raw_text: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class MealRow(Base):
    __tablename__ = "meals"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String)
    servings: Mapped[str | None] = mapped_column(String)
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class MealItemRow(Base):
    __tablename__ = "meal_items"

    id: Mapped[int] = mapped_column(primary_key=True)
    meal_id: Mapped[int] = mapped_column(
        ForeignKey("meals.id", ondelete="CASCADE"), index=True
    )
    # deleting a recipe keeps the item and nulls the reference
    recipe_id: Mapped[int | None] = mapped_column(
        ForeignKey("recipes.id", ondelete="SET NULL"), index=True
    )
    item_type: Mapped[str] = mapped_column(String(16))   # "recipe" | "simple"
    simple_item_name: Mapped[str | None] = mapped_column(String)
    simple_item_category: Mapped[str | None] = mapped_column(String)
    order_index: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


# ───────── connection helper ────────────────────────────────────────
def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    url = settings.sqlalchemy_url
    if url.startswith("sqlite"):
        engine = create_async_engine(url)

        @event.listens_for(engine.sync_engine, "connect")
        def _sqlite_pragmas(dbapi_conn, _record):  # pragma: no cover - driver hook
            # cascades are declared in the schema but SQLite ignores them by default
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        _LOG.info("Using local SQLite database at %s", settings.sqlite_path)
        return engine

    _LOG.info("Using hosted database (%s)", url.split("://", 1)[0])
    return create_async_engine(url, pool_pre_ping=True)


# ───────── row ⇄ model helpers ───────────────────────────────────────
def _load_list(raw: str | None) -> list[str]:
    return json.loads(raw) if raw else []


def _encode(changes: Mapping[str, Any]) -> dict[str, Any]:
    values = dict(changes)
    for key in _LIST_COLUMNS:
        if key in values and values[key] is not None:
            values[key] = json.dumps(list(values[key]), ensure_ascii=False)
    return values


async def _reencode_lists(conn: AsyncConnection) -> None:
    """Rewrite list columns saved with ASCII escapes so search sees real text."""
    cols = [getattr(RecipeRow, key) for key in _LIST_COLUMNS]
    stmt = select(RecipeRow.id, *cols).where(
        or_(*(c.contains("\\u", autoescape=True) for c in cols))
    )
    rows = (await conn.execute(stmt)).all()
    for row in rows:
        fixed = {
            key: json.dumps(_load_list(raw), ensure_ascii=False)
            for key, raw in zip(_LIST_COLUMNS, row[1:])
            if raw
        }
        await conn.execute(update(RecipeRow).where(RecipeRow.id == row.id).values(**fixed))
    if rows:
        _LOG.info("Re-encoded list columns of %d recipe(s)", len(rows))


def _to_recipe(row: RecipeRow) -> Recipe:
    return Recipe(
        id=row.id,
        name=row.name,
        description=row.description,
        author=row.author,
        source_url=row.source_url,
        image_url=row.image_url,
        notes=row.notes,
        prep_time=row.prep_time,
        cook_time=row.cook_time,
        total_time=row.total_time,
        servings=row.servings,
        recipe_category=row.recipe_category,
        recipe_cuisine=row.recipe_cuisine,
        ingredients=_load_list(row.ingredients),
        instructions=_load_list(row.instructions),
        is_favorite=bool(row.is_favorite),
        raw_text=row.raw_text,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_meal(row: MealRow) -> Meal:
    return Meal(
        id=row.id,
        name=row.name,
        servings=row.servings,
        notes=row.notes,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_meal_item(item: MealItemRow, recipe: RecipeRow | None) -> MealItem:
    snapshot = None
    if item.item_type == "recipe" and recipe is not None:
        snapshot = MealItemRecipe(
            id=recipe.id,
            name=recipe.name,
            description=recipe.description,
            ingredients=_load_list(recipe.ingredients),
            instructions=_load_list(recipe.instructions),
            recipe_category=recipe.recipe_category,
            recipe_cuisine=recipe.recipe_cuisine,
            prep_time=recipe.prep_time,
            cook_time=recipe.cook_time,
            servings=recipe.servings,
        )
    return MealItem(
        id=item.id,
        meal_id=item.meal_id,
        item_type=item.item_type,  # type: ignore[arg-type]
        recipe_id=item.recipe_id,
        simple_item_name=item.simple_item_name,
        simple_item_category=item.simple_item_category,
        order_index=item.order_index,
        created_at=item.created_at,
        recipe=snapshot,
    )


def _item_row(meal_id: int, item: MealItemDraft, order_index: int) -> MealItemRow:
    return MealItemRow(
        meal_id=meal_id,
        item_type=item.item_type,
        recipe_id=item.recipe_id if item.item_type == "recipe" else None,
        simple_item_name=item.simple_item_name if item.item_type == "simple" else None,
        simple_item_category=item.simple_item_category if item.item_type == "simple" else None,
        order_index=order_index,
    )


# ───────── storage implementation ───────────────────────────────────
class SqlStorage(Storage):
    def __init__(self, engine: AsyncEngine, search: SearchBackend | None = None) -> None:
        self._engine = engine
        self._search = search or backend_for(engine.dialect.name)
        self._sessions = async_sessionmaker(engine, expire_on_commit=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SqlStorage":
        return cls(create_engine_from_settings(settings))

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    def session(self) -> AsyncSession:
        return self._sessions()

    # ───────── lifecycle ─────────────────────────────────────────────
    async def create_schema(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            await _reencode_lists(conn)
            for stmt in self._search.ddl:
                await conn.exec_driver_sql(stmt)

    async def close(self) -> None:
        await self._engine.dispose()

    # ───────── recipes ───────────────────────────────────────────────
    async def insert_recipe(self, recipe: RecipeDraft) -> int:
        row = RecipeRow(**_encode(recipe.model_dump()))
        async with self.session() as db:
            db.add(row)
            await db.commit()
        return row.id

    async def get_all_recipes(self) -> list[Recipe]:
        stmt = select(RecipeRow).order_by(RecipeRow.created_at.desc(), RecipeRow.id.desc())
        async with self.session() as db:
            rows = (await db.execute(stmt)).scalars().all()
        return [_to_recipe(r) for r in rows]

    async def get_recipe_by_id(self, recipe_id: int) -> Recipe | None:
        async with self.session() as db:
            row = await db.get(RecipeRow, recipe_id)
        return _to_recipe(row) if row else None

    async def filter_recipes(self, filters: RecipeFilter) -> list[Recipe]:
        stmt = select(RecipeRow)
        if filters.favorites:
            stmt = stmt.where(RecipeRow.is_favorite.is_(True))
        if filters.category:
            stmt = stmt.where(RecipeRow.recipe_category == filters.category)
        if filters.cuisines:
            stmt = stmt.where(RecipeRow.recipe_cuisine.in_(filters.cuisines))
        elif filters.cuisine:
            stmt = stmt.where(RecipeRow.recipe_cuisine == filters.cuisine)

        terms = search_terms(filters.search)
        if terms:
            stmt = self._search.apply(stmt, terms, RecipeRow)
        else:
            stmt = stmt.order_by(RecipeRow.created_at.desc(), RecipeRow.id.desc())

        async with self.session() as db:
            rows = (await db.execute(stmt)).scalars().all()
        return [_to_recipe(r) for r in rows]

    async def update_recipe(self, recipe_id: int, changes: Mapping[str, Any]) -> bool:
        values = _encode({k: v for k, v in changes.items() if k in _RECIPE_COLUMNS})
        if not values:
            return False
        values["updated_at"] = _utcnow()
        stmt = update(RecipeRow).where(RecipeRow.id == recipe_id).values(**values)
        async with self.session() as db:
            res = await db.execute(stmt)
            await db.commit()
        return res.rowcount > 0

    async def delete_recipe(self, recipe_id: int) -> bool:
        async with self.session() as db:
            res = await db.execute(delete(RecipeRow).where(RecipeRow.id == recipe_id))
            await db.commit()
        return res.rowcount > 0

    async def _distinct(self, col) -> list[str]:
        stmt = select(col).where(col.is_not(None)).distinct().order_by(col)
        async with self.session() as db:
            return list((await db.execute(stmt)).scalars().all())

    async def get_categories(self) -> list[str]:
        return await self._distinct(RecipeRow.recipe_category)

    async def get_cuisines(self) -> list[str]:
        return await self._distinct(RecipeRow.recipe_cuisine)

    # ───────── meals ─────────────────────────────────────────────────
    async def insert_meal(
        self, meal: MealDraft, items: Sequence[MealItemDraft] = ()
    ) -> int:
        row = MealRow(**meal.model_dump())
        async with self.session() as db:
            db.add(row)
            await db.flush()
            for position, item in enumerate(items):
                index = item.order_index if item.order_index is not None else position
                db.add(_item_row(row.id, item, index))
            await db.commit()
        return row.id

    async def get_all_meals(self) -> list[Meal]:
        stmt = select(MealRow).order_by(MealRow.created_at.desc(), MealRow.id.desc())
        async with self.session() as db:
            rows = (await db.execute(stmt)).scalars().all()
        return [_to_meal(r) for r in rows]

    async def get_meal_by_id(self, meal_id: int) -> Meal | None:
        async with self.session() as db:
            row = await db.get(MealRow, meal_id)
        return _to_meal(row) if row else None

    async def update_meal(self, meal_id: int, changes: Mapping[str, Any]) -> bool:
        values = {k: v for k, v in changes.items() if k in ("name", "servings", "notes")}
        if not values:
            return False
        values["updated_at"] = _utcnow()
        stmt = update(MealRow).where(MealRow.id == meal_id).values(**values)
        async with self.session() as db:
            res = await db.execute(stmt)
            await db.commit()
        return res.rowcount > 0

    async def delete_meal(self, meal_id: int) -> bool:
        # meal_items go with it via ON DELETE CASCADE
        async with self.session() as db:
            res = await db.execute(delete(MealRow).where(MealRow.id == meal_id))
            await db.commit()
        return res.rowcount > 0

    # ───────── meal items ────────────────────────────────────────────
    async def insert_meal_item(self, meal_id: int, item: MealItemDraft) -> int:
        async with self.session() as db:
            index = item.order_index
            if index is None:
                index = await db.scalar(
                    select(func.coalesce(func.max(MealItemRow.order_index), -1) + 1)
                    .where(MealItemRow.meal_id == meal_id)
                )
            row = _item_row(meal_id, item, index)
            db.add(row)
            await db.commit()
        return row.id

    async def get_meal_items(self, meal_id: int) -> list[MealItem]:
        stmt = (
            select(MealItemRow, RecipeRow)
            .outerjoin(RecipeRow, MealItemRow.recipe_id == RecipeRow.id)
            .where(MealItemRow.meal_id == meal_id)
            .order_by(MealItemRow.order_index.asc(), MealItemRow.id.asc())
        )
        async with self.session() as db:
            rows = (await db.execute(stmt)).all()
        return [_to_meal_item(item, recipe) for item, recipe in rows]

    async def delete_meal_item(self, item_id: int, meal_id: int | None = None) -> bool:
        stmt = delete(MealItemRow).where(MealItemRow.id == item_id)
        if meal_id is not None:
            stmt = stmt.where(MealItemRow.meal_id == meal_id)
        async with self.session() as db:
            res = await db.execute(stmt)
            await db.commit()
        return res.rowcount > 0
