"""
services/search.py
────────────────────────────────────────────────────────────────────────
Prefix-token full-text search over recipe name / ingredients / instructions.

Semantics are the same on every backend:

* the query is split into words (runs of letters and digits, lower-cased)
* every word is a prefix – "bulg" matches "bulgur"
* every word must match somewhere in the document
* results are ordered by the engine's relevance rank

Only the rendering differs: SQLite uses an FTS5 shadow table kept in
sync by triggers, PostgreSQL a GIN expression index over `to_tsvector`.
"""
from __future__ import annotations

import re
from typing import List

from sqlalchemy import Select, column, func, literal_column, table

_WORD = re.compile(r"[^\W_]+", re.UNICODE)


def search_terms(query: str | None) -> List[str]:
    if not query:
        return []
    return [w.lower() for w in _WORD.findall(query)]


class SearchBackend:
    """Base: DDL to run after `create_all`, and a filter+order for selects."""

    ddl: tuple[str, ...] = ()

    def apply(self, stmt: Select, terms: List[str], recipe_table) -> Select:
        raise NotImplementedError


# ───────── SQLite / FTS5 ─────────────────────────────────────────────
_FTS = table("recipes_fts", column("rowid"), column("rank"))

_FTS_COLUMNS = "name, ingredients, instructions"


class Fts5Search(SearchBackend):
    ddl = (
        "CREATE VIRTUAL TABLE IF NOT EXISTS recipes_fts USING fts5("
        f"{_FTS_COLUMNS}, content='recipes', content_rowid='id')",
        "CREATE TRIGGER IF NOT EXISTS recipes_fts_ai AFTER INSERT ON recipes BEGIN "
        f"INSERT INTO recipes_fts(rowid, {_FTS_COLUMNS}) "
        "VALUES (new.id, new.name, new.ingredients, new.instructions); END",
        "CREATE TRIGGER IF NOT EXISTS recipes_fts_ad AFTER DELETE ON recipes BEGIN "
        f"INSERT INTO recipes_fts(recipes_fts, rowid, {_FTS_COLUMNS}) "
        "VALUES ('delete', old.id, old.name, old.ingredients, old.instructions); END",
        "CREATE TRIGGER IF NOT EXISTS recipes_fts_au AFTER UPDATE ON recipes BEGIN "
        f"INSERT INTO recipes_fts(recipes_fts, rowid, {_FTS_COLUMNS}) "
        "VALUES ('delete', old.id, old.name, old.ingredients, old.instructions); "
        f"INSERT INTO recipes_fts(rowid, {_FTS_COLUMNS}) "
        "VALUES (new.id, new.name, new.ingredients, new.instructions); END",
        # picks up rows written before the triggers existed
        "INSERT INTO recipes_fts(recipes_fts) VALUES ('rebuild')",
    )

    @staticmethod
    def match_expression(terms: List[str]) -> str:
        # terms are alphanumeric only, so quoting cannot be broken out of
        return " ".join(f'"{t}"*' for t in terms)

    def apply(self, stmt: Select, terms: List[str], recipe_table) -> Select:
        return (
            stmt.join(_FTS, _FTS.c.rowid == recipe_table.id)
            .where(literal_column("recipes_fts").op("MATCH")(self.match_expression(terms)))
            .order_by(_FTS.c.rank, recipe_table.id.desc())
        )


# ───────── PostgreSQL / tsvector ─────────────────────────────────────
# Must stay textually equivalent to the indexed expression below.
_PG_DOCUMENT = (
    "to_tsvector('simple', coalesce(recipes.name, '') || ' ' || "
    "coalesce(recipes.ingredients, '') || ' ' || coalesce(recipes.instructions, ''))"
)


class TsVectorSearch(SearchBackend):
    ddl = (
        "CREATE INDEX IF NOT EXISTS recipes_search_idx ON recipes USING GIN ("
        "to_tsvector('simple', coalesce(name, '') || ' ' || "
        "coalesce(ingredients, '') || ' ' || coalesce(instructions, '')))",
    )

    @staticmethod
    def tsquery(terms: List[str]) -> str:
        return " & ".join(f"{t}:*" for t in terms)

    def apply(self, stmt: Select, terms: List[str], recipe_table) -> Select:
        document = literal_column(_PG_DOCUMENT)
        query = func.to_tsquery(literal_column("'simple'"), self.tsquery(terms))
        return stmt.where(document.op("@@")(query)).order_by(
            func.ts_rank(document, query).desc(), recipe_table.id.desc()
        )


def backend_for(dialect_name: str) -> SearchBackend:
    if dialect_name == "sqlite":
        return Fts5Search()
    if dialect_name == "postgresql":
        return TsVectorSearch()
    raise ValueError(f"No text-search support for dialect {dialect_name!r}")
