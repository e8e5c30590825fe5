"""
core/cuisine_hierarchy.py
────────────────────────────────────────────────────────────────────────
Two-level cuisine grouping used to widen recipe filters.

Selecting a parent group ("Asian") in the UI should match recipes tagged
with the group itself *and* with any of its specific cuisines
("Japanese", "Thai", …).  The table is a strict tree of depth 2: every
child has exactly one parent and no parent is anybody's child.
"""
from __future__ import annotations

from typing import Dict, Iterable, List

from pydantic import BaseModel

CUISINE_HIERARCHY: Dict[str, List[str]] = {
    "Asian": [
        "Japanese",
        "Chinese",
        "Thai",
        "Korean",
        "Vietnamese",
        "Indian",
        "Filipino",
        "Indonesian",
        "Malaysian",
        "Singaporean",
        "Taiwanese",
        "Burmese",
        "Cambodian",
        "Laotian",
    ],
    "European": [
        "Italian",
        "French",
        "Spanish",
        "Greek",
        "German",
        "British",
        "Irish",
        "Portuguese",
        "Dutch",
        "Belgian",
        "Swiss",
        "Austrian",
        "Scandinavian",
        "Swedish",
        "Norwegian",
        "Danish",
        "Polish",
        "Russian",
        "Ukrainian",
    ],
    "Middle Eastern": [
        "Lebanese",
        "Turkish",
        "Israeli",
        "Persian",
        "Egyptian",
        "Syrian",
        "Jordanian",
    ],
    "Latin American": [
        "Mexican",
        "Brazilian",
        "Peruvian",
        "Argentinian",
        "Colombian",
        "Cuban",
        "Puerto Rican",
        "Venezuelan",
        "Chilean",
    ],
    "African": [
        "Ethiopian",
        "Moroccan",
        "South African",
        "Nigerian",
        "Kenyan",
    ],
    "Caribbean": [
        "Jamaican",
        "Haitian",
        "Dominican",
        "Trinidadian",
        "Barbadian",
    ],
}

# reverse index, built once
_PARENT_OF: Dict[str, str] = {
    child: parent
    for parent, children in CUISINE_HIERARCHY.items()
    for child in children
}


class CuisineOption(BaseModel):
    value: str
    label: str
    is_group: bool = False


def cuisines_for_filter(selected: str) -> List[str]:
    """
    Expand a dropdown selection into the set passed to `filter_recipes`.

    A parent returns itself followed by all its children; anything else
    returns just itself.
    """
    children = CUISINE_HIERARCHY.get(selected)
    if children is None:
        return [selected]
    return [selected, *children]


def parent_of(cuisine: str) -> str | None:
    return _PARENT_OF.get(cuisine)


def all_parents() -> List[str]:
    return list(CUISINE_HIERARCHY)


def cuisine_options(present: Iterable[str]) -> List[CuisineOption]:
    """
    Combined dropdown: every group as "X (All)", then the cuisines that
    actually occur in storage, minus those already offered as a group.
    """
    options = [
        CuisineOption(value=p, label=f"{p} (All)", is_group=True)
        for p in all_parents()
    ]
    singles = sorted({c for c in present if c and c not in CUISINE_HIERARCHY})
    options.extend(CuisineOption(value=c, label=c) for c in singles)
    return options
