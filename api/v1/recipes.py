# api/v1/recipes.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from api.v1.deps import get_storage
from api.v1.schemas import Ack, RecipeCreate, RecipePatch
from core.cuisine_hierarchy import (
    CUISINE_HIERARCHY,
    CuisineOption,
    cuisine_options,
    cuisines_for_filter,
)
from core.models.recipe import Recipe, RecipeDraft, RecipeFilter
from services.storage import Storage

router = APIRouter()


# ───────────────────────── list / filter ────────────────────
@router.get("", response_model=list[Recipe])
async def list_recipes(
    category: str | None = None,
    cuisine: str | None = None,
    search: str | None = None,
    favorites: bool = False,
    storage: Storage = Depends(get_storage),
) -> list[Recipe]:
    """
    All recipes, newest first, or only those matching every given filter.

    A parent cuisine ("Asian") also matches each of its specific cuisines.
    With `search`, results come back in relevance order.
    """
    if not (category or cuisine or search or favorites):
        return await storage.get_all_recipes()

    filters = RecipeFilter(
        category=category or None,
        cuisines=cuisines_for_filter(cuisine) if cuisine else None,
        search=search or None,
        favorites=favorites,
    )
    return await storage.filter_recipes(filters)


# ───────────────────────── vocabularies ─────────────────────
@router.get("/categories", response_model=list[str])
async def list_categories(storage: Storage = Depends(get_storage)) -> list[str]:
    return await storage.get_categories()


@router.get("/cuisines", response_model=list[str])
async def list_cuisines(storage: Storage = Depends(get_storage)) -> list[str]:
    return await storage.get_cuisines()


@router.get("/cuisine-options", response_model=list[CuisineOption])
async def list_cuisine_options(
    storage: Storage = Depends(get_storage),
) -> list[CuisineOption]:
    return cuisine_options(await storage.get_cuisines())


@router.get("/hierarchy", response_model=dict[str, list[str]])
async def cuisine_hierarchy() -> dict[str, list[str]]:
    return CUISINE_HIERARCHY


# ───────────────────────── single recipe ────────────────────
@router.get("/{recipe_id}", response_model=Recipe)
async def fetch_recipe(
    recipe_id: int,
    storage: Storage = Depends(get_storage),
) -> Recipe:
    recipe = await storage.get_recipe_by_id(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipe


@router.post("", response_model=Ack, status_code=status.HTTP_201_CREATED)
async def create_recipe(
    body: RecipeCreate,
    storage: Storage = Depends(get_storage),
) -> Ack:
    recipe_id = await storage.insert_recipe(RecipeDraft(**body.model_dump()))
    return Ack(id=recipe_id, message="Recipe created successfully")


@router.patch("/{recipe_id}", response_model=Recipe)
async def update_recipe(
    recipe_id: int,
    body: RecipePatch,
    storage: Storage = Depends(get_storage),
) -> Recipe:
    changes = body.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")

    if not await storage.update_recipe(recipe_id, changes):
        raise HTTPException(status_code=404, detail="Recipe not found")
    recipe = await storage.get_recipe_by_id(recipe_id)
    if recipe is None:  # deleted in between
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipe


@router.delete("/{recipe_id}", response_model=Ack)
async def delete_recipe(
    recipe_id: int,
    storage: Storage = Depends(get_storage),
) -> Ack:
    if not await storage.delete_recipe(recipe_id):
        raise HTTPException(status_code=404, detail="Recipe not found")
    return Ack(id=recipe_id, message="Recipe deleted successfully")
