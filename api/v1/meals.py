# api/v1/meals.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from api.v1.deps import get_storage
from api.v1.schemas import Ack, MealCreate, MealItemCreate, MealPatch
from core.models.meal import Meal, MealDraft, MealItem, MealItemDraft, MealWithItems
from services.storage import Storage

router = APIRouter()


async def _require_recipes(storage: Storage, items: list[MealItemCreate]) -> None:
    for item in items:
        if item.item_type == "recipe" and item.recipe_id is not None:
            if await storage.get_recipe_by_id(item.recipe_id) is None:
                raise HTTPException(
                    status_code=404, detail=f"Recipe {item.recipe_id} not found"
                )


@router.get(
    "",
    response_model=list[Meal],
    summary="List all meals, newest first",
)
async def list_meals(storage: Storage = Depends(get_storage)) -> list[Meal]:
    return await storage.get_all_meals()


@router.post(
    "",
    response_model=Ack,
    status_code=status.HTTP_201_CREATED,
    summary="Create a meal, optionally with its items in one go",
)
async def create_meal(
    body: MealCreate,
    storage: Storage = Depends(get_storage),
) -> Ack:
    await _require_recipes(storage, body.items)
    meal_id = await storage.insert_meal(
        MealDraft(name=body.name, servings=body.servings, notes=body.notes),
        [MealItemDraft(**i.model_dump()) for i in body.items],
    )
    return Ack(id=meal_id, message="Meal created successfully")


@router.get(
    "/{meal_id}",
    response_model=MealWithItems,
    summary="A meal with its items in order",
)
async def fetch_meal(
    meal_id: int,
    storage: Storage = Depends(get_storage),
) -> MealWithItems:
    meal = await storage.get_meal_with_items(meal_id)
    if meal is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    return meal


@router.patch("/{meal_id}", response_model=Meal)
async def update_meal(
    meal_id: int,
    body: MealPatch,
    storage: Storage = Depends(get_storage),
) -> Meal:
    changes = body.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    if not await storage.update_meal(meal_id, changes):
        raise HTTPException(status_code=404, detail="Meal not found")
    meal = await storage.get_meal_by_id(meal_id)
    if meal is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    return meal


@router.delete(
    "/{meal_id}",
    response_model=Ack,
    summary="Delete a meal and all of its items",
)
async def delete_meal(
    meal_id: int,
    storage: Storage = Depends(get_storage),
) -> Ack:
    if not await storage.delete_meal(meal_id):
        raise HTTPException(status_code=404, detail="Meal not found")
    return Ack(id=meal_id, message="Meal deleted successfully")


# ───────────────────────── items ────────────────────────────
@router.get("/{meal_id}/items", response_model=list[MealItem])
async def list_meal_items(
    meal_id: int,
    storage: Storage = Depends(get_storage),
) -> list[MealItem]:
    if await storage.get_meal_by_id(meal_id) is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    return await storage.get_meal_items(meal_id)


@router.post(
    "/{meal_id}/items",
    response_model=Ack,
    status_code=status.HTTP_201_CREATED,
    summary="Append (or insert at order_index) one item",
)
async def add_meal_item(
    meal_id: int,
    body: MealItemCreate,
    storage: Storage = Depends(get_storage),
) -> Ack:
    if await storage.get_meal_by_id(meal_id) is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    await _require_recipes(storage, [body])
    item_id = await storage.insert_meal_item(meal_id, MealItemDraft(**body.model_dump()))
    return Ack(id=item_id, message="Item added to meal")


@router.delete("/{meal_id}/items/{item_id}", response_model=Ack)
async def delete_meal_item(
    meal_id: int,
    item_id: int,
    storage: Storage = Depends(get_storage),
) -> Ack:
    if not await storage.delete_meal_item(item_id, meal_id=meal_id):
        raise HTTPException(status_code=404, detail="Item not found")
    return Ack(id=item_id, message="Item removed from meal")
