# api/v1/router.py
from fastapi import APIRouter

from . import ai, meals, recipes

api_router = APIRouter()

api_router.include_router(recipes.router, prefix="/recipes", tags=["Recipes"])
api_router.include_router(meals.router, prefix="/meals", tags=["Meals"])
api_router.include_router(ai.router, tags=["AI"])
