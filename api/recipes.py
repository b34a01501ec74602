from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from core.scaler import scale_recipe
from exceptions import RecipeNotFoundError
from models.recipe import Recipe, RecipeUpdate, SaveResult, SaveStatus
from storage.local_storage import LocalStorage
from .dependencies import get_storage

router = APIRouter()

CONFLICT_MESSAGE = "Ein Rezept mit diesem Namen existiert bereits. Überschreiben?"


def _conflict_response(result: SaveResult) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "detail": CONFLICT_MESSAGE,
            "existing": result.existing.to_storage() if result.existing else None
        }
    )


@router.get("/", response_model=List[Recipe])
async def get_recipes(
    q: Optional[str] = Query(None, description="Filter by name or ingredient"),
    storage: LocalStorage = Depends(get_storage)
):
    """Get saved recipes, optionally filtered"""
    return storage.search_recipes(q)


@router.post("/", response_model=Recipe, status_code=status.HTTP_201_CREATED)
async def save_recipe(recipe: Recipe, storage: LocalStorage = Depends(get_storage)):
    """Save a new recipe; a name that is already taken answers 409 with the stored recipe"""
    result = storage.save_recipe(recipe)
    if result.is_conflict:
        return _conflict_response(result)
    return result.recipe


@router.post("/confirm", response_model=Recipe)
async def confirm_save_recipe(recipe: Recipe, storage: LocalStorage = Depends(get_storage)):
    """Save a recipe, overwriting a same-named one"""
    return storage.confirm_save_recipe(recipe).recipe


@router.get("/{recipe_name}", response_model=Recipe)
async def get_recipe(recipe_name: str, storage: LocalStorage = Depends(get_storage)):
    """Get a saved recipe by name"""
    recipe = storage.get_recipe_by_name(recipe_name)
    if not recipe:
        raise RecipeNotFoundError(recipe_name)
    return recipe


@router.get("/{recipe_name}/scaled", response_model=Recipe)
async def get_scaled_recipe(
    recipe_name: str,
    servings: int = Query(..., description="Servings to scale to"),
    storage: LocalStorage = Depends(get_storage)
):
    """Get a saved recipe scaled to another serving count; nothing is stored"""
    recipe = storage.get_recipe_by_name(recipe_name)
    if not recipe:
        raise RecipeNotFoundError(recipe_name)
    return scale_recipe(recipe, servings)


@router.put("/{recipe_name}", response_model=Recipe)
async def update_recipe(recipe_name: str, recipe_update: RecipeUpdate, storage: LocalStorage = Depends(get_storage)):
    """Edit a saved recipe, possibly renaming it"""
    existing = storage.get_recipe_by_name(recipe_name)
    if not existing:
        raise RecipeNotFoundError(recipe_name)

    updated = Recipe(
        recipe_name=recipe_update.recipe_name,
        description=recipe_update.description,
        ingredients=recipe_update.ingredients,
        instructions=recipe_update.instructions,
        servings=recipe_update.servings or existing.servings,
        difficulty=existing.difficulty,
        image_url=recipe_update.image_url if recipe_update.image_url is not None else existing.image_url,
        nutrition=existing.nutrition
    )
    result = storage.update_recipe(recipe_name, updated)
    if result.status == SaveStatus.not_found:
        raise RecipeNotFoundError(recipe_name)
    if result.is_conflict:
        return _conflict_response(result)
    return result.recipe


@router.delete("/{recipe_name}")
async def delete_recipe(recipe_name: str, storage: LocalStorage = Depends(get_storage)):
    """Delete a recipe; unknown names are ignored"""
    deleted = storage.delete_recipe(recipe_name)
    if not deleted:
        return {"message": f"Recipe {recipe_name} was not saved", "deleted": False}
    return {"message": f"Recipe {recipe_name} deleted successfully", "deleted": True}
