from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from models.shopping_list import ShoppingItem, ShoppingItemsCreate, ShoppingListResponse
from storage.local_storage import LocalStorage
from .dependencies import get_storage

router = APIRouter()


@router.get("/", response_model=List[ShoppingItem])
async def get_shopping_list(storage: LocalStorage = Depends(get_storage)):
    """Get the current shopping list"""
    return storage.load_shopping_list()


@router.post("/", response_model=ShoppingListResponse, status_code=status.HTTP_201_CREATED)
async def add_items(items_data: ShoppingItemsCreate, storage: LocalStorage = Depends(get_storage)):
    """Add ingredient lines; lines already on the list are skipped"""
    added = storage.add_to_shopping_list(items_data.items)
    return ShoppingListResponse(items=storage.load_shopping_list(), added=added)


@router.post("/{item_id}/toggle", response_model=ShoppingItem)
async def toggle_item(item_id: str, storage: LocalStorage = Depends(get_storage)):
    """Mark an item as shopped or not shopped"""
    item = storage.toggle_shopping_item(item_id)
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Item with ID {item_id} not found"
        )
    return item


@router.delete("/{item_id}")
async def remove_item(item_id: str, storage: LocalStorage = Depends(get_storage)):
    """Remove an item from the shopping list"""
    if not storage.remove_shopping_item(item_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Item with ID {item_id} not found"
        )
    return {"message": f"Item {item_id} removed from shopping list"}


@router.delete("/")
async def clear_shopping_list(storage: LocalStorage = Depends(get_storage)):
    """Clear the entire shopping list"""
    storage.clear_shopping_list()
    return {"message": "Shopping list cleared successfully"}
