from typing import Optional

from fastapi import APIRouter, Depends

from models.draft import Draft
from storage.local_storage import LocalStorage
from .dependencies import get_storage

router = APIRouter()


@router.get("/", response_model=Optional[Draft])
async def get_draft(storage: LocalStorage = Depends(get_storage)):
    """Get the stored draft, or null"""
    return storage.load_draft()


@router.put("/")
async def save_draft(draft: Draft, storage: LocalStorage = Depends(get_storage)):
    """Store the form state; an empty prompt removes the draft"""
    saved = storage.save_draft(draft)
    return {"saved": saved, "draft": draft if saved else None}


@router.delete("/")
async def dismiss_draft(storage: LocalStorage = Depends(get_storage)):
    """Discard the stored draft"""
    storage.clear_draft()
    return {"message": "Draft dismissed"}
