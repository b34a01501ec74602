from typing import List
from pydantic import BaseModel, Field, field_validator
from .base import BaseEntity


class ShoppingItem(BaseEntity):
    """Single shopping list entry"""
    text: str = Field(..., min_length=1, description="Ingredient description as shown to the user")
    completed: bool = Field(False, description="Whether the item has been shopped")

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440002",
                "text": "500g Nudeln",
                "completed": False
            }
        }
    }

    def text_key(self) -> str:
        """Case-insensitive identity used for de-duplication"""
        return text_key(self.text)


def text_key(text: str) -> str:
    return text.strip().lower()


class ShoppingItemsCreate(BaseModel):
    """Model for adding ingredient lines to the shopping list"""
    items: List[str] = Field(..., description="Ingredient lines to add")

    model_config = {
        "json_schema_extra": {
            "example": {
                "items": ["500g Nudeln", "2 Dosen Tomaten"]
            }
        }
    }

    @field_validator("items")
    @classmethod
    def drop_blank_items(cls, items: List[str]) -> List[str]:
        return [item.strip() for item in items if item and item.strip()]


class ShoppingListResponse(BaseModel):
    """Shopping list with the items added by the last request"""
    items: List[ShoppingItem] = Field(default_factory=list, description="Full shopping list")
    added: List[ShoppingItem] = Field(default_factory=list, description="Items added by this request")
