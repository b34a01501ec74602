from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from .base import BaseEntity

DEFAULT_RECIPE_SERVINGS = 4  # backfill for recipes stored without servings


class Nutrition(BaseModel):
    """Per-serving nutrition estimate, already formatted by the model"""
    calories: str = Field(..., description="Energy, e.g. '650 kcal'")
    protein: str = Field(..., description="Protein, e.g. '25 g'")
    carbs: str = Field(..., description="Carbohydrates, e.g. '80 g'")
    fat: str = Field(..., description="Fat, e.g. '20 g'")


class Recipe(BaseEntity):
    """Recipe model matching the persisted savedRecipes entries"""
    id: Optional[str] = Field(None, description="Assigned at first save, stable thereafter")
    recipe_name: str = Field(..., min_length=1, description="Name of the recipe", alias="recipeName")
    description: str = Field("", description="Short description of the dish")
    ingredients: List[str] = Field(default_factory=list, description="Ingredient lines, scaled for servings")
    instructions: List[str] = Field(default_factory=list, description="Cooking instructions")
    servings: int = Field(DEFAULT_RECIPE_SERVINGS, gt=0, description="Servings the ingredient quantities refer to")
    difficulty: Optional[str] = Field(None, description="Difficulty chosen when generating")
    image_url: Optional[str] = Field(None, description="Attached picture as URL or data URL", alias="imageUrl")
    nutrition: Optional[Nutrition] = Field(None, description="Optional nutrition estimate")
    created_at: Optional[int] = Field(None, description="Epoch milliseconds of the first save", alias="createdAt")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
        "json_schema_extra": {
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "recipeName": "Pasta Pomodoro",
                "description": "Einfache Nudeln mit Tomatensauce",
                "ingredients": ["500g Nudeln", "2 Dosen Tomaten"],
                "instructions": ["Nudeln kochen", "Sauce mischen"],
                "servings": 4,
                "createdAt": 1735689600000
            }
        }
    }

    @field_validator("recipe_name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("recipeName must not be blank")
        return value

    @field_validator("servings", mode="before")
    @classmethod
    def backfill_servings(cls, value):
        """Older entries were saved without servings"""
        if value is None:
            return DEFAULT_RECIPE_SERVINGS
        return value

    def name_key(self) -> str:
        """Case-insensitive identity used for name conflicts"""
        return name_key(self.recipe_name)


def name_key(recipe_name: str) -> str:
    return recipe_name.strip().lower()


class SaveStatus(str, Enum):
    """Outcome of a recipe save or update"""
    saved = "saved"
    updated = "updated"
    conflict = "conflict"
    not_found = "not_found"


class SaveResult(BaseModel):
    """Result of a save; a conflict is a decision point, not an error"""
    status: SaveStatus = Field(..., description="What happened to the recipe")
    recipe: Recipe = Field(..., description="The recipe as stored, or as submitted on conflict")
    existing: Optional[Recipe] = Field(None, description="Stored recipe that caused a conflict")

    model_config = {
        "use_enum_values": False,
        "populate_by_name": True
    }

    @property
    def is_conflict(self) -> bool:
        return self.status == SaveStatus.conflict

    @property
    def stored(self) -> bool:
        return self.status in (SaveStatus.saved, SaveStatus.updated)


class RecipeUpdate(BaseModel):
    """Model for editing a saved recipe"""
    recipe_name: str = Field(..., min_length=1, alias="recipeName")
    description: str = ""
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    servings: Optional[int] = Field(None, gt=0)
    image_url: Optional[str] = Field(None, alias="imageUrl")

    model_config = {
        "populate_by_name": True
    }

    @field_validator("ingredients", "instructions")
    @classmethod
    def drop_blank_lines(cls, lines: List[str]) -> List[str]:
        return [line.strip() for line in lines if line and line.strip()]
