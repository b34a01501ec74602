from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from .draft import DEFAULT_DIFFICULTY, DEFAULT_DRAFT_SERVINGS
from .recipe import Nutrition


class RequestType(str, Enum):
    """AI request kinds"""
    GENERATE = "generate"
    SCAN_TO_RECIPE = "scan-to-recipe"
    OCR = "ocr"


class ScanMode(str, Enum):
    """What the vision model should extract from a photo"""
    INGREDIENTS = "ingredients"  # fridge / ingredient photo
    RECIPE = "recipe"  # handwritten or printed recipe


class GenerateRequest(BaseModel):
    """Inputs for recipe generation"""
    prompt: str = Field(..., min_length=1, description="Dish or ingredients to cook with")
    difficulty: str = Field(DEFAULT_DIFFICULTY, description="Requested difficulty")
    servings: int = Field(DEFAULT_DRAFT_SERVINGS, gt=0, description="Number of servings")
    wishes: str = Field("", description="Free-text wishes")

    model_config = {
        "json_schema_extra": {
            "example": {
                "prompt": "Pasta mit Tomaten",
                "difficulty": "leicht",
                "servings": 2,
                "wishes": "vegetarisch"
            }
        }
    }

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("prompt must not be blank")
        return value


class ImageScanRequest(BaseModel):
    """Inputs for image analysis"""
    image: str = Field(..., min_length=1, description="Base64 encoded image bytes")
    mime_type: str = Field("image/jpeg", description="Image MIME type", alias="mimeType")
    mode: ScanMode = Field(ScanMode.INGREDIENTS, description="Extract ingredients or a whole recipe")

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "image": "/9j/4AAQSkZJRgABAQ...",
                "mimeType": "image/jpeg",
                "mode": "ingredients"
            }
        }
    }

    @field_validator("mime_type")
    @classmethod
    def must_be_image(cls, value: str) -> str:
        if not value.startswith("image/"):
            raise ValueError("only images can be scanned")
        return value

    @field_validator("image")
    @classmethod
    def strip_data_url_prefix(cls, value: str) -> str:
        """Accept full data URLs as well as bare base64"""
        if value.startswith("data:") and "," in value:
            return value.split(",", 1)[1]
        return value


class ScanToRecipeRequest(ImageScanRequest):
    """Ingredient photo plus the generation options used once it is read"""
    difficulty: str = Field(DEFAULT_DIFFICULTY, description="Requested difficulty")
    servings: int = Field(DEFAULT_DRAFT_SERVINGS, gt=0, description="Number of servings")
    wishes: str = Field("", description="Free-text wishes")

    def to_scan_request(self) -> ImageScanRequest:
        return ImageScanRequest(image=self.image, mime_type=self.mime_type, mode=ScanMode.INGREDIENTS)


class ChefRequest(BaseModel):
    """Typed payload accepted by the combined chef endpoint"""
    type: RequestType = Field(..., description="Request kind")
    prompt: Optional[str] = None
    difficulty: Optional[str] = None
    servings: Optional[int] = None
    wishes: Optional[str] = None
    image: Optional[str] = None
    mime_type: Optional[str] = Field(None, alias="mimeType")

    model_config = {
        "populate_by_name": True
    }

    def to_generate_request(self) -> GenerateRequest:
        """Generation inputs, missing fields taking the draft defaults"""
        return GenerateRequest(
            prompt=self.prompt or "",
            difficulty=self.difficulty or DEFAULT_DIFFICULTY,
            servings=self.servings or DEFAULT_DRAFT_SERVINGS,
            wishes=self.wishes or ""
        )


class GeneratedRecipe(BaseModel):
    """Expected reply shape of a generation request"""
    recipe_name: str = Field(..., min_length=1, alias="recipeName")
    description: str = ""
    ingredients: List[str] = Field(..., min_length=1)
    instructions: List[str] = Field(..., min_length=1)
    nutrition: Optional[Nutrition] = None

    model_config = {
        "populate_by_name": True,
        "extra": "ignore"
    }


class ScanResult(BaseModel):
    """Expected reply shape of an image analysis request"""
    is_readable: bool = Field(..., alias="isReadable")
    unreadable_reason: Optional[str] = Field(None, alias="unreadableReason")
    recipe_name: Optional[str] = Field(None, alias="recipeName")
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
        "json_schema_extra": {
            "example": {
                "isReadable": True,
                "ingredients": ["3 Tomaten", "Käse"]
            }
        }
    }

    @model_validator(mode="before")
    @classmethod
    def lift_nested_recipe(cls, data):
        """Some replies nest the lists as {"recipe": {"ingredients": [...]}}"""
        if isinstance(data, dict) and isinstance(data.get("recipe"), dict):
            nested = data["recipe"]
            data = {key: value for key, value in data.items() if key != "recipe"}
            for key in ("recipeName", "ingredients", "instructions"):
                if key in nested and not data.get(key):
                    data[key] = nested[key]
        return data
