"""
Data models for recipes, the shopping list, the draft and AI requests
"""

from .base import BaseEntity, new_id
from .recipe import (
    Nutrition,
    Recipe,
    RecipeUpdate,
    SaveResult,
    SaveStatus,
    DEFAULT_RECIPE_SERVINGS
)
from .shopping_list import ShoppingItem, ShoppingItemsCreate, ShoppingListResponse
from .draft import Draft
from .ai_models import (
    RequestType,
    ScanMode,
    GenerateRequest,
    ImageScanRequest,
    ScanToRecipeRequest,
    ChefRequest,
    GeneratedRecipe,
    ScanResult
)

__all__ = [
    'BaseEntity',
    'new_id',
    'Nutrition',
    'Recipe',
    'RecipeUpdate',
    'SaveResult',
    'SaveStatus',
    'DEFAULT_RECIPE_SERVINGS',
    'ShoppingItem',
    'ShoppingItemsCreate',
    'ShoppingListResponse',
    'Draft',
    'RequestType',
    'ScanMode',
    'GenerateRequest',
    'ImageScanRequest',
    'ScanToRecipeRequest',
    'ChefRequest',
    'GeneratedRecipe',
    'ScanResult'
]
