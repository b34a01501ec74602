"""
Exceptions module exports
"""

from .recipe_exceptions import (
    RecipeAssistantError,
    StorageError,
    StorageFullError,
    StorageWriteError,
    InvalidServingsError,
    RecipeNotFoundError,
    NoActiveRecipeError,
    ChefGatewayError,
    AIConfigurationError,
    ServerLimitReachedError,
    AIServiceError,
    ReplyParseError,
    ImageUnreadableError,
    UnsupportedRequestError,
    user_message_for
)

__all__ = [
    'RecipeAssistantError',
    'StorageError',
    'StorageFullError',
    'StorageWriteError',
    'InvalidServingsError',
    'RecipeNotFoundError',
    'NoActiveRecipeError',
    'ChefGatewayError',
    'AIConfigurationError',
    'ServerLimitReachedError',
    'AIServiceError',
    'ReplyParseError',
    'ImageUnreadableError',
    'UnsupportedRequestError',
    'user_message_for'
]
