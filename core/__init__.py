"""
Core recipe logic: quantity scaling, rate-limit retries and the interaction session
"""

from .scaler import scale_ingredient_line, scale_ingredients, scale_recipe, format_quantity
from .retry import RetryConfig, RetryState, is_rate_limit_error, with_retry, with_retry_config

__all__ = [
    'scale_ingredient_line',
    'scale_ingredients',
    'scale_recipe',
    'format_quantity',
    'RetryConfig',
    'RetryState',
    'is_rate_limit_error',
    'with_retry',
    'with_retry_config'
]
