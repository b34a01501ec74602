from .templates import ChefPrompts, RECIPE_FORMAT, SCAN_FORMAT, JSON_ONLY

__all__ = ['ChefPrompts', 'RECIPE_FORMAT', 'SCAN_FORMAT', 'JSON_ONLY']
