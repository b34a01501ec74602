"""
Ingredient quantity scaling

Rescales every number embedded in a free-text ingredient line by the ratio of
two serving counts. German input writes decimals with a comma ("1,5kg Mehl"),
so both separators are accepted and the separator style of each number is kept.
"""

import math
import re
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import List

from models.recipe import Recipe
from exceptions import InvalidServingsError

QUANTITY_PATTERN = re.compile(r"\d+(?:[.,]\d+)?")
ONE_DECIMAL = Decimal("0.1")


def format_quantity(value: float, use_comma: bool = False) -> str:
    """Round to one decimal place and drop a trailing '.0'"""
    if not math.isfinite(value):
        text = f"{value:.1f}"
    else:
        exact = Decimal(repr(value))
        # Large values need more digits than the default context carries
        with localcontext() as context:
            context.prec = max(context.prec, exact.adjusted() + 3)
            rounded = exact.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)
        text = f"{rounded:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    if use_comma:
        text = text.replace(".", ",")
    return text


def scale_ingredient_line(line: str, from_servings: int, to_servings: int) -> str:
    """
    Scale all quantities in an ingredient line

    Args:
        line: Ingredient line, e.g. "500g Nudeln"
        from_servings: Servings the line is written for
        to_servings: Servings to scale to

    Returns:
        The line with every number multiplied by to_servings / from_servings.
        Unchanged if either count is missing/zero or both are equal.
    """
    if not from_servings or not to_servings or from_servings == to_servings:
        return line

    factor = to_servings / from_servings

    def _scale_match(match: re.Match) -> str:
        number = match.group(0)
        use_comma = "," in number
        amount = float(number.replace(",", "."))
        return format_quantity(amount * factor, use_comma)

    return QUANTITY_PATTERN.sub(_scale_match, line)


def scale_ingredients(ingredients: List[str], from_servings: int, to_servings: int) -> List[str]:
    return [scale_ingredient_line(line, from_servings, to_servings) for line in ingredients]


def scale_recipe(recipe: Recipe, to_servings: int) -> Recipe:
    """
    Return a copy of the recipe with ingredients scaled to to_servings

    Servings and ingredients always change together so the stored lines keep
    matching the stored serving count.
    """
    if isinstance(to_servings, bool) or not isinstance(to_servings, int) or to_servings < 1:
        raise InvalidServingsError(to_servings)

    return recipe.model_copy(update={
        "servings": to_servings,
        "ingredients": scale_ingredients(recipe.ingredients, recipe.servings, to_servings),
    })
