"""
Recipe Session - state of one user interaction

Holds the recipe currently shown, the baseline it is rescaled from, the loader
phase and the saved-recipe count. Persistent state stays in LocalStorage.
"""

import logging
from typing import List, Optional

from exceptions import ImageUnreadableError, NoActiveRecipeError
from models.ai_models import GenerateRequest, ImageScanRequest
from models.draft import DEFAULT_DIFFICULTY, DEFAULT_DRAFT_SERVINGS, Draft
from models.recipe import Recipe, SaveResult
from models.shopping_list import ShoppingItem
from services.ai_gateway import ChefGateway
from storage.local_storage import LocalStorage, SAVED_RECIPES_KEY
from .scaler import scale_recipe

logger = logging.getLogger(__name__)

PHASE_STANDBY = "Standby"
PHASE_GENERATING = "Der Chef kreiert dein Rezept..."
PHASE_SCANNING = "Chef analysiert das Bild..."

NO_INGREDIENTS_REASON = "Zutaten nicht erkannt"


class RecipeSession:
    """
    One interaction with the chef

    Usage:
        session = RecipeSession(storage, gateway)
        recipe = await session.generate(GenerateRequest(prompt="Pizza"))
        session.rescale(6)
        result = session.save_current()
        if result.is_conflict:
            session.confirm_save_current()
    """

    def __init__(self, storage: LocalStorage, gateway: ChefGateway):
        self.storage = storage
        self.gateway = gateway
        self.current_recipe: Optional[Recipe] = None
        self._baseline: Optional[Recipe] = None
        self._phase = PHASE_STANDBY
        self._saved_count = storage.count_recipes()
        storage.add_listener(self._on_storage_change)

    def close(self) -> None:
        """Stop listening to storage changes"""
        self.storage.remove_listener(self._on_storage_change)

    @property
    def phase(self) -> str:
        return self._phase

    @property
    def saved_count(self) -> int:
        return self._saved_count

    def _on_storage_change(self, collection: str) -> None:
        if collection == SAVED_RECIPES_KEY:
            self._saved_count = self.storage.count_recipes()

    # Draft
    def update_draft(
        self,
        prompt: str,
        difficulty: Optional[str] = None,
        servings=None,
        wishes: Optional[str] = None
    ) -> Draft:
        """Record the current form; an empty prompt removes the draft"""
        draft = Draft(prompt=prompt, difficulty=difficulty, servings=servings, wishes=wishes)
        self.storage.save_draft(draft)
        return draft

    def restore_draft(self) -> Optional[Draft]:
        return self.storage.load_draft()

    def dismiss_draft(self) -> None:
        self.storage.clear_draft()

    # Chef requests
    async def generate(self, request: GenerateRequest) -> Recipe:
        """
        Generate a recipe and show it

        The draft is cleared only once generation succeeded, so a failed
        request can be retried from the same form.
        """
        self._phase = PHASE_GENERATING
        try:
            recipe = await self.gateway.generate_recipe(request)
        finally:
            self._phase = PHASE_STANDBY

        self.storage.clear_draft()
        return self.show(recipe)

    async def scan_and_generate(
        self,
        scan_request: ImageScanRequest,
        difficulty: str = DEFAULT_DIFFICULTY,
        servings: int = DEFAULT_DRAFT_SERVINGS,
        wishes: str = ""
    ) -> Recipe:
        """
        Scan a photo for ingredients, put them into the draft and generate

        Raises:
            ImageUnreadableError: The photo could not be used
        """
        self._phase = PHASE_SCANNING
        try:
            result = await self.gateway.scan_image(scan_request)
        finally:
            self._phase = PHASE_STANDBY

        if not result.is_readable:
            raise ImageUnreadableError(result.unreadable_reason)
        if not result.ingredients:
            raise ImageUnreadableError(NO_INGREDIENTS_REASON)

        prompt = ", ".join(result.ingredients)
        draft = self.update_draft(prompt, difficulty, servings, wishes)
        logger.info(f"Scan found {len(result.ingredients)} ingredient(s)")

        return await self.generate(GenerateRequest(
            prompt=draft.prompt,
            difficulty=draft.difficulty,
            servings=draft.servings,
            wishes=draft.wishes
        ))

    # Shown recipe
    def show(self, recipe: Recipe) -> Recipe:
        """Show a recipe; it becomes the baseline for rescaling"""
        self._baseline = recipe
        self.current_recipe = recipe
        return recipe

    def _require_current(self) -> Recipe:
        if self.current_recipe is None:
            raise NoActiveRecipeError()
        return self.current_recipe

    def rescale(self, servings: int) -> Recipe:
        """Scale the shown recipe, always from its baseline so repeated changes do not drift"""
        self._require_current()
        self.current_recipe = scale_recipe(self._baseline, servings)
        return self.current_recipe

    def save_current(self) -> SaveResult:
        """Save the shown recipe; a name conflict is returned, not raised"""
        result = self.storage.save_recipe(self._require_current())
        if result.stored:
            self.show(result.recipe)
        return result

    def confirm_save_current(self) -> SaveResult:
        """Save the shown recipe, overwriting a same-named one"""
        result = self.storage.confirm_save_recipe(self._require_current())
        self.show(result.recipe)
        return result

    def add_current_to_shopping_list(self) -> List[ShoppingItem]:
        return self.storage.add_to_shopping_list(self._require_current().ingredients)

    def share_text(self) -> str:
        """Plain-text summary of the shown recipe for sharing"""
        recipe = self._require_current()
        ingredients = "\n".join(f"- {line}" for line in recipe.ingredients)
        instructions = "\n".join(f"{index}. {step}" for index, step in enumerate(recipe.instructions, start=1))
        return (
            f"🍳 Rezept: {recipe.recipe_name} (für {recipe.servings} Portionen)\n\n"
            f"{recipe.description}\n\n---\n\n"
            f"🛒 Zutaten:\n{ingredients}\n\n---\n\n"
            f"👨‍🍳 Anleitung:\n{instructions}"
        )
