import json
import logging
import time
from typing import Callable, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from models.base import new_id
from models.draft import Draft
from models.recipe import Recipe, SaveResult, SaveStatus, name_key
from models.shopping_list import ShoppingItem, text_key
from .blob_store import BlobStore, MemoryBlobStore

logger = logging.getLogger(__name__)

SAVED_RECIPES_KEY = "savedRecipes"
SHOPPING_LIST_KEY = "shoppingList"
DRAFT_KEY = "recipeDraft"

ChangeListener = Callable[[str], None]
ModelT = TypeVar("ModelT", bound=BaseModel)


def _now_ms() -> int:
    return int(time.time() * 1000)


class LocalStorage:
    """
    Local storage for saved recipes, the shopping list and the draft

    Every collection lives as one JSON document under a fixed key. Each
    mutation reads the whole collection, changes it in memory and writes it
    back. Listeners are called after every successful mutation.
    """

    def __init__(self, blob_store: Optional[BlobStore] = None):
        self.blob_store = blob_store if blob_store is not None else MemoryBlobStore()
        self._listeners: List[ChangeListener] = []

    # Change notification
    def add_listener(self, listener: ChangeListener) -> None:
        """Register a callback invoked with the collection key after each mutation"""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, collection: str) -> None:
        for listener in list(self._listeners):
            listener(collection)

    # JSON helpers
    def _load_json(self, key: str):
        """Load a JSON blob; missing or corrupt data yields None"""
        raw = self.blob_store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt JSON under '{key}': {e}")
            return None

    def _save_json(self, key: str, data) -> None:
        self.blob_store.set(key, json.dumps(data, ensure_ascii=False))

    def _load_collection(self, key: str, model: Type[ModelT]) -> List[ModelT]:
        data = self._load_json(key)
        if not isinstance(data, list):
            if data is not None:
                logger.warning(f"Expected a list under '{key}', got {type(data).__name__}")
            return []

        items = []
        for entry in data:
            try:
                items.append(model.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Skipping invalid {model.__name__} under '{key}': {e.error_count()} error(s)")
        return items

    def _save_collection(self, key: str, items: Iterable[BaseModel]) -> None:
        self._save_json(key, [item.to_storage() for item in items])
        self._notify(key)

    # Recipes Storage
    def load_recipes(self) -> List[Recipe]:
        """Load saved recipes"""
        return self._load_collection(SAVED_RECIPES_KEY, Recipe)

    def save_recipes(self, recipes: List[Recipe]) -> None:
        """Replace the whole saved recipes collection"""
        self._save_collection(SAVED_RECIPES_KEY, recipes)

    def get_recipe_by_name(self, recipe_name: str) -> Optional[Recipe]:
        """Get a saved recipe by name, ignoring case"""
        key = name_key(recipe_name)
        for recipe in self.load_recipes():
            if recipe.name_key() == key:
                return recipe
        return None

    def is_recipe_saved(self, recipe_name: str) -> bool:
        return self.get_recipe_by_name(recipe_name) is not None

    def count_recipes(self) -> int:
        return len(self.load_recipes())

    def search_recipes(self, term: Optional[str] = None) -> List[Recipe]:
        """Filter saved recipes by name or ingredient substring"""
        recipes = self.load_recipes()
        needle = (term or "").strip().lower()
        if not needle:
            return recipes
        return [
            recipe for recipe in recipes
            if needle in recipe.recipe_name.lower()
            or any(needle in ingredient.lower() for ingredient in recipe.ingredients)
        ]

    def save_recipe(self, recipe: Recipe) -> SaveResult:
        """
        Save a new recipe

        A stored recipe with the same name (ignoring case) is never overwritten
        here; the result reports the conflict and confirm_save_recipe performs
        the replacement once the caller agreed.
        """
        recipes = self.load_recipes()
        key = recipe.name_key()
        existing = next((r for r in recipes if r.name_key() == key), None)
        if existing is not None:
            logger.info(f"Recipe '{recipe.recipe_name}' already saved, confirmation required")
            return SaveResult(status=SaveStatus.conflict, recipe=recipe, existing=existing)

        new_recipe = self._with_identity(recipe, taken_ids=[r.id for r in recipes])
        recipes.append(new_recipe)
        self.save_recipes(recipes)
        return SaveResult(status=SaveStatus.saved, recipe=new_recipe)

    def confirm_save_recipe(self, recipe: Recipe) -> SaveResult:
        """Save a recipe, replacing a same-named one in place"""
        recipes = self.load_recipes()
        key = recipe.name_key()
        for index, existing in enumerate(recipes):
            if existing.name_key() == key:
                replacement = self._with_identity(recipe, existing)
                recipes[index] = replacement
                self.save_recipes(recipes)
                return SaveResult(status=SaveStatus.updated, recipe=replacement, existing=existing)

        new_recipe = self._with_identity(recipe, taken_ids=[r.id for r in recipes])
        recipes.append(new_recipe)
        self.save_recipes(recipes)
        return SaveResult(status=SaveStatus.saved, recipe=new_recipe)

    def update_recipe(self, original_name: str, updated: Recipe) -> SaveResult:
        """Edit a saved recipe, possibly renaming it"""
        recipes = self.load_recipes()
        original_key = name_key(original_name)
        index = next((i for i, r in enumerate(recipes) if r.name_key() == original_key), None)
        if index is None:
            return SaveResult(status=SaveStatus.not_found, recipe=updated)

        new_key = updated.name_key()
        if new_key != original_key:
            clash = next((r for r in recipes if r.name_key() == new_key), None)
            if clash is not None:
                return SaveResult(status=SaveStatus.conflict, recipe=updated, existing=clash)

        existing = recipes[index]
        replacement = self._with_identity(updated, existing)
        recipes[index] = replacement
        self.save_recipes(recipes)
        return SaveResult(status=SaveStatus.updated, recipe=replacement, existing=existing)

    def delete_recipe(self, recipe_name: str) -> bool:
        """Delete a recipe by name, ignoring case; missing names are a no-op"""
        recipes = self.load_recipes()
        key = name_key(recipe_name)
        remaining = [r for r in recipes if r.name_key() != key]
        if len(remaining) < len(recipes):
            self.save_recipes(remaining)
            return True
        return False

    @staticmethod
    def _with_identity(recipe: Recipe, existing: Optional[Recipe] = None, taken_ids: Iterable[str] = ()) -> Recipe:
        """Keep id/createdAt of the stored entry, or assign them on first save"""
        if existing is not None:
            return recipe.model_copy(update={
                "id": existing.id or recipe.id or new_id(),
                "created_at": existing.created_at or recipe.created_at or _now_ms(),
            })
        # An id already held by another stored recipe is replaced
        recipe_id = recipe.id if recipe.id and recipe.id not in set(taken_ids) else new_id()
        return recipe.model_copy(update={
            "id": recipe_id,
            "created_at": recipe.created_at or _now_ms(),
        })

    # Shopping List Storage
    def load_shopping_list(self) -> List[ShoppingItem]:
        """Load the shopping list"""
        return self._load_collection(SHOPPING_LIST_KEY, ShoppingItem)

    def save_shopping_list(self, items: List[ShoppingItem]) -> None:
        """Replace the whole shopping list"""
        self._save_collection(SHOPPING_LIST_KEY, items)

    def add_to_shopping_list(self, texts: Iterable[str]) -> List[ShoppingItem]:
        """
        Add ingredient lines, skipping ones already on the list (ignoring case)

        Returns:
            The items that were actually added
        """
        items = self.load_shopping_list()
        seen = {item.text_key() for item in items}
        added = []
        for text in texts:
            text = (text or "").strip()
            if not text or text_key(text) in seen:
                continue
            seen.add(text_key(text))
            added.append(ShoppingItem(text=text))

        if added:
            self.save_shopping_list(items + added)
        return added

    def toggle_shopping_item(self, item_id: str) -> Optional[ShoppingItem]:
        """Flip the completed flag of an item; unknown ids are a no-op"""
        items = self.load_shopping_list()
        for item in items:
            if item.id == item_id:
                item.completed = not item.completed
                self.save_shopping_list(items)
                return item
        return None

    def remove_shopping_item(self, item_id: str) -> bool:
        """Delete an item from the shopping list"""
        items = self.load_shopping_list()
        remaining = [item for item in items if item.id != item_id]
        if len(remaining) < len(items):
            self.save_shopping_list(remaining)
            return True
        return False

    def clear_shopping_list(self) -> None:
        """Clear all items from the shopping list"""
        self.save_shopping_list([])

    # Draft Storage
    def load_draft(self) -> Optional[Draft]:
        """Load the draft, if a usable one is stored"""
        data = self._load_json(DRAFT_KEY)
        if not isinstance(data, dict):
            return None
        try:
            return Draft.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid draft: {e.error_count()} error(s)")
            return None

    def has_draft(self) -> bool:
        return self.load_draft() is not None

    def save_draft(self, draft: Draft) -> bool:
        """
        Persist the draft while its prompt is non-empty, otherwise remove it

        Returns:
            True if a draft was written
        """
        if not draft.has_prompt():
            self.clear_draft()
            return False
        self._save_json(DRAFT_KEY, draft.model_dump(mode="json"))
        self._notify(DRAFT_KEY)
        return True

    def clear_draft(self) -> None:
        """Remove the stored draft"""
        had_draft = self.blob_store.get(DRAFT_KEY) is not None
        self.blob_store.remove(DRAFT_KEY)
        if had_draft:
            self._notify(DRAFT_KEY)
