"""
Tests for LocalStorage: recipes, shopping list and draft
"""

import json

import pytest

from exceptions import StorageFullError
from models.draft import Draft
from models.recipe import SaveStatus
from storage.blob_store import MemoryBlobStore
from storage.local_storage import (
    DRAFT_KEY,
    SAVED_RECIPES_KEY,
    SHOPPING_LIST_KEY,
    LocalStorage,
)


@pytest.fixture
def notifications(storage):
    received = []
    storage.add_listener(received.append)
    return received


class TestRecipeStorage:

    def test_save_then_load(self, storage, pasta):
        result = storage.save_recipe(pasta)

        assert result.status == SaveStatus.saved
        assert result.recipe.id
        assert result.recipe.created_at
        assert [r.recipe_name for r in storage.load_recipes()] == ["Pasta Pomodoro"]

    def test_persisted_json_uses_camel_case_keys(self, storage, blob_store, pasta):
        storage.save_recipe(pasta)
        stored = json.loads(blob_store.get(SAVED_RECIPES_KEY))

        assert stored[0]["recipeName"] == "Pasta Pomodoro"
        assert "createdAt" in stored[0]
        assert "1,5 EL Olivenöl" in blob_store.get(SAVED_RECIPES_KEY)

    def test_duplicate_name_is_a_conflict_and_writes_nothing(self, storage, blob_store, pasta, notifications):
        storage.save_recipe(pasta)
        before = blob_store.get(SAVED_RECIPES_KEY)
        notifications.clear()

        duplicate = pasta.model_copy(update={"recipe_name": "pasta POMODORO", "description": "Neu"})
        result = storage.save_recipe(duplicate)

        assert result.is_conflict
        assert result.existing.description == pasta.description
        assert blob_store.get(SAVED_RECIPES_KEY) == before
        assert notifications == []

    def test_confirm_replaces_in_place(self, storage, pasta, curry):
        first = storage.save_recipe(pasta).recipe
        storage.save_recipe(curry)

        replacement = pasta.model_copy(update={"description": "Mit Basilikum"})
        result = storage.confirm_save_recipe(replacement)

        recipes = storage.load_recipes()
        assert result.status == SaveStatus.updated
        assert [r.recipe_name for r in recipes] == ["Pasta Pomodoro", "Linsen Curry"]
        assert recipes[0].description == "Mit Basilikum"
        assert recipes[0].id == first.id
        assert recipes[0].created_at == first.created_at

    def test_new_recipe_reusing_a_stored_id_gets_a_fresh_one(self, storage, pasta, curry):
        first = storage.save_recipe(pasta).recipe

        result = storage.save_recipe(curry.model_copy(update={"id": first.id}))

        assert result.status == SaveStatus.saved
        assert result.recipe.id != first.id
        assert len({r.id for r in storage.load_recipes()}) == 2

    def test_new_recipe_keeps_an_unused_id(self, storage, pasta):
        result = storage.save_recipe(pasta.model_copy(update={"id": "eigene-id"}))

        assert result.recipe.id == "eigene-id"

    def test_confirm_without_match_appends(self, storage, pasta):
        result = storage.confirm_save_recipe(pasta)

        assert result.status == SaveStatus.saved
        assert storage.count_recipes() == 1

    def test_update_renames(self, storage, pasta):
        saved = storage.save_recipe(pasta).recipe
        renamed = pasta.model_copy(update={"recipe_name": "Pasta Arrabbiata"})

        result = storage.update_recipe("Pasta Pomodoro", renamed)

        assert result.status == SaveStatus.updated
        assert result.recipe.id == saved.id
        assert not storage.is_recipe_saved("Pasta Pomodoro")
        assert storage.is_recipe_saved("pasta arrabbiata")

    def test_update_rename_onto_existing_name_conflicts(self, storage, pasta, curry):
        storage.save_recipe(pasta)
        storage.save_recipe(curry)

        renamed = pasta.model_copy(update={"recipe_name": "LINSEN CURRY"})
        result = storage.update_recipe("Pasta Pomodoro", renamed)

        assert result.is_conflict
        assert result.existing.recipe_name == "Linsen Curry"
        assert storage.get_recipe_by_name("Pasta Pomodoro") is not None

    def test_update_unknown(self, storage, pasta):
        assert storage.update_recipe("Gibt es nicht", pasta).status == SaveStatus.not_found

    def test_delete_is_case_insensitive(self, storage, pasta):
        storage.save_recipe(pasta)

        assert storage.delete_recipe("PASTA pomodoro")
        assert storage.load_recipes() == []

    def test_delete_missing_name_does_not_write(self, storage, pasta, notifications):
        storage.save_recipe(pasta)
        notifications.clear()

        assert not storage.delete_recipe("Linsen Curry")
        assert notifications == []
        assert storage.count_recipes() == 1

    def test_search_by_name_or_ingredient(self, storage, pasta, curry):
        storage.save_recipe(pasta)
        storage.save_recipe(curry)

        assert [r.recipe_name for r in storage.search_recipes("kokos")] == ["Linsen Curry"]
        assert [r.recipe_name for r in storage.search_recipes("POMO")] == ["Pasta Pomodoro"]
        assert len(storage.search_recipes("  ")) == 2

    def test_corrupt_blob_loads_empty(self, blob_store):
        blob_store.set(SAVED_RECIPES_KEY, "{not json")
        assert LocalStorage(blob_store).load_recipes() == []

    def test_wrong_json_type_loads_empty(self, blob_store):
        blob_store.set(SAVED_RECIPES_KEY, '{"recipeName": "Pizza"}')
        assert LocalStorage(blob_store).load_recipes() == []

    def test_invalid_entries_are_skipped_and_servings_backfilled(self, blob_store):
        blob_store.set(SAVED_RECIPES_KEY, json.dumps([
            {"recipeName": "Alte Suppe", "ingredients": ["1l Brühe"], "instructions": []},
            {"description": "ohne Namen"},
        ]))

        recipes = LocalStorage(blob_store).load_recipes()

        assert [r.recipe_name for r in recipes] == ["Alte Suppe"]
        assert recipes[0].servings == 4

    def test_null_servings_backfilled_but_zero_rejected(self, blob_store):
        blob_store.set(SAVED_RECIPES_KEY, json.dumps([
            {"recipeName": "Alte Suppe", "servings": None},
            {"recipeName": "Kaputter Eintopf", "servings": 0},
        ]))

        recipes = LocalStorage(blob_store).load_recipes()

        assert [(r.recipe_name, r.servings) for r in recipes] == [("Alte Suppe", 4)]

    def test_storage_full_propagates_without_notification(self, pasta):
        storage = LocalStorage(MemoryBlobStore(quota_bytes=50))
        received = []
        storage.add_listener(received.append)

        with pytest.raises(StorageFullError):
            storage.save_recipe(pasta)

        assert received == []
        assert storage.load_recipes() == []


class TestShoppingListStorage:

    def test_add_skips_case_insensitive_duplicates(self, storage):
        storage.add_to_shopping_list(["500g Nudeln"])

        added = storage.add_to_shopping_list(["500G nudeln", "Basilikum", "basilikum", "  "])

        assert [item.text for item in added] == ["Basilikum"]
        assert [item.text for item in storage.load_shopping_list()] == ["500g Nudeln", "Basilikum"]

    def test_adding_only_duplicates_writes_nothing(self, storage, notifications):
        storage.add_to_shopping_list(["Salz"])
        notifications.clear()

        assert storage.add_to_shopping_list(["SALZ"]) == []
        assert notifications == []

    def test_toggle(self, storage):
        item = storage.add_to_shopping_list(["Milch"])[0]

        assert storage.toggle_shopping_item(item.id).completed is True
        assert storage.load_shopping_list()[0].completed is True
        assert storage.toggle_shopping_item(item.id).completed is False

    def test_toggle_unknown_id(self, storage):
        assert storage.toggle_shopping_item("nope") is None

    def test_remove_and_clear(self, storage):
        milk, eggs = storage.add_to_shopping_list(["Milch", "Eier"])

        assert storage.remove_shopping_item(milk.id)
        assert not storage.remove_shopping_item(milk.id)
        assert [item.text for item in storage.load_shopping_list()] == ["Eier"]

        storage.clear_shopping_list()
        assert storage.load_shopping_list() == []

    def test_notifies_with_collection_key(self, storage, notifications):
        storage.add_to_shopping_list(["Mehl"])
        assert notifications == [SHOPPING_LIST_KEY]


class TestDraftStorage:

    def test_non_empty_prompt_persists(self, storage):
        assert storage.save_draft(Draft(prompt="Pizza", servings="3"))

        draft = storage.load_draft()
        assert draft.prompt == "Pizza"
        assert draft.servings == 3
        assert draft.difficulty == "leicht"

    def test_empty_prompt_removes_draft(self, storage):
        storage.save_draft(Draft(prompt="Pizza"))

        assert not storage.save_draft(Draft(prompt="   "))
        assert not storage.has_draft()

    def test_unparsable_servings_fall_back(self, blob_store):
        blob_store.set(DRAFT_KEY, json.dumps({"prompt": "Suppe", "servings": "viele"}))
        assert LocalStorage(blob_store).load_draft().servings == 2

    def test_corrupt_draft_is_ignored(self, blob_store):
        blob_store.set(DRAFT_KEY, "][")
        assert LocalStorage(blob_store).load_draft() is None

    def test_clear_without_draft_does_not_notify(self, storage, notifications):
        storage.clear_draft()
        assert notifications == []

    def test_remove_listener(self, storage):
        received = []
        storage.add_listener(received.append)
        storage.remove_listener(received.append)

        storage.save_draft(Draft(prompt="Pizza"))
        assert received == []
