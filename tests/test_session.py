"""
Tests for RecipeSession: draft lifecycle, rescaling and saving the shown recipe
"""

import json

import pytest

from core.session import PHASE_STANDBY, RecipeSession
from exceptions import AIServiceError, ImageUnreadableError, InvalidServingsError, NoActiveRecipeError
from models.ai_models import GenerateRequest, ImageScanRequest
from services.ai_gateway import ChefGateway
from tests.conftest import ScriptedChatModel, recipe_reply


@pytest.fixture
def make_session(storage, fast_retry, recording_sleep):
    def _make(*outcomes) -> RecipeSession:
        model = ScriptedChatModel(outcomes)
        gateway = ChefGateway(chat_model=model, vision_model=model, retry_config=fast_retry, sleep=recording_sleep)
        return RecipeSession(storage, gateway)
    return _make


class TestDraftLifecycle:

    def test_update_and_restore(self, make_session):
        session = make_session()
        session.update_draft("Pizza", "mittel", "4", "ohne Pilze")

        draft = session.restore_draft()
        assert draft.prompt == "Pizza"
        assert draft.servings == 4
        assert draft.wishes == "ohne Pilze"

    def test_clearing_prompt_removes_draft(self, make_session, storage):
        session = make_session()
        session.update_draft("Pizza")
        session.update_draft("")

        assert not storage.has_draft()

    def test_dismiss(self, make_session, storage):
        session = make_session()
        session.update_draft("Pizza")
        session.dismiss_draft()

        assert session.restore_draft() is None

    @pytest.mark.asyncio
    async def test_successful_generation_clears_draft(self, make_session, storage):
        session = make_session(recipe_reply())
        session.update_draft("Pasta")

        recipe = await session.generate(GenerateRequest(prompt="Pasta", servings=2))

        assert not storage.has_draft()
        assert session.current_recipe == recipe
        assert session.phase == PHASE_STANDBY

    @pytest.mark.asyncio
    async def test_failed_generation_keeps_draft(self, make_session, storage):
        session = make_session(RuntimeError("connection reset"))
        session.update_draft("Pasta")

        with pytest.raises(AIServiceError):
            await session.generate(GenerateRequest(prompt="Pasta"))

        assert storage.load_draft().prompt == "Pasta"
        assert session.phase == PHASE_STANDBY
        assert session.current_recipe is None


class TestScanAndGenerate:

    @pytest.mark.asyncio
    async def test_ingredients_become_prompt(self, make_session):
        scan = json.dumps({"isReadable": True, "ingredients": ["Tomaten", "Feta"]})
        session = make_session(scan, recipe_reply())

        recipe = await session.scan_and_generate(ImageScanRequest(image="AAAA"), servings=3)

        assert recipe.servings == 3
        human = session.gateway.chat_model.received[1][-1].content
        assert 'Gericht: "Tomaten, Feta"' in human

    @pytest.mark.asyncio
    async def test_unreadable_image(self, make_session):
        scan = json.dumps({"isReadable": False, "unreadableReason": "Lichtverhältnisse schlecht"})
        session = make_session(scan)

        with pytest.raises(ImageUnreadableError) as exc_info:
            await session.scan_and_generate(ImageScanRequest(image="AAAA"))

        assert exc_info.value.user_message == "Lichtverhältnisse schlecht"

    @pytest.mark.asyncio
    async def test_readable_without_ingredients(self, make_session, storage):
        session = make_session(json.dumps({"isReadable": True, "ingredients": []}))

        with pytest.raises(ImageUnreadableError):
            await session.scan_and_generate(ImageScanRequest(image="AAAA"))
        assert not storage.has_draft()


class TestShownRecipe:

    def test_rescale_from_baseline_does_not_drift(self, make_session, pasta):
        session = make_session()
        session.show(pasta)

        session.rescale(3)
        restored = session.rescale(4)

        assert restored.ingredients == pasta.ingredients
        assert session.current_recipe.servings == 4

    def test_rescale_invalid(self, make_session, pasta):
        session = make_session()
        session.show(pasta)

        with pytest.raises(InvalidServingsError):
            session.rescale(0)

    def test_actions_need_a_recipe(self, make_session):
        session = make_session()

        with pytest.raises(NoActiveRecipeError):
            session.rescale(2)
        with pytest.raises(NoActiveRecipeError):
            session.save_current()

    def test_save_conflict_then_confirm(self, make_session, storage, pasta):
        storage.save_recipe(pasta)
        session = make_session()
        session.show(pasta.model_copy(update={"description": "Neue Version"}))

        result = session.save_current()
        assert result.is_conflict
        assert storage.get_recipe_by_name("Pasta Pomodoro").description == pasta.description

        session.confirm_save_current()
        assert storage.get_recipe_by_name("Pasta Pomodoro").description == "Neue Version"
        assert storage.count_recipes() == 1

    def test_saved_count_follows_storage(self, make_session, storage, pasta, curry):
        storage.save_recipe(curry)
        session = make_session()
        assert session.saved_count == 1

        session.show(pasta)
        session.save_current()
        assert session.saved_count == 2

        storage.delete_recipe("Linsen Curry")
        assert session.saved_count == 1

        session.close()
        storage.delete_recipe("Pasta Pomodoro")
        assert session.saved_count == 1

    def test_add_to_shopping_list(self, make_session, storage, pasta):
        session = make_session()
        session.show(pasta)

        added = session.add_current_to_shopping_list()
        again = session.add_current_to_shopping_list()

        assert len(added) == 4
        assert again == []

    def test_share_text(self, make_session, pasta):
        session = make_session()
        session.show(pasta)
        session.rescale(2)

        text = session.share_text()

        assert "Pasta Pomodoro (für 2 Portionen)" in text
        assert "- 250g Nudeln" in text
        assert "2. Sauce einkochen" in text
