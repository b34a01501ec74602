"""
Shared fixtures for the recipe assistant tests
"""

import json
from typing import List

import logfire
import pytest
from langchain_core.messages import AIMessage

from core.retry import RetryConfig
from models.recipe import Recipe
from storage.blob_store import MemoryBlobStore
from storage.local_storage import LocalStorage

logfire.configure(send_to_logfire=False, console=False)


class ScriptedChatModel:
    """Chat model stand-in that raises or answers from a script, in order"""

    def __init__(self, outcomes: List):
        self.outcomes = list(outcomes)
        self.calls = 0
        self.received = []

    async def ainvoke(self, messages):
        self.calls += 1
        self.received.append(messages)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return AIMessage(content=outcome)


class RecordingSleep:
    """Async sleep replacement that only records the requested delays"""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay: float):
        self.delays.append(delay)


def recipe_reply(**overrides) -> str:
    reply = {
        "recipeName": "Pasta Pomodoro",
        "description": "Schnelle Nudeln mit Tomatensauce",
        "ingredients": ["500g Nudeln", "2 Dosen Tomaten", "1,5 EL Olivenöl"],
        "instructions": ["Nudeln kochen", "Sauce einkochen", "Mischen"],
        "nutrition": {"calories": "650 kcal", "protein": "20 g", "carbs": "95 g", "fat": "15 g"}
    }
    reply.update(overrides)
    return json.dumps(reply, ensure_ascii=False)


@pytest.fixture
def blob_store():
    return MemoryBlobStore()


@pytest.fixture
def storage(blob_store):
    return LocalStorage(blob_store)


@pytest.fixture
def fast_retry():
    return RetryConfig(max_attempts=3, initial_delay=3.0)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def pasta():
    return Recipe(
        recipe_name="Pasta Pomodoro",
        description="Schnelle Nudeln mit Tomatensauce",
        ingredients=["500g Nudeln", "2 Dosen Tomaten", "1,5 EL Olivenöl", "Salz"],
        instructions=["Nudeln kochen", "Sauce einkochen"],
        servings=4
    )


@pytest.fixture
def curry():
    return Recipe(
        recipe_name="Linsen Curry",
        description="Rote Linsen mit Kokosmilch",
        ingredients=["250g rote Linsen", "400ml Kokosmilch"],
        instructions=["Linsen waschen", "Alles köcheln"],
        servings=2
    )
