"""
Shared fixtures: a throwaway SQLite file per test and a scripted stand-in
for the Gemini client.
"""
from __future__ import annotations

import json
from typing import Any, List

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from config import Settings
from core.errors import UpstreamServiceError
from main import create_app
from services.db import SqlStorage


class FakeLLM:
    """Returns queued replies in order and remembers every call."""

    def __init__(self) -> None:
        self.replies: List[Any] = []
        self.calls: List[dict[str, Any]] = []

    def queue(self, *replies: Any) -> None:
        for r in replies:
            self.replies.append(r if isinstance(r, (str, Exception)) else json.dumps(r))

    @property
    def prompts(self) -> List[str]:
        return [c["prompt"] for c in self.calls]

    async def generate(
        self,
        prompt: str,
        *,
        temperature: float = 0.7,
        max_output_tokens: int = 2000,
    ) -> str:
        self.calls.append(
            {"prompt": prompt, "temperature": temperature, "max_output_tokens": max_output_tokens}
        )
        if not self.replies:
            raise UpstreamServiceError("no reply queued")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


TABBOULEH = {
    "name": "Tabbouleh",
    "recipe_category": "salad",
    "recipe_cuisine": "Lebanese",
    "servings": "4",
    "prep_time": 25,
    "ingredients": ["1/2 cup fine bulgur", "2 bunches parsley", "3 tomatoes"],
    "instructions": ["Soak the bulgur.", "Chop and toss everything."],
}


@pytest.fixture
def tabbouleh() -> dict[str, Any]:
    return json.loads(json.dumps(TABBOULEH))


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=None,
        sqlite_path=tmp_path / "test.db",
        gemini_api_key=None,
        env_name="test",
        log_level="WARNING",
    )


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest_asyncio.fixture
async def storage(settings):
    store = SqlStorage.from_settings(settings)
    await store.create_schema()
    yield store
    await store.close()


@pytest.fixture
def client(settings, fake_llm):
    app = create_app(settings, storage=SqlStorage.from_settings(settings), llm=fake_llm)
    with TestClient(app) as c:
        yield c
