"""Integration test fixtures.

The FastAPI app is exercised in-process through TestClient. The Gemini
client is swapped for a scripted stub through dependency overrides, so no
test here needs network access or an API key.
"""

import asyncio
from typing import Any, Iterable

import pytest
from fastapi.testclient import TestClient

from code_reviewer.api.dependencies import get_llm_client, get_settings
from code_reviewer.llm.base_client import BaseLLMClient
from code_reviewer.main import app


class ScriptedClient(BaseLLMClient):
    """Plays back a fixed sequence of responses (exceptions are raised)."""

    def __init__(self, script: Iterable[Any] = (), hang: bool = False):
        super().__init__(base_url="https://gemini.test", timeout=5)
        self.script = list(script)
        self.hang = hang
        self.prompts: list[str] = []
        self.api_key_configured = True

    @property
    def has_api_key(self) -> bool:
        return self.api_key_configured

    async def generate(self, params):
        self.prompts.append(params.prompt)
        if self.hang:
            await asyncio.sleep(60)
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    async def health_check(self) -> bool:
        return True


@pytest.fixture
def scripted_client() -> ScriptedClient:
    return ScriptedClient()


@pytest.fixture
def api_client(test_settings, scripted_client):
    """TestClient with settings and the remote client overridden."""
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_llm_client] = lambda: scripted_client
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
