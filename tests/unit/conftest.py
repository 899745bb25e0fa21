"""Unit test fixtures (mocks and stubs).

Provides mock objects for testing without the remote model.
"""

from typing import Optional

import asyncio
import pytest
from unittest.mock import AsyncMock

from code_reviewer.llm.base_client import BaseLLMClient


class RecordingSleep:
    """Stand-in for cancellable_sleep: records the delay, returns at once."""

    def __init__(self):
        self.calls: list[int] = []

    async def __call__(self, delay_ms: int, cancel_event: Optional[asyncio.Event] = None) -> None:
        self.calls.append(delay_ms)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def mock_llm_client(candidate_response):
    """Mock BaseLLMClient whose generate() returns a candidate response.

    Set `mock_llm_client.generate.side_effect` to a list to script a
    sequence of failures and successes.
    """
    mock = AsyncMock(spec=BaseLLMClient)
    mock.generate = AsyncMock(return_value=candidate_response)
    mock.health_check = AsyncMock(return_value=True)
    return mock
