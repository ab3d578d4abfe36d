"""Shared pytest fixtures for healthbot tests."""
import sys
sys.dont_write_bytecode = True

import pytest  # noqa: E402

from healthbot.domain.results import RetrievalError  # noqa: E402

from .helpers import FakeAnswerer, FakeMessenger  # noqa: E402


@pytest.fixture
def messenger() -> FakeMessenger:
    return FakeMessenger()


@pytest.fixture
def answerer() -> FakeAnswerer:
    return FakeAnswerer(answer="Rest and hydrate; see a doctor if fever persists.")


@pytest.fixture
def failing_answerer() -> FakeAnswerer:
    return FakeAnswerer(error=RetrievalError("RAG endpoint unreachable: ConnectionError"))
