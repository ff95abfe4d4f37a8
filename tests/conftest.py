"""Shared test fixtures and configuration."""

from __future__ import annotations

import pytest
from fakes import FakeTransport, InMemorySource, Post

from meiliscout.config.settings import Settings


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        meilisearch={"host": "http://meili.test:7700", "api_key": "test-key"},
    )


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def posts() -> list[Post]:
    return [Post(1, "Solar nowcasting"), Post(2, "Wind power"), Post(3, "Tidal energy")]


@pytest.fixture
def source(posts: list[Post]) -> InMemorySource:
    return InMemorySource(posts)
