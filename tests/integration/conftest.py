"""Integration test fixtures — a real MeiliSearch instance.

Expects MeiliSearch to be running, e.g.:
    docker run -p 7700:7700 -e MEILI_MASTER_KEY=test-master-key getmeili/meilisearch

Run with ``pytest -m integration``.
"""

from __future__ import annotations

import os
import time
import uuid

import httpx
import pytest

MEILI_HOST = os.environ.get("MEILISCOUT_TEST_HOST", "http://localhost:7700")
MEILI_KEY = os.environ.get("MEILISCOUT_TEST_KEY", "test-master-key")


def _wait_for_service(url: str, timeout: float = 10.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=5)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(1)
    return False


@pytest.fixture(scope="session")
def meilisearch_ready() -> str:
    """Ensure MeiliSearch is running."""
    if not _wait_for_service(f"{MEILI_HOST}/health"):
        pytest.skip(f"MeiliSearch not available at {MEILI_HOST}")
    return MEILI_HOST


@pytest.fixture
def index_name() -> str:
    return f"posts_{uuid.uuid4().hex[:12]}"
