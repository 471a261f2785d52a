"""
Global pytest configuration and fixtures.
"""

import asyncio
import os
from concurrent.futures import ThreadPoolExecutor

import pytest
import pytest_asyncio

from storage_trait.config import Settings
from storage_trait.core.cache import reset_caches
from storage_trait.utils.dispatch import WorkQueues
from storage_trait.utils.exceptions import TransportError
from tests.helpers import BACKGROUND_PREFIX, BrokenPathBackend, InMemoryBackend


@pytest_asyncio.fixture
async def queues():
    """Work queues bound to the test's event loop."""
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=BACKGROUND_PREFIX)
    work_queues = WorkQueues(asyncio.get_running_loop(), executor)
    yield work_queues
    work_queues.shutdown(wait=True)


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def failing_backend():
    backend = InMemoryBackend()
    backend.fail_with = TransportError(message="Backend unavailable", code="UNAVAILABLE")
    return backend


@pytest.fixture
def crashing_backend():
    """Backend whose SDK calls raise plain exceptions."""
    backend = InMemoryBackend()
    backend.fail_with = RuntimeError("socket closed")
    return backend


@pytest.fixture
def broken_path_backend():
    return BrokenPathBackend()


@pytest.fixture
def test_settings() -> Settings:
    """Test settings configuration."""
    return Settings(
        app_name="storage-trait-test",
        version="1.0.0-test",
        debug=True,
        environment="testing",
        firestore_project_id="test-project",
        use_firestore_emulator=True,
        firestore_emulator_host="localhost:8081",
        firebase_database_url="https://test-project.firebaseio.com",
        firebase_storage_bucket="test-project.appspot.com",
        log_level="DEBUG",
    )


@pytest.fixture(autouse=True)
def reset_record_caches():
    """Each test starts with empty per-type caches."""
    reset_caches()
    yield
    reset_caches()


@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables after each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Pytest markers
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
