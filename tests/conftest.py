"""Pytest configuration and shared fixtures for computeless RAG tests.

This module provides:
- Basic pytest configuration
- Stubbed collaborators (no network I/O)
- Setup/teardown for test isolation
"""

import os
import sys
from pathlib import Path

import pytest

# Add project root to Python path to allow imports of computeless_rag and cli
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from computeless_rag.loader import PipelineConfig  # noqa: E402
from computeless_rag.pipeline.context import PipelineContext  # noqa: E402
from tests.fixtures.fake_services import FakeServices  # noqa: E402


# ==================== Pytest Configuration ====================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "unit: mark test as a unit test (fast, isolated)"
    )
    config.addinivalue_line(
        "markers",
        "integration: mark test as an integration test (multiple components)"
    )


# ==================== Environment Fixtures ====================

@pytest.fixture(scope="function", autouse=True)
def isolate_environment():
    """Prevent environment variable pollution between tests."""
    original_env = os.environ.copy()

    yield

    os.environ.clear()
    os.environ.update(original_env)


# ==================== Pipeline Fixtures ====================

@pytest.fixture
def pipeline_config() -> PipelineConfig:
    """Default pipeline settings (same values as the packaged YAML)."""
    return PipelineConfig()


@pytest.fixture
def services(pipeline_config) -> FakeServices:
    """In-memory Secrets Manager / Bedrock / Pinecone."""
    return FakeServices(config=pipeline_config)


@pytest.fixture
def transport(services):
    """StubTransport wired to the fake services."""
    return services.transport()


@pytest.fixture
def notice_contexts() -> list[str]:
    return [
        "Employees must give 30 days notice.",
        "Notice period is 30 days for all staff.",
    ]


@pytest.fixture
def context() -> PipelineContext:
    return PipelineContext(query="What is the notice period?")
