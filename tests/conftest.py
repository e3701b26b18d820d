"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# ============================================================================
# Environment Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def mock_env(monkeypatch):
    """Set up test environment variables."""
    monkeypatch.setenv("CODESHIP_USERNAME", "ci-user")
    monkeypatch.setenv("CODESHIP_PASSWORD", "secret")
    monkeypatch.setenv("CODESHIP_ORGANIZATION", "acme")
    monkeypatch.setenv("CI_PROJECT_ID", "project-uuid")
    monkeypatch.setenv("CI_BUILD_ID", "build-uuid")


# ============================================================================
# Build Fixtures
# ============================================================================

class FakeDirectory:
    """In-memory BuildDirectory that records every call."""

    def __init__(self, pages=None, statuses=None):
        self.pages = pages or []
        # build id -> list of successive Build snapshots (last one repeats)
        self.statuses = statuses or {}
        self.list_calls: list[tuple[str, int, int]] = []
        self.get_calls: list[tuple[str, str]] = []
        self.list_error: Exception | None = None
        self.get_error: Exception | None = None
        # 1-based call number on which the error above is raised
        self.list_error_on = 1
        self.get_error_on = 1

    async def list_builds(self, project_id, page=1, per_page=50):
        self.list_calls.append((project_id, page, per_page))
        if self.list_error is not None and len(self.list_calls) >= self.list_error_on:
            raise self.list_error
        return self.pages[len(self.list_calls) - 1]

    async def get_build(self, project_id, build_id):
        self.get_calls.append((project_id, build_id))
        if self.get_error is not None and len(self.get_calls) >= self.get_error_on:
            raise self.get_error
        snapshots = self.statuses[build_id]
        if len(snapshots) > 1:
            return snapshots.pop(0)
        return snapshots[0]


@pytest.fixture
def now():
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_build(now):
    """Factory for Build snapshots."""
    from buildqueue.models.build import Build

    def _make(build_id, status="testing", branch="main", minutes=0, project_id="project-uuid", allocated=True):
        return Build(
            id=build_id,
            project_id=project_id,
            branch=branch,
            status=status,
            allocated_at=now + timedelta(minutes=minutes) if allocated else None,
        )

    return _make


@pytest.fixture
def fake_directory():
    return FakeDirectory()


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def codeship_client():
    """Create a CodeshipClient with test config."""
    from buildqueue.services.codeship.client import CodeshipClient
    return CodeshipClient("ci-user", "secret", "acme", base_url="https://codeship.test/v2")


@pytest.fixture
def authenticated_client(codeship_client):
    """CodeshipClient with a valid token and organization already set."""
    codeship_client._access_token = "token-123"
    codeship_client._expires_at = 4102444800  # 2100-01-01
    codeship_client._organization_id = "org-uuid"
    return codeship_client
