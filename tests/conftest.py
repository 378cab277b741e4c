# tests/conftest.py
from pathlib import Path

import pytest

from sage_review.config import Settings


def pytest_collection_modifyitems(items):
    """Mark tests by directory: unit, integration or e2e."""
    for item in items:
        suite = Path(str(item.fspath)).parent.name
        if suite in ("unit", "integration", "e2e"):
            item.add_marker(getattr(pytest.mark, suite))


@pytest.fixture
def make_settings(tmp_path):
    """Settings for a valid live run; keyword overrides win."""

    def _make(**overrides) -> Settings:
        values = dict(
            llm_provider="anthropic",
            llm_api_key="sk-ant-test-key-1234567890",
            llm_model=None,
            github_token="ghs_testtoken1234567890",
            github_repository="acme/widgets",
            pr_number="42",
            base_ref="main",
            head_sha="abc123def456",
            workspace=str(tmp_path),
            dry_run=False,
            fail_on_errors=False,
            severity_threshold="LOW",
            google_project_id=None,
        )
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make
