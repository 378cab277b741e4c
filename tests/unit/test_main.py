# tests/unit/test_main.py
from unittest.mock import AsyncMock

import pytest

from sage_review import main as main_module
from sage_review.models.review import ReviewOutcome
from sage_review.platforms.github import GitHubClient


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(main_module, "setup_logging", lambda *args, **kwargs: None)


@pytest.fixture
def env(monkeypatch, tmp_path):
    output = tmp_path / "github_output"
    monkeypatch.setenv("GITHUB_OUTPUT", str(output))
    monkeypatch.setenv("LLM_API_KEY", "sk-ant-test-key-1234567890")
    monkeypatch.setenv("FAIL_ON_ERRORS", "false")
    monkeypatch.chdir(tmp_path)
    return output


def test_build_forge(make_settings):
    forge = main_module.build_forge(make_settings(github_api_url="https://github.example.com/api/v3"))

    assert isinstance(forge, GitHubClient)
    assert forge.repo_url == "https://github.example.com/api/v3/repos/acme/widgets"


@pytest.mark.parametrize(
    "overrides",
    [{"dry_run": True}, {"github_token": None}, {"github_repository": "not a repo"}],
)
def test_build_forge_returns_none_when_posting_is_impossible(make_settings, overrides):
    assert main_module.build_forge(make_settings(**overrides)) is None


def test_main_writes_outputs(env, monkeypatch):
    outcome = ReviewOutcome(completed=True, findings_count=0, cost_estimate=0.0105)
    monkeypatch.setattr(main_module, "run_review", AsyncMock(return_value=outcome))

    main_module.main()

    assert "completed=true\n" in env.read_text(encoding="utf-8")
    assert "cost_estimate=0.0105\n" in env.read_text(encoding="utf-8")


def test_main_failed_run_exits_zero_by_default(env, monkeypatch):
    monkeypatch.setattr(main_module, "run_review", AsyncMock(return_value=ReviewOutcome(completed=False, error="x")))

    main_module.main()

    assert "completed=false\n" in env.read_text(encoding="utf-8")


def test_main_failed_run_exits_nonzero_when_requested(env, monkeypatch):
    monkeypatch.setenv("FAIL_ON_ERRORS", "true")
    monkeypatch.setattr(main_module, "run_review", AsyncMock(return_value=ReviewOutcome(completed=False, error="x")))

    with pytest.raises(SystemExit) as exc_info:
        main_module.main()

    assert exc_info.value.code == 1


def test_main_unparseable_environment(env, monkeypatch):
    monkeypatch.setenv("MAX_TOKENS", "lots")

    with pytest.raises(SystemExit) as exc_info:
        main_module.main()

    assert exc_info.value.code == 1
    assert "completed=false\n" in env.read_text(encoding="utf-8")


def test_main_unknown_log_level_still_writes_outputs(env, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    run_review = AsyncMock()
    monkeypatch.setattr(main_module, "run_review", run_review)

    with pytest.raises(SystemExit) as exc_info:
        main_module.main()

    assert exc_info.value.code == 1
    assert "completed=false\n" in env.read_text(encoding="utf-8")
    run_review.assert_not_awaited()
