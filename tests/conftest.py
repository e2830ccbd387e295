"""Shared pytest fixtures."""

import pytest

from prospector.logging.context import clear_log_context

PROSPECTOR_ENV_VARS = (
    "GITHUB_TOKEN",
    "GITHUB_SEARCH_QUERY",
    "REDDIT_SUBREDDIT",
    "HN_QUERY",
    "PH_FEED",
    "LOG_LEVEL",
    "ENVIRONMENT",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Unset prospector variables and run from an empty directory.

    Keeps a developer's .env values or a local config.yaml from leaking
    into configuration tests.
    """
    for name in PROSPECTOR_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture
def mock_env_vars(clean_env):
    """Set a representative environment."""
    clean_env.setenv("GITHUB_TOKEN", "ghp_test_token")
    clean_env.setenv("GITHUB_SEARCH_QUERY", "label:good-first-issue")
    clean_env.setenv("REDDIT_SUBREDDIT", "forhire")
    clean_env.setenv("HN_QUERY", "Freelancer? Seeking freelancer?")
    clean_env.setenv("PH_FEED", "https://example.com/feed.xml")
    return clean_env


@pytest.fixture(autouse=True)
def clean_log_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()
