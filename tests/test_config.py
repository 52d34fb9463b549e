"""Tests for run configuration."""

import pytest

from orgperms.config import DEFAULT_MAX_REQUESTS, QueryConfig
from orgperms.exceptions import ConfigurationError
from orgperms.sorting import SortColumn
from orgperms.transport import DEFAULT_GRAPHQL_URL


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("ORGPERMS_TOKEN", "GITHUB_TOKEN", "ORGPERMS_ORG", "ORGPERMS_BASE_URL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = QueryConfig(token="t", organization="acme")

    assert config.paginate is True
    assert config.sort_by is SortColumn.REPOSITORY
    assert config.output_format == "json"
    assert config.indent == 0
    assert config.all_users is False
    assert config.base_url == DEFAULT_GRAPHQL_URL
    assert config.max_requests == DEFAULT_MAX_REQUESTS


def test_sort_column_coerced() -> None:
    assert QueryConfig(token="t", organization="acme", sort_by="user").sort_by is SortColumn.USER


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
    monkeypatch.setenv("ORGPERMS_ORG", "acme")
    monkeypatch.setenv("ORGPERMS_BASE_URL", "https://ghe.example.com/api/graphql")

    config = QueryConfig.from_env()

    assert config.token == "gh-token"
    assert config.organization == "acme"
    assert config.base_url == "https://ghe.example.com/api/graphql"


def test_orgperms_token_preferred(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
    monkeypatch.setenv("ORGPERMS_TOKEN", "own-token")

    assert QueryConfig.from_env(organization="acme").token == "own-token"


def test_arguments_override_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ORGPERMS_TOKEN", "env-token")
    monkeypatch.setenv("ORGPERMS_ORG", "env-org")

    config = QueryConfig.from_env(token="arg-token", organization="arg-org", paginate=False)

    assert config.token == "arg-token"
    assert config.organization == "arg-org"
    assert config.paginate is False


def test_missing_token() -> None:
    with pytest.raises(ConfigurationError, match="token"):
        QueryConfig.from_env(organization="acme")


def test_missing_organization() -> None:
    with pytest.raises(ConfigurationError, match="organization"):
        QueryConfig.from_env(token="t")


@pytest.mark.parametrize(
    "overrides",
    [
        {"output_format": "xml"},
        {"sort_by": "permission"},
        {"timeout": 0},
        {"max_requests": 0},
        {"run_timeout": -1.0},
    ],
)
def test_invalid_values(overrides: dict) -> None:
    with pytest.raises(ConfigurationError):
        QueryConfig(token="t", organization="acme", **overrides)


def test_unlimited_requests_allowed() -> None:
    assert QueryConfig(token="t", organization="acme", max_requests=None).max_requests is None
