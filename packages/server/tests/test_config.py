"""Tests for settings and registration policy loading."""

import pytest
import yaml
from pydantic import ValidationError

from app.core.config import (
    DEFAULT_RESTRICTED_EVENTS,
    RegistrationPolicy,
    Settings,
    get_registration_policy,
    get_settings,
    load_registration_policy,
)


def test_load_policy_from_yaml(tmp_path):
    path = tmp_path / "policy.yaml"
    path.write_text(yaml.dump({
        "faculty_only_events": ["13"],
        "restricted_affiliation_events": ["14", "15"],
        "privileged_prefix": "ay",
    }))

    policy = load_registration_policy(path)
    assert policy.faculty_only_events == frozenset({"13"})
    assert policy.restricted_affiliation_events == frozenset({"14", "15"})
    assert policy.faculty_class == "faculty"


def test_load_policy_file_not_found():
    with pytest.raises(FileNotFoundError):
        load_registration_policy("/nonexistent/policy.yaml")


def test_overlapping_tiers_rejected():
    with pytest.raises(ValidationError):
        RegistrationPolicy(
            faculty_only_events=frozenset({"13"}),
            restricted_affiliation_events=frozenset({"13", "14"}),
        )


def test_empty_prefix_rejected():
    with pytest.raises(ValidationError):
        RegistrationPolicy(privileged_prefix="")


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("HABBA_DATABASE_URL", raising=False)
    settings = Settings(_env_file=None)
    assert settings.faculty_only_events == []
    assert settings.restricted_affiliation_events == DEFAULT_RESTRICTED_EVENTS
    assert settings.privileged_prefix == "ay"
    assert settings.database_url.startswith("postgresql+asyncpg://")


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("HABBA_FACULTY_ONLY_EVENTS", '["70", "71"]')
    monkeypatch.setenv("HABBA_PRIVILEGED_PREFIX", "ac")
    settings = Settings(_env_file=None)
    assert settings.faculty_only_events == ["70", "71"]
    assert settings.privileged_prefix == "ac"


@pytest.fixture
def fresh_policy_cache():
    get_settings.cache_clear()
    get_registration_policy.cache_clear()
    yield
    get_settings.cache_clear()
    get_registration_policy.cache_clear()


def test_policy_from_settings(monkeypatch, fresh_policy_cache):
    monkeypatch.setenv("HABBA_FACULTY_ONLY_EVENTS", '["70"]')
    policy = get_registration_policy()
    assert policy.faculty_only_events == frozenset({"70"})
    assert "13" in policy.restricted_affiliation_events


def test_policy_file_takes_precedence(monkeypatch, tmp_path, fresh_policy_cache):
    path = tmp_path / "policy.yaml"
    path.write_text(yaml.dump({"restricted_affiliation_events": ["99"]}))
    monkeypatch.setenv("HABBA_REGISTRATION_POLICY_FILE", str(path))

    policy = get_registration_policy()
    assert policy.restricted_affiliation_events == frozenset({"99"})
    assert policy.faculty_only_events == frozenset()
