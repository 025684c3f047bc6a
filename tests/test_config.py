"""Tests for settings, the screening policy file and deadlines."""

from __future__ import annotations

import time
from pathlib import Path

import pytest

from careerscout.config import Settings
from careerscout.errors import DeadlineExceeded
from careerscout.models.policy import ScreeningPolicy, load_policy
from careerscout.tools.deadline import Deadline

ENV_VARS = [
    "LLM_PROVIDER",
    "LLM_API_KEY",
    "OPENAI_API_KEY",
    "LLM_BASE_URL",
    "LLM_MODEL",
    "HEADLESS",
    "MAX_COMPANIES",
    "COMPANY_BUDGET_SECS",
    "SMTP_USER",
    "SMTP_PASS",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    """Test suite for environment-driven settings."""

    def test_defaults(self, clean_env) -> None:
        settings = Settings.from_env()

        assert settings.llm_provider == "ollama"
        assert settings.llm_base_url == "http://localhost:11434"
        assert settings.max_links_checked == 5
        assert settings.max_matches_per_company == 2
        assert settings.company_budget_secs == 60
        assert settings.headless is True
        assert settings.smtp_configured is False

    def test_openai_provider_defaults(self, clean_env) -> None:
        clean_env.setenv("LLM_PROVIDER", "OpenAI")
        clean_env.setenv("OPENAI_API_KEY", "sk-test")

        settings = Settings.from_env()
        assert settings.llm_provider == "openai"
        assert settings.llm_base_url == "https://api.openai.com/v1"
        assert settings.llm_api_key == "sk-test"

    def test_overrides_coerced(self, clean_env) -> None:
        clean_env.setenv("MAX_COMPANIES", "5")
        clean_env.setenv("COMPANY_BUDGET_SECS", "12.5")
        clean_env.setenv("HEADLESS", "false")

        settings = Settings.from_env()
        assert settings.max_companies == 5
        assert settings.company_budget_secs == 12.5
        assert settings.headless is False

    def test_smtp_configured(self, clean_env) -> None:
        clean_env.setenv("SMTP_USER", "bot@example.com")
        clean_env.setenv("SMTP_PASS", "secret")
        assert Settings.from_env().smtp_configured is True


class TestLoadPolicy:
    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        assert load_policy(str(tmp_path / "missing.yaml")) == ScreeningPolicy()

    def test_partial_override_keeps_other_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "policy.yaml"
        path.write_text("matching:\n  require_seniority: true\nlinks:\n  max_links: 4\n")

        policy = load_policy(str(path))
        assert policy.matching.require_seniority is True
        assert policy.links.max_links == 4
        assert policy.matching.min_body_mentions == 2
        assert "blog" in policy.links.exclude_terms

    def test_shipped_policy_file_loads(self) -> None:
        path = Path(__file__).resolve().parent.parent / "policy.yaml"
        policy = load_policy(str(path))
        assert policy.links.max_links == 10
        assert policy.matching.require_seniority is False


class TestDeadline:
    def test_timeout_bounded_by_cap_and_remaining(self) -> None:
        deadline = Deadline(60, label="Acme")
        assert deadline.timeout_ms(15) == 15000
        assert Deadline(0.5).timeout_ms(15) <= 500

    def test_expired_deadline_raises(self) -> None:
        deadline = Deadline(0, label="Acme")
        assert deadline.expired is True
        with pytest.raises(DeadlineExceeded, match="Acme"):
            deadline.timeout_ms(15)

    def test_child_never_outlives_parent(self) -> None:
        parent = Deadline(1)
        child = parent.child(60, label="company")
        assert child.remaining() <= parent.remaining() + 0.01

    def test_remaining_decreases(self) -> None:
        deadline = Deadline(10)
        first = deadline.remaining()
        time.sleep(0.01)
        assert deadline.remaining() < first
