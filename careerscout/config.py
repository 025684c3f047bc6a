"""Runtime settings read from the environment (.env is loaded by main)."""

from __future__ import annotations

import os
from typing import Literal

from pydantic import BaseModel, Field


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Limits, timeouts and collaborator endpoints for one pipeline run."""

    # Completion service
    llm_provider: Literal["ollama", "openai"] = "ollama"
    llm_base_url: str = "http://localhost:11434"
    llm_model: str = "llama3"
    llm_api_key: str | None = None
    llm_timeout_secs: float = 120.0

    # Storage & policy
    db_path: str = "careerscout.db"
    policy_path: str = "policy.yaml"

    # Expansion
    max_companies: int = Field(default=15, ge=1)
    max_role_suggestions: int = Field(default=3, ge=0)
    resolve_delay_secs: float = 0.5

    # Crawl & match caps
    max_links_checked: int = Field(default=5, ge=1)
    max_matches_per_company: int = Field(default=2, ge=1)

    # Browser timing
    headless: bool = True
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    )
    navigation_timeout_secs: float = 15.0
    job_navigation_timeout_secs: float = 10.0
    settle_delay_secs: float = 2.0
    job_settle_delay_secs: float = 1.0
    snapshot_max_chars: int = 2000

    # Budgets
    company_budget_secs: float = 60.0
    run_budget_secs: float = 300.0
    courtesy_delay_secs: float = 2.0

    # CV
    template_max_chars: int = 1500

    # Notification
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_sender: str | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, keeping defaults for unset ones."""
        values: dict = {
            "llm_provider": os.getenv("LLM_PROVIDER", "ollama").lower(),
            "llm_api_key": os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY"),
            "headless": _env_bool("HEADLESS", True),
            "smtp_user": os.getenv("SMTP_USER") or None,
            "smtp_password": os.getenv("SMTP_PASS") or None,
            "smtp_sender": os.getenv("SMTP_FROM") or None,
        }

        if values["llm_provider"] == "openai":
            values["llm_base_url"] = "https://api.openai.com/v1"
            values["llm_model"] = "gpt-3.5-turbo"

        plain = {
            "llm_base_url": "LLM_BASE_URL",
            "llm_model": "LLM_MODEL",
            "db_path": "DB_PATH",
            "policy_path": "POLICY_PATH",
            "smtp_host": "SMTP_HOST",
        }
        for field_name, env_name in plain.items():
            if os.getenv(env_name):
                values[field_name] = os.getenv(env_name)

        numeric = {
            "llm_timeout_secs": "LLM_TIMEOUT_SECS",
            "max_companies": "MAX_COMPANIES",
            "max_links_checked": "MAX_LINKS_CHECKED",
            "max_matches_per_company": "MAX_MATCHES_PER_COMPANY",
            "navigation_timeout_secs": "NAVIGATION_TIMEOUT_SECS",
            "settle_delay_secs": "SETTLE_DELAY_SECS",
            "company_budget_secs": "COMPANY_BUDGET_SECS",
            "run_budget_secs": "RUN_BUDGET_SECS",
            "courtesy_delay_secs": "COURTESY_DELAY_SECS",
            "smtp_port": "SMTP_PORT",
        }
        for field_name, env_name in numeric.items():
            raw = os.getenv(env_name)
            if raw:
                values[field_name] = raw  # pydantic coerces to int/float

        return cls(**values)

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_user and self.smtp_password)
