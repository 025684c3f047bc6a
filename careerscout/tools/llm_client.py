"""Completion service client (Ollama or OpenAI-compatible chat endpoints)."""

from __future__ import annotations

import logging

import httpx

from careerscout.config import Settings
from careerscout.errors import ServiceError

logger = logging.getLogger(__name__)


class CompletionClient:
    """Send a system + user prompt and return the model's raw text.

    The text is untrusted: callers extract and validate JSON from it
    themselves (see ``careerscout.tools.json_extract``).
    """

    def __init__(
        self,
        provider: str = "ollama",
        base_url: str = "http://localhost:11434",
        model: str = "llama3",
        api_key: str | None = None,
        timeout: float = 120.0,
    ) -> None:
        if provider not in ("ollama", "openai"):
            raise ValueError(f"Unknown completion provider: {provider}")
        self.provider = provider
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.api_key = api_key
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "CompletionClient":
        return cls(
            provider=settings.llm_provider,
            base_url=settings.llm_base_url,
            model=settings.llm_model,
            api_key=settings.llm_api_key,
            timeout=settings.llm_timeout_secs,
        )

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 512,
    ) -> str:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        if self.provider == "ollama":
            url = f"{self.base_url}/api/chat"
            payload = {
                "model": self.model,
                "messages": messages,
                "stream": False,
                "options": {"temperature": temperature, "num_predict": max_tokens},
            }
            headers: dict[str, str] = {}
        else:
            url = f"{self.base_url}/chat/completions"
            payload = {
                "model": self.model,
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
            headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}

        try:
            response = httpx.post(url, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise ServiceError(f"Completion request timed out after {self.timeout:.0f}s") from e
        except httpx.HTTPStatusError as e:
            raise ServiceError(
                f"Completion service returned HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise ServiceError(f"Completion request failed: {e}") from e

        text = self._content(data)
        logger.debug("Completion (%s/%s): %d chars", self.provider, self.model, len(text))
        return text

    def _content(self, data: object) -> str:
        try:
            if self.provider == "ollama":
                content = data["message"]["content"]  # type: ignore[index]
            else:
                content = data["choices"][0]["message"]["content"]  # type: ignore[index]
        except (KeyError, IndexError, TypeError) as e:
            raise ServiceError("Completion response envelope missing message content") from e
        if not isinstance(content, str):
            raise ServiceError("Completion response content is not text")
        return content.strip()


class OfflineCompletionClient:
    """Stand-in used for dry runs: every call fails, so each stage takes its fallback."""

    provider = "offline"

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 512,
    ) -> str:
        raise ServiceError("Completion service disabled (dry run)")
