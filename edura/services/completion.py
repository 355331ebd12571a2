"""Completion service client built on the OpenAI Python SDK (>= 1.0)."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import openai
from flask import current_app

from .errors import ConfigurationError, ProviderError

LOGGER = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = (
    "Completion API key is not configured. Please set OPENAI_API_KEY in your .env file."
)


class CompletionClient:
    """
    Single-attempt wrapper that picks the right OpenAI endpoint for a model.

    - GPT-5 / o3 / o4 / 4.1(x) → Responses API
    - everything else → Chat Completions API

    The SDK client is only built once a key is present, so a missing credential
    is reported by :meth:`ensure_configured` before any network call.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model_name: str,
        *,
        base_url: Optional[str] = None,
        max_tokens: int = 8192,
        sdk_client: Any = None,
    ) -> None:
        self.api_key = (api_key or "").strip()
        self.model_name = (model_name or "").strip()
        self.base_url = (base_url or "").strip() or None
        self.max_tokens = int(max_tokens or 8192)
        self._client = sdk_client

    @classmethod
    def from_config(cls, config: Any) -> "CompletionClient":
        return cls(
            config.get("COMPLETION_API_KEY"),
            config.get("COMPLETION_MODEL") or "gpt-4o-mini",
            base_url=config.get("COMPLETION_API_BASE"),
            max_tokens=config.get("COMPLETION_MAX_TOKENS") or 8192,
        )

    # ---------------- configuration ----------------
    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def ensure_configured(self) -> None:
        if not self.is_configured:
            raise ConfigurationError(MISSING_KEY_MESSAGE)

    def masked_key(self) -> str:
        # Never expose more than a short prefix of the secret
        return (self.api_key[:4] + "…") if self.api_key else ""

    def signature(self) -> dict:
        return {"model": self.model_name, "key": self.masked_key(), "baseUrl": self.base_url}

    def _sdk(self) -> Any:
        if self._client is None:
            self._client = openai.OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def _uses_responses_api(self, model_name: str) -> bool:
        name = model_name.lower()
        return name.startswith(("gpt-5", "o3", "o4", "gpt-4.1"))

    # ---------------- public API ----------------
    def complete(self, prompt: str, *, model: Optional[str] = None) -> str:
        """Send ``prompt`` once and return the trimmed response text."""

        self.ensure_configured()
        model_name = (model or self.model_name).strip()

        try:
            if self._uses_responses_api(model_name):
                text = self._call_responses(model_name, prompt)
            else:
                text = self._call_chat(model_name, prompt)
        except openai.AuthenticationError as exc:
            LOGGER.warning("Completion service rejected the configured key (%s).", self.masked_key())
            raise ConfigurationError(
                f"API key error: {_provider_message(exc)}. Current API key: {self.masked_key()} "
                "Please verify the key is valid."
            ) from exc
        except openai.OpenAIError as exc:
            message = _provider_message(exc)
            LOGGER.warning("Completion call to %s failed: %s", model_name, message)
            raise ProviderError(f"Completion request failed: {message}", provider_message=message) from exc

        return text.strip()

    # ---------------- internal callers ----------------
    def _call_responses(self, model_name: str, prompt: str) -> str:
        resp = self._sdk().responses.create(
            model=model_name,
            input=prompt,
            max_output_tokens=self.max_tokens,
        )
        return str(getattr(resp, "output_text", None) or "")

    def _call_chat(self, model_name: str, prompt: str) -> str:
        resp = self._sdk().chat.completions.create(
            model=model_name,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=self.max_tokens,
            n=1,
        )
        return self._extract_text_from_chat(resp)

    def _extract_text_from_chat(self, resp: Any) -> str:
        choices = getattr(resp, "choices", []) or []
        if not choices:
            return ""
        first = choices[0]
        msg = getattr(first, "message", None)
        if isinstance(msg, dict):
            content = msg.get("content")
        else:
            content = getattr(msg, "content", None)
        if isinstance(content, list):
            parts: List[str] = []
            for p in content:
                if isinstance(p, dict) and p.get("type") == "text":
                    parts.append(str(p.get("text") or ""))
            return "\n".join([p for p in parts if p])
        return str(content or "")


def _provider_message(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc) or exc.__class__.__name__


def get_completion_client() -> CompletionClient:
    """Return the client the app factory registered for this application."""

    client = current_app.extensions.get("completion_client")
    if client is None:
        client = CompletionClient.from_config(current_app.config)
        current_app.extensions["completion_client"] = client
    return client
