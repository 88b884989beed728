from __future__ import annotations

import json
import logging
import re
from typing import Any
from urllib.parse import urljoin

import requests

from ..errors import GenerationServiceError
from ..settings import settings

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com"
DEFAULT_MODEL = "gpt-4o"

_ROLE = "You are an AI programming assistant embedded in a code editor."


def _completion_prompt(language: str) -> str:
    return (
        f"{_ROLE} You will complete the code based on the context.\n"
        f"You will only provide the completion, not explanations. "
        f"Use proper indentation and follow best practices for {language}."
    )


def _explain_prompt(language: str) -> str:
    return (
        f"{_ROLE}\nExplain the following {language} code in a clear, concise way.\n"
        "Focus on what the code does, any patterns or algorithms used, and potential issues."
    )


def _fix_prompt(language: str, error: str) -> str:
    return (
        f"{_ROLE}\nFix the following {language} code that has an error.\n"
        'Respond with a JSON object of the form {"fixedCode": "..."} and nothing else.\n'
        f"Error message: {error}"
    )


def _document_prompt(language: str) -> str:
    return (
        f"{_ROLE}\nGenerate documentation for the following {language} code.\n"
        "Include function/class descriptions, parameters, return values, and example usage.\n"
        f"Return the documentation in a format appropriate for {language} "
        "(JSDoc for JavaScript/TypeScript, docstrings for Python, etc.)."
    )


def _llm_base_url(base: str | None) -> str:
    root = (base or DEFAULT_BASE_URL).rstrip("/")
    if root.endswith("/v1"):
        root = root[:-3]
    return root + "/v1/"


def extract_json_obj(text: str) -> dict[str, Any] | None:
    raw = str(text or "").strip()
    if not raw:
        return None

    if raw.startswith("```"):
        m = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", raw, flags=re.IGNORECASE)
        if m:
            raw = m.group(1).strip()

    if raw.startswith("{") and raw.endswith("}"):
        try:
            obj = json.loads(raw)
            return obj if isinstance(obj, dict) else None
        except json.JSONDecodeError:
            pass

    match = re.search(r"\{[\s\S]*\}", raw)
    if match:
        try:
            obj = json.loads(match.group(0))
            return obj if isinstance(obj, dict) else None
        except json.JSONDecodeError:
            return None
    return None


def _error_detail(resp: requests.Response) -> str:
    try:
        body = resp.json() or {}
        return str((body.get("error") or {}).get("message") or "")
    except (ValueError, AttributeError):
        return resp.text[:400]


class TextGenerationService:
    """Stateless client for an OpenAI-compatible ``chat/completions`` endpoint."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
        timeout_sec: int | None = None,
    ):
        self.base_url = base_url if base_url is not None else settings.LLM_BASE_URL
        self.api_key = api_key if api_key is not None else (settings.LLM_API_KEY or settings.OPENAI_API_KEY)
        self.model = model or settings.LLM_MODEL or DEFAULT_MODEL
        self.timeout_sec = int(timeout_sec or settings.LLM_TIMEOUT_SEC)

    def is_configured(self) -> bool:
        return bool(self.base_url or self.api_key)

    def _chat_once(
        self,
        *,
        system: str,
        user: str,
        max_tokens: int | None = None,
        json_mode: bool = False,
    ) -> str:
        if not self.is_configured():
            raise GenerationServiceError("Text generation service is not configured (LLM_BASE_URL / LLM_API_KEY)")

        endpoint = urljoin(_llm_base_url(self.base_url), "chat/completions")
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "stream": False,
        }
        if max_tokens:
            payload["max_tokens"] = int(max_tokens)
        if json_mode:
            payload["response_format"] = {"type": "json_object"}
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        logger.info("assistant.request endpoint=%s model=%s chars=%s", endpoint, self.model, len(user))
        try:
            resp = requests.post(endpoint, json=payload, headers=headers, timeout=self.timeout_sec)
        except requests.RequestException as err:
            raise GenerationServiceError(f"Could not reach text generation service: {err}") from err

        if resp.status_code == 429:
            raise GenerationServiceError(f"Text generation service rate limited (429). {_error_detail(resp)}".strip())
        try:
            resp.raise_for_status()
        except requests.HTTPError as err:
            raise GenerationServiceError(
                f"Text generation request failed ({resp.status_code}). {_error_detail(resp)}".strip()
            ) from err

        try:
            body = resp.json() or {}
            return str((((body.get("choices") or [{}])[0]).get("message") or {}).get("content") or "")
        except (ValueError, AttributeError, IndexError) as err:
            raise GenerationServiceError("Text generation service returned a malformed response") from err

    def complete(self, code: str, language: str, max_tokens: int | None = None) -> str:
        return self._chat_once(
            system=_completion_prompt(language),
            user=code,
            max_tokens=max_tokens or settings.COMPLETION_MAX_TOKENS,
        )

    def explain(self, code: str, language: str) -> str:
        return self._chat_once(system=_explain_prompt(language), user=code)

    def fix(self, code: str, error: str, language: str) -> str:
        """Return the fixed code, or ``code`` unchanged when the reply has no usable ``fixedCode``."""
        text = self._chat_once(system=_fix_prompt(language, error), user=code, json_mode=True)
        obj = extract_json_obj(text)
        fixed = (obj or {}).get("fixedCode")
        if not isinstance(fixed, str) or not fixed:
            logger.warning("assistant.fix.unparsed chars=%s", len(text))
            return code
        return fixed

    def document(self, code: str, language: str) -> str:
        return self._chat_once(system=_document_prompt(language), user=code)
