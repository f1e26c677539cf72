"""
Generative text providers. The engine only needs one capability: hand over an
`Instruction`, get a JSON object back, or fail with `ExternalServiceError`.
Concrete providers talk to the vendor REST APIs over `requests`.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Protocol, runtime_checkable

import requests

from .errors import ExternalServiceError, MalformedResponseError, ProviderConfigError
from .prompts import Instruction

logger = logging.getLogger(__name__)

_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
    "User-Agent": "geni-palette/0.1",
}


@runtime_checkable
class PaletteProvider(Protocol):
    name: str

    def complete(self, instruction: Instruction) -> dict[str, Any]:
        """Return the model's JSON answer for `instruction`."""
        ...


def _with_schema(instruction: Instruction) -> str:
    if not instruction.schema:
        return instruction.system
    return (
        f"{instruction.system}\n\nRespond ONLY with JSON matching this schema:\n"
        f"{json.dumps(instruction.schema)}"
    )


def _parse_json_text(text: Any, provider: str) -> dict[str, Any]:
    """Model text → JSON object; raise MalformedResponseError with context if invalid."""
    if not isinstance(text, str) or not text.strip():
        raise MalformedResponseError("Empty model answer", provider=provider)
    body = text.strip()
    if body.startswith("```"):
        # ```json ... ``` wrappers
        body = body.strip("`")
        body = body[4:] if body.lower().startswith("json") else body
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(
            f"Invalid JSON from model: {e}", provider=provider, body=text[:500]
        ) from e
    if not isinstance(data, dict):
        raise MalformedResponseError("Model answer is not a JSON object", provider=provider)
    return data


class _HTTPProvider:
    name = "http"

    def __init__(self, api_key: str | None, model: str, base_url: str, timeout: float = 30.0):
        if not api_key:
            raise ProviderConfigError(f"Missing API key for {self.name}", provider=self.name)
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = float(timeout)

    def _post(self, url: str, payload: dict, headers: Mapping[str, str]) -> dict:
        try:
            resp = requests.post(
                url, json=payload, headers={**_HEADERS, **headers}, timeout=self.timeout
            )
        except (requests.Timeout, requests.ConnectionError) as e:
            raise ExternalServiceError(
                f"{self.name} unreachable: {e}", provider=self.name, retryable=True
            ) from e
        except requests.RequestException as e:
            raise ExternalServiceError(
                f"{self.name} request failed: {e}", provider=self.name, retryable=False
            ) from e

        if resp.status_code >= 400:
            raise ExternalServiceError(
                f"{self.name} returned HTTP {resp.status_code}",
                provider=self.name,
                status_code=resp.status_code,
                body=resp.text[:500] if resp.text else None,
                retryable=resp.status_code == 429 or resp.status_code >= 500,
            )
        try:
            return resp.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"Invalid JSON response: {e}",
                provider=self.name,
                status_code=resp.status_code,
                body=resp.text[:500] if resp.text else None,
            ) from e


class GoogleAiProvider(_HTTPProvider):
    """Gemini `generateContent` with a JSON response mime type."""

    name = "Google AI (Gemini)"

    def complete(self, instruction: Instruction) -> dict[str, Any]:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        payload = {
            "systemInstruction": {"parts": [{"text": _with_schema(instruction)}]},
            "contents": [{"role": "user", "parts": [{"text": instruction.user}]}],
            "generationConfig": {
                "temperature": instruction.temperature,
                "responseMimeType": "application/json",
            },
        }
        data = self._post(url, payload, {"x-goog-api-key": self.api_key})
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError(
                "Gemini answer has no candidate text", provider=self.name, body=str(data)[:500]
            ) from e
        return _parse_json_text(text, self.name)


class OpenAiProvider(_HTTPProvider):
    """Chat Completions in JSON-object mode."""

    name = "OpenAI (GPT-4o)"

    def complete(self, instruction: Instruction) -> dict[str, Any]:
        url = f"{self.base_url}/chat/completions"
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": _with_schema(instruction)},
                {"role": "user", "content": instruction.user},
            ],
            "temperature": instruction.temperature,
            "response_format": {"type": "json_object"},
        }
        data = self._post(url, payload, {"Authorization": f"Bearer {self.api_key}"})
        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError(
                "OpenAI answer has no message content", provider=self.name, body=str(data)[:500]
            ) from e
        return _parse_json_text(text, self.name)


_PROVIDERS: dict[str, type[_HTTPProvider]] = {
    "google": GoogleAiProvider,
    "openai": OpenAiProvider,
}


def default_provider_kind(config: Mapping[str, Any]) -> str:
    kind = str(config.get("provider") or "google").lower()
    return kind if kind in _PROVIDERS else "google"


def get_provider(kind: str, config: Mapping[str, Any]) -> PaletteProvider:
    """Build the provider named `kind` from the merged config dict."""
    cls = _PROVIDERS.get(kind.lower())
    if cls is None:
        raise ProviderConfigError(f"Unsupported AI provider: {kind}", provider=kind)
    section = config.get(kind.lower(), {})
    timeout = config.get("generation", {}).get("timeout", 30.0)
    provider = cls(
        api_key=section.get("api_key"),
        model=section.get("model", ""),
        base_url=section.get("base_url", ""),
        timeout=timeout,
    )
    logger.debug("using provider %s (%s)", provider.name, provider.model)
    return provider


__all__ = [
    "PaletteProvider",
    "GoogleAiProvider",
    "OpenAiProvider",
    "default_provider_kind",
    "get_provider",
]
