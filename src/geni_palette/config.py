"""
Engine configuration. Defaults live in `_defaults()`; environment variables
override them. The Flask app and the generator both read the merged dict.
"""
from __future__ import annotations

import os
from typing import Any, Mapping


def _defaults() -> dict[str, Any]:
    return {
        "provider": "google",
        "google": {
            "api_key": None,
            "model": "gemini-2.0-flash-exp",
            "base_url": "https://generativelanguage.googleapis.com/v1beta",
        },
        "openai": {
            "api_key": None,
            "model": "gpt-4o",
            "base_url": "https://api.openai.com/v1",
        },
        "generation": {
            "max_attempts": 2,
            "temperature": 0.7,
            "name_temperature": 0.95,
            "timeout": 30.0,
        },
        "log_level": "INFO",
    }


# env var → (section, key, cast)
_ENV_KEYS: dict[str, tuple[str | None, str, type]] = {
    "AI_PROVIDER": (None, "provider", str),
    "GOOGLE_GENERATIVE_AI_API_KEY": ("google", "api_key", str),
    "GOOGLE_AI_MODEL": ("google", "model", str),
    "OPENAI_API_KEY": ("openai", "api_key", str),
    "OPENAI_MODEL": ("openai", "model", str),
    "GENI_REQUEST_TIMEOUT": ("generation", "timeout", float),
    "GENI_LOG_LEVEL": (None, "log_level", str),
}


def load_config(
    env: Mapping[str, str] | None = None, overrides: Mapping[str, Any] | None = None
) -> dict[str, Any]:
    """Defaults, then environment, then explicit overrides (one level deep)."""
    env = os.environ if env is None else env
    config = _defaults()

    for var, (section, key, cast) in _ENV_KEYS.items():
        raw = env.get(var)
        if raw is None or raw.strip() == "":
            continue
        try:
            value = cast(raw.strip())
        except ValueError:
            raise ValueError(f"{var}={raw!r} is not a valid {cast.__name__}") from None
        if section is None:
            config[key] = value
        else:
            config[section][key] = value

    config["provider"] = str(config["provider"]).lower()

    for key, value in (overrides or {}).items():
        if isinstance(value, Mapping) and isinstance(config.get(key), dict):
            config[key] = {**config[key], **value}
        else:
            config[key] = value
    return config


__all__ = ["load_config"]
