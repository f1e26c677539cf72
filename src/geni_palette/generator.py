# generator.py – theme + harmony + count → validated, diverse palette

from __future__ import annotations

import logging
import random
import string
import time
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Sequence

from .config import load_config
from .diversity import enforce_diversity
from .errors import ExternalServiceError, MalformedResponseError
from .harmony import HarmonyType
from .prompts import (
    Instruction,
    build_color_name_instruction,
    build_name_instruction,
    build_palette_instruction,
)
from .providers import PaletteProvider, default_provider_kind, get_provider
from .schema import (
    Color,
    Palette,
    check_generation_args,
    name_from_payload,
    palette_from_payload,
)

log = logging.getLogger(__name__)

FALLBACK_NAME_PREFIX = "Geni"
_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits

_FALLBACK_COLORS = (
    ("Purple Dawn", "#667EEA"),
    ("Deep Violet", "#764BA2"),
    ("Pink Mist", "#F093FB"),
    ("Coral Pink", "#F5576C"),
    ("Sky Blue", "#4FACFE"),
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def static_fallback() -> Palette:
    """The palette shown whenever generation fails; only the timestamp varies."""
    return Palette(
        palette_name="Geni on Vacation",
        colors=tuple(Color.from_hex(name, hx) for name, hx in _FALLBACK_COLORS),
        rationale=(
            "A beautiful gradient palette with purple and pink tones, perfect for "
            "modern web designs (Geni is on vacation...)."
        ),
        tags=("gradient", "purple", "pink", "modern", "elegant"),
        generated_at=_now_iso(),
    )


def fallback_name(avoid: Sequence[str] = (), rng: random.Random | None = None) -> str:
    rng = rng or random.SystemRandom()
    taken = {n.strip().lower() for n in avoid}
    while True:
        suffix = "".join(rng.choice(_SUFFIX_ALPHABET) for _ in range(6))
        name = f"{FALLBACK_NAME_PREFIX} {suffix}"
        if name.lower() not in taken:
            return name


class PaletteGenerator:
    """
    Orchestrates one generation request.

    The provider is resolved lazily so that a missing API key or an unknown
    provider is just another generation failure and ends in the fallback.
    """

    def __init__(
        self,
        provider: PaletteProvider | None = None,
        config: Mapping[str, Any] | None = None,
        *,
        provider_factory: Callable[[str, Mapping[str, Any]], PaletteProvider] = get_provider,
    ):
        self.config = dict(config) if config is not None else load_config()
        self._provider = provider
        self._provider_factory = provider_factory
        gen = self.config.get("generation", {})
        self.max_attempts = max(1, int(gen.get("max_attempts", 2)))
        self.temperature = float(gen.get("temperature", 0.7))
        self.name_temperature = float(gen.get("name_temperature", 0.95))

    @property
    def provider(self) -> PaletteProvider:
        if self._provider is None:
            return self._provider_factory(default_provider_kind(self.config), self.config)
        return self._provider

    # ---- palette ----------------------------------------------------------

    def generate_palette(self, prompt: str, harmony: str | HarmonyType, color_count: int = 5) -> Palette:
        # invalid arguments are the caller's problem and are never absorbed
        request = check_generation_args(prompt, harmony, color_count)
        instruction = build_palette_instruction(
            request.prompt, request.harmony, request.color_count, temperature=self.temperature
        )

        try:
            candidate = self._call(instruction, palette_from_payload)
        except Exception:
            log.exception("palette generation failed; serving static fallback")
            return static_fallback()

        if len(candidate.colors) != request.color_count:
            log.warning(
                "provider returned %d colors, %d requested",
                len(candidate.colors),
                request.color_count,
            )
        colors = enforce_diversity(candidate.colors, request.harmony)
        return candidate.model_copy(update={"colors": tuple(colors), "generated_at": _now_iso()})

    # ---- names ------------------------------------------------------------

    def regenerate_name(
        self,
        rationale: str,
        harmony: str | HarmonyType,
        generated_names: Sequence[str] = (),
    ) -> str:
        try:
            instruction = build_name_instruction(
                rationale,
                HarmonyType.parse(harmony),
                generated_names,
                generation_id=time.time_ns() // 1_000_000,
                temperature=self.name_temperature,
            )
            return self._call(instruction, self._fresh_name(generated_names))
        except Exception:
            log.exception("palette name regeneration failed; using fallback name")
            return fallback_name(generated_names)

    def regenerate_color_name(
        self, color: str, rationale: str, existing_names: Sequence[str] = ()
    ) -> str:
        try:
            instruction = build_color_name_instruction(
                color,
                rationale,
                existing_names,
                generation_id=time.time_ns() // 1_000_000,
                temperature=self.name_temperature,
            )
            return self._call(instruction, self._fresh_name(existing_names))
        except Exception:
            log.exception("color name regeneration failed; using fallback name")
            return fallback_name(existing_names)

    @staticmethod
    def _fresh_name(avoid: Sequence[str]) -> Callable[[Any], str]:
        taken = {n.strip().lower() for n in avoid}

        def parse(data: Any) -> str:
            name = name_from_payload(data)
            if name.lower() in taken:
                raise MalformedResponseError(f"name {name!r} repeats an earlier one")
            return name

        return parse

    # ---- internals --------------------------------------------------------

    def _call(self, instruction: Instruction, parse: Callable[[Any], Any]) -> Any:
        """Provider call + parse, retried on retryable failures."""
        provider = self.provider
        attempt = 0
        while True:
            attempt += 1
            try:
                return parse(provider.complete(instruction))
            except ExternalServiceError as e:
                log.warning(
                    "%s attempt %d/%d failed: %s",
                    getattr(provider, "name", "provider"),
                    attempt,
                    self.max_attempts,
                    e,
                )
                if not e.retryable or attempt >= self.max_attempts:
                    raise


__all__ = ["PaletteGenerator", "static_fallback", "fallback_name"]
