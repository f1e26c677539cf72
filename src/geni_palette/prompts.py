# prompts.py – instruction templates for the generative provider

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Sequence

from .harmony import HarmonyType, describe_rules
from .schema import NAME_JSON_SCHEMA, PALETTE_JSON_SCHEMA

MAX_INPUT_LEN = 200

_INJECTION_CHARS = re.compile(r"[<>\"'`{}]")
_ROLE_TOKENS = re.compile(r"\b(system|assistant|user):", re.IGNORECASE)
_CODE_BLOCKS = re.compile(r"```[\s\S]*?```")
_MD_LINKS = re.compile(r"\[.*?\]\(.*?\)")


@dataclass(frozen=True)
class Instruction:
    system: str
    user: str
    schema: dict[str, Any] = field(default_factory=dict)
    temperature: float = 0.7


def sanitize_input(text: str) -> str:
    """Strip prompt-injection vectors from user text before it reaches a model."""
    if not isinstance(text, str) or not text.strip():
        raise ValueError("input must be a non-empty string")
    out = text.strip()
    # fences and links go first; dropping backticks would otherwise unfence them
    out = _CODE_BLOCKS.sub("", out)
    out = _MD_LINKS.sub("", out)
    out = _INJECTION_CHARS.sub("", out)
    out = _ROLE_TOKENS.sub("", out)
    return out[:MAX_INPUT_LEN]


def palette_system_prompt(harmony: HarmonyType, color_count: int) -> str:
    h = harmony.value
    return f"""
  You are an expert color palette generator. Generate exactly {color_count} colors following {h} color harmony principles.
  CRITICAL REQUIREMENTS (YOU MUST FOLLOW THESE):
  - Return valid JSON matching the provided schema EXACTLY.
  - Each color MUST include: name, hex (#RRGGBB format), and hsl {{h,s,l}}.
  - Hex MUST correspond to the given HSL values (convert HSL→RGB→HEX accurately).
  - Follow {h} harmony rules with MATHEMATICAL PRECISION.
  - Each color name MUST be EXACTLY TWO WORDS (e.g., "Electric Dreams", "Cosmic Blueberry").
  - Use ONLY alphanumeric characters and spaces in names (no special characters, accents, punctuation, or hyphens).
  - Provide a palette general name (strictly 3–25 characters) as paletteName.
  - Rationale MUST be <70 words, describing the palette WITHOUT mentioning the harmony style.
  - Include 3–8 relevant tags for discoverability.
  - Consider web accessibility (WCAG contrast) and modern design trends.

  DIVERSITY ENFORCEMENT (MANDATORY):
  - NO TWO COLORS may be visually similar or near-duplicates.
  - MINIMUM hue separation as specified in harmony rules (see below).
  - FORBIDDEN: Two colors with |ΔH| < 15°, |ΔS| < 12, AND |ΔL| < 12 simultaneously.

  HARMONY RULES: {describe_rules(harmony, color_count)}

  OUTPUT STRUCTURE:
  - Distribute hues evenly per the harmony (DO NOT cluster colors).
  - Vary S and L strategically to create visual contrast while maintaining harmony.
  - Order colors logically (e.g., by hue progression, lightness gradient, or visual flow).
  """


def build_palette_instruction(
    prompt: str, harmony: HarmonyType, color_count: int, *, temperature: float = 0.7
) -> Instruction:
    theme = sanitize_input(prompt)
    return Instruction(
        system=palette_system_prompt(harmony, color_count),
        user=f'Create a {harmony.value} color palette for: "{theme}"',
        schema=PALETTE_JSON_SCHEMA,
        temperature=temperature,
    )


_NAMING_RULES = """  STRICT NAMING RULES:
  - Name MUST be EXACTLY TWO WORDS separated by a single space
  - Use ONLY alphanumeric characters and spaces (no special characters, accents, or punctuation)
  - Each word should be capitalized (Title Case)
  - Must be COMPLETELY DIFFERENT from these existing names: {existing}
  - Name should reflect this palette theme: "{rationale}"
  - Answer as JSON: {{"name": "<two words>"}}"""


def _existing(names: Sequence[str]) -> str:
    return ", ".join(sanitize_input(n) for n in names if n and n.strip()) or "none yet"


def build_name_instruction(
    rationale: str,
    harmony: HarmonyType,
    generated_names: Sequence[str],
    *,
    generation_id: int,
    temperature: float = 0.95,
) -> Instruction:
    rules = _NAMING_RULES.format(
        existing=_existing(generated_names), rationale=sanitize_input(rationale)
    )
    system = f"""You are a creative palette naming expert. Generate a UNIQUE, creative, and catchy name for a color palette.

{rules}
  - AVOID generic names like "Color Palette", "Nice Colors", "Color Set", "Cool Theme"

  Examples of EXCELLENT names: "Ocean Breeze", "Midnight Garden", "Cosmic Journey", "Urban Twilight"

  Generation ID: {generation_id} - Use this to ensure uniqueness across generations."""
    user = (
        f"Generate a UNIQUE and MEMORABLE TWO-WORD name for this {harmony.value} palette. "
        "Make it evocative and completely original."
    )
    return Instruction(system=system, user=user, schema=NAME_JSON_SCHEMA, temperature=temperature)


def build_color_name_instruction(
    color: str,
    rationale: str,
    existing_names: Sequence[str],
    *,
    generation_id: int,
    temperature: float = 0.95,
) -> Instruction:
    rules = _NAMING_RULES.format(
        existing=_existing(existing_names), rationale=sanitize_input(rationale)
    )
    system = f"""You are a creative color naming expert. Generate a UNIQUE, creative, and funny name for a color.

{rules}
  - AVOID generic names like "Blue Color", "Red One", "Dark Blue", "Light Pink"

  Examples of EXCELLENT names: "Electric Dreams", "Velvet Thunder", "Cosmic Blueberry", "Lavender Haze"

  Generation ID: {generation_id} - Use this to ensure uniqueness across generations."""
    user = (
        f"Generate a UNIQUE and CREATIVE TWO-WORD name for this color: {color}. "
        "Make it memorable and completely different from any existing names."
    )
    return Instruction(system=system, user=user, schema=NAME_JSON_SCHEMA, temperature=temperature)


__all__ = [
    "Instruction",
    "MAX_INPUT_LEN",
    "sanitize_input",
    "palette_system_prompt",
    "build_palette_instruction",
    "build_name_instruction",
    "build_color_name_instruction",
]
