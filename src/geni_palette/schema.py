# schema.py – palette data model, provider-payload parsing, request validation

from __future__ import annotations

import logging
import re
from typing import Annotated, Any, Literal, Mapping, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from .conversions import HSL, Hex, canon_hex, hex_to_hsl, normalize_hue, same_color
from .errors import InputValidationError, MalformedResponseError
from .harmony import HarmonyType

log = logging.getLogger(__name__)

MIN_COLORS, MAX_COLORS = 3, 8
DEFAULT_COLOR_COUNT = 5
MIN_PROMPT_LEN, MAX_PROMPT_LEN = 3, 200
MIN_RATIONALE_LEN = 10
PALETTE_NAME_LEN = (3, 25)
COLOR_NAME_LEN = (2, 30)
TAG_LEN = (1, 20)
MAX_RATIONALE_WORDS = 70

HEX_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
TWO_WORD_NAME_RE = re.compile(r"^[A-Za-z0-9]+ [A-Za-z0-9]+$")
PROMPT_CHARS_RE = re.compile(r"^[a-zA-Z0-9\s,'\-]+$")
INSTRUCTION_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"\b(create|generate|make|give me|show me|build|add|remove|delete|update|change|modify)\b",
        r"\b(how to|what is|why|when|where|who)\b",
        r"\b(please|can you|could you|would you|will you)\b",
        r"\b(instruction|command|task|action|step|process)\b",
        r"\b(ignore|disregard|forget|override|bypass)\b",
    )
)

Tag = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=TAG_LEN[0], max_length=TAG_LEN[1])
]
Percent = Annotated[float, Field(ge=0, le=100, allow_inf_nan=False)]


def title_case(name: str) -> str:
    return " ".join(w.capitalize() for w in name.split(" "))


# ----------------------------- data model -----------------------------------


class Color(BaseModel):
    """A named color whose hex and HSL describe the same sRGB value."""

    model_config = ConfigDict(frozen=True)

    name: str
    hex: Hex
    hsl: HSL

    @field_validator("hex", mode="before")
    @classmethod
    def canonical_hex(cls, v: Any) -> str:
        return canon_hex(v)

    @model_validator(mode="after")
    def hex_matches_hsl(self) -> "Color":
        if not same_color(self.hex, self.hsl):
            raise ValueError(f"HSL {tuple(self.hsl)} does not describe {self.hex}")
        return self

    @classmethod
    def from_hex(cls, name: str, hex_str: str) -> "Color":
        hx = canon_hex(hex_str)
        return cls(name=name, hex=hx, hsl=hex_to_hsl(hx))


class Palette(BaseModel):
    model_config = ConfigDict(frozen=True)

    palette_name: str
    colors: tuple[Color, ...]
    rationale: str
    tags: tuple[str, ...]
    generated_at: str = ""


# ----------------------------- provider payloads ----------------------------


class HSLPayload(BaseModel):
    h: float = Field(ge=0, le=360, allow_inf_nan=False)
    s: Percent
    l: Percent

    @field_validator("h", "s", "l", mode="before")
    @classmethod
    def plain_number(cls, v: Any) -> Any:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("must be a number")
        return v


class ColorPayload(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=COLOR_NAME_LEN[0], max_length=COLOR_NAME_LEN[1])
    hex: str = Field(pattern=HEX_RE.pattern)
    hsl: HSLPayload

    def to_color(self) -> Color:
        """Hex wins when it disagrees with the given HSL."""
        hx = canon_hex(self.hex)
        hsl = HSL(normalize_hue(self.hsl.h), self.hsl.s, self.hsl.l)
        if not same_color(hx, hsl):
            log.debug("HSL %s disagrees with %s; re-deriving from hex", hsl, hx)
            hsl = hex_to_hsl(hx)
        return Color(name=self.name, hex=hx, hsl=hsl)


class PalettePayload(BaseModel):
    """Shape a provider must answer with for a palette request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    palette_name: str = Field(
        alias="paletteName", min_length=PALETTE_NAME_LEN[0], max_length=PALETTE_NAME_LEN[1]
    )
    colors: list[ColorPayload] = Field(min_length=MIN_COLORS, max_length=MAX_COLORS)
    rationale: str = Field(min_length=1)
    tags: list[Tag] = Field(min_length=3, max_length=8)

    @field_validator("rationale")
    @classmethod
    def short_rationale(cls, v: str) -> str:
        if len(v.split()) >= MAX_RATIONALE_WORDS:
            raise ValueError(f"rationale must be under {MAX_RATIONALE_WORDS} words")
        return v

    def to_palette(self) -> Palette:
        return Palette(
            palette_name=self.palette_name,
            colors=tuple(c.to_color() for c in self.colors),
            rationale=self.rationale,
            tags=tuple(self.tags),
        )


class NamePayload(BaseModel):
    name: str = Field(
        validation_alias=AliasChoices("name", "paletteName"),
        min_length=PALETTE_NAME_LEN[0],
        max_length=PALETTE_NAME_LEN[1],
        pattern=TWO_WORD_NAME_RE.pattern,
    )

    @field_validator("name", mode="before")
    @classmethod
    def collapse_spaces(cls, v: Any) -> Any:
        return " ".join(v.split()) if isinstance(v, str) else v

    @field_validator("name")
    @classmethod
    def titled(cls, v: str) -> str:
        return title_case(v)


# JSON schemas handed to providers alongside the instruction.
PALETTE_JSON_SCHEMA: dict[str, Any] = PalettePayload.model_json_schema(by_alias=True)
NAME_JSON_SCHEMA: dict[str, Any] = NamePayload.model_json_schema(by_alias=True)


def _malformed(e: ValidationError, what: str) -> MalformedResponseError:
    first = e.errors()[0]
    where = ".".join(str(p) for p in first["loc"]) or what
    return MalformedResponseError(f"{what} answer invalid at {where}: {first['msg']}")


def palette_from_payload(data: Any) -> Palette:
    """Validate a provider answer against the palette schema."""
    try:
        return PalettePayload.model_validate(data).to_palette()
    except ValidationError as e:
        raise _malformed(e, "palette") from e


def name_from_payload(data: Any) -> str:
    try:
        return NamePayload.model_validate(data).name
    except ValidationError as e:
        raise _malformed(e, "name") from e


# ----------------------------- request validation ---------------------------


def _parse_harmony(v: Any) -> HarmonyType:
    try:
        return HarmonyType.parse(v)
    except ValueError:
        allowed = ", ".join(h.value for h in HarmonyType)
        raise ValueError(f"Harmony must be one of: {allowed}") from None


class GenerateRequest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    prompt: str
    harmony: HarmonyType
    color_count: int = Field(DEFAULT_COLOR_COUNT, alias="colorCount", ge=MIN_COLORS, le=MAX_COLORS)

    @field_validator("prompt")
    @classmethod
    def describes_a_theme(cls, v: str) -> str:
        v = v.strip()
        if len(v) < MIN_PROMPT_LEN:
            raise ValueError(f"Prompt must be at least {MIN_PROMPT_LEN} characters")
        if len(v) > MAX_PROMPT_LEN:
            raise ValueError(f"Prompt must be {MAX_PROMPT_LEN} characters or less")
        if not PROMPT_CHARS_RE.match(v):
            raise ValueError(
                "Prompt must contain only letters, numbers, spaces, commas, apostrophes, and hyphens"
            )
        if any(p.search(v) for p in INSTRUCTION_PATTERNS):
            raise ValueError("Prompt should describe a mood, theme, or concept.")
        if not re.search(r"[a-zA-Z]", v):
            raise ValueError("Prompt must contain at least one letter")
        return v

    @field_validator("harmony", mode="before")
    @classmethod
    def known_harmony(cls, v: Any) -> HarmonyType:
        return _parse_harmony(v)

    @field_validator("color_count", mode="before")
    @classmethod
    def numeric_count(cls, v: Any) -> Any:
        if v is None:
            return DEFAULT_COLOR_COUNT
        # bools and numeric strings are not counts
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError(
                f"Color count must be an integer between {MIN_COLORS} and {MAX_COLORS}"
            )
        return v


class RegenerateNameRequest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    # kind is declared first so later validators can see it
    kind: Literal["palette", "color"] = Field("palette", alias="type")
    rationale: str = Field(min_length=MIN_RATIONALE_LEN)
    harmony: Optional[HarmonyType] = Field(None, validate_default=True)
    generated_names: tuple[str, ...] = Field(
        (), validation_alias=AliasChoices("generatedNames", "existingNames")
    )
    color: Optional[Hex] = Field(None, validate_default=True)

    @field_validator("kind", mode="before")
    @classmethod
    def default_kind(cls, v: Any) -> Any:
        return v or "palette"

    @field_validator("harmony", mode="before")
    @classmethod
    def harmony_for_palettes(cls, v: Any, info: ValidationInfo) -> Optional[HarmonyType]:
        if info.data.get("kind", "palette") != "palette":
            return None
        return _parse_harmony(v)

    @field_validator("generated_names", mode="before")
    @classmethod
    def no_names(cls, v: Any) -> Any:
        return () if v is None else v

    @field_validator("color", mode="before")
    @classmethod
    def hex_for_colors(cls, v: Any, info: ValidationInfo) -> Optional[str]:
        if info.data.get("kind") != "color":
            return None
        if not isinstance(v, str) or not HEX_RE.match(v.strip()):
            raise ValueError("Invalid hex color format")
        return canon_hex(v)


def _details(e: ValidationError) -> list[dict[str, str]]:
    return [
        {
            "field": str(err["loc"][0]) if err["loc"] else "body",
            "message": err["msg"].removeprefix("Value error, "),
        }
        for err in e.errors()
    ]


def validate_generate_request(payload: Mapping[str, Any]) -> GenerateRequest:
    try:
        return GenerateRequest.model_validate(payload)
    except ValidationError as e:
        raise InputValidationError(_details(e)) from None


def validate_regenerate_request(payload: Mapping[str, Any]) -> RegenerateNameRequest:
    try:
        return RegenerateNameRequest.model_validate(payload)
    except ValidationError as e:
        raise InputValidationError(_details(e)) from None


def check_generation_args(prompt: Any, harmony: Any, color_count: Any) -> GenerateRequest:
    return validate_generate_request(
        {"prompt": prompt, "harmony": harmony, "colorCount": color_count}
    )


__all__ = [
    "Color",
    "Palette",
    "ColorPayload",
    "PalettePayload",
    "NamePayload",
    "GenerateRequest",
    "RegenerateNameRequest",
    "PALETTE_JSON_SCHEMA",
    "NAME_JSON_SCHEMA",
    "TWO_WORD_NAME_RE",
    "DEFAULT_COLOR_COUNT",
    "palette_from_payload",
    "name_from_payload",
    "title_case",
    "validate_generate_request",
    "validate_regenerate_request",
    "check_generation_args",
]
