# export.py – render named colors as Tailwind / CSS snippets

from __future__ import annotations

import re
from typing import Callable, Iterable, Literal, Mapping

from .conversions import canon_hex, hex_to_rgb_string

Format = Literal["HEX", "RGB"]
NamedColor = Mapping[str, str]  # {"color": "#RRGGBB", "name": "Sky Blue"}

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def color_values(item: NamedColor, fmt: Format = "HEX") -> tuple[str, str]:
    """(css-safe variable name, color code in the requested format)."""
    name = _NON_ALNUM.sub("-", item["name"].lower())
    hx = canon_hex(item["color"])
    return name, hx if fmt == "HEX" else hex_to_rgb_string(hx)


def tailwind_v4(colors: Iterable[NamedColor], fmt: Format = "HEX") -> str:
    lines = [f"\t--color-{n}: {c};" for n, c in (color_values(i, fmt) for i in colors)]
    return "\n".join(['@import "tailwindcss";', "", "@theme inline {", *lines, "}"])


def tailwind_v3(colors: Iterable[NamedColor], fmt: Format = "HEX") -> str:
    lines = [f"        '{n}': '{c}'," for n, c in (color_values(i, fmt) for i in colors)]
    return "\n".join(
        [
            "module.exports = {",
            "  theme: {",
            "    extend: {",
            "      colors: {",
            *lines,
            "      }",
            "    }",
            "  }",
            "}",
        ]
    )


def css_variables(colors: Iterable[NamedColor], fmt: Format = "HEX") -> str:
    lines = [f"  --color-{n}: {c};" for n, c in (color_values(i, fmt) for i in colors)]
    return "\n".join([":root {", *lines, "}"])


EXPORTERS: Mapping[str, Callable[[Iterable[NamedColor], Format], str]] = {
    "tailwind-v4": tailwind_v4,
    "tailwind-v3": tailwind_v3,
    "css": css_variables,
}


def export_code(colors: Iterable[NamedColor], style: str = "css", fmt: str = "HEX") -> str:
    fmt_u = (fmt or "HEX").upper()
    if fmt_u not in ("HEX", "RGB"):
        raise ValueError(f"unknown color format '{fmt}'")
    try:
        render = EXPORTERS[(style or "css").lower()]
    except KeyError:
        raise ValueError(f"unknown export style '{style}'") from None
    return render(list(colors), fmt_u)


__all__ = ["tailwind_v4", "tailwind_v3", "css_variables", "export_code", "EXPORTERS"]
