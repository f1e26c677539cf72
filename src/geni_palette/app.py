from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping

from flask import Flask, jsonify, request

from .adjust import ColorControl, adjust_colors
from .config import load_config
from .errors import ConversionError, InputValidationError
from .export import export_code
from .generator import PaletteGenerator
from .harmony import HARMONY_LABELS
from .schema import validate_generate_request, validate_regenerate_request

log = logging.getLogger(__name__)


def _json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise InputValidationError.single("body", "Request body must be a JSON object")
    return body


def _validation_response(exc: InputValidationError, error: str | None = None):
    return (
        jsonify({"error": error or str(exc), "details": exc.details}),
        400,
    )


def palette_response(palette, *, prompt: str, harmony: str) -> dict[str, Any]:
    return {
        "id": str(uuid.uuid4()),
        "paletteName": palette.palette_name,
        "colors": [
            {"color": c.hex, "name": c.name or f"Color {i + 1}"}
            for i, c in enumerate(palette.colors)
        ],
        "metadata": {
            "prompt": prompt,
            "harmony": harmony,
            "rationale": palette.rationale,
            "tags": list(palette.tags),
            "generatedAt": palette.generated_at,
        },
    }


# ----------------------------- Flask app ----------------------------------


def create_app(
    config: Mapping[str, Any] | None = None, generator: PaletteGenerator | None = None
) -> Flask:
    cfg = load_config(overrides=config)
    app = Flask(__name__)
    logging.basicConfig(
        level=getattr(logging, str(cfg["log_level"]).upper(), logging.INFO),
        format="%(levelname)s: %(message)s",
    )
    gen = generator or PaletteGenerator(config=cfg)
    app.extensions["palette_generator"] = gen

    @app.route("/api/harmonies")
    def harmonies():
        return jsonify([{"value": h.value, "label": label} for h, label in HARMONY_LABELS.items()])

    @app.route("/api/generate-palette", methods=["POST"])
    def generate_palette():
        try:
            req = validate_generate_request(_json_body())
        except InputValidationError as e:
            return _validation_response(e)

        try:
            palette = gen.generate_palette(req.prompt, req.harmony, req.color_count)
        except InputValidationError as e:
            return _validation_response(e)
        except Exception as exc:
            log.exception("Palette generation crashed")
            return jsonify({"error": "Failed to generate palette", "message": str(exc)}), 500

        return jsonify(palette_response(palette, prompt=req.prompt, harmony=req.harmony.value))

    @app.route("/api/regenerate-name", methods=["POST"])
    def regenerate_name():
        try:
            req = validate_regenerate_request(_json_body())
        except InputValidationError as e:
            return _validation_response(e, "Validation failed")

        try:
            if req.kind == "color":
                name = gen.regenerate_color_name(req.color, req.rationale, req.generated_names)
            else:
                name = gen.regenerate_name(req.rationale, req.harmony, req.generated_names)
        except Exception as exc:
            log.exception("Name regeneration crashed")
            return jsonify({"error": "Failed to regenerate name", "message": str(exc)}), 500

        return jsonify({"name": name, "type": req.kind})

    @app.route("/api/adjust", methods=["POST"])
    def adjust():
        try:
            body = _json_body()
            colors = body.get("colors")
            if not isinstance(colors, list) or not all(isinstance(c, str) for c in colors):
                raise InputValidationError.single("colors", "colors must be a list of hex strings")
            control = ColorControl(
                brightness=body.get("brightness", 50),
                saturation=body.get("saturation", 50),
                warmth=body.get("warmth", 50),
            )
        except InputValidationError as e:
            return _validation_response(e)
        except ValueError as e:
            return jsonify({"error": str(e), "details": [{"field": "control", "message": str(e)}]}), 400

        return jsonify({"colors": adjust_colors(colors, control)})

    @app.route("/api/export", methods=["POST"])
    def export():
        try:
            body = _json_body()
            colors = body.get("colors")
            if not isinstance(colors, list) or not all(
                isinstance(c, dict) and isinstance(c.get("color"), str) and isinstance(c.get("name"), str)
                for c in colors
            ):
                raise InputValidationError.single(
                    "colors", "colors must be a list of {color, name} objects"
                )
            code = export_code(colors, body.get("style", "css"), body.get("format", "HEX"))
        except InputValidationError as e:
            return _validation_response(e)
        except (ConversionError, ValueError) as e:
            return jsonify({"error": str(e)}), 400

        return jsonify({"code": code})

    return app


if __name__ == "__main__":
    # Production: debug=False; threaded=True is fine for this I/O profile.
    create_app().run(debug=False, threaded=True)
