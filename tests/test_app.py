import pytest

from geni_palette.app import create_app
from geni_palette.config import load_config
from geni_palette.errors import ExternalServiceError
from geni_palette.generator import PaletteGenerator

PALETTE = {
    "paletteName": "Citrus Riot",
    "colors": [
        {"name": "Lemon Zest", "hex": "#FFFF00", "hsl": {"h": 60, "s": 100, "l": 50}},
        {"name": "Lime Punch", "hex": "#00FF00", "hsl": {"h": 120, "s": 100, "l": 50}},
        {"name": "Deep Sea", "hex": "#0000FF", "hsl": {"h": 240, "s": 100, "l": 50}},
    ],
    "rationale": "Loud fruit colors with a cool dive to keep them honest.",
    "tags": ["citrus", "bold", "summer"],
}


class ScriptedProvider:
    name = "scripted"

    def __init__(self, answer):
        self.answer = answer
        self.calls = 0

    def complete(self, instruction):
        self.calls += 1
        if isinstance(self.answer, Exception):
            raise self.answer
        return self.answer


def client_for(answer):
    provider = ScriptedProvider(answer)
    gen = PaletteGenerator(provider=provider, config=load_config(env={}))
    app = create_app(config={"log_level": "WARNING"}, generator=gen)
    app.config["TESTING"] = True
    return app.test_client(), provider


@pytest.fixture
def client():
    c, _ = client_for(PALETTE)
    return c


def test_harmonies(client):
    resp = client.get("/api/harmonies")
    assert resp.status_code == 200
    values = [h["value"] for h in resp.get_json()]
    assert len(values) == 6
    assert "split_complementary" in values


def test_generate_palette(client):
    resp = client.post(
        "/api/generate-palette",
        json={"prompt": "summer citrus market", "harmony": "triadic", "colorCount": 3},
    )
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["paletteName"] == "Citrus Riot"
    assert [c["color"] for c in body["colors"]] == ["#FFFF00", "#00FF00", "#0000FF"]
    assert body["colors"][0]["name"] == "Lemon Zest"
    assert body["metadata"]["harmony"] == "triadic"
    assert body["metadata"]["prompt"] == "summer citrus market"
    assert body["metadata"]["tags"] == ["citrus", "bold", "summer"]
    assert body["metadata"]["generatedAt"]
    assert body["id"]


def test_generate_palette_validation(client):
    resp = client.post(
        "/api/generate-palette",
        json={"prompt": "summer citrus market", "harmony": "triadic", "colorCount": 9},
    )
    assert resp.status_code == 400
    body = resp.get_json()
    assert [d["field"] for d in body["details"]] == ["colorCount"]


def test_generate_palette_provider_down_serves_fallback():
    client, provider = client_for(ExternalServiceError("down", provider="scripted"))
    resp = client.post(
        "/api/generate-palette",
        json={"prompt": "summer citrus market", "harmony": "analogous", "colorCount": 5},
    )
    assert resp.status_code == 200
    assert resp.get_json()["paletteName"] == "Geni on Vacation"
    assert provider.calls == 2


def test_non_json_body(client):
    resp = client.post("/api/generate-palette", data="prompt=hi", content_type="text/plain")
    assert resp.status_code == 400
    assert resp.get_json()["details"][0]["field"] == "body"


def test_regenerate_name():
    client, _ = client_for({"name": "solar jam"})
    resp = client.post(
        "/api/regenerate-name",
        json={
            "rationale": "Loud fruit colors with a cool dive",
            "harmony": "triadic",
            "generatedNames": ["Citrus Riot"],
        },
    )
    assert resp.status_code == 200
    assert resp.get_json() == {"name": "Solar Jam", "type": "palette"}


def test_regenerate_name_validation(client):
    resp = client.post("/api/regenerate-name", json={"rationale": "short", "harmony": "triadic"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Validation failed"


def test_adjust(client):
    resp = client.post("/api/adjust", json={"colors": ["#808080"], "brightness": 100})
    assert resp.status_code == 200
    assert resp.get_json() == {"colors": ["#C0C0C0"]}

    resp = client.post("/api/adjust", json={"colors": ["#808080"], "warmth": 130})
    assert resp.status_code == 400


def test_export(client):
    resp = client.post(
        "/api/export",
        json={"colors": [{"color": "#4FACFE", "name": "Sky Blue"}], "style": "css"},
    )
    assert resp.status_code == 200
    assert resp.get_json()["code"] == ":root {\n  --color-sky-blue: #4FACFE;\n}"

    resp = client.post(
        "/api/export",
        json={"colors": [{"color": "#4FACFE", "name": "Sky Blue"}], "style": "sass"},
    )
    assert resp.status_code == 400


def test_regenerate_color_name_without_harmony():
    client, provider = client_for({"name": "lemon riot"})
    resp = client.post(
        "/api/regenerate-name",
        json={"type": "color", "color": "#ffff00", "rationale": "Loud fruit colors with a cool dive"},
    )
    assert resp.status_code == 200
    assert resp.get_json() == {"name": "Lemon Riot", "type": "color"}
    assert provider.calls == 1
