"""
Tests for the tokenbridge REST API.

Tests cover:
- Root and health endpoints
- API key handling
- Token listing and lookup
- Analyze and transform endpoints
- Style map and style config endpoints
"""

import pytest
from fastapi.testclient import TestClient

from tokenbridge.api.main import app, state
from tokenbridge.config import TransformerConfig


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        state.config = TransformerConfig(max_workers=1)
        yield test_client
    state.config = None
    state.catalog = None


@pytest.fixture
def sample_payload(sample_component):
    return {"files": [sample_component.to_dict()]}


class TestRootAndHealth:
    """Test unauthenticated endpoints."""

    def test_root(self, client):
        data = client.get("/").json()
        assert data["name"] == "tokenbridge API"
        assert data["docs"] == "/docs"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["catalog"] == {
            "loaded": True,
            "tokens": {"color": 50, "border_radius": 5, "shadow": 7, "typography": 15},
        }

    def test_health_ignores_api_keys(self, client, monkeypatch):
        monkeypatch.setenv("TOKENBRIDGE_API_KEYS", "secret")
        assert client.get("/health").status_code == 200


class TestApiKeys:
    """Test X-API-Key handling."""

    def test_open_without_configured_keys(self, client):
        assert client.get("/api/v1/tokens/color").status_code == 200

    def test_missing_key(self, client, monkeypatch):
        monkeypatch.setenv("TOKENBRIDGE_API_KEYS", "one, two")
        response = client.get("/api/v1/tokens/color")
        assert response.status_code == 401
        assert response.json()["detail"] == "Missing API key"

    def test_invalid_key(self, client, monkeypatch):
        monkeypatch.setenv("TOKENBRIDGE_API_KEYS", "one,two")
        response = client.get("/api/v1/tokens/color", headers={"X-API-Key": "three"})
        assert response.status_code == 403

    def test_valid_key(self, client, monkeypatch):
        monkeypatch.setenv("TOKENBRIDGE_API_KEYS", "one,two")
        response = client.get("/api/v1/tokens/color", headers={"X-API-Key": "two"})
        assert response.status_code == 200


class TestTokens:
    """Test catalog endpoints."""

    def test_list_category(self, client):
        data = client.get("/api/v1/tokens/border_radius").json()
        assert data["category"] == "border_radius"
        assert data["count"] == 5
        assert data["tokens"][1]["name"] == "radius-2xs"
        assert data["tokens"][1]["css_var"] == "var(--radius-2xs)"

    def test_unknown_category(self, client):
        assert client.get("/api/v1/tokens/spacing").status_code == 422

    def test_lookup_by_name(self, client):
        data = client.get("/api/v1/tokens/color/olivia-blue").json()
        assert data["value"] == "#25C9D0"
        assert data["accessor"] == "getColorValue('olivia-blue')"
        assert data["classes"] == []

    def test_lookup_by_alias(self, client):
        data = client.get("/api/v1/tokens/color/Olivia Blue").json()
        assert data["name"] == "olivia-blue"

    def test_typography_classes(self, client):
        data = client.get("/api/v1/tokens/typography/text-headline-h1").json()
        assert data["category"] == "typography"
        assert data["classes"]

    def test_lookup_missing(self, client):
        response = client.get("/api/v1/tokens/shadow/huge")
        assert response.status_code == 404
        assert response.json()["detail"] == "No shadow token named 'huge'"


class TestAnalyze:
    """Test POST /api/v1/analyze."""

    def test_sample_component(self, client, sample_payload):
        response = client.post("/api/v1/analyze", json=sample_payload)
        assert response.status_code == 200
        data = response.json()
        assert data["colors"] == ["#555555"]
        assert data["border_radii"] == ["rounded-[8px]", "12px"]
        assert data["files_analyzed"] == ["src/components/Button/Button.tsx"]

    def test_files_required(self, client):
        assert client.post("/api/v1/analyze", json={}).status_code == 422

    def test_empty_path_rejected(self, client):
        response = client.post("/api/v1/analyze", json={"files": [{"name": "A.tsx", "path": "", "content": ""}]})
        assert response.status_code == 422


class TestTransform:
    """Test POST /api/v1/transform."""

    def test_sample_component(self, client, sample_payload):
        response = client.post("/api/v1/transform", json=sample_payload)
        assert response.status_code == 200
        data = response.json()
        assert data["summary"] == {
            "colors_transformed": 2,
            "border_radii_transformed": 2,
            "shadows_transformed": 1,
            "typography_transformed": 1,
            "classes_transformed": 4,
            "token_imports_transformed": 0,
        }
        assert "bg-olivia-blue" in data["files"][0]["content"]
        assert data["results"][0]["changed"] is True
        assert data["diff"] is None

    def test_css_var_override_and_diff(self, client, sample_payload):
        payload = dict(sample_payload, style_object_reference="css_var", include_diff=True)
        data = client.post("/api/v1/transform", json=payload).json()
        assert "color: 'var(--color-neutral-charcoal)'" in data["files"][0]["content"]
        assert data["diff"].startswith("--- a/src/components/Button/Button.tsx")

    def test_restricted_to_analysis(self, client, sample_payload):
        payload = dict(sample_payload, analysis={"border_radii": ["rounded-[8px]"]})
        data = client.post("/api/v1/transform", json=payload).json()
        assert data["summary"]["border_radii_transformed"] == 1
        assert data["summary"]["colors_transformed"] == 0
        assert "bg-[#25C9D0]" in data["files"][0]["content"]

    def test_invalid_reference_form(self, client, sample_payload):
        payload = dict(sample_payload, style_object_reference="inline")
        assert client.post("/api/v1/transform", json=payload).status_code == 422

    def test_legacy_token_import(self, client):
        content = "import { colors } from '../design-system/tokens';\nconst s = { color: colors.oliviaBlue };\n"
        payload = {
            "files": [{"name": "Card.tsx", "path": "src/Card.tsx", "content": content}],
            "analysis": {"token_imports": [{"source": "../design-system/tokens", "tokens": ["colors"]}]},
        }
        data = client.post("/api/v1/transform", json=payload).json()
        assert data["summary"]["token_imports_transformed"] == 1
        assert "getColorValue('olivia-blue')" in data["files"][0]["content"]


class TestStyleConfig:
    """Test style map and generated config endpoints."""

    def test_style_map(self, client):
        data = client.get("/api/v1/style-map").json()
        assert data["borderRadius"]["2xs"] == "4px"
        assert data["colors"]["olivia-blue"] == "#25C9D0"

    def test_tailwind(self, client):
        data = client.get("/api/v1/style-config/tailwind").json()
        assert data["theme"]["extend"]["borderRadius"]["xs"] == "8px"

    def test_css(self, client):
        response = client.get("/api/v1/style-config/css")
        assert response.status_code == 200
        assert response.text.startswith(":root {")
