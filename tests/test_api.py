"""Tests for the FastAPI palette routes."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from promo_kit.api.app import app
from promo_kit.config import settings


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def test_empty_images_return_neutral_palette(client):
    resp = client.post("/api/palette", json={"images": [], "k": 3})
    assert resp.status_code == 200
    body = resp.json()
    assert body["palette"] == ["#c8c8c8"] * 3
    assert body["roles"] == {"primary": "#c8c8c8", "accent": "#c8c8c8", "neutral": "#c8c8c8"}
    assert body["theme"]["--brand"] == "#c8c8c8"


def test_default_k(client):
    resp = client.post("/api/palette", json={"images": []})
    assert resp.json()["palette"] == ["#c8c8c8"] * 5


def test_invalid_k_is_400(client):
    resp = client.post("/api/palette", json={"images": [], "k": 0})
    assert resp.status_code == 400
    assert "cluster count" in resp.json()["detail"]


def test_local_paths_are_rejected(client):
    resp = client.post("/api/palette", json={"images": ["/etc/passwd"], "k": 2})
    assert resp.status_code == 400


def test_data_url_images(client, solid_data_url):
    resp = client.post(
        "/api/palette",
        json={"images": [solid_data_url((255, 0, 0)), solid_data_url((0, 0, 255))], "k": 2},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert sorted(body["palette"]) == ["#0000ff", "#ff0000"]
    assert body["roles"]["primary"] in body["palette"]


def test_upload(client, solid_png):
    files = [("files", ("red.png", solid_png((255, 0, 0)), "image/png"))]
    resp = client.post("/api/palette/upload", data={"k": "2"}, files=files)
    assert resp.status_code == 200
    assert resp.json()["palette"] == ["#ff0000", "#ff0000"]


def test_upload_unreadable_file_degrades_to_gray(client):
    files = [("files", ("notes.txt", b"hello", "text/plain"))]
    resp = client.post("/api/palette/upload", data={"k": "1"}, files=files)
    assert resp.status_code == 200
    assert resp.json()["palette"] == ["#c8c8c8"]


def test_roles_fallback(client):
    resp = client.post("/api/roles", json={"palette": []})
    assert resp.status_code == 200
    assert resp.json()["roles"] == {"primary": "#5468ff", "accent": "#ff4d6d", "neutral": "#111827"}
    assert resp.json()["theme"] == {"--brand": "#5468ff", "--accent": "#ff4d6d", "--neutral": "#111827"}


def test_roles_bad_color_is_400(client):
    resp = client.post("/api/roles", json={"palette": ["#ff0000", "nope"]})
    assert resp.status_code == 400


def test_swatches_png(client):
    resp = client.post("/api/palette/swatches.png", json={"palette": ["#ff0000", "#00ffff"]})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"
    assert resp.content.startswith(b"\x89PNG")


def test_index_page(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "Palette" in resp.text


def test_preview_page(client, solid_data_url):
    resp = client.post("/palette/preview", data={"urls": solid_data_url((255, 0, 0)), "k": "1"})
    assert resp.status_code == 200
    assert "#ff0000" in resp.text
    assert "BRAND" in resp.text


def test_preview_invalid_k(client):
    resp = client.post("/palette/preview", data={"urls": "", "k": "0"})
    assert resp.status_code == 400


def test_k_above_http_cap_is_400(client, solid_data_url):
    resp = client.post("/api/palette", json={"images": [solid_data_url((255, 0, 0))], "k": 200_000})
    assert resp.status_code == 400
    assert "<=" in resp.json()["detail"]


def test_k_at_http_cap_is_accepted(client):
    resp = client.post("/api/palette", json={"images": [], "k": settings.palette_max_k})
    assert resp.status_code == 200
    assert len(resp.json()["palette"]) == settings.palette_max_k


def test_upload_k_above_cap_is_400(client, solid_png):
    files = [("files", ("red.png", solid_png((255, 0, 0)), "image/png"))]
    resp = client.post("/api/palette/upload", data={"k": "100000"}, files=files)
    assert resp.status_code == 400


def test_upload_default_k_comes_from_settings(client, solid_png):
    files = [("files", ("red.png", solid_png((255, 0, 0)), "image/png"))]
    resp = client.post("/api/palette/upload", files=files)
    assert resp.status_code == 200
    assert len(resp.json()["palette"]) == settings.palette_default_k


def test_oversize_upload_is_skipped(client, solid_png, monkeypatch):
    monkeypatch.setattr(settings, "image_max_bytes", 10)
    files = [("files", ("red.png", solid_png((255, 0, 0)), "image/png"))]
    resp = client.post("/api/palette/upload", data={"k": "1"}, files=files)
    assert resp.status_code == 200
    assert resp.json()["palette"] == ["#c8c8c8"]
