"""Tests for media upload endpoints."""

import pytest
from httpx import AsyncClient

from app.config import settings
from app.services.uploads import make_filename, resolve_category

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.mark.unit
class TestUploadHelpers:

    def test_unknown_category_falls_back_to_misc(self):
        assert resolve_category("growth") == "growth"
        assert resolve_category("../etc") == "misc"
        assert resolve_category(None) == "misc"

    def test_filename_keeps_extension(self):
        assert make_filename("茶园.JPG").endswith(".JPG")
        assert "." not in make_filename("noext")


@pytest.mark.api
@pytest.mark.asyncio
class TestUploadEndpoints:

    async def test_upload_media(self, auth_client: AsyncClient, uploads_dir):
        response = await auth_client.post(
            "/api/upload",
            files={"media": ("leaf.png", PNG_BYTES, "image/png")},
            data={"category": "growth"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["url"] == f"/uploads/growth/{data['filename']}"
        assert data["originalName"] == "leaf.png"
        assert data["size"] == len(PNG_BYTES)
        assert data["mimetype"] == "image/png"
        assert (uploads_dir / "growth" / data["filename"]).read_bytes() == PNG_BYTES

    async def test_rejects_unsupported_type(self, auth_client: AsyncClient, uploads_dir):
        response = await auth_client.post(
            "/api/upload", files={"media": ("notes.txt", b"hello", "text/plain")}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "UNSUPPORTED_FILE_TYPE"

    async def test_no_file(self, auth_client: AsyncClient):
        response = await auth_client.post("/api/upload", data={"category": "growth"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "NO_FILE"

    async def test_too_large(self, auth_client: AsyncClient, uploads_dir, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_bytes", 10)

        response = await auth_client.post(
            "/api/upload", files={"media": ("leaf.png", PNG_BYTES, "image/png")}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "FILE_TOO_LARGE"
        assert list((uploads_dir / "misc").iterdir()) == []

    async def test_upload_image_full_url(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/upload-image",
            files={"image": ("cover.png", PNG_BYTES, "image/png")},
            data={"category": "products"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["fullUrl"] == f"http://test{data['url']}"
        assert data["category"] == "products"

    async def test_weather_icon_svg_only(self, auth_client: AsyncClient, uploads_dir):
        svg = b'<svg xmlns="http://www.w3.org/2000/svg"/>'

        ok = await auth_client.post(
            "/api/weather-templates/upload-icon",
            files={"svg_file": ("sun.svg", svg, "image/svg+xml")},
        )
        rejected = await auth_client.post(
            "/api/weather-templates/upload-icon",
            files={"svg_file": ("sun.png", PNG_BYTES, "image/png")},
        )

        assert ok.status_code == 200
        assert ok.json()["data"]["url"].startswith("/uploads/weather/")
        assert ok.json()["data"]["originalName"] == "sun.svg"
        assert rejected.status_code == 400
