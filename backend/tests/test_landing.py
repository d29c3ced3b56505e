"""Tests for plots, CTA background and footer settings."""

import pytest
from httpx import AsyncClient


async def _plot(client: AsyncClient, name: str = "云雾山茶园") -> dict:
    response = await client.post("/api/plots", json={"name": name})
    assert response.status_code == 201
    return response.json()


@pytest.mark.api
@pytest.mark.asyncio
class TestPlots:
    """Plot carousel and info list editing."""

    async def test_create_plot(self, auth_client: AsyncClient):
        plot = await _plot(auth_client)

        assert plot["_id"] == plot["id"]
        assert plot["carousel_images"] == []
        assert plot["categories"] == []

    async def test_duplicate_name(self, auth_client: AsyncClient):
        await _plot(auth_client)

        response = await auth_client.post("/api/plots", json={"name": "云雾山茶园"})

        assert response.status_code == 400

    async def test_add_and_remove_image(self, auth_client: AsyncClient):
        plot = await _plot(auth_client)
        url = "https://cdn.example.com/garden.jpg"

        response = await auth_client.post(f"/api/plots/{plot['id']}/images", json={"image_url": url})
        assert response.json()["carousel_images"] == [url]

        response = await auth_client.post(f"/api/plots/{plot['id']}/images", json={"image_url": url})
        assert response.status_code == 400

        response = await auth_client.request(
            "DELETE", f"/api/plots/{plot['id']}/images", json={"image_url": url}
        )
        assert response.json()["carousel_images"] == []

        response = await auth_client.request(
            "DELETE", f"/api/plots/{plot['id']}/images", json={"image_url": url}
        )
        assert response.status_code == 404

    async def test_image_must_be_absolute_url(self, auth_client: AsyncClient):
        plot = await _plot(auth_client)

        response = await auth_client.post(
            f"/api/plots/{plot['id']}/images", json={"image_url": "/uploads/landing/a.jpg"}
        )

        assert response.status_code == 400

    async def test_info_list(self, auth_client: AsyncClient):
        plot = await _plot(auth_client)
        info = [{"icon": "⛰", "label": "海拔", "value": "1200m"}]

        response = await auth_client.put(f"/api/plots/{plot['id']}/info", json={"info_list": info})
        assert response.json()["info_list"] == info

        response = await auth_client.put(
            f"/api/plots/{plot['id']}/info", json={"info_list": [{"icon": ""}]}
        )
        assert response.status_code == 400

    async def test_replace_carousel(self, auth_client: AsyncClient):
        plot = await _plot(auth_client)

        response = await auth_client.put(
            f"/api/plots/{plot['id']}/carousel", json={"carousel_images": ["a.jpg", "b.jpg"]}
        )
        assert response.json()["carousel_images"] == ["a.jpg", "b.jpg"]

        response = await auth_client.put(
            f"/api/plots/{plot['id']}/carousel", json={"carousel_images": ["a.jpg", ""]}
        )
        assert response.status_code == 400

    async def test_delete_plot(self, auth_client: AsyncClient):
        plot = await _plot(auth_client)

        assert (await auth_client.delete(f"/api/plots/{plot['id']}")).status_code == 200
        assert (await auth_client.get("/api/plots")).json() == []


@pytest.mark.api
@pytest.mark.asyncio
class TestSiteSettings:

    async def test_cta_background_default(self, auth_client: AsyncClient):
        response = await auth_client.get("/api/settings/cta-background")

        assert response.json() == {"key": "cta_background_image", "value": "", "description": ""}

    async def test_set_cta_background(self, auth_client: AsyncClient):
        url = "https://cdn.example.com/cta.jpg"

        response = await auth_client.post("/api/settings/cta-background", json={"value": url})

        assert response.status_code == 200
        setting = response.json()
        assert setting["value"] == url
        assert setting["category"] == "ui"
        assert setting["data_type"] == "url"
        assert setting["is_public"] is True
        assert setting["description"] == "云养茶园CTA区域背景图"

        response = await auth_client.get("/api/settings/cta-background")
        assert response.json()["value"] == url

    async def test_cta_background_rejects_relative_url(self, auth_client: AsyncClient):
        response = await auth_client.post("/api/settings/cta-background", json={"value": "cta.jpg"})

        assert response.status_code == 400

    async def test_footer_round_trip(self, auth_client: AsyncClient):
        footer = {
            "logo_url": "https://cdn.example.com/logo.png",
            "garden_name": "云雾山茶园",
            "copyright_text": "© 2024",
            "social_links": [{"platform": "wechat", "url": "https://example.com/wx"}],
        }

        response = await auth_client.post("/api/settings/footer", json=footer)
        assert response.json() == footer

        response = await auth_client.get("/api/settings/footer")
        assert response.json() == footer

        keys = [setting["key"] for setting in (await auth_client.get("/api/settings")).json()]
        assert set(keys) == {
            "footer_logo_url", "footer_garden_name", "footer_copyright_text", "social_links",
        }

    async def test_footer_rejects_bad_links(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/settings/footer", json={"social_links": [{"platform": "weibo"}]}
        )

        assert response.status_code == 400

    async def test_footer_defaults(self, auth_client: AsyncClient):
        response = await auth_client.get("/api/settings/footer")

        assert response.json() == {
            "logo_url": "", "garden_name": "", "copyright_text": "", "social_links": [],
        }
