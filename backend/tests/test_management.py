"""Tests for grades, personnel, weather templates, adoption plans and content templates."""

import pytest
from httpx import AsyncClient

from app.services.personnel import clamp_experience


@pytest.mark.unit
class TestClampExperience:

    @pytest.mark.parametrize(
        "value,expected",
        [
            (3.6, 4),
            (2.5, 3),
            (0.5, 1),
            (-2, 0),
            (150, 100),
            (float("inf"), 100),
            (float("-inf"), 0),
            (float("nan"), 0),
            (None, 0),
            ("junk", 0),
            ("7", 7),
        ],
    )
    def test_clamp(self, value, expected):
        assert clamp_experience(value) == expected


@pytest.mark.api
@pytest.mark.asyncio
class TestGrades:

    async def test_crud(self, auth_client: AsyncClient):
        grade = (await auth_client.post("/api/grades", json={"name": "特级"})).json()

        response = await auth_client.put(
            f"/api/grades/{grade['id']}", json={"badge_url": "https://cdn.example.com/b.svg"}
        )
        assert response.json()["badge_url"] == "https://cdn.example.com/b.svg"
        assert response.json()["name"] == "特级"

        assert (await auth_client.delete(f"/api/grades/{grade['id']}")).status_code == 200
        assert (await auth_client.get("/api/grades")).json() == []

    async def test_duplicate_name(self, auth_client: AsyncClient):
        await auth_client.post("/api/grades", json={"name": "一级"})
        other = (await auth_client.post("/api/grades", json={"name": "二级"})).json()

        assert (await auth_client.post("/api/grades", json={"name": "一级"})).status_code == 400
        response = await auth_client.put(f"/api/grades/{other['id']}", json={"name": "一级"})
        assert response.status_code == 400


@pytest.mark.api
@pytest.mark.asyncio
class TestPersonnel:

    async def test_chinese_role_labels(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/personnel", json={"name": " 李师傅 ", "role": "制茶师", "experience_years": 30.4}
        )

        assert response.status_code == 201
        person = response.json()
        assert person["name"] == "李师傅"
        assert person["role"] == "TEA_MASTER"
        assert person["experience_years"] == 30

    async def test_overflowing_experience_is_clamped(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/personnel",
            content='{"name": "李师傅", "role": "制茶师", "experience_years": 1e400}'.encode(),
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 201
        assert response.json()["experience_years"] == 100

    async def test_invalid_role(self, auth_client: AsyncClient):
        response = await auth_client.post("/api/personnel", json={"name": "x", "role": "厨师"})

        assert response.status_code == 400

    async def test_role_filter(self, auth_client: AsyncClient):
        await auth_client.post("/api/personnel", json={"name": "张三", "role": "记录人"})
        await auth_client.post("/api/personnel", json={"name": "王五", "role": "采摘队长"})

        recorders = (await auth_client.get("/api/personnel", params={"role": "recorder"})).json()
        everyone = (await auth_client.get("/api/personnel", params={"role": "gardener"})).json()

        assert [p["name"] for p in recorders] == ["张三"]
        assert len(everyone) == 2

    async def test_update(self, auth_client: AsyncClient):
        person = (await auth_client.post(
            "/api/personnel", json={"name": "张三", "role": "记录人"}
        )).json()

        response = await auth_client.put(
            f"/api/personnel/{person['id']}", json={"role": "HARVEST_LEAD"}
        )

        assert response.json()["role"] == "HARVEST_LEAD"
        assert response.json()["name"] == "张三"


@pytest.mark.api
@pytest.mark.asyncio
class TestWeatherTemplates:

    async def test_create_and_filter(self, auth_client: AsyncClient):
        sunny = (await auth_client.post(
            "/api/weather-templates", json={"name": "晴", "svg_icon": "<svg/>", "sort_order": 1}
        )).json()
        await auth_client.post(
            "/api/weather-templates", json={"name": "雪", "sort_order": 2, "is_active": False}
        )

        assert sunny["is_active"] is True
        everything = (await auth_client.get("/api/weather-templates")).json()
        active = (await auth_client.get(
            "/api/weather-templates", params={"active_only": "true"}
        )).json()
        assert [t["name"] for t in everything] == ["晴", "雪"]
        assert [t["name"] for t in active] == ["晴"]

    async def test_duplicate_name(self, auth_client: AsyncClient):
        await auth_client.post("/api/weather-templates", json={"name": "阴"})

        response = await auth_client.post("/api/weather-templates", json={"name": "阴"})

        assert response.status_code == 400


@pytest.mark.api
@pytest.mark.asyncio
class TestAdoptionPlans:
    """Plans are addressed by lowercase type and created on first read."""

    async def test_default_plan(self, auth_client: AsyncClient):
        response = await auth_client.get("/api/adoption-plans/private")

        plan = response.json()
        assert plan["type"] == "PRIVATE"
        assert plan["marketing_header"] == {"title": "", "subtitle": "", "description": ""}
        assert plan["packages"] == []

    async def test_update_keeps_type_fields_only(self, auth_client: AsyncClient):
        response = await auth_client.put(
            "/api/adoption-plans/enterprise",
            json={"service_contents": [{"title": "定制茶礼"}], "packages": [{"name": "x"}]},
        )

        plan = response.json()
        assert plan["service_contents"] == [{"title": "定制茶礼"}]
        assert plan["packages"] is None

    async def test_update_b2b(self, auth_client: AsyncClient):
        response = await auth_client.put("/api/adoption-plans/B2B", json={"description": "批发合作"})

        assert response.json()["description"] == "批发合作"

    async def test_no_fields_for_type(self, auth_client: AsyncClient):
        response = await auth_client.put("/api/adoption-plans/b2b", json={"packages": []})

        assert response.status_code == 400

    async def test_unknown_type(self, auth_client: AsyncClient):
        assert (await auth_client.get("/api/adoption-plans/vip")).status_code == 400


@pytest.mark.api
@pytest.mark.asyncio
class TestContentTemplates:

    async def test_step_templates_in_production_order(self, auth_client: AsyncClient):
        await auth_client.put("/api/step-templates/干燥", json={"manual_craft": {"method": "炭焙"}})
        await auth_client.put("/api/step-templates/摊晾", json={})

        templates = (await auth_client.get("/api/step-templates")).json()

        assert [t["step_name"] for t in templates] == ["摊晾", "干燥"]
        assert templates[1]["manual_craft"] == {
            "purpose": "", "method": "炭焙", "sensory_change": "", "value": "",
        }

    async def test_unknown_step(self, auth_client: AsyncClient):
        response = await auth_client.put("/api/step-templates/烘焙", json={})

        assert response.status_code == 400

    async def test_title_templates_bulk_upsert(self, auth_client: AsyncClient):
        body = {"templates": [{"category_name": "明前茶", "title_template": "{year}明前"}]}
        await auth_client.post("/api/title-templates", json=body)
        body["templates"][0]["title_template"] = "{year}年明前"

        saved = (await auth_client.post("/api/title-templates", json=body)).json()

        assert saved[0]["title_template"] == "{year}年明前"
        assert len((await auth_client.get("/api/title-templates")).json()) == 1

    async def test_title_templates_validation(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/title-templates", json={"templates": [{"category_name": "明前茶"}]}
        )

        assert response.status_code == 400

    async def test_appreciation_templates(self, auth_client: AsyncClient):
        response = await auth_client.put(
            "/api/appreciation-templates/明前茶", json={"tasting_notes": "鲜爽"}
        )
        assert response.json()["brewing_suggestion"] == ""

        assert (await auth_client.delete("/api/appreciation-templates/明前茶")).status_code == 200
        assert (await auth_client.delete("/api/appreciation-templates/明前茶")).status_code == 404
