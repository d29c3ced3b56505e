"""Tests for daily growth log endpoints and helpers."""

import pytest
from httpx import AsyncClient

from app.models.growth_log import FarmActivityType
from app.services.growth_logs import build_status_tag, normalize_farm_activity_type


@pytest.mark.unit
class TestFarmActivity:
    """Labels with or without an emoji prefix map to the enum."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("施肥", FarmActivityType.FERTILIZE),
            ("🌱 施肥", FarmActivityType.FERTILIZE),
            ("HARVEST", FarmActivityType.HARVEST),
            ("无", FarmActivityType.NONE),
            ("", FarmActivityType.NONE),
            (None, FarmActivityType.NONE),
            ("除草", FarmActivityType.NONE),
        ],
    )
    def test_normalize(self, value, expected):
        assert normalize_farm_activity_type(value) == expected

    def test_status_tags(self):
        assert build_status_tag("异常")["priority"] == 10
        assert build_status_tag("HARVEST")["text"] == "采摘"
        assert build_status_tag("除草") == {
            "priority": 1, "type": "info", "text": "除草", "color": "#6c757d",
        }
        assert build_status_tag("无") is None
        assert build_status_tag(None) is None


@pytest.mark.api
@pytest.mark.asyncio
class TestCreateGrowthLog:
    """One log per calendar day."""

    async def test_create(self, auth_client: AsyncClient):
        recorder = (await auth_client.post(
            "/api/personnel", json={"name": "张三", "role": "记录人"}
        )).json()

        response = await auth_client.post(
            "/api/growth-logs",
            json={
                "date": "2024-04-05",
                "recorder_name": "张三",
                "farm_activity_type": "🌱 施肥",
                "summary": "新芽萌发",
            },
        )

        assert response.status_code == 201
        log = response.json()
        assert log["farm_activity_type"] == "FERTILIZE"
        assert log["status_tag"]["text"] == "施肥"
        assert log["recorder_id"] == recorder["id"]
        assert log["recorder"]["name"] == "张三"

    async def test_duplicate_day(self, auth_client: AsyncClient):
        first = (await auth_client.post("/api/growth-logs", json={"date": "2024-04-05"})).json()

        response = await auth_client.post(
            "/api/growth-logs", json={"date": "2024-04-05T15:30:00"}
        )

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "DUPLICATE_GROWTH_LOG"
        assert error["details"]["existingLogId"] == first["id"]

    async def test_date_required(self, auth_client: AsyncClient):
        response = await auth_client.post("/api/growth-logs", json={"summary": "x"})

        assert response.status_code == 400

    async def test_unknown_recorder_keeps_name(self, auth_client: AsyncClient):
        response = await auth_client.post(
            "/api/growth-logs", json={"date": "2024-04-06", "recorder_name": "路人"}
        )

        assert response.json()["recorder_name"] == "路人"
        assert response.json()["recorder_id"] is None


@pytest.mark.api
@pytest.mark.asyncio
class TestGrowthLogQueries:

    async def test_month_list_with_harvest_info(self, auth_client: AsyncClient):
        await auth_client.post("/api/growth-logs", json={"date": "2024-04-05"})
        await auth_client.post("/api/growth-logs", json={"date": "2024-04-07"})
        await auth_client.post("/api/growth-logs", json={"date": "2024-05-01"})
        for weight in (10, 5.5):
            await auth_client.post(
                "/api/harvest-records",
                json={
                    "harvest_date": "2024-04-05",
                    "fresh_leaf_weight_kg": weight,
                    "harvest_team": {"member_count": 3},
                },
            )

        response = await auth_client.get("/api/growth-logs", params={"month": "2024-04"})

        logs = response.json()
        assert [log["date"][:10] for log in logs] == ["2024-04-07", "2024-04-05"]
        assert logs[0]["harvest_info"]["has_harvest"] is False
        assert logs[1]["harvest_info"]["count"] == 2
        assert logs[1]["harvest_info"]["total_weight_kg"] == 15.5

    async def test_existing_dates_and_count(self, auth_client: AsyncClient):
        for date in ("2024-04-07", "2024-04-05", "2024-05-01"):
            await auth_client.post("/api/growth-logs", json={"date": date})

        dates = (await auth_client.get("/api/growth-logs/existing-dates")).json()
        count = (await auth_client.get("/api/growth-logs/count", params={"month": "2024-04"})).json()

        assert dates == ["2024-04-05", "2024-04-07", "2024-05-01"]
        assert count == {"month": "2024-04", "count": 2}

    async def test_count_requires_month(self, auth_client: AsyncClient):
        response = await auth_client.get("/api/growth-logs/count", params={"month": "April"})

        assert response.status_code == 400

    async def test_weather_by_date(self, auth_client: AsyncClient):
        await auth_client.post(
            "/api/growth-logs",
            json={"date": "2024-04-05", "weather": {"icon": "🌧", "temperature_range": "12~18℃"}},
        )

        found = await auth_client.get("/api/growth-logs/by-date", params={"date": "2024-04-05"})
        missing = await auth_client.get("/api/growth-logs/by-date", params={"date": "2024-04-06"})

        assert found.json() == {"weather": {"icon": "🌧", "temperature_range": "12~18℃"}}
        assert missing.json() is None


@pytest.mark.api
@pytest.mark.asyncio
class TestUpdateDeleteGrowthLog:

    async def test_clear_activity(self, auth_client: AsyncClient):
        log = (await auth_client.post(
            "/api/growth-logs", json={"date": "2024-04-05", "farm_activity_type": "采摘"}
        )).json()

        response = await auth_client.put(
            f"/api/growth-logs/{log['id']}", json={"farm_activity_type": "无"}
        )

        assert response.json()["farm_activity_type"] == "NONE"
        assert response.json()["status_tag"] == {}

    async def test_delete(self, auth_client: AsyncClient):
        log = (await auth_client.post("/api/growth-logs", json={"date": "2024-04-05"})).json()

        assert (await auth_client.delete(f"/api/growth-logs/{log['id']}")).status_code == 200
        assert (await auth_client.get(f"/api/growth-logs/{log['id']}")).status_code == 404
