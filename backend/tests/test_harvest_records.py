"""Tests for harvest record endpoints."""

import pytest
from httpx import AsyncClient


async def _create_category(client: AsyncClient, name: str, period: str, sort_order: int = 1):
    response = await client.post(
        "/api/categories",
        json={"name": name, "picking_period": period, "sort_order": sort_order},
    )
    assert response.status_code == 201
    return response.json()


async def _create_record(client: AsyncClient, **overrides):
    body = {
        "harvest_date": "2024-04-02",
        "fresh_leaf_weight_kg": 12.5,
        "harvest_team": {"leader_name": "王五", "member_count": 6},
    }
    body.update(overrides)
    return await client.post("/api/harvest-records", json=body)


@pytest.mark.api
@pytest.mark.asyncio
class TestCreateHarvestRecord:
    """Test harvest record creation and classification."""

    async def test_classified_on_create(self, auth_client: AsyncClient):
        category = await _create_category(auth_client, "明前茶", "3.20-4.5")

        response = await _create_record(auth_client)

        assert response.status_code == 201
        data = response.json()
        assert data["category_id"] == category["id"]
        assert data["category_name"] == "明前茶"
        assert data["assigned_batch_id"] is None

    async def test_unclassified_when_no_window(self, auth_client: AsyncClient):
        await _create_category(auth_client, "秋茶", "8.4-9.30")

        response = await _create_record(auth_client)

        assert response.status_code == 201
        assert response.json()["category_id"] is None

    async def test_links_harvest_lead(self, auth_client: AsyncClient):
        lead = await auth_client.post("/api/personnel", json={"name": "王五", "role": "采摘队长"})

        response = await _create_record(auth_client)

        assert response.json()["harvest_team_id"] == lead.json()["id"]
        assert response.json()["harvest_leader"]["name"] == "王五"

    @pytest.mark.parametrize("member_count", [0, -1, 1.5, "3", None])
    async def test_invalid_member_count(self, auth_client: AsyncClient, member_count):
        response = await _create_record(
            auth_client, harvest_team={"leader_name": "王五", "member_count": member_count}
        )

        assert response.status_code == 400

    async def test_missing_weight(self, auth_client: AsyncClient):
        response = await _create_record(auth_client, fresh_leaf_weight_kg=None)

        assert response.status_code == 400


@pytest.mark.api
@pytest.mark.asyncio
class TestListHarvestRecords:

    async def test_month_filter(self, auth_client: AsyncClient):
        await _create_record(auth_client, harvest_date="2024-04-02")
        await _create_record(auth_client, harvest_date="2024-04-30T16:00:00")
        await _create_record(auth_client, harvest_date="2024-05-01")

        response = await auth_client.get("/api/harvest-records", params={"month": "2024-04"})

        assert response.status_code == 200
        dates = [record["harvest_date"][:10] for record in response.json()]
        # Newest first
        assert dates == ["2024-04-30", "2024-04-02"]

    async def test_unassigned(self, auth_client: AsyncClient):
        first = (await _create_record(auth_client)).json()
        second = (await _create_record(auth_client, harvest_date="2024-04-03")).json()
        await auth_client.post(
            "/api/batches",
            json={"batch_number": "B-1", "category_name": "明前茶", "harvest_records_ids": [first["id"]]},
        )

        response = await auth_client.get("/api/harvest-records/unassigned")

        assert [record["id"] for record in response.json()] == [second["id"]]


@pytest.mark.api
@pytest.mark.asyncio
class TestUpdateDeleteHarvestRecord:

    async def test_date_change_reclassifies(self, auth_client: AsyncClient):
        await _create_category(auth_client, "明前茶", "3.20-4.5", 1)
        autumn = await _create_category(auth_client, "秋茶", "8.4-9.30", 2)
        record = (await _create_record(auth_client)).json()

        response = await auth_client.put(
            f"/api/harvest-records/{record['id']}", json={"harvest_date": "2024-09-01"}
        )

        assert response.status_code == 200
        assert response.json()["category_id"] == autumn["id"]
        assert response.json()["fresh_leaf_weight_kg"] == 12.5

    async def test_detail_includes_batch(self, auth_client: AsyncClient):
        record = (await _create_record(auth_client)).json()
        await auth_client.post(
            "/api/batches",
            json={"batch_number": "B-7", "category_name": "明前茶", "harvest_records_ids": [record["id"]]},
        )

        response = await auth_client.get(f"/api/harvest-records/{record['id']}")

        assert response.json()["assigned_batch"]["batch_number"] == "B-7"

    async def test_delete_unlinks_from_batch(self, auth_client: AsyncClient):
        record = (await _create_record(auth_client)).json()
        batch = (await auth_client.post(
            "/api/batches",
            json={"batch_number": "B-2", "category_name": "明前茶", "harvest_records_ids": [record["id"]]},
        )).json()

        response = await auth_client.delete(f"/api/harvest-records/{record['id']}")
        assert response.status_code == 200

        response = await auth_client.get(f"/api/batches/{batch['id']}")
        assert response.json()["harvest_records"] == []

    async def test_not_found(self, auth_client: AsyncClient):
        response = await auth_client.get("/api/harvest-records/does-not-exist")

        assert response.status_code == 404


@pytest.mark.api
@pytest.mark.asyncio
class TestWeatherSync:

    async def test_sync_from_growth_log(self, auth_client: AsyncClient):
        await auth_client.post(
            "/api/growth-logs",
            json={
                "date": "2024-04-02",
                "weather": {"icon": "☀️", "temperature_range": "18~26℃", "extra": 1},
            },
        )
        synced = (await _create_record(auth_client)).json()
        await _create_record(auth_client, harvest_date="2024-04-09")

        response = await auth_client.post("/api/harvest-records/sync-weather")

        assert response.status_code == 200
        data = response.json()
        assert (data["total"], data["synced"], data["noData"], data["errors"]) == (2, 1, 1, 0)

        record = (await auth_client.get(f"/api/harvest-records/{synced['id']}")).json()
        assert record["weather"] == {"icon": "☀️", "temperature_range": "18~26℃"}
