"""Tests for production batch endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.batch import Batch
from app.models.batch_harvest_record import BatchHarvestRecord
from app.models.templates import PRODUCTION_STEPS
from app.services.batches import apply_step_craft, default_production_steps, validate_production_steps


async def _record(client: AsyncClient, date: str = "2024-04-02") -> dict:
    response = await client.post(
        "/api/harvest-records",
        json={
            "harvest_date": date,
            "fresh_leaf_weight_kg": 10,
            "harvest_team": {"leader_name": "王五", "member_count": 5},
        },
    )
    assert response.status_code == 201
    return response.json()


async def _batch(client: AsyncClient, **overrides):
    body = {"batch_number": "MQ-2024-001", "category_name": "明前茶"}
    body.update(overrides)
    return await client.post("/api/batches", json=body)


@pytest.mark.unit
class TestProductionSteps:

    def test_defaults(self):
        steps = default_production_steps()

        assert [step["step_name"] for step in steps] == PRODUCTION_STEPS
        assert [step["step_order"] for step in steps] == [1, 2, 3, 4, 5]
        assert steps[0]["manual_craft"]["media_urls"] == []

    def test_validate(self):
        assert validate_production_steps(default_production_steps()) is None
        assert validate_production_steps("nope") is not None
        assert validate_production_steps([{"step_name": "摊晾"}]) is not None
        assert validate_production_steps(
            [{"step_name": "摊晾", "step_order": 1, "craft_type": "robot"}]
        ) is not None

    def test_apply_step_craft_copies(self):
        steps = default_production_steps()

        updated = apply_step_craft(steps, 1, "modern", {"purpose": "杀青", "bogus": "x"})

        assert updated[1]["modern_craft"]["purpose"] == "杀青"
        assert "bogus" not in updated[1]["modern_craft"]
        assert steps[1]["modern_craft"]["purpose"] == ""


@pytest.mark.api
@pytest.mark.asyncio
class TestCreateBatch:
    """Batch creation links harvest records atomically."""

    async def test_create_links_records(self, auth_client: AsyncClient):
        first = await _record(auth_client)
        second = await _record(auth_client, "2024-04-03")

        response = await _batch(auth_client, harvest_records_ids=[first["id"], second["id"]])

        assert response.status_code == 201
        batch = response.json()
        assert batch["_id"] == batch["id"]
        assert batch["status"] == "IN_PROGRESS"
        assert len(batch["production_steps"]) == 5
        assert {record["id"] for record in batch["harvest_records"]} == {first["id"], second["id"]}
        assert all(record["assigned_batch_id"] == batch["id"] for record in batch["harvest_records"])

    async def test_duplicate_batch_number(self, auth_client: AsyncClient):
        assert (await _batch(auth_client)).status_code == 201

        response = await _batch(auth_client)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_BATCH_NUMBER"

    async def test_missing_record_rolls_back(
        self, auth_client: AsyncClient, db_session: AsyncSession
    ):
        record = await _record(auth_client)

        response = await _batch(auth_client, harvest_records_ids=[record["id"], "missing-id"])

        assert response.status_code == 400
        assert response.json()["error"]["details"]["missing"] == ["missing-id"]
        assert await db_session.scalar(select(func.count()).select_from(Batch)) == 0
        assert await db_session.scalar(select(func.count()).select_from(BatchHarvestRecord)) == 0
        unassigned = await auth_client.get("/api/harvest-records/unassigned")
        assert [r["id"] for r in unassigned.json()] == [record["id"]]

    async def test_required_fields(self, auth_client: AsyncClient):
        response = await auth_client.post("/api/batches", json={"batch_number": "X"})

        assert response.status_code == 400

    async def test_links_tea_master_and_grade(self, auth_client: AsyncClient):
        master = (await auth_client.post(
            "/api/personnel", json={"name": "李师傅", "role": "制茶师", "experience_years": 20}
        )).json()
        grade = (await auth_client.post("/api/grades", json={"name": "特级"})).json()

        response = await _batch(auth_client, tea_master={"name": "李师傅"}, grade="特级")

        batch = response.json()
        assert batch["tea_master_id"] == master["id"]
        assert batch["tea_master"]["experience_years"] == 20
        assert batch["grade_id"] == grade["id"]
        assert batch["grade_name"] == "特级"

    async def test_unknown_grade_kept_as_text(self, auth_client: AsyncClient):
        response = await _batch(auth_client, grade="非常好")

        batch = response.json()
        assert batch["grade_id"] is None
        assert batch["grade_ref"]["name"] == "非常好"
        assert batch["grade_ref"]["id"] is None


@pytest.mark.api
@pytest.mark.asyncio
class TestUpdateBatch:

    async def test_partial_update(self, auth_client: AsyncClient):
        batch = (await _batch(auth_client, notes="first")).json()

        response = await auth_client.put(
            f"/api/batches/{batch['id']}", json={"status": "PUBLISHED"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "PUBLISHED"
        assert response.json()["notes"] == "first"

    async def test_rename_to_taken_number(self, auth_client: AsyncClient):
        await _batch(auth_client, batch_number="A")
        other = (await _batch(auth_client, batch_number="B")).json()

        response = await auth_client.put(f"/api/batches/{other['id']}", json={"batch_number": "A"})

        assert response.status_code == 409

    async def test_step_craft(self, auth_client: AsyncClient):
        batch = (await _batch(auth_client)).json()

        response = await auth_client.put(
            f"/api/batches/{batch['id']}/steps/1/manual",
            json={"method": "锅炒", "media_urls": ["https://cdn.example.com/a.jpg"]},
        )

        assert response.status_code == 200
        step = response.json()["production_steps"][1]
        assert step["step_name"] == "杀青"
        assert step["manual_craft"]["method"] == "锅炒"
        assert step["manual_craft"]["media_urls"] == ["https://cdn.example.com/a.jpg"]
        assert step["modern_craft"]["method"] == ""

    @pytest.mark.parametrize("path", ["steps/5/manual", "steps/x/manual", "steps/0/robot"])
    async def test_step_craft_invalid(self, auth_client: AsyncClient, path: str):
        batch = (await _batch(auth_client)).json()

        response = await auth_client.put(f"/api/batches/{batch['id']}/{path}", json={})

        assert response.status_code == 400

    async def test_replace_production_steps(self, auth_client: AsyncClient):
        batch = (await _batch(auth_client)).json()
        steps = [{"step_name": "摊晾", "step_order": 1, "craft_type": "manual"}]

        response = await auth_client.put(
            f"/api/batches/{batch['id']}/production-steps", json={"production_steps": steps}
        )
        assert response.json()["production_steps"] == steps

        response = await auth_client.put(
            f"/api/batches/{batch['id']}/production-steps", json={"production_steps": "x"}
        )
        assert response.status_code == 400


@pytest.mark.api
@pytest.mark.asyncio
class TestDeleteBatch:

    async def test_delete_unassigns_records(self, auth_client: AsyncClient):
        record = await _record(auth_client)
        batch = (await _batch(auth_client, harvest_records_ids=[record["id"]])).json()

        response = await auth_client.delete(f"/api/batches/{batch['id']}")

        assert response.status_code == 200
        assert (await auth_client.get(f"/api/batches/{batch['id']}")).status_code == 404
        detail = (await auth_client.get(f"/api/harvest-records/{record['id']}")).json()
        assert detail["assigned_batch_id"] is None
        assert detail["assigned_batch"] is None


@pytest.mark.api
@pytest.mark.asyncio
class TestBatchQr:

    async def test_qr_svg(self, auth_client: AsyncClient):
        batch = (await _batch(auth_client)).json()

        response = await auth_client.get(f"/api/batches/{batch['id']}/qr")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/svg+xml"
        assert b"<svg" in response.content

    async def test_qr_missing_batch(self, auth_client: AsyncClient):
        response = await auth_client.get("/api/batches/missing/qr")

        assert response.status_code == 404
