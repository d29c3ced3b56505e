"""Tests for harvest-date classification, picking periods and slugs."""

from datetime import datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.harvest_record import HarvestRecord
from app.models.tea_category import TeaCategory
from app.services.classification import (
    find_category_for_date,
    parse_picking_period,
    reclassify_all_harvest_records,
)
from app.services.slug import generate_slug


def _category(id, name, start, end, sort_order=999):
    return TeaCategory(
        id=id,
        name=name,
        slug=name,
        picking_start_date=start,
        picking_end_date=end,
        sort_order=sort_order,
    )


@pytest.mark.unit
class TestFindCategoryForDate:
    """Picking windows match on month and day only."""

    def test_window_reanchored_to_harvest_year(self):
        spring = _category("c1", "明前茶", datetime(2020, 3, 20), datetime(2020, 4, 5, 23, 59, 59))

        assert find_category_for_date(datetime(2025, 4, 1, 9, 30), [spring]) == ("c1", "明前茶")

    def test_inclusive_bounds(self):
        spring = _category("c1", "明前茶", datetime(2024, 3, 20), datetime(2024, 4, 5))

        assert find_category_for_date(datetime(2024, 3, 20), [spring])[0] == "c1"
        # The end day is covered until 23:59:59.999 regardless of its stored time
        assert find_category_for_date(datetime(2024, 4, 5, 18, 0), [spring])[0] == "c1"
        assert find_category_for_date(datetime(2024, 4, 6), [spring]) == (None, None)

    def test_first_match_wins(self):
        first = _category("a", "春茶", datetime(2024, 3, 1), datetime(2024, 5, 31))
        second = _category("b", "雨前茶", datetime(2024, 4, 6), datetime(2024, 4, 20))

        assert find_category_for_date(datetime(2024, 4, 10), [first, second])[0] == "a"
        assert find_category_for_date(datetime(2024, 4, 10), [second, first])[0] == "b"

    def test_skips_categories_without_dates(self):
        undated = _category("x", "未定", None, None)
        autumn = _category("y", "秋茶", datetime(2024, 8, 4), datetime(2024, 9, 30))

        assert find_category_for_date(datetime(2024, 9, 1), [undated, autumn]) == ("y", "秋茶")

    def test_leap_day_window_in_common_year(self):
        leap = _category("l", "闰日茶", datetime(2024, 2, 29), datetime(2024, 3, 2))

        assert find_category_for_date(datetime(2025, 2, 28), [leap])[0] == "l"

    def test_no_match(self):
        assert find_category_for_date(datetime(2024, 12, 1), []) == (None, None)


@pytest.mark.unit
class TestParsePickingPeriod:
    """``M.D-M.D`` parsing."""

    def test_valid_period(self):
        start, end = parse_picking_period("8.4-9.30", 2024)

        assert start == datetime(2024, 8, 4)
        assert end == datetime(2024, 9, 30, 23, 59, 59, 999000)

    def test_whitespace_tolerated(self):
        start, end = parse_picking_period(" 4.5 - 5.20 ", 2024)

        assert (start.month, start.day) == (4, 5)
        assert (end.month, end.day) == (5, 20)

    @pytest.mark.parametrize(
        "period",
        ["", "8.4", "8.4-9", "a.b-c.d", "13.1-14.2", "1.0-1.32", "8.4-9.30-10.1"],
    )
    def test_malformed(self, period):
        assert parse_picking_period(period, 2024) is None


@pytest.mark.unit
class TestGenerateSlug:

    def test_pinyin(self):
        assert generate_slug("明前茶") == "mingqiancha"

    def test_strips_non_alphanumeric(self):
        assert generate_slug("Spring Tea 2024!") == "springtea2024"

    def test_fallback_when_empty(self):
        assert generate_slug("!!!").startswith("category-")


@pytest.mark.integration
@pytest.mark.asyncio
class TestReclassify:
    """Reclassification writes only records whose category changes."""

    async def test_reclassify_all(self, db_session: AsyncSession):
        spring = _category("spring", "春茶", datetime(2024, 3, 1), datetime(2024, 5, 31), 1)
        db_session.add(spring)
        db_session.add_all([
            HarvestRecord(harvest_date=datetime(2024, 4, 2), fresh_leaf_weight_kg=10),
            HarvestRecord(
                harvest_date=datetime(2024, 4, 3),
                fresh_leaf_weight_kg=12,
                category_id="spring",
                category_name="春茶",
            ),
            HarvestRecord(harvest_date=datetime(2024, 7, 1), fresh_leaf_weight_kg=5),
        ])
        await db_session.commit()

        changed = await reclassify_all_harvest_records(db_session)

        assert changed == 1

    async def test_reclassify_repairs_stale_category_name(self, db_session: AsyncSession):
        db_session.add(_category("spring", "春茶", datetime(2024, 3, 1), datetime(2024, 5, 31)))
        record = HarvestRecord(
            harvest_date=datetime(2024, 4, 2),
            fresh_leaf_weight_kg=10,
            category_id="spring",
            category_name="旧春茶",
        )
        db_session.add(record)
        await db_session.commit()

        changed = await reclassify_all_harvest_records(db_session)

        assert changed == 1
        assert record.category_name == "春茶"
