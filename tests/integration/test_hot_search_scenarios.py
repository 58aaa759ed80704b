"""
End-to-end hot search scenarios against real backends.

Each scenario runs on the SQLite backend and on the in-memory fallback.
"""

import json

import pytest

from hot_search_service.config import HotSearchSettings
from hot_search_service.services.hot_search_service import HotSearchService, create_hot_search_service

PASSWORD = "s3cret"

pytestmark = pytest.mark.integration


@pytest.fixture(params=["durable", "transient"])
async def service(request, tmp_path, fake_clock):
    config = HotSearchSettings(
        db_path=tmp_path / "data" / "hot-searches.db",
        persistent=request.param == "durable",
        password=PASSWORD,
    )
    svc = await create_hot_search_service(config, clock=fake_clock)
    assert svc.mode == request.param
    yield svc
    await svc.close()


def _pairs(records) -> list[tuple[str, int]]:
    return [(r.term, r.score) for r in records]


@pytest.mark.asyncio
async def test_scenario_a_ranking(service):
    for _ in range(3):
        await service.record("movie-x")
    await service.record("movie-y")

    assert _pairs(await service.list_hot_searches(10)) == [("movie-x", 3), ("movie-y", 1)]


@pytest.mark.asyncio
async def test_scenario_b_capacity_eviction(service):
    for i in range(60):
        await service.record(f"term-{i}")

    stats = await service.stats()
    remaining = {r.term for r in await service.list_hot_searches(50)}

    assert stats.total == 50
    assert len(stats.top_terms) == 10
    assert remaining == {f"term-{i}" for i in range(10, 60)}


@pytest.mark.asyncio
async def test_scenario_c_admin_clear(service):
    for term in ("清理测试1", "清理测试2", "movie-x"):
        await service.record(term)

    result = await service.admin_clear(PASSWORD)

    assert result.success is True
    assert result.affected_count == 3
    assert (await service.stats()).total == 0
    assert await service.list_hot_searches(50) == []


@pytest.mark.asyncio
async def test_repeated_record_tracks_score_and_timestamps(service, fake_clock):
    await service.record("测试电影")
    first_seen = fake_clock.now
    await service.record("测试电影")
    await service.record("测试电影")

    [record] = await service.list_hot_searches(10)

    assert record.score == 3
    assert record.created_at == first_seen
    assert record.last_accessed == fake_clock.now


@pytest.mark.asyncio
async def test_recent_term_wins_score_ties(service):
    await service.record("older")
    await service.record("newer")

    assert [r.term for r in await service.list_hot_searches()] == ["newer", "older"]


@pytest.mark.asyncio
async def test_store_never_exceeds_capacity(service):
    for i in range(120):
        await service.record(f"t{i % 75}")
        assert (await service.stats()).total <= 50


@pytest.mark.asyncio
async def test_empty_terms_do_not_change_store(service):
    await service.record("movie-x")
    before = [r.to_dict() for r in await service.list_hot_searches(50)]

    await service.record("")
    await service.record("   ")

    assert [r.to_dict() for r in await service.list_hot_searches(50)] == before


@pytest.mark.asyncio
async def test_forbidden_terms_never_listed(service):
    await service.record("政治敏感词")
    await service.record("暴力内容")
    await service.record("正常搜索词")

    terms = [r.term for r in await service.list_hot_searches(50)]

    assert terms == ["正常搜索词"]


@pytest.mark.asyncio
async def test_wrong_password_leaves_store_unchanged(service):
    await service.record("movie-x")
    before = [r.to_dict() for r in await service.list_hot_searches(50)]

    delete_result = await service.admin_delete("movie-x", "wrongpassword")
    clear_result = await service.admin_clear("wrongpassword")

    assert delete_result.success is False
    assert clear_result.success is False
    assert "incorrect password" in delete_result.message
    assert [r.to_dict() for r in await service.list_hot_searches(50)] == before


@pytest.mark.asyncio
async def test_delete_missing_term(service):
    await service.record("movie-x")

    result = await service.admin_delete("missingTerm", PASSWORD)

    assert result.success is False
    assert result.message == "term not found"
    assert (await service.stats()).total == 1


@pytest.mark.asyncio
async def test_delete_existing_term(service):
    await service.record("待删除")
    await service.record("movie-x")

    result = await service.admin_delete("待删除", PASSWORD)

    assert result.success is True
    assert [r.term for r in await service.list_hot_searches(50)] == ["movie-x"]


@pytest.mark.asyncio
async def test_long_terms_are_accepted(service):
    long_term = "a" * 101
    await service.record(long_term)

    assert [r.term for r in await service.list_hot_searches()] == [long_term]


@pytest.mark.asyncio
async def test_database_size(service):
    await service.record("movie-x")

    size = await service.database_size()
    if service.mode == "durable":
        assert size > 0
    else:
        assert size == 0
        assert await service.database_size_mb() == 0


@pytest.mark.asyncio
async def test_scenario_d_backends_produce_identical_output(tmp_path, clock_factory):
    """Same record sequence on both backends yields byte-identical listings."""
    sequence = [f"term-{i % 13}" for i in range(40)] + [f"burst-{i}" for i in range(45)] + ["term-3"] * 4

    outputs = []
    for persistent in (True, False):
        config = HotSearchSettings(db_path=tmp_path / "parity.db", persistent=persistent, password=PASSWORD)
        svc = await create_hot_search_service(config, clock=clock_factory())
        try:
            for term in sequence:
                await svc.record(term)
            records = await svc.list_hot_searches(50)
            stats = await svc.stats()
        finally:
            await svc.close()
        outputs.append(
            json.dumps(
                {"list": [r.to_dict() for r in records], "stats": stats.to_dict()},
                ensure_ascii=False,
            )
        )

    durable_output, transient_output = outputs
    assert durable_output == transient_output


@pytest.mark.asyncio
async def test_durable_records_survive_restart(tmp_path, clock_factory):
    config = HotSearchSettings(db_path=tmp_path / "hot.db", password=PASSWORD)

    first = await create_hot_search_service(config, clock=clock_factory())
    await first.record("movie-x")
    await first.record("movie-x")
    await first.close()

    second = await create_hot_search_service(config, clock=clock_factory(start=1_800_000_000_000))
    try:
        await second.record("movie-x")
        [record] = await second.list_hot_searches()
    finally:
        await second.close()

    assert record.score == 3
    assert record.last_accessed == 1_800_000_000_001


@pytest.mark.asyncio
async def test_fallback_service_is_fully_functional(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    config = HotSearchSettings(db_path=blocker / "hot.db", password=PASSWORD)

    svc = await create_hot_search_service(config)
    try:
        assert isinstance(svc, HotSearchService)
        assert svc.mode == "transient"

        await svc.record("movie-x")
        await svc.record("movie-x")
        await svc.record("movie-y")

        assert _pairs(await svc.list_hot_searches()) == [("movie-x", 2), ("movie-y", 1)]
        assert await svc.database_size() == 0
        assert (await svc.admin_delete("movie-y", PASSWORD)).success is True
    finally:
        await svc.close()
