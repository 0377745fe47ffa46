import pytest

from upload_analytics.core.exceptions import EmptyTableError, SessionNotFoundError
from upload_analytics.core.ingestion.table import Table
from upload_analytics.core.visualization.chart_plans import ChartMode
from upload_analytics.core.visualization.chart_suggester import ChartOptions
from upload_analytics.services.session_store import SessionStore


@pytest.mark.asyncio
async def test_add_and_get(make_session, sales_table):
    store = SessionStore(max_sessions=5, ttl=60)
    session = make_session(sales_table)

    session_id = await store.add(session)

    assert await store.get(session_id) is session
    assert store.get_stats()["hit_count"] == 1


@pytest.mark.asyncio
async def test_unknown_session_raises(make_session):
    store = SessionStore(max_sessions=5, ttl=60)
    with pytest.raises(SessionNotFoundError):
        await store.get("missing")


@pytest.mark.asyncio
async def test_least_recently_used_session_is_evicted(make_session, sales_table):
    store = SessionStore(max_sessions=2, ttl=60)
    first = make_session(sales_table)
    second = make_session(sales_table)
    third = make_session(sales_table)

    await store.add(first)
    await store.add(second)
    await store.get(first.session_id)
    await store.add(third)

    assert await store.session_ids() == [first.session_id, third.session_id]
    with pytest.raises(SessionNotFoundError):
        await store.get(second.session_id)


@pytest.mark.asyncio
async def test_expired_session_is_gone(make_session, sales_table, monkeypatch):
    store = SessionStore(max_sessions=5, ttl=60)
    session = make_session(sales_table)
    await store.add(session)

    monkeypatch.setattr(store, "_is_expired", lambda session_id: True)

    with pytest.raises(SessionNotFoundError):
        await store.get(session.session_id)
    assert len(store) == 0


@pytest.mark.asyncio
async def test_delete(make_session, sales_table):
    store = SessionStore(max_sessions=5, ttl=60)
    session = make_session(sales_table)
    await store.add(session)

    await store.delete(session.session_id)

    with pytest.raises(SessionNotFoundError):
        await store.delete(session.session_id)


def test_session_rejects_empty_table(make_session):
    with pytest.raises(EmptyTableError):
        make_session(Table(records=[], columns=[]))


def test_refresh_replaces_derived_artifacts(make_session, sales_table, default_style):
    session = make_session(sales_table)
    assert not session.is_analyzed

    bar_layout = session.refresh(ChartOptions(mode=ChartMode.BAR, style=default_style))
    pie_layout = session.refresh(ChartOptions(mode=ChartMode.PIE, style=default_style))

    assert session.layout is pie_layout
    assert bar_layout.plans[0].variant.value == "bar"
    assert pie_layout.plans[0].variant.value == "pie"
    assert session.classification.numeric == ["sales", "units"]
    assert list(session.statistics) == ["sales", "units"]
    assert session.data_quality == 88
