"""VisibilityTrigger 단위 테스트."""

from __future__ import annotations

import asyncio

import pytest

from shopfeed.core.exceptions import TransportError
from shopfeed.engine import ProductSyncEngine, SyncStatus, VisibilityTrigger


@pytest.fixture
def engine(gateway):
    return ProductSyncEngine(gateway, auto_refresh_enabled=False)


@pytest.fixture
def trigger(engine):
    return VisibilityTrigger(engine)


@pytest.mark.asyncio
async def test_visible_last_item_loads_more_and_rearms(engine, trigger):
    await engine.initial_load()

    result = await trigger.notify_visible(15)

    assert result.status == SyncStatus.APPENDED
    assert engine.state.current_limit == 20
    assert trigger.watched_key == engine.state.products[-1].id
    assert trigger.armed


@pytest.mark.asyncio
async def test_stale_element_is_ignored(engine, trigger, gateway):
    await engine.initial_load()
    await trigger.notify_visible(15)

    assert await trigger.notify_visible(15) is None
    assert gateway.count("list_products") == 2


@pytest.mark.asyncio
async def test_one_load_per_visibility_event(engine, trigger, gateway, settle_loop):
    await engine.initial_load()
    gate = gateway.gate("list_products", 2)

    first = asyncio.create_task(trigger.notify_visible(15))
    await settle_loop()
    assert await trigger.notify_visible(15) is None

    gate.set()
    await first
    assert gateway.count("list_products") == 2


@pytest.mark.asyncio
async def test_ignored_while_loading(engine, trigger, gateway, settle_loop):
    await engine.initial_load()
    gate = gateway.gate("list_products", 1)
    refresh = asyncio.create_task(engine.refresh())
    await settle_loop()

    assert engine.loading
    assert await trigger.notify_visible(15) is None

    gate.set()
    await refresh


@pytest.mark.asyncio
async def test_ignored_without_more_data(gateway_factory):
    engine = ProductSyncEngine(gateway_factory(total=5), auto_refresh_enabled=False)
    trigger = VisibilityTrigger(engine)
    await engine.initial_load()

    assert await trigger.notify_visible(5) is None


@pytest.mark.asyncio
async def test_ignored_on_empty_list(trigger):
    assert await trigger.notify_visible(1) is None
    assert trigger.watched_key is None


@pytest.mark.asyncio
async def test_failed_load_allows_retry_on_same_element(engine, trigger, gateway):
    await engine.initial_load()
    gateway.fail_next("list_products", TransportError(500, "boom"))

    failed = await trigger.notify_visible(15)
    assert failed.status == SyncStatus.FAILED

    retried = await trigger.notify_visible(15)
    assert retried.status == SyncStatus.APPENDED
