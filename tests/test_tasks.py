"""Tests for source checks and poll cycles."""

import asyncio

import pytest

from conftest import FakeFetcher, book


@pytest.mark.asyncio
async def test_first_check_sets_baseline_without_alert(store, notifier, make_checker):
    source = store.add(name="Oni Quantum Nodes", url="https://example.com/a", faction="oni")
    checker = make_checker(FakeFetcher([book((10, 1), (9, 2))]))

    result = await checker.check_source(source)

    assert result.conclusive
    assert result.changed is False
    assert source.baseline_signature == result.combined_signature
    assert source.last_buy_count == 2
    assert source.last_check is not None
    assert source.alert_count == 0
    assert notifier.alerts == []


@pytest.mark.asyncio
async def test_unchanged_book_with_payload_noise(store, notifier, make_checker):
    source = store.add(name="Mud Starpath Cells", url="https://example.com/b")
    fetcher = FakeFetcher(
        [book((10, 1), (9, 2))],
        [book((10, 1), (9, 2)), "not json", '{"status": "ok", "ts": 123}'],
    )
    checker = make_checker(fetcher)

    await checker.check_source(source)
    baseline = source.baseline_signature
    result = await checker.check_source(source)

    assert result.changed is False
    assert source.baseline_signature == baseline
    assert notifier.alerts == []


@pytest.mark.asyncio
async def test_changed_book_emits_alert(store, notifier, clock, make_checker):
    source = store.add(name="Ustur Opo's Request", url="https://example.com/c", faction="ustur")
    fetcher = FakeFetcher(
        [book((10, 1), (9, 2))],
        [book((11, 1), (10, 1), (9, 2))],
    )
    checker = make_checker(fetcher, cooldown_seconds=90)

    await checker.check_source(source)
    clock.now = 5_000
    result = await checker.check_source(source)

    assert result.changed is True
    assert source.alert_count == 1
    assert source.last_alert_at == 5_000
    assert source.last_buy_count == 3
    assert len(notifier.alerts) == 1
    alert = notifier.alerts[0]
    assert "2 → 3 (+1)" in alert.description
    assert alert.url == "https://example.com/c"
    assert alert.color == 0xF1C40F


@pytest.mark.asyncio
async def test_change_inside_cooldown_is_suppressed(store, notifier, clock, make_checker):
    source = store.add(name="Oni Starpath Cells", url="https://example.com/d")
    fetcher = FakeFetcher(
        [book((10, 1))],
        [book((11, 1))],
        [book((12, 1), (11, 1))],
    )
    checker = make_checker(fetcher, cooldown_seconds=90)

    await checker.check_source(source)
    clock.now = 5_000
    await checker.check_source(source)
    clock.now = 5_010
    result = await checker.check_source(source)

    assert result.changed is True
    assert source.alert_count == 1
    assert source.last_alert_at == 5_000
    assert source.baseline_signature == result.combined_signature
    assert source.last_buy_count == 2
    assert len(notifier.alerts) == 1


@pytest.mark.asyncio
async def test_inconclusive_check_only_records_timestamp(store, notifier, make_checker):
    source = store.add(name="Mud Gotti's Favor", url="https://example.com/e")
    fetcher = FakeFetcher([book((10, 1))], ["not json", '{"asks": []}'])
    checker = make_checker(fetcher)

    await checker.check_source(source)
    baseline = source.baseline_signature
    first_check = source.last_check

    result = await checker.check_source(source)

    assert result.conclusive is False
    assert source.baseline_signature == baseline
    assert source.last_buy_count == 1
    assert source.last_check >= first_check
    assert notifier.alerts == []


@pytest.mark.asyncio
async def test_failed_delivery_keeps_bookkeeping(store, clock, make_checker, notifier):
    notifier.succeed = False
    source = store.add(name="Oni Infrastructure Contract", url="https://example.com/f")
    checker = make_checker(FakeFetcher([book((1, 1))], [book((2, 1))]))

    await checker.check_source(source)
    clock.now = 9_000
    await checker.check_source(source)

    assert source.alert_count == 1
    assert source.last_alert_at == 9_000


@pytest.mark.asyncio
async def test_disabled_source_is_skipped(store, make_checker):
    source = store.add(name="Disabled", url="https://example.com/g", enabled=False)
    fetcher = FakeFetcher([book((1, 1))])

    result = await make_checker(fetcher).check_source(source)

    assert result is None
    assert fetcher.calls == []
    assert source.last_check is None


@pytest.mark.asyncio
async def test_checks_of_one_source_are_serialized(store, make_checker):
    source = store.add(name="Busy", url="https://example.com/h")
    fetcher = FakeFetcher([book((1, 1))], delay=0.01)
    checker = make_checker(fetcher)

    await asyncio.gather(checker.check_source(source), checker.check_source(source))

    assert len(fetcher.calls) == 2
    assert fetcher.max_active == 1


@pytest.mark.asyncio
async def test_run_cycle_survives_failing_source(store, make_checker):
    broken = store.add(name="Broken", url="https://example.com/broken")
    healthy = store.add(name="Healthy", url="https://example.com/healthy")
    store.add(name="Off", url="https://example.com/off", enabled=False)
    fetcher = FakeFetcher([book((5, 1))])
    fetcher.failing_urls.add(broken.url)

    await make_checker(fetcher).run_cycle()

    assert fetcher.calls == [broken.url, healthy.url]
    assert broken.last_check is None
    assert healthy.baseline_signature is not None


@pytest.mark.asyncio
async def test_close_releases_notifier(store, notifier, make_checker):
    checker = make_checker(FakeFetcher())

    await checker.close()

    assert notifier.closed is True


@pytest.mark.asyncio
async def test_url_edit_during_check_keeps_baseline_reset(store, notifier, clock, make_checker):
    source = store.add(name="Moved", url="https://example.com/old")
    source.baseline_signature = "abc123"
    source.last_buy_count = 5
    fetcher = FakeFetcher([book((10, 1))], [book((20, 3), (19, 1))], delay=0.05)
    checker = make_checker(fetcher)

    check = asyncio.create_task(checker.check_source(source))
    await asyncio.sleep(0.01)
    store.update(source.id, url="https://example.com/new")
    result = await check

    assert result.conclusive is False
    assert source.baseline_signature is None
    assert source.last_buy_count == 0

    clock.now = 9_000
    result = await checker.check_source(source)

    assert result.changed is False
    assert source.baseline_signature == result.combined_signature
    assert source.alert_count == 0
    assert notifier.alerts == []
