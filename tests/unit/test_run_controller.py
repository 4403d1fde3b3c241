import asyncio
import logging

import pytest

from core.checking.item_checker import ItemChecker
from core.exceptions import RunStateError
from core.marking import Marker
from core.models.item import Item
from core.models.outcome import ProbeOutcome
from core.models.result import ResultStatus
from core.notifications.base import Notifier
from core.run_controller import RunController


def make_controller(checker, notifier, marker=None, concurrency=5):
    return RunController(checker, concurrency=concurrency, marker=marker, notifier=notifier)


def test_twelve_items_with_limit_five_fill_five_slots(prober, checker_factory, notifier, items_factory):
    """Scenario: 12 items, concurrency 5 → 5 active and 7 queued before any completion."""
    async def scenario():
        prober.gate = asyncio.Event()
        controller = make_controller(checker_factory(), notifier)

        assert controller.start_run(items_factory(12))
        assert controller.state.active == 5
        assert len(controller.state.queue) == 7
        assert controller.state.total == 12

        # Let the dispatched probes start; still nothing may complete
        for _ in range(5):
            await asyncio.sleep(0)
        assert prober.in_flight == 5
        assert controller.state.checked == 0
        assert controller.state.active == 5
        assert len(controller.state.queue) == 7

        prober.gate.set()
        return await controller.wait()

    summary = asyncio.run(scenario())

    assert summary.total == 12
    assert summary.checked == 12
    assert summary.ok == 12
    assert prober.max_in_flight == 5


def test_counters_hold_invariants_at_every_result(prober, checker_factory, notifier, items_factory):
    prober.script("https://example.com/page3", "HEAD", ProbeOutcome.http_error("HEAD", 410))

    async def scenario():
        controller = make_controller(checker_factory(), notifier, concurrency=3)
        controller.start_run(items_factory(10))
        return await controller.wait()

    summary = asyncio.run(scenario())

    for checked, total, active, queued in notifier.snapshots:
        assert checked <= total
        assert active <= 3
        assert checked + active + queued == total
    assert summary.broken == 1
    assert summary.broken_links[0].url == "https://example.com/page3"
    assert summary.broken_links[0].reason == "HEAD error 410"


def test_completion_happens_exactly_once(prober, checker_factory, notifier, items_factory):
    async def scenario():
        controller = make_controller(checker_factory(), notifier)
        controller.start_run(items_factory(7))
        summary = await controller.wait()
        # Give any stray callbacks a chance to run
        await asyncio.sleep(0.01)
        return controller, summary

    controller, summary = asyncio.run(scenario())

    assert len(notifier.summaries) == 1
    assert notifier.summaries[0] is summary
    assert controller.running is False
    assert controller.state.is_drained
    assert notifier.trigger_states == [False, True]


def test_start_while_running_has_no_effect(prober, checker_factory, notifier, items_factory):
    async def scenario():
        prober.gate = asyncio.Event()
        controller = make_controller(checker_factory(), notifier)
        controller.start_run(items_factory(8))
        before = (controller.state.total, controller.state.checked, controller.state.active,
                  list(controller.state.queue), controller.state.epoch)

        started = controller.start_run(items_factory(3, prefix="https://other.example.com/"))

        after = (controller.state.total, controller.state.checked, controller.state.active,
                 list(controller.state.queue), controller.state.epoch)
        prober.gate.set()
        await controller.wait()
        return started, before, after

    started, before, after = asyncio.run(scenario())

    assert started is False
    assert before == after
    assert len(notifier.started) == 1


def test_empty_run_finishes_immediately(checker_factory, notifier):
    async def scenario():
        controller = make_controller(checker_factory(), notifier)
        assert controller.start_run([])
        return controller, await controller.wait()

    controller, summary = asyncio.run(scenario())

    assert summary.total == 0
    assert summary.has_broken is False
    assert controller.trigger_enabled
    assert notifier.trigger_states == [False, True]


def test_items_admitted_mid_run_are_checked(prober, checker_factory, notifier, items_factory):
    async def scenario():
        prober.gate = asyncio.Event()
        controller = make_controller(checker_factory(), notifier, concurrency=2)
        controller.start_run(items_factory(2))

        admitted = controller.admit(items_factory(3, prefix="https://late.example.com/"))
        assert controller.state.total == 5
        assert len(controller.state.queue) == 3

        prober.gate.set()
        summary = await controller.wait()
        return admitted, summary

    admitted, summary = asyncio.run(scenario())

    assert admitted == 3
    assert summary.total == 5
    assert summary.checked == 5
    assert notifier.admitted == [3]
    late = [r for r in notifier.results if r.url.startswith("https://late.example.com/")]
    assert len(late) == 3


def test_admission_resumes_a_drained_queue(prober, checker_factory, notifier):
    """Items admitted while the only slot is busy and the queue is empty still get dispatched."""
    async def scenario():
        prober.gate = asyncio.Event()
        controller = make_controller(checker_factory(), notifier, concurrency=1)
        controller.start_run([Item(url="https://example.com/first")])
        assert not controller.state.queue

        controller.admit([Item(url="https://example.com/second")])
        prober.gate.set()
        return await controller.wait()

    summary = asyncio.run(scenario())

    assert [r.url for r in summary.results] == ["https://example.com/first", "https://example.com/second"]


def test_admission_after_completion_is_dropped(checker_factory, notifier, items_factory):
    async def scenario():
        controller = make_controller(checker_factory(), notifier)
        controller.start_run(items_factory(2))
        await controller.wait()
        return controller, controller.admit(items_factory(2))

    controller, admitted = asyncio.run(scenario())

    assert admitted == 0
    assert controller.state.total == 2
    assert len(notifier.summaries) == 1


def test_dispatch_order_is_fifo(prober, checker_factory, notifier, items_factory):
    items = items_factory(6)

    async def scenario():
        controller = make_controller(checker_factory(), notifier, concurrency=1)
        controller.start_run(items)
        return await controller.wait()

    asyncio.run(scenario())

    assert [url for url, _, _ in prober.calls] == [item.url for item in items]


def test_abandoned_run_results_are_discarded(prober, checker_factory, notifier, items_factory):
    async def scenario():
        prober.gate = asyncio.Event()
        controller = make_controller(checker_factory(), notifier, concurrency=3)
        controller.start_run(items_factory(3, prefix="https://old.example.com/"))
        await asyncio.sleep(0)

        controller.abandon()
        assert controller.running is False
        assert controller.start_run(items_factory(2, prefix="https://new.example.com/"))

        prober.gate.set()
        summary = await controller.wait()
        await asyncio.sleep(0.01)
        return controller, summary

    controller, summary = asyncio.run(scenario())

    assert summary.total == 2
    assert summary.checked == 2
    assert all(r.url.startswith("https://new.example.com/") for r in notifier.results)
    assert controller.state.checked == 2
    assert controller.state.active == 0


def test_wait_on_abandoned_run_returns_none(prober, checker_factory, notifier, items_factory):
    async def scenario():
        prober.gate = asyncio.Event()
        controller = make_controller(checker_factory(), notifier)
        controller.start_run(items_factory(2))
        waiter = asyncio.ensure_future(controller.wait())
        await asyncio.sleep(0)
        controller.abandon()
        result = await waiter
        prober.gate.set()
        await asyncio.sleep(0.01)
        return result

    assert asyncio.run(scenario()) is None


def test_unexpected_checker_error_becomes_broken_result(notifier, items_factory):
    class ExplodingChecker(ItemChecker):
        async def check(self, item):
            if item.url.endswith("1"):
                raise RuntimeError("boom")
            return await super().check(item)

    class AlwaysOk:
        async def probe(self, url, method, timeout):
            return ProbeOutcome.success(method, 200)

    async def scenario():
        controller = make_controller(ExplodingChecker(AlwaysOk(), retry_delay=0), notifier)
        controller.start_run(items_factory(3))
        return await controller.wait()

    summary = asyncio.run(scenario())

    assert summary.checked == 3
    assert summary.broken == 1
    assert "unexpected error: boom" in summary.broken_links[0].reason


def test_failing_notifier_and_marker_do_not_stall_the_run(prober, checker_factory, items_factory, caplog):
    class FailingNotifier(Notifier):
        def on_result(self, result, state):
            raise RuntimeError("display failed")

        def on_run_finished(self, summary):
            raise RuntimeError("summary display failed")

    class FailingMarker(Marker):
        def __init__(self):
            self.marked = []

        def reset(self):
            raise RuntimeError("reset failed")

        def mark(self, item, result):
            self.marked.append(item)
            raise RuntimeError("marking failed")

    caplog.set_level(logging.ERROR, logger="core.run_controller")
    marker = FailingMarker()

    async def scenario():
        controller = make_controller(checker_factory(), FailingNotifier(), marker=marker)
        controller.start_run(items_factory(3))
        summary = await asyncio.wait_for(controller.wait(), 2.0)
        return controller, summary

    controller, summary = asyncio.run(scenario())

    assert summary.checked == 3
    assert controller.running is False
    assert controller.trigger_enabled
    assert len(marker.marked) == 3
    assert "display failed" in caplog.text
    assert "marking failed" in caplog.text


def test_marker_is_reset_and_receives_every_result(prober, checker_factory, notifier, marker):
    items = [Item(url="https://example.com/ok"), Item(url="#skip"), Item(url="https://example.com/gone")]
    prober.script("https://example.com/gone", "HEAD", ProbeOutcome.http_error("HEAD", 404))
    prober.script("https://example.com/gone", "GET", ProbeOutcome.http_error("GET", 404))

    async def scenario():
        controller = make_controller(checker_factory(), notifier, marker=marker)
        controller.start_run(items)
        return await controller.wait()

    summary = asyncio.run(scenario())

    assert marker.resets == 1
    assert {id(item) for item, _ in marker.marked} == {id(item) for item in items}
    statuses = {result.url: result.status for _, result in marker.marked}
    assert statuses["#skip"] is ResultStatus.SKIPPED
    assert statuses["https://example.com/gone"] is ResultStatus.BROKEN
    assert summary.ok == 1
    assert summary.skipped == 1
    assert summary.broken == 1


def test_wait_without_run_raises(checker_factory, notifier):
    controller = make_controller(checker_factory(), notifier)

    with pytest.raises(RunStateError):
        asyncio.run(controller.wait())


def test_run_convenience_rejects_concurrent_start(prober, checker_factory, notifier, items_factory):
    async def scenario():
        prober.gate = asyncio.Event()
        controller = make_controller(checker_factory(), notifier)
        controller.start_run(items_factory(1))
        with pytest.raises(RunStateError):
            await controller.run(items_factory(1))
        prober.gate.set()
        return await controller.wait()

    summary = asyncio.run(scenario())

    assert summary.total == 1
