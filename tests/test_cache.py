"""Tests for the TTL result cache and change dispatch."""

import asyncio
import threading
from datetime import timedelta

from rental_aggregator.models.listing import Snapshot
from rental_aggregator.services.cache import CACHE_TTL, ResultCache
from rental_aggregator.services.changes import (
    ChangeDispatcher,
    NotificationSummary,
    detect_new_records,
)


class ScriptedOrchestrator:
    """Returns the next scripted batch of records on each aggregation."""

    def __init__(self, batches, clock, delay=0.01):
        self.batches = list(batches)
        self.clock = clock
        self.delay = delay
        self.calls = 0

    async def aggregate(self):
        await asyncio.sleep(self.delay)
        records = self.batches[min(self.calls, len(self.batches) - 1)]
        self.calls += 1
        return Snapshot(records=tuple(records), captured_at=self.clock())


class RecordingNotifier:
    def __init__(self, error=None):
        self.batches = []
        self.error = error

    def send_new_listings(self, records):
        if self.error:
            raise self.error
        self.batches.append(list(records))
        return NotificationSummary(sent=1)


class TestResultCache:
    """Tests for TTL and single-flight refresh."""

    def test_ttl_is_ten_minutes(self):
        assert CACHE_TTL == timedelta(minutes=10)

    def test_two_calls_within_ttl_return_same_snapshot(self, make_record, clock):
        orchestrator = ScriptedOrchestrator([[make_record("a")]], clock)
        cache = ResultCache(orchestrator, clock=clock)

        async def scenario():
            first = await cache.get()
            clock.advance(minutes=9)
            second = await cache.get()
            return first, second

        first, second = asyncio.run(scenario())
        assert first is second
        assert orchestrator.calls == 1

    def test_refresh_after_expiry(self, make_record, clock):
        orchestrator = ScriptedOrchestrator([[make_record("a")], [make_record("b")]], clock)
        cache = ResultCache(orchestrator, clock=clock)

        async def scenario():
            await cache.get()
            clock.advance(minutes=10)
            return await cache.get()

        snapshot = asyncio.run(scenario())
        assert orchestrator.calls == 2
        assert snapshot.record_ids == {"b"}

    def test_concurrent_callers_share_one_refresh(self, make_record, clock):
        orchestrator = ScriptedOrchestrator([[make_record("a")]], clock, delay=0.05)
        cache = ResultCache(orchestrator, clock=clock)

        async def scenario():
            return await asyncio.gather(*(cache.get() for _ in range(10)))

        snapshots = asyncio.run(scenario())
        assert orchestrator.calls == 1
        assert cache.refresh_count == 1
        assert all(s is snapshots[0] for s in snapshots)

    def test_concurrent_callers_after_expiry(self, make_record, clock):
        orchestrator = ScriptedOrchestrator([[make_record("a")]], clock, delay=0.05)
        cache = ResultCache(orchestrator, clock=clock)

        async def scenario():
            await cache.get()
            clock.advance(minutes=11)
            await asyncio.gather(*(cache.get() for _ in range(5)))

        asyncio.run(scenario())
        assert orchestrator.calls == 2

    def test_force_refresh(self, make_record, clock):
        orchestrator = ScriptedOrchestrator([[make_record("a")]], clock)
        cache = ResultCache(orchestrator, clock=clock)

        async def scenario():
            await cache.get()
            await cache.get(force_refresh=True)

        asyncio.run(scenario())
        assert orchestrator.calls == 2

    def test_is_fresh_and_invalidate(self, make_record, clock):
        cache = ResultCache(ScriptedOrchestrator([[make_record("a")]], clock), clock=clock)
        assert not cache.is_fresh()

        asyncio.run(cache.get())
        assert cache.is_fresh()

        cache.invalidate()
        assert not cache.is_fresh()
        assert cache.current is not None


class TestChangeDetection:
    """Tests for new-record detection and notification dispatch."""

    def test_first_run_reports_nothing(self, make_record, clock):
        current = Snapshot(records=(make_record("a"),), captured_at=clock())
        assert detect_new_records(None, current) == []

    def test_new_ids_detected(self, make_record, clock):
        previous = Snapshot(records=(make_record("a"),), captured_at=clock())
        new = make_record("b")
        current = Snapshot(records=(make_record("a"), new), captured_at=clock())
        assert detect_new_records(previous, current) == [new]

    def test_removed_records_are_not_reported(self, make_record, clock):
        previous = Snapshot(records=(make_record("a"), make_record("b")), captured_at=clock())
        current = Snapshot(records=(make_record("a"),), captured_at=clock())
        assert detect_new_records(previous, current) == []

    def test_dispatch_through_cache(self, make_record, clock):
        orchestrator = ScriptedOrchestrator(
            [[make_record("a")], [make_record("a"), make_record("b")]], clock
        )
        notifier = RecordingNotifier()
        cache = ResultCache(orchestrator, ChangeDispatcher(notifier), clock=clock)

        async def scenario():
            await cache.get()
            assert notifier.batches == []
            clock.advance(minutes=11)
            await cache.get()
            await cache.wait_for_notifications()

        asyncio.run(scenario())
        assert [[r.id for r in batch] for batch in notifier.batches] == [["b"]]
        assert cache.dispatcher.last_summary == NotificationSummary(sent=1)

    def test_failing_notifier_is_logged_not_raised(self, make_record, clock, caplog):
        dispatcher = ChangeDispatcher(RecordingNotifier(error=RuntimeError("SMTP down")))
        previous = Snapshot(records=(), captured_at=clock())
        current = Snapshot(records=(make_record("a"),), captured_at=clock())

        with caplog.at_level("ERROR"):
            new_records = asyncio.run(dispatcher.dispatch(previous, current))

        assert [r.id for r in new_records] == ["a"]
        assert dispatcher.last_summary == NotificationSummary(sent=0, errors=1)
        assert "SMTP down" in caplog.text

    def test_dispatch_without_notifier(self, make_record, clock):
        dispatcher = ChangeDispatcher()
        previous = Snapshot(records=(), captured_at=clock())
        current = Snapshot(records=(make_record("a"),), captured_at=clock())
        assert len(asyncio.run(dispatcher.dispatch(previous, current))) == 1
        assert dispatcher.last_summary is None


class BlockingNotifier:
    """Notifier that holds delivery until released."""

    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()
        self.batches = []

    def send_new_listings(self, records):
        self.started.set()
        self.release.wait(5)
        self.batches.append(list(records))
        return NotificationSummary(sent=1)


class FailingDispatcher:
    async def dispatch(self, previous, current):
        raise RuntimeError("dispatcher crashed")


class TestNotificationDispatch:
    """Tests for change dispatch running beside the refresh."""

    def test_refresh_does_not_wait_for_slow_notifier(self, make_record, clock):
        orchestrator = ScriptedOrchestrator(
            [[make_record("a")], [make_record("a"), make_record("b")]], clock
        )
        notifier = BlockingNotifier()
        cache = ResultCache(orchestrator, ChangeDispatcher(notifier), clock=clock)

        async def scenario():
            await cache.get()
            snapshot = await asyncio.wait_for(cache.get(force_refresh=True), timeout=1)
            assert snapshot.record_ids == {"a", "b"}

            await asyncio.to_thread(notifier.started.wait, 1)
            assert notifier.batches == []
            assert cache.pending_notifications == 1

            # Another caller is served while delivery is still running
            clock.advance(minutes=11)
            await asyncio.wait_for(cache.get(), timeout=1)

            notifier.release.set()
            await cache.wait_for_notifications()

        asyncio.run(scenario())
        assert [[r.id for r in batch] for batch in notifier.batches] == [["b"]]
        assert cache.pending_notifications == 0

    def test_dispatch_error_is_logged(self, make_record, clock, caplog):
        orchestrator = ScriptedOrchestrator([[make_record("a")]], clock)
        cache = ResultCache(orchestrator, FailingDispatcher(), clock=clock)

        async def scenario():
            snapshot = await cache.get()
            await cache.wait_for_notifications()
            return snapshot

        with caplog.at_level("ERROR"):
            snapshot = asyncio.run(scenario())

        assert snapshot.record_ids == {"a"}
        assert "dispatcher crashed" in caplog.text
