import asyncio

from reelcut.pipeline.event_bus import ExportEventBus
from reelcut.pipeline.progress_reporter import ProgressReporter
from reelcut.pipeline.schemas import EventTopic, ExportEvent, ExportStage


def _event(export_id: str, topic: EventTopic = EventTopic.PROGRESS, percent: float = 10.0) -> ExportEvent:
    stage = ExportStage.COMPLETED if topic == EventTopic.COMPLETED else ExportStage.DOWNLOADING
    return ExportEvent(export_id=export_id, topic=topic, stage=stage, percent=percent)


def test_events_reach_only_their_export():
    async def scenario():
        bus = ExportEventBus()
        first = bus.subscribe("exp-1")
        second = bus.subscribe("exp-2")

        bus.publish(_event("exp-1"))
        bus.publish(_event("exp-1", EventTopic.COMPLETED, 100.0))

        received = [event async for event in first]
        return bus, received, second

    bus, received, second = asyncio.run(scenario())

    assert [e.topic for e in received] == [EventTopic.PROGRESS, EventTopic.COMPLETED]
    assert second._queue.empty()
    assert bus.subscriber_count("exp-1") == 0
    assert bus.subscriber_count("exp-2") == 1


def test_late_subscriber_gets_latest_event():
    async def scenario():
        bus = ExportEventBus()
        bus.publish(_event("exp-1", percent=5.0))
        bus.publish(_event("exp-1", percent=40.0))
        subscription = bus.subscribe("exp-1")
        return await subscription.get()

    assert asyncio.run(scenario()).percent == 40.0


def test_close_unsubscribes():
    bus = ExportEventBus()
    subscription = bus.subscribe("exp-1")

    subscription.close()
    subscription.close()

    assert bus.subscriber_count("exp-1") == 0
    bus.publish(_event("exp-1"))
    assert bus.latest("exp-1").percent == 10.0


def test_only_newest_finished_exports_are_retained():
    bus = ExportEventBus(max_retained=2)
    bus.publish(_event("running"))
    for export_id in ("exp-1", "exp-2", "exp-3"):
        bus.publish(_event(export_id, EventTopic.COMPLETED, 100.0))

    assert bus.latest("exp-1") is None
    assert bus.latest("exp-2").topic == EventTopic.COMPLETED
    assert bus.latest("exp-3").topic == EventTopic.COMPLETED
    assert bus.latest("running").percent == 10.0


def test_restarted_export_is_not_evicted():
    bus = ExportEventBus(max_retained=1)
    bus.publish(_event("exp-1", EventTopic.COMPLETED, 100.0))
    bus.publish(_event("exp-1", percent=20.0))
    bus.publish(_event("exp-2", EventTopic.COMPLETED, 100.0))

    assert bus.latest("exp-1").percent == 20.0


class TestProgressReporter:
    def test_percent_never_decreases(self):
        bus = ExportEventBus()
        reporter = ProgressReporter("exp-1", bus)

        async def scenario():
            await reporter.send_progress(ExportStage.PROCESSING, 30.0)
            await reporter.send_progress(ExportStage.PROCESSING, 12.0)

        asyncio.run(scenario())

        assert reporter.percent == 30.0
        assert bus.latest("exp-1").percent == 30.0

    def test_error_names_failed_stage(self):
        bus = ExportEventBus()
        reporter = ProgressReporter("exp-1", bus)

        async def scenario():
            await reporter.send_progress(ExportStage.CONCATENATING, 70.0)
            await reporter.send_error("boom")

        asyncio.run(scenario())

        event = bus.latest("exp-1")
        assert event.topic == EventTopic.FAILED
        assert event.stage == ExportStage.FAILED
        assert event.message == "concatenating failed"
        assert event.error == "boom"
        assert event.percent == 70.0
        assert event.is_terminal

    def test_complete_carries_url(self):
        bus = ExportEventBus()
        reporter = ProgressReporter("exp-1", bus)

        asyncio.run(reporter.send_complete("https://files.example.com/x.mp4", is_mock=True))

        event = bus.latest("exp-1")
        assert (event.topic, event.percent, event.url, event.is_mock) == (
            EventTopic.COMPLETED,
            100.0,
            "https://files.example.com/x.mp4",
            True,
        )
