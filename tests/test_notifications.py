# Tests for transient notifications.
# Created: 2026-10-19

import logging

import pytest

from filedrop.client.notifications import NotificationLevel, Notifier


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier(clock):
    return Notifier(default_ttl=5.0, clock=clock)


class TestNotifier:
    def test_notify_records(self, notifier):
        note = notifier.success("Upload complete", "Uploaded 2 file(s)")
        assert note.level is NotificationLevel.SUCCESS
        assert notifier.active() == [note]

    def test_expires_after_ttl(self, notifier, clock):
        notifier.error("Upload failed")
        clock.now = 4.9
        assert len(notifier.active()) == 1
        clock.now = 5.0
        assert notifier.active() == []

    def test_custom_ttl(self, notifier, clock):
        short = notifier.notify("short", ttl=1.0)
        long = notifier.notify("long")
        clock.now = 2.0
        assert notifier.active() == [long]
        assert short not in notifier.active()

    def test_dismiss(self, notifier):
        note = notifier.notify("hello")
        notifier.dismiss(note)
        assert notifier.active() == []
        notifier.dismiss(note)

    def test_on_notify_callback(self, clock):
        shown = []
        notifier = Notifier(on_notify=shown.append, clock=clock)
        note = notifier.error("Upload failed", "boom")
        assert shown == [note]

    def test_logs_at_level(self, notifier, caplog):
        with caplog.at_level(logging.INFO, logger="filedrop.client.notifications"):
            notifier.error("Upload failed", "boom")
            notifier.success("Done")
        levels = [r.levelno for r in caplog.records]
        assert levels == [logging.ERROR, logging.INFO]
        assert "Upload failed: boom" in caplog.records[0].getMessage()
