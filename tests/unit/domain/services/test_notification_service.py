"""Tests for notification backends."""

import logging

import pytest

from parking_admin.domain.services.notification import (
    LoggingNotifier,
    MemoryNotifier,
    Notification,
    Notifier,
)


class TestNotifier:
    def test_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            Notifier()  # type: ignore

    def test_notification_is_frozen(self) -> None:
        notification = Notification("info", "hello")

        with pytest.raises(AttributeError):
            notification.message = "changed"  # type: ignore


class TestMemoryNotifier:
    """Tests for MemoryNotifier."""

    def test_helpers_record_levels_in_order(self) -> None:
        notifier = MemoryNotifier()

        notifier.success("saved")
        notifier.info("nothing found")
        notifier.error("failed")

        assert notifier.notifications == [
            Notification("success", "saved"),
            Notification("info", "nothing found"),
            Notification("error", "failed"),
        ]

    def test_messages_filtered_by_level(self) -> None:
        notifier = MemoryNotifier()
        notifier.error("a")
        notifier.success("b")
        notifier.error("c")

        assert notifier.messages() == ["a", "b", "c"]
        assert notifier.messages("error") == ["a", "c"]
        assert notifier.messages("info") == []

    def test_clear(self) -> None:
        notifier = MemoryNotifier()
        notifier.info("x")

        notifier.clear()

        assert notifier.notifications == []


class TestLoggingNotifier:
    """Tests for LoggingNotifier."""

    def test_levels(self, caplog) -> None:
        caplog.set_level(logging.INFO, logger="parking_admin.domain.services.notification")
        notifier = LoggingNotifier()

        notifier.success("Request approved successfully")
        notifier.error("Failed to load requests")

        levels = [(r.levelno, r.getMessage()) for r in caplog.records]
        assert levels == [
            (logging.INFO, "Request approved successfully"),
            (logging.ERROR, "Failed to load requests"),
        ]
        assert caplog.records[1].operation == "notify:error"
