"""Tests for the notification queue and its panel."""

from ghtui.core import commands as cmd
from ghtui.core.notifications import (
    NOTIFICATION_TTL_SECONDS,
    Notification,
    NotificationLevel,
    NotificationQueue,
)
from ghtui.tui.notifications_panel import NotificationsPanel


def test_default_ttl_is_five_seconds():
    assert NOTIFICATION_TTL_SECONDS == 5.0


def test_present_before_ttl_absent_after(clock):
    queue = NotificationQueue()
    queue.push(Notification.info("Got pull requests: 10", created_at=clock()))

    clock.advance(4.9)
    queue.expire(clock())
    assert [n.text for n in queue.snapshot()] == ["Got pull requests: 10"]

    clock.advance(0.2)
    assert queue.expire(clock()) == 1
    assert queue.snapshot() == ()


def test_entries_expire_independently(clock):
    queue = NotificationQueue()
    queue.push(Notification.info("first", created_at=clock()))
    clock.advance(3.0)
    queue.push(Notification.warning("second", created_at=clock()))

    clock.advance(2.5)
    queue.expire(clock())
    assert [n.text for n in queue.snapshot()] == ["second"]

    clock.advance(3.0)
    queue.expire(clock())
    assert len(queue) == 0


def test_order_is_oldest_first(clock):
    queue = NotificationQueue()
    for text in ("a", "b", "c"):
        queue.push(Notification.error(text, created_at=clock()))
        clock.advance(0.1)
    assert [n.text for n in queue.snapshot()] == ["a", "b", "c"]
    assert all(n.level is NotificationLevel.ERROR for n in queue.snapshot())


class TestPanel:
    def test_notify_pushes_and_tick_expires(self, clock):
        panel = NotificationsPanel(clock=clock)
        panel.apply_command(cmd.Notify(Notification.info("hello", created_at=clock())))
        assert panel.render((80, 24)) is not None

        clock.advance(4.9)
        panel.apply_command(cmd.Tick())
        assert len(panel.queue) == 1

        clock.advance(0.2)
        panel.apply_command(cmd.Tick())
        assert len(panel.queue) == 0
        assert panel.render((80, 24)) is None

    def test_other_commands_leave_queue_alone(self, clock):
        panel = NotificationsPanel(clock=clock)
        panel.apply_command(cmd.Notify(Notification.info("x", created_at=clock())))
        clock.advance(10)
        panel.apply_command(cmd.Refresh())
        assert len(panel.queue) == 1
