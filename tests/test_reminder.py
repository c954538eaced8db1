from datetime import datetime, timedelta
from unittest.mock import Mock

import pytest

from app.kiosk.reminder import (
    REMINDER_TITLE,
    CheckoutReminder,
    ReminderState,
    time_until_next_reminder,
)
from app.kiosk.storage import LocalStorage, SessionStore

CHECK_IN = datetime(2025, 3, 10, 9, 0)


class FakeTimer:
    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True


@pytest.fixture
def timers():
    return []


@pytest.fixture
def store():
    return SessionStore(LocalStorage())


@pytest.fixture
def notifier():
    notifier = Mock()
    notifier.request_permission.return_value = True
    return notifier


@pytest.fixture
def make_reminder(store, notifier, timers):
    def _make(now):
        def timer_factory(interval, function):
            timer = FakeTimer(interval, function)
            timers.append(timer)
            return timer

        return CheckoutReminder(
            store, notifier=notifier, timer_factory=timer_factory, clock=lambda: now
        )

    return _make


def test_time_until_next_reminder():
    assert time_until_next_reminder(CHECK_IN, CHECK_IN) == timedelta(hours=2)
    assert time_until_next_reminder(
        CHECK_IN, CHECK_IN + timedelta(minutes=30)
    ) == timedelta(minutes=90)
    assert time_until_next_reminder(
        CHECK_IN, CHECK_IN + timedelta(hours=5)
    ) == timedelta(hours=1)
    # Clock behind the check-in time
    assert time_until_next_reminder(
        CHECK_IN, CHECK_IN - timedelta(minutes=5)
    ) == timedelta(hours=2)


def test_enable_arms_timer(make_reminder, store, timers):
    reminder = make_reminder(CHECK_IN + timedelta(minutes=30))

    assert reminder.enable(CHECK_IN) is True

    assert reminder.state == ReminderState.ARMED
    assert store.is_reminder_enabled() is True
    assert len(timers) == 1
    assert timers[0].interval == 90 * 60
    assert timers[0].started and timers[0].daemon


def test_enable_permission_denied(make_reminder, notifier, store, timers):
    notifier.request_permission.return_value = False
    reminder = make_reminder(CHECK_IN)

    assert reminder.enable(CHECK_IN) is False

    assert reminder.state == ReminderState.DISABLED
    assert store.is_reminder_enabled() is False
    assert timers == []


def test_fire_notifies_and_rearms(make_reminder, notifier, timers):
    reminder = make_reminder(CHECK_IN)
    reminder.enable(CHECK_IN)

    timers[0].function()

    notifier.show.assert_called_once()
    assert notifier.show.call_args[0][0] == REMINDER_TITLE
    assert reminder.state == ReminderState.ARMED
    assert len(timers) == 2
    assert timers[1].interval == 2 * 60 * 60


def test_fire_rearms_when_notification_fails(make_reminder, notifier, timers):
    notifier.show.side_effect = RuntimeError('no display')
    reminder = make_reminder(CHECK_IN)
    reminder.enable(CHECK_IN)

    timers[0].function()

    assert reminder.state == ReminderState.ARMED
    assert len(timers) == 2


def test_disable_cancels_timer(make_reminder, store, notifier, timers):
    reminder = make_reminder(CHECK_IN)
    reminder.enable(CHECK_IN)

    reminder.disable()

    assert reminder.state == ReminderState.DISABLED
    assert timers[0].cancelled is True
    assert store.is_reminder_enabled() is False

    # A timer that was already due does nothing once disabled
    timers[0].function()
    notifier.show.assert_not_called()


def test_enable_twice_keeps_one_timer(make_reminder, timers):
    reminder = make_reminder(CHECK_IN)
    reminder.enable(CHECK_IN)
    reminder.enable(CHECK_IN)

    assert timers[0].cancelled is True
    assert timers[1].cancelled is False


def test_restore(make_reminder, store, timers):
    reminder = make_reminder(CHECK_IN + timedelta(hours=3))
    assert reminder.restore(CHECK_IN) is False
    assert timers == []

    store.set_reminder_enabled(True)
    assert reminder.restore(CHECK_IN) is True
    assert reminder.state == ReminderState.ARMED
    assert timers[0].interval == 60 * 60
