from datetime import datetime, timedelta
from enum import Enum
from threading import Lock, Timer
from typing import Callable, Optional

from app.core.logger import logger
from app.core.utils import current_time

from .storage import SessionStore

REMINDER_INTERVAL = timedelta(hours=2)
REMINDER_TITLE = 'Still at the Launchpad?'
REMINDER_BODY = "Don't forget to check out when you leave."


class ReminderState(str, Enum):
    DISABLED = 'disabled'
    ARMED = 'armed'
    FIRING = 'firing'


class Notifier:
    """Platform notification backend. The default one writes to the log."""

    def request_permission(self) -> bool:
        return True

    def show(self, title: str, body: str) -> None:
        logger.info('Notification: %s - %s', title, body)


def time_until_next_reminder(
    check_in_time: datetime,
    now: datetime,
    interval: timedelta = REMINDER_INTERVAL,
) -> timedelta:
    elapsed = max(now - check_in_time, timedelta(0))
    return interval - (elapsed % interval)


class CheckoutReminder:
    """
    Reminds a checked-in user to check out, every `interval` since check-in.

    Owns a single timer. States: disabled -> armed (timer pending) -> firing
    (notification being shown) -> armed again. disable() from any state
    cancels the timer and clears the persisted flag.
    """

    def __init__(
        self,
        store: SessionStore,
        notifier: Optional[Notifier] = None,
        interval: timedelta = REMINDER_INTERVAL,
        timer_factory: Callable[..., Timer] = Timer,
        clock: Callable[[], datetime] = current_time,
    ):
        self._store = store
        self._notifier = notifier or Notifier()
        self._interval = interval
        self._timer_factory = timer_factory
        self._clock = clock
        self._timer: Optional[Timer] = None
        self._lock = Lock()
        self.state = ReminderState.DISABLED

    def enable(self, check_in_time: datetime) -> bool:
        if not self._notifier.request_permission():
            logger.warning('Notification permission denied, reminder stays off')
            self.disable()
            return False

        self._store.set_reminder_enabled(True)
        delay = time_until_next_reminder(check_in_time, self._clock(), self._interval)
        with self._lock:
            self._start_timer(delay)
        logger.info('Checkout reminder armed, first one in %s', delay)
        return True

    def restore(self, check_in_time: datetime) -> bool:
        """Re-arm after a restart if the user had the reminder on."""
        if not self._store.is_reminder_enabled():
            return False
        return self.enable(check_in_time)

    def disable(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self.state = ReminderState.DISABLED
        self._store.set_reminder_enabled(False)

    def _start_timer(self, delay: timedelta) -> None:
        # Caller holds the lock
        if self._timer is not None:
            self._timer.cancel()
        timer = self._timer_factory(delay.total_seconds(), self._fire)
        timer.daemon = True
        timer.start()
        self._timer = timer
        self.state = ReminderState.ARMED

    def _fire(self) -> None:
        with self._lock:
            if self.state != ReminderState.ARMED:
                return
            self.state = ReminderState.FIRING

        try:
            self._notifier.show(REMINDER_TITLE, REMINDER_BODY)
        except Exception as e:
            logger.error('Error showing checkout reminder: %s', e)

        with self._lock:
            # disable() may have run while the notification was showing
            if self.state == ReminderState.FIRING:
                self._start_timer(self._interval)
