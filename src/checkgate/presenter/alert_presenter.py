import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from checkgate.model.enum.alert_close_reason_enum import AlertCloseReason
from checkgate.preference.popup_preference import PopupPreference
from checkgate.schema.notifier_schema import RetryConfigSchema
from checkgate.schema.popup_alert_schema import PopupAlertModel
from checkgate.util.notifier.base import BaseNotifier

OnClosed = Callable[[], None]


class AlertPresenter(ABC):
    """Shows a popup and reports back, through on_closed, when it is gone."""

    @abstractmethod
    def show(self, alert: PopupAlertModel, on_closed: OnClosed) -> None: ...

    @abstractmethod
    def close(self, reason: AlertCloseReason) -> bool: ...

    @property
    @abstractmethod
    def is_showing(self) -> bool: ...


@dataclass
class _ShownPopup:
    alert: PopupAlertModel
    on_closed: OnClosed
    delivery_task: asyncio.Task | None = None
    timeout_handle: asyncio.TimerHandle | None = None


class NotifierAlertPresenter(AlertPresenter):
    """
    Presents the popup through the configured notifiers.

    The popup counts as shown from show() until one of:
    - dismiss()            user closed it
    - alert.timeout_sec    auto-dismiss
    - disable_popup()      "Disable this popup" action, also turns the preference off
    - view_and_correct()   "View and correct" action, hands over to the repair action
    - delivery failure     no notifier could deliver it

    on_closed runs exactly once per shown popup.

    The presenter is bound to one event loop: the loop passed in, else the loop
    running when it is constructed or first used. show() and the close paths may
    be called from any thread; timers and delivery tasks are always created and
    cancelled on the bound loop through call_soon_threadsafe.
    """

    def __init__(
        self,
        notifier_list: list[BaseNotifier],
        preference: PopupPreference,
        retry_config: RetryConfigSchema | None = None,
        repair_action: Callable[[], None] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        self.notifier_list = sorted(notifier_list, key=lambda n: n.priority)
        self.preference = preference
        self.retry = retry_config or RetryConfigSchema()
        self.repair_action = repair_action
        self._loop: asyncio.AbstractEventLoop | None = loop or _running_loop()
        self._current: _ShownPopup | None = None
        self._lock = threading.Lock()
        self.logger = logging.getLogger(__class__.__name__)

    @property
    def is_showing(self) -> bool:
        with self._lock:
            return self._current is not None

    def show(self, alert: PopupAlertModel, on_closed: OnClosed) -> None:
        loop = self._bound_loop()
        shown = _ShownPopup(alert=alert, on_closed=on_closed)

        with self._lock:
            previous, self._current = self._current, shown

        if previous is not None:
            self.logger.warning("[POPUP] Popup already shown, replacing it")
            self._finish(previous, AlertCloseReason.DISMISSED)

        self._call_in_loop(loop, self._start, shown)
        self.logger.info(f"[POPUP] Showing popup for {alert.timeout_sec:.0f}s")

    def close(self, reason: AlertCloseReason) -> bool:
        with self._lock:
            shown = self._current
        if shown is None:
            return False
        return self._close_shown(shown, reason)

    def dismiss(self) -> bool:
        return self.close(AlertCloseReason.DISMISSED)

    def disable_popup(self) -> bool:
        closed = self.close(AlertCloseReason.DISABLED)
        self.preference.do_not_show_popup()
        self.logger.info("[POPUP] Popups disabled by user")
        return closed

    def view_and_correct(self) -> bool:
        closed = self.close(AlertCloseReason.REPAIR)
        if self.repair_action is None:
            self.logger.warning("[POPUP] No repair action configured")
            return closed

        try:
            self.repair_action()
        except Exception as e:
            self.logger.error(f"[POPUP] Repair action failed: {e}")
        return closed

    def _bound_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = _running_loop()
        if self._loop is None or self._loop.is_closed():
            raise RuntimeError("NotifierAlertPresenter is not bound to a live event loop")
        return self._loop

    @staticmethod
    def _call_in_loop(loop: asyncio.AbstractEventLoop, callback, *args) -> None:
        if _running_loop() is loop:
            callback(*args)
        else:
            loop.call_soon_threadsafe(callback, *args)

    def _start(self, shown: _ShownPopup) -> None:
        # Runs on the bound loop; the popup may already be closed by another thread
        with self._lock:
            if self._current is not shown:
                return

        loop = asyncio.get_running_loop()
        shown.timeout_handle = loop.call_later(
            shown.alert.timeout_sec, self._close_shown, shown, AlertCloseReason.TIMEOUT
        )
        shown.delivery_task = loop.create_task(self._deliver(shown), name="popup:deliver")

    def _close_shown(self, shown: _ShownPopup, reason: AlertCloseReason) -> bool:
        with self._lock:
            if self._current is not shown:
                return False
            self._current = None

        self._finish(shown, reason)
        return True

    def _finish(self, shown: _ShownPopup, reason: AlertCloseReason) -> None:
        if self._loop is not None and not self._loop.is_closed():
            self._call_in_loop(self._loop, self._cancel_pending, shown)

        self.logger.info(f"[POPUP] Closed ({reason})")
        try:
            shown.on_closed()
        except Exception as e:
            self.logger.error(f"[POPUP] on_closed callback failed: {e}")

    @staticmethod
    def _cancel_pending(shown: _ShownPopup) -> None:
        if shown.timeout_handle is not None:
            shown.timeout_handle.cancel()
        task = shown.delivery_task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _deliver(self, shown: _ShownPopup) -> bool:
        """Fallback chain: first notifier (by priority) that succeeds wins."""
        for notifier in self.notifier_list:
            if not notifier.enabled:
                continue
            if await self._send_with_retry(notifier, shown.alert):
                self.logger.info(f"[POPUP] Delivered via {notifier.notifier_type}")
                return True

        self.logger.error("[POPUP] All notifiers failed, popup not shown")
        self._close_shown(shown, AlertCloseReason.UNDELIVERED)
        return False

    async def _send_with_retry(self, notifier: BaseNotifier, alert: PopupAlertModel) -> bool:
        for attempt in range(self.retry.max_attempts):
            try:
                if await notifier.send(alert):
                    return True
            except Exception as e:
                self.logger.error(f"[{notifier.notifier_type}] Exception: {e}")

            if attempt < self.retry.max_attempts - 1:
                await asyncio.sleep(self.retry.backoff_base_sec * (self.retry.backoff_multiplier**attempt))

        return False


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
