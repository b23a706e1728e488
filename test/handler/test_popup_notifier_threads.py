import asyncio
import logging
import threading

import pytest

from checkgate.evaluator.notification_gate import NotificationGate
from checkgate.handler.popup_notifier import PopupNotifier
from checkgate.model.enum.check_status_enum import CheckStatus
from checkgate.model.gate_model import GateState
from checkgate.preference.popup_preference import InMemoryPopupPreference
from checkgate.presenter.alert_presenter import NotifierAlertPresenter
from checkgate.schema.popup_alert_schema import PopupAlertModel
from checkgate.util.notifier.base import BaseNotifier
from checkgate.util.notifier.log_notifier import LogNotifier
from checkgate.util.pubsub.in_memory_pubsub import InMemoryPubSub
from checkgate.util.pubsub.subscriber.check_status_subscriber import CheckStatusSubscriber


class HangingNotifier(BaseNotifier):
    """Delivery that never finishes on its own."""

    def __init__(self):
        super().__init__(priority=1)
        self.started = asyncio.Event()
        self.cancelled = False

    async def send(self, alert: PopupAlertModel) -> bool:
        self.started.set()
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return True


def run_in_thread(target, *args) -> None:
    worker = threading.Thread(target=target, args=args)
    worker.start()
    worker.join(timeout=2)
    assert not worker.is_alive()


def build(notifier_list: list[BaseNotifier]):
    preference = InMemoryPopupPreference()
    source = CheckStatusSubscriber(InMemoryPubSub())
    presenter = NotifierAlertPresenter(notifier_list, preference)
    popup_notifier = PopupNotifier(NotificationGate(preference), source, presenter, timeout_sec=60)
    popup_notifier.initialize()
    return popup_notifier, source, presenter, preference


class TestPopupNotifierAcrossThreads:

    @pytest.mark.asyncio
    async def test_failure_from_checker_thread_shows_popup(self, caplog):
        # Arrange
        popup_notifier, source, presenter, _ = build([LogNotifier()])

        # Act
        with caplog.at_level(logging.WARNING, logger="PopupAlert"):
            run_in_thread(source.deliver, CheckStatus.FAILED)
            await asyncio.sleep(0.05)

        # Assert
        assert presenter.is_showing is True
        assert "[POPUP] [FAILED]" in caplog.text
        assert popup_notifier.gate.state == GateState(armed=False, visible=True)

        popup_notifier.dispose()

    @pytest.mark.asyncio
    async def test_repeated_failures_from_checker_thread_show_one_popup(self, caplog):
        popup_notifier, source, presenter, _ = build([LogNotifier()])

        with caplog.at_level(logging.WARNING, logger="PopupAlert"):
            for _ in range(3):
                run_in_thread(source.deliver, CheckStatus.FAILED)
            await asyncio.sleep(0.05)

        assert caplog.text.count("[POPUP] [FAILED]") == 1
        assert presenter.is_showing is True

        popup_notifier.dispose()

    @pytest.mark.asyncio
    async def test_dismiss_from_user_thread_releases_gate_and_cancels_delivery(self):
        # Arrange
        notifier = HangingNotifier()
        popup_notifier, source, presenter, _ = build([notifier])
        run_in_thread(source.deliver, CheckStatus.FAILED)
        await asyncio.wait_for(notifier.started.wait(), timeout=1)

        # Act
        run_in_thread(presenter.dismiss)
        await asyncio.sleep(0.05)

        # Assert
        assert presenter.is_showing is False
        assert notifier.cancelled is True
        assert popup_notifier.gate.state == GateState(armed=False, visible=False)

        popup_notifier.dispose()

    @pytest.mark.asyncio
    async def test_disable_from_user_thread_turns_preference_off(self):
        popup_notifier, source, presenter, preference = build([LogNotifier()])
        run_in_thread(source.deliver, CheckStatus.FAILED)
        await asyncio.sleep(0.01)

        run_in_thread(presenter.disable_popup)
        await asyncio.sleep(0.01)

        assert presenter.is_showing is False
        assert preference.is_show_popup() is False
        assert popup_notifier.gate.state.visible is False

        popup_notifier.dispose()

    @pytest.mark.asyncio
    async def test_new_episode_from_checker_thread_after_user_dismiss(self):
        popup_notifier, source, presenter, _ = build([LogNotifier()])
        run_in_thread(source.deliver, CheckStatus.FAILED)
        run_in_thread(presenter.dismiss)

        run_in_thread(source.deliver, CheckStatus.PASSED)
        run_in_thread(source.deliver, CheckStatus.FAILED)
        await asyncio.sleep(0.01)

        assert presenter.is_showing is True

        popup_notifier.dispose()

    def test_presenter_without_loop_releases_gate(self):
        """No event loop to show on: the failure is logged and visibility does not stick"""
        popup_notifier, source, presenter, _ = build([LogNotifier()])

        run_in_thread(source.deliver, CheckStatus.FAILED)

        assert presenter.is_showing is False
        assert popup_notifier.gate.state == GateState(armed=False, visible=False)
