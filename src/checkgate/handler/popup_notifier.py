import logging
from datetime import datetime

from checkgate.evaluator.notification_gate import NotificationGate
from checkgate.exception import UnrecognizedStatusError
from checkgate.model.enum.alert_close_reason_enum import AlertCloseReason
from checkgate.model.enum.check_status_enum import CheckStatus
from checkgate.model.gate_model import FireDecision
from checkgate.presenter.alert_presenter import AlertPresenter
from checkgate.schema.popup_alert_schema import DEFAULT_POPUP_MESSAGE, PopupAlertModel
from checkgate.util.status_listener import StatusChangeSource

logger = logging.getLogger("PopupNotifier")


class PopupNotifier:
    """
    Connects the check status stream to the gate and the gate to the presenter.

    Lives as long as the owning feature: initialize() attaches to the status
    source, dispose() detaches and takes down a popup that is still shown.
    """

    def __init__(
        self,
        gate: NotificationGate,
        source: StatusChangeSource,
        presenter: AlertPresenter,
        message: str = DEFAULT_POPUP_MESSAGE,
        timeout_sec: float = 120.0,
    ):
        self.gate = gate
        self.source = source
        self.presenter = presenter
        self.message = message
        self.timeout_sec = timeout_sec
        self._attached = False

    def initialize(self) -> None:
        if self._attached:
            return
        self.source.add_status_listener(self)
        self._attached = True
        logger.info("[NOTIFIER] Attached to check status stream")

    def dispose(self) -> None:
        if not self._attached:
            return
        self.source.remove_status_listener(self)
        self._attached = False

        if self.presenter.is_showing:
            self.presenter.close(AlertCloseReason.DISPOSED)
        logger.info("[NOTIFIER] Detached from check status stream")

    def on_status_changed(self, status: CheckStatus) -> None:
        try:
            decision: FireDecision = self.gate.handle_event(status)
        except UnrecognizedStatusError as e:
            logger.error(f"[NOTIFIER] Discarding event: {e}")
            return

        if decision.fire:
            self._show_popup(decision.status)

    def _show_popup(self, status: CheckStatus) -> None:
        alert = PopupAlertModel(
            status=status,
            message=self.message,
            timestamp=datetime.now().astimezone(),
            timeout_sec=self.timeout_sec,
        )

        try:
            self.presenter.show(alert, on_closed=self.gate.notify_alert_closed)
        except Exception as e:
            logger.error(f"[NOTIFIER] Failed to show popup: {e}")
            self.gate.notify_alert_closed()
