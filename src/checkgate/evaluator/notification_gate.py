import logging
import threading

from checkgate.model.enum.check_status_enum import CheckStatus
from checkgate.model.gate_model import FireDecision, GateState
from checkgate.preference.popup_preference import PopupPreference


class NotificationGate:
    """
    Decides when a check failure should raise a popup, without spamming the user.

    Rules per status (enabled = popup preference is on):
    - FAILED, disabled: re-arm, never fire (first failure after re-enabling fires)
    - FAILED, enabled, armed, not visible: fire, disarm, mark visible
    - FAILED, enabled, armed, visible: disarm only (popup already up)
    - FAILED, enabled, disarmed: nothing (same failure episode)
    - PASSED / STOPPED: re-arm
    - UPDATING: nothing

    handle_event and notify_alert_closed may be called from different threads,
    so (armed, visible) is a single value swapped under one lock.
    """

    def __init__(self, preference: PopupPreference, initial_state: GateState | None = None):
        self.preference = preference
        self._state: GateState = initial_state or GateState()
        self._lock = threading.Lock()
        self.logger = logging.getLogger(__class__.__name__)

    @property
    def state(self) -> GateState:
        with self._lock:
            return self._state

    def is_enabled(self) -> bool:
        """
        Live read of the popup preference.

        A failing read counts as disabled: better to miss one popup than to keep
        popping up on a broken preference store.
        """
        try:
            return bool(self.preference.is_show_popup())
        except Exception as e:
            self.logger.warning(f"[GATE] Preference read failed, treating popups as disabled: {e}")
            return False

    def handle_event(self, status: CheckStatus | str) -> FireDecision:
        """
        Apply one status to the gate and report whether a popup must be shown now.

        Raises:
            UnrecognizedStatusError: status is not a CheckStatus; state is untouched.
        """
        status = CheckStatus.parse(status)

        with self._lock:
            previous = self._state
            current, fire = self._transition(previous, status)
            self._state = current

        if fire:
            self.logger.info(f"[GATE] {status}: fire popup ({previous} → {current})")
        elif current != previous:
            self.logger.debug(f"[GATE] {status}: {previous} → {current}")

        return FireDecision(fire=fire, status=status, previous=previous, current=current)

    def notify_alert_closed(self) -> None:
        """Popup is no longer shown (any close path). Safe to call repeatedly."""
        with self._lock:
            if not self._state.visible:
                return
            self._state = self._state.model_copy(update={"visible": False})

        self.logger.debug("[GATE] Popup closed")

    def _transition(self, state: GateState, status: CheckStatus) -> tuple[GateState, bool]:
        if status == CheckStatus.FAILED:
            if not self.is_enabled():
                # Re-arm so the popup appears once the preference is switched back on
                return state.model_copy(update={"armed": True}), False

            if not state.armed:
                return state, False

            if state.visible:
                return state.model_copy(update={"armed": False}), False

            return GateState(armed=False, visible=True), True

        if status in (CheckStatus.PASSED, CheckStatus.STOPPED):
            # Episode over: the next failure is a new one
            return state.model_copy(update={"armed": True}), False

        # UPDATING
        return state, False
