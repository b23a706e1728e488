from pydantic import BaseModel, ConfigDict

from checkgate.model.enum.check_status_enum import CheckStatus


class GateState(BaseModel):
    """
    Snapshot of the notification gate.

    armed:
      The next FAILED status, if popups are enabled, fires.

    visible:
      A popup is currently shown; no second popup is fired while set.
    """

    model_config = ConfigDict(frozen=True)

    armed: bool = True
    visible: bool = False


class FireDecision(BaseModel):
    """Outcome of feeding one status into the gate"""

    model_config = ConfigDict(frozen=True)

    fire: bool
    status: CheckStatus
    previous: GateState
    current: GateState

    def __bool__(self) -> bool:
        return self.fire
