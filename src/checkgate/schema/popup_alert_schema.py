from datetime import datetime

from pydantic import BaseModel, Field

from checkgate.model.enum.check_status_enum import CheckStatus

DEFAULT_POPUP_MESSAGE = "The Workspace Mechanic found\nissues that need your attention."


class PopupAlertModel(BaseModel):
    status: CheckStatus = CheckStatus.FAILED
    message: str = DEFAULT_POPUP_MESSAGE
    timestamp: datetime
    timeout_sec: float = Field(default=120.0, gt=0)
