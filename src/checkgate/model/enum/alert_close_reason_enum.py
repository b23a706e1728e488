from enum import StrEnum


class AlertCloseReason(StrEnum):
    """Why a popup alert stopped being shown"""

    DISMISSED = "dismissed"
    TIMEOUT = "timeout"
    DISABLED = "disabled"
    REPAIR = "repair"
    DISPOSED = "disposed"
    UNDELIVERED = "undelivered"
