import logging

from checkgate.schema.popup_alert_schema import PopupAlertModel
from checkgate.util.notifier.base import BaseNotifier


class LogNotifier(BaseNotifier):
    """Shows the popup as a log record. Always available as last resort."""

    def __init__(self, priority: int = 10, enabled: bool = True, level: int = logging.WARNING):
        super().__init__(priority=priority, enabled=enabled)
        self.level = level
        self.logger = logging.getLogger("PopupAlert")

    async def send(self, alert: PopupAlertModel) -> bool:
        if not self.enabled:
            return False

        message = " ".join(alert.message.split())
        self.logger.log(self.level, f"[POPUP] [{alert.status}] {message}")
        return True
