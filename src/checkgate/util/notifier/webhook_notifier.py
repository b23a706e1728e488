import logging

import httpx

from checkgate.schema.popup_alert_schema import PopupAlertModel
from checkgate.util.notifier.base import BaseNotifier


class WebhookNotifier(BaseNotifier):
    """
    Posts the popup as JSON to an HTTP endpoint.
    Subclasses override _build_payload for platform-specific bodies.
    """

    def __init__(
        self,
        url: str,
        priority: int = 2,
        enabled: bool = True,
        timeout_sec: float = 5.0,
        platform: str = "webhook",
    ):
        super().__init__(priority=priority, enabled=enabled)
        self.logger = logging.getLogger(self.__class__.__name__)
        self.url = url
        self.timeout_sec = timeout_sec
        self.platform = platform

    async def send(self, alert: PopupAlertModel) -> bool:
        tag = self.platform.upper()
        if not self.enabled:
            self.logger.debug(f"[{tag}] Notifier is disabled, skipping")
            return False

        if not self.url:
            self.logger.warning(f"[{tag}] URL not configured, skipping")
            return False

        try:
            async with httpx.AsyncClient(timeout=self.timeout_sec) as client:
                response = await client.post(self.url, json=self._build_payload(alert), headers=self._get_headers())
        except httpx.TimeoutException:
            self.logger.error(f"[{tag}] Timeout after {self.timeout_sec}s")
            return False
        except httpx.HTTPError as e:
            self.logger.error(f"[{tag}] Failed to send: {e}")
            return False

        if not self._is_success(response):
            self.logger.warning(f"[{tag}] Failed with status {response.status_code}: {response.text[:200]}")
            return False

        self.logger.info(f"[{tag}] Popup delivered ({alert.status})")
        return True

    def _build_payload(self, alert: PopupAlertModel) -> dict:
        return {
            "status": alert.status.value,
            "message": alert.message,
            "timestamp": alert.timestamp.isoformat(),
            "timeout_sec": alert.timeout_sec,
        }

    def _get_headers(self) -> dict:
        return {"Content-Type": "application/json"}

    def _is_success(self, response: httpx.Response) -> bool:
        return 200 <= response.status_code < 300
