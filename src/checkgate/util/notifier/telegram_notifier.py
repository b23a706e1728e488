from html import escape

from checkgate.schema.popup_alert_schema import PopupAlertModel
from checkgate.util.notifier.webhook_notifier import WebhookNotifier


class TelegramNotifier(WebhookNotifier):
    """Telegram Bot API sendMessage."""

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        priority: int = 2,
        enabled: bool = True,
        timeout_sec: float = 5.0,
        parse_mode: str = "HTML",
    ):
        super().__init__(
            url=f"https://api.telegram.org/bot{bot_token}/sendMessage",
            priority=priority,
            enabled=enabled,
            timeout_sec=timeout_sec,
            platform="telegram",
        )
        self.chat_id = chat_id
        self.parse_mode = parse_mode

    def _build_payload(self, alert: PopupAlertModel) -> dict:
        return {
            "chat_id": self.chat_id,
            "text": self._format_message(alert),
            "parse_mode": self.parse_mode,
        }

    def _format_message(self, alert: PopupAlertModel) -> str:
        return (
            f"🟠 <b>Check {alert.status}</b>\n\n"
            f"{escape(alert.message)}\n\n"
            f"<b>Time:</b> {alert.timestamp.strftime('%Y-%m-%d %H:%M:%S')}"
        )
