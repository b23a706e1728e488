import logging
from typing import Callable

from checkgate.evaluator.notification_gate import NotificationGate
from checkgate.handler.popup_notifier import PopupNotifier
from checkgate.preference.popup_preference import InMemoryPopupPreference, PopupPreference, YamlPopupPreference
from checkgate.presenter.alert_presenter import NotifierAlertPresenter
from checkgate.schema.notifier_schema import NotifierConfigSchema
from checkgate.schema.system_config_schema import PopupConfig, SystemConfig
from checkgate.util.logger_config import LOG_LEVEL_MAP
from checkgate.util.notifier.base import BaseNotifier
from checkgate.util.notifier.log_notifier import LogNotifier
from checkgate.util.notifier.telegram_notifier import TelegramNotifier
from checkgate.util.notifier.webhook_notifier import WebhookNotifier
from checkgate.util.pubsub.base import PubSub
from checkgate.util.pubsub.subscriber.check_status_subscriber import CheckStatusSubscriber

logger = logging.getLogger("PopupFactory")


def build_notifiers(config: NotifierConfigSchema) -> list[BaseNotifier]:
    """Enabled notifiers, highest priority (lowest value) first."""
    notifier_list: list[BaseNotifier] = []

    if config.telegram.enabled:
        if config.telegram.bot_token and config.telegram.chat_id:
            notifier_list.append(
                TelegramNotifier(
                    bot_token=config.telegram.bot_token,
                    chat_id=config.telegram.chat_id,
                    priority=config.telegram.priority,
                    timeout_sec=config.telegram.timeout_sec,
                    parse_mode=config.telegram.parse_mode,
                )
            )
        else:
            logger.warning("[FACTORY] Telegram enabled but bot_token/chat_id missing, skipped")

    if config.webhook.enabled:
        notifier_list.append(
            WebhookNotifier(
                url=config.webhook.url,
                priority=config.webhook.priority,
                timeout_sec=config.webhook.timeout_sec,
            )
        )

    if config.log.enabled:
        notifier_list.append(LogNotifier(priority=config.log.priority, level=LOG_LEVEL_MAP[config.log.level]))

    notifier_list.sort(key=lambda n: n.priority)
    logger.info(f"[FACTORY] Notifiers: {[n.notifier_type for n in notifier_list] or '(none)'}")
    return notifier_list


def build_preference(popup_config: PopupConfig) -> PopupPreference:
    if popup_config.PREFERENCE_PATH:
        return YamlPopupPreference(popup_config.PREFERENCE_PATH, default=popup_config.DEFAULT_SHOW_POPUP)
    return InMemoryPopupPreference(show_popup=popup_config.DEFAULT_SHOW_POPUP)


def build_popup_notifier(
    system_config: SystemConfig,
    pubsub: PubSub,
    preference: PopupPreference | None = None,
    repair_action: Callable[[], None] | None = None,
) -> tuple[PopupNotifier, CheckStatusSubscriber, NotifierAlertPresenter]:
    """
    Build the popup pipeline.

    Returns:
        Tuple of (popup_notifier, check_status_subscriber, presenter).
        The caller runs check_status_subscriber.run() and calls popup_notifier.initialize().
    """
    preference = preference or build_preference(system_config.POPUP)

    gate = NotificationGate(preference)
    presenter = NotifierAlertPresenter(
        notifier_list=build_notifiers(system_config.NOTIFIERS),
        preference=preference,
        retry_config=system_config.RETRY,
        repair_action=repair_action,
    )
    status_subscriber = CheckStatusSubscriber(pubsub)
    popup_notifier = PopupNotifier(
        gate=gate,
        source=status_subscriber,
        presenter=presenter,
        message=system_config.POPUP.MESSAGE,
        timeout_sec=system_config.POPUP.TIMEOUT_SEC,
    )

    return popup_notifier, status_subscriber, presenter
