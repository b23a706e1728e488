import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from checkgate.presenter.alert_presenter import NotifierAlertPresenter
from checkgate.schema.system_config_schema import SystemConfig
from checkgate.util.config_manager import ConfigManager
from checkgate.util.factory.popup_factory import build_popup_notifier, build_preference
from checkgate.util.logger_config import setup_logging
from checkgate.util.pubsub.in_memory_pubsub import InMemoryPubSub
from checkgate.util.pubsub.pubsub_topic import PubSubTopic

logger = logging.getLogger("CheckGateMain")

DEFAULT_SYSTEM_CONFIG_PATH = "./res/system_config.yml"


async def main(system_config_path: str = DEFAULT_SYSTEM_CONFIG_PATH):
    load_dotenv()

    system_config: SystemConfig = ConfigManager.load_system_config(system_config_path)
    setup_logging(
        log_level=system_config.LOG.LEVEL,
        log_to_file=system_config.LOG.TO_FILE,
        log_dir=system_config.LOG.DIR,
    )

    pubsub = InMemoryPubSub()
    for topic in PubSubTopic:
        pubsub.set_topic_policy_model(topic, system_config.PUBSUB)

    preference = build_preference(system_config.POPUP)
    popup_notifier, status_subscriber, presenter = build_popup_notifier(
        system_config=system_config,
        pubsub=pubsub,
        preference=preference,
        repair_action=lambda: logger.info("Repair requested, hand over to the check service"),
    )

    subscriber_task = asyncio.create_task(status_subscriber.run(), name="sub:check_status")
    await asyncio.sleep(0)
    popup_notifier.initialize()
    logger.info("Reading check statuses from stdin (FAILED/PASSED/STOPPED/UPDATING, dismiss/disable/enable/repair)")

    try:
        await _feed_stdin(pubsub, presenter)
    finally:
        popup_notifier.dispose()
        subscriber_task.cancel()
        try:
            await subscriber_task
        except asyncio.CancelledError:
            logger.info("Check status subscriber stopped")
        await pubsub.close()


async def _feed_stdin(pubsub: InMemoryPubSub, presenter: NotifierAlertPresenter) -> None:
    loop = asyncio.get_running_loop()
    actions = {
        "dismiss": presenter.dismiss,
        "disable": presenter.disable_popup,
        "enable": lambda: presenter.preference.set_show_popup(True),
        "repair": presenter.view_and_correct,
    }

    while True:
        line: str = await loop.run_in_executor(None, sys.stdin.readline)
        if not line:
            return

        word = line.strip()
        if not word:
            continue

        action = actions.get(word.lower())
        if action is not None:
            action()
        else:
            # typed input is forgiving about case; the gate itself only takes exact statuses
            await pubsub.publish(PubSubTopic.CHECK_STATUS, word.upper())

        # let the subscriber drain before the next read
        await asyncio.sleep(0)


def cli():
    parser = argparse.ArgumentParser(description="Failure popup gate for a background check service")
    parser.add_argument("--config", default=DEFAULT_SYSTEM_CONFIG_PATH, help="Path to system_config.yml")
    args = parser.parse_args()

    try:
        asyncio.run(main(system_config_path=args.config))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    cli()
