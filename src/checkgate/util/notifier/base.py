from abc import ABC, abstractmethod

from checkgate.schema.popup_alert_schema import PopupAlertModel


class BaseNotifier(ABC):
    """
    Base class for popup delivery channels.
    Lower priority value is tried first.
    """

    def __init__(self, priority: int, enabled: bool = True):
        self.priority = priority
        self.enabled = enabled

    @abstractmethod
    async def send(self, alert: PopupAlertModel) -> bool:
        """
        Deliver the popup.

        Returns:
            bool: True if successful, False if failed
        """
        ...

    @property
    def notifier_type(self) -> str:
        return self.__class__.__name__
