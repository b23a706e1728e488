import pytest

from checkgate.evaluator.notification_gate import NotificationGate
from checkgate.preference.popup_preference import InMemoryPopupPreference


@pytest.fixture
def preference() -> InMemoryPopupPreference:
    return InMemoryPopupPreference(show_popup=True)


@pytest.fixture
def gate(preference) -> NotificationGate:
    return NotificationGate(preference)
