"""Check gate exception definitions"""


class CheckGateError(Exception):
    """Base exception for the check gate"""

    pass


class UnrecognizedStatusError(CheckGateError):
    """Status value outside the known check statuses"""

    def __init__(self, value):
        super().__init__(f"Unknown status: {value!r}")
        self.value = value


class PreferenceReadError(CheckGateError):
    """Popup preference could not be read"""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path
