from enum import StrEnum

from checkgate.exception import UnrecognizedStatusError


class CheckStatus(StrEnum):
    """
    Status reported by the background check service:
    FAILED: At least one check failed
    PASSED: All checks passed
    STOPPED: Check service was stopped
    UPDATING: Checks are being (re)evaluated, no verdict yet
    """

    FAILED = "FAILED"
    PASSED = "PASSED"
    STOPPED = "STOPPED"
    UPDATING = "UPDATING"

    @classmethod
    def parse(cls, value) -> "CheckStatus":
        """Exact members or their exact values only; anything else is a contract violation."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        raise UnrecognizedStatusError(value)
