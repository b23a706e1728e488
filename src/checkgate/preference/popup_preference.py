import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path

import yaml

from checkgate.exception import PreferenceReadError

SHOW_POPUP_KEY = "SHOW_POPUP"


class PopupPreference(ABC):
    """User switch controlling whether failure popups are shown."""

    @abstractmethod
    def is_show_popup(self) -> bool: ...

    @abstractmethod
    def set_show_popup(self, value: bool) -> None: ...

    def do_not_show_popup(self) -> None:
        self.set_show_popup(False)


class InMemoryPopupPreference(PopupPreference):
    def __init__(self, show_popup: bool = True):
        self._show_popup = show_popup
        self._lock = threading.Lock()

    def is_show_popup(self) -> bool:
        with self._lock:
            return self._show_popup

    def set_show_popup(self, value: bool) -> None:
        with self._lock:
            self._show_popup = bool(value)


class YamlPopupPreference(PopupPreference):
    """
    Preference persisted as a small YAML document:

        SHOW_POPUP: true

    Every read stats the file and parses it again only when its mtime or size
    changed, so edits from other processes are picked up while the gate, which
    asks on each FAILED event, usually pays for one stat call. An edit that keeps
    both the size and the mtime is not noticed until the next change.
    """

    def __init__(self, path: str, default: bool = True):
        self.path = Path(path)
        self.default = default
        self._lock = threading.Lock()
        self._cached: tuple[tuple[int, int], dict] | None = None
        self.logger = logging.getLogger(__class__.__name__)

    def is_show_popup(self) -> bool:
        with self._lock:
            data = self._load()

        if SHOW_POPUP_KEY not in data:
            return self.default

        value = data[SHOW_POPUP_KEY]
        if not isinstance(value, bool):
            raise PreferenceReadError(f"{SHOW_POPUP_KEY} must be a boolean, got {value!r}", path=str(self.path))
        return value

    def set_show_popup(self, value: bool) -> None:
        with self._lock:
            try:
                data = self._load()
            except PreferenceReadError as e:
                self.logger.warning(f"[PREF] Overwriting unreadable preference file: {e}")
                data = {}

            data[SHOW_POPUP_KEY] = bool(value)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, sort_keys=False)
            self._cached = None

        self.logger.info(f"[PREF] {SHOW_POPUP_KEY} set to {bool(value)} ({self.path})")

    def _load(self) -> dict:
        try:
            stat = self.path.stat()
        except FileNotFoundError:
            self._cached = None
            return {}
        except OSError as e:
            raise PreferenceReadError(f"Cannot stat preference file: {e}", path=str(self.path)) from e

        signature = (stat.st_mtime_ns, stat.st_size)
        if self._cached is not None and self._cached[0] == signature:
            return dict(self._cached[1])

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise PreferenceReadError(f"Cannot read preference file: {e}", path=str(self.path)) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise PreferenceReadError("Preference file must contain a mapping", path=str(self.path))

        self._cached = (signature, data)
        return dict(data)
