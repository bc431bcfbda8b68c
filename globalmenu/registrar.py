"""Registry that maps top-level windows to the menus they export."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

SERVICE_NAME = "com.canonical.AppMenu.Registrar"
OBJECT_PATH = "/com/canonical/AppMenu/Registrar"
INTERFACE_NAME = "com.canonical.AppMenu.Registrar"


class WindowType(Enum):
    """Window types as announced by the window manager."""

    UNKNOWN = -1
    NORMAL = 0
    DESKTOP = 1
    DOCK = 2
    TOOLBAR = 3
    MENU = 4
    DIALOG = 5
    OVERRIDE = 6
    TOP_MENU = 7
    UTILITY = 8
    SPLASH = 9
    DROPDOWN_MENU = 10
    POPUP_MENU = 11
    TOOLTIP = 12
    NOTIFICATION = 13
    COMBO_BOX = 14
    DND_ICON = 15
    ON_SCREEN_DISPLAY = 16
    CRITICAL_NOTIFICATION = 17


# Menus themselves may try to register (a right click in some editors does).
_MENU_TYPES = frozenset({WindowType.MENU, WindowType.DROPDOWN_MENU, WindowType.POPUP_MENU})

RegisteredCallback = Callable[[int, str, str], None]
UnregisteredCallback = Callable[[int], None]


def _check_window_id(window_id: object) -> int:
    if isinstance(window_id, bool) or not isinstance(window_id, int):
        raise TypeError(f"window id must be an integer, got {window_id!r}")
    if window_id < 0:
        raise ValueError(f"window id must not be negative, got {window_id}")
    return window_id


class MenuRegistrar:
    """Keeps, per window, the bus service and object path of its menu.

    Callables in ``on_registered`` receive ``(window_id, service, path)``;
    those in ``on_unregistered`` receive ``window_id``.
    """

    def __init__(self) -> None:
        self._services: dict[int, str] = {}
        self._paths: dict[int, str] = {}
        self._classes: dict[int, str] = {}
        self._watched: list[str] = []
        self.on_registered: list[RegisteredCallback] = []
        self.on_unregistered: list[UnregisteredCallback] = []

    def _emit_registered(self, window_id: int, service: str, path: str) -> None:
        for callback in list(self.on_registered):
            callback(window_id, service, path)

    def _emit_unregistered(self, window_id: int) -> None:
        for callback in list(self.on_unregistered):
            callback(window_id)

    def _forget(self, window_id: int) -> None:
        self._services.pop(window_id, None)
        self._paths.pop(window_id, None)
        self._classes.pop(window_id, None)

    def register_window(
        self,
        window_id: int,
        path: str,
        service: str,
        window_type: WindowType = WindowType.UNKNOWN,
        window_class: str = "",
    ) -> None:
        """Record that ``service`` exports the menu of ``window_id`` at ``path``.

        Menu windows and empty paths are ignored.
        """
        window_id = _check_window_id(window_id)
        if window_type in _MENU_TYPES:
            return
        if not path:
            return

        self._classes[window_id] = window_class
        self._services[window_id] = service
        self._paths[window_id] = path

        if service not in self._watched:
            self._watched.append(service)

        self._emit_registered(window_id, service, path)

    def unregister_window(self, window_id: int) -> None:
        """Forget the menu of ``window_id``."""
        window_id = _check_window_id(window_id)
        self._forget(window_id)
        self._emit_unregistered(window_id)

    def get_menu_for_window(self, window_id: int) -> tuple[str, str]:
        """Return ``(service, path)`` for the window, empty strings if unknown."""
        return self._services.get(window_id, ""), self._paths.get(window_id, "")

    def service_unregistered(self, service: str) -> None:
        """Drop the window whose menu service left the bus."""
        window_id = next(
            (wid for wid, name in self._services.items() if name == service), 0
        )
        self._forget(window_id)
        self._emit_unregistered(window_id)
        if service in self._watched:
            self._watched.remove(service)

    def has_service(self, window_id: int) -> bool:
        return window_id in self._services

    def service_for_window(self, window_id: int) -> str:
        return self._services.get(window_id, "")

    def has_path(self, window_id: int) -> bool:
        return window_id in self._paths

    def path_for_window(self, window_id: int) -> str:
        return self._paths.get(window_id, "")

    def ids(self) -> list[int]:
        """Ids of all windows with a registered menu service."""
        return list(self._services)

    def watched_services(self) -> list[str]:
        """Bus services watched for leaving the bus."""
        return list(self._watched)