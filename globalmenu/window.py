"""Window information and an in-memory window system used by the menu model."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import IntEnum

from globalmenu.geometry import Rect
from globalmenu.registrar import WindowType

SERVICE_NAME_PROPERTY = "_KDE_NET_WM_APPMENU_SERVICE_NAME"
OBJECT_PATH_PROPERTY = "_KDE_NET_WM_APPMENU_OBJECT_PATH"

# Longest property value read, in 32-bit units.
MAX_PROPERTY_SIZE = 10000

_USER_ROLE = 256


class AppMenuRole(IntEnum):
    """Data roles offered by the application menu model."""

    MENU = _USER_ROLE + 1
    ACTION = _USER_ROLE + 2


@dataclass
class WindowInfo:
    """What the window manager knows about one window."""

    win: int
    window_type: WindowType = WindowType.NORMAL
    skip_taskbar: bool = False
    minimized: bool = False
    geometry: Rect = field(default_factory=Rect)
    transient_for: int = 0
    window_class: str = ""
    screen: int = 0
    properties: dict[str, bytes] = field(default_factory=dict)

    def is_skipped(self) -> bool:
        """True for windows that never carry an application menu."""
        return self.skip_taskbar or self.window_type in (
            WindowType.UTILITY,
            WindowType.DESKTOP,
        )


class WindowSystem:
    """A set of windows, the active one and the screen the panel sits on."""

    def __init__(
        self,
        windows: Iterable[WindowInfo] = (),
        *,
        active: int = 0,
        panel_screen: int = 0,
        device_pixel_ratio: float = 1.0,
        platform_x11: bool = True,
    ) -> None:
        self.windows: dict[int, WindowInfo] = {info.win: info for info in windows}
        self.active = active
        self.panel_screen = panel_screen
        self.device_pixel_ratio = device_pixel_ratio
        self.platform_x11 = platform_x11

    def active_window(self) -> int:
        return self.active

    def window_info(self, window_id: int) -> WindowInfo:
        """Information on a window; an unknown window has no state and no parent."""
        info = self.windows.get(window_id)
        return info if info is not None else WindowInfo(window_id)

    def window_property(self, window_id: int, name: str) -> bytes:
        """A string property of a window, without its terminating NUL."""
        info = self.windows.get(window_id)
        if info is None:
            return b""
        value = info.properties.get(name, b"")
        if isinstance(value, str):
            value = value.encode("utf-8")
        value = bytes(value[: MAX_PROPERTY_SIZE * 4])
        if value.endswith(b"\0"):
            value = value[:-1]
        return value

    def screen_number(self, window_id: int) -> int:
        """Screen number of a window, or -1 when it is unknown."""
        info = self.windows.get(window_id)
        return info.screen if info is not None else -1

    def is_bad_window(self, window_id: int) -> bool:
        return window_id not in self.windows

    def transient_chain(self, window_id: int) -> Iterator[WindowInfo]:
        """Yield the windows ``window_id`` is transient for, nearest first."""
        seen = {window_id}
        parent = self.window_info(window_id).transient_for
        while parent and parent not in seen:
            seen.add(parent)
            info = self.window_info(parent)
            yield info
            parent = info.transient_for