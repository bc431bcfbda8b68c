"""List model of the application menu that belongs to the active window."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from globalmenu.geometry import Rect
from globalmenu.importer import Action, DBusMenuImporter, Menu
from globalmenu.interface import MenuInterface
from globalmenu.window import (
    OBJECT_PATH_PROPERTY,
    SERVICE_NAME_PROPERTY,
    AppMenuRole,
    WindowInfo,
    WindowSystem,
)

InterfaceFactory = Callable[[str, str], MenuInterface]
Scheduler = Callable[[Callable[[], None]], None]


class _ThemedMenuImporter(DBusMenuImporter):
    """Importer whose icons are theme icons looked up by name."""

    def icon_for_name(self, name: str) -> Any:
        return name


def _emit(callbacks: list[Callable[..., None]], *args: Any) -> None:
    for callback in list(callbacks):
        callback(*args)


class AppMenuModel:
    """Offers the top-level entries of the active window's menu as rows.

    ``interface_factory(service, path)`` connects to a menu exporter.
    ``schedule(fn)`` runs deferred work; by default it runs it at once.
    Change notifications go to the ``on_*`` callable lists.
    """

    def __init__(
        self,
        window_system: WindowSystem,
        interface_factory: InterfaceFactory,
        *,
        schedule: Scheduler | None = None,
    ) -> None:
        self.window_system = window_system
        self._interface_factory = interface_factory
        self._schedule: Scheduler = schedule if schedule is not None else (lambda fn: fn())

        self._filter_by_active = False
        self._filter_children = False
        self._menu_available = False
        self._update_pending = False
        self._visible = True
        self._screen_geometry = Rect()
        self._win_id: int = -1

        self.current_window_id = 0
        self.delayed_menu_window_id = 0
        self._watching_properties = False

        self._menu: Menu | None = None
        self.importer: DBusMenuImporter | None = None
        self.service_name = ""
        self.menu_object_path = ""
        self.watched_services: list[str] = []
        self._hooked_actions: set[Action] = set()

        self.on_model_reset: list[Callable[[], None]] = []
        self.on_data_changed: list[Callable[[int], None]] = []
        self.on_request_activate_index: list[Callable[[int], None]] = []
        self.on_menu_available_changed: list[Callable[[], None]] = []
        self.on_visible_changed: list[Callable[[], None]] = []
        self.on_filter_by_active_changed: list[Callable[[], None]] = []
        self.on_filter_children_changed: list[Callable[[], None]] = []
        self.on_screen_geometry_changed: list[Callable[[], None]] = []
        self.on_win_id_changed: list[Callable[[], None]] = []

        if not window_system.platform_x11:
            return

        self.on_active_window_changed(window_system.active_window())

    # Properties.

    @property
    def filter_by_active(self) -> bool:
        return self._filter_by_active

    @filter_by_active.setter
    def filter_by_active(self, active: bool) -> None:
        if self._filter_by_active == active:
            return
        self._filter_by_active = active
        _emit(self.on_filter_by_active_changed)

    @property
    def filter_children(self) -> bool:
        return self._filter_children

    @filter_children.setter
    def filter_children(self, hide_children: bool) -> None:
        if self._filter_children == hide_children:
            return
        self._filter_children = hide_children
        _emit(self.on_filter_children_changed)

    @property
    def menu_available(self) -> bool:
        return self._menu_available

    @menu_available.setter
    def menu_available(self, available: bool) -> None:
        if self._menu_available != available:
            self._menu_available = available
            self.on_window_changed(self.current_window_id)
            _emit(self.on_menu_available_changed)

    @property
    def screen_geometry(self) -> Rect:
        return self._screen_geometry

    @screen_geometry.setter
    def screen_geometry(self, geometry: Rect) -> None:
        if self._screen_geometry == geometry:
            return
        self._screen_geometry = geometry
        _emit(self.on_screen_geometry_changed)
        self.on_window_changed(self.current_window_id)

    @property
    def visible(self) -> bool:
        return self._visible

    def _set_visible(self, visible: bool) -> None:
        if self._visible != visible:
            self._visible = visible
            _emit(self.on_visible_changed)

    @property
    def win_id(self) -> int:
        return self._win_id

    @win_id.setter
    def win_id(self, window_id: int) -> None:
        if self._win_id == window_id:
            return
        self._win_id = window_id
        _emit(self.on_win_id_changed)
        self.on_active_window_changed(int(window_id))

    @property
    def update_pending(self) -> bool:
        return self._update_pending

    # Model interface.

    def row_count(self) -> int:
        if not self._menu_available or self._menu is None:
            return 0
        return len(self._menu.actions)

    def data(self, row: int, role: int) -> Any:
        if row < 0 or not self._menu_available or self._menu is None:
            return None
        actions = self._menu.actions
        if row >= len(actions):
            return None
        if role == AppMenuRole.MENU:
            return actions[row].text
        if role == AppMenuRole.ACTION:
            return actions[row]
        return None

    def role_names(self) -> dict[AppMenuRole, bytes]:
        return {AppMenuRole.MENU: b"activeMenu", AppMenuRole.ACTION: b"activeActions"}

    def update(self) -> None:
        """Reset the model so views read every row again."""
        _emit(self.on_model_reset)
        self._update_pending = False

    def _request_update(self) -> None:
        if not self._update_pending:
            self._update_pending = True
            self._schedule(self.update)

    # Menu import.

    def update_application_menu(self, service_name: str, menu_object_path: str) -> None:
        """Show the menu exported by ``service_name`` at ``menu_object_path``."""
        if self.service_name == service_name and self.menu_object_path == menu_object_path:
            if self.importer is not None:
                self._schedule(self.importer.update_menu)
            return

        self.service_name = service_name
        self.watched_services = [service_name]
        self.menu_object_path = menu_object_path

        if self.importer is not None:
            self._detach(self.importer)

        importer = _ThemedMenuImporter(
            self._interface_factory(service_name, menu_object_path),
            service=service_name,
            path=menu_object_path,
        )
        self.importer = importer
        self._hooked_actions = set()
        importer.on_menu_updated.append(self._on_menu_updated)
        importer.on_action_activation_requested.append(self._on_activation_requested)
        self._schedule(importer.update_menu)

    def _detach(self, importer: DBusMenuImporter) -> None:
        if self._on_menu_updated in importer.on_menu_updated:
            importer.on_menu_updated.remove(self._on_menu_updated)
        if self._on_activation_requested in importer.on_action_activation_requested:
            importer.on_action_activation_requested.remove(self._on_activation_requested)
        self.importer = None
        self._menu = None

    def _on_menu_updated(self, menu: Menu) -> None:
        importer = self.importer
        if importer is None:
            return
        self._menu = importer.menu()
        if menu is not self._menu:
            return

        # Load the first layer of submenus, the ones the panel pops up.
        for action in list(self._menu.actions):
            if action not in self._hooked_actions:
                self._hooked_actions.add(action)
                action.on_changed.append(self._on_action_changed)
                action.on_destroyed.append(lambda _action: self._request_update())
            if action.menu is not None:
                importer.update_menu(action.menu)

        self.menu_available = True
        self._request_update()

    def _on_action_changed(self, action: Action) -> None:
        if self._menu_available and self._menu is not None:
            if action in self._menu.actions:
                _emit(self.on_data_changed, self._menu.actions.index(action))

    def _on_activation_requested(self, action: Action) -> None:
        if not self._menu_available or self._menu is None:
            return
        if action in self._menu.actions:
            _emit(self.on_request_activate_index, self._menu.actions.index(action))

    # Window tracking.

    def _window_property(self, window_id: int, name: str) -> str:
        return self.window_system.window_property(window_id, name).decode("utf-8", errors="replace")

    def _update_menu_from_window(self, window_id: int) -> bool:
        service = self._window_property(window_id, SERVICE_NAME_PROPERTY)
        path = self._window_property(window_id, OBJECT_PATH_PROPERTY)
        if service and path:
            self.update_application_menu(service, path)
            return True
        return False

    def _is_minimized(self, window_id: int) -> bool:
        return self.window_system.window_info(window_id).minimized

    def _drop_menu(self) -> None:
        self.menu_available = False
        self._request_update()

    def on_active_window_changed(self, window_id: int) -> None:
        """Follow the newly active window and load its menu."""
        ws = self.window_system
        self._watching_properties = False

        if not window_id:
            return

        active_screen = ws.screen_number(window_id)
        if active_screen >= 0 and active_screen != ws.panel_screen:
            if ws.is_bad_window(self.current_window_id):
                self._drop_menu()
            elif self._is_minimized(self.current_window_id):
                self._drop_menu()
            return

        if not ws.platform_x11:
            return

        info = ws.window_info(window_id)

        if info.is_skipped():
            # Hide when neither the window nor what it is transient for has a menu.
            if self._filter_by_active:
                for transient in ws.transient_chain(window_id):
                    if transient.win == self.current_window_id:
                        self.filter_window(info)
                        return
                self._set_visible(False)
            return

        self.current_window_id = window_id

        if not self._filter_children:
            for transient in ws.transient_chain(window_id):
                if self._update_menu_from_window(transient.win):
                    self.filter_window(info)
                    return

        if self._update_menu_from_window(window_id):
            self.filter_window(info)
            return

        # The application may announce its menu only after showing its window.
        self._watching_properties = True
        self.delayed_menu_window_id = window_id
        self._drop_menu()

    def on_window_changed(self, window_id: int) -> None:
        if self.current_window_id == window_id:
            self.filter_window(self.window_system.window_info(window_id))

    def _on_window_geometry_changed(self, window_id: int) -> None:
        ws = self.window_system
        if ws.active_window() != window_id:
            return
        active_screen = ws.screen_number(window_id)
        if active_screen >= 0 and active_screen != ws.panel_screen:
            if ws.is_bad_window(self.current_window_id) or self.current_window_id == window_id:
                self.current_window_id = -1
                self._win_id = -1
                self._drop_menu()
        elif self._is_minimized(self.current_window_id):
            self.current_window_id = -1
            self._win_id = -1
            self._drop_menu()

    def on_window_removed(self, window_id: int) -> None:
        # Some applications never release their menu when they close.
        if self.current_window_id == window_id:
            self.menu_available = False
            self._set_visible(False)

    def on_service_unregistered(self, service_name: str) -> None:
        if service_name == self.service_name:
            self._drop_menu()

    def filter_window(self, info: WindowInfo) -> None:
        """Decide whether the menu of ``info`` is shown."""
        if self.current_window_id != info.win:
            return
        ws = self.window_system
        center = info.geometry.center()
        if ws.platform_x11:
            center = center.scaled(1 / ws.device_pixel_ratio)
        contained = self._screen_geometry.is_null() or self._screen_geometry.contains(center)
        is_active = info.win == ws.active_window() if self._filter_by_active else True
        self._set_visible(is_active and not info.minimized and contained)

    def property_notify(self, window_id: int, property_name: str) -> None:
        """React to a changed window property; a late menu announcement loads the menu."""
        ws = self.window_system
        if not ws.platform_x11 or not self._watching_properties:
            return
        if window_id != self.delayed_menu_window_id:
            return
        if property_name in (SERVICE_NAME_PROPERTY, OBJECT_PATH_PROPERTY):
            self.on_active_window_changed(ws.active_window())