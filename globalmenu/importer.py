"""Rebuilds a menu that an application exports over the dbusmenu protocol."""

from __future__ import annotations

import logging
import zlib
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from globalmenu.interface import MenuCallError, MenuInterface
from globalmenu.mnemonic import swap_mnemonic_char
from globalmenu.shortcut import DBusMenuShortcut
from globalmenu.types import DBusMenuItem, DBusMenuItemKeys, DBusMenuLayoutItem

log = logging.getLogger(__name__)

# Leading bytes of the image formats accepted as icon data.
_IMAGE_SIGNATURES = (
    b"\x89PNG\r\n\x1a\n",
    b"\xff\xd8\xff",
    b"GIF87a",
    b"GIF89a",
    b"BM",
)

# Properties read only when an action is created; later updates ignore them.
_CREATION_KEYS = ("type", "toggle-type", "children-display")


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def _to_bool(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false")
    return bool(value)


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass(eq=False)
class Action:
    """One entry of an imported menu.

    Callables in ``on_changed`` run with the action whenever one of its
    values changes; those in ``on_destroyed`` run when it leaves its menu
    for good.
    """

    id: int = 0
    text: str = ""
    enabled: bool = True
    visible: bool = True
    separator: bool = False
    checkable: bool = False
    radio: bool = False
    checked: bool = False
    title: bool = False
    icon: Any = None
    icon_name: str = ""
    icon_data_hash: int | None = None
    shortcut: str = ""
    menu: Menu | None = None
    destroyed: bool = False
    on_changed: list[Callable[[Action], None]] = field(default_factory=list, repr=False)
    on_destroyed: list[Callable[[Action], None]] = field(default_factory=list, repr=False)

    def _apply(self, **values: Any) -> None:
        changed = False
        for name, value in values.items():
            if getattr(self, name) != value:
                setattr(self, name, value)
                changed = True
        if changed:
            for callback in list(self.on_changed):
                callback(self)

    def _destroy(self) -> None:
        if self.destroyed:
            return
        self.destroyed = True
        for callback in list(self.on_destroyed):
            callback(self)


@dataclass(eq=False)
class Menu:
    """A list of actions; a submenu knows the action that opens it."""

    parent: Menu | None = None
    menu_action: Action | None = None
    actions: list[Action] = field(default_factory=list)
    palette: Any = None

    @property
    def item_id(self) -> int:
        """The dbusmenu id of this menu; the root menu has id 0."""
        return self.menu_action.id if self.menu_action is not None else 0

    def add_action(self, action: Action) -> None:
        """Append ``action``, moving it to the end if it is already present."""
        if action in self.actions:
            self.actions.remove(action)
        self.actions.append(action)

    def remove_action(self, action: Action) -> None:
        if action in self.actions:
            self.actions.remove(action)


MenuCallback = Callable[[Menu], None]
ActionCallback = Callable[[Action], None]


class DBusMenuImporter:
    """Builds and keeps up to date a :class:`Menu` from a menu exporter.

    Callables in ``on_menu_updated`` receive a menu each time it has been
    loaded; those in ``on_action_activation_requested`` receive an action
    the exporter asked to activate.
    """

    def __init__(self, interface: MenuInterface, *, service: str = "", path: str = "") -> None:
        self.interface = interface
        self.service = service
        self.path = path
        self._menu: Menu | None = None
        self._actions: dict[int, Action] = {}
        self._refreshed_by_about_to_show: set[int] = set()
        self._pending_layout_updates: set[int] = set()
        self.on_menu_updated: list[MenuCallback] = []
        self.on_action_activation_requested: list[ActionCallback] = []
        self.refresh(0)

    # Hooks a host may override.

    def create_menu(self, parent: Menu | None) -> Menu:
        """Create an empty menu under ``parent``."""
        return Menu(parent=parent)

    def icon_for_name(self, name: str) -> Any:
        """Turn an icon name into an icon; the default has no icons."""
        return None

    def _icon_from_data(self, data: bytes) -> Any:
        if data.startswith(_IMAGE_SIGNATURES):
            return data
        return None

    # Menu access.

    def menu(self) -> Menu:
        """The root menu, created on first use."""
        if self._menu is None:
            self._menu = self.create_menu(None)
        return self._menu

    def action_for_id(self, item_id: int) -> Action | None:
        return self._actions.get(item_id)

    @property
    def pending_layout_updates(self) -> frozenset[int]:
        return frozenset(self._pending_layout_updates)

    def _menu_for_id(self, item_id: int) -> Menu | None:
        if item_id == 0:
            return self.menu()
        action = self._actions.get(item_id)
        return action.menu if action is not None else None

    # Signals.

    def _emit_menu_updated(self, menu: Menu) -> None:
        for callback in list(self.on_menu_updated):
            callback(menu)

    def _send_event(self, item_id: int, event_id: str) -> None:
        try:
            self.interface.event(item_id, event_id, "", 0)
        except MenuCallError as error:
            log.debug("Sending %r for item %d failed: %s", event_id, item_id, error)

    # Layout handling.

    def refresh(self, item_id: int) -> None:
        """Fetch the children of ``item_id`` and rebuild its menu from them."""
        menu = self._menu_for_id(item_id)
        try:
            _revision, layout = self.interface.get_layout(item_id, 1, [])
        except MenuCallError as error:
            log.debug("%s", error)
            if menu is not None:
                self._emit_menu_updated(menu)
            return

        if menu is None:
            return

        root = DBusMenuLayoutItem.from_dbus(layout)
        new_ids = {child.id for child in root.children}

        for action in list(menu.actions):
            if action.id not in new_ids:
                menu.remove_action(action)
                if self._actions.get(action.id) is action:
                    del self._actions[action.id]
                action._destroy()

        for child in root.children:
            action = self._actions.get(child.id)
            if action is None:
                action = self._create_action(child.id, child.properties, menu)
                self._actions[child.id] = action
            else:
                keys = [key for key in child.properties if key not in _CREATION_KEYS]
                self._update_action(action, child.properties, keys)
                menu.remove_action(action)
            menu.add_action(action)

        self._emit_menu_updated(menu)

    def layout_updated(self, revision: int, parent_id: int) -> None:
        """Note that the exporter changed the layout under ``parent_id``."""
        if parent_id in self._refreshed_by_about_to_show:
            self._refreshed_by_about_to_show.discard(parent_id)
            return
        self._pending_layout_updates.add(parent_id)

    def process_pending_layout_updates(self) -> None:
        """Refresh every menu whose layout changed since the last call."""
        ids = sorted(self._pending_layout_updates)
        self._pending_layout_updates.clear()
        for item_id in ids:
            self.refresh(item_id)

    def update_menu(self, menu: Menu | None = None) -> None:
        """Load ``menu`` (the root menu by default) before it is shown."""
        if menu is None:
            menu = self.menu()
        item_id = menu.item_id

        try:
            need_refresh: bool | None = bool(self.interface.about_to_show(item_id))
            failure = None
        except MenuCallError as error:
            need_refresh = None
            failure = error

        # Some exporters ignore "about to show" and others ignore "opened".
        self._send_event(item_id, "opened")

        target = self._menu_for_id(item_id)
        if target is None:
            return
        if failure is not None:
            log.debug("Call to AboutToShow() failed: %s", failure)
            self._emit_menu_updated(target)
            return
        if need_refresh or not target.actions:
            self._refreshed_by_about_to_show.add(item_id)
            self.refresh(item_id)
        else:
            self._emit_menu_updated(target)

    # Item events.

    def items_properties_updated(
        self,
        updated: Iterable[DBusMenuItem | Any],
        removed: Iterable[DBusMenuItemKeys | Any],
    ) -> None:
        """Apply changed properties, and reset removed ones to their defaults."""
        for entry in updated:
            item = entry if isinstance(entry, DBusMenuItem) else DBusMenuItem.from_dbus(entry)
            action = self._actions.get(item.id)
            if action is None:
                continue
            for key, value in item.properties.items():
                self._update_action_property(action, key, value)

        for entry in removed:
            keys = entry if isinstance(entry, DBusMenuItemKeys) else DBusMenuItemKeys.from_dbus(entry)
            action = self._actions.get(keys.id)
            if action is None:
                continue
            for key in keys.properties:
                self._update_action_property(action, key, None)

    def item_activation_requested(self, item_id: int, timestamp: int) -> None:
        """Pass on the exporter's request to activate an item."""
        action = self._actions.get(item_id)
        if action is None:
            log.warning("Activation requested for unknown item %d", item_id)
            return
        for callback in list(self.on_action_activation_requested):
            callback(action)

    def trigger(self, action: Action) -> None:
        """Activate ``action`` as the user would, telling the exporter."""
        if action.checkable and not (action.radio and action.checked):
            action._apply(checked=not action.checked)
        self._send_event(action.id, "clicked")

    def menu_about_to_show(self, menu: Menu) -> None:
        """Prepare a submenu that is opening."""
        if menu.parent is not None and menu.parent.parent is not None:
            menu.palette = menu.parent.palette
        self.update_menu(menu)

    def menu_about_to_hide(self, menu: Menu) -> None:
        self._send_event(menu.item_id, "closed")

    # Actions.

    def _create_action(self, item_id: int, properties: dict[str, Any], parent: Menu) -> Action:
        props = dict(properties)
        action = Action(item_id)

        if _to_str(props.pop("type", None)) == "separator":
            action.separator = True

        if _to_str(props.pop("children-display", None)) == "submenu":
            submenu = self.create_menu(parent)
            submenu.menu_action = action
            action.menu = submenu

        toggle_type = _to_str(props.pop("toggle-type", None))
        if toggle_type:
            action.checkable = True
            if toggle_type == "radio":
                action.radio = True

        is_title = _to_bool(props.pop("x-kde-title", None))
        self._update_action(action, props, list(props))
        if is_title:
            action.title = True
        return action

    def _update_action(self, action: Action, properties: dict[str, Any], keys: Iterable[str]) -> None:
        for key in keys:
            self._update_action_property(action, key, properties.get(key))

    def _update_action_property(self, action: Action, key: str, value: Any) -> None:
        handler = {
            "label": self._update_label,
            "enabled": self._update_enabled,
            "toggle-state": self._update_checked,
            "icon-name": self._update_icon_by_name,
            "icon-data": self._update_icon_by_data,
            "visible": self._update_visible,
            "shortcut": self._update_shortcut,
        }.get(key)
        if handler is not None:
            handler(action, value)

    def _update_label(self, action: Action, value: Any) -> None:
        action._apply(text=swap_mnemonic_char(_to_str(value), "_", "&"))

    def _update_enabled(self, action: Action, value: Any) -> None:
        action._apply(enabled=True if value is None else _to_bool(value))

    def _update_checked(self, action: Action, value: Any) -> None:
        if action.checkable and value is not None:
            action._apply(checked=_to_int(value) == 1)

    def _update_icon_by_name(self, action: Action, value: Any) -> None:
        name = _to_str(value)
        if name == action.icon_name:
            return
        action.icon_name = name
        action._apply(icon=self.icon_for_name(name) if name else None)

    def _update_icon_by_data(self, action: Action, value: Any) -> None:
        data = bytes(value) if isinstance(value, (bytes, bytearray, list, tuple)) else b""
        data_hash = zlib.crc32(data)
        if data_hash == action.icon_data_hash:
            return
        action.icon_data_hash = data_hash
        icon = self._icon_from_data(data)
        if icon is None:
            log.debug("Failed to decode icon-data property for action %r", action.text)
        action._apply(icon=icon)

    def _update_visible(self, action: Action, value: Any) -> None:
        action._apply(visible=True if value is None else _to_bool(value))

    def _update_shortcut(self, action: Action, value: Any) -> None:
        if value is None:
            sequence = ""
        else:
            try:
                sequence = DBusMenuShortcut.from_dbus(value).to_key_sequence()
            except TypeError:
                sequence = ""
        action._apply(shortcut=sequence)