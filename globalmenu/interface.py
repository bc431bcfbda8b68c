"""Client side of the dbusmenu interface, and an in-memory implementation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from globalmenu.types import DBusMenuItem, DBusMenuLayoutItem


class MenuCallError(Exception):
    """A call to a dbusmenu exporter failed."""


class MenuInterface(ABC):
    """The calls a menu importer makes to an application's exported menu."""

    INTERFACE_NAME = "com.canonical.dbusmenu"

    status: str = "normal"
    version: int = 3

    @abstractmethod
    def get_layout(
        self, parent_id: int, recursion_depth: int, property_names: Iterable[str]
    ) -> tuple[int, DBusMenuLayoutItem]:
        """Return the layout revision and the subtree rooted at ``parent_id``."""

    @abstractmethod
    def about_to_show(self, item_id: int) -> bool:
        """Tell the exporter a menu is about to open; True if it needs a refresh."""

    @abstractmethod
    def event(self, item_id: int, event_id: str, data: Any, timestamp: int) -> None:
        """Send an event such as "clicked", "opened" or "closed" for an item."""

    @abstractmethod
    def get_group_properties(
        self, ids: Iterable[int], property_names: Iterable[str]
    ) -> list[DBusMenuItem]:
        """Return the properties of several items."""

    @abstractmethod
    def get_property(self, item_id: int, name: str) -> Any:
        """Return a single property of an item."""


def _filter(properties: dict[str, Any], names: list[str]) -> dict[str, Any]:
    if not names:
        return dict(properties)
    return {key: value for key, value in properties.items() if key in names}


def _snapshot(item: DBusMenuLayoutItem, depth: int, names: list[str]) -> DBusMenuLayoutItem:
    children = []
    if depth != 0:
        children = [_snapshot(child, depth - 1, names) for child in item.children]
    return DBusMenuLayoutItem(item.id, _filter(item.properties, names), children)


class StaticMenuInterface(MenuInterface):
    """A menu exporter held in memory, serving a fixed layout tree.

    Events are recorded in ``events`` as ``(item_id, event_id, data, timestamp)``.
    Ids in ``needs_update`` make ``about_to_show`` answer True. While
    ``available`` is False every call raises :class:`MenuCallError`.
    """

    def __init__(
        self,
        root: DBusMenuLayoutItem | None = None,
        *,
        revision: int = 0,
        status: str = "normal",
        version: int = 3,
    ) -> None:
        self.root = root if root is not None else DBusMenuLayoutItem(0)
        self.revision = revision
        self.status = status
        self.version = version
        self.available = True
        self.needs_update: set[int] = set()
        self.events: list[tuple[int, str, Any, int]] = []

    def _items(self) -> dict[int, DBusMenuLayoutItem]:
        found: dict[int, DBusMenuLayoutItem] = {}
        stack = [self.root]
        while stack:
            item = stack.pop()
            found.setdefault(item.id, item)
            stack.extend(reversed(item.children))
        return found

    def _check_available(self) -> None:
        if not self.available:
            raise MenuCallError("menu service is not available")

    def _item(self, item_id: int) -> DBusMenuLayoutItem:
        self._check_available()
        try:
            return self._items()[item_id]
        except KeyError:
            raise MenuCallError(f"unknown menu item id {item_id}") from None

    def get_layout(self, parent_id, recursion_depth, property_names):
        item = self._item(parent_id)
        return self.revision, _snapshot(item, recursion_depth, list(property_names))

    def about_to_show(self, item_id):
        self._item(item_id)
        return item_id in self.needs_update

    def event(self, item_id, event_id, data, timestamp):
        self._check_available()
        self.events.append((item_id, event_id, data, timestamp))

    def get_group_properties(self, ids, property_names):
        self._check_available()
        items = self._items()
        names = list(property_names)
        return [
            DBusMenuItem(item_id, _filter(items[item_id].properties, names))
            for item_id in ids
            if item_id in items
        ]

    def get_property(self, item_id, name):
        item = self._item(item_id)
        try:
            return item.properties[name]
        except KeyError:
            raise MenuCallError(f"item {item_id} has no property {name!r}") from None