"""Structures exchanged with a dbusmenu exporter."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any


def _check_id(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"item id must be an integer, got {value!r}")
    return value


def _unpack(value: Any, arity: int, what: str) -> Sequence[Any]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise TypeError(f"{what} must be a sequence, got {value!r}")
    if len(value) != arity:
        raise ValueError(f"{what} needs {arity} fields, got {len(value)}")
    return value


def _properties(value: Any) -> dict[str, Any]:
    if not isinstance(value, Mapping):
        raise TypeError(f"properties must be a mapping, got {value!r}")
    if not all(isinstance(key, str) for key in value):
        raise TypeError("property names must be strings")
    return dict(value)


def _keys(value: Any) -> list[str]:
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise TypeError(f"property names must be a sequence, got {value!r}")
    keys = list(value)
    if not all(isinstance(key, str) for key in keys):
        raise TypeError("property names must be strings")
    return keys


@dataclass
class DBusMenuItem:
    """A menu item id with a set of property values."""

    SIGNATURE = "(ia{sv})"

    id: int
    properties: dict[str, Any] = field(default_factory=dict)

    def to_dbus(self) -> tuple[int, dict[str, Any]]:
        return (self.id, dict(self.properties))

    @classmethod
    def from_dbus(cls, value: Any) -> DBusMenuItem:
        item_id, properties = _unpack(value, 2, "menu item")
        return cls(_check_id(item_id), _properties(properties))


@dataclass
class DBusMenuItemKeys:
    """A menu item id with a list of property names."""

    SIGNATURE = "(ias)"

    id: int
    properties: list[str] = field(default_factory=list)

    def to_dbus(self) -> tuple[int, list[str]]:
        return (self.id, list(self.properties))

    @classmethod
    def from_dbus(cls, value: Any) -> DBusMenuItemKeys:
        item_id, properties = _unpack(value, 2, "menu item keys")
        return cls(_check_id(item_id), _keys(properties))


@dataclass
class DBusMenuLayoutItem:
    """A menu item with its properties and its child items."""

    SIGNATURE = "(ia{sv}av)"

    id: int
    properties: dict[str, Any] = field(default_factory=dict)
    children: list[DBusMenuLayoutItem] = field(default_factory=list)

    def to_dbus(self) -> tuple[int, dict[str, Any], list[Any]]:
        return (
            self.id,
            dict(self.properties),
            [child.to_dbus() for child in self.children],
        )

    @classmethod
    def from_dbus(cls, value: Any) -> DBusMenuLayoutItem:
        if isinstance(value, cls):
            return value
        item_id, properties, children = _unpack(value, 3, "layout item")
        if isinstance(children, (str, bytes)) or not isinstance(children, Iterable):
            raise TypeError(f"children must be a sequence, got {children!r}")
        return cls(
            _check_id(item_id),
            _properties(properties),
            [cls.from_dbus(child) for child in children],
        )