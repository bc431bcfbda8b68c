"""Keyboard shortcuts as exchanged in the dbusmenu protocol."""

from __future__ import annotations

from collections.abc import Iterable

# Key names in the portable key-sequence form and in the dbusmenu form.
# "plus" and "minus" keep compatibility with peers that spell those keys out.
_KEY_NAMES = (
    ("Meta", "Super"),
    ("Ctrl", "Control"),
    ("+", "plus"),
    ("-", "minus"),
)


def _to_dbusmenu(tokens: list[str]) -> list[str]:
    for ours, theirs in _KEY_NAMES:
        tokens = [token.replace(ours, theirs) for token in tokens]
    return tokens


def _from_dbusmenu(tokens: list[str]) -> list[str]:
    for ours, theirs in _KEY_NAMES:
        tokens = [token.replace(theirs, ours) for token in tokens]
    return tokens


class DBusMenuShortcut(list):
    """A shortcut: a list of key chords, each chord a list of key names."""

    SIGNATURE = "aas"

    @classmethod
    def from_key_sequence(cls, sequence: str) -> DBusMenuShortcut:
        """Build a shortcut from a portable key sequence such as ``"Ctrl+S, Ctrl+Q"``."""
        shortcut = cls()
        for chord in sequence.split(", "):
            # "Ctrl++" means Ctrl and the plus key; keep the second '+' from
            # acting as a separator.
            chord = chord.replace("++", "+plus")
            shortcut.append(_to_dbusmenu(chord.split("+")))
        return shortcut

    def to_key_sequence(self) -> str:
        """Render the shortcut in the portable key-sequence form."""
        return ", ".join("+".join(_from_dbusmenu(list(chord))) for chord in self)

    @classmethod
    def from_dbus(cls, value: Iterable[Iterable[str]]) -> DBusMenuShortcut:
        """Read a shortcut from its wire value, an array of string arrays."""
        shortcut = cls()
        for chord in value:
            if isinstance(chord, str):
                raise TypeError("each chord must be a sequence of key names")
            keys = list(chord)
            if not all(isinstance(key, str) for key in keys):
                raise TypeError("key names must be strings")
            shortcut.append(keys)
        return shortcut

    def to_dbus(self) -> list[list[str]]:
        """Return the wire value, an array of string arrays."""
        return [list(chord) for chord in self]