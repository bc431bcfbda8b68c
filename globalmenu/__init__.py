"""Global application menu support: dbusmenu import, menu registrar and active-window model."""

__version__ = "0.6.9"

__all__ = [
    "appmodel",
    "geometry",
    "importer",
    "interface",
    "mnemonic",
    "registrar",
    "shortcut",
    "types",
    "window",
]