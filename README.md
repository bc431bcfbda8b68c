# globalmenu

Building blocks for a desktop top bar that shows the global menu of the
active application. The package is pure Python and has no third-party
dependencies.

## Modules

- `globalmenu.mnemonic.swap_mnemonic_char(text, src, dst)` rewrites mnemonic
  markers, for example from the dbusmenu form (`_File`) to the toolkit form
  (`&File`). A doubled `src` stands for a literal `src`. Only the first single
  `src` becomes a mnemonic. Every `dst` already in the text is doubled.
- `globalmenu.shortcut.DBusMenuShortcut` is a list of key chords. It converts
  between dbusmenu token lists (`[["Control", "plus"]]`) and key-sequence
  strings (`"Ctrl++"`) with `from_key_sequence()` and `to_key_sequence()`.
  It reads and writes the wire value with `from_dbus()` and `to_dbus()`.
- `globalmenu.types` holds the dbusmenu wire structures `DBusMenuItem`,
  `DBusMenuItemKeys` and `DBusMenuLayoutItem`. Each one converts to plain
  tuples and lists with `to_dbus()` and back with `from_dbus()`. Malformed
  input raises `TypeError` or `ValueError`.
- `globalmenu.geometry` holds `Point`, `Rect` and `DisplayRect`.
  - `Rect` has inclusive right and bottom edges and provides `is_null()`,
    `center()` and `contains()`.
  - `DisplayRect` checks that its fields are 16-bit values.
- `globalmenu.interface.MenuInterface` is the abstract set of calls made to
  an application's exported menu: `get_layout`, `about_to_show`, `event`,
  `get_group_properties` and `get_property`.
  - `StaticMenuInterface` answers these calls from a `DBusMenuLayoutItem`
    tree held in memory.
    - It records every event in `events`.
    - It reports ids listed in `needs_update` as needing a refresh.
    - It raises `MenuCallError` for unknown items, and for every call while
      `available` is False.
- `globalmenu.registrar` provides `MenuRegistrar` and `WindowType`.
  - `MenuRegistrar` records, for each window id, the bus service and object
    path of the window's menu.
  - It ignores menu windows and empty paths.
  - It tracks the services it watches, and drops a window when its service
    is reported gone with `service_unregistered()`.
  - Callables in `on_registered` and `on_unregistered` are called when a
    window's menu is registered or dropped.
- `globalmenu.window` holds `WindowInfo`, `WindowSystem` and `AppMenuRole`.
  - `WindowSystem` is an in-memory set of windows with an active window, the
    panel's screen and a device pixel ratio.
  - It also reads window properties, for example the
    `SERVICE_NAME_PROPERTY` and `OBJECT_PATH_PROPERTY` a window announces its
    menu with.
- `globalmenu.importer.DBusMenuImporter` builds a tree of `Menu` and `Action`
  objects from a `MenuInterface` and keeps it current.
  - Layout changes arrive through `layout_updated()` and are applied by
    `process_pending_layout_updates()`.
  - Property changes arrive through `items_properties_updated()`.
  - `trigger()` sends a "clicked" event, and `update_menu()` loads a menu
    before it is shown.
  - Labels are converted with `swap_mnemonic_char`, and shortcuts with
    `DBusMenuShortcut`.
- `globalmenu.appmodel.AppMenuModel` follows the active window of a
  `WindowSystem` and offers the top-level entries of its menu as rows.
  - Rows are read with `row_count()` and `data(row, role)`. The roles are
    `AppMenuRole.MENU` (the label) and `AppMenuRole.ACTION` (the `Action`).
  - It is constructed from a `WindowSystem` and a factory
    `(service, path) -> MenuInterface`.
  - An optional `schedule` callable defers work; by default the work runs at
    once.
  - It reports changes through its `on_*` callable lists.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

```python
from globalmenu.mnemonic import swap_mnemonic_char
from globalmenu.shortcut import DBusMenuShortcut

swap_mnemonic_char("_File", "_", "&")                        # "&File"
DBusMenuShortcut.from_key_sequence("Ctrl+S")                 # [["Control", "S"]]
DBusMenuShortcut([["Control", "plus"]]).to_key_sequence()    # "Ctrl++"
```

Importing a menu from an in-memory exporter:

```python
from globalmenu.importer import DBusMenuImporter
from globalmenu.interface import StaticMenuInterface
from globalmenu.types import DBusMenuLayoutItem

root = DBusMenuLayoutItem(0, children=[
    DBusMenuLayoutItem(1, {"label": "_File", "children-display": "submenu"}),
])
exporter = StaticMenuInterface(root)
importer = DBusMenuImporter(exporter)

action = importer.menu().actions[0]
action.text                        # "&File"
importer.trigger(action)
exporter.events                    # [(1, "clicked", "", 0)]
```

Following the active window:

```python
from globalmenu.appmodel import AppMenuModel
from globalmenu.window import (
    OBJECT_PATH_PROPERTY, SERVICE_NAME_PROPERTY, AppMenuRole, WindowInfo, WindowSystem,
)

windows = WindowSystem(
    [WindowInfo(42, properties={SERVICE_NAME_PROPERTY: b":1.7",
                                OBJECT_PATH_PROPERTY: b"/MenuBar/1"})],
    active=42,
)
model = AppMenuModel(windows, lambda service, path: StaticMenuInterface(root))
model.row_count()                  # 1
model.data(0, AppMenuRole.MENU)    # "&File"
```

## What this package does not do

- It does not connect to a message bus. The exporter is reached through
  whatever `MenuInterface` you supply; the package ships only
  `StaticMenuInterface`. `MenuRegistrar` keeps its records in memory and
  does not claim a bus name.
- It does not query a real window manager. `WindowSystem` is an in-memory
  model; your code keeps it up to date. It calls `AppMenuModel` methods such
  as `on_active_window_changed()`, `on_window_removed()` and
  `property_notify()`.
- It draws no panel or menus and provides no command to run.