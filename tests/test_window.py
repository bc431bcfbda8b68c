import pytest

from globalmenu.geometry import Rect
from globalmenu.registrar import WindowType
from globalmenu.window import (
    OBJECT_PATH_PROPERTY,
    SERVICE_NAME_PROPERTY,
    AppMenuRole,
    WindowInfo,
    WindowSystem,
)


def test_role_lookup_by_value():
    assert AppMenuRole(257) is AppMenuRole.MENU
    assert AppMenuRole(258) is AppMenuRole.ACTION


def test_property_names_match_window_properties():
    system = WindowSystem(
        [
            WindowInfo(
                9,
                properties={
                    "_KDE_NET_WM_APPMENU_SERVICE_NAME": b":1.1",
                    "_KDE_NET_WM_APPMENU_OBJECT_PATH": b"/MenuBar/2",
                },
            )
        ]
    )
    assert system.window_property(9, SERVICE_NAME_PROPERTY) == b":1.1"
    assert system.window_property(9, OBJECT_PATH_PROPERTY) == b"/MenuBar/2"


@pytest.mark.parametrize(
    "info, skipped",
    [
        (WindowInfo(1), False),
        (WindowInfo(1, skip_taskbar=True), True),
        (WindowInfo(1, window_type=WindowType.UTILITY), True),
        (WindowInfo(1, window_type=WindowType.DESKTOP), True),
        (WindowInfo(1, window_type=WindowType.DIALOG), False),
    ],
)
def test_is_skipped(info, skipped):
    assert info.is_skipped() is skipped


@pytest.fixture
def system():
    return WindowSystem(
        [
            WindowInfo(1, screen=0, properties={SERVICE_NAME_PROPERTY: b":1.7\0"}),
            WindowInfo(2, transient_for=1, screen=1),
            WindowInfo(3, transient_for=2, geometry=Rect(0, 0, 10, 10)),
        ],
        active=3,
    )


def test_active_window(system):
    assert system.active_window() == 3


def test_window_info_known_and_unknown(system):
    assert system.window_info(3).geometry == Rect(0, 0, 10, 10)
    unknown = system.window_info(99)
    assert unknown.win == 99
    assert unknown.transient_for == 0


def test_window_property_strips_terminator(system):
    assert system.window_property(1, SERVICE_NAME_PROPERTY) == b":1.7"


def test_window_property_missing(system):
    assert system.window_property(1, OBJECT_PATH_PROPERTY) == b""
    assert system.window_property(99, SERVICE_NAME_PROPERTY) == b""


def test_window_property_keeps_unterminated_value():
    system = WindowSystem([WindowInfo(5, properties={OBJECT_PATH_PROPERTY: b"/m"})])
    assert system.window_property(5, OBJECT_PATH_PROPERTY) == b"/m"


def test_screen_number(system):
    assert system.screen_number(2) == 1
    assert system.screen_number(99) == -1


def test_is_bad_window(system):
    assert not system.is_bad_window(1)
    assert system.is_bad_window(99)


def test_transient_chain_order(system):
    assert [info.win for info in system.transient_chain(3)] == [2, 1]
    assert list(system.transient_chain(1)) == []


def test_transient_chain_stops_on_cycle():
    system = WindowSystem([WindowInfo(1, transient_for=2), WindowInfo(2, transient_for=1)])
    assert [info.win for info in system.transient_chain(1)] == [2]


def test_transient_chain_to_unknown_window():
    system = WindowSystem([WindowInfo(1, transient_for=50)])
    assert [info.win for info in system.transient_chain(1)] == [50]