import pytest

from globalmenu.interface import MenuCallError, MenuInterface, StaticMenuInterface
from globalmenu.types import DBusMenuItem, DBusMenuLayoutItem


def make_tree():
    return DBusMenuLayoutItem(
        0,
        {"children-display": "submenu"},
        [
            DBusMenuLayoutItem(
                1,
                {"label": "_File", "children-display": "submenu"},
                [
                    DBusMenuLayoutItem(3, {"label": "_Open", "enabled": True}),
                    DBusMenuLayoutItem(4, {"label": "_Quit", "shortcut": [["Control", "q"]]}),
                ],
            ),
            DBusMenuLayoutItem(2, {"label": "_Edit", "visible": False}),
        ],
    )


def test_abstract_interface_cannot_be_instantiated():
    with pytest.raises(TypeError):
        MenuInterface()


def test_get_layout_full_depth_returns_whole_tree():
    tree = make_tree()
    iface = StaticMenuInterface(tree, revision=7)
    revision, layout = iface.get_layout(0, -1, [])
    assert revision == 7
    assert layout == tree
    assert layout is not tree


def test_get_layout_depth_one_keeps_direct_children_only():
    iface = StaticMenuInterface(make_tree())
    _, layout = iface.get_layout(0, 1, [])
    assert [child.id for child in layout.children] == [1, 2]
    assert all(child.children == [] for child in layout.children)


def test_get_layout_depth_zero_has_no_children():
    iface = StaticMenuInterface(make_tree())
    _, layout = iface.get_layout(1, 0, [])
    assert layout.id == 1
    assert layout.children == []


def test_get_layout_of_submenu():
    iface = StaticMenuInterface(make_tree())
    _, layout = iface.get_layout(1, 1, [])
    assert [child.id for child in layout.children] == [3, 4]


def test_get_layout_filters_properties():
    iface = StaticMenuInterface(make_tree())
    _, layout = iface.get_layout(1, 1, ["label"])
    assert layout.properties == {"label": "_File"}
    assert [child.properties for child in layout.children] == [
        {"label": "_Open"},
        {"label": "_Quit"},
    ]


def test_get_layout_unknown_id():
    iface = StaticMenuInterface(make_tree())
    with pytest.raises(MenuCallError):
        iface.get_layout(99, -1, [])


def test_layout_survives_dbus_round_trip():
    iface = StaticMenuInterface(make_tree())
    _, layout = iface.get_layout(0, -1, [])
    assert DBusMenuLayoutItem.from_dbus(layout.to_dbus()) == layout


def test_about_to_show():
    iface = StaticMenuInterface(make_tree())
    assert iface.about_to_show(1) is False
    iface.needs_update.add(1)
    assert iface.about_to_show(1) is True
    with pytest.raises(MenuCallError):
        iface.about_to_show(42)


def test_events_are_recorded_in_order():
    iface = StaticMenuInterface(make_tree())
    iface.event(3, "clicked", "", 0)
    iface.event(1, "opened", "", 0)
    assert iface.events == [(3, "clicked", "", 0), (1, "opened", "", 0)]


def test_get_group_properties_skips_unknown_ids():
    iface = StaticMenuInterface(make_tree())
    result = iface.get_group_properties([2, 99, 3], ["label"])
    assert result == [DBusMenuItem(2, {"label": "_Edit"}), DBusMenuItem(3, {"label": "_Open"})]


def test_get_group_properties_all_when_no_names():
    tree = make_tree()
    iface = StaticMenuInterface(tree)
    (item,) = iface.get_group_properties([4], [])
    assert item.properties == tree.children[0].children[1].properties


def test_get_property():
    iface = StaticMenuInterface(make_tree())
    assert iface.get_property(2, "visible") is False
    with pytest.raises(MenuCallError):
        iface.get_property(2, "icon-name")
    with pytest.raises(MenuCallError):
        iface.get_property(77, "label")


def test_unavailable_service_fails_every_call():
    iface = StaticMenuInterface(make_tree())
    iface.available = False
    with pytest.raises(MenuCallError):
        iface.get_layout(0, -1, [])
    with pytest.raises(MenuCallError):
        iface.event(0, "opened", "", 0)
    with pytest.raises(MenuCallError):
        iface.get_group_properties([1], [])
    assert iface.events == []


def test_default_root_and_properties():
    iface = StaticMenuInterface()
    revision, layout = iface.get_layout(0, -1, [])
    assert revision == 0
    assert layout == DBusMenuLayoutItem(0)
    assert iface.status == "normal"
    assert iface.version == 3
    assert iface.INTERFACE_NAME == "com.canonical.dbusmenu"