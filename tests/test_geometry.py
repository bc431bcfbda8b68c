import pytest

from globalmenu.geometry import DisplayRect, Point, Rect


def test_point_scaled_by_one_is_identity():
    assert Point(7, -3).scaled(1) == Point(7, -3)


def test_point_scaled_rounds_half_up():
    assert Point(3, 5).scaled(0.5) == Point(2, 3)


def test_point_scaled_round_trip_for_even_coordinates():
    p = Point(40, 60)
    assert p.scaled(2).scaled(0.5) == p


def test_null_rect():
    assert Rect().is_null()
    assert Rect(5, 5, 0, 0).is_null()
    assert not Rect(0, 0, 1, 0).is_null()
    assert not Rect(0, 0, 10, 10).is_null()


def test_edges_are_inclusive():
    r = Rect(10, 20, 30, 40)
    assert r.left == 10
    assert r.top == 20
    assert r.right == r.left + r.width - 1
    assert r.bottom == r.top + r.height - 1


def test_center_of_single_pixel_is_that_pixel():
    assert Rect(4, 9, 1, 1).center() == Point(4, 9)


def test_center_is_contained():
    for rect in (Rect(0, 0, 10, 10), Rect(-50, -20, 7, 3), Rect(100, 200, 1920, 1080)):
        assert rect.contains(rect.center())


def test_contains_corners_and_outside():
    r = Rect(10, 20, 30, 40)
    assert r.contains(Point(r.left, r.top))
    assert r.contains(Point(r.right, r.bottom))
    assert not r.contains(Point(r.right + 1, r.top))
    assert not r.contains(Point(r.left, r.bottom + 1))
    assert not r.contains(Point(r.left - 1, r.top))
    assert not r.contains(Point(r.left, r.top - 1))


def test_empty_rect_contains_nothing():
    assert not Rect(5, 5, 0, 0).contains(Point(5, 5))


def test_display_rect_dbus_round_trip():
    rect = DisplayRect(-100, 50, 1920, 1080)
    assert DisplayRect.from_dbus(rect.to_dbus()) == rect
    assert rect.to_dbus() == (-100, 50, 1920, 1080)
    assert DisplayRect.SIGNATURE == "(nnqq)"


def test_display_rect_to_rect():
    assert DisplayRect(1, 2, 3, 4).to_rect() == Rect(1, 2, 3, 4)


@pytest.mark.parametrize(
    "fields",
    [(40000, 0, 0, 0), (0, -40000, 0, 0), (0, 0, -1, 0), (0, 0, 0, 70000)],
)
def test_display_rect_out_of_range(fields):
    with pytest.raises(ValueError):
        DisplayRect(*fields)


def test_display_rect_from_dbus_wrong_arity():
    with pytest.raises(ValueError):
        DisplayRect.from_dbus((1, 2, 3))


def test_display_rect_from_dbus_not_a_sequence():
    with pytest.raises(TypeError):
        DisplayRect.from_dbus("1234")


def test_display_rect_rejects_non_integers():
    with pytest.raises(TypeError):
        DisplayRect(1.5, 0, 0, 0)


def test_display_rect_str():
    assert str(DisplayRect(1, 2, 3, 4)) == "x: 1 y: 2 width: 3 height: 4"