import numpy as np
import pytest

from visionkit.selections import PointSelection, PolygonSelection, RectangleSelection
from visionkit.selector import ImageViewerWithSelector


def _viewer(factory=PolygonSelection):
    viewer = ImageViewerWithSelector(factory)
    viewer.set_image(np.zeros((20, 20, 3), dtype=np.uint8))
    return viewer


def test_polygon_defined_by_clicks():
    viewer = _viewer()
    viewer.right_click(1, 1)
    viewer.cursor_moved(5, 5)
    viewer.right_click(5, 1)
    viewer.right_click(5, 5)
    assert viewer.defining_item is not None
    viewer.press_enter()
    assert viewer.defining_item is None
    polygons = viewer.polygon_list()
    assert len(polygons) == 1
    assert polygons[0].tolist() == [[1, 5, 5], [1, 1, 5]]


def test_point_is_finished_on_first_click():
    viewer = _viewer(PointSelection)
    viewer.right_click(3, 4)
    assert viewer.defining_item is None
    assert viewer.point_list().tolist() == [[3], [4]]


def test_rectangle_from_two_clicks():
    viewer = _viewer(RectangleSelection)
    viewer.right_click(8, 9)
    assert viewer.defining_item is not None
    viewer.right_click(2, 3)
    assert viewer.defining_item is None
    assert viewer.rect_list().tolist() == [[2], [3], [6], [6]]


def test_right_click_without_image_does_nothing():
    viewer = ImageViewerWithSelector(PolygonSelection)
    viewer.right_click(1, 1)
    assert viewer.defining_item is None
    assert viewer.scene_items == []


def test_right_click_without_factory_raises():
    viewer = _viewer(None)
    with pytest.raises(RuntimeError):
        viewer.right_click(1, 1)


def test_lists_need_an_image():
    viewer = ImageViewerWithSelector(PointSelection)
    with pytest.raises(RuntimeError):
        viewer.set_point_list(np.array([[1], [2]]))


def test_point_list_round_trip():
    viewer = _viewer()
    points = np.array([[1, 7, 3], [2, 8, 4]])
    viewer.set_point_list(points)
    assert viewer.point_list().tolist() == points.tolist()
    assert len(viewer.scene_items) == 3


def test_rect_list_round_trip():
    viewer = _viewer()
    rects = np.array([[1, 5], [2, 6], [3, 7], [4, 8]])
    viewer.set_rect_list(rects)
    assert viewer.rect_list().tolist() == rects.tolist()


def test_polygon_list_round_trip():
    viewer = _viewer()
    polygons = [np.array([[0, 4, 4], [0, 0, 4]]), np.array([[1, 2], [3, 4]])]
    viewer.set_polygon_list(polygons)
    result = viewer.polygon_list()
    assert [p.tolist() for p in result] == [p.tolist() for p in polygons]


def test_empty_lists_have_zero_columns():
    viewer = _viewer()
    assert viewer.rect_list().shape == (4, 0)
    assert viewer.point_list().shape == (2, 0)
    assert viewer.polygon_list() == []


def test_delete_removes_selected_regions():
    viewer = _viewer()
    viewer.set_point_list(np.array([[1, 2], [1, 2]]))
    first, second = viewer.roi_list
    first.toggle_selected()
    viewer.press_delete()
    assert viewer.roi_list == [second]
    assert viewer.scene_items == [second]


def test_delete_discards_region_being_defined():
    viewer = _viewer()
    viewer.right_click(1, 1)
    assert len(viewer.scene_items) == 1
    viewer.press_delete()
    assert viewer.defining_item is None
    assert viewer.scene_items == []
    assert viewer.roi_list == []


def test_cursor_moved_returns_pixel_info():
    viewer = _viewer()
    info = viewer.cursor_moved(2, 3)
    assert info.coords == "(2 , 3)"
    assert info.value.startswith("RGB(0,0,0)")


def test_set_image_shares_region_list():
    viewer = _viewer()
    viewer.set_point_list(np.array([[1], [1]]))
    kept = viewer.roi_list
    viewer.set_image(np.zeros((5, 5, 3), dtype=np.uint8))
    assert viewer.roi_list == []
    assert viewer.scene_items == []
    viewer.set_image(np.zeros((5, 5, 3), dtype=np.uint8), kept)
    assert viewer.roi_list is kept
    assert viewer.scene_items == kept
    viewer.right_click(2, 2)
    viewer.press_enter()
    assert len(kept) == 2