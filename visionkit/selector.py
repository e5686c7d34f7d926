"""An image viewer on which regions of interest are drawn and edited."""

from __future__ import annotations

from typing import Callable

import numpy as np

from visionkit.image_viewer import ImageViewer, PixelInfo
from visionkit.selections import (
    PointSelection,
    PolygonSelection,
    RectangleSelection,
    Selection,
)


def _as_int(value) -> int:
    return int(float(value))


def _columns(matrix, rows: int) -> np.ndarray:
    arr = np.asarray(matrix)
    if arr.size == 0:
        return np.zeros((rows, 0), dtype=np.int32)
    if arr.ndim != 2 or arr.shape[0] < rows:
        raise ValueError(f"expected a matrix with {rows} rows, one column per item")
    return arr


class ImageViewerWithSelector(ImageViewer):
    """Viewer that keeps a list of regions of interest for the shown image.

    ``scene_items`` holds the regions currently drawn, including the one being
    defined. ``roi_list`` holds the finished regions; it is shared with the
    caller that handed it to ``set_image``.
    """

    def __init__(self, selection_factory: Callable[[], Selection] | None = None):
        super().__init__()
        self.selection_factory = selection_factory
        self.defining_item: Selection | None = None
        self.roi_list: list[Selection] | None = None
        self.scene_items: list[Selection] = []

    def _rois(self) -> list[Selection]:
        if self.roi_list is None:
            raise RuntimeError("no region list: set an image first")
        return self.roi_list

    def _add(self, selection: Selection) -> None:
        self.scene_items.append(selection)
        self._rois().append(selection)

    def _remove_from_scene(self, selection: Selection) -> None:
        if selection in self.scene_items:
            self.scene_items.remove(selection)

    def set_polygon_list(self, polygons) -> None:
        """Add polygons, each a 2 x N matrix of x and y coordinates."""
        rois = self._rois()
        for polygon in polygons:
            arr = _columns(polygon, 2)
            points = [(_as_int(x), _as_int(y)) for x, y in zip(arr[0], arr[1])]
            selection = PolygonSelection(points)
            self.scene_items.append(selection)
            rois.append(selection)

    def set_point_list(self, points) -> None:
        """Add points given as a 2 x N matrix of x and y coordinates."""
        self._rois()
        arr = _columns(points, 2)
        for x, y in zip(arr[0], arr[1]):
            self._add(PointSelection((_as_int(x), _as_int(y))))

    def set_rect_list(self, rects) -> None:
        """Add rectangles given as a 4 x N matrix of x, y, width and height."""
        self._rois()
        arr = _columns(rects, 4)
        for x, y, w, h in zip(arr[0], arr[1], arr[2], arr[3]):
            self._add(RectangleSelection((_as_int(x), _as_int(y), _as_int(w), _as_int(h))))

    def polygon_list(self) -> list[np.ndarray]:
        """Return each finished polygon as a 2 x N int matrix."""
        output = []
        for selection in self._rois():
            if isinstance(selection, PolygonSelection):
                matrix = np.zeros((2, len(selection.points)), dtype=np.int32)
                for column, (x, y) in enumerate(selection.points):
                    matrix[0, column] = int(x)
                    matrix[1, column] = int(y)
                output.append(matrix)
        return output

    def rect_list(self) -> np.ndarray:
        """Return the rectangles as a 4 x N int matrix of x, y, width, height."""
        rects = [s.rect for s in self._rois() if isinstance(s, RectangleSelection)]
        output = np.zeros((4, len(rects)), dtype=np.int32)
        for column, rect in enumerate(rects):
            output[:, column] = [int(v) for v in rect]
        return output

    def point_list(self) -> np.ndarray:
        """Return the points as a 2 x N int matrix of x and y."""
        points = [s.point for s in self._rois() if isinstance(s, PointSelection)]
        output = np.zeros((2, len(points)), dtype=np.int32)
        for column, (x, y) in enumerate(points):
            output[:, column] = [int(x), int(y)]
        return output

    def cursor_moved(self, x, y) -> PixelInfo | None:
        """Follow the cursor; return the read-out for the pixel under it."""
        info = self.pixel_info(x, y)
        if self.defining_item is not None:
            self.defining_item.move_cursor(x, y)
        return info

    def right_click(self, x, y) -> None:
        """Add a point to the region being defined, starting one if needed."""
        if not self.has_image:
            return
        if self.defining_item is None:
            if self.selection_factory is None:
                raise RuntimeError("no selection factory set")
            self.defining_item = self.selection_factory()
            self.scene_items.append(self.defining_item)
        self.defining_item.add_point(x, y)
        if not self.defining_item.defining:
            self._rois().append(self.defining_item)
            self.defining_item = None

    def press_enter(self) -> None:
        """Finish the region being defined and keep it."""
        if self.defining_item is not None:
            self.defining_item.end_defining()
            self._rois().append(self.defining_item)
            self.defining_item = None

    def press_delete(self) -> None:
        """Drop the region being defined and every selected region."""
        if self.defining_item is not None:
            self.delete_current()
        if self.roi_list is None:
            return
        for selection in [s for s in self.roi_list if s.selected]:
            self.roi_list.remove(selection)
            self._remove_from_scene(selection)

    def delete_current(self) -> None:
        """Discard the region being defined."""
        if self.defining_item is not None:
            self._remove_from_scene(self.defining_item)
            self.defining_item = None

    def set_image(self, image, roi_list: list[Selection] | None = None) -> None:
        """Show ``image`` with the regions of ``roi_list`` (a new list if None)."""
        super().set_image(image)
        self.scene_items = []
        self.defining_item = None
        if roi_list is None:
            self.roi_list = []
        else:
            self.roi_list = roi_list
            self.scene_items.extend(roi_list)