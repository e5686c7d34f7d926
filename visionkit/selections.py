"""Regions of interest drawn on an image: points, polygons and rectangles."""

from __future__ import annotations

import abc
import math

DEFINING_COLOR = (255, 180, 0)
SELECTED_COLOR = (255, 0, 0)
IDLE_COLOR = (0, 180, 0)

CORNER_GRAB_DISTANCE = 10


def _round(value: float) -> int:
    return int(math.floor(value + 0.5)) if value >= 0 else int(math.ceil(value - 0.5))


class Selection(abc.ABC):
    """A region of interest, possibly still being defined by the user."""

    def __init__(self, defining: bool = False):
        self.defining = defining
        self.selected = False

    def toggle_selected(self) -> None:
        self.selected = not self.selected

    def pen_color(self) -> tuple[int, int, int]:
        if self.defining:
            return DEFINING_COLOR
        if self.selected:
            return SELECTED_COLOR
        return IDLE_COLOR

    @abc.abstractmethod
    def end_defining(self) -> None:
        """Finish the definition of the region."""

    @abc.abstractmethod
    def add_point(self, x: float, y: float) -> None:
        """Add a point clicked by the user."""

    @abc.abstractmethod
    def move_cursor(self, x: float, y: float) -> None:
        """Follow the cursor while the region is being defined."""


class PointSelection(Selection):
    """A single pixel."""

    def __init__(self, point=None):
        super().__init__(defining=point is None)
        self.rect: tuple[int, int, int, int] = (0, 0, 0, 0)
        if point is not None:
            px, py = point
            self.rect = (int(px), int(py), 1, 1)

    @property
    def point(self) -> tuple[int, int]:
        return self.rect[0], self.rect[1]

    def end_defining(self) -> None:
        self.defining = False

    def add_point(self, x, y) -> None:
        self.end_defining()
        self.rect = (int(x), int(y), 1, 1)

    def move_cursor(self, x, y) -> None:
        pass


class PolygonSelection(Selection):
    """A polygon whose last vertex follows the cursor while it is defined."""

    def __init__(self, points=None):
        super().__init__(defining=points is None)
        self.points: list[tuple[float, float]] = (
            [] if points is None else [(px, py) for px, py in points]
        )

    def _drop_last(self) -> None:
        if self.points:
            self.points.pop()

    def end_defining(self) -> None:
        self._drop_last()
        self.defining = False

    def add_point(self, x, y) -> None:
        self._drop_last()
        self.points.append((x, y))
        self.points.append((x, y))

    def move_cursor(self, x, y) -> None:
        self._drop_last()
        self.points.append((x, y))


class RectangleSelection(Selection):
    """An axis-aligned rectangle given as (x, y, width, height)."""

    def __init__(self, rect=None):
        super().__init__(defining=rect is None)
        self.rect: tuple[float, float, float, float] = (
            (0, 0, 0, 0) if rect is None else tuple(rect)
        )
        self.start_point: tuple[float, float] = (0, 0)

    @property
    def is_empty(self) -> bool:
        return self.rect[2] <= 0 or self.rect[3] <= 0

    def _span_to(self, x, y) -> tuple[int, int, int, int]:
        sx, sy = self.start_point
        min_x, min_y = int(min(x, sx)), int(min(y, sy))
        max_x, max_y = int(max(x, sx)), int(max(y, sy))
        return (min_x, min_y, max_x - min_x, max_y - min_y)

    def end_defining(self) -> None:
        self.defining = False

    def add_point(self, x, y) -> None:
        if self.is_empty:
            self.start_point = (x, y)
            self.rect = (_round(x), _round(y), 0, 0)
        else:
            self.rect = self._span_to(x, y)
            self.end_defining()

    def move_cursor(self, x, y) -> None:
        self.rect = self._span_to(x, y)

    def press(self, x, y) -> None:
        """Start redefining the rectangle when a corner is grabbed."""
        if self.defining:
            return
        left, top, width, height = self.rect
        corners = ((left + width, top + height), (left, top))
        for cx, cy in corners:
            if abs(x - cx) < CORNER_GRAB_DISTANCE and abs(y - cy) < CORNER_GRAB_DISTANCE:
                self.defining = True
                return