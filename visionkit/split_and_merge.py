"""Split-and-merge segmentation of colour images."""

from __future__ import annotations

import abc
import math
from dataclasses import dataclass

import numpy as np

_TAN_22_5 = math.tan(math.radians(22.5))
_TAN_67_5 = math.tan(math.radians(67.5))


@dataclass(frozen=True)
class Region:
    """An axis-aligned rectangle of pixels."""

    x: int
    y: int
    width: int
    height: int

    @property
    def slices(self) -> tuple[slice, slice]:
        return (
            slice(self.y, self.y + self.height),
            slice(self.x, self.x + self.width),
        )


def _to_byte(value: float) -> int:
    return min(255, max(0, int(value)))


@dataclass(frozen=True)
class ZoneInfo:
    """Mean colour and standard deviation of a zone, truncated to bytes."""

    mean: tuple[int, int, int]
    std: tuple[int, int, int]

    @classmethod
    def from_stats(cls, mean, std) -> "ZoneInfo":
        return cls(
            tuple(_to_byte(v) for v in list(mean)[:3]),
            tuple(_to_byte(v) for v in list(std)[:3]),
        )


def _as_color_image(image) -> np.ndarray:
    arr = np.asarray(image)
    if arr.ndim != 3 or arr.shape[2] != 3:
        raise ValueError("expected a colour image of shape (height, width, 3)")
    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise ValueError("image is empty")
    return arr.astype(np.uint8, copy=False)


class SplitAndMergeDecisor(abc.ABC):
    """Decides when a region is homogeneous and when two zones join."""

    @abc.abstractmethod
    def must_split(self, image: np.ndarray, region: Region) -> int:
        """Return 0 to split the region, otherwise a new label for it."""

    @abc.abstractmethod
    def must_merge(self, image: np.ndarray, label1: int, label2: int,
                   x1: int, y1: int, x2: int, y2: int) -> bool:
        """Return whether the zones holding two adjacent pixels join."""


class ColorDecisor(SplitAndMergeDecisor):
    """Splits regions with a high colour deviation; merges similar colours."""

    def __init__(self, std_dev_threshold: int = 10, color_threshold: int = 10):
        self.std_dev_threshold = std_dev_threshold
        self.color_threshold = color_threshold
        self.current_split_info: ZoneInfo | None = None
        self.zone_colors: list[tuple[int, int, int]] = [(0, 0, 0)]
        self._high_std_dev: np.ndarray | None = None

    def _new_zone(self) -> int:
        self.zone_colors.append(self.current_split_info.mean)
        return len(self.zone_colors) - 1

    def must_split(self, image, region):
        if self._high_std_dev is None:
            self._high_std_dev = np.zeros(image.shape[:2], dtype=np.uint8)

        zone = np.asarray(image)[region.slices].reshape(-1, 3).astype(np.float64)
        mean = zone.mean(axis=0)
        std = zone.std(axis=0)
        self.current_split_info = ZoneInfo.from_stats(mean, std)

        if region.width < 2 or region.height < 2:
            self._high_std_dev[region.slices] = 255
            return self._new_zone()
        if not np.any(mean):
            return self._new_zone()
        if bool(np.all(std < self.std_dev_threshold)):
            return self._new_zone()
        return 0

    def must_merge(self, image, label1, label2, x1, y1, x2, y2):
        color1 = self.zone_colors[label1]
        color2 = self.zone_colors[label2]
        black = (0, 0, 0)
        if color1 == black or color2 == black:
            return False

        high1 = int(self._high_std_dev[y1, x1])
        high2 = int(self._high_std_dev[y2, x2])
        if high1 == high2 == 255:
            return True

        close = all(abs(a - b) < self.color_threshold for a, b in zip(color1, color2))
        return close and high1 == high2


def _sobel(plane: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    p = np.pad(plane, 1, mode="edge")
    dx = (p[:-2, 2:] + 2 * p[1:-1, 2:] + p[2:, 2:]) - (
        p[:-2, :-2] + 2 * p[1:-1, :-2] + p[2:, :-2]
    )
    dy = (p[2:, :-2] + 2 * p[2:, 1:-1] + p[2:, 2:]) - (
        p[:-2, :-2] + 2 * p[:-2, 1:-1] + p[:-2, 2:]
    )
    return dx, dy


def canny(image, low_threshold: float, high_threshold: float) -> np.ndarray:
    """Detect edges; returns a byte image holding 0 or 255.

    Colour images use, at each pixel, the channel with the strongest gradient.
    """
    arr = np.asarray(image)
    if arr.ndim == 2:
        planes = arr[..., None]
    elif arr.ndim == 3:
        planes = arr
    else:
        raise ValueError("expected a 2-D or 3-D image")
    if low_threshold > high_threshold:
        low_threshold, high_threshold = high_threshold, low_threshold

    planes = planes.astype(np.int64)
    grads = [_sobel(planes[..., c]) for c in range(planes.shape[2])]
    all_dx = np.stack([g[0] for g in grads], axis=-1)
    all_dy = np.stack([g[1] for g in grads], axis=-1)
    mags = np.abs(all_dx) + np.abs(all_dy)
    best = mags.argmax(axis=-1)[..., None]
    dx = np.take_along_axis(all_dx, best, axis=-1)[..., 0]
    dy = np.take_along_axis(all_dy, best, axis=-1)[..., 0]
    mag = np.take_along_axis(mags, best, axis=-1)[..., 0]

    h, w = mag.shape
    padded = np.pad(mag, 1)

    def neighbour(oy: int, ox: int) -> np.ndarray:
        return padded[1 + oy:1 + oy + h, 1 + ox:1 + ox + w]

    adx = np.abs(dx).astype(np.float64)
    ady = np.abs(dy).astype(np.float64)
    horizontal = ady <= adx * _TAN_22_5
    vertical = ady > adx * _TAN_67_5
    diagonal = ~(horizontal | vertical)
    same_sign = (dx * dy) > 0

    local_max = (
        (horizontal & (mag > neighbour(0, -1)) & (mag >= neighbour(0, 1)))
        | (vertical & (mag > neighbour(-1, 0)) & (mag >= neighbour(1, 0)))
        | (diagonal & same_sign & (mag > neighbour(-1, -1)) & (mag > neighbour(1, 1)))
        | (diagonal & ~same_sign & (mag > neighbour(-1, 1)) & (mag > neighbour(1, -1)))
    )
    candidate = local_max & (mag > low_threshold)
    edges = candidate & (mag > high_threshold)

    while True:
        p = np.pad(edges, 1)
        grown = np.zeros_like(edges)
        for oy in (-1, 0, 1):
            for ox in (-1, 0, 1):
                grown |= p[1 + oy:1 + oy + h, 1 + ox:1 + ox + w]
        grown = (grown & candidate) | edges
        if np.array_equal(grown, edges):
            break
        edges = grown

    return np.where(edges, 255, 0).astype(np.uint8)


class EdgeDecisor(SplitAndMergeDecisor):
    """Splits regions holding edges; merges zones of equal edge density."""

    def __init__(self):
        self.densities: list[float] = []
        self._integral: np.ndarray | None = None

    def must_split(self, image, region):
        if self._integral is None:
            edges = canny(image, 100, 100).astype(np.float64)
            h, w = edges.shape
            self._integral = np.zeros((h + 1, w + 1), dtype=np.float64)
            self._integral[1:, 1:] = edges.cumsum(axis=0).cumsum(axis=1)
            self.densities.append(0.0)

        ii = self._integral
        x0, y0 = region.x, region.y
        x1, y1 = x0 + region.width, y0 + region.height
        total = ii[y1, x1] - ii[y0, x1] - ii[y1, x0] + ii[y0, x0]

        if total <= 0 or (region.width == 1 and region.height == 1):
            self.densities.append(total / (region.width * region.height))
            return len(self.densities) - 1
        return 0

    def must_merge(self, image, label1, label2, x1, y1, x2, y2):
        return abs(self.densities[label1] - self.densities[label2]) == 0


def _union(corresp: list[int], a: int, b: int) -> None:
    min_label = min(corresp[a], corresp[b])
    if corresp[a] > min_label:
        corresp[corresp[a]] = min_label
    if corresp[b] > min_label:
        corresp[corresp[b]] = min_label
    corresp[a] = corresp[min_label]
    corresp[b] = corresp[min_label]


class SplitAndMerge:
    """Segments a colour image into homogeneous regions.

    After ``process`` the attributes ``split_image``, ``merge_image``,
    ``num_blobs`` and ``zone_area`` describe the last segmentation.
    """

    def __init__(self, decisor: SplitAndMergeDecisor | None = None):
        self.decisor = decisor if decisor is not None else ColorDecisor()
        self.split_image: np.ndarray | None = None
        self.merge_image: np.ndarray | None = None
        self.num_blobs = 0
        self.zone_area: list[int] = []
        self._image: np.ndarray | None = None
        self._result: np.ndarray | None = None
        self._max_label = 0

    def process(self, image) -> np.ndarray:
        """Return an int label image for a BGR image of shape (h, w, 3)."""
        image = _as_color_image(image)
        h, w = image.shape[:2]
        self._image = image
        self._result = np.zeros((h, w), dtype=np.int32)
        self._max_label = 0

        self._split(Region(0, 0, w, h))
        self.split_image = self._result.copy()

        corresp = list(range(self._max_label + 1))
        self._merge(corresp)
        self._flatten(corresp)

        result = np.asarray(corresp, dtype=np.int32)[self._result]
        self._result = result
        self.merge_image = result.copy()

        self.num_blobs = len(corresp)
        self.zone_area = np.bincount(result.ravel(), minlength=self.num_blobs).tolist()
        return result

    def _split(self, region: Region) -> None:
        label = self.decisor.must_split(self._image, region)
        self._max_label = max(self._max_label, label)

        if label != 0:
            self._result[region.slices] = label
            return

        x0, y0 = region.x, region.y
        aspect = region.width / region.height
        if 0.9 < aspect < 1.1:
            w0 = max(1, region.width // 2)
            h0 = max(1, region.height // 2)
            w1 = max(1, region.width - w0)
            h1 = max(1, region.height - h0)
            parts = [
                Region(x0, y0, w0, h0),
                Region(x0 + w0, y0, w1, h0),
                Region(x0, y0 + h0, w0, h1),
                Region(x0 + w0, y0 + h0, w1, h1),
            ]
        elif region.width > region.height:
            w0 = max(1, region.width // 2)
            h0 = max(1, region.height)
            w1 = max(1, region.width - w0)
            parts = [Region(x0, y0, w0, h0), Region(x0 + w0, y0, w1, h0)]
        else:
            w0 = max(1, region.width)
            h0 = max(1, region.height // 2)
            h1 = max(1, region.height - h0)
            parts = [Region(x0, y0, w0, h0), Region(x0, y0 + h0, w0, h1)]

        for part in parts:
            self._split(part)

    def _merge(self, corresp: list[int]) -> None:
        res = self._result
        diff_up = np.zeros(res.shape, dtype=bool)
        diff_up[1:, :] = res[1:, :] != res[:-1, :]
        diff_left = np.zeros(res.shape, dtype=bool)
        diff_left[:, 1:] = res[:, 1:] != res[:, :-1]

        for y, x in np.argwhere(diff_up | diff_left):
            y, x = int(y), int(x)
            current = int(res[y, x])
            if diff_up[y, x]:
                up = int(res[y - 1, x])
                if self.decisor.must_merge(self._image, current, up, x, y, x, y - 1):
                    _union(corresp, current, up)
            if diff_left[y, x]:
                left = int(res[y, x - 1])
                if self.decisor.must_merge(self._image, current, left, x, y, x - 1, y):
                    _union(corresp, current, left)

    @staticmethod
    def _flatten(corresp: list[int]) -> None:
        for a in range(len(corresp)):
            b = corresp[a]
            while b != corresp[b]:
                b = corresp[b]
            corresp[a] = b