"""Colour histograms of an image and a drawing of them."""

from __future__ import annotations

import colorsys
import enum
from dataclasses import dataclass, field

import numpy as np

HIST_SIZE = 256
MARGIN = 20

GRID_COLOR = (200, 200, 200)
BLACK = (0, 0, 0)


class Channel(enum.Enum):
    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    HUE = "hue"
    SATURATION = "saturation"
    VALUE = "value"


CHANNEL_COLORS = {
    Channel.RED: (200, 0, 0),
    Channel.GREEN: (0, 200, 0),
    Channel.BLUE: (0, 0, 200),
    Channel.HUE: (200, 0, 200),
    Channel.SATURATION: (255, 150, 0),
    Channel.VALUE: (0, 0, 0),
}


class Scale(enum.IntEnum):
    """The ruler drawn under the histogram grid."""

    VALUE_RANGE = 0
    RANGE_256 = 1
    HUE_RANGE = 2
    RANGE_365 = 3
    UNIT_RANGE = 4


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    color: tuple[int, int, int]


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    color: tuple[int, int, int]


@dataclass(frozen=True)
class Text:
    text: str
    x: float
    y: float


@dataclass
class Scene:
    """The items of a drawing, in the order they were added."""

    width: int
    height: int
    lines: list[Line] = field(default_factory=list)
    rects: list[Rect] = field(default_factory=list)
    texts: list[Text] = field(default_factory=list)

    def add_line(self, x1, y1, x2, y2, color) -> Line:
        line = Line(x1, y1, x2, y2, tuple(color))
        self.lines.append(line)
        return line

    def add_rect(self, x, y, width, height, color) -> Rect:
        rect = Rect(x, y, width, height, tuple(color))
        self.rects.append(rect)
        return rect

    def add_text(self, text, x, y) -> Text:
        item = Text(str(text), x, y)
        self.texts.append(item)
        return item


def bgr_to_hsv(image) -> np.ndarray:
    """Convert a BGR byte image to HSV with hue in 0..179 and S, V in 0..255."""
    arr = np.asarray(image)
    if arr.ndim != 3 or arr.shape[2] != 3:
        raise ValueError("expected a colour image of shape (height, width, 3)")
    bgr = arr.astype(np.int64)
    b, g, r = bgr[..., 0], bgr[..., 1], bgr[..., 2]
    v = bgr.max(axis=-1)
    diff = v - bgr.min(axis=-1)

    safe_v = np.where(v == 0, 1, v)
    s = np.where(v == 0, 0, np.floor(255.0 * diff / safe_v + 0.5))

    safe_diff = np.where(diff == 0, 1, diff)
    numerator = np.where(
        v == r, g - b, np.where(v == g, b - r + 2 * diff, r - g + 4 * diff)
    )
    h = np.floor(30.0 * numerator / safe_diff + 0.5)
    h = np.where(diff == 0, 0, h)
    h = np.where(h < 0, h + 180, h)
    return np.stack([h, s, v], axis=-1).astype(np.uint8)


def channel_histogram(plane, range_max, size=HIST_SIZE) -> np.ndarray:
    """Count values of ``plane`` in ``size`` bins over [0, range_max), scaled to 0..1."""
    if size <= 0 or range_max <= 0:
        raise ValueError("size and range_max must be positive")
    values = np.asarray(plane, dtype=np.float64).ravel()
    bins = np.floor(values * size / range_max).astype(np.int64)
    bins = bins[(bins >= 0) & (bins < size)]
    counts = np.bincount(bins, minlength=size).astype(np.float64)
    low, high = counts.min(), counts.max()
    if high - low > np.finfo(np.float64).eps:
        counts = (counts - low) / (high - low)
    else:
        counts = np.zeros_like(counts)
    return counts.astype(np.float32)


def _hue_color(hue: int) -> tuple[int, int, int]:
    r, g, b = colorsys.hsv_to_rgb((hue % 360) / 360.0, 1.0, 1.0)
    return (round(r * 255), round(g * 255), round(b * 255))


class Histograms:
    """Histograms of the enabled channels of the current image.

    Colour images give red, green, blue, hue, saturation and value;
    grey byte images give only value.
    """

    def __init__(self):
        self.channels: dict[Channel, bool] = {channel: True for channel in Channel}
        self.scale = Scale.VALUE_RANGE
        self.image: np.ndarray | None = None
        self.histograms: dict[Channel, np.ndarray] = {}
        self._hsv: np.ndarray | None = None

    def _has_rows(self) -> bool:
        return self.image is not None and self.image.ndim >= 2 and self.image.shape[0] > 0

    def _is_rgb(self) -> bool:
        return (
            self._has_rows()
            and self.image.ndim == 3
            and self.image.shape[2] == 3
            and self.image.dtype == np.uint8
        )

    def _is_gray(self) -> bool:
        return self._has_rows() and self.image.ndim == 2 and self.image.dtype == np.uint8

    def _hsv_planes(self) -> np.ndarray:
        if self._hsv is None:
            self._hsv = bgr_to_hsv(self.image)
        return self._hsv

    def _compute_channel(self, channel: Channel) -> None:
        if channel in self.histograms or not self._has_rows():
            return
        if channel is Channel.VALUE and self._is_gray():
            plane, top = self.image, 256
        elif channel in (Channel.RED, Channel.GREEN, Channel.BLUE):
            index = {Channel.BLUE: 0, Channel.GREEN: 1, Channel.RED: 2}[channel]
            plane, top = self.image[..., index], 256
        elif channel is Channel.HUE:
            plane, top = self._hsv_planes()[..., 0], 180
        elif channel is Channel.SATURATION:
            plane, top = self._hsv_planes()[..., 1], 256
        else:
            plane, top = self._hsv_planes()[..., 2], 256
        self.histograms[channel] = channel_histogram(plane, top, HIST_SIZE)

    def set_channel(self, channel: Channel, enabled: bool) -> None:
        """Enable or disable a channel, computing its histogram when needed."""
        self.channels[channel] = enabled
        allowed = self._is_rgb() or (channel is Channel.VALUE and self._is_gray())
        if allowed and enabled:
            self._compute_channel(channel)

    def update_image(self, image) -> None:
        """Replace the image and recompute the enabled histograms."""
        self.image = None if image is None else np.asarray(image)
        self.histograms = {}
        self._hsv = None
        self.compute()

    def compute(self) -> None:
        """Compute the missing histograms of the enabled channels."""
        rgb, gray = self._is_rgb(), self._is_gray()
        if not (rgb or gray):
            return
        for channel in Channel:
            if self.channels[channel] and (rgb or channel is Channel.VALUE):
                self._compute_channel(channel)

    def is_bitonal(self) -> bool:
        """Return whether the value histogram only has entries at 0 and 255."""
        values = self.histograms.get(Channel.VALUE)
        if values is None or len(values) == 0:
            return False
        return not np.any(values[1:254])

    def draw(self, width: int, height: int) -> Scene:
        """Draw the histograms into a plot area of ``width`` by ``height``."""
        if width <= 0 or height <= 0:
            raise ValueError("the plot area must have a positive size")
        scene = Scene(width, height)
        if self._is_gray() and self.is_bitonal():
            self._draw_bars(scene, width, height)
        else:
            self._draw_grid(scene, width, height)
            self._draw_lines(scene, width, height)
        return scene

    def _draw_grid(self, scene: Scene, w: int, h: int) -> None:
        step_w, step_h = w / 8.0, h / 8.0
        for pos in range(9):
            x, y = int(pos * step_w), int(pos * step_h)
            scene.add_line(x, 0, x, h, GRID_COLOR)
            scene.add_line(0, y, w, y, GRID_COLOR)

        if self.scale == Scale.VALUE_RANGE:
            for pos in range(w + 1):
                bright = int(pos * 255 / w)
                scene.add_line(pos, h + 4, pos, h + 12, (bright, bright, bright))
        elif self.scale == Scale.HUE_RANGE:
            for pos in range(w + 1):
                scene.add_line(pos, h + 4, pos, h + 12, _hue_color(int(pos * 255 / w)))
        elif self.scale == Scale.RANGE_256:
            self._draw_labels(scene, w, h, [str(i * (256 // 8)) for i in range(9)])
        elif self.scale == Scale.RANGE_365:
            self._draw_labels(scene, w, h, [str(i * (365 // 8)) for i in range(9)])
        else:
            self._draw_labels(scene, w, h, [f"{i * 10 / 80.0:.3g}" for i in range(9)])

    @staticmethod
    def _draw_labels(scene: Scene, w: int, h: int, labels: list[str]) -> None:
        step_w = w / 8.0
        for pos, label in enumerate(labels):
            scene.add_text(label, int(pos * step_w) - 10, h)

    def _draw_lines(self, scene: Scene, w: int, h: int) -> None:
        drawn = [c for c in Channel if self.channels[c] and c in self.histograms]
        if not drawn:
            return
        step = max(1.0, w / HIST_SIZE)
        x = 0.0
        while x < w:
            for channel in drawn:
                top = 180.0 if channel is Channel.HUE else 255.0
                pos1 = int(min(top, max(0.0, x * top / w)))
                pos2 = int(min(top, max(0.0, (x + step) * top / w)))
                hist = self.histograms[channel]
                scene.add_line(
                    x, h - h * float(hist[pos1]),
                    x + step, h - h * float(hist[pos2]),
                    CHANNEL_COLORS[channel],
                )
            x += step

    def _draw_bars(self, scene: Scene, w: int, h: int) -> None:
        values = self.histograms[Channel.VALUE]
        black, white = float(values[0]), float(values[255])
        bar1, bar2 = int(h * black), int(h * white)
        scene.add_rect(0, h - bar1, w // 2, bar1, BLACK)
        scene.add_rect(w // 2, h - bar2, w // 2, bar2, BLACK)

        total = black + white
        if total:
            black_pct, white_pct = 100 * black / total, 100 * white / total
        else:
            black_pct = white_pct = float("nan")
        scene.add_text(f"{black_pct:.1f}%", w // 4 - MARGIN, h)
        scene.add_text(f"{white_pct:.1f}%", 3 * w // 4 - MARGIN, h)