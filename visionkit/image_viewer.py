"""Image viewing state: the shown picture, zoom and pixel read-outs."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

MAX_ZOOM = 100


def _qnumber(value) -> str:
    """Format a number the way a general-format, six-digit display does."""
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    return f"{float(value):.6g}"


def rgb_text(color) -> str:
    """Return "r,g,b" for a BGR colour triple."""
    b, g, r = (int(c) for c in list(color)[:3])
    return f"{r},{g},{b}"


def hsv_text(color) -> str:
    """Return "h,s,v" for a BGR colour triple, hue in 0..179."""
    b, g, r = (np.float32(c) for c in list(color)[:3])
    big = max(r, g, b)
    small = min(r, g, b)
    chroma = np.float32(big - small)
    value = big

    if chroma == 0:
        hp = np.float32(0)
    elif big == r:
        aux = np.float32((g - b) / np.float32(chroma * 6))
        hp = np.float32(aux - int(aux))
    elif big == g:
        hp = np.float32(2.0 + float(np.float32((b - r) / chroma)))
    else:
        hp = np.float32(4.0 + float(np.float32((r - g) / chroma)))

    h = int(30.0 * float(hp))
    s = 0 if chroma == 0 else int(np.float32(np.float32(255 * chroma) / value))
    return f"{h},{s},{_qnumber(value)}"


@dataclass(frozen=True)
class PixelInfo:
    """Text shown for the pixel under the cursor."""

    coords: str
    value: str


def _wheel_steps(delta: int) -> int:
    eighths = int(delta / 8)
    return int(eighths / 15)


class ImageViewer:
    """Holds the shown image, its displayable form and the current zoom."""

    def __init__(self):
        self.source_image: np.ndarray = np.zeros((0, 0), dtype=np.uint8)
        self.display: np.ndarray | None = None
        self.scene_rect: tuple[int, int, int, int] = (0, 0, 0, 0)
        self.zoom = 1.0

    @property
    def has_image(self) -> bool:
        return self.source_image.ndim >= 2 and self.source_image.shape[0] > 0

    def set_image(self, image) -> None:
        """Show ``image``; an image without rows clears the picture only."""
        arr = np.asarray(image)
        self.display = None
        if arr.ndim < 2 or arr.shape[0] == 0:
            return

        self.source_image = arr.copy()
        if arr.ndim == 3 and arr.shape[2] == 3:
            self.display = np.ascontiguousarray(arr[..., ::-1])
        elif arr.ndim == 2 and arr.dtype == np.uint8:
            self.display = arr.copy()
        self.scene_rect = (0, 0, arr.shape[1], arr.shape[0])

    def get_image(self) -> np.ndarray:
        """Return a copy of the shown image."""
        return self.source_image.copy()

    def reset_transform(self) -> None:
        self.zoom = 1.0

    def scale_by(self, factor: float) -> None:
        self.zoom *= factor

    def wheel(self, delta: int) -> float:
        """Zoom by powers of two for each wheel notch; return the zoom."""
        if not self.has_image:
            return self.zoom
        steps = _wheel_steps(delta)
        jump = 2.0 ** steps if steps > 0 else 0.5 ** (-steps)
        if self.zoom < MAX_ZOOM or jump < 1:
            self.scale_by(jump)
        return self.zoom

    def zoom_text(self) -> str:
        return f"{_qnumber(self.zoom * 100)} %"

    def smooth_rendering(self) -> bool:
        """Return whether the picture is drawn with smoothing (zoomed out)."""
        return self.display is not None and self.zoom < 1

    def pixel_info(self, x, y) -> PixelInfo | None:
        """Describe the pixel at scene position (x, y), or None outside the image."""
        x, y = int(x), int(y)
        img = self.source_image
        if not (self.has_image and 0 < x < img.shape[1] and 0 < y < img.shape[0]):
            return None

        coords = f"({x} , {y})"
        if img.ndim == 3 and img.shape[2] == 3:
            color = img[y, x]
            return PixelInfo(coords, f"RGB({rgb_text(color)}) HSV({hsv_text(color)})")

        if img.ndim != 2:
            return PixelInfo(coords, "")
        pixel = img[y, x]
        labels = {
            np.dtype(np.uint8): "Gray",
            np.dtype(np.float32): "Float",
            np.dtype(np.int32): "Int",
            np.dtype(np.float64): "Double",
        }
        label = labels.get(img.dtype)
        if label is None:
            return PixelInfo(coords, "")
        number = pixel.item()
        return PixelInfo(coords, f"{label}({_qnumber(number)})")