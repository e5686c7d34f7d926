"""Sources of images that can be stepped through, read from files or memory."""

from __future__ import annotations

import abc
import xml.etree.ElementTree as ET
from pathlib import Path

import numpy as np
import yaml
from PIL import Image

_DEPTHS = {
    "u": np.uint8,
    "c": np.int8,
    "w": np.uint16,
    "s": np.int16,
    "i": np.int32,
    "f": np.float32,
    "d": np.float64,
}


class FileManager(abc.ABC):
    """A sequence of images with a current position."""

    @property
    @abc.abstractmethod
    def num_images(self) -> int:
        """Number of images in the sequence."""

    @property
    @abc.abstractmethod
    def current_number(self) -> int:
        """Zero-based position of the current image."""

    @property
    @abc.abstractmethod
    def current_name(self) -> str:
        """Name of the current image."""

    @abc.abstractmethod
    def get_image(self) -> np.ndarray:
        """Return the current image."""

    @abc.abstractmethod
    def go_to_image(self, number: int) -> None:
        """Move to the image at ``number`` if it exists."""

    @abc.abstractmethod
    def next_image(self) -> None:
        """Move to the next image unless already at the last one."""

    @abc.abstractmethod
    def prev_image(self) -> None:
        """Move to the previous image unless already at the first one."""


def is_gray(image) -> bool:
    """Return whether every pixel of a colour image has equal channels."""
    arr = np.asarray(image)
    if arr.ndim == 2:
        return True
    return bool(np.all(arr[..., 0] == arr[..., 1]) and np.all(arr[..., 0] == arr[..., 2]))


def load_image(path) -> np.ndarray:
    """Read an image file as BGR, or as a single plane when it is grey."""
    with Image.open(path) as img:
        rgb = np.asarray(img.convert("RGB"))
    bgr = np.ascontiguousarray(rgb[..., ::-1])
    if is_gray(bgr):
        return bgr[..., 0].copy()
    return bgr


class _StorageLoader(yaml.SafeLoader):
    """YAML loader that understands matrix nodes of a storage file."""


def _construct_matrix(loader: yaml.SafeLoader, node: yaml.Node) -> dict:
    return loader.construct_mapping(node, deep=True)


_StorageLoader.add_constructor("tag:yaml.org,2002:opencv-matrix", _construct_matrix)
_StorageLoader.add_constructor("!opencv-matrix", _construct_matrix)


def _build_matrix(rows, cols, dt, data, dtype_from_text: bool = False) -> np.ndarray:
    rows, cols = int(rows), int(cols)
    code = str(dt).strip()
    depth = code[-1:]
    if depth not in _DEPTHS:
        raise ValueError(f"unsupported element type {code!r}")
    channels = int(code[:-1]) if code[:-1] else 1
    dtype = _DEPTHS[depth]
    if dtype_from_text:
        values = np.asarray([float(v) for v in data], dtype=np.float64).astype(dtype)
    else:
        values = np.asarray(data if data is not None else [], dtype=dtype)
    if values.size != rows * cols * channels:
        raise ValueError(
            f"matrix holds {values.size} values, expected {rows * cols * channels}"
        )
    shape = (rows, cols) if channels == 1 else (rows, cols, channels)
    return values.reshape(shape)


def _read_yaml_matrix(text: str) -> np.ndarray:
    body = "\n".join(
        line for line in text.splitlines() if not line.lstrip().startswith("%YAML")
    )
    document = yaml.load(body, Loader=_StorageLoader)
    if not isinstance(document, dict) or "mat" not in document:
        raise ValueError("storage file has no 'mat' entry")
    entry = document["mat"]
    try:
        return _build_matrix(entry["rows"], entry["cols"], entry["dt"], entry.get("data"))
    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError("malformed 'mat' entry") from exc


def _read_xml_matrix(text: str) -> np.ndarray:
    root = ET.fromstring(text)
    entry = root.find("mat")
    if entry is None:
        raise ValueError("storage file has no 'mat' entry")
    fields = {name: entry.findtext(name) for name in ("rows", "cols", "dt", "data")}
    if fields["rows"] is None or fields["cols"] is None or fields["dt"] is None:
        raise ValueError("malformed 'mat' entry")
    tokens = (fields["data"] or "").split()
    return _build_matrix(fields["rows"], fields["cols"], fields["dt"], tokens,
                         dtype_from_text=True)


def read_matrix_file(path) -> np.ndarray:
    """Read the matrix stored under the key ``mat`` of a YAML or XML storage file."""
    text = Path(path).read_text()
    if text.lstrip().startswith("<"):
        return _read_xml_matrix(text)
    return _read_yaml_matrix(text)


class ImageFileManager(FileManager):
    """Steps through a list of image files; ``.mat`` files hold matrices."""

    def __init__(self, file_names):
        self.file_names = [str(name) for name in file_names]
        self._current = 0

    @property
    def num_images(self) -> int:
        return len(self.file_names)

    @property
    def current_number(self) -> int:
        return self._current

    @property
    def current_name(self) -> str:
        return self.file_names[self._current]

    def get_image(self) -> np.ndarray:
        name = self.current_name
        if name.endswith(".mat"):
            return read_matrix_file(name)
        return load_image(name)

    def go_to_image(self, number: int) -> None:
        if 0 <= number < len(self.file_names):
            self._current = number

    def next_image(self) -> None:
        if self._current < len(self.file_names) - 1:
            self._current += 1

    def prev_image(self) -> None:
        if self._current > 0:
            self._current -= 1


class SingleImageManager(FileManager):
    """A sequence made of one image held in memory."""

    def __init__(self, image):
        self.image = image

    @property
    def num_images(self) -> int:
        return 1

    @property
    def current_number(self) -> int:
        return 0

    @property
    def current_name(self) -> str:
        return ""

    def get_image(self):
        return self.image

    def go_to_image(self, number: int) -> None:
        pass

    def next_image(self) -> None:
        pass

    def prev_image(self) -> None:
        pass