"""A tree of images and derived images with per-image view state."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable

import numpy as np

from visionkit.image_files import FileManager, SingleImageManager
from visionkit.selections import Selection
from visionkit.selector import ImageViewerWithSelector

FIT_MARGIN = 10
DEFAULT_VIEWPORT = (800, 600)


@dataclass
class Transformation:
    """Zoom factor and scroll offsets of a view."""

    zoom: float = 1.0
    dx: int = 0
    dy: int = 0


@dataclass(frozen=True)
class ButtonState:
    """Which navigation controls are enabled and what they show."""

    prev: bool = False
    first: bool = False
    next: bool = False
    last: bool = False
    number_enabled: bool = False
    total: int = 0
    number: int = 0


@dataclass(eq=False)
class Node:
    """An entry of the image tree."""

    name: str
    properties: str
    parent: Node | None = None
    children: list[Node] = field(default_factory=list)


@dataclass(eq=False)
class InfoView:
    """What the navigator knows about one tree entry.

    ``owner`` is the entry whose transformation this entry shares; an entry
    owning its own transformation is its own owner.
    """

    transformation: Transformation | None
    file_manager: FileManager
    owner: Node
    roi_list: list[Selection] = field(default_factory=list)


_TYPE_NAMES = {
    (np.dtype(np.float32), 1): "float",
    (np.dtype(np.int32), 1): "int",
    (np.dtype(np.uint8), 1): "byte",
    (np.dtype(np.uint8), 3): "3 bytes",
}


def image_properties_text(image) -> str:
    """Return "cols x rows x type" for an image."""
    arr = np.asarray(image)
    rows = arr.shape[0] if arr.ndim >= 1 else 0
    cols = arr.shape[1] if arr.ndim >= 2 else 0
    channels = arr.shape[2] if arr.ndim == 3 else 1
    type_name = _TYPE_NAMES.get((arr.dtype, channels), "")
    return f"{cols} x {rows} x {type_name}"


class Navigator:
    """Keeps a tree of images and moves the viewer between them.

    ``on_change`` is called with the new ``ButtonState`` whenever the
    navigation controls have to be refreshed. ``viewport_size`` is the
    (width, height) used to fit new images, and ``scroll_position`` the
    current scroll offsets of the view.
    """

    def __init__(self, viewer: ImageViewerWithSelector,
                 on_change: Callable[[ButtonState], None] | None = None):
        self.viewer = viewer
        self.on_change = on_change
        self.viewport_size: tuple[int, int] = DEFAULT_VIEWPORT
        self.scroll_position: tuple[int, int] = (0, 0)
        self.roots: list[Node] = []
        self.info_views: dict[Node, InfoView] = {}
        self.current: Node | None = None
        self.last_item: Node | None = None

    def _fit_transformation(self, image) -> Transformation:
        arr = np.asarray(image)
        rows = arr.shape[0] if arr.ndim >= 1 else 0
        cols = arr.shape[1] if arr.ndim >= 2 else 0
        width, height = self.viewport_size
        fit = min(width / (cols + FIT_MARGIN), height / (rows + FIT_MARGIN))
        return Transformation(1.0 if fit > 1.0 else fit, 0, 0)

    def _info(self, node: Node) -> InfoView:
        try:
            return self.info_views[node]
        except KeyError:
            raise KeyError(f"unknown tree entry {node.name!r}") from None

    def _current_info(self) -> InfoView:
        if self.current is None:
            raise RuntimeError("no image selected")
        return self.info_views[self.current]

    def _show_current(self) -> None:
        info = self._current_info()
        self.viewer.set_image(info.file_manager.get_image(), info.roi_list)
        self.restore_transformation(self.current)
        self._notify()

    def _notify(self) -> None:
        if self.current is not None and self.on_change is not None:
            self.on_change(self.button_state())

    def add_parent_image(self, manager: FileManager, name: str,
                         transformation: Transformation | None = None) -> Node:
        """Add a top-level entry for ``manager`` and select it."""
        self.store_current_transformation()
        node = Node(str(name), image_properties_text(manager.get_image()))
        if transformation is None:
            transformation = self._fit_transformation(manager.get_image())
        self.info_views[node] = InfoView(transformation, manager, node, [])
        self.roots.append(node)
        self.select(node)
        return node

    def add_child_image(self, image, name: str, change_to_child: bool = True) -> Node:
        """Add ``image`` as a child of the selected entry.

        When the selected entry holds several images, the current frame is
        first copied into a new top-level entry, which becomes the parent.
        A child with the parent's size shares the parent's view state.
        """
        self.store_current_transformation()
        parent_node = self.current
        if parent_node is None:
            raise RuntimeError("no image selected")

        parent_info = self.info_views[parent_node]
        parent_manager = parent_info.file_manager
        parent_image = np.asarray(parent_manager.get_image())

        if parent_manager.num_images > 1:
            frame_name = f"Frame: {1 + parent_manager.current_number}"
            shared = self.info_views[parent_info.owner].transformation
            self.add_parent_image(
                SingleImageManager(parent_image.copy()),
                frame_name,
                replace(shared) if shared is not None else None,
            )
            parent_node = self.current

        arr = np.asarray(image)
        node = Node(str(name), image_properties_text(arr), parent=parent_node)
        same_size = parent_image.shape[:2] == arr.shape[:2]
        if same_size:
            info = InfoView(None, SingleImageManager(image), parent_info.owner, [])
        else:
            info = InfoView(self._fit_transformation(arr), SingleImageManager(image), node, [])
        self.info_views[node] = info
        parent_node.children.append(node)

        if change_to_child:
            self.select(node)
            self.restore_transformation(parent_node)
            self._notify()
        return node

    def select(self, node: Node) -> None:
        """Make ``node`` the current entry and show its image."""
        self._info(node)
        self.store_current_transformation()
        self.current = node
        self._show_current()

    def get_image(self):
        """Return the current image of the selected entry."""
        return self._current_info().file_manager.get_image()

    def file_manager(self) -> FileManager:
        return self._current_info().file_manager

    def num_images(self) -> int:
        return self._current_info().file_manager.num_images

    def _move(self, action: Callable[[FileManager], None]) -> None:
        self.store_current_transformation()
        action(self._current_info().file_manager)
        self._show_current()

    def set_image_number(self, number: int) -> None:
        """Go to the zero-based image ``number`` of the selected entry."""
        self._move(lambda manager: manager.go_to_image(number))

    def next_image(self) -> None:
        self._move(lambda manager: manager.next_image())

    def prev_image(self) -> None:
        self._move(lambda manager: manager.prev_image())

    def first_image(self) -> None:
        self._move(lambda manager: manager.go_to_image(0))

    def last_image(self) -> None:
        self._move(lambda manager: manager.go_to_image(manager.num_images - 1))

    def enter_number(self, text: str) -> bool:
        """Go to the one-based image typed in ``text``; return whether it moved."""
        self.store_current_transformation()
        manager = self._current_info().file_manager
        try:
            number = int(str(text).strip())
        except ValueError:
            number = 0
        if 0 < number <= manager.num_images:
            manager.go_to_image(number - 1)
            self._show_current()
            return True
        return False

    def slider_changed(self, value: int) -> None:
        """Follow the one-based image number of the slider."""
        manager = self._current_info().file_manager
        wanted = int(value) - 1
        if manager.current_number != wanted:
            self.store_current_transformation()
            manager.go_to_image(wanted)
            self._show_current()

    def button_state(self) -> ButtonState:
        """Return the state of the navigation controls for the selected entry."""
        if self.current is None:
            return ButtonState()
        manager = self.info_views[self.current].file_manager
        total = manager.num_images
        number = manager.current_number
        if total < 2:
            back = forward = False
        else:
            back = number > 0
            forward = number < total - 1
        return ButtonState(
            prev=back,
            first=back,
            next=forward,
            last=forward,
            number_enabled=True,
            total=total,
            number=number + 1,
        )

    def store_current_transformation(self) -> None:
        """Save the viewer's zoom and scroll into the last shown entry's owner."""
        if self.last_item is None:
            return
        owner = self.info_views[self.last_item].owner
        transformation = self.info_views[owner].transformation
        if transformation is None:
            return
        transformation.zoom = self.viewer.zoom
        transformation.dx, transformation.dy = self.scroll_position

    def restore_transformation(self, node: Node) -> None:
        """Apply the saved view state of ``node``'s owner to the viewer."""
        owner = self._info(node).owner
        owner_info = self.info_views.get(owner)
        if owner_info is not None and owner_info.transformation is not None:
            transformation = owner_info.transformation
            self.viewer.reset_transform()
            self.viewer.scale_by(transformation.zoom)
            self.scroll_position = (transformation.dx, transformation.dy)
        self.last_item = self.current