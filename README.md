# visionkit

Classic image-processing algorithms, and the logic of an interactive image
viewer kept apart from any GUI toolkit. Images are NumPy arrays: `uint8`
arrays of shape `(h, w, 3)` in BGR order for colour, and 2-D arrays for grey,
integer or floating-point data.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Segmentation and analysis

### `visionkit.split_and_merge`

Quadtree split-and-merge segmentation of colour images.
`SplitAndMerge(decisor)` splits the image into regions until each is judged
homogeneous, then merges neighbouring regions. `process(image)` returns an
`int32` label image. After it runs, `split_image` holds the labels before
merging, `merge_image` the labels after it, `num_blobs` the number of labels
and `zone_area` the pixel count of each label.

The decisions are made by a `SplitAndMergeDecisor`, which has two methods:
`must_split(image, region)` returns 0 to split a `Region` or a new label for
it, and `must_merge(image, label1, label2, x1, y1, x2, y2)` says whether two
adjacent zones join. Two decisors are provided:

- `ColorDecisor(std_dev_threshold=10, color_threshold=10)` keeps a region
  whole when it is narrower than two pixels, entirely black, or has a standard
  deviation below the threshold in every channel. It merges zones whose mean
  colours differ by less than `color_threshold` in every channel. Black zones
  never merge. This is the default decisor.
- `EdgeDecisor()` keeps a region whole when it holds no edge pixels or is a
  single pixel, and merges zones of equal edge density. Edges come from
  `canny(image, low_threshold, high_threshold)`, which returns a byte image of
  0 and 255. For colour images it uses, at each pixel, the channel with the
  strongest gradient.

`ZoneInfo.from_stats(mean, std)` truncates channel statistics to bytes.

```python
import numpy as np
from visionkit.split_and_merge import ColorDecisor, SplitAndMerge

image = np.zeros((64, 64, 3), dtype=np.uint8)
image[:, 32:] = (40, 120, 200)

segmenter = SplitAndMerge(ColorDecisor(10, 10))
labels = segmenter.process(image)
print(segmenter.num_blobs, segmenter.zone_area)
```

### `visionkit.distance`

`distance_map(image)` returns a `float32` array giving, for every pixel of a
single-channel image, its 4-connected (city-block) distance to the nearest
zero pixel. Pixels that cannot reach a zero pixel keep the value
`width * height`.

### `visionkit.object_learner`

`ObjectLearner.learn_objects(image, polygons)` checks a colour image and
records the polygons, as lists of `(x, y)` points, in `polygons` and the image
shape in `image_shape`. `ObjectLearner.process(image)` does not search the
image: for any colour image it returns the same fixed triangle
`[(100, 100), (150, 100), (200, 200)]` twice.

## Viewer models

These modules hold the state and rules of an image viewer; a front end draws
them and forwards user events to them.

### `visionkit.image_files`

- `FileManager` is the interface of a sequence of images with a current
  position: `num_images`, `current_number`, `current_name`, `get_image()`,
  `go_to_image(number)`, `next_image()` and `prev_image()`. Moving past either
  end is ignored.
- `ImageFileManager(file_names)` steps through image files. Files ending in
  `.mat` are read with `read_matrix_file(path)`, which takes the matrix stored
  under the key `mat` of a YAML or XML storage file (`rows`, `cols`, `dt`,
  `data`). Other files are read with `load_image(path)`, which returns a BGR
  array, or a 2-D grey array when every pixel has equal channels
  (`is_gray(image)`).
- `SingleImageManager(image)` is a sequence of one in-memory image.

### `visionkit.histograms`

`Histograms` computes, for the enabled `Channel`s (red, green, blue, hue,
saturation, value), 256-bin histograms scaled to 0..1. Colour images give all
six; grey byte images give only value. `update_image(image)` replaces the
image and recomputes, `set_channel(channel, enabled)` switches a channel,
`compute()` fills in missing histograms, and `is_bitonal()` tells whether the
value histogram only has entries at 0 and 255.

`draw(width, height)` returns a `Scene` of lines, rectangles and texts
(`add_line`, `add_rect`, `add_text`). Bitonal grey images are drawn as two
bars with black and white percentages; anything else as a grid, the ruler
chosen by the `scale` attribute (a `Scale`), and one polyline per channel.

`bgr_to_hsv(image)` converts a BGR byte image to HSV with hue in 0..179, and
`channel_histogram(plane, range_max, size)` computes one scaled histogram.

### `visionkit.image_viewer`

`ImageViewer` holds the shown image (`set_image`, `get_image`) and its zoom.
`wheel(delta)` zooms by a power of two per wheel notch and stops zooming in
beyond 100×; `scale_by`, `reset_transform`, `zoom_text()` and
`smooth_rendering()` complete the zoom handling. `pixel_info(x, y)` returns a
`PixelInfo` with the coordinates and value of the pixel under the cursor, or
`None` outside the image; colour pixels are shown with `rgb_text(color)` and
`hsv_text(color)`.

### `visionkit.selections`

Regions of interest defined point by point: `PointSelection`,
`PolygonSelection` (the last vertex follows the cursor while it is defined)
and `RectangleSelection` (two clicks; `press(x, y)` near a corner starts
redefining it). All share `add_point`, `move_cursor`, `end_defining`,
`toggle_selected` and `pen_color()`.

### `visionkit.selector`

`ImageViewerWithSelector(selection_factory)` is an `ImageViewer` that keeps
the list of regions for the shown image. `right_click(x, y)` adds a point to
the region being defined, starting one from `selection_factory` if needed;
`press_enter()` finishes it; `press_delete()` drops it and every selected
region; `cursor_moved(x, y)` moves the region's cursor and returns the pixel
read-out. `set_image(image, roi_list)` shows an image with a region list that
is shared with the caller. Regions are read and written as integer matrices
with `point_list`/`set_point_list` (2 × N), `rect_list`/`set_rect_list`
(4 × N: x, y, width, height) and `polygon_list`/`set_polygon_list` (a list of
2 × N matrices).

```python
import numpy as np
from visionkit.selections import RectangleSelection
from visionkit.selector import ImageViewerWithSelector

viewer = ImageViewerWithSelector(RectangleSelection)
viewer.set_image(np.zeros((100, 100), dtype=np.uint8))
viewer.right_click(10, 20)
viewer.right_click(40, 60)
print(viewer.rect_list())   # columns of x, y, width, height
```

### `visionkit.log_window`

`LogWindow.add_log(message)` appends text (or UTF-8 bytes) without a newline;
`text` holds everything logged.

### `visionkit.navigator`

`Navigator(viewer, on_change)` keeps a tree of `Node`s: top-level entries
added with `add_parent_image(manager, name, transformation)` and derived
images added under the selected entry with
`add_child_image(image, name, change_to_child)`. Adding a child to an entry
that holds several images first copies the current frame into a new
top-level entry. A child with its parent's size shares the parent's
`Transformation` (zoom and scroll); new images of other sizes are zoomed to
fit `viewport_size`.

`select(node)`, `next_image()`, `prev_image()`, `first_image()`,
`last_image()`, `set_image_number(number)`, `enter_number(text)` and
`slider_changed(value)` move through the images, saving and restoring the
view state. `button_state()` returns a `ButtonState` saying which navigation
controls are enabled; `on_change` is called with it after every move.
`image_properties_text(image)` gives the "cols x rows x type" text shown for
an entry.

## What the package does not do

There is no graphical interface and no command to run: the viewer modules
hold state and rules only, and drawing them on screen is left to the caller.
There are no image filters or operators beyond the segmentation, edge and
distance functions above, and no configuration dialogs for them. Object
recognition is not implemented: `ObjectLearner.process` returns a fixed
result.