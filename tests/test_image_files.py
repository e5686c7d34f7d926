import numpy as np
import pytest
from PIL import Image

from visionkit.image_files import (
    ImageFileManager,
    SingleImageManager,
    is_gray,
    load_image,
    read_matrix_file,
)


def _save_rgb(path, pixels):
    Image.fromarray(np.asarray(pixels, dtype=np.uint8), "RGB").save(path)
    return path


def test_is_gray_equal_channels():
    image = np.full((3, 4, 3), 77, dtype=np.uint8)
    assert is_gray(image) is True


def test_is_gray_detects_colour():
    image = np.full((3, 4, 3), 77, dtype=np.uint8)
    image[1, 2, 2] = 78
    assert is_gray(image) is False


def test_load_colour_image_is_bgr(tmp_path):
    path = _save_rgb(tmp_path / "c.png", [[[10, 20, 30], [40, 50, 60]]])
    image = load_image(path)
    assert image.shape == (1, 2, 3)
    assert image[0, 0].tolist() == [30, 20, 10]
    assert image[0, 1].tolist() == [60, 50, 40]


def test_load_grey_image_is_single_plane(tmp_path):
    path = _save_rgb(tmp_path / "g.png", [[[9, 9, 9], [200, 200, 200]]])
    image = load_image(path)
    assert image.ndim == 2
    assert image.tolist() == [[9, 200]]


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_image(tmp_path / "absent.png")


def test_read_yaml_matrix(tmp_path):
    path = tmp_path / "m.mat"
    path.write_text(
        "%YAML:1.0\n"
        "mat: !!opencv-matrix\n"
        "   rows: 2\n"
        "   cols: 2\n"
        "   dt: f\n"
        "   data: [ 1., 2.5, 3., 4. ]\n"
    )
    matrix = read_matrix_file(path)
    assert matrix.dtype == np.float32
    assert matrix.tolist() == [[1.0, 2.5], [3.0, 4.0]]


def test_read_yaml_multichannel_matrix(tmp_path):
    path = tmp_path / "m.mat"
    path.write_text(
        "%YAML:1.0\n"
        "mat: !!opencv-matrix\n"
        "   rows: 1\n"
        "   cols: 2\n"
        "   dt: \"3u\"\n"
        "   data: [ 1, 2, 3, 4, 5, 6 ]\n"
    )
    matrix = read_matrix_file(path)
    assert matrix.shape == (1, 2, 3)
    assert matrix.dtype == np.uint8
    assert matrix[0, 1].tolist() == [4, 5, 6]


def test_read_xml_matrix(tmp_path):
    path = tmp_path / "m.mat"
    path.write_text(
        '<?xml version="1.0"?>\n'
        "<opencv_storage>\n"
        '<mat type_id="opencv-matrix">\n'
        "  <rows>1</rows>\n  <cols>3</cols>\n  <dt>i</dt>\n"
        "  <data>\n    7 8 9</data></mat>\n"
        "</opencv_storage>\n"
    )
    matrix = read_matrix_file(path)
    assert matrix.dtype == np.int32
    assert matrix.tolist() == [[7, 8, 9]]


def test_read_matrix_without_entry_raises(tmp_path):
    path = tmp_path / "m.mat"
    path.write_text("%YAML:1.0\nother: 3\n")
    with pytest.raises(ValueError):
        read_matrix_file(path)


def test_read_matrix_with_wrong_size_raises(tmp_path):
    path = tmp_path / "m.mat"
    path.write_text(
        "%YAML:1.0\nmat: !!opencv-matrix\n   rows: 2\n   cols: 2\n   dt: d\n   data: [ 1., 2. ]\n"
    )
    with pytest.raises(ValueError):
        read_matrix_file(path)


def test_manager_navigation_limits():
    manager = ImageFileManager(["a.png", "b.png", "c.png"])
    assert manager.num_images == 3
    assert manager.current_number == 0
    manager.prev_image()
    assert manager.current_number == 0
    manager.next_image()
    manager.next_image()
    manager.next_image()
    assert manager.current_number == 2
    assert manager.current_name == "c.png"
    manager.go_to_image(5)
    assert manager.current_number == 2
    manager.go_to_image(1)
    assert manager.current_name == "b.png"


def test_manager_reads_images_and_matrices(tmp_path):
    png = _save_rgb(tmp_path / "one.png", [[[1, 2, 3]]])
    mat = tmp_path / "two.mat"
    mat.write_text(
        "%YAML:1.0\nmat: !!opencv-matrix\n   rows: 1\n   cols: 1\n   dt: d\n   data: [ 0.25 ]\n"
    )
    manager = ImageFileManager([png, mat])
    assert manager.get_image()[0, 0].tolist() == [3, 2, 1]
    manager.next_image()
    assert manager.get_image().tolist() == [[0.25]]


def test_empty_manager_has_no_image():
    manager = ImageFileManager([])
    with pytest.raises(IndexError):
        manager.get_image()


def test_single_image_manager():
    image = np.zeros((2, 2), dtype=np.uint8)
    manager = SingleImageManager(image)
    manager.next_image()
    manager.go_to_image(3)
    assert manager.num_images == 1
    assert manager.current_number == 0
    assert manager.current_name == ""
    assert manager.get_image() is image