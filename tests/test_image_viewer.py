import numpy as np
import pytest

from visionkit.image_viewer import ImageViewer, hsv_text, rgb_text


def _gray(h=5, w=6):
    return np.arange(h * w, dtype=np.uint8).reshape(h, w)


def test_rgb_text_reverses_bgr():
    assert rgb_text((1, 2, 3)) == "3,2,1"


def test_hsv_text_pure_red():
    assert hsv_text((0, 0, 255)) == "0,255,255"


def test_hsv_text_gray_has_no_hue_or_saturation():
    assert hsv_text((7, 7, 7)) == "0,0,7"


def test_hsv_text_green():
    assert hsv_text((0, 255, 0)) == "60,255,255"


@pytest.mark.parametrize("color", [(10, 200, 30), (250, 3, 90), (0, 0, 1), (40, 41, 42)])
def test_hsv_text_value_is_max_channel(color):
    h, s, v = hsv_text(color).split(",")
    assert int(v) == max(color)
    assert 0 <= int(s) <= 255


def test_set_and_get_image_copy():
    viewer = ImageViewer()
    img = _gray()
    viewer.set_image(img)
    got = viewer.get_image()
    assert np.array_equal(got, img)
    got[0, 0] = 99
    assert viewer.get_image()[0, 0] == img[0, 0]
    assert viewer.scene_rect == (0, 0, img.shape[1], img.shape[0])


def test_empty_image_keeps_previous_source():
    viewer = ImageViewer()
    img = _gray()
    viewer.set_image(img)
    viewer.set_image(np.zeros((0, 0), dtype=np.uint8))
    assert np.array_equal(viewer.get_image(), img)
    assert viewer.display is None


def test_color_display_is_rgb():
    viewer = ImageViewer()
    img = np.zeros((2, 3, 3), dtype=np.uint8)
    img[..., 0] = 10
    img[..., 2] = 30
    viewer.set_image(img)
    assert np.array_equal(viewer.display[..., 0], img[..., 2])
    assert np.array_equal(viewer.display[..., 2], img[..., 0])


def test_wheel_doubles_and_halves():
    viewer = ImageViewer()
    viewer.set_image(_gray())
    assert viewer.wheel(120) == 2.0
    assert viewer.wheel(-240) == 0.5


def test_wheel_small_delta_does_nothing():
    viewer = ImageViewer()
    viewer.set_image(_gray())
    assert viewer.wheel(60) == 1.0


def test_wheel_without_image_does_nothing():
    viewer = ImageViewer()
    assert viewer.wheel(120) == 1.0


def test_wheel_respects_zoom_limit():
    viewer = ImageViewer()
    viewer.set_image(_gray())
    viewer.scale_by(128)
    assert viewer.wheel(120) == 128
    assert viewer.wheel(-120) == 64


def test_zoom_text_and_reset():
    viewer = ImageViewer()
    assert viewer.zoom_text() == "100 %"
    viewer.scale_by(2)
    viewer.reset_transform()
    assert viewer.zoom == 1.0


def test_smooth_rendering_when_zoomed_out():
    viewer = ImageViewer()
    viewer.set_image(_gray())
    assert viewer.smooth_rendering() is False
    viewer.scale_by(0.5)
    assert viewer.smooth_rendering() is True


def test_smooth_rendering_needs_picture():
    viewer = ImageViewer()
    viewer.scale_by(0.5)
    assert viewer.smooth_rendering() is False


def test_pixel_info_gray():
    viewer = ImageViewer()
    img = _gray()
    viewer.set_image(img)
    info = viewer.pixel_info(3, 2)
    assert info.coords == "(3 , 2)"
    assert info.value == f"Gray({img[2, 3]})"


@pytest.mark.parametrize("x,y", [(0, 2), (2, 0), (6, 1), (1, 5), (-1, 1)])
def test_pixel_info_outside(x, y):
    viewer = ImageViewer()
    viewer.set_image(_gray())
    assert viewer.pixel_info(x, y) is None


def test_pixel_info_color():
    viewer = ImageViewer()
    img = np.zeros((3, 3, 3), dtype=np.uint8)
    img[1, 1] = (1, 2, 3)
    viewer.set_image(img)
    info = viewer.pixel_info(1, 1)
    assert info.value == f"RGB(3,2,1) HSV({hsv_text((1, 2, 3))})"


def test_pixel_info_float_int_double():
    viewer = ImageViewer()
    f = np.zeros((3, 3), dtype=np.float32)
    f[1, 1] = 1.5
    viewer.set_image(f)
    assert viewer.pixel_info(1, 1).value == "Float(1.5)"
    assert viewer.display is None

    i = np.zeros((3, 3), dtype=np.int32)
    i[1, 2] = -4
    viewer.set_image(i)
    assert viewer.pixel_info(2, 1).value == "Int(-4)"

    d = np.zeros((3, 3), dtype=np.float64)
    d[2, 2] = 0.25
    viewer.set_image(d)
    assert viewer.pixel_info(2, 2).value == "Double(0.25)"