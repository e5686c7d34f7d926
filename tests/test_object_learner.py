import numpy as np
import pytest

from visionkit.object_learner import ObjectLearner


def _image():
    return np.zeros((10, 10, 3), dtype=np.uint8)


def test_process_returns_two_fixed_polygons():
    found = ObjectLearner().process(_image())
    expected = [(100, 100), (150, 100), (200, 200)]
    assert found == [expected, expected]


def test_process_results_are_independent():
    learner = ObjectLearner()
    first = learner.process(_image())
    first[0].append((1, 1))
    second = learner.process(_image())
    assert second[0] == second[1]
    assert len(second[0]) == len(first[1])


def test_learn_objects_records_polygons():
    learner = ObjectLearner()
    learner.learn_objects(_image(), [[(1, 2), (3, 4), (5, 6)], [[7, 8], [9, 0]]])
    assert learner.polygons == [[(1, 2), (3, 4), (5, 6)], [(7, 8), (9, 0)]]
    assert learner.image_shape == (10, 10, 3)


def test_learn_objects_rejects_bad_point():
    with pytest.raises(ValueError):
        ObjectLearner().learn_objects(_image(), [[(1, 2, 3)]])


def test_rejects_gray_image():
    with pytest.raises(ValueError):
        ObjectLearner().process(np.zeros((4, 4), dtype=np.uint8))