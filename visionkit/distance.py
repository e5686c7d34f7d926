"""City-block distance transform of a byte image."""

from __future__ import annotations

import numpy as np


def distance_map(image) -> np.ndarray:
    """Return each pixel's 4-connected distance to the nearest zero pixel.

    Pixels that cannot reach a zero pixel keep the value width * height.
    """
    arr = np.asarray(image)
    if arr.ndim != 2:
        raise ValueError("expected a single-channel image")

    height, width = arr.shape
    output = np.full((height, width), float(width * height), dtype=np.float32)
    frontier = arr == 0
    output[frontier] = 0

    step = 1
    while frontier.any():
        reach = np.zeros_like(frontier)
        reach[1:, :] |= frontier[:-1, :]
        reach[:-1, :] |= frontier[1:, :]
        reach[:, 1:] |= frontier[:, :-1]
        reach[:, :-1] |= frontier[:, 1:]
        frontier = reach & (output > step)
        output[frontier] = step
        step += 1

    return output