"""Static height field built from summed Gaussian bumps on a torus."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional
import math

import numpy as np
from numpy.typing import ArrayLike, NDArray

from . import config
from .config import SimulationConfig
from .rng import SeededRandom


@dataclass(frozen=True)
class GaussianParameters:
    amplitude: float
    center_x: float
    center_y: float
    sigma: float


def wrapped_distance(coords: NDArray[np.float64], center: float, size: int) -> NDArray[np.float64]:
    """Shortest distance from ``center`` along one axis of a torus of ``size`` cells."""
    return np.minimum(
        np.abs(coords - center),
        np.minimum(np.abs(coords - center + size), np.abs(coords - center - size)),
    )


class HeightField:
    def __init__(
        self,
        cfg: SimulationConfig,
        rng: SeededRandom,
        height_map: Optional[ArrayLike] = None,
    ) -> None:
        self.size = cfg.world_size
        self.max_height = float(cfg.world_max_height)
        # Parameters are drawn even when a map is supplied so the shared
        # generator advances the same way in both cases.
        self._gaussians = [self._draw_gaussian(rng) for _ in range(config.GAUSSIAN_COUNT)]

        if height_map is not None:
            heights = np.array(height_map, dtype=np.float64)
            if heights.shape != (self.size, self.size):
                raise ValueError(
                    f"height map shape {heights.shape} does not match world size {self.size}"
                )
            self._heights = heights
        else:
            self._heights = self._generate()
        self._heights.setflags(write=False)

    def _draw_gaussian(self, rng: SeededRandom) -> GaussianParameters:
        amplitude = (
            rng.next_float(config.GAUSSIAN_AMPLITUDE_MIN, config.GAUSSIAN_AMPLITUDE_MAX) * self.max_height
        )
        center_x = rng.next_float(0, self.size)
        center_y = rng.next_float(0, self.size)
        sigma = rng.next_float(self.size * config.GAUSSIAN_SIGMA_MIN, self.size * config.GAUSSIAN_SIGMA_MAX)
        return GaussianParameters(amplitude=amplitude, center_x=center_x, center_y=center_y, sigma=sigma)

    def _generate(self) -> NDArray[np.float64]:
        coords = np.arange(self.size, dtype=np.float64)
        heights = np.zeros((self.size, self.size), dtype=np.float64)
        for params in self._gaussians:
            dx = wrapped_distance(coords, params.center_x, self.size)
            dy = wrapped_distance(coords, params.center_y, self.size)
            exponent = -(dx[:, None] * dx[:, None] + dy[None, :] * dy[None, :]) / (
                2 * params.sigma * params.sigma
            )
            heights += params.amplitude * np.exp(exponent)
        np.clip(heights, 0.0, self.max_height, out=heights)
        return heights

    def get_height(self, x: float, y: float) -> float:
        ix = math.floor(x) % self.size
        iy = math.floor(y) % self.size
        return float(self._heights[ix, iy])

    def gaussian_parameters(self) -> List[GaussianParameters]:
        return list(self._gaussians)

    def raw_heights(self) -> NDArray[np.float64]:
        """Copy of the full map, indexed ``[x, y]``."""
        return self._heights.copy()
