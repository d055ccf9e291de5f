# materials/perlin.py
import math
from typing import Optional

import numpy as np

from pathtracer.core.vector import Vector3

POINT_COUNT = 256
_CORNERS = np.array([0, 1])


class Perlin:
    """
    Gradient noise over a lattice of random unit vectors, with three
    permutation tables hashing the lattice coordinates.
    """
    def __init__(self, rng: Optional[np.random.Generator] = None):
        if rng is None:
            rng = np.random.default_rng()
        ranvec = rng.uniform(-1.0, 1.0, size=(POINT_COUNT, 3))
        self.ranvec = ranvec / np.linalg.norm(ranvec, axis=1, keepdims=True)
        self.perm_x = rng.permutation(POINT_COUNT)
        self.perm_y = rng.permutation(POINT_COUNT)
        self.perm_z = rng.permutation(POINT_COUNT)

    def noise(self, p: Vector3) -> float:
        fx, fy, fz = math.floor(p.x), math.floor(p.y), math.floor(p.z)
        u, v, w = p.x - fx, p.y - fy, p.z - fz
        i, j, k = int(fx), int(fy), int(fz)

        # Hash the 2x2x2 lattice corners around p into gradient vectors.
        idx = (self.perm_x[(i + _CORNERS) & 255][:, None, None] ^
               self.perm_y[(j + _CORNERS) & 255][None, :, None] ^
               self.perm_z[(k + _CORNERS) & 255][None, None, :])
        gradients = self.ranvec[idx]
        return self.trilinear_interpolate(gradients, u, v, w)

    @staticmethod
    def trilinear_interpolate(c: np.ndarray, u: float, v: float, w: float) -> float:
        # Hermite smoothing removes the grid artifacts of plain lerp.
        uu = u * u * (3 - 2 * u)
        vv = v * v * (3 - 2 * v)
        ww = w * w * (3 - 2 * w)
        offsets = np.stack(np.meshgrid([u, u - 1.0], [v, v - 1.0], [w, w - 1.0], indexing="ij"), axis=-1)
        dots = np.sum(c * offsets, axis=-1)
        weights = np.einsum("i,j,k->ijk", [1 - uu, uu], [1 - vv, vv], [1 - ww, ww])
        return float(np.sum(weights * dots))

    def turb(self, p: Vector3, depth: int = 7) -> float:
        accum = 0.0
        temp_p = p
        weight = 1.0
        for _ in range(depth):
            accum += weight * self.noise(temp_p)
            weight *= 0.5
            temp_p = temp_p * 2.0
        return abs(accum)
