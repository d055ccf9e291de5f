# materials/textures.py
import io
import logging
import math
from typing import Optional, Union

import numpy as np
from PIL import Image

from pathtracer.core.vector import Vector3
from pathtracer.materials.perlin import Perlin

logger = logging.getLogger(__name__)


class Texture:
    """Base class for all textures."""
    def value(self, u: float, v: float, p: Vector3) -> Vector3:
        """Sample the texture at UV coordinates (u, v) and hit point p."""
        raise NotImplementedError("value() must be implemented by texture subclasses.")


class SolidColor(Texture):
    """A solid color texture."""
    def __init__(self, color: Vector3):
        self.color = color

    def value(self, u: float, v: float, p: Vector3) -> Vector3:
        return self.color


class CheckerTexture(Texture):
    """A 3D checker pattern chosen by the sign of sin(sx)·sin(sy)·sin(sz)."""
    def __init__(self, odd: Union[Vector3, Texture], even: Union[Vector3, Texture],
                 scale: float = 10.0):
        self.odd = SolidColor(odd) if isinstance(odd, Vector3) else odd
        self.even = SolidColor(even) if isinstance(even, Vector3) else even
        self.scale = scale

    def value(self, u: float, v: float, p: Vector3) -> Vector3:
        sines = (math.sin(self.scale * p.x) *
                 math.sin(self.scale * p.y) *
                 math.sin(self.scale * p.z))
        if sines < 0:
            return self.odd.value(u, v, p)
        return self.even.value(u, v, p)


class NoiseTexture(Texture):
    """A marble-like procedural texture driven by Perlin turbulence."""
    def __init__(self, scale: float = 1.0, rng: Optional[np.random.Generator] = None):
        self.noise = Perlin(rng)
        self.scale = scale

    def value(self, u: float, v: float, p: Vector3) -> Vector3:
        value = 0.5 * (1 + math.sin(self.scale * p.z + 10 * self.noise.turb(p, 7)))
        return Vector3(value, value, value)


class ImageTexture(Texture):
    """A nearest-neighbour sampled texture decoded from image bytes."""

    # Returned when there is no image data, as a debugging aid.
    MISSING_COLOR = Vector3(0.0, 1.0, 1.0)

    def __init__(self, data: Optional[np.ndarray] = None):
        # data: (height, width, 3) floats in [0, 1], row 0 at the top.
        self.data = data
        if data is None:
            self.width = self.height = 0
        else:
            self.height, self.width = data.shape[:2]

    @classmethod
    def from_bmp_data(cls, bmp_data: bytes) -> "ImageTexture":
        """Decode an uncompressed 24-bit BMP (or any format Pillow reads)."""
        with Image.open(io.BytesIO(bmp_data)) as img:
            # Convert to RGB if necessary
            if img.mode != 'RGB':
                img = img.convert('RGB')
            data = np.asarray(img, dtype=np.float64) / 255.0  # Normalize to [0,1]
        logger.debug("Decoded %dx%d image texture", data.shape[1], data.shape[0])
        return cls(data)

    def value(self, u: float, v: float, p: Vector3) -> Vector3:
        if self.data is None or self.width == 0 or self.height == 0:
            return self.MISSING_COLOR

        # Clamp input texture coordinates to [0,1] x [1,0]
        u = min(max(u, 0.0), 1.0)
        v = 1.0 - min(max(v, 0.0), 1.0)  # Flip V so v=0 is the bottom row

        # Convert to pixel coordinates
        x = min(int(u * self.width), self.width - 1)
        y = min(int(v * self.height), self.height - 1)

        color = self.data[y, x]
        return Vector3(float(color[0]), float(color[1]), float(color[2]))
