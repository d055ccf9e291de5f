# renderer/image.py
"""
Per-pixel sample accumulation and image output.

Pixel rows are indexed bottom-up (y = 0 is the bottom scanline), matching
the camera's viewport coordinates. Output is written top scanline first.
"""
import os
from typing import TextIO

import numpy as np
from PIL import Image as PILImage

from pathtracer.core.vector import Vector3


class Image:
    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.color_sum = np.zeros((height, width, 3), dtype=np.float64)
        self.sample_count = np.zeros((height, width), dtype=np.int64)

    def add_sample(self, x: int, y: int, color: Vector3):
        pixel = self.color_sum[y, x]
        pixel[0] += color.x
        pixel[1] += color.y
        pixel[2] += color.z
        self.sample_count[y, x] += 1

    def average(self) -> np.ndarray:
        """Linear mean color per pixel; pixels with no samples are black."""
        counts = np.maximum(self.sample_count, 1)[..., None]
        return self.color_sum / counts

    def corrected(self) -> np.ndarray:
        """Gamma-2 corrected mean color per pixel, clamped to [0, 0.999]."""
        # NaN samples are black; overflowed ones saturate like any bright pixel.
        linear = np.nan_to_num(self.average(), nan=0.0, posinf=0.999, neginf=0.0)
        return np.clip(np.sqrt(np.maximum(linear, 0.0)), 0.0, 0.999)

    def to_rgb8(self) -> np.ndarray:
        """(height, width, 3) uint8 array, top scanline first."""
        scaled = (256.0 * self.corrected()).astype(np.uint8)
        return scaled[::-1]

    def pixel_color(self, x: int, y: int) -> Vector3:
        r, g, b = self.corrected()[y, x]
        return Vector3(float(r), float(g), float(b))

    def write_ppm(self, output: TextIO):
        output.write(f"P3\n{self.width} {self.height}\n255\n")
        for row in self.to_rgb8():
            for r, g, b in row:
                output.write(f"{r} {g} {b}\n")

    def save(self, path: str):
        """Write a PPM for ``.ppm`` paths, otherwise let Pillow pick the format."""
        if os.path.splitext(path)[1].lower() == ".ppm":
            with open(path, "w") as f:
                self.write_ppm(f)
        else:
            PILImage.fromarray(self.to_rgb8()).save(path)
