# geometry/rect.py
"""
Axis-aligned rectangles. Each lies in the plane where one coordinate equals
``k`` and spans ``[a0, a1] x [b0, b1]`` over the other two coordinates.
"""
import math
from typing import Optional

from pathtracer.core.aabb import AABB
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.geometry.hittable import Hittable, HitRecord

THICKNESS = 1e-4


class AxisAlignedRect(Hittable):
    """
    Shared intersection code for the three rectangle orientations.

    Subclasses set ``axis`` (the fixed coordinate) and ``a_axis``/``b_axis``
    (the two in-plane coordinates, which also map to u and v).
    """
    axis = 2
    a_axis = 0
    b_axis = 1

    def __init__(self, a0: float, a1: float, b0: float, b1: float, k: float, material):
        self.a0 = a0
        self.a1 = a1
        self.b0 = b0
        self.b1 = b1
        self.k = k
        self.material = material
        normal = [0.0, 0.0, 0.0]
        normal[self.axis] = 1.0
        self.outward_normal = Vector3(*normal)

    def has_infinite_bounds(self) -> bool:
        return (math.isinf(self.a0) or math.isinf(self.a1) or
                math.isinf(self.b0) or math.isinf(self.b1))

    def hit(self, ray: Ray, t_min: float, t_max: float, rng=None) -> Optional[HitRecord]:
        d = ray.direction[self.axis]
        if d == 0.0:
            # Parallel to the plane.
            return None
        t = (self.k - ray.origin[self.axis]) / d
        if t < t_min or t > t_max:
            return None
        a = ray.origin[self.a_axis] + t * ray.direction[self.a_axis]
        b = ray.origin[self.b_axis] + t * ray.direction[self.b_axis]
        if a < self.a0 or a > self.a1 or b < self.b0 or b > self.b1:
            return None

        a_span = self.a1 - self.a0
        b_span = self.b1 - self.b0
        rec = HitRecord()
        # Degenerate (zero-width) sides map to u or v = 0.
        rec.u = (a - self.a0) / a_span if a_span else 0.0
        rec.v = (b - self.b0) / b_span if b_span else 0.0
        rec.t = t
        rec.set_face_normal(ray, self.outward_normal)
        rec.material = self.material
        rec.p = ray.at(t)
        return rec

    def bounding_box(self, time_start: float, time_end: float) -> Optional[AABB]:
        # Infinite planes are deliberately unbounded so they can never end
        # up inside a BVH.
        if self.has_infinite_bounds():
            return None
        lo = [0.0, 0.0, 0.0]
        hi = [0.0, 0.0, 0.0]
        lo[self.a_axis], hi[self.a_axis] = self.a0, self.a1
        lo[self.b_axis], hi[self.b_axis] = self.b0, self.b1
        lo[self.axis], hi[self.axis] = self.k - THICKNESS, self.k + THICKNESS
        return AABB(Vector3(*lo), Vector3(*hi))


class XYRect(AxisAlignedRect):
    axis, a_axis, b_axis = 2, 0, 1

    def __init__(self, x0: float, x1: float, y0: float, y1: float, k: float, material):
        super().__init__(x0, x1, y0, y1, k, material)


class XZRect(AxisAlignedRect):
    axis, a_axis, b_axis = 1, 0, 2

    def __init__(self, x0: float, x1: float, z0: float, z1: float, k: float, material):
        super().__init__(x0, x1, z0, z1, k, material)


class YZRect(AxisAlignedRect):
    axis, a_axis, b_axis = 0, 1, 2

    def __init__(self, y0: float, y1: float, z0: float, z1: float, k: float, material):
        super().__init__(y0, y1, z0, z1, k, material)
