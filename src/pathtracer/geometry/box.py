# geometry/box.py
from typing import Optional

from pathtracer.core.aabb import AABB
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.geometry.hittable import Hittable, HitRecord
from pathtracer.geometry.rect import XYRect, XZRect, YZRect
from pathtracer.geometry.world import HittableList


class Box(Hittable):
    """Axis-aligned box built from six rectangles sharing one material."""
    def __init__(self, p_min: Vector3, p_max: Vector3, material):
        self.p_min = p_min
        self.p_max = p_max
        self.sides = HittableList([
            XYRect(p_min.x, p_max.x, p_min.y, p_max.y, p_max.z, material),
            XYRect(p_min.x, p_max.x, p_min.y, p_max.y, p_min.z, material),
            XZRect(p_min.x, p_max.x, p_min.z, p_max.z, p_max.y, material),
            XZRect(p_min.x, p_max.x, p_min.z, p_max.z, p_min.y, material),
            YZRect(p_min.y, p_max.y, p_min.z, p_max.z, p_max.x, material),
            YZRect(p_min.y, p_max.y, p_min.z, p_max.z, p_min.x, material),
        ])

    def hit(self, ray: Ray, t_min: float, t_max: float, rng=None) -> Optional[HitRecord]:
        return self.sides.hit(ray, t_min, t_max, rng)

    def bounding_box(self, time_start: float, time_end: float) -> Optional[AABB]:
        return AABB(self.p_min, self.p_max)
