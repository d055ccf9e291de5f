# geometry/instance.py
"""
Instancing wrappers. Each one owns a child hittable, moves the incoming ray
into the child's local space, delegates, and moves the hit back out.
"""
import math
from typing import Optional

from pathtracer.core.aabb import AABB
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.geometry.hittable import Hittable, HitRecord


class Translate(Hittable):
    def __init__(self, hittable: Hittable, offset: Vector3):
        self.hittable = hittable
        self.offset = offset

    def hit(self, ray: Ray, t_min: float, t_max: float, rng=None) -> Optional[HitRecord]:
        moved_ray = Ray(ray.origin - self.offset, ray.direction, ray.time)
        rec = self.hittable.hit(moved_ray, t_min, t_max, rng)
        if rec is None:
            return None
        # Translation leaves normals and face orientation unchanged.
        rec.p = rec.p + self.offset
        return rec

    def bounding_box(self, time_start: float, time_end: float) -> Optional[AABB]:
        box = self.hittable.bounding_box(time_start, time_end)
        if box is None:
            return None
        return box.translated(self.offset)


class _AxisRotation(Hittable):
    """
    Rotation by a fixed angle (degrees) about one coordinate axis.

    ``a`` and ``b`` are the two coordinates that change. World to local is
    ``a' = cos*a - sin*b, b' = sin*a + cos*b``; local to world is the inverse.
    """
    a = 0
    b = 2

    def __init__(self, hittable: Hittable, angle: float):
        self.hittable = hittable
        self.angle = angle
        radians = math.radians(angle)
        self.sin_theta = math.sin(radians)
        self.cos_theta = math.cos(radians)

    def _rotate(self, v: Vector3, sin_theta: float) -> Vector3:
        c = [v.x, v.y, v.z]
        va, vb = c[self.a], c[self.b]
        c[self.a] = self.cos_theta * va - sin_theta * vb
        c[self.b] = sin_theta * va + self.cos_theta * vb
        return Vector3(*c)

    def to_local(self, v: Vector3) -> Vector3:
        return self._rotate(v, self.sin_theta)

    def to_world(self, v: Vector3) -> Vector3:
        return self._rotate(v, -self.sin_theta)

    def hit(self, ray: Ray, t_min: float, t_max: float, rng=None) -> Optional[HitRecord]:
        rotated_ray = Ray(self.to_local(ray.origin), self.to_local(ray.direction), ray.time)
        rec = self.hittable.hit(rotated_ray, t_min, t_max, rng)
        if rec is None:
            return None
        # Rotation preserves dot products, so the child's front_face still holds.
        rec.p = self.to_world(rec.p)
        rec.normal = self.to_world(rec.normal)
        return rec

    def bounding_box(self, time_start: float, time_end: float) -> Optional[AABB]:
        box = self.hittable.bounding_box(time_start, time_end)
        if box is None:
            return None
        # Conservative: rotate all eight corners and re-box them.
        return AABB.from_points(self.to_world(corner) for corner in box.corners())


class RotateX(_AxisRotation):
    a, b = 1, 2


class RotateY(_AxisRotation):
    a, b = 0, 2


class RotateZ(_AxisRotation):
    a, b = 0, 1


class Moving(Hittable):
    """
    Moves a child linearly from ``offset_start`` at ``time_start`` to
    ``offset_end`` at ``time_end``, evaluated at each ray's time.
    """
    def __init__(self, hittable: Hittable, offset_start: Vector3, offset_end: Vector3,
                 time_start: float = 0.0, time_end: float = 1.0):
        self.hittable = hittable
        self.offset_start = offset_start
        self.offset_end = offset_end
        self.time_start = time_start
        self.time_end = time_end

    def offset_at(self, time: float) -> Vector3:
        span = self.time_end - self.time_start
        if span == 0:
            return self.offset_start
        fraction = (time - self.time_start) / span
        fraction = max(0.0, min(1.0, fraction))
        return self.offset_start + (self.offset_end - self.offset_start) * fraction

    def hit(self, ray: Ray, t_min: float, t_max: float, rng=None) -> Optional[HitRecord]:
        offset = self.offset_at(ray.time)
        moved_ray = Ray(ray.origin - offset, ray.direction, ray.time)
        rec = self.hittable.hit(moved_ray, t_min, t_max, rng)
        if rec is None:
            return None
        rec.p = rec.p + offset
        return rec

    def bounding_box(self, time_start: float, time_end: float) -> Optional[AABB]:
        box = self.hittable.bounding_box(time_start, time_end)
        if box is None:
            return None
        return AABB.surrounding_box(box.translated(self.offset_at(time_start)),
                                    box.translated(self.offset_at(time_end)))
