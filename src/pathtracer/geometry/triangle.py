# geometry/triangle.py
from typing import Optional

from pathtracer.core.aabb import AABB
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.geometry.hittable import Hittable, HitRecord

PARALLEL_EPSILON = 1e-7
BOX_PADDING = 1e-4


class Triangle(Hittable):
    """Represents a single triangle in 3D space.

    ``custom_normal`` replaces the geometric face normal, which lets meshes
    imported from OBJ data carry their authored normals.
    """
    def __init__(self, v0: Vector3, v1: Vector3, v2: Vector3, material,
                 custom_normal: Optional[Vector3] = None):
        self.v0 = v0
        self.v1 = v1
        self.v2 = v2
        self.material = material
        self.custom_normal = custom_normal
        self.edge1 = v1 - v0
        self.edge2 = v2 - v0

    def has_vertex_at_infinity(self) -> bool:
        return (self.v0.has_infinite_member() or
                self.v1.has_infinite_member() or
                self.v2.has_infinite_member())

    def face_normal(self) -> Vector3:
        return self.edge2.cross(self.edge1).normalize()

    def hit(self, ray: Ray, t_min: float, t_max: float, rng=None) -> Optional[HitRecord]:
        # Möller-Trumbore intersection algorithm
        edge1 = self.edge1
        edge2 = self.edge2
        h = ray.direction.cross(edge2)
        a = edge1.dot(h)

        # If ray is parallel to triangle
        if abs(a) < PARALLEL_EPSILON:
            return None

        f = 1.0 / a
        s = ray.origin - self.v0
        u = f * s.dot(h)

        # Ray misses the triangle
        if u < 0.0 or u > 1.0:
            return None

        q = s.cross(edge1)
        v = f * ray.direction.dot(q)

        # Ray misses the triangle
        if v < 0.0 or u + v > 1.0:
            return None

        t = f * edge2.dot(q)

        # Intersection is behind ray origin or too far
        if t < t_min or t > t_max:
            return None

        rec = HitRecord()
        rec.t = t
        rec.p = ray.at(t)
        rec.u = u
        rec.v = v
        normal = self.custom_normal if self.custom_normal is not None else self.face_normal()
        rec.set_face_normal(ray, normal)
        rec.material = self.material
        return rec

    def bounding_box(self, time_start: float, time_end: float) -> Optional[AABB]:
        """Compute the bounding box for the triangle, padded so it is never flat."""
        if self.has_vertex_at_infinity():
            return None
        min_x = min(self.v0.x, self.v1.x, self.v2.x)
        min_y = min(self.v0.y, self.v1.y, self.v2.y)
        min_z = min(self.v0.z, self.v1.z, self.v2.z)
        max_x = max(self.v0.x, self.v1.x, self.v2.x)
        max_y = max(self.v0.y, self.v1.y, self.v2.y)
        max_z = max(self.v0.z, self.v1.z, self.v2.z)
        return AABB(Vector3(min_x - BOX_PADDING, min_y - BOX_PADDING, min_z - BOX_PADDING),
                    Vector3(max_x + BOX_PADDING, max_y + BOX_PADDING, max_z + BOX_PADDING))
