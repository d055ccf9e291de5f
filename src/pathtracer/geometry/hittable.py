# geometry/hittable.py
from typing import Optional

from pathtracer.core.aabb import AABB
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3


class HitRecord:
    """
    Records details of a ray-object intersection.
    """
    __slots__ = ("p", "normal", "t", "u", "v", "front_face", "material")

    def __init__(self, p: Vector3 = None, normal: Vector3 = None,
                 t: float = 0, u: float = 0.0, v: float = 0.0,
                 front_face: bool = True, material=None):
        self.p = p              # Intersection point
        self.normal = normal    # Surface normal, always against the ray
        self.t = t              # Ray parameter at intersection
        self.u = u              # Surface texture coordinates
        self.v = v
        self.front_face = front_face  # Whether the hit was on the front side
        self.material = material

    def set_face_normal(self, ray: Ray, outward_normal: Vector3):
        """
        Ensures that the normal always points against the ray.
        """
        self.front_face = ray.direction.dot(outward_normal) < 0
        self.normal = outward_normal if self.front_face else -outward_normal

    def __repr__(self) -> str:
        return (f"HitRecord(t={self.t}, p={self.p!r}, normal={self.normal!r}, "
                f"front_face={self.front_face})")


class Hittable:
    """
    Abstract class for objects that can be hit by a ray.

    ``rng`` is the caller's random source. Only volumetric objects draw from
    it, but containers and wrappers pass it down unchanged. When it is None,
    volumes fall back to the global ``random`` module and the hit is no
    longer reproducible from a seed; the renderer always passes one.
    """
    def hit(self, ray: Ray, t_min: float, t_max: float, rng=None) -> Optional[HitRecord]:
        raise NotImplementedError("hit() must be implemented by subclasses.")

    def bounding_box(self, time_start: float, time_end: float) -> Optional[AABB]:
        """
        Box enclosing the object over the given time interval, or None when
        the object is unbounded.
        """
        raise NotImplementedError("bounding_box() must be implemented by subclasses.")
