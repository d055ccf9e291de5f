# geometry/medium.py
import math
import random
from typing import Optional, Union

from pathtracer.core.aabb import AABB
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.geometry.hittable import Hittable, HitRecord
from pathtracer.materials.isotropic import Isotropic
from pathtracer.materials.textures import Texture

# Offset used to step past the entry surface before finding the exit.
EXIT_EPSILON = 1e-4


class ConstantMedium(Hittable):
    """
    Volume of constant density enclosed by a boundary hittable.

    A ray inside the volume scatters after an exponentially distributed free
    flight. The boundary must be convex: exactly one entry and one exit are
    assumed.
    """
    def __init__(self, boundary: Hittable, density: float, albedo: Union[Vector3, Texture]):
        if density <= 0:
            raise ValueError(f"Medium density must be positive, got {density}")
        self.boundary = boundary
        self.density = density
        self.neg_inv_density = -1.0 / density
        self.phase_function = Isotropic(albedo)

    def hit(self, ray: Ray, t_min: float, t_max: float, rng=None) -> Optional[HitRecord]:
        rec1 = self.boundary.hit(ray, -math.inf, math.inf, rng)
        if rec1 is None:
            return None
        rec2 = self.boundary.hit(ray, rec1.t + EXIT_EPSILON, math.inf, rng)
        if rec2 is None:
            return None

        t_enter = max(rec1.t, t_min)
        t_exit = min(rec2.t, t_max)
        if t_enter >= t_exit:
            return None
        t_enter = max(t_enter, 0.0)

        ray_length = ray.direction.length()
        distance_inside_boundary = (t_exit - t_enter) * ray_length
        # 1 - random() lies in (0, 1], so the log is always finite. Without an
        # rng the module-level generator is used (unseeded).
        u = 1.0 - (rng or random).random()
        hit_distance = self.neg_inv_density * math.log(u)

        if hit_distance > distance_inside_boundary:
            return None

        t = t_enter + hit_distance / ray_length
        return HitRecord(
            p=ray.at(t),
            normal=Vector3(1.0, 0.0, 0.0),  # arbitrary
            t=t,
            u=0.0,
            v=0.0,
            front_face=True,  # arbitrary
            material=self.phase_function,
        )

    def bounding_box(self, time_start: float, time_end: float) -> Optional[AABB]:
        return self.boundary.bounding_box(time_start, time_end)
