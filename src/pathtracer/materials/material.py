# materials/material.py
import random
from typing import Optional, Tuple, Union

from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.geometry.hittable import HitRecord
from pathtracer.materials.textures import Texture, SolidColor

BLACK = Vector3(0.0, 0.0, 0.0)


def as_texture(value: Union[Vector3, Texture]) -> Texture:
    """Wrap a plain color in a SolidColor; textures pass through."""
    if isinstance(value, Vector3):
        return SolidColor(value)
    return value


class Material:
    """
    Abstract material class. Subclasses must implement scatter().
    """
    def scatter(self, ray_in: Ray, rec: HitRecord,
                rng: random.Random) -> Optional[Tuple[Ray, Vector3]]:
        """
        Computes the scattered ray and attenuation.
        Returns a tuple (scattered_ray, attenuation) or None if no scattering occurs.
        """
        raise NotImplementedError("scatter() must be implemented by subclasses.")

    def emitted(self, u: float, v: float, p: Vector3) -> Vector3:
        """Radiance emitted at the hit point. Only lights emit."""
        return BLACK
