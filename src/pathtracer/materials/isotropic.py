# materials/isotropic.py
import random
from typing import Tuple, Union

from pathtracer.core.ray import Ray
from pathtracer.core.utils import random_in_unit_sphere
from pathtracer.core.vector import Vector3
from pathtracer.geometry.hittable import HitRecord
from pathtracer.materials.material import Material, as_texture
from pathtracer.materials.textures import Texture


class Isotropic(Material):
    """Phase function of a participating medium: scatters in any direction."""
    def __init__(self, albedo: Union[Vector3, Texture]):
        self.albedo = as_texture(albedo)

    def scatter(self, ray_in: Ray, rec: HitRecord, rng: random.Random) -> Tuple[Ray, Vector3]:
        scattered = Ray(rec.p, random_in_unit_sphere(rng), ray_in.time)
        return scattered, self.albedo.value(rec.u, rec.v, rec.p)
