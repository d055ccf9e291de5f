# materials/diffuse_light.py
import random
from typing import Optional, Tuple, Union

from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.geometry.hittable import HitRecord
from pathtracer.materials.material import Material, as_texture
from pathtracer.materials.textures import Texture


class DiffuseLight(Material):
    """
    Light source. Emits the value of its texture and absorbs every ray that
    reaches it.
    """
    def __init__(self, emit: Union[Vector3, Texture]):
        self.emit = as_texture(emit)

    def scatter(self, ray_in: Ray, rec: HitRecord,
                rng: random.Random) -> Optional[Tuple[Ray, Vector3]]:
        """Lights terminate the path."""
        return None

    def emitted(self, u: float, v: float, p: Vector3) -> Vector3:
        """
        Radiance leaving the surface at texture coordinates (u, v) and hit
        point p.
        """
        return self.emit.value(u, v, p)
