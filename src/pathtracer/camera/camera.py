# camera/camera.py
import math
import random

from pathtracer.core.ray import Ray
from pathtracer.core.utils import random_in_unit_disk
from pathtracer.core.vector import Vector3


class Camera:
    """
    Thin-lens camera aimed from ``lookfrom`` at ``lookat``.

    ``vfov`` is the vertical field of view in degrees. Rays are stamped with
    a time drawn uniformly from the shutter interval [time_start, time_end].
    """
    def __init__(self, lookfrom: Vector3, lookat: Vector3, vup: Vector3,
                 vfov: float, aspect_ratio: float, aperture: float = 0.0,
                 focus_dist: float = 10.0, time_start: float = 0.0, time_end: float = 0.0):
        self.lookfrom = lookfrom
        self.lookat = lookat
        self.vup = vup
        self.vfov = vfov
        self.aspect_ratio = aspect_ratio
        self.aperture = aperture  # Lens aperture for depth of field
        self.focus_dist = focus_dist  # Distance to focus plane
        self.lens_radius = aperture / 2.0
        self.time_start = time_start
        self.time_end = time_end
        self.update_camera()

    def update_camera(self):
        """Updates the camera's basis vectors and viewport."""
        viewport_height = 2.0 * math.tan(math.radians(self.vfov) / 2)
        viewport_width = self.aspect_ratio * viewport_height

        # Orthonormal basis: w points backwards, u right, v up
        self.w = (self.lookfrom - self.lookat).normalize()
        self.u = self.vup.cross(self.w).normalize()
        self.v = self.w.cross(self.u)

        # Scale by focus distance
        self.origin = self.lookfrom
        self.horizontal = self.u * (viewport_width * self.focus_dist)
        self.vertical = self.v * (viewport_height * self.focus_dist)
        self.lower_left_corner = (self.origin -
                                  self.horizontal * 0.5 -
                                  self.vertical * 0.5 -
                                  self.w * self.focus_dist)

    def get_ray(self, s: float, t: float, rng: random.Random) -> Ray:
        """Ray through viewport coordinates (s, t) in [0, 1]², (0, 0) at the bottom left."""
        if self.lens_radius > 0:
            # Generate random point on lens
            rd = random_in_unit_disk(rng) * self.lens_radius
            offset = self.u * rd.x + self.v * rd.y
        else:
            offset = Vector3(0.0, 0.0, 0.0)

        if self.time_end > self.time_start:
            time = rng.uniform(self.time_start, self.time_end)
        else:
            time = self.time_start

        ray_origin = self.origin + offset
        ray_direction = (self.lower_left_corner +
                         self.horizontal * s +
                         self.vertical * t -
                         ray_origin)
        return Ray(ray_origin, ray_direction, time)
