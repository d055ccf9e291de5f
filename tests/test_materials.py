"""Unit tests for material scattering.

Tests cover:
- Lambertian: always scatters, keeps ray time, textured attenuation
- Metal: mirror reflection, absorption below the surface, fuzz clamp
- Dielectric: clear attenuation, total internal reflection, Schlick
- DiffuseLight and Isotropic
"""

import math

import pytest

from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.geometry.hittable import HitRecord
from pathtracer.materials.dielectric import Dielectric, schlick
from pathtracer.materials.diffuse_light import DiffuseLight
from pathtracer.materials.isotropic import Isotropic
from pathtracer.materials.lambertian import Lambertian
from pathtracer.materials.material import BLACK
from pathtracer.materials.metal import Metal
from pathtracer.materials.textures import CheckerTexture


def floor_hit(material, front_face=True):
    """A hit on the y=0 plane with the normal pointing up."""
    return HitRecord(p=Vector3(0, 0, 0), normal=Vector3(0, 1, 0), t=1.0,
                     u=0.5, v=0.5, front_face=front_face, material=material)


class TestLambertian:
    """Tests for diffuse scattering."""

    def test_always_scatters_above_surface(self, rng):
        """Scattered rays leave from the hit point into the upper hemisphere."""
        mat = Lambertian(Vector3(0.5, 0.6, 0.7))
        rec = floor_hit(mat)
        ray_in = Ray(Vector3(0, 1, -1), Vector3(0, -1, 1), time=0.25)
        for _ in range(200):
            result = mat.scatter(ray_in, rec, rng)
            assert result is not None
            scattered, attenuation = result
            assert scattered.origin == rec.p
            assert scattered.direction.dot(rec.normal) >= 0
            assert scattered.time == 0.25
            assert attenuation == Vector3(0.5, 0.6, 0.7)

    def test_textured_albedo(self, rng):
        """Attenuation samples the texture at the hit point."""
        mat = Lambertian(CheckerTexture(Vector3(1, 0, 0), Vector3(0, 0, 1)))
        rec = floor_hit(mat)
        rec.p = Vector3(-0.1, 0.1, 0.1)
        _, attenuation = mat.scatter(Ray(Vector3(0, 1, 0), Vector3(0, -1, 0)), rec, rng)
        assert attenuation == Vector3(1, 0, 0)

    def test_emits_nothing(self):
        """Non-emissive materials emit black."""
        assert Lambertian(Vector3(1, 1, 1)).emitted(0, 0, Vector3()) == BLACK


class TestMetal:
    """Tests for specular reflection."""

    def test_mirror_reflection(self, rng):
        """Without fuzz the reflection is exact."""
        mat = Metal(Vector3(0.8, 0.8, 0.8), 0.0)
        scattered, attenuation = mat.scatter(Ray(Vector3(-1, 1, 0), Vector3(1, -1, 0)),
                                             floor_hit(mat), rng)
        s = 1 / math.sqrt(2)
        assert tuple(scattered.direction) == pytest.approx((s, s, 0))
        assert attenuation == Vector3(0.8, 0.8, 0.8)

    def test_absorbs_below_surface(self, rng):
        """A reflection that would go into the surface is absorbed."""
        mat = Metal(Vector3(0.8, 0.8, 0.8), 0.0)
        assert mat.scatter(Ray(Vector3(0, -1, 0), Vector3(0, 1, 0)), floor_hit(mat), rng) is None

    def test_fuzz_clamped(self):
        """Fuzz above 1 is clamped."""
        assert Metal(Vector3(1, 1, 1), 5.0).fuzz == 1


class TestDielectric:
    """Tests for refraction and reflection."""

    def test_attenuation_is_clear(self, rng):
        """Glass never tints."""
        mat = Dielectric(1.5)
        for _ in range(50):
            _, attenuation = mat.scatter(Ray(Vector3(0, 1, 0), Vector3(0.3, -1, 0)),
                                         floor_hit(mat), rng)
            assert attenuation == Vector3(1, 1, 1)

    def test_total_internal_reflection(self, rng):
        """At a grazing angle from inside, the ray always reflects."""
        mat = Dielectric(1.5)
        rec = floor_hit(mat, front_face=False)
        for _ in range(50):
            scattered, _ = mat.scatter(Ray(Vector3(-1, 0.1, 0), Vector3(1, -0.1, 0)), rec, rng)
            assert scattered.direction.y > 0

    def test_head_on_mostly_refracts(self, rng):
        """Head-on, about 4% of rays reflect and the rest pass straight through."""
        mat = Dielectric(1.5)
        rec = floor_hit(mat)
        reflected = 0
        trials = 2000
        for _ in range(trials):
            scattered, _ = mat.scatter(Ray(Vector3(0, 1, 0), Vector3(0, -1, 0)), rec, rng)
            if scattered.direction.y > 0:
                reflected += 1
            else:
                assert tuple(scattered.direction) == pytest.approx((0, -1, 0))
        assert reflected / trials == pytest.approx(schlick(1.0, 1 / 1.5), abs=0.02)

    def test_schlick_limits(self):
        """Reflectance is r0 head-on and 1 at grazing incidence."""
        assert schlick(1.0, 1.5) == pytest.approx(0.04)
        assert schlick(0.0, 1.5) == pytest.approx(1.0)


class TestDiffuseLight:
    """Tests for emitters."""

    def test_never_scatters(self, rng):
        """Lights end the path."""
        mat = DiffuseLight(Vector3(4, 4, 4))
        assert mat.scatter(Ray(Vector3(0, 1, 0), Vector3(0, -1, 0)), floor_hit(mat), rng) is None

    def test_emits_color(self):
        """Emission is the emit texture's value."""
        assert DiffuseLight(Vector3(4, 5, 6)).emitted(0.1, 0.2, Vector3()) == Vector3(4, 5, 6)


class TestIsotropic:
    """Tests for the volume phase function."""

    def test_scatters_anywhere(self, rng):
        """Directions cover both hemispheres and attenuation is the albedo."""
        mat = Isotropic(Vector3(0.2, 0.4, 0.9))
        rec = floor_hit(mat)
        ups = 0
        for _ in range(400):
            scattered, attenuation = mat.scatter(Ray(Vector3(0, 1, 0), Vector3(0, -1, 0)), rec, rng)
            assert scattered.direction.length() < 1.0
            assert attenuation == Vector3(0.2, 0.4, 0.9)
            ups += scattered.direction.y > 0
        assert 100 < ups < 300
