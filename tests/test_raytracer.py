"""Unit tests for the integrator and the threaded renderer.

Tests cover:
- ray_color: depth bound, background on miss, emission, scattering
- Splitting samples between workers
- Reproducible renders with a fixed seed
- Worker failures surfacing in the calling thread
"""

import math
import random

import numpy as np
import pytest

from pathtracer.camera.camera import Camera
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.geometry.hittable import Hittable
from pathtracer.geometry.rect import XZRect
from pathtracer.geometry.sphere import Sphere
from pathtracer.geometry.world import HittableList
from pathtracer.materials.diffuse_light import DiffuseLight
from pathtracer.materials.lambertian import Lambertian
from pathtracer.renderer.raytracer import MAX_DEPTH, Renderer, ray_color

INF = math.inf
SKY = Vector3(0.7, 0.8, 1.0)
WHITE_SKY = Vector3(1.0, 1.0, 1.0)


class GlowingLambertian(Lambertian):
    """Diffuse surface that also emits a little light."""

    def emitted(self, u, v, p):
        return Vector3(0.1, 0.1, 0.1)


class ExplodingWorld(Hittable):
    """A world whose intersection test always fails."""

    def hit(self, ray, t_min, t_max, rng=None):
        raise RuntimeError("boom")

    def bounding_box(self, time_start, time_end):
        return None


def ground(material):
    return HittableList([XZRect(-INF, INF, -INF, INF, 0.0, material)])


def small_scene():
    return HittableList([
        Sphere(Vector3(0, 0, -1), 0.5, Lambertian(Vector3(0.7, 0.3, 0.3))),
        Sphere(Vector3(0, -100.5, -1), 100, Lambertian(Vector3(0.5, 0.5, 0.5))),
    ])


def small_camera():
    return Camera(Vector3(0, 0, 1), Vector3(0, 0, -1), Vector3(0, 1, 0), 60.0, 4 / 3,
                  time_start=0.0, time_end=1.0)


class TestRayColor:
    """Tests for the recursive integrator."""

    def test_depth_exhausted_is_black(self, rng):
        """No light is gathered once the depth budget is spent."""
        ray = Ray(Vector3(0, 1, 0), Vector3(0, 1, 0))
        assert ray_color(ray, HittableList(), SKY, 0, rng) == Vector3(0, 0, 0)

    def test_miss_returns_background(self, rng, white):
        """A ray missing everything returns exactly the background."""
        world = HittableList([Sphere(Vector3(0, 0, -5), 1.0, white),
                              Sphere(Vector3(0, 0, -10), 2.0, white)])
        ray = Ray(Vector3(0, 0, 0), Vector3(0, 1, 0))
        assert ray_color(ray, world, SKY, MAX_DEPTH, rng) == SKY

    def test_light_returns_emission(self, rng):
        """Hitting a light returns its emission alone."""
        world = HittableList([Sphere(Vector3(0, 0, -5), 1.0, DiffuseLight(Vector3(4, 4, 4)))])
        ray = Ray(Vector3(0, 0, 0), Vector3(0, 0, -1))
        assert ray_color(ray, world, SKY, MAX_DEPTH, rng) == Vector3(4, 4, 4)

    def test_one_bounce_to_sky(self, rng):
        """A diffuse plane under a white sky reflects exactly its albedo."""
        world = ground(Lambertian(Vector3(0.5, 0.5, 0.5)))
        ray = Ray(Vector3(0, 1, 0), Vector3(0.2, -1, 0.1))
        for _ in range(20):
            assert ray_color(ray, world, WHITE_SKY, MAX_DEPTH, rng) == Vector3(0.5, 0.5, 0.5)

    def test_depth_one_stops_after_first_hit(self, rng):
        """With depth 1 the bounce off the plane contributes nothing."""
        world = ground(Lambertian(Vector3(0.5, 0.5, 0.5)))
        ray = Ray(Vector3(0, 1, 0), Vector3(0, -1, 0))
        assert ray_color(ray, world, WHITE_SKY, 1, rng) == Vector3(0, 0, 0)

    def test_emission_adds_to_scattered_light(self, rng):
        """Emitted and reflected light are summed."""
        world = ground(GlowingLambertian(Vector3(0.5, 0.5, 0.5)))
        ray = Ray(Vector3(0, 1, 0), Vector3(0, -1, 0))
        c = ray_color(ray, world, WHITE_SKY, MAX_DEPTH, rng)
        assert tuple(c) == pytest.approx((0.6, 0.6, 0.6))


class TestSampleSplit:
    """Tests for dividing samples between workers."""

    @pytest.mark.parametrize("spp,threads", [(10, 3), (8, 8), (3, 5), (100, 7)])
    def test_total_is_preserved(self, spp, threads):
        """Worker shares add up to exactly the requested samples."""
        renderer = Renderer(HittableList(), small_camera(), 4, 3,
                            samples_per_pixel=spp, threads=threads)
        shares = [renderer.samples_for_worker(k) for k in range(threads)]
        assert sum(shares) == spp
        assert max(shares) - min(shares) <= 1

    def test_invalid_settings(self):
        """Samples and threads must be positive."""
        with pytest.raises(ValueError):
            Renderer(HittableList(), small_camera(), 4, 3, samples_per_pixel=0)
        with pytest.raises(ValueError):
            Renderer(HittableList(), small_camera(), 4, 3, threads=0)


class TestRender:
    """End-to-end tests for Renderer.render."""

    def test_empty_world_is_background(self):
        """Every pixel of an empty world averages to the background."""
        renderer = Renderer(HittableList(), small_camera(), 5, 4, samples_per_pixel=3,
                            background=SKY, threads=2, seed=1)
        image = renderer.render()
        assert (image.sample_count == 3).all()
        assert np.allclose(image.average(), [0.7, 0.8, 1.0])

    def test_single_thread_is_deterministic(self):
        """Same seed, same thread count: bit-identical images."""
        def render():
            return Renderer(small_scene(), small_camera(), 8, 6, samples_per_pixel=4,
                            max_depth=10, background=SKY, threads=1, seed=42).render()

        a, b = render(), render()
        assert np.array_equal(a.color_sum, b.color_sum)
        assert np.array_equal(a.to_rgb8(), b.to_rgb8())

    def test_multi_thread_is_reproducible(self):
        """With several threads only the summation order can differ."""
        def render():
            return Renderer(small_scene(), small_camera(), 8, 6, samples_per_pixel=6,
                            max_depth=10, background=SKY, threads=3, seed=7).render()

        a, b = render(), render()
        assert (a.sample_count == 6).all()
        assert np.allclose(a.color_sum, b.color_sum)

    def test_single_pixel_image(self):
        """A 1x1 image renders without dividing by zero."""
        image = Renderer(small_scene(), small_camera(), 1, 1, samples_per_pixel=2,
                         max_depth=5, background=SKY, threads=1, seed=3).render()
        assert image.sample_count[0, 0] == 2

    def test_worker_error_is_raised(self):
        """An exception in a worker is re-raised by render()."""
        renderer = Renderer(ExplodingWorld(), small_camera(), 4, 3, samples_per_pixel=2,
                            threads=2, seed=0)
        with pytest.raises(RuntimeError, match="boom"):
            renderer.render()

    def test_unseeded_render(self):
        """Without a seed the render still completes."""
        image = Renderer(HittableList(), small_camera(), 2, 2, samples_per_pixel=1,
                         background=SKY, threads=1).render()
        assert (image.sample_count == 1).all()


class TestWorkerRandomness:
    """Each worker draws from its own seeded stream."""

    def test_worker_streams_differ(self):
        """Seeded workers get distinct, reproducible generators."""
        renderer = Renderer(HittableList(), small_camera(), 2, 2, seed=10, threads=2)
        first = [renderer._worker_rng(k).random() for k in range(2)]
        again = [renderer._worker_rng(k).random() for k in range(2)]
        assert first == again
        assert first[0] != first[1]
        assert first[0] == random.Random(10).random()
