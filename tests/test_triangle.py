"""Unit tests for triangle intersection.

Tests cover:
- Barycentric hit inside the triangle
- Parallel rays and rays outside the edges
- Custom normals from meshes
- Padded and missing bounding boxes
"""

import math

import pytest

from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.geometry.triangle import BOX_PADDING, Triangle

INF = math.inf


@pytest.fixture
def tri(white):
    return Triangle(Vector3(0, 0, 0), Vector3(1, 0, 0), Vector3(0, 1, 0), white)


class TestTriangleIntersection:
    """Tests for Möller-Trumbore intersection."""

    def test_hit_inside(self, tri):
        """A ray down the z axis hits at the expected barycentrics."""
        ray = Ray(Vector3(0.25, 0.25, 1), Vector3(0, 0, -1))
        rec = tri.hit(ray, 0.001, INF)
        assert rec is not None
        assert rec.t == pytest.approx(1.0)
        assert tuple(rec.p) == pytest.approx((0.25, 0.25, 0.0))
        assert (rec.u, rec.v) == pytest.approx((0.25, 0.25))

    def test_normal_faces_ray(self, tri):
        """The stored normal always opposes the incoming ray."""
        for direction in (Vector3(0, 0, -1), Vector3(0, 0, 1)):
            origin = Vector3(0.25, 0.25, 0) - direction
            rec = tri.hit(Ray(origin, direction), 0.001, INF)
            assert rec is not None
            assert rec.normal.dot(direction) < 0

    def test_parallel_ray_misses(self, tri):
        """A ray in the triangle's plane direction never hits."""
        ray = Ray(Vector3(0, 0, 1), Vector3(1, 0, 0))
        assert tri.hit(ray, 0.001, INF) is None

    def test_outside_edges_misses(self, tri):
        """A ray through the plane beyond the hypotenuse misses."""
        ray = Ray(Vector3(1, 1, 1), Vector3(0, 0, -1))
        assert tri.hit(ray, 0.001, INF) is None

    def test_behind_origin_misses(self, tri):
        """A triangle behind the ray is not hit."""
        ray = Ray(Vector3(0.25, 0.25, -1), Vector3(0, 0, -1))
        assert tri.hit(ray, 0.001, INF) is None

    def test_custom_normal(self, white):
        """A custom normal replaces the geometric one."""
        tri = Triangle(Vector3(0, 0, 0), Vector3(1, 0, 0), Vector3(0, 1, 0), white,
                       custom_normal=Vector3(0, 0, 1))
        rec = tri.hit(Ray(Vector3(0.25, 0.25, 1), Vector3(0, 0, -1)), 0.001, INF)
        assert rec.front_face
        assert tuple(rec.normal) == pytest.approx((0, 0, 1))


class TestTriangleBoundingBox:
    """Tests for the triangle's bounding box."""

    def test_flat_triangle_box_is_padded(self, tri):
        """A triangle in z=0 still gets a box with thickness."""
        box = tri.bounding_box(0.0, 1.0)
        assert tuple(box.minimum) == pytest.approx((-BOX_PADDING, -BOX_PADDING, -BOX_PADDING))
        assert tuple(box.maximum) == pytest.approx((1 + BOX_PADDING, 1 + BOX_PADDING, BOX_PADDING))

    def test_vertex_at_infinity_has_no_box(self, white):
        """Unbounded triangles report no box."""
        tri = Triangle(Vector3(0, 0, 0), Vector3(INF, 0, 0), Vector3(0, 1, 0), white)
        assert tri.bounding_box(0.0, 1.0) is None
