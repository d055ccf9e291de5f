"""Tests for the scene presets.

Tests cover:
- Every preset builds and carries its camera placement
- Seeded scenes are reproducible
- Texture fallback and the OBJ scene's required model file
- A tiny end-to-end render of the Cornell box
"""

import logging
import random

import numpy as np
import pytest

from pathtracer.camera.camera import Camera
from pathtracer.core.vector import Vector3
from pathtracer.geometry.bvh import BVHNode
from pathtracer.geometry.world import HittableList
from pathtracer.renderer.raytracer import Renderer
from pathtracer.scenes import BLACK, SCENE_NAMES, SKY, Scene, get_scene

CUBE_OBJ = """\
v -1 -1 -1
v 1 -1 -1
v 1 1 -1
v -1 1 -1
v -1 -1 1
v 1 -1 1
v 1 1 1
v -1 1 1
f 1 2 3
f 1 3 4
f 5 6 7
f 5 7 8
f 1 2 6
f 1 6 5
f 4 3 7
f 4 7 8
"""


class TestPresets:
    """Each preset builds a usable scene."""

    @pytest.mark.parametrize("scene_id", [1, 2, 3, 4, 5, 6, 7, 9, 10])
    def test_builds(self, scene_id, rng):
        """Presets return a Scene with a hittable world."""
        scene = get_scene(scene_id, rng)
        assert isinstance(scene, Scene)
        assert scene.vfov > 0
        assert scene.lookfrom != scene.lookat

    def test_final_scene(self, rng):
        """The final scene is a flat list of BVHs and loose objects."""
        scene = get_scene(8, rng)
        assert isinstance(scene.world, HittableList)
        assert any(isinstance(o, BVHNode) for o in scene.world)
        assert scene.background == BLACK
        assert scene.vfov == 40.0

    def test_backgrounds(self, rng):
        """Outdoor scenes have a sky; lit interiors are black."""
        assert get_scene(2, rng).background == SKY
        assert get_scene(5, rng).background == BLACK
        assert get_scene(6, rng).background == BLACK

    def test_cornell_camera(self, rng):
        """The Cornell box is viewed from the front at 40 degrees."""
        scene = get_scene(6, rng)
        assert scene.lookfrom == Vector3(278, 278, -800)
        assert scene.lookat == Vector3(278, 278, 0)
        assert scene.vfov == 40.0
        assert isinstance(scene.world, BVHNode)

    def test_infinite_plane_stays_flat(self, rng):
        """The unbounded plane cannot go into a BVH."""
        scene = get_scene(9, rng)
        assert isinstance(scene.world, HittableList)
        assert scene.world.bounding_box(0.0, 1.0) is None

    def test_unknown_id_falls_back(self):
        """Unknown ids render the random spheres scene."""
        fallback = get_scene(99, random.Random(3))
        default = get_scene(1, random.Random(3))
        assert fallback.aperture == default.aperture == 0.1
        assert len(fallback.world.leaves()) == len(default.world.leaves())

    def test_seeded_scene_reproducible(self):
        """The same seed places the same spheres."""
        a = get_scene(1, random.Random(5)).world.leaves()
        b = get_scene(1, random.Random(5)).world.leaves()
        assert [o.center for o in a] == [o.center for o in b]

    def test_names_cover_ids(self):
        """Every id from 1 to 11 has a name."""
        assert sorted(SCENE_NAMES) == list(range(1, 12))


class TestSceneAssets:
    """Scenes that read files."""

    def test_earth_without_texture_falls_back(self, rng, caplog):
        """Without an image the earth gets a checker texture and a warning."""
        with caplog.at_level(logging.WARNING, logger="pathtracer.scenes"):
            scene = get_scene(4, rng)
        assert scene.world is not None
        assert any("checker" in r.getMessage() for r in caplog.records)

    def test_earth_with_missing_texture(self, rng, tmp_path):
        """A texture path that does not exist is an error."""
        with pytest.raises(FileNotFoundError):
            get_scene(4, rng, texture_path=str(tmp_path / "earth.bmp"))

    def test_mesh_needs_obj(self, rng):
        """The mesh scene refuses to build without a model."""
        with pytest.raises(ValueError):
            get_scene(11, rng)

    def test_mesh_scene(self, rng, tmp_path):
        """The mesh scene frames the loaded model."""
        path = tmp_path / "cube.obj"
        path.write_text(CUBE_OBJ)
        scene = get_scene(11, rng, obj_path=str(path))
        assert isinstance(scene.world, BVHNode)
        assert tuple(scene.lookat) == pytest.approx((0, 0, 0), abs=1e-3)
        assert (scene.lookfrom - scene.lookat).length() > 2.0


class TestSceneRender:
    """A preset renders end to end."""

    def test_tiny_cornell_box(self):
        """A few pixels of the Cornell box render to finite colors."""
        scene = get_scene(6, random.Random(0))
        camera = Camera(scene.lookfrom, scene.lookat, Vector3(0, 1, 0), scene.vfov, 1.0,
                        aperture=scene.aperture, focus_dist=10.0)
        image = Renderer(scene.world, camera, 4, 4, samples_per_pixel=2, max_depth=5,
                         background=scene.background, threads=2, seed=0).render()
        assert np.isfinite(image.color_sum).all()
        assert (image.sample_count == 2).all()
