# scenes.py
"""
Built-in scene presets.

Each preset returns a Scene: the world to render plus the camera placement
and background color that go with it. Random placement draws from the
``rng`` passed in, so a seeded generator reproduces the same scene.
"""
import logging
import math
import random
from collections import namedtuple
from typing import Optional

import numpy as np

from pathtracer.core.utils import random_vector
from pathtracer.core.vector import Color, Point3, Vector3
from pathtracer.geometry.box import Box
from pathtracer.geometry.bvh import BVHNode
from pathtracer.geometry.instance import Moving, RotateY, Translate
from pathtracer.geometry.medium import ConstantMedium
from pathtracer.geometry.mesh import load_obj
from pathtracer.geometry.rect import XYRect, XZRect, YZRect
from pathtracer.geometry.sphere import Sphere
from pathtracer.geometry.triangle import Triangle
from pathtracer.geometry.world import HittableList
from pathtracer.materials.dielectric import Dielectric
from pathtracer.materials.diffuse_light import DiffuseLight
from pathtracer.materials.lambertian import Lambertian
from pathtracer.materials.metal import Metal
from pathtracer.materials.texture_loader import load_texture
from pathtracer.materials.textures import CheckerTexture, NoiseTexture, SolidColor

logger = logging.getLogger(__name__)

Scene = namedtuple("Scene", ["world", "lookfrom", "lookat", "vfov", "aperture", "background"])

SKY = Color(0.7, 0.8, 1.0)
BLACK = Color(0.0, 0.0, 0.0)
ORIGIN = Point3(0.0, 0.0, 0.0)

CHECKER_ODD = Color(0.2, 0.3, 0.1)
CHECKER_EVEN = Color(0.9, 0.9, 0.9)

SCENE_NAMES = {
    1: "random spheres",
    2: "two checker spheres",
    3: "two Perlin spheres",
    4: "earth",
    5: "simple light",
    6: "Cornell box",
    7: "Cornell smoke",
    8: "final scene",
    9: "infinite plane",
    10: "triangle",
    11: "OBJ mesh",
}


def _numpy_rng(rng: random.Random) -> np.random.Generator:
    return np.random.default_rng(rng.getrandbits(64))


def _earth_texture(texture_path: Optional[str]):
    if texture_path is None:
        logger.warning("No texture image given; using a checker texture instead")
        return CheckerTexture(CHECKER_ODD, CHECKER_EVEN)
    return load_texture(texture_path)


def random_scene(rng: random.Random) -> Scene:
    world = HittableList()

    ground_material = Lambertian(CheckerTexture(CHECKER_ODD, CHECKER_EVEN))
    world.add(Sphere(Point3(0, -1000, 0), 1000, ground_material))

    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = Point3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())

            if (center - Point3(4, 0.3, 0)).length() <= 0.9:
                continue

            if choose_mat < 0.8:
                # diffuse
                albedo = random_vector(rng) * random_vector(rng)
                sphere_material = Lambertian(SolidColor(albedo))
            elif choose_mat < 0.95:
                # metal
                albedo = random_vector(rng, 0.5, 1.0)
                fuzz = rng.random() / 2.0
                sphere_material = Metal(albedo, fuzz)
            else:
                # glass
                sphere_material = Dielectric(1.5)
            world.add(Sphere(center, 0.2, sphere_material))

    world.add(Sphere(Point3(0, 1, 0), 1.0, Dielectric(1.5)))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    return Scene(BVHNode(world, 0.0, 1.0, rng), Point3(13, 2, 3), ORIGIN, 20.0, 0.1, SKY)


def two_spheres(rng: random.Random) -> Scene:
    checker = Lambertian(CheckerTexture(CHECKER_ODD, CHECKER_EVEN))
    objects = HittableList([
        Sphere(Point3(0, -10, 0), 10, checker),
        Sphere(Point3(0, 10, 0), 10, checker),
    ])
    return Scene(BVHNode(objects, 0.0, 1.0, rng), Point3(13, 2, 3), ORIGIN, 20.0, 0.0, SKY)


def two_perlin_spheres(rng: random.Random) -> Scene:
    pertext = Lambertian(NoiseTexture(4.0, _numpy_rng(rng)))
    objects = HittableList([
        Sphere(Point3(0, -1000, 0), 1000, pertext),
        Sphere(Point3(0, 2, 0), 2, pertext),
    ])
    return Scene(BVHNode(objects, 0.0, 1.0, rng), Point3(13, 2, 3), ORIGIN, 20.0, 0.0, SKY)


def earth(rng: random.Random, texture_path: Optional[str] = None) -> Scene:
    earth_surface = Lambertian(_earth_texture(texture_path))
    objects = HittableList([Sphere(ORIGIN, 2, earth_surface)])
    return Scene(BVHNode(objects, 0.0, 1.0, rng), Point3(13, 2, 3), ORIGIN, 20.0, 0.0, SKY)


def simple_light(rng: random.Random) -> Scene:
    pertext = Lambertian(NoiseTexture(4.0, _numpy_rng(rng)))
    diff_light = DiffuseLight(Color(4, 4, 4))
    objects = HittableList([
        Sphere(Point3(0, -1000, 0), 1000, pertext),
        Sphere(Point3(0, 2, 0), 2, pertext),
        XYRect(3, 5, 1, 3, -2, diff_light),
    ])
    return Scene(BVHNode(objects, 0.0, 1.0, rng), Point3(26, 3, 6), Point3(0, 2, 0), 20.0, 0.0, BLACK)


def _cornell_walls(light_material, light_rect) -> HittableList:
    red = Lambertian(Color(0.65, 0.05, 0.05))
    white = Lambertian(Color(0.73, 0.73, 0.73))
    green = Lambertian(Color(0.12, 0.45, 0.15))

    x0, x1, z0, z1 = light_rect
    return HittableList([
        YZRect(0, 555, 0, 555, 555, green),
        YZRect(0, 555, 0, 555, 0, red),
        XZRect(x0, x1, z0, z1, 554, light_material),
        XZRect(0, 555, 0, 555, 0, white),
        XZRect(0, 555, 0, 555, 555, white),
        XYRect(0, 555, 0, 555, 555, white),
    ])


def _cornell_blocks():
    white = Lambertian(Color(0.73, 0.73, 0.73))
    tall = Box(Point3(0, 0, 0), Point3(165, 330, 165), white)
    tall = Translate(RotateY(tall, 15), Vector3(265, 0, 295))
    short = Box(Point3(0, 0, 0), Point3(165, 165, 165), white)
    short = Translate(RotateY(short, -18), Vector3(130, 0, 65))
    return tall, short


def cornell_box(rng: random.Random) -> Scene:
    objects = _cornell_walls(DiffuseLight(Color(15, 15, 15)), (213, 343, 227, 332))
    for block in _cornell_blocks():
        objects.add(block)
    return Scene(BVHNode(objects, 0.0, 1.0, rng), Point3(278, 278, -800), Point3(278, 278, 0),
                 40.0, 0.0, BLACK)


def cornell_smoke(rng: random.Random) -> Scene:
    objects = _cornell_walls(DiffuseLight(Color(7, 7, 7)), (113, 443, 127, 432))
    tall, short = _cornell_blocks()
    objects.add(ConstantMedium(tall, 0.01, Color(0, 0, 0)))
    objects.add(ConstantMedium(short, 0.01, Color(1, 1, 1)))
    return Scene(BVHNode(objects, 0.0, 1.0, rng), Point3(278, 278, -800), Point3(278, 278, 0),
                 40.0, 0.0, BLACK)


def final_scene(rng: random.Random, texture_path: Optional[str] = None) -> Scene:
    ground = Lambertian(Color(0.48, 0.83, 0.53))
    boxes_per_side = 20
    boxes1 = HittableList()
    for i in range(boxes_per_side):
        for j in range(boxes_per_side):
            w = 100.0
            x0 = -1000.0 + i * w
            z0 = -1000.0 + j * w
            y1 = 1.0 + 100.0 * rng.random()
            boxes1.add(Box(Point3(x0, 0.0, z0), Point3(x0 + w, y1, z0 + w), ground))

    objects = HittableList()
    objects.add(BVHNode(boxes1, 0.0, 1.0, rng))

    light = DiffuseLight(Color(7, 7, 7))
    objects.add(XZRect(123, 423, 147, 412, 554, light))

    # Moving sphere: a sphere at the origin carried from center1 to center2
    center1 = Point3(400, 400, 200)
    center2 = center1 + Vector3(30, 0, 0)
    moving_sphere_material = Lambertian(Color(0.7, 0.3, 0.1))
    objects.add(Moving(Sphere(ORIGIN, 50, moving_sphere_material), center1, center2, 0.0, 1.0))

    objects.add(Sphere(Point3(260, 150, 45), 50, Dielectric(1.5)))
    objects.add(Sphere(Point3(0, 150, 145), 50, Metal(Color(0.8, 0.8, 0.9), 1.0)))

    boundary = Sphere(Point3(360, 150, 145), 70, Dielectric(1.5))
    objects.add(boundary)
    objects.add(ConstantMedium(boundary, 0.2, Color(0.2, 0.4, 0.9)))
    # Thin mist over the whole scene
    boundary = Sphere(ORIGIN, 5000, Dielectric(1.5))
    objects.add(ConstantMedium(boundary, 0.0001, Color(1, 1, 1)))

    objects.add(Sphere(Point3(400, 200, 400), 100, Lambertian(_earth_texture(texture_path))))
    objects.add(Sphere(Point3(220, 280, 300), 80, Lambertian(NoiseTexture(0.1, _numpy_rng(rng)))))

    white = Lambertian(Color(0.73, 0.73, 0.73))
    boxes2 = HittableList()
    for _ in range(1000):
        boxes2.add(Sphere(random_vector(rng, 0.0, 165.0), 10, white))
    objects.add(Translate(RotateY(BVHNode(boxes2, 0.0, 1.0, rng), 15), Vector3(-100, 270, 395)))

    return Scene(objects, Point3(478, 278, -600), Point3(278, 278, 0), 40.0, 0.0, BLACK)


def infinite_plane(rng: random.Random) -> Scene:
    # An unbounded plane has no bounding box, so it stays in a flat list.
    pertext = Lambertian(NoiseTexture(4.0, _numpy_rng(rng)))
    inf = math.inf
    objects = HittableList([XZRect(-inf, inf, -inf, inf, 0.0, pertext)])
    return Scene(objects, Point3(13, 2, 3), ORIGIN, 20.0, 0.0, SKY)


def triangle_scene(rng: random.Random) -> Scene:
    material = Lambertian(Color(0.0, 0.0, 0.0))
    objects = HittableList([Triangle(Point3(0, 0, 0), Point3(0, 0, 1), Point3(0, 1, 0.5), material)])
    return Scene(BVHNode(objects, 0.0, 1.0, rng), Point3(5, 5, 5), ORIGIN, 20.0, 0.0, SKY)


def mesh_scene(rng: random.Random, obj_path: Optional[str] = None) -> Scene:
    if obj_path is None:
        raise ValueError("The OBJ mesh scene needs a model file (obj_path)")
    model = load_obj(obj_path, Lambertian(Color(0.73, 0.73, 0.73)))
    if not model.triangles:
        raise ValueError(f"No triangles could be loaded from {obj_path}")
    world = model.as_bvh(0.0, 1.0, rng)

    # Frame the model: look at its box centre from far enough to fit it in view
    box = world.bounding_box(0.0, 1.0)
    center = (box.minimum + box.maximum) * 0.5
    radius = max((box.maximum - box.minimum).length() * 0.5, 1e-3)
    vfov = 20.0
    distance = 1.2 * radius / math.sin(math.radians(vfov) / 2)
    lookfrom = center + Vector3(1.0, 0.6, 1.4).normalize() * distance
    return Scene(world, lookfrom, center, vfov, 0.0, SKY)


def get_scene(scene_id: int, rng: Optional[random.Random] = None,
              texture_path: Optional[str] = None, obj_path: Optional[str] = None) -> Scene:
    """Build preset ``scene_id``; unknown ids fall back to the random spheres."""
    if rng is None:
        rng = random.Random()
    if scene_id not in SCENE_NAMES:
        logger.warning("Unknown scene %d, rendering the random spheres scene", scene_id)
        scene_id = 1
    logger.info("Creating scene %d (%s)", scene_id, SCENE_NAMES[scene_id])

    if scene_id == 2:
        return two_spheres(rng)
    if scene_id == 3:
        return two_perlin_spheres(rng)
    if scene_id == 4:
        return earth(rng, texture_path)
    if scene_id == 5:
        return simple_light(rng)
    if scene_id == 6:
        return cornell_box(rng)
    if scene_id == 7:
        return cornell_smoke(rng)
    if scene_id == 8:
        return final_scene(rng, texture_path)
    if scene_id == 9:
        return infinite_plane(rng)
    if scene_id == 10:
        return triangle_scene(rng)
    if scene_id == 11:
        return mesh_scene(rng, obj_path)
    return random_scene(rng)
