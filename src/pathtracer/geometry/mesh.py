# geometry/mesh.py
"""
Wavefront OBJ import for triangulated meshes.

Only ``v``, ``vn``, ``vt`` and three-vertex ``f`` statements are understood.
Malformed statements are logged and skipped; the rest of the file still
loads.
"""
import logging
import random
from typing import List, Optional, Tuple

from pathtracer.core.aabb import AABB
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.geometry.bvh import BVHNode
from pathtracer.geometry.hittable import Hittable, HitRecord
from pathtracer.geometry.triangle import Triangle
from pathtracer.geometry.world import HittableList

logger = logging.getLogger(__name__)

FaceVertex = Tuple[int, Optional[int], Optional[int]]


class ObjParseError(ValueError):
    """A single OBJ statement could not be understood."""


class Model(Hittable):
    """Represents a 3D mesh composed of triangles."""
    def __init__(self, triangles: List[Triangle]):
        self.triangles = triangles
        self.faces = HittableList(triangles)

    def hit(self, ray: Ray, t_min: float, t_max: float, rng=None) -> Optional[HitRecord]:
        return self.faces.hit(ray, t_min, t_max, rng)

    def bounding_box(self, time_start: float, time_end: float) -> Optional[AABB]:
        return self.faces.bounding_box(time_start, time_end)

    def as_bvh(self, time_start: float = 0.0, time_end: float = 1.0,
               rng: Optional[random.Random] = None) -> BVHNode:
        return BVHNode(self.triangles, time_start, time_end, rng)


def _parse_floats(operator: str, fields: List[str], names: str) -> List[float]:
    values = []
    for i, name in enumerate(names):
        if i >= len(fields):
            raise ObjParseError(f"Malformed {operator} entry: missing {name}")
        try:
            values.append(float(fields[i]))
        except ValueError:
            raise ObjParseError(f"Malformed {operator} entry: bad number for {name}: {fields[i]!r}")
    return values


def _parse_face_vertex(triplet: str) -> FaceVertex:
    parts = triplet.split('/')
    try:
        v_idx = int(parts[0])
        t_idx = int(parts[1]) if len(parts) > 1 and parts[1] else None
        n_idx = int(parts[2]) if len(parts) > 2 and parts[2] else None
    except ValueError:
        raise ObjParseError(f"Malformed face triplet: {triplet!r}")
    if v_idx == 0 or t_idx == 0 or n_idx == 0:
        raise ObjParseError(f"OBJ indices start at 1: {triplet!r}")
    return v_idx, t_idx, n_idx


def _resolve(index: int, count: int, kind: str) -> int:
    """OBJ indices are 1-based; negative ones count back from the latest entry."""
    resolved = count + index if index < 0 else index - 1
    if not 0 <= resolved < count:
        raise ObjParseError(f"{kind} index {index} out of range ({count} defined)")
    return resolved


def parse_obj(obj_data: str, material) -> Model:
    """Build a Model from OBJ text, one Triangle per face."""
    vertices: List[Vector3] = []
    normals: List[Vector3] = []
    uvs: List[Tuple[float, float]] = []
    triangles: List[Triangle] = []
    skipped = 0

    for line_num, line in enumerate(obj_data.splitlines(), 1):
        values = line.split()
        if not values or values[0].startswith('#'):  # Skip blanks and comments
            continue
        operator, fields = values[0], values[1:]
        try:
            if operator == 'v':  # Vertex
                vertices.append(Vector3(*_parse_floats(operator, fields, "xyz")))
            elif operator == 'vn':  # Normal
                normals.append(Vector3(*_parse_floats(operator, fields, "xyz")))
            elif operator == 'vt':  # Texture coordinate, w ignored
                u, v = _parse_floats(operator, fields, "uv")
                uvs.append((u, v))
            elif operator == 'f':  # Face
                triangles.append(_build_face(fields, vertices, normals, material))
            else:
                logger.debug("Ignoring unknown operator %r in OBJ (line %d)", operator, line_num)
        except ObjParseError as e:
            skipped += 1
            logger.warning("Skipping OBJ line %d (%s): %s", line_num, line.strip(), e)

    logger.info("Loaded %d vertices, %d normals, %d UVs, %d triangles (%d lines skipped)",
                len(vertices), len(normals), len(uvs), len(triangles), skipped)
    return Model(triangles)


def _build_face(fields: List[str], vertices: List[Vector3], normals: List[Vector3],
                material) -> Triangle:
    face = [_parse_face_vertex(f) for f in fields]
    # Only faces with exactly three vertices are supported.
    if len(face) != 3:
        raise ObjParseError(f"Unsupported face vertex count {len(face)}")

    v0, v1, v2 = (vertices[_resolve(v_idx, len(vertices), "vertex")] for v_idx, _, _ in face)

    custom_normal = None
    normal_indices = [n_idx for _, _, n_idx in face]
    if all(n is not None for n in normal_indices):
        resolved = {_resolve(n, len(normals), "normal") for n in normal_indices}
        if len(resolved) != 1:
            raise ObjParseError("Multiple normals for one face")
        custom_normal = normals[resolved.pop()].normalize()

    return Triangle(v0, v1, v2, material, custom_normal)


def load_obj(filename: str, material) -> Model:
    """Load a 3D model from an OBJ file."""
    logger.info("Opening file: %s", filename)
    with open(filename, 'r') as f:
        return parse_obj(f.read(), material)
