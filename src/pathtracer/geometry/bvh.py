# geometry/bvh.py
import logging
import random
from typing import List, Optional

from pathtracer.core.aabb import AABB
from pathtracer.core.ray import Ray
from pathtracer.geometry.hittable import Hittable, HitRecord

logger = logging.getLogger(__name__)


class BoundingBoxError(ValueError):
    """Raised when an object without a bounding box is given to a BVH."""


def _require_box(obj: Hittable, time_start: float, time_end: float) -> AABB:
    box = obj.bounding_box(time_start, time_end)
    if box is None:
        raise BoundingBoxError(f"No bounding box in BVHNode constructor: {obj!r}")
    return box


class BVHNode(Hittable):
    """
    Binary bounding volume hierarchy over a set of hittables.

    Each partition is sorted along a randomly chosen axis by the minimum
    corner of the objects' boxes and split at the median. A partition of one
    object stores it as both children. Pass a seeded ``rng`` to make the
    tree shape reproducible.
    """
    def __init__(self, objects, time_start: float = 0.0, time_end: float = 1.0,
                 rng: Optional[random.Random] = None, start: int = 0, end: Optional[int] = None):
        if start == 0 and end is None:
            # Work on a private copy; the caller's list keeps its order.
            objects = list(getattr(objects, "objects", objects))
            if not objects:
                raise ValueError("Cannot build a BVH over an empty object list")
            logger.debug("Building BVH over %d objects", len(objects))
        if end is None:
            end = len(objects)
        if rng is None:
            rng = random.Random()

        axis = rng.randint(0, 2)
        object_span = end - start

        def key(obj: Hittable) -> float:
            return _require_box(obj, time_start, time_end).minimum[axis]

        if object_span == 1:
            self.left = self.right = objects[start]
        elif object_span == 2:
            a, b = objects[start], objects[start + 1]
            if key(a) < key(b):
                self.left, self.right = a, b
            else:
                self.left, self.right = b, a
        else:
            objects[start:end] = sorted(objects[start:end], key=key)
            mid = start + object_span // 2
            self.left = BVHNode(objects, time_start, time_end, rng, start, mid)
            self.right = BVHNode(objects, time_start, time_end, rng, mid, end)

        box_left = _require_box(self.left, time_start, time_end)
        box_right = _require_box(self.right, time_start, time_end)
        self.box = AABB.surrounding_box(box_left, box_right)

    def hit(self, ray: Ray, t_min: float, t_max: float, rng=None) -> Optional[HitRecord]:
        if not self.box.hit(ray, t_min, t_max):
            return None

        hit_left = self.left.hit(ray, t_min, t_max, rng)

        # Only a strictly closer hit on the right can replace the left one.
        if hit_left is not None:
            t_max = hit_left.t

        hit_right = self.right.hit(ray, t_min, t_max, rng)
        if hit_right is not None:
            return hit_right
        return hit_left

    def bounding_box(self, time_start: float, time_end: float) -> Optional[AABB]:
        return self.box

    def depth(self) -> int:
        """Height of the tree (a node whose children are leaves has depth 1)."""
        left = self.left.depth() if isinstance(self.left, BVHNode) else 0
        right = self.right.depth() if isinstance(self.right, BVHNode) else 0
        return 1 + max(left, right)

    def leaves(self) -> List[Hittable]:
        """Distinct leaf objects in left-to-right order."""
        out = []
        for child in (self.left, self.right) if self.left is not self.right else (self.left,):
            if isinstance(child, BVHNode):
                out.extend(child.leaves())
            else:
                out.append(child)
        return out
