# core/aabb.py
import math

from pathtracer.core.vector import Vector3


def _inverse(d: float) -> float:
    # Python raises on 1/0; produce the IEEE-754 signed infinity instead.
    if d == 0.0:
        return math.copysign(math.inf, d)
    return 1.0 / d


class AABB:
    """
    Axis-aligned bounding box given by its minimum and maximum corners.
    """
    __slots__ = ("minimum", "maximum")

    def __init__(self, minimum: Vector3, maximum: Vector3):
        self.minimum = minimum
        self.maximum = maximum

    def hit(self, ray, t_min: float, t_max: float) -> bool:
        # Slab method: for each axis, find intersection intervals.
        origin = ray.origin
        direction = ray.direction
        for a in range(3):
            inv_d = _inverse(direction[a])
            t0 = (self.minimum[a] - origin[a]) * inv_d
            t1 = (self.maximum[a] - origin[a]) * inv_d
            if inv_d < 0:
                t0, t1 = t1, t0
            # NaN (0 * inf) compares false and leaves the interval untouched.
            t_min = t0 if t0 > t_min else t_min
            t_max = t1 if t1 < t_max else t_max
            if t_max <= t_min:
                return False
        return True

    def translated(self, offset: Vector3) -> "AABB":
        return AABB(self.minimum + offset, self.maximum + offset)

    def corners(self):
        """Yields the eight corner points of the box."""
        for x in (self.minimum.x, self.maximum.x):
            for y in (self.minimum.y, self.maximum.y):
                for z in (self.minimum.z, self.maximum.z):
                    yield Vector3(x, y, z)

    @staticmethod
    def surrounding_box(box0: "AABB", box1: "AABB") -> "AABB":
        small = Vector3(
            min(box0.minimum.x, box1.minimum.x),
            min(box0.minimum.y, box1.minimum.y),
            min(box0.minimum.z, box1.minimum.z)
        )
        big = Vector3(
            max(box0.maximum.x, box1.maximum.x),
            max(box0.maximum.y, box1.maximum.y),
            max(box0.maximum.z, box1.maximum.z)
        )
        return AABB(small, big)

    @staticmethod
    def from_points(points) -> "AABB":
        """Smallest box enclosing an iterable of points."""
        lo = [math.inf, math.inf, math.inf]
        hi = [-math.inf, -math.inf, -math.inf]
        for p in points:
            for c in range(3):
                lo[c] = min(lo[c], p[c])
                hi[c] = max(hi[c], p[c])
        return AABB(Vector3(*lo), Vector3(*hi))

    def __eq__(self, other) -> bool:
        if not isinstance(other, AABB):
            return NotImplemented
        return self.minimum == other.minimum and self.maximum == other.maximum

    def __repr__(self) -> str:
        return f"AABB({self.minimum!r}, {self.maximum!r})"
