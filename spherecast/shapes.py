"""
Ray/sphere intersection.

The scene holds a single sphere, so there is no Hittable hierarchy here:
just the sphere, its quadratic solver and the record of a hit.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import math

from .vec3 import Vec3, Point3
from .ray import Ray


@dataclass(frozen=True)
class HitRecord:
    """Stores information about a ray-sphere intersection.

    Attributes:
        t: The ray parameter at intersection
        point: The intersection point in world space
        normal: The outward unit surface normal at the intersection
    """
    t: float
    point: Point3
    normal: Vec3


class Sphere:
    """A sphere defined by center and radius."""

    __slots__ = ('center', 'radius')

    def __init__(self, center: Point3, radius: float):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere (must be positive)
        """
        if radius <= 0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        self.center = center
        self.radius = float(radius)

    def hit(self, ray: Ray, t_min: float = 0.0, t_max: float = math.inf) -> Optional[HitRecord]:
        """Test ray-sphere intersection using the quadratic formula.

        The equation (P-C)·(P-C) = r² where P = ray.at(t)
        expands to: t²(d·d) + 2t(d·(O-C)) + (O-C)·(O-C) - r² = 0
        which is the quadratic at² + bt + c = 0.

        Only roots with t_min < t <= t_max count, and the smaller one wins,
        so a ray starting inside the sphere reports its exit point and a
        sphere entirely behind the origin is a miss.
        """
        oc = ray.origin - self.center
        a = ray.direction.length_squared()
        if a == 0:
            raise ValueError("Ray direction must be non-zero")
        b = 2.0 * ray.direction.dot(oc)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = b * b - 4.0 * a * c
        if discriminant < 0:
            return None

        sqrtd = math.sqrt(discriminant)

        # Find the nearest root in the acceptable range
        root = (-b - sqrtd) / (2.0 * a)
        if root <= t_min or root > t_max:
            root = (-b + sqrtd) / (2.0 * a)
            if root <= t_min or root > t_max:
                return None

        point = ray.at(root)
        return HitRecord(
            t=root,
            point=point,
            normal=(point - self.center) / self.radius
        )

    def intersect(self, ray: Ray) -> Optional[float]:
        """Return the nearest ray parameter in front of the origin, or None."""
        record = self.hit(ray)
        return record.t if record is not None else None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sphere):
            return NotImplemented
        return self.center == other.center and self.radius == other.radius

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"
