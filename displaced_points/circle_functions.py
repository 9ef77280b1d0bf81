from dataclasses import dataclass
from math import pi

import numpy as np

from displaced_points.errors import InputError


def _check_non_negative(value, name):
    arr = np.asarray(value, dtype=float)
    if not np.all(np.isfinite(arr)):
        raise InputError(f"The {name} should be finite, got {value}.")
    if np.any(arr < 0):
        raise InputError(f"The {name} should be non-negative, got {value}.")
    return arr


def radius_from_circumference(circumference):
    """Radius of the circle whose circumference equals the requested total spacing.

    This is a continuous relaxation: it provides enough arc length for n items with a fixed pairwise spacing to fit
    around the circle, without an exact packing guarantee for small n.

    Parameters
    ----------
        circumference: A non-negative real or an array of them.

    Returns
    -------
        radius: circumference / 2π, with the same shape as the input. A float is returned for scalar input.
    """
    circumference = _check_non_negative(circumference, "circumference")
    radius = circumference / (2 * pi)
    return float(radius) if radius.ndim == 0 else radius


def circumference_from_radius(radius):
    """Circumference 2πr of a circle, scalar or vectorised over an array of radii."""
    radius = _check_non_negative(radius, "radius")
    circumference = 2 * pi * radius
    return float(circumference) if circumference.ndim == 0 else circumference


def area_from_radius(radius):
    radius = _check_non_negative(radius, "radius")
    area = pi * radius**2
    return float(area) if area.ndim == 0 else area


def radius_from_area(area):
    area = _check_non_negative(area, "area")
    radius = np.sqrt(area / pi)
    return float(radius) if radius.ndim == 0 else radius


@dataclass(frozen=True)
class CircleProperties:
    radius: float

    @property
    def diameter(self) -> float:
        return 2 * self.radius

    @property
    def circumference(self) -> float:
        return circumference_from_radius(self.radius)

    @property
    def area(self) -> float:
        return area_from_radius(self.radius)

    @classmethod
    def from_radius(cls, radius: float) -> "CircleProperties":
        return cls(float(_check_non_negative(radius, "radius")))

    @classmethod
    def from_circumference(cls, circumference: float) -> "CircleProperties":
        return cls(radius_from_circumference(circumference))

    @classmethod
    def from_area(cls, area: float) -> "CircleProperties":
        return cls(radius_from_area(area))
