from dataclasses import dataclass
from enum import Enum
from math import pi, sqrt
from typing import Dict, Sequence, Tuple

import numpy as np

from displaced_points.circle_functions import radius_from_circumference
from displaced_points.errors import ConfigurationError, InputError
from displaced_points.features import Coordinate, Feature, validate_coordinate

# Treats a clearance sum as one leg of a right isosceles triangle. A tunable heuristic, not a packing bound.
MARGIN_FACTOR = sqrt(2)


@dataclass(frozen=True)
class Clearances:
    """Marker radii, in pixels, that displaced points have to keep clear of."""

    center: float = 6.0
    displaced: float = 6.0

    @property
    def pair(self) -> float:
        return self.center + self.displaced


@dataclass(frozen=True)
class RingLayout:
    """Placement of a group around its centroid.

    ring_radius is in pixels and is what the ring marker stores. ring_radius_scaled is the same radius in map units
    (ring_radius * resolution), the distance of every displaced coordinate from the centroid.
    """

    ring_radius: float
    ring_radius_scaled: float
    ring_coordinate: Coordinate
    displaced_coordinates: Tuple[Coordinate, ...]


def validate_resolution(resolution) -> float:
    try:
        resolution = float(resolution)
    except (TypeError, ValueError):
        raise InputError(f"The resolution should be a number, got {resolution!r}.")
    if not np.isfinite(resolution) or resolution <= 0:
        raise InputError(f"The resolution should be a positive finite number, got {resolution}.")
    return resolution


def map_units_from_pixels(value: float, resolution: float) -> float:
    return value * validate_resolution(resolution)


def pixels_from_map_units(value: float, resolution: float) -> float:
    return value / validate_resolution(resolution)


class PlacementStrategy:
    """Computes where the members of a group are drawn around its centroid."""

    def place(
        self,
        centroid: Coordinate,
        clearances: Clearances,
        members: Sequence[Feature],
        resolution: float,
    ) -> RingLayout:
        raise NotImplementedError


class RingPlacement(PlacementStrategy):
    """Places the members of a group at equal angular steps on a single ring around the centroid.

    The ring is large enough for its circumference to hold n margined marker spacings and never smaller than half a
    margined spacing, and it is pushed out by the margined center marker radius. Angles follow the compass
    convention: the first member sits due north of the centroid and the next ones follow clockwise, i.e. the offset
    at angle a is (r sin a, r cos a).
    """

    margin_factor = MARGIN_FACTOR

    def ring_radius(self, clearances: Clearances, n_members: int) -> float:
        margined_pair_clearance = clearances.pair * self.margin_factor
        margined_center_clearance = clearances.center * self.margin_factor

        min_ring_radius = radius_from_circumference(n_members * margined_pair_clearance)
        displacement_radius = max(margined_pair_clearance / 2, min_ring_radius)
        return displacement_radius + margined_center_clearance

    def place(self, centroid, clearances, members, resolution):
        n = len(members)
        if n < 2:
            raise ValueError(
                f"Ring placement needs at least 2 members, got {n}. Single features are not displaced."
            )
        resolution = validate_resolution(resolution)
        cx, cy = validate_coordinate(centroid)

        ring_radius = self.ring_radius(clearances, n)
        ring_radius_scaled = map_units_from_pixels(ring_radius, resolution)

        angles = np.arange(n) * (2 * pi / n)
        xs = cx + ring_radius_scaled * np.sin(angles)
        ys = cy + ring_radius_scaled * np.cos(angles)

        return RingLayout(
            ring_radius=ring_radius,
            ring_radius_scaled=ring_radius_scaled,
            ring_coordinate=(cx, cy),
            displaced_coordinates=tuple(zip(xs.tolist(), ys.tolist())),
        )


class PlacementMethod(str, Enum):
    ring = "ring"


_PLACEMENT_STRATEGIES: Dict[str, PlacementStrategy] = {
    PlacementMethod.ring.value: RingPlacement(),
}


def _method_name(method) -> str:
    if isinstance(method, Enum):
        return method.value
    if isinstance(method, str):
        return method
    raise ConfigurationError(f"Invalid placement method: {method!r}.")


def available_placement_methods() -> Tuple[str, ...]:
    return tuple(_PLACEMENT_STRATEGIES)


def register_placement(method, strategy: PlacementStrategy):
    """Make `strategy` available under the placement method name `method`."""
    if not isinstance(strategy, PlacementStrategy):
        raise ConfigurationError(
            f"A placement strategy should be a PlacementStrategy, got {type(strategy).__name__}."
        )
    _PLACEMENT_STRATEGIES[_method_name(method)] = strategy


def resolve_placement(method) -> PlacementStrategy:
    name = _method_name(method)
    try:
        return _PLACEMENT_STRATEGIES[name]
    except KeyError:
        raise ConfigurationError(
            f"Invalid placement method: {name}. "
            f'Please select one from: {", ".join(available_placement_methods())}.'
        )
