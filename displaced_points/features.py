from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np
from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry

from displaced_points.errors import InputError

Coordinate = Tuple[float, float]


def _coordinate_array(coordinates) -> np.ndarray:
    try:
        arr = np.asarray(coordinates, dtype=float)
    except (TypeError, ValueError):
        raise InputError(f"Invalid coordinate: {coordinates!r}.")
    if arr.shape not in ((2,), (3,)):
        raise InputError(f"A point coordinate should have 2 or 3 values, got {coordinates!r}.")
    if not np.all(np.isfinite(arr)):
        raise InputError(f"A point coordinate should be finite, got {coordinates!r}.")
    return arr


def validate_coordinate(coordinates) -> Coordinate:
    """Return the planar (x, y) part of a 2D or 3D coordinate, raising InputError if it is not finite."""
    arr = _coordinate_array(coordinates)
    return float(arr[0]), float(arr[1])


def make_point(coordinates) -> Point:
    """Validated shapely point. An altitude, if given, is kept on the geometry."""
    return Point(*_coordinate_array(coordinates).tolist())


@dataclass
class Feature:
    """An identity-bearing shapely geometry with an open attribute map."""

    geometry: BaseGeometry
    properties: Dict[str, Any] = field(default_factory=dict)
    id: Optional[Any] = None

    def clone(self, geometry: Optional[BaseGeometry] = None) -> "Feature":
        """Copy of the feature with a shallow copy of its properties and, optionally, a new geometry."""
        return Feature(
            geometry=self.geometry if geometry is None else geometry,
            properties=dict(self.properties),
            id=self.id,
        )

    @property
    def coordinates(self) -> Coordinate:
        """Planar coordinate of a point feature."""
        return float(self.geometry.x), float(self.geometry.y)


def point_feature(coordinates, properties: Optional[Dict[str, Any]] = None, id=None) -> Feature:
    return Feature(make_point(coordinates), dict(properties or {}), id)


def validate_point_feature(feature) -> Feature:
    if not isinstance(feature, Feature):
        raise InputError(f"Expected a Feature, got {type(feature).__name__}.")
    geometry = feature.geometry
    if not isinstance(geometry, BaseGeometry) or geometry.geom_type != "Point":
        raise InputError(
            f"Only point features can be displaced, feature {feature.id!r} has a "
            f"{getattr(geometry, 'geom_type', type(geometry).__name__)} geometry."
        )
    if geometry.is_empty or not (np.isfinite(geometry.x) and np.isfinite(geometry.y)):
        raise InputError(f"Feature {feature.id!r} has an empty or non-finite point geometry.")
    return feature


def coordinates_array(features: Iterable[Feature]) -> np.ndarray:
    """Stack the planar coordinates of point features into an (n, 2) array."""
    coordinates = [validate_point_feature(f).coordinates for f in features]
    if not coordinates:
        return np.zeros((0, 2), dtype=float)
    return np.array(coordinates, dtype=float)


class FeatureStore:
    """In-memory feature store which receives the published features of the orchestrator."""

    def __init__(self):
        self._features: List[Feature] = []

    def clear(self):
        self._features = []

    def add_features(self, features: Iterable[Feature]):
        self._features.extend(features)

    def get_features(self) -> List[Feature]:
        return list(self._features)

    def __len__(self):
        return len(self._features)
