from dataclasses import dataclass
from numbers import Real
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from shapely.geometry import LineString, Point
from sklearn.base import BaseEstimator

from displaced_points.clustering import DistanceClustering, Group
from displaced_points.errors import ConfigurationError, DisplacedPointsError, InputError
from displaced_points.features import Feature, FeatureStore, validate_point_feature
from displaced_points.placement import (
    Clearances,
    PlacementStrategy,
    map_units_from_pixels,
    resolve_placement,
    validate_resolution,
)

RING_PROPERTY = "ring"
CONNECTOR_PROPERTY = "connector"

DiagnosticsHook = Callable[[str, Dict[str, Any]], None]


@dataclass(frozen=True)
class DisplacementResult:
    """Snapshot of everything a refresh produces, listed bottom to top in drawing order."""

    connectors: Tuple[Feature, ...] = ()
    rings: Tuple[Feature, ...] = ()
    features: Tuple[Feature, ...] = ()
    displaced_features: Tuple[Feature, ...] = ()

    def all_features(self) -> List[Feature]:
        return [
            *self.connectors,
            *self.rings,
            *self.features,
            *self.displaced_features,
        ]

    def __len__(self):
        return (
            len(self.connectors)
            + len(self.rings)
            + len(self.features)
            + len(self.displaced_features)
        )


def print_diagnostics(event: str, details: Dict[str, Any]):
    """Diagnostics hook which prints every event, for verbose runs."""
    rendered = ", ".join(f"{key}={value}" for key, value in details.items())
    print(f"[displaced-points] {event}: {rendered}" if rendered else f"[displaced-points] {event}")


def _check_positive(value, name):
    if isinstance(value, bool) or not isinstance(value, Real) or not np.isfinite(value) or value <= 0:
        raise ConfigurationError(f"The {name} should be a positive finite number, got {value!r}.")


class DisplacedPoints(BaseEstimator):
    """Point displacement for co-located map features.

    Features which fall within a distance tolerance of each other are grouped and drawn around their centroid on a
    displacement ring, so that every one of them stays visible. The grouping itself is delegated to a clustering
    collaborator and is never altered.

    Parameters
    ----------
    placement_method: str (default 'ring')
        Name of the registered placement strategy used to lay out groups. Unknown names raise ConfigurationError
        immediately.

    center_point_radius: float (default 6)
        Radius in pixels of the marker drawn at the centroid of a group.

    displaced_point_radius: float (default 6)
        Radius in pixels of the markers of the displaced features.

    distance: float (default 20)
        Grouping tolerance in pixels. It is turned to map units with the resolution of each refresh.

    linkage: str (default 'greedy')
        Linkage of the default DistanceClustering. Ignored when `clustering` is given.

    draw_connectors: bool (default False)
        If true, a line from the centroid to each displaced feature is added to the output.

    clustering: Optional[object] (default None)
        Grouping collaborator exposing `group(features, distance) -> list[Group]`. Defaults to DistanceClustering.

    viewport: Optional[object] (default None)
        Object exposing the current `resolution` (map units per pixel), read once per refresh when no resolution is
        passed to `refresh`.

    feature_store: Optional[object] (default None)
        Receives the published features through `clear()` and `add_features(features)`. Defaults to an in-memory
        FeatureStore.

    diagnostics: Optional[Callable[[str, dict], None]] (default None)
        Hook called with an event name and its details on clear, refresh and every displaced group.

    Attributes
    ----------
    result_: DisplacementResult
        The last published snapshot. It is replaced as a whole on every refresh and clear.
    """

    def __init__(
        self,
        placement_method: str = "ring",
        center_point_radius: float = 6.0,
        displaced_point_radius: float = 6.0,
        distance: float = 20.0,
        linkage: str = "greedy",
        draw_connectors: bool = False,
        clustering: Optional[Any] = None,
        viewport: Optional[Any] = None,
        feature_store: Optional[Any] = None,
        diagnostics: Optional[DiagnosticsHook] = None,
    ):
        self.placement_method = placement_method
        self.center_point_radius = center_point_radius
        self.displaced_point_radius = displaced_point_radius
        self.distance = distance
        self.linkage = linkage
        self.draw_connectors = draw_connectors
        self.clustering = clustering
        self.viewport = viewport
        self.feature_store = feature_store
        self.diagnostics = diagnostics

        self._check_configuration()
        self._store = FeatureStore() if feature_store is None else feature_store
        self._source_features: Tuple[Feature, ...] = ()
        self.result_ = DisplacementResult()

    def _check_configuration(self):
        self._strategy: PlacementStrategy = resolve_placement(self.placement_method)
        _check_positive(self.center_point_radius, "center point radius")
        _check_positive(self.displaced_point_radius, "displaced point radius")
        if (
            isinstance(self.distance, bool)
            or not isinstance(self.distance, Real)
            or not np.isfinite(self.distance)
            or self.distance < 0
        ):
            raise ConfigurationError(
                f"The distance should be a non-negative finite number, got {self.distance!r}."
            )
        if self.clustering is None:
            try:
                self._clustering = DistanceClustering(linkage=self.linkage)
            except ValueError as e:
                raise ConfigurationError(str(e))
        elif not callable(getattr(self.clustering, "group", None)):
            raise ConfigurationError("The clustering collaborator should provide a `group(features, distance)` method.")
        else:
            self._clustering = self.clustering
        self._clearances = Clearances(
            center=float(self.center_point_radius),
            displaced=float(self.displaced_point_radius),
        )

    def set_params(self, **params):
        previous = self.get_params(deep=False)
        super().set_params(**params)
        try:
            self._check_configuration()
        except ConfigurationError:
            super().set_params(**previous)
            self._check_configuration()
            raise
        if "feature_store" in params:
            self._store = FeatureStore() if self.feature_store is None else self.feature_store
        return self

    @property
    def clearances(self) -> Clearances:
        return self._clearances

    @property
    def store(self):
        return self._store

    @property
    def features(self) -> Tuple[Feature, ...]:
        """The source features, i.e. the input of the grouping."""
        return self._source_features

    def set_features(self, features: Iterable[Feature]):
        self._source_features = tuple(validate_point_feature(f) for f in features)

    def add_features(self, features: Iterable[Feature]):
        self._source_features = self._source_features + tuple(
            validate_point_feature(f) for f in features
        )

    def _emit(self, event: str, **details):
        if self.diagnostics is not None:
            self.diagnostics(event, details)

    def _capture_resolution(self, resolution) -> float:
        if resolution is None:
            if self.viewport is None:
                raise InputError("No resolution was given and no viewport is configured to read one from.")
            resolution = self.viewport.resolution
        return validate_resolution(resolution)

    def clear(self):
        """Empty the feature store and drop every derived feature. Safe to call at any time."""
        self._store.clear()
        self.result_ = DisplacementResult()
        self._emit("clear")

    def displace(self, groups: Sequence[Group], resolution: float) -> DisplacementResult:
        """Lay out the given groups at `resolution` without touching the state of the orchestrator.

        Single feature groups pass their member through unchanged, the other groups are handed to the configured
        placement strategy.
        """
        resolution = validate_resolution(resolution)

        connectors: List[Feature] = []
        rings: List[Feature] = []
        features: List[Feature] = []
        displaced_features: List[Feature] = []

        for group in groups:
            members = [validate_point_feature(f) for f in group.members]
            if len(members) == 0:
                raise InputError(f"Groups should have at least one member, got an empty group at {group.centroid}.")
            if len(members) == 1:
                features.append(members[0])
                continue

            layout = self._strategy.place(group.centroid, self._clearances, members, resolution)
            if len(layout.displaced_coordinates) != len(members):
                raise DisplacedPointsError(
                    f"The placement strategy returned {len(layout.displaced_coordinates)} coordinates "
                    f"for a group of {len(members)} members."
                )
            rings.append(
                Feature(
                    geometry=Point(layout.ring_coordinate),
                    properties={RING_PROPERTY: {"radius": layout.ring_radius}},
                )
            )
            for member, coordinates in zip(members, layout.displaced_coordinates):
                # Displaced positions are planar, an altitude of the member is not carried over.
                displaced = member.clone(geometry=Point(coordinates))
                displaced_features.append(displaced)
                if self.draw_connectors:
                    connectors.append(
                        Feature(
                            geometry=LineString((layout.ring_coordinate, coordinates)),
                            properties={CONNECTOR_PROPERTY: True, "feature_id": member.id},
                        )
                    )
            self._emit(
                "group",
                centroid=layout.ring_coordinate,
                size=len(members),
                ring_radius=layout.ring_radius,
                ring_radius_scaled=layout.ring_radius_scaled,
            )

        return DisplacementResult(
            connectors=tuple(connectors),
            rings=tuple(rings),
            features=tuple(features),
            displaced_features=tuple(displaced_features),
        )

    def refresh(self, resolution: Optional[float] = None) -> DisplacementResult:
        """Recompute the displacement from scratch and publish it.

        Parameters
        ----------
        resolution: Optional[float] (default None)
            Map units per pixel. If None, it is read once from the viewport.

        Returns
        -------
        result: The new DisplacementResult, also available as `result_`.
        """
        resolution = self._capture_resolution(resolution)
        self.clear()

        groups = self._clustering.group(
            self._source_features, map_units_from_pixels(self.distance, resolution)
        )
        result = self.displace(groups, resolution)

        self.result_ = result
        self._store.add_features(result.all_features())
        self._emit(
            "refresh",
            resolution=resolution,
            groups=len(groups),
            displaced=len(result.displaced_features),
        )
        return result

    def all_features(self) -> List[Feature]:
        """Connectors, rings, single features and displaced features of the last refresh, in drawing order."""
        return self.result_.all_features()
