from displaced_points.circle_functions import CircleProperties, radius_from_circumference
from displaced_points.clustering import DistanceClustering, Group, Linkage
from displaced_points.displacement import (
    DisplacedPoints,
    DisplacementResult,
    print_diagnostics,
)
from displaced_points.errors import ConfigurationError, DisplacedPointsError, InputError
from displaced_points.features import Feature, FeatureStore, make_point, point_feature
from displaced_points.placement import (
    Clearances,
    PlacementMethod,
    PlacementStrategy,
    RingLayout,
    RingPlacement,
    register_placement,
    resolve_placement,
)
