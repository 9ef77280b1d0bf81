from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple

import numpy as np
import scipy.sparse as sp
from scipy.sparse.csgraph import connected_components
from scipy.spatial import cKDTree

from displaced_points.errors import InputError
from displaced_points.features import Coordinate, Feature, coordinates_array


class Linkage(str, Enum):
    greedy = "greedy"
    connected = "connected"


def normalize_linkage(linkage) -> Linkage:
    try:
        return Linkage(linkage)
    except ValueError:
        raise ValueError(
            f"Invalid linkage: {linkage}. "
            f'Please select one from: {", ".join(member.value for member in Linkage)}.'
        )


@dataclass(frozen=True)
class Group:
    """Features sharing a location within the grouping tolerance, together with their centroid."""

    centroid: Coordinate
    members: Tuple[Feature, ...]

    def __len__(self):
        return len(self.members)


def greedy_labels(coordinates: np.ndarray, distance: float) -> List[np.ndarray]:
    """Visit the points in order; every point not yet grouped seeds a group with all the ungrouped points inside the
    square of half-width `distance` around it.

    Parameters
    ----------
        coordinates: Array of shape (n, 2).
        distance: Half-width of the square in map units.

    Returns
    -------
        groups: List of sorted index arrays, ordered by their seed point.
    """
    tree = cKDTree(coordinates)
    grouped = np.zeros(len(coordinates), dtype=bool)
    groups = []
    for i in range(len(coordinates)):
        if grouped[i]:
            continue
        neighbors = np.array(tree.query_ball_point(coordinates[i], r=distance, p=np.inf), dtype=int)
        neighbors = np.sort(neighbors[~grouped[neighbors]])
        grouped[neighbors] = True
        groups.append(neighbors)
    return groups


def connected_labels(coordinates: np.ndarray, distance: float) -> List[np.ndarray]:
    """Single linkage grouping: points within `distance` (Chebyshev) of each other end up in the same group."""
    s = len(coordinates)
    tree = cKDTree(coordinates)
    pairs = tree.query_pairs(r=distance, p=np.inf, output_type="ndarray")
    pairs = np.asarray(pairs, dtype=np.int64).reshape(-1, 2)
    adj = sp.csr_matrix(
        (np.ones(len(pairs), dtype=np.float32), (pairs[:, 0], pairs[:, 1])), shape=(s, s)
    )
    _, u = connected_components(csgraph=adj, directed=False, return_labels=True)

    # Order groups by their first member to keep the output stable.
    _, first_idx = np.unique(u, return_index=True)
    return [np.flatnonzero(u == u[i]) for i in np.sort(first_idx)]


class DistanceClustering:
    """Groups point features closer than a distance tolerance.

    Parameters
    ----------
    linkage: str (default 'greedy')
        'greedy' seeds a group at each ungrouped feature, in input order, and collects the ungrouped features inside
        the square of half-width `distance` around it. 'connected' uses single linkage, chaining features closer than
        `distance` to each other.
    """

    def __init__(self, linkage: str = "greedy"):
        self.linkage = normalize_linkage(linkage)

    def group(self, features: Sequence[Feature], distance: float) -> List[Group]:
        distance = float(distance)
        if not np.isfinite(distance) or distance < 0:
            raise InputError(f"The grouping distance should be a non-negative finite number, got {distance}.")

        features = list(features)
        coordinates = coordinates_array(features)
        if len(features) == 0:
            return []

        if self.linkage == Linkage.greedy:
            index_groups = greedy_labels(coordinates, distance)
        else:
            index_groups = connected_labels(coordinates, distance)

        groups = []
        for idx in index_groups:
            if len(idx) == 1:
                # Keep the coordinate exact, a mean could introduce rounding.
                centroid = features[idx[0]].coordinates
            else:
                mean = coordinates[idx].mean(axis=0)
                centroid = (float(mean[0]), float(mean[1]))
            groups.append(Group(centroid, tuple(features[i] for i in idx)))
        return groups
