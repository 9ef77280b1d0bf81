import numpy as np

from displaced_points.features import Feature, point_feature


def default_group_centers() -> np.ndarray:
    return np.array(
        [
            [0, 0],
            [1_000, 0],
            [0, 1_000],
            [-1_000, -1_000],
        ],
        dtype=float,
    )


def generate_colocated_features(
    centers: np.ndarray = default_group_centers(),
    group_sizes=(4, 1, 3, 2),
    jitter: float = 0.0,
    seed: int = 42,
) -> list[Feature]:
    """Create point features stacked on a few centers, optionally jittered by at most `jitter` map units per axis.

    Features are emitted center by center, so the features of the i-th center are consecutive. Their ids are their
    position in the list and their properties record the index of the center they belong to.

    Args:
        centers: Array of shape (k, 2) with the locations to stack features on.
        group_sizes: Number of features for each center.
        jitter: Half-width of the uniform noise added to each coordinate.
        seed: Seed of the noise.

    Returns:
        A list with sum(group_sizes) point features.
    """
    if len(centers) != len(group_sizes):
        raise ValueError(f"Got {len(centers)} centers but {len(group_sizes)} group sizes.")

    rng = np.random.default_rng(seed)
    features = []
    for center_idx, (center, size) in enumerate(zip(centers, group_sizes)):
        noise = rng.uniform(-jitter, jitter, size=(size, 2)) if jitter > 0 else np.zeros((size, 2))
        for offset in noise:
            features.append(
                point_feature(
                    center + offset,
                    {"center": center_idx, "name": f"feature-{len(features)}"},
                    id=len(features),
                )
            )
    return features


def angles_from_north(coordinates, centroid) -> np.ndarray:
    """Clockwise angles from north, in [0, 2π), of coordinates around a centroid."""
    offsets = np.asarray(coordinates, dtype=float) - np.asarray(centroid, dtype=float)
    return np.mod(np.arctan2(offsets[:, 0], offsets[:, 1]), 2 * np.pi)


class StaticViewport:
    def __init__(self, resolution):
        self.resolution = resolution


class CountingViewport:
    """Viewport whose resolution changes every time it is read."""

    def __init__(self, resolution=1.0):
        self._resolution = resolution
        self.reads = 0

    @property
    def resolution(self):
        self.reads += 1
        value = self._resolution
        self._resolution *= 2
        return value
