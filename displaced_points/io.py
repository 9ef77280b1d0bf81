import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import geopandas as gpd
import numpy as np
import pandas as pd
from shapely.geometry import mapping

from displaced_points.errors import InputError
from displaced_points.features import Feature, validate_point_feature


def _to_builtin(value):
    # pandas hands back numpy scalars and NaN for missing values, neither of which json can serialize.
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and np.isnan(value):
        return None
    return value


def features_from_geodataframe(gdf: gpd.GeoDataFrame, id_column: Optional[str] = None) -> List[Feature]:
    """Turn the rows of a GeoDataFrame of points into features. Every column other than the geometry (and the id
    column) becomes a property. Without an id column, features are identified by their position."""
    geometry_types = gdf.geometry.geom_type.unique().tolist()
    if len(gdf) > 0 and geometry_types != ["Point"]:
        raise InputError(f"Only Point geometries can be displaced, got {', '.join(map(str, geometry_types))}.")
    if id_column is not None and id_column not in gdf.columns:
        raise InputError(f"Missing id column: {id_column}.")

    geometry_column = gdf.geometry.name
    property_columns = [c for c in gdf.columns if c not in (geometry_column, id_column)]
    features = []
    for i, record in enumerate(gdf.to_dict(orient="records")):
        feature = Feature(
            geometry=record[geometry_column],
            properties={c: _to_builtin(record[c]) for c in property_columns},
            id=_to_builtin(record[id_column]) if id_column is not None else i,
        )
        features.append(validate_point_feature(feature))
    return features


def features_to_geodataframe(features: Iterable[Feature], crs=None) -> gpd.GeoDataFrame:
    features = list(features)
    return gpd.GeoDataFrame(
        [f.properties for f in features],
        geometry=[f.geometry for f in features],
        index=pd.Index([f.id for f in features], name="id"),
        crs=crs,
    )


def read_csv_features(
    path: Union[Path, str],
    x: str = "x",
    y: str = "y",
    id_column: Optional[str] = None,
) -> List[Feature]:
    """Read point features from a csv file with coordinate columns `x` and `y`."""
    try:
        df = pd.read_csv(path)
    except (OSError, ValueError) as e:
        raise InputError(f"Unable to read {path}: {e}") from e

    missing = [c for c in (x, y) if c not in df.columns]
    if id_column is not None and id_column not in df.columns:
        missing.append(id_column)
    if missing:
        raise InputError(f"Missing columns in {path}: {', '.join(missing)}.")

    gdf = gpd.GeoDataFrame(
        df.drop(columns=[x, y]), geometry=gpd.points_from_xy(df[x], df[y])
    )
    return features_from_geodataframe(gdf, id_column=id_column)


def read_vector_features(path: Union[Path, str], id_column: Optional[str] = None) -> List[Feature]:
    """Read point features from any vector file geopandas understands, e.g. GeoJSON or GeoPackage."""
    try:
        gdf = gpd.read_file(path)
    except (OSError, ValueError, RuntimeError) as e:
        raise InputError(f"Unable to read {path}: {e}") from e
    return features_from_geodataframe(gdf, id_column=id_column)


def read_features(
    path: Union[Path, str],
    x: str = "x",
    y: str = "y",
    id_column: Optional[str] = None,
) -> List[Feature]:
    path = Path(path)
    if path.suffix.lower() == ".csv":
        return read_csv_features(path, x=x, y=y, id_column=id_column)
    return read_vector_features(path, id_column=id_column)


def feature_to_geojson(feature: Feature) -> Dict[str, Any]:
    item = {
        "type": "Feature",
        "geometry": mapping(feature.geometry),
        "properties": {k: _to_builtin(v) for k, v in feature.properties.items()},
    }
    if feature.id is not None:
        item["id"] = _to_builtin(feature.id)
    return item


def features_to_geojson(features: Iterable[Feature]) -> Dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [feature_to_geojson(f) for f in features],
    }


def write_geojson(features: Iterable[Feature], path: Union[Path, str]):
    """Write features as a GeoJSON FeatureCollection, keeping their order, ids and nested properties such as the
    ring radius."""
    with open(path, "w") as f:
        json.dump(features_to_geojson(features), f, indent=2)
