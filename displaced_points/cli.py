from pathlib import Path
from typing import Optional

import typer

from displaced_points.clustering import Linkage
from displaced_points.displacement import DisplacedPoints, print_diagnostics
from displaced_points.errors import DisplacedPointsError
from displaced_points.io import read_features, write_geojson

app = typer.Typer(add_completion=False)


@app.command()
def main(
    input_path: Path,
    output_path: Path,
    resolution: float = 1.0,
    distance: float = 20.0,
    center_point_radius: float = 6.0,
    displaced_point_radius: float = 6.0,
    placement_method: str = "ring",
    linkage: Linkage = Linkage.greedy,
    draw_connectors: bool = False,
    x: str = "x",
    y: str = "y",
    id_column: Optional[str] = None,
    verbose: bool = False,
):
    """Displace co-located points of a csv or GeoJSON file and write the result as a GeoJSON FeatureCollection."""
    try:
        displaced_points = DisplacedPoints(
            placement_method=placement_method,
            center_point_radius=center_point_radius,
            displaced_point_radius=displaced_point_radius,
            distance=distance,
            linkage=linkage.value,
            draw_connectors=draw_connectors,
            diagnostics=print_diagnostics if verbose else None,
        )

        if verbose:
            print(f"Loading {input_path}...")
        displaced_points.set_features(read_features(input_path, x=x, y=y, id_column=id_column))

        result = displaced_points.refresh(resolution)
        write_geojson(displaced_points.all_features(), output_path)
    except DisplacedPointsError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)

    print(
        f"Displaced {len(result.displaced_features)} of {len(displaced_points.features)} points "
        f"around {len(result.rings)} rings, written to {output_path}."
    )


def run():
    app()


if __name__ == "__main__":
    run()
