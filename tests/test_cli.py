import json

import pandas as pd
from typer.testing import CliRunner
from utils import generate_colocated_features

from displaced_points.cli import app
from displaced_points.io import write_geojson

runner = CliRunner()


def test_cli_csv(tmp_path):
    input_path = tmp_path / "points.csv"
    output_path = tmp_path / "displaced.geojson"
    pd.DataFrame({"x": [0.0, 0.0, 0.0, 100.0], "y": [0.0, 0.0, 0.0, 100.0]}).to_csv(input_path, index=False)

    result = runner.invoke(app, [str(input_path), str(output_path), "--resolution", "1"])

    assert result.exit_code == 0, result.output
    assert "Displaced 3 of 4 points around 1 rings" in result.output
    collection = json.loads(output_path.read_text())
    # One ring, one single point, three displaced points.
    assert len(collection["features"]) == 5


def test_cli_geojson_with_connectors_and_verbose(tmp_path):
    input_path = tmp_path / "points.geojson"
    output_path = tmp_path / "displaced.geojson"
    write_geojson(generate_colocated_features(), input_path)

    result = runner.invoke(
        app,
        [str(input_path), str(output_path), "--draw-connectors", "--linkage", "connected", "--verbose"],
    )

    assert result.exit_code == 0, result.output
    assert "[displaced-points] refresh" in result.output
    collection = json.loads(output_path.read_text())
    assert collection["features"][0]["geometry"]["type"] == "LineString"


def test_cli_unknown_placement_method(tmp_path):
    input_path = tmp_path / "points.geojson"
    write_geojson(generate_colocated_features(), input_path)

    result = runner.invoke(
        app, [str(input_path), str(tmp_path / "out.geojson"), "--placement-method", "spiral"]
    )

    assert result.exit_code == 1
    assert "Invalid placement method: spiral" in result.output


def test_cli_invalid_resolution(tmp_path):
    input_path = tmp_path / "points.geojson"
    write_geojson(generate_colocated_features(), input_path)

    result = runner.invoke(app, [str(input_path), str(tmp_path / "out.geojson"), "--resolution", "0"])

    assert result.exit_code == 1
    assert "resolution" in result.output


def test_cli_malformed_input(tmp_path):
    input_path = tmp_path / "broken.geojson"
    input_path.write_text("{\"type\": \"FeatureCollection\", \"features\": [")

    result = runner.invoke(app, [str(input_path), str(tmp_path / "out.geojson")])

    assert result.exit_code == 1
    assert "Error: Unable to read" in result.output
