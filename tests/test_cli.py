import logging
from unittest.mock import patch

import pytest

from geoprimitives import cli
from geoprimitives.config import ValidationConfig

TRACK_GPX = """<gpx version="1.1" creator="geoprimitives-tests" xmlns="http://www.topografix.com/GPX/1/1">
  <trk>
    <name>Lap</name>
    <trkseg>
      <trkpt lat="0.2" lon="0.2"></trkpt>
      <trkpt lat="0.5" lon="0.6"></trkpt>
      <trkpt lat="1.5" lon="0.4"></trkpt>
    </trkseg>
  </trk>
</gpx>
"""

SQUARE_GPX = """<gpx version="1.1" creator="geoprimitives-tests" xmlns="http://www.topografix.com/GPX/1/1">
  <wpt lat="0.0" lon="0.0"></wpt>
  <wpt lat="0.0" lon="1.0"></wpt>
  <wpt lat="1.0" lon="1.0"></wpt>
  <wpt lat="1.0" lon="0.0"></wpt>
</gpx>
"""

SINGLE_POINT_GPX = """<gpx version="1.1" creator="geoprimitives-tests" xmlns="http://www.topografix.com/GPX/1/1">
  <trk><trkseg><trkpt lat="1.0" lon="1.0"></trkpt></trkseg></trk>
</gpx>
"""


@pytest.fixture
def track_file(tmp_path):
    path = tmp_path / "lap.gpx"
    path.write_text(TRACK_GPX, encoding="utf-8")
    return str(path)


@pytest.fixture
def square_file(tmp_path):
    path = tmp_path / "square.gpx"
    path.write_text(SQUARE_GPX, encoding="utf-8")
    return str(path)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def test_route_report(track_file, capsys):
    cli.main([track_file])
    out = capsys.readouterr().out
    assert out.startswith("Lap: 2 segments, Total distance: ")
    assert "Segment 1" in out
    assert "Segment 2" in out


def test_route_report_in_miles(track_file, capsys):
    cli.main([track_file, "--unit", "mi"])
    out = capsys.readouterr().out
    assert " mi (cumulative " in out


def test_boundary_report(track_file, square_file, capsys):
    cli.main([track_file, "--boundary", square_file])
    out = capsys.readouterr().out
    assert "Polygon with 4 vertices" in out
    assert "[0] 0.200000° N, 0.200000° E inside " in out
    assert "[2] 1.500000° N, 0.400000° E outside" in out


def test_single_segment_report(track_file, capsys):
    cli.main([track_file, "--segment", "1", "--name", "Renamed"])
    out = capsys.readouterr().out
    assert out.startswith("Segment: 0.500000° N, 0.600000° E → 1.500000° N, 0.400000° E")
    assert "Cumulative: " in out


def test_segment_index_out_of_range(track_file, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([track_file, "--segment", "5"])
    assert excinfo.value.code == 1
    out = capsys.readouterr().out
    assert "Invalid segment index:" in out
    assert " - segment_index: Segment index 5 is out of range" in out


def test_invalid_route_exits(tmp_path, capsys):
    path = tmp_path / "point.gpx"
    path.write_text(SINGLE_POINT_GPX, encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(path)])
    assert excinfo.value.code == 1
    assert "Invalid route:" in capsys.readouterr().out


def test_missing_file_exits(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(tmp_path / "missing.gpx")])
    assert excinfo.value.code == 1


def test_malformed_file_exits(tmp_path):
    path = tmp_path / "broken.gpx"
    path.write_text("not gpx at all", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(path)])
    assert excinfo.value.code == 1


def test_no_filename_prints_help(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code == 1
    assert "usage:" in capsys.readouterr().out


def test_map_option_writes_map(track_file, square_file, tmp_path):
    output = str(tmp_path / "map.html")
    with patch("geoprimitives.cli.visualization.create_route_map") as mock_create:
        cli.main([track_file, "--boundary", square_file, "--map", output])
    mock_create.assert_called_once()
    route, filename, boundary = mock_create.call_args.args
    assert len(route) == 2
    assert filename == output
    assert boundary is not None


def test_config_from_args():
    parser = cli.create_argument_parser()
    args = parser.parse_args(
        [
            "route.gpx",
            "--decimal-places",
            "4",
            "--reject-zero-length",
            "--allow-self-intersecting",
            "--area-method",
            "geodesic",
        ]
    )
    assert cli.config_from_args(args) == ValidationConfig(
        default_decimal_places=4,
        allow_zero_length_segments=False,
        reject_self_intersecting=False,
        area_method="geodesic",
    )
