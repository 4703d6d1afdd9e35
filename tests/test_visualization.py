import unittest
from unittest.mock import patch, MagicMock

from geoprimitives.boundary import Boundary
from geoprimitives.coordinate import Coordinate
from geoprimitives.route import Route, RouteSegment
from geoprimitives.visualization import create_route_map


def make_coord(lat, lon):
    result, coord = Coordinate.try_create(lat, lon)
    result.raise_if_invalid()
    return coord


def make_route():
    a, b, c = make_coord(0.2, 0.2), make_coord(0.5, 0.6), make_coord(0.8, 0.4)
    segments = [RouteSegment.try_create(a, b)[1], RouteSegment.try_create(b, c, "Climb")[1]]
    result, route = Route.try_create(segments, "Loop")
    result.raise_if_invalid()
    return route


def make_boundary():
    vertices = [make_coord(0, 0), make_coord(0, 1), make_coord(1, 1), make_coord(1, 0)]
    result, boundary = Boundary.try_create(vertices)
    result.raise_if_invalid()
    return boundary


@patch("geoprimitives.visualization.folium.LayerControl")
@patch("geoprimitives.visualization.folium.Icon")
@patch("geoprimitives.visualization.folium.Marker")
@patch("geoprimitives.visualization.folium.Polygon")
@patch("geoprimitives.visualization.folium.PolyLine")
@patch("geoprimitives.visualization.folium.TileLayer")
@patch("geoprimitives.visualization.folium.Map")
class TestCreateRouteMap(unittest.TestCase):
    def test_draws_one_polyline_per_segment(
        self,
        mock_map,
        mock_tilelayer,
        mock_polyline,
        mock_polygon,
        mock_marker,
        mock_icon,
        mock_layercontrol,
    ):
        mock_map_instance = MagicMock(name="map_instance")
        mock_map.return_value = mock_map_instance

        create_route_map(make_route(), "route.html")

        self.assertEqual(mock_polyline.call_count, 2)
        first_points = mock_polyline.call_args_list[0].args[0]
        self.assertEqual(first_points, [[0.2, 0.2], [0.5, 0.6]])
        self.assertIn("Climb", mock_polyline.call_args_list[1].kwargs["popup"])
        mock_polygon.assert_not_called()
        # Start and end markers only
        self.assertEqual(mock_marker.call_count, 2)
        mock_map_instance.save.assert_called_once_with("route.html")

    def test_adds_tile_layers_and_layer_control(
        self,
        mock_map,
        mock_tilelayer,
        mock_polyline,
        mock_polygon,
        mock_marker,
        mock_icon,
        mock_layercontrol,
    ):
        mock_map_instance = MagicMock(name="map_instance")
        mock_map.return_value = mock_map_instance

        create_route_map(make_route(), "route.html")

        mock_map.assert_called_once()
        self.assertIsNone(mock_map.call_args.kwargs["tiles"])
        self.assertEqual(mock_tilelayer.call_count, 2)
        names = [c.kwargs["name"] for c in mock_tilelayer.call_args_list]
        self.assertEqual(names, ["Standard", "Satellite"])
        mock_layercontrol.return_value.add_to.assert_called_once_with(mock_map_instance)

    def test_boundary_overlay_and_bounds(
        self,
        mock_map,
        mock_tilelayer,
        mock_polyline,
        mock_polygon,
        mock_marker,
        mock_icon,
        mock_layercontrol,
    ):
        mock_map_instance = MagicMock(name="map_instance")
        mock_map.return_value = mock_map_instance

        create_route_map(make_route(), "area.html", boundary=make_boundary())

        mock_polygon.assert_called_once()
        vertices = mock_polygon.call_args.args[0]
        self.assertEqual(vertices, [[0.0, 0.0], [0.0, 1.0], [1.0, 1.0], [1.0, 0.0]])
        # Start, end and the boundary centroid
        self.assertEqual(mock_marker.call_count, 3)
        mock_map_instance.fit_bounds.assert_called_once_with([[0.0, 0.0], [1.0, 1.0]])
        self.assertEqual(mock_map.call_args.kwargs["location"], [0.5, 0.5])


if __name__ == "__main__":
    unittest.main()
