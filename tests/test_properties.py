import pytest
from hypothesis import given, strategies as st, assume

from geoprimitives.boundary import Boundary
from geoprimitives.coordinate import Coordinate
from geoprimitives.distance import haversine_distance, point_to_segment_distance
from geoprimitives.route import Route, RouteSegment
from geoprimitives.validation import ErrorKind


def build_coordinate(latitude, longitude):
    result, coord = Coordinate.try_create(latitude, longitude)
    result.raise_if_invalid()
    return coord


# Strategy for valid coordinates at the default six decimal places
valid_lat = st.floats(-90.0, 90.0).map(lambda x: round(x, 6))
valid_lon = st.floats(-180.0, 180.0).map(lambda x: round(x, 6))
valid_coordinate = st.builds(build_coordinate, valid_lat, valid_lon)


class TestCoordinateProperties:
    @given(valid_lat, valid_lon)
    def test_in_range_values_are_accepted(self, lat, lon):
        """Any in-range value with at most six decimals builds a coordinate."""
        result, coord = Coordinate.try_create(lat, lon)
        assert result.is_valid
        assert coord.latitude == lat
        assert coord.longitude == lon

    @given(st.floats(90.0, 1e6, exclude_min=True), valid_lon)
    def test_latitude_above_range_is_rejected(self, lat, lon):
        result, coord = Coordinate.try_create(lat, lon)
        assert coord is None
        assert ErrorKind.RANGE in [e.kind for e in result.errors_for("latitude")]

    @given(valid_lat, st.floats(-1e6, -180.0, exclude_max=True))
    def test_longitude_below_range_is_rejected(self, lat, lon):
        result, coord = Coordinate.try_create(lat, lon)
        assert coord is None
        assert ErrorKind.RANGE in [e.kind for e in result.errors_for("longitude")]


class TestDistanceProperties:
    @given(valid_coordinate, valid_coordinate)
    def test_distance_is_non_negative(self, pos1, pos2):
        """Distance between any two points is always non-negative."""
        assert haversine_distance(pos1, pos2) >= 0

    @given(valid_coordinate)
    def test_distance_to_self_is_zero(self, pos):
        """Distance from a point to itself is always zero."""
        assert haversine_distance(pos, pos) == 0

    @given(valid_coordinate, valid_coordinate)
    def test_distance_is_symmetric(self, pos1, pos2):
        """Distance from A to B equals distance from B to A."""
        dist_ab = haversine_distance(pos1, pos2)
        dist_ba = haversine_distance(pos2, pos1)
        assert abs(dist_ab - dist_ba) < 1e-6

    @given(valid_coordinate, valid_coordinate)
    def test_distance_bounded_by_half_circumference(self, pos1, pos2):
        assert haversine_distance(pos1, pos2) <= 20015.1

    @given(valid_coordinate, valid_coordinate, valid_coordinate)
    def test_triangle_inequality(self, pos1, pos2, pos3):
        """For any triangle, sum of two sides >= third side."""
        d12 = haversine_distance(pos1, pos2)
        d23 = haversine_distance(pos2, pos3)
        d13 = haversine_distance(pos1, pos3)
        assert d12 + d23 >= d13 - 1e-6

    @given(valid_coordinate, valid_coordinate, valid_coordinate)
    def test_segment_distance_not_beyond_endpoints(self, point, start, end):
        """The nearest point of a segment is never farther than its endpoints."""
        distance = point_to_segment_distance(point, start, end)
        assert distance >= 0
        assert distance <= min(
            haversine_distance(point, start), haversine_distance(point, end)
        ) + 1e-9


class TestRouteProperties:
    @given(st.lists(valid_coordinate, min_size=2, max_size=12))
    def test_cumulative_distances(self, points):
        """Cumulative distances never decrease and end at the total."""
        segments = [
            RouteSegment.try_create(a, b)[1] for a, b in zip(points, points[1:])
        ]
        result, route = Route.try_create(segments)
        assert result.is_valid

        cumulative = [route.get_cumulative_distance(i) for i in range(len(route))]
        assert all(b >= a for a, b in zip(cumulative, cumulative[1:]))
        assert cumulative[-1] == route.total_distance_km
        assert route.total_distance_km == pytest.approx(
            sum(s.distance.kilometers for s in segments)
        )
        assert route.get_waypoints() == tuple(points)

    @given(st.lists(valid_coordinate, min_size=2, max_size=8))
    def test_same_segments_give_equal_routes(self, points):
        segments = [
            RouteSegment.try_create(a, b)[1] for a, b in zip(points, points[1:])
        ]
        assert Route.try_create(segments)[1] == Route.try_create(list(segments))[1]


# Rectangles away from the poles and the antimeridian
rect_lat = st.floats(-60.0, 59.0).map(lambda x: round(x, 6))
rect_lon = st.floats(-170.0, 169.0).map(lambda x: round(x, 6))
rect_size = st.floats(0.1, 1.0).map(lambda x: round(x, 6))
fraction = st.floats(0.01, 0.99)


class TestBoundaryProperties:
    @given(rect_lat, rect_lon, rect_size, rect_size, fraction, fraction)
    def test_interior_points_are_contained(self, lat, lon, height, width, fy, fx):
        """Points strictly inside an axis-aligned rectangle are contained."""
        top = round(lat + height, 6)
        right = round(lon + width, 6)
        corners = [(lat, lon), (lat, right), (top, right), (top, lon)]
        _, boundary = Boundary.try_create([build_coordinate(*c) for c in corners])

        point = build_coordinate(
            round(lat + (top - lat) * fy, 6), round(lon + (right - lon) * fx, 6)
        )
        assert boundary.contains(point)
        assert boundary.bounding_box.contains(point)

    @given(valid_coordinate, valid_coordinate, valid_coordinate)
    def test_area_independent_of_winding(self, a, b, c):
        """Reversing the vertex order never changes the area."""
        result, forward = Boundary.try_create([a, b, c])
        assume(forward is not None)
        _, backward = Boundary.try_create([c, b, a])
        assert forward.area_km2 >= 0
        assert forward.area_km2 == pytest.approx(backward.area_km2, rel=1e-9, abs=1e-6)
        assert forward.perimeter_km == pytest.approx(backward.perimeter_km)
