#!/usr/bin/env python3
"""
Route and boundary visualization using folium maps.
"""

from typing import List, Optional, Tuple
import logging

import folium

from .boundary import Boundary
from .route import Route

logger = logging.getLogger(__name__)

ROUTE_COLOR = "#2E86AB"
BOUNDARY_COLOR = "#D23C4C"


def _map_bounds(
    route: Route, boundary: Optional[Boundary]
) -> Tuple[float, float, float, float]:
    """Return (south, west, north, east) covering the route and the boundary."""
    latitudes = [c.latitude for c in route.get_waypoints()]
    longitudes = [c.longitude for c in route.get_waypoints()]
    if boundary is not None:
        bbox = boundary.bounding_box
        latitudes += [bbox.min_latitude, bbox.max_latitude]
        longitudes += [bbox.min_longitude, bbox.max_longitude]
    return min(latitudes), min(longitudes), max(latitudes), max(longitudes)


def _segment_popup(route: Route, index: int) -> str:
    segment = route.segments[index]
    cumulative = route.get_cumulative_distance(index)
    label = segment.name or f"Segment {index + 1}"
    return (
        f"<b>{label}</b><br>"
        f"{segment.distance.to_formatted_string()}<br>"
        f"Cumulative: {cumulative:.2f} km"
    )


def create_route_map(
    route: Route,
    output_filename: str,
    boundary: Optional[Boundary] = None,
) -> None:
    """
    Create an interactive map showing the route and an optional boundary, save as HTML.

    Args:
        route: Route to draw, one polyline per segment
        output_filename: Path where HTML map file should be saved
        boundary: Optional boundary polygon to overlay
    """
    south, west, north, east = _map_bounds(route, boundary)
    center_lat = (south + north) / 2
    center_lon = (west + east) / 2

    logger.debug(f"Creating map centered at ({center_lat:.4f}, {center_lon:.4f})")

    route_map = folium.Map(location=[center_lat, center_lon], tiles=None)

    folium.TileLayer(
        tiles="CartoDB positron",
        attr=(
            "&copy; <a href='https://www.openstreetmap.org/copyright'>OpenStreetMap</a> "
            "contributors &copy; <a href='https://carto.com/attributions'>CARTO</a>"
        ),
        name="Standard",
        control=True,
        show=True,
    ).add_to(route_map)

    folium.TileLayer(
        tiles="https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
        attr=(
            "Tiles &copy; Esri &mdash; Source: Esri, i-cubed, USDA, USGS, AEX, GeoEye, "
            "Getmapping, Aerogrid, IGN, IGP, UPR-EGP, and the GIS User Community"
        ),
        name="Satellite",
        control=True,
        show=False,
    ).add_to(route_map)

    if boundary is not None:
        vertices: List[List[float]] = [
            [v.latitude, v.longitude] for v in boundary.vertices
        ]
        folium.Polygon(
            vertices,
            color=BOUNDARY_COLOR,
            weight=2,
            fill=True,
            fill_opacity=0.1,
            popup=boundary.get_description(),
        ).add_to(route_map)
        folium.Marker(
            [boundary.centroid.latitude, boundary.centroid.longitude],
            popup="Boundary centroid",
            icon=folium.Icon(color="red", icon="info-sign"),
        ).add_to(route_map)

    for index, segment in enumerate(route.segments):
        folium.PolyLine(
            [
                [segment.start.latitude, segment.start.longitude],
                [segment.end.latitude, segment.end.longitude],
            ],
            color=ROUTE_COLOR,
            weight=3,
            opacity=0.8,
            popup=_segment_popup(route, index),
        ).add_to(route_map)

    folium.Marker(
        [route.starting_point.latitude, route.starting_point.longitude],
        popup="Start",
        icon=folium.Icon(color="green", icon="play"),
    ).add_to(route_map)

    folium.Marker(
        [route.ending_point.latitude, route.ending_point.longitude],
        popup="End",
        icon=folium.Icon(color="red", icon="stop"),
    ).add_to(route_map)

    folium.LayerControl().add_to(route_map)
    route_map.fit_bounds([[south, west], [north, east]])

    route_map.save(output_filename)
    logger.debug(f"Map saved to {output_filename}")
