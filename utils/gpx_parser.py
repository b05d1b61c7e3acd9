"""Copyright (C) 2025 Pierre Marrec
SPDX-License-Identifier: GPL-3.0-or-later

GPX file parser for brevet routes.

Reads track points (trkpt) into a cumulative-distance track and waypoints
(wpt) into raw records for checkpoint classification. Works with GPX 1.0,
GPX 1.1 and namespace-less exports.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import PurePath
from typing import Optional, Union

from lxml import etree
from streamlit.logger import get_logger

from utils.errors import InsufficientDataError, ParseError
from utils.geo import haversine_km

logger = get_logger(__name__)

MIN_TRACK_POINTS = 2


@dataclass(frozen=True)
class TrackPoint:
    lat: float
    lng: float
    elevation_m: float
    cumulative_distance_km: float


@dataclass(frozen=True)
class RawWaypoint:
    lat: float
    lng: float
    name: str
    description: Optional[str] = None
    symbol: Optional[str] = None
    type: Optional[str] = None


@dataclass(frozen=True)
class GpxDocument:
    track_points: tuple[TrackPoint, ...]
    waypoints: tuple[RawWaypoint, ...]
    name: Optional[str] = None

    @property
    def total_distance_km(self) -> float:
        return self.track_points[-1].cumulative_distance_km if self.track_points else 0.0


def _children(elem: etree._Element, tag: str) -> list:
    return elem.xpath(f"*[local-name()='{tag}']")


def _child_text(elem: etree._Element, tag: str) -> Optional[str]:
    found = _children(elem, tag)
    if not found or found[0].text is None:
        return None
    text = found[0].text.strip()
    return text or None


def _parse_coordinates(elem: etree._Element) -> Optional[tuple[float, float]]:
    """Return (lat, lng) when both attributes are valid, else None."""
    try:
        lat = float(elem.get("lat"))
        lng = float(elem.get("lon"))
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    if lat < -90 or lat > 90 or lng < -180 or lng > 180:
        return None
    return lat, lng


def _parse_elevation(elem: etree._Element) -> float:
    text = _child_text(elem, "ele")
    if text is None:
        return 0.0
    try:
        value = float(text)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def _parse_root(gpx: Union[str, bytes]) -> etree._Element:
    if isinstance(gpx, str):
        # Text is already decoded; ignore any encoding= in the XML declaration
        gpx = gpx.encode("utf-8")
        parser = etree.XMLParser(encoding="utf-8", resolve_entities=False, no_network=True)
    else:
        parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(gpx, parser=parser)
    except (etree.XMLSyntaxError, ValueError) as e:
        logger.warning(f"Invalid GPX XML: {e}")
        raise ParseError(f"Failed to parse GPX file: {e}") from e
    if root is None:
        raise ParseError("Failed to parse GPX file: empty document")
    return root


def _route_name(root: etree._Element) -> Optional[str]:
    for path in ("*[local-name()='metadata']", "*[local-name()='trk']"):
        for elem in root.xpath(path):
            name = _child_text(elem, "name")
            if name:
                return name
    return None


def read_track_points(root: etree._Element) -> list[TrackPoint]:
    """Build the cumulative-distance track from trkpt elements in document order."""
    trkpts = root.xpath("//*[local-name()='trkpt']")
    points: list[TrackPoint] = []
    total_km = 0.0
    for trkpt in trkpts:
        coords = _parse_coordinates(trkpt)
        if coords is None:
            logger.debug(
                f"Skipping invalid track point: lat={trkpt.get('lat')}, lon={trkpt.get('lon')}"
            )
            continue
        lat, lng = coords
        if points:
            prev = points[-1]
            total_km += haversine_km(prev.lat, prev.lng, lat, lng)
        points.append(
            TrackPoint(
                lat=lat,
                lng=lng,
                elevation_m=_parse_elevation(trkpt),
                cumulative_distance_km=total_km,
            )
        )
    logger.debug(f"Extracted {len(points)} valid track points out of {len(trkpts)}")
    return points


def read_waypoints(root: etree._Element) -> list[RawWaypoint]:
    """Extract wpt elements, dropping those with invalid coordinates."""
    waypoints: list[RawWaypoint] = []
    for wpt in root.xpath("//*[local-name()='wpt']"):
        coords = _parse_coordinates(wpt)
        if coords is None:
            logger.debug(f"Skipping invalid waypoint: lat={wpt.get('lat')}, lon={wpt.get('lon')}")
            continue
        lat, lng = coords
        waypoints.append(
            RawWaypoint(
                lat=lat,
                lng=lng,
                name=_child_text(wpt, "name") or "Unnamed",
                description=_child_text(wpt, "desc"),
                symbol=_child_text(wpt, "sym"),
                type=_child_text(wpt, "type"),
            )
        )
    return waypoints


def read_gpx(gpx: Union[str, bytes]) -> GpxDocument:
    """Parse a GPX document into track points and raw waypoints.

    Args:
        gpx: GPX file content as text or raw bytes

    Returns:
        GpxDocument with the filtered track, the waypoints and the route name

    Raises:
        ParseError: the content is not well-formed XML
        InsufficientDataError: fewer than two valid track points remain
    """
    root = _parse_root(gpx)

    track_points = read_track_points(root)
    if len(track_points) < MIN_TRACK_POINTS:
        logger.warning(
            f"Insufficient track points: {len(track_points)} < {MIN_TRACK_POINTS}"
        )
        raise InsufficientDataError(
            f"Not enough valid coordinates in GPX file (minimum {MIN_TRACK_POINTS} needed, "
            f"found {len(track_points)})"
        )

    waypoints = read_waypoints(root)
    doc = GpxDocument(
        track_points=tuple(track_points),
        waypoints=tuple(waypoints),
        name=_route_name(root),
    )
    logger.debug(
        f"Parsed GPX: {len(doc.track_points)} points, {len(doc.waypoints)} waypoints, "
        f"{doc.total_distance_km:.1f} km"
    )
    return doc


def route_name_from_filename(filename: str) -> str:
    """Derive a route name from an uploaded file name ("brm-600.gpx" -> "brm-600")."""
    name = PurePath(filename).name
    stem, dot, _ext = name.rpartition(".")
    return stem if dot and stem else name
