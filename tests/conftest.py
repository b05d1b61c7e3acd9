import datetime as dt
import sys
from pathlib import Path

import pytest


# Ensure project root is importable for tests
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


from utils.config import Config


def build_gpx(track_points, waypoints=(), name=None, namespace="http://www.topografix.com/GPX/1/1"):
    """Assemble a GPX document from (lat, lon[, ele]) tuples and waypoint dicts."""
    trkpts = []
    for point in track_points:
        lat, lon = point[0], point[1]
        ele = f"<ele>{point[2]}</ele>" if len(point) > 2 else ""
        trkpts.append(f'<trkpt lat="{lat}" lon="{lon}">{ele}</trkpt>')

    wpts = []
    for wpt in waypoints:
        children = "".join(
            f"<{tag}>{wpt[key]}</{tag}>"
            for key, tag in (("name", "name"), ("desc", "desc"), ("sym", "sym"), ("type", "type"))
            if wpt.get(key) is not None
        )
        wpts.append(f'<wpt lat="{wpt["lat"]}" lon="{wpt["lon"]}">{children}</wpt>')

    xmlns = f' xmlns="{namespace}"' if namespace else ""
    trk_name = f"<name>{name}</name>" if name else ""
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="tests"{xmlns}>
  {"".join(wpts)}
  <trk>
    {trk_name}
    <trkseg>
      {"".join(trkpts)}
    </trkseg>
  </trk>
</gpx>"""


@pytest.fixture
def gpx_builder():
    return build_gpx


@pytest.fixture
def straight_route():
    """Eleven points along the equator, 0.1 degree apart (~111 km in total)."""
    return [(0.0, round(i * 0.1, 1), 10 * i) for i in range(11)]


@pytest.fixture
def start_time() -> dt.datetime:
    return dt.datetime(2025, 3, 15, 8, 0)


@pytest.fixture
def config() -> Config:
    return Config(
        control_interval_km=50.0,
        use_24_hour_format=True,
        checkpoint_match_tolerance_km=0.1,
    )
