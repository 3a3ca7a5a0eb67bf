"""GPX 1.1 writer: one <trk> per track, one <trkseg> per segment."""

from ..coords import fixed_point_to_decimal
from ..decoders.base import Location
from .base import TemplateWriter

GPX_HEADER = """<?xml version="1.0" encoding="UTF-8"?>
<gpx xmlns="http://www.topografix.com/GPX/1/1" version="1.1" creator="location-extract" xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" xsi:schemaLocation="http://www.topografix.com/GPX/1/1 http://www.topografix.com/GPX/1/1/gpx.xsd">
\t<metadata>
\t\t<name>Location History</name>
\t</metadata>
\t<trk>
\t\t<trkseg>"""

GPX_NEW_TRACK = """
\t\t</trkseg>
\t</trk>
\t<trk>
\t\t<trkseg>"""

GPX_NEW_SEGMENT = """
\t\t</trkseg>
\t\t<trkseg>"""

GPX_FOOTER = """
\t\t</trkseg>
\t</trk>
</gpx>
"""


class GPXWriter(TemplateWriter):
    name = "gpx"
    extension = ".gpx"
    description = "GPS Exchange Format 1.1"

    header = GPX_HEADER
    new_segment = GPX_NEW_SEGMENT
    new_track = GPX_NEW_TRACK
    footer = GPX_FOOTER

    @staticmethod
    def render_location(loc: Location) -> str:
        return (
            f'\n\t\t\t<trkpt lat="{fixed_point_to_decimal(loc.latitude)}" '
            f'lon="{fixed_point_to_decimal(loc.longitude)}">'
            f"\n\t\t\t\t<time>{loc.timestamp}</time>"
            f"\n\t\t\t\t<accuracy>{loc.accuracy}</accuracy>"
            f"\n\t\t\t</trkpt>"
        )
