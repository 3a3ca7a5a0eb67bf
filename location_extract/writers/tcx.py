"""TCX v2 writer: one <Course> per track, one <Track> per segment."""

from ..coords import fixed_point_to_decimal
from ..decoders.base import Location
from .base import TemplateWriter

TCX_HEADER = """<?xml version="1.0" encoding="UTF-8" standalone="no" ?>
<TrainingCenterDatabase xmlns="http://www.garmin.com/xmlschemas/TrainingCenterDatabase/v2" xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" xsi:schemaLocation="http://www.garmin.com/xmlschemas/TrainingCenterDatabase/v2 http://www.garmin.com/xmlschemas/TrainingCenterDatabasev2.xsd">
\t<Courses>
\t\t<Course>
\t\t\t<Name>Location History</Name>
\t\t\t<Track>"""

TCX_NEW_TRACK = """
\t\t\t</Track>
\t\t</Course>
\t\t<Course>
\t\t\t<Track>"""

TCX_NEW_SEGMENT = """
\t\t\t</Track>
\t\t\t<Track>"""

TCX_FOOTER = """
\t\t\t</Track>
\t\t</Course>
\t</Courses>
</TrainingCenterDatabase>
"""


class TCXWriter(TemplateWriter):
    name = "tcx"
    extension = ".tcx"
    description = "Garmin Training Center XML v2"

    header = TCX_HEADER
    new_segment = TCX_NEW_SEGMENT
    new_track = TCX_NEW_TRACK
    footer = TCX_FOOTER

    @staticmethod
    def render_location(loc: Location) -> str:
        return (
            "\n\t\t\t\t<Trackpoint>"
            f"\n\t\t\t\t\t<Time>{loc.timestamp}</Time>"
            "\n\t\t\t\t\t<Position>"
            f"\n\t\t\t\t\t\t<LatitudeDegrees>{fixed_point_to_decimal(loc.latitude)}</LatitudeDegrees>"
            f"\n\t\t\t\t\t\t<LongitudeDegrees>{fixed_point_to_decimal(loc.longitude)}</LongitudeDegrees>"
            "\n\t\t\t\t\t</Position>"
            "\n\t\t\t\t</Trackpoint>"
        )
