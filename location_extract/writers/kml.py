"""KML 2.2 writer: a flat list of placemarks."""

from ..coords import fixed_point_to_decimal
from ..decoders.base import Location
from .base import TemplateWriter

KML_HEADER = """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
\t<Document>
\t\t<name>Location History</name>"""

KML_FOOTER = """
\t</Document>
</kml>
"""


class KMLWriter(TemplateWriter):
    name = "kml"
    extension = ".kml"
    description = "Keyhole Markup Language 2.2"

    header = KML_HEADER
    footer = KML_FOOTER

    @staticmethod
    def render_location(loc: Location) -> str:
        # KML coordinates are lon,lat
        return (
            "\n\t\t<Placemark>"
            f"\n\t\t\t<TimeStamp><when>{loc.timestamp}</when></TimeStamp>"
            "\n\t\t\t<ExtendedData>"
            f'\n\t\t\t\t<Data name="accuracy"><value>{loc.accuracy}</value></Data>'
            "\n\t\t\t</ExtendedData>"
            f"\n\t\t\t<Point><coordinates>{fixed_point_to_decimal(loc.longitude)},"
            f"{fixed_point_to_decimal(loc.latitude)}</coordinates></Point>"
            "\n\t\t</Placemark>"
        )
