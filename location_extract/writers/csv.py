"""CSV writer: one row per location, no track structure."""

from ..coords import fixed_point_to_decimal
from ..decoders.base import Location
from .base import TemplateWriter

CSV_HEADER = "timestamp,lat,lon,accuracy\n"


class CSVWriter(TemplateWriter):
    name = "csv"
    extension = ".csv"
    description = "Comma-separated values"

    header = CSV_HEADER

    @staticmethod
    def render_location(loc: Location) -> str:
        return (f"{loc.timestamp},{fixed_point_to_decimal(loc.latitude)},"
                f"{fixed_point_to_decimal(loc.longitude)},{loc.accuracy}\n")
