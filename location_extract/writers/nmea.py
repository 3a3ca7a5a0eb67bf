"""
NMEA 0183 writer.

Every location becomes a $GPGGA (fix data) and a $GPRMC (recommended
minimum) sentence. There is no header, footer or track structure.

    $GPGGA,211442.352,5039.323,N,00303.793,E,1,04,6.0,0,M,,,,0000*CC
    $GPRMC,211442.352,A,5039.323,N,00303.793,E,0.0,0.0,270112,,,A*CC
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN

from ..coords import split_fixed_point
from ..decoders.base import Location
from .base import TemplateWriter

# Fix quality 1 (GPS), 4 satellites, altitude 0 m: the export has no such data
GGA_FORMAT = "GPGGA,{time},{lat},{lon},1,04,{hdop},0,M,,,,0000"
RMC_FORMAT = "GPRMC,{time},A,{lat},{lon},0.0,0.0,{date},,,A"

_TENTH = Decimal("0.1")


def checksum(body: str) -> str:
    """XOR of every byte between '$' and '*', as two uppercase hex digits."""
    crc = 0
    for byte in body.encode("ascii"):
        crc ^= byte
    return f"{crc:02X}"


def degrees_to_deg_min(value: str) -> str:
    """
    Convert a fixed-point string to NMEA degrees and minutes (DDMM.mmm).

    Examples:
        "485000000" -> "4830.000"
        "11310000"  -> "107.860"
        "-10000000" -> "-100.000"
    """
    sign, integer, fraction = split_fixed_point(value)
    # minutes = fraction * 60 / 10^7, kept in thousandths and rounded half up
    thousandths = (int(fraction) * 6 + 500) // 1000
    minutes, decimals = divmod(thousandths, 1000)
    if minutes == 60:
        # rounded up to a whole degree
        minutes = 0
        integer = str(int(integer or "0") + 1).zfill(len(integer))
    return f"{sign}{integer}{minutes:02d}.{decimals:03d}"


def _hemisphere(value: str, width: int, positive: str, negative: str) -> str:
    deg_min = degrees_to_deg_min(value)
    if deg_min.startswith("-"):
        return f"{deg_min[1:].rjust(width, '0')},{negative}"
    return f"{deg_min.rjust(width, '0')},{positive}"


def format_latitude(value: str) -> str:
    """Latitude field, e.g. "-10000000" -> "0100.000,S"."""
    return _hemisphere(value, 8, "N", "S")


def format_longitude(value: str) -> str:
    """Longitude field, e.g. "-1401500000" -> "14009.000,W"."""
    return _hemisphere(value, 9, "E", "W")


def accuracy_to_hdop(accuracy: str) -> str:
    """
    Approximate HDOP from an accuracy in meters.

    There is no exact conversion between the two; accuracy / 4 gives
    plausible values for receivers with a few meters of base error.
    """
    try:
        hdop = Decimal(accuracy) / 4
    except InvalidOperation:
        raise ValueError(f"invalid accuracy {accuracy!r}") from None
    return str(hdop.quantize(_TENTH, rounding=ROUND_HALF_EVEN))


def nmea_sentences(loc: Location) -> str:
    """Return the GGA and RMC sentences for a location, separated by a newline."""
    day, _, clock = loc.timestamp.partition("T")
    year, month, mday = day.split("-")
    date = f"{mday}{month}{year[2:]}"
    time = clock.replace(":", "").replace("Z", "")

    fields = {
        "time": time,
        "date": date,
        "lat": format_latitude(loc.latitude),
        "lon": format_longitude(loc.longitude),
        "hdop": accuracy_to_hdop(loc.accuracy),
    }
    gga = GGA_FORMAT.format(**fields)
    rmc = RMC_FORMAT.format(**fields)
    return f"${gga}*{checksum(gga)}\n${rmc}*{checksum(rmc)}"


class NMEAWriter(TemplateWriter):
    name = "nmea"
    extension = ".nmea"
    description = "NMEA 0183 GPGGA/GPRMC sentences"

    @staticmethod
    def render_location(loc: Location) -> str:
        return nmea_sentences(loc) + "\n"
