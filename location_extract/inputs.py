"""
Input opening for exports.

A Takeout bundle is a zip holding ".../Records.json"; the on-device
export is a bare JSON file. Either way the pipeline gets a binary stream.
"""

import logging
import zipfile
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional

logger = logging.getLogger(__name__)

RECORDS_MEMBER = "Records.json"


def find_zip_member(names: list[str]) -> Optional[str]:
    """Pick the location history file inside a zip listing."""
    for name in names:
        if name == RECORDS_MEMBER or name.endswith("/" + RECORDS_MEMBER):
            return name
    for name in names:
        if name.lower().endswith(".json"):
            return name
    return None


@contextmanager
def open_input(path: str) -> Iterator[BinaryIO]:
    """Open an export (zip bundle or JSON file) as a binary stream."""
    if not path.lower().endswith(".zip"):
        with open(path, "rb") as f:
            yield f
        return

    with zipfile.ZipFile(path) as archive:
        member = find_zip_member(archive.namelist())
        if member is None:
            raise FileNotFoundError(f"file '{RECORDS_MEMBER}' not found in '{path}'")
        logger.info(f"Reading {member} from {path}")
        with archive.open(member) as f:
            yield f
