"""Marker-delimited region location and splicing over hex buffers.

Documents (README.md, workflow .cwl files) are never parsed here. A region
of interest is bounded by two literal markers: it starts right after the
first start marker and ends at the first end marker found after it.

Usage:
    from phenoflow.text import hexcodec, locator

    buffer = hexcodec.encode("cwlVersion: v1.0\\ndoc: Old\\nid: step\\n")
    locator.extract(buffer, "doc: ", "\\nid: ")            # "Old"
    buffer = locator.replace_between(buffer, "doc: ", "\\nid: ", "New")
"""

from dataclasses import dataclass

from phenoflow.core.exceptions import RegionNotFound
from phenoflow.text import hexcodec


@dataclass(frozen=True)
class DelimitedRegion:
    """Offsets (in hex digits) of a region inside a hex buffer."""

    start: int
    end: int

    def slice(self, buffer: str) -> str:
        return buffer[self.start:self.end]


def find_marker(buffer: str, marker_hex: str, start: int = 0) -> int:
    """Find the first byte-aligned occurrence of marker_hex at or after start.

    A raw str.find() on hex can match across a byte boundary (e.g. "23"
    inside "1234"), so odd offsets are skipped.

    Returns:
        Offset of the match, or -1 if absent
    """
    index = buffer.find(marker_hex, start)
    while index != -1 and index % 2:
        index = buffer.find(marker_hex, index + 1)
    return index


def locate(
    buffer: str,
    start_marker: str,
    end_marker: str,
    include_end_marker: bool = False,
) -> DelimitedRegion:
    """Locate the region between two plain-text markers.

    Args:
        buffer: Hex-encoded document
        start_marker: Text immediately preceding the region
        end_marker: Text terminating the region (searched after the start)
        include_end_marker: Keep the end marker inside the region
            (used for step paths, which keep their .cwl extension)

    Raises:
        RegionNotFound: If either marker is absent
    """
    start_hex = hexcodec.encode(start_marker)
    end_hex = hexcodec.encode(end_marker)

    start_index = find_marker(buffer, start_hex)
    if start_index == -1:
        raise RegionNotFound(
            f"Start marker {start_marker!r} not found",
            details={"start_marker": start_marker, "end_marker": end_marker},
        )
    start = start_index + len(start_hex)

    end_index = find_marker(buffer, end_hex, start)
    if end_index == -1:
        raise RegionNotFound(
            f"End marker {end_marker!r} not found after {start_marker!r}",
            details={"start_marker": start_marker, "end_marker": end_marker},
        )
    end = end_index + len(end_hex) if include_end_marker else end_index

    return DelimitedRegion(start=start, end=end)


def extract(
    buffer: str,
    start_marker: str,
    end_marker: str,
    include_end_marker: bool = False,
) -> str:
    """Locate a region and return it decoded as UTF-8 text."""
    region = locate(buffer, start_marker, end_marker, include_end_marker)
    return hexcodec.decode_text(region.slice(buffer))


def replace(buffer: str, region: DelimitedRegion, new_content_hex: str) -> str:
    """Splice new content into the buffer in place of the region.

    The splice does not check that new_content_hex keeps the surrounding
    markers intact; content containing a marker will shift later lookups.
    """
    if not (0 <= region.start <= region.end <= len(buffer)):
        raise RegionNotFound(
            f"Region {region.start}:{region.end} outside buffer of length {len(buffer)}"
        )
    if region.start % 2 or region.end % 2 or len(new_content_hex) % 2:
        raise RegionNotFound("Region is not aligned to byte boundaries")
    return buffer[:region.start] + new_content_hex + buffer[region.end:]


def replace_between(
    buffer: str,
    start_marker: str,
    end_marker: str,
    new_text: str,
) -> str:
    """Replace the text between two markers with new_text."""
    region = locate(buffer, start_marker, end_marker)
    return replace(buffer, region, hexcodec.encode(new_text))
