"""Reversible hex encoding used as the substrate for marker search.

Working on a lowercase hex string (two digits per byte) keeps every
search and splice a plain string operation that never cuts a multi-byte
UTF-8 sequence in half.
"""

import base64
import binascii
from typing import Union

from phenoflow.core.exceptions import MalformedDocumentError

ENCODINGS = ("raw", "utf-8", "base64", "hex")


def encode(data: Union[bytes, str], encoding: str = "utf-8") -> str:
    """Encode content as a lowercase hex string.

    Args:
        data: Raw bytes, or a string in ``encoding``
        encoding: "raw" (bytes), "utf-8", "base64" or "hex"

    Returns:
        Hex string, two zero-padded digits per byte
    """
    if isinstance(data, (bytes, bytearray)):
        return bytes(data).hex()

    if encoding in ("utf-8", "utf8", "raw"):
        return data.encode("utf-8").hex()
    if encoding == "base64":
        try:
            # GitHub wraps base64 content at 60 columns
            return base64.b64decode("".join(data.split()), validate=True).hex()
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 content: {e}") from e
    if encoding == "hex":
        return decode(data).hex()
    raise ValueError(f"Unknown encoding: '{encoding}'. Expected one of {ENCODINGS}")


def decode(hex_string: str) -> bytes:
    """Inverse of encode(). Raises ValueError on malformed hex."""
    if len(hex_string) % 2:
        raise ValueError(f"Hex string has odd length ({len(hex_string)})")
    return bytes.fromhex(hex_string)


def decode_text(hex_string: str) -> str:
    """Decode a hex string into UTF-8 text.

    Raises:
        MalformedDocumentError: If the bytes are not valid UTF-8
    """
    try:
        return decode(hex_string).decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedDocumentError(
            f"Content is not UTF-8 text: {e}",
            details={"position": e.start},
        ) from e


def to_base64(hex_string: str) -> str:
    """Convert a hex string to base64 for the GitHub contents API."""
    return base64.b64encode(decode(hex_string)).decode("ascii")


def from_base64(content: str) -> str:
    """Convert GitHub base64 file content to a hex string."""
    return encode(content, "base64")
