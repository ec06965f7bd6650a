"""
Listing decoding.

Recovery listings are exported as UTF-8 (with or without a byte-order mark)
or UTF-16 (either byte order, with or without a byte-order mark), depending
on the tool version and locale. This module turns the raw bytes into text.
"""

import codecs
import logging

logger = logging.getLogger(__name__)


def detect_encoding(data: bytes) -> tuple[str, int]:
    """
    Work out how a listing's bytes are encoded.

    Checked in order, first match wins:
    BOM ``FF FE`` / ``FE FF`` / ``EF BB BF``, then the zero-byte pattern of
    ASCII text stored as UTF-16 (offsets 1 and 3 zero for little-endian,
    offsets 0 and 2 zero for big-endian), then plain UTF-8.

    Args:
        data: Raw file contents.

    Returns:
        (codec name, number of leading BOM bytes to skip).
    """
    if data.startswith(codecs.BOM_UTF16_LE):
        return "utf-16-le", 2
    if data.startswith(codecs.BOM_UTF16_BE):
        return "utf-16-be", 2
    if data.startswith(codecs.BOM_UTF8):
        return "utf-8", 3
    if len(data) >= 4:
        if data[1] == 0 and data[3] == 0:
            return "utf-16-le", 0
        if data[0] == 0 and data[2] == 0:
            return "utf-16-be", 0
    return "utf-8", 0


def decode_listing(data: bytes) -> str:
    """
    Decode a listing into text.

    Never raises on bad input: unmappable bytes or lone surrogates become
    U+FFFD so that line scanning can still proceed.
    """
    encoding, skip = detect_encoding(data)
    payload = data[skip:]

    if encoding.startswith("utf-16") and len(payload) % 2:
        # Dangling half code unit
        payload = payload[:-1]

    logger.debug("Decoding listing as %s (bom=%s, %d bytes)", encoding, bool(skip), len(payload))
    return payload.decode(encoding, errors="replace")
