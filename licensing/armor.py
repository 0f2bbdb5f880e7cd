"""
ASCII Armor (RFC 4880, section 6)

Decodes armored blocks such as::

    -----BEGIN PGP SIGNATURE-----
    Version: BCPG v1.46

    iQJpBAEBCgBTBQJOZ84v...
    =/aH9
    -----END PGP SIGNATURE-----

The optional ``=XXXX`` line is a CRC-24 of the decoded data; when present it
is checked.
"""

import base64
import binascii
import re
from dataclasses import dataclass, field
from typing import Dict, List

from .errors import MalformedMessageError

CRC24_INIT = 0xB704CE
CRC24_POLY = 0x1864CFB

_BEGIN_RE = re.compile(r"^-----BEGIN PGP ([A-Z0-9 ,/]+)-----\s*$")
_END_RE = re.compile(r"^-----END PGP ([A-Z0-9 ,/]+)-----\s*$")
_HEADER_RE = re.compile(r"^([!-9;-~]+): ?(.*)$")


@dataclass
class ArmoredBlock:
    """Decoded armor block."""
    kind: str                      # e.g. "SIGNATURE", "PUBLIC KEY BLOCK"
    headers: Dict[str, List[str]] = field(default_factory=dict)
    data: bytes = b""


def crc24(data: bytes) -> int:
    """CRC-24 used by the armor checksum line."""
    crc = CRC24_INIT
    for byte in data:
        crc ^= byte << 16
        for _ in range(8):
            crc <<= 1
            if crc & 0x1000000:
                crc ^= CRC24_POLY
    return crc & 0xFFFFFF


def _to_text(armored) -> str:
    if isinstance(armored, (bytes, bytearray)):
        try:
            return bytes(armored).decode("ascii")
        except UnicodeDecodeError as e:
            raise MalformedMessageError(f"Armor contains non-ASCII data: {e}")
    return armored


def decode_armor(armored, expected_kind: str = None) -> ArmoredBlock:
    """
    Decode the first armor block found in ``armored``.

    Args:
        armored: Armored text (str or bytes)
        expected_kind: If set, the block label must match (e.g. "SIGNATURE")

    Returns:
        ArmoredBlock with headers and the de-armored binary data

    Raises:
        MalformedMessageError: Missing BEGIN/END lines, bad base64 or
            checksum mismatch
    """
    lines = _to_text(armored).splitlines()

    start = None
    kind = None
    for index, line in enumerate(lines):
        match = _BEGIN_RE.match(line)
        if match:
            start = index
            kind = match.group(1)
            break

    if start is None:
        raise MalformedMessageError("Armor BEGIN line not found")
    if expected_kind is not None and kind != expected_kind:
        raise MalformedMessageError(f"Expected armor '{expected_kind}', got '{kind}'")

    block = ArmoredBlock(kind=kind)
    index = start + 1

    # Armor headers end at the first blank line
    while index < len(lines):
        line = lines[index]
        if not line.strip():
            index += 1
            break
        match = _HEADER_RE.match(line)
        if not match:
            break
        block.headers.setdefault(match.group(1), []).append(match.group(2))
        index += 1

    body = []
    checksum = None
    terminated = False
    while index < len(lines):
        line = lines[index].strip()
        index += 1
        end_match = _END_RE.match(line)
        if end_match:
            if end_match.group(1) != kind:
                raise MalformedMessageError(
                    f"Armor END label '{end_match.group(1)}' does not match '{kind}'"
                )
            terminated = True
            break
        if line.startswith("="):
            checksum = line[1:]
            continue
        if line:
            body.append(line)

    if not terminated:
        raise MalformedMessageError(f"Armor END line for '{kind}' not found")

    try:
        block.data = base64.b64decode("".join(body), validate=True)
    except (ValueError, binascii.Error) as e:
        raise MalformedMessageError(f"Invalid base64 in armor: {e}")

    if not block.data:
        raise MalformedMessageError(f"Armor '{kind}' is empty")

    if checksum is not None:
        try:
            expected = int.from_bytes(base64.b64decode(checksum, validate=True), "big")
        except (ValueError, binascii.Error) as e:
            raise MalformedMessageError(f"Invalid armor checksum line: {e}")
        if expected != crc24(block.data):
            raise MalformedMessageError("Armor checksum mismatch")

    return block
