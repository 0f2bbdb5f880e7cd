"""
Clear-signed message codec (RFC 4880, section 7).

Splits a ``-----BEGIN PGP SIGNED MESSAGE-----`` document into the signed
text and the armored signature block that follows it.

Each body line is read once and feeds two accumulators:
    - content: the line with its terminator replaced by "\\n", returned to
      the caller (what the license JSON is parsed from)
    - hash_input: the line without trailing whitespace, lines joined by
      CR LF and no terminator after the last one (what the signature covers)
"""

import re
from dataclasses import dataclass
from typing import Iterator, Tuple

from .errors import MalformedMessageError

BEGIN_SIGNED_MESSAGE = b"-----BEGIN PGP SIGNED MESSAGE-----"
BEGIN_SIGNATURE = b"-----BEGIN PGP SIGNATURE-----"
END_SIGNATURE = b"-----END PGP SIGNATURE-----"

LINE_SEPARATOR = b"\n"
CANONICAL_LINE_END = b"\r\n"
TRAILING_WHITESPACE = b" \t\r\n"
DASH_ESCAPE = b"- "

_LINE_END_RE = re.compile(rb"\r\n|\r|\n")


@dataclass(frozen=True)
class ClearSignedMessage:
    """Result of decoding a clear-signed document."""
    content: bytes
    hash_input: bytes
    signature: bytes
    hash_algorithms: Tuple[str, ...] = ()

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")


def _iter_lines(data: bytes) -> Iterator[Tuple[int, bytes]]:
    """Yield (offset, line) pairs; a line ends at LF, CR or CR LF."""
    position = 0
    for match in _LINE_END_RE.finditer(data):
        yield position, data[position:match.start()]
        position = match.end()
    if position < len(data):
        yield position, data[position:]


def decode(armored) -> ClearSignedMessage:
    """
    Decode a clear-signed message.

    Args:
        armored: The whole clear-signed document (bytes or str)

    Returns:
        ClearSignedMessage with display content, canonical hash input and
        the armored signature block exactly as it appeared in the input

    Raises:
        MalformedMessageError: Header, blank separator line or signature
            block missing
    """
    if isinstance(armored, str):
        armored = armored.encode("utf-8")
    if not armored:
        raise MalformedMessageError("Clear-signed message is empty")

    lines = _iter_lines(armored)

    for _, line in lines:
        if line.rstrip(TRAILING_WHITESPACE) == BEGIN_SIGNED_MESSAGE:
            break
    else:
        raise MalformedMessageError("'BEGIN PGP SIGNED MESSAGE' line not found")

    hash_algorithms = []
    for _, line in lines:
        header = line.strip()
        if not header:
            break
        if header.startswith(b"Hash:"):
            names = header[len(b"Hash:"):].decode("ascii", "replace").split(",")
            hash_algorithms.extend(name.strip() for name in names if name.strip())
    else:
        raise MalformedMessageError("Clear-signed message ends inside its header")

    content = bytearray()
    hash_input = bytearray()
    signature_offset = None
    first = True

    for offset, line in lines:
        if line.startswith(BEGIN_SIGNATURE):
            signature_offset = offset
            break

        if line.startswith(DASH_ESCAPE):
            line = line[len(DASH_ESCAPE):]

        content += line
        content += LINE_SEPARATOR

        if not first:
            hash_input += CANONICAL_LINE_END
        hash_input += line.rstrip(TRAILING_WHITESPACE)
        first = False

    if signature_offset is None:
        raise MalformedMessageError("'BEGIN PGP SIGNATURE' line not found")

    signature = armored[signature_offset:]
    if END_SIGNATURE not in signature:
        raise MalformedMessageError("Signature block is truncated")

    return ClearSignedMessage(
        content=bytes(content),
        hash_input=bytes(hash_input),
        signature=signature,
        hash_algorithms=tuple(hash_algorithms),
    )
