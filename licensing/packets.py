"""
OpenPGP packet parsing (RFC 4880, sections 4 and 5).

Only what license verification needs:
    - packet framing (old and new header formats)
    - v4 public key / public subkey packets (RSA, EdDSA over Ed25519)
    - v4 signature packets with their subpackets
"""

import hashlib
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from cryptography.hazmat.primitives import hashes

from .errors import MalformedMessageError

# Packet tags
TAG_SIGNATURE = 2
TAG_PUBLIC_KEY = 6
TAG_USER_ID = 13
TAG_PUBLIC_SUBKEY = 14

# Public key algorithms
PUBKEY_RSA = 1
PUBKEY_RSA_SIGN_ONLY = 3
PUBKEY_EDDSA = 22
RSA_ALGORITHMS = (PUBKEY_RSA, PUBKEY_RSA_SIGN_ONLY)

# Signature types
SIG_BINARY = 0x00
SIG_TEXT = 0x01

# Signature subpackets
SUBPACKET_CREATION_TIME = 2
SUBPACKET_ISSUER = 16
SUBPACKET_ISSUER_FINGERPRINT = 33

ED25519_OID = bytes.fromhex("2b06010401da470f01")

HASH_ALGORITHMS = {
    2: hashes.SHA1,
    8: hashes.SHA256,
    9: hashes.SHA384,
    10: hashes.SHA512,
    11: hashes.SHA224,
}

HASH_NAMES = {
    2: "SHA1",
    8: "SHA256",
    9: "SHA384",
    10: "SHA512",
    11: "SHA224",
}


@dataclass(frozen=True)
class Packet:
    tag: int
    body: bytes


@dataclass(frozen=True)
class PublicKey:
    """v4 public key or subkey."""
    created: int
    algorithm: int
    fingerprint: bytes
    material: Tuple = ()    # RSA: (n, e); EdDSA: (oid, point)
    is_subkey: bool = False

    @property
    def key_id(self) -> bytes:
        return self.fingerprint[-8:]

    @property
    def key_id_hex(self) -> str:
        return self.key_id.hex().upper()


@dataclass(frozen=True)
class Signature:
    """v4 signature packet."""
    signature_type: int
    algorithm: int
    hash_algorithm: int
    hashed_data: bytes          # version .. end of hashed subpackets
    digest_prefix: bytes        # left 16 bits of the signed digest
    values: Tuple[bytes, ...]   # RSA: (s,); EdDSA: (r, s)
    issuer: Optional[bytes] = None
    created: Optional[int] = None

    @property
    def trailer(self) -> bytes:
        """Bytes hashed after the document (section 5.2.4)."""
        return self.hashed_data + b"\x04\xff" + len(self.hashed_data).to_bytes(4, "big")

    @property
    def issuer_hex(self) -> str:
        return self.issuer.hex().upper() if self.issuer else "unknown"


class _Reader:
    """Bounds-checked cursor over a packet body."""

    def __init__(self, data: bytes, what: str = "packet"):
        self.data = data
        self.pos = 0
        self.what = what

    def read(self, size: int) -> bytes:
        if size < 0 or self.pos + size > len(self.data):
            raise MalformedMessageError(f"Truncated {self.what}")
        chunk = self.data[self.pos:self.pos + size]
        self.pos += size
        return chunk

    def byte(self) -> int:
        return self.read(1)[0]

    def uint(self, size: int) -> int:
        return int.from_bytes(self.read(size), "big")

    def mpi(self) -> bytes:
        """
        Multiprecision integer as big-endian bytes (section 3.2).

        The bit count must be exact; the count is not covered by the
        signature, so a loose one would let it be altered unnoticed.
        """
        bits = self.uint(2)
        value = self.read((bits + 7) // 8)
        if value and value[0].bit_length() != bits - 8 * (len(value) - 1):
            raise MalformedMessageError(f"Non-canonical MPI in {self.what}")
        return value

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos


def iter_packets(data: bytes) -> Iterator[Packet]:
    """
    Split binary OpenPGP data into packets.

    Raises:
        MalformedMessageError: Invalid header, truncated packet or
            partial body length
    """
    reader = _Reader(data, "packet header")
    while reader.remaining:
        first = reader.byte()
        if not first & 0x80:
            raise MalformedMessageError(f"Invalid packet header byte 0x{first:02x}")

        if first & 0x40:
            # New format
            tag = first & 0x3F
            octet = reader.byte()
            if octet < 192:
                length = octet
            elif octet < 224:
                length = ((octet - 192) << 8) + reader.byte() + 192
            elif octet == 255:
                length = reader.uint(4)
            else:
                raise MalformedMessageError("Partial body lengths are not supported")
        else:
            # Old format
            tag = (first >> 2) & 0x0F
            length_type = first & 0x03
            if length_type == 3:
                length = reader.remaining
            else:
                length = reader.uint((1, 2, 4)[length_type])

        if length > reader.remaining:
            raise MalformedMessageError(f"Packet with tag {tag} is truncated")
        yield Packet(tag=tag, body=reader.read(length))


def iter_subpackets(data: bytes, hashed: bool = True) -> Iterator[Tuple[int, bytes]]:
    """
    Yield (type, body) for each signature subpacket; the critical bit is dropped.

    Outside the hashed area nothing is signed, so a critical bit there is
    rejected instead of dropped.
    """
    reader = _Reader(data, "signature subpacket")
    while reader.remaining:
        octet = reader.byte()
        if octet < 192:
            length = octet
        elif octet < 255:
            length = ((octet - 192) << 8) + reader.byte() + 192
        else:
            length = reader.uint(4)
        if length == 0:
            raise MalformedMessageError("Empty signature subpacket")
        body = reader.read(length)
        if body[0] & 0x80 and not hashed:
            raise MalformedMessageError("Critical subpacket in unhashed area")
        yield body[0] & 0x7F, body[1:]


def v4_fingerprint(body: bytes) -> bytes:
    """SHA-1 over 0x99, two-octet length and the key packet body (section 12.2)."""
    return hashlib.sha1(b"\x99" + len(body).to_bytes(2, "big") + body).digest()


def parse_public_key(packet: Packet) -> PublicKey:
    """
    Parse a v4 public key or public subkey packet.

    Key material is only decoded for supported algorithms; other keys keep
    an empty ``material`` so that they can still be looked up by key ID.
    """
    reader = _Reader(packet.body, "public key packet")
    version = reader.byte()
    if version != 4:
        raise MalformedMessageError(f"Unsupported public key version {version}")

    created = reader.uint(4)
    algorithm = reader.byte()

    if algorithm in RSA_ALGORITHMS:
        n = int.from_bytes(reader.mpi(), "big")
        e = int.from_bytes(reader.mpi(), "big")
        material = (n, e)
    elif algorithm == PUBKEY_EDDSA:
        oid = reader.read(reader.byte())
        point = reader.mpi()
        material = (oid, point)
    else:
        material = ()

    return PublicKey(
        created=created,
        algorithm=algorithm,
        fingerprint=v4_fingerprint(packet.body),
        material=material,
        is_subkey=packet.tag == TAG_PUBLIC_SUBKEY,
    )


def parse_signature(packet: Packet) -> Signature:
    """Parse a v4 signature packet."""
    reader = _Reader(packet.body, "signature packet")
    version = reader.byte()
    if version != 4:
        raise MalformedMessageError(f"Unsupported signature version {version}")

    signature_type = reader.byte()
    algorithm = reader.byte()
    hash_algorithm = reader.byte()
    hashed = reader.read(reader.uint(2))
    hashed_data = packet.body[:reader.pos]
    unhashed = reader.read(reader.uint(2))
    digest_prefix = reader.read(2)

    if algorithm in RSA_ALGORITHMS:
        values = (reader.mpi(),)
    elif algorithm == PUBKEY_EDDSA:
        values = (reader.mpi(), reader.mpi())
    else:
        values = ()
    if values and reader.remaining:
        raise MalformedMessageError("Trailing data after signature values")

    issuer = None
    created = None
    # Hashed subpackets are authoritative, so they are scanned first
    subpackets = list(iter_subpackets(hashed)) + list(iter_subpackets(unhashed, hashed=False))
    for subpacket_type, body in subpackets:
        if subpacket_type == SUBPACKET_ISSUER and issuer is None and len(body) == 8:
            issuer = body
        elif subpacket_type == SUBPACKET_ISSUER_FINGERPRINT and issuer is None and len(body) == 21:
            issuer = body[-8:]
        elif subpacket_type == SUBPACKET_CREATION_TIME and created is None and len(body) == 4:
            created = int.from_bytes(body, "big")

    return Signature(
        signature_type=signature_type,
        algorithm=algorithm,
        hash_algorithm=hash_algorithm,
        hashed_data=hashed_data,
        digest_prefix=digest_prefix,
        values=values,
        issuer=issuer,
        created=created,
    )
