"""
Shared fixtures for all tests.
"""

import base64
import hashlib
import json
from pathlib import Path

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from licensing.armor import crc24
from licensing.packets import ED25519_OID, PUBKEY_EDDSA
from licensing.verifier import TrustAnchor

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Body of fixtures/signed_message.asc, signed with fixtures/test_public_key.asc
FIXTURE_BODY = (
    '{\n'
    '  "version"        : 1,\n'
    '  "name"           : "foobar",\n'
    '  "uuid"           : "12c8052f-d78f-4a8e-bba4-a55a2d141fc8",\n'
    '  "expirationDate" : [1981,3,2]\n'
    '}\n'
)


# ============================================================
# OpenPGP helpers
# ============================================================

def mpi(value: bytes) -> bytes:
    value = value.lstrip(b"\x00")
    bits = (len(value) - 1) * 8 + value[0].bit_length() if value else 0
    return bits.to_bytes(2, "big") + value


def packet(tag: int, body: bytes) -> bytes:
    """New-format packet header + body."""
    if len(body) < 192:
        header = bytes([0xC0 | tag, len(body)])
    else:
        length = len(body) - 192
        header = bytes([0xC0 | tag, (length >> 8) + 192, length & 0xFF])
    return header + body


def armor(kind: str, data: bytes, headers: dict = None, checksum: bool = True) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    lines = [f"-----BEGIN PGP {kind}-----"]
    for name, value in (headers or {}).items():
        lines.append(f"{name}: {value}")
    lines.append("")
    lines.extend(encoded[i:i + 64] for i in range(0, len(encoded), 64))
    if checksum:
        lines.append("=" + base64.b64encode(crc24(data).to_bytes(3, "big")).decode("ascii"))
    lines.append(f"-----END PGP {kind}-----")
    return "\n".join(lines) + "\n"


class OpenPGPSigner:
    """
    Ed25519 OpenPGP key that clear-signs text.

    Produces the same wire format as real license tooling so that the
    whole pipeline can be exercised with fresh keys.
    """

    CREATED = 1700000000

    def __init__(self):
        self.private_key = Ed25519PrivateKey.generate()
        public = self.private_key.public_key().public_bytes(
            serialization.Encoding.Raw, serialization.PublicFormat.Raw
        )
        self.key_body = (
            b"\x04"
            + self.CREATED.to_bytes(4, "big")
            + bytes([PUBKEY_EDDSA, len(ED25519_OID)])
            + ED25519_OID
            + mpi(b"\x40" + public)
        )
        self.fingerprint = hashlib.sha1(
            b"\x99" + len(self.key_body).to_bytes(2, "big") + self.key_body
        ).digest()
        self.key_id = self.fingerprint[-8:]

    def public_key_block(self) -> str:
        return armor("PUBLIC KEY BLOCK", packet(6, self.key_body), {"Version": "test"})

    def trust_anchor(self) -> TrustAnchor:
        return TrustAnchor.from_armored(self.public_key_block())

    def signature_packet(self, hash_input: bytes, issuer: bytes = None, signature_type: int = 0x01) -> bytes:
        subpackets = bytes([5, 2]) + self.CREATED.to_bytes(4, "big")
        hashed = bytes([4, signature_type, PUBKEY_EDDSA, 8]) + len(subpackets).to_bytes(2, "big") + subpackets
        trailer = hashed + b"\x04\xff" + len(hashed).to_bytes(4, "big")
        digest = hashlib.sha256(hash_input + trailer).digest()
        signature = self.private_key.sign(digest)
        unhashed = bytes([9, 16]) + (issuer or self.key_id)
        body = (
            hashed
            + len(unhashed).to_bytes(2, "big") + unhashed
            + digest[:2]
            + mpi(signature[:32])
            + mpi(signature[32:])
        )
        return packet(2, body)

    @staticmethod
    def body_lines(text: str) -> list:
        lines = text.split("\n")
        return lines[:-1] if text.endswith("\n") else lines

    @classmethod
    def canonical(cls, text: str) -> bytes:
        """CR LF joined lines, trailing blanks removed, no final line end."""
        return "\r\n".join(line.rstrip(" \t") for line in cls.body_lines(text)).encode("utf-8")

    def clear_sign(self, text: str, issuer: bytes = None, checksum: bool = True) -> bytes:
        """Clear-sign ``text`` (lines separated by "\\n")."""
        escaped = [("- " + line) if line.startswith("-") else line for line in self.body_lines(text)]
        signature = armor(
            "SIGNATURE",
            self.signature_packet(self.canonical(text), issuer=issuer),
            {"Version": "test"},
            checksum=checksum,
        )
        document = (
            "-----BEGIN PGP SIGNED MESSAGE-----\n"
            "Hash: SHA256\n"
            "\n"
            + "\n".join(escaped) + "\n"
            + signature
        )
        return document.encode("utf-8")


def license_text(**fields) -> str:
    """Pretty-printed license JSON with sensible defaults."""
    document = {
        "version": 1,
        "name": "ACME Corp",
        "uuid": "12c8052f-d78f-4a8e-bba4-a55a2d141fc8",
        "features": ["K8S_STREAM_CCU:200"],
        "startDate": "2024-01-01",
        "expirationDate": "2024-12-31",
    }
    document.update(fields)
    document = {k: v for k, v in document.items() if v is not None}
    return json.dumps(document, indent=2) + "\n"


# ============================================================
# Fixtures
# ============================================================

@pytest.fixture(scope="session")
def signer():
    """One Ed25519 key for the whole session."""
    return OpenPGPSigner()


@pytest.fixture(scope="session")
def signer_anchor(signer):
    return signer.trust_anchor()


@pytest.fixture(scope="session")
def fixture_message() -> bytes:
    """Real RSA-4096 / SHA-512 clear-signed message."""
    return (FIXTURES_DIR / "signed_message.asc").read_bytes()


@pytest.fixture(scope="session")
def fixture_public_key() -> bytes:
    return (FIXTURES_DIR / "test_public_key.asc").read_bytes()


@pytest.fixture(scope="session")
def fixture_anchor(fixture_public_key):
    return TrustAnchor.from_armored(fixture_public_key)
