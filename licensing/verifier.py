"""
Signature verification against a fixed trust anchor.

The trust anchor is an armored public key block. Every key and subkey in it
is indexed by its 64-bit key ID; the signature's issuer subpacket selects
the key that must have produced it.

Supported: v4 signatures, RSA (PKCS#1 v1.5) and EdDSA/Ed25519 keys,
SHA-1/224/256/384/512 digests.
"""

import logging
from typing import Dict, Iterable, Optional, Sequence, Tuple

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.asymmetric import utils as asym_utils
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from .armor import decode_armor
from .clearsign import ClearSignedMessage
from .errors import MalformedMessageError, VerificationError
from .packets import (
    ED25519_OID,
    HASH_ALGORITHMS,
    HASH_NAMES,
    PUBKEY_EDDSA,
    RSA_ALGORITHMS,
    SIG_BINARY,
    SIG_TEXT,
    TAG_PUBLIC_KEY,
    TAG_PUBLIC_SUBKEY,
    TAG_SIGNATURE,
    PublicKey,
    Signature,
    iter_packets,
    parse_public_key,
    parse_signature,
)

logger = logging.getLogger(__name__)

ED25519_KEY_SIZE = 32


class TrustAnchor:
    """
    Read-only set of public keys that license signatures are checked against.
    """

    def __init__(self, keys: Iterable[PublicKey]):
        self._keys: Dict[bytes, PublicKey] = {key.key_id: key for key in keys}

    @classmethod
    def from_armored(cls, armored) -> "TrustAnchor":
        """
        Load a trust anchor from an armored PUBLIC KEY BLOCK.

        Raises:
            VerificationError: Block cannot be parsed or holds no v4 key
        """
        try:
            block = decode_armor(armored, expected_kind="PUBLIC KEY BLOCK")
            keys = [
                parse_public_key(packet)
                for packet in iter_packets(block.data)
                if packet.tag in (TAG_PUBLIC_KEY, TAG_PUBLIC_SUBKEY) and packet.body[:1] == b"\x04"
            ]
        except MalformedMessageError as e:
            raise VerificationError(f"Failed to read trust anchor: {e}")

        if not keys:
            raise VerificationError("Trust anchor contains no usable public key")
        return cls(keys)

    def get_key(self, key_id: bytes) -> Optional[PublicKey]:
        return self._keys.get(key_id)

    @property
    def key_ids(self) -> Tuple[str, ...]:
        return tuple(key.key_id_hex for key in self._keys.values())

    def __contains__(self, key_id: bytes) -> bool:
        return key_id in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return f"TrustAnchor(keys={list(self.key_ids)})"


def read_signature(signature) -> Signature:
    """
    Extract the first signature packet from an armored SIGNATURE block.

    Raises:
        MalformedMessageError: Armor or packet framing is broken
        VerificationError: No signature packet present
    """
    block = decode_armor(signature, expected_kind="SIGNATURE")
    for packet in iter_packets(block.data):
        if packet.tag == TAG_SIGNATURE:
            return parse_signature(packet)
    raise VerificationError("Signature block contains no signature packet")


def _digest(hash_algorithm: int, hash_input: bytes, signature: Signature) -> Tuple[bytes, hashes.HashAlgorithm]:
    hash_cls = HASH_ALGORITHMS.get(hash_algorithm)
    if hash_cls is None:
        raise VerificationError(f"Unsupported hash algorithm {hash_algorithm}")
    algorithm = hash_cls()
    context = hashes.Hash(algorithm)
    context.update(hash_input)
    context.update(signature.trailer)
    return context.finalize(), algorithm


def _verify_rsa(key: PublicKey, signature: Signature, digest: bytes, algorithm) -> bool:
    n, e = key.material
    size = (n.bit_length() + 7) // 8
    value = signature.values[0]
    if len(value) > size:
        return False
    public_key = rsa.RSAPublicNumbers(e, n).public_key()
    try:
        public_key.verify(
            value.rjust(size, b"\x00"),
            digest,
            padding.PKCS1v15(),
            asym_utils.Prehashed(algorithm),
        )
    except InvalidSignature:
        return False
    return True


def _verify_ed25519(key: PublicKey, signature: Signature, digest: bytes) -> bool:
    oid, point = key.material
    if oid != ED25519_OID or len(point) != ED25519_KEY_SIZE + 1 or point[0] != 0x40:
        raise VerificationError(f"Unsupported EdDSA key {key.key_id_hex}")
    r, s = signature.values
    if len(r) > ED25519_KEY_SIZE or len(s) > ED25519_KEY_SIZE:
        return False
    public_key = Ed25519PublicKey.from_public_bytes(point[1:])
    try:
        public_key.verify(
            r.rjust(ED25519_KEY_SIZE, b"\x00") + s.rjust(ED25519_KEY_SIZE, b"\x00"),
            digest,
        )
    except InvalidSignature:
        return False
    return True


def verify(hash_input: bytes, signature, trust_anchor: TrustAnchor, armor_hashes: Sequence[str] = ()) -> bool:
    """
    Check a detached signature over canonical clear-signed text.

    Args:
        hash_input: Canonicalized text (see clearsign.decode)
        signature: Armored SIGNATURE block
        trust_anchor: Keys allowed to sign licenses
        armor_hashes: Names from the clear-sign "Hash:" headers; when given,
            the signature must use one of them

    Returns:
        True if the signature is valid for exactly ``hash_input``,
        False if the cryptographic check rejects it

    Raises:
        VerificationError: Unknown issuer, unsupported algorithm or
            signature type, or a hash the "Hash:" header does not list
        MalformedMessageError: Signature armor or packet is broken
    """
    parsed = read_signature(signature)

    if parsed.signature_type not in (SIG_BINARY, SIG_TEXT):
        raise VerificationError(f"Unexpected signature type 0x{parsed.signature_type:02x}")
    hash_name = HASH_NAMES.get(parsed.hash_algorithm, str(parsed.hash_algorithm))
    if armor_hashes and hash_name not in {name.upper() for name in armor_hashes}:
        raise VerificationError(
            f"Signature uses {hash_name}, but the Hash header lists {', '.join(armor_hashes)}"
        )
    if parsed.issuer is None:
        raise VerificationError("Signature does not name its issuer key")

    key = trust_anchor.get_key(parsed.issuer)
    if key is None:
        raise VerificationError(f"Signing key {parsed.issuer_hex} not found in trust anchor")
    same_family = key.algorithm == parsed.algorithm or (
        key.algorithm in RSA_ALGORITHMS and parsed.algorithm in RSA_ALGORITHMS
    )
    if not same_family or not key.material:
        raise VerificationError(
            f"Key {key.key_id_hex} (algorithm {key.algorithm}) cannot check "
            f"a signature made with algorithm {parsed.algorithm}"
        )

    digest, algorithm = _digest(parsed.hash_algorithm, hash_input, parsed)

    if digest[:2] != parsed.digest_prefix:
        logger.debug(f"Digest prefix mismatch for key {key.key_id_hex}")
        return False

    if parsed.algorithm in RSA_ALGORITHMS:
        return _verify_rsa(key, parsed, digest, algorithm)
    if parsed.algorithm == PUBKEY_EDDSA:
        return _verify_ed25519(key, parsed, digest)

    raise VerificationError(f"Unsupported signature algorithm {parsed.algorithm}")


def verify_message(message: ClearSignedMessage, trust_anchor: TrustAnchor) -> bool:
    """Verify a decoded clear-signed message."""
    return verify(
        message.hash_input, message.signature, trust_anchor, armor_hashes=message.hash_algorithms
    )
