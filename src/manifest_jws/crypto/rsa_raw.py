"""RS256 verification from raw modulus/exponent bytes.

The signature is opened with the public exponent and the PKCS#1 v1.5 type-1
padding removed, which leaves the DER DigestInfo the signer wrapped around
the SHA-256 digest. Rather than parsing that structure, the digest is read at
the fixed offset a SHA-256 DigestInfo places it (PKCS7_PAYLOAD_OFFSET). The
offset is only valid for SHA-256.
"""
from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ..errors import BufferCapacityError, SignatureVerificationError
from ..jws.arena import PKCS7_PAYLOAD_OFFSET, RSA3072_SIZE, SHA256_SIZE, SHA_CALCULATION_SCRATCH_SIZE, Span
from .digest import sha256_into

MIN_MODULUS_BITS = 2048
MAX_MODULUS_BITS = RSA3072_SIZE * 8


@dataclass(frozen=True)
class PublicKey:
    modulus: bytes
    exponent: bytes

    def load(self) -> rsa.RSAPublicKey:
        """Build and validate the key; invalid numbers raise SignatureVerificationError."""
        n = int.from_bytes(self.modulus, "big")
        e = int.from_bytes(self.exponent, "big")
        if not MIN_MODULUS_BITS <= n.bit_length() <= MAX_MODULUS_BITS:
            raise SignatureVerificationError(f"unsupported RSA modulus size: {n.bit_length()} bits")
        try:
            return rsa.RSAPublicNumbers(e, n).public_key()
        except ValueError as err:
            raise SignatureVerificationError(f"invalid RSA public key: {err}") from err


def rs256_verify(signed, signature, key: PublicKey, scratch: Span) -> None:
    if scratch.length < SHA_CALCULATION_SCRATCH_SIZE:
        raise BufferCapacityError(
            f"RSA scratch holds {scratch.length} bytes, need {SHA_CALCULATION_SCRATCH_SIZE}"
        )
    decrypted = scratch.sub(0, RSA3072_SIZE)
    computed = scratch.sub(RSA3072_SIZE, SHA256_SIZE)

    public_key = key.load()
    signature = bytes(signature)
    if len(signature) != (public_key.key_size + 7) // 8:
        raise SignatureVerificationError(
            f"signature is {len(signature)} bytes, key modulus is {(public_key.key_size + 7) // 8}"
        )
    try:
        block = public_key.recover_data_from_signature(signature, padding.PKCS1v15(), None)
    except (InvalidSignature, ValueError) as err:
        logging.debug("[JWS] RSA public decrypt failed: %s", err)
        raise SignatureVerificationError("RSA public-key operation failed") from err
    if len(block) < PKCS7_PAYLOAD_OFFSET + SHA256_SIZE:
        raise SignatureVerificationError(f"recovered signature block too short ({len(block)} bytes)")
    decrypted.sub(0, len(block)).view()[:] = block

    sha256_into(signed, computed)
    embedded = decrypted.sub(PKCS7_PAYLOAD_OFFSET, SHA256_SIZE)
    if not hmac.compare_digest(embedded.view(), computed.view()):
        raise SignatureVerificationError("signed content digest does not match signature")


__all__ = ["PublicKey", "rs256_verify", "MIN_MODULUS_BITS", "MAX_MODULUS_BITS"]
