"""Two-level JWS chain verification for update manifests.

The JWS delivered with a manifest carries, in its protected header, a signed
JWK (``sjwk``): a second compact JWS whose payload is the RSA signing key and
whose signature was made by the root key. Verification runs strictly in this
order and stops at the first failure:

  1. split and decode the outer JWS
  2. pull ``sjwk`` from the outer header, split and decode it
  3. check the inner header ``kid`` names the root key
  4. read ``n``/``e``/``alg`` of the signing key from the inner payload
  5. verify the inner signature with the root key
  6. verify the outer signature with the signing key
  7. compare SHA-256 of the manifest with the ``sha256`` claim of the outer payload

All decoded data lands in the caller's scratch arena.
"""
from __future__ import annotations

import hmac
import logging
from contextlib import contextmanager
from dataclasses import dataclass

from .crypto.digest import sha256_into
from .crypto.root_key import RootKeyAnchor, root_key
from .crypto.rsa_raw import PublicKey, rs256_verify
from .errors import (
    ContentDigestMismatchError,
    ManifestVerificationError,
    SignatureVerificationError,
    StructuralFormatError,
    TrustAnchorMismatchError,
)
from .jsonscan.reader import JsonReader
from .jsonscan.scanner import FieldValue, find_field, find_fields
from .jws.arena import SHA256_SIZE, ScratchArena, Span
from .jws.b64 import decode_into, decode_signature_into
from .jws.compact import SignedMessage, split_compact
from .outcome import VerificationOutcome
from .settings import settings

SHA256_FIELD = b"sha256"
SJWK_FIELD = b"sjwk"
KID_FIELD = b"kid"
N_FIELD = b"n"
E_FIELD = b"e"
ALG_FIELD = b"alg"

SUPPORTED_ALG = b"RS256"


@dataclass(frozen=True)
class DecodedMessage:
    encoded: SignedMessage
    header: Span
    payload: Span
    signature: Span


@contextmanager
def _stage(name: str):
    try:
        yield
    except ManifestVerificationError as err:
        if err.stage is None:
            err.stage = name
        raise


def _decode_message(message: SignedMessage, header: Span, payload: Span, signature: Span) -> DecodedMessage:
    return DecodedMessage(
        encoded=message,
        header=decode_into(message.header, header),
        payload=decode_into(message.payload, payload),
        signature=decode_signature_into(message.signature, signature),
    )


def _field_span(container: Span, value: FieldValue) -> Span:
    return container.sub(value.start, value.end - value.start)


class ManifestVerifier:
    """Verifies manifests against one root key (the compiled-in anchor by default)."""

    def __init__(self, root: RootKeyAnchor | None = None):
        self._root = root if root is not None else root_key()

    @property
    def root(self) -> RootKeyAnchor:
        return self._root

    def verify(self, manifest, jws, scratch) -> VerificationOutcome:
        try:
            self.authenticate(manifest, jws, scratch)
        except ManifestVerificationError as err:
            logging.warning("[JWS] manifest verification failed at %s (%s): %s", err.stage, err.kind.value, err.detail)
            return VerificationOutcome.failure(err)
        return VerificationOutcome.success()

    def authenticate(self, manifest, jws, scratch) -> None:
        """Raise a ManifestVerificationError subclass unless the manifest is authentic.

        ``jws`` is normalized in place when it is a writable buffer; ``bytes``
        input is copied first. ``manifest`` is only read.
        """
        manifest = memoryview(manifest).cast("B")
        if not isinstance(jws, (bytearray, memoryview)) or memoryview(jws).readonly:
            jws = bytearray(jws)

        with _stage("check_input"):
            arena = ScratchArena(scratch)
            if len(manifest) == 0:
                raise StructuralFormatError("manifest is empty")
            if len(manifest) > settings.mjws_max_manifest_bytes:
                raise StructuralFormatError(
                    f"manifest of {len(manifest)} bytes exceeds limit {settings.mjws_max_manifest_bytes}"
                )
            if len(jws) > settings.mjws_max_jws_bytes:
                raise StructuralFormatError(f"JWS of {len(jws)} bytes exceeds limit {settings.mjws_max_jws_bytes}")

        with _stage("split_outer"):
            outer_encoded = split_compact(Span.wrap(jws))

        with _stage("decode_outer"):
            outer = _decode_message(
                outer_encoded, arena["outer_header"], arena["outer_payload"], arena["outer_signature"]
            )

        with _stage("locate_signing_key"):
            sjwk = _field_span(outer.header, find_field(JsonReader(outer.header.view()), SJWK_FIELD))

        with _stage("split_inner"):
            inner_encoded = split_compact(sjwk)

        with _stage("decode_inner"):
            inner = _decode_message(
                inner_encoded, arena["inner_header"], arena["inner_payload"], arena["inner_signature"]
            )

        with _stage("trust_anchor"):
            kid = find_field(JsonReader(inner.header.view()), KID_FIELD)
            if kid.raw != self._root.kid:
                raise TrustAnchorMismatchError(
                    f"signing key is certified by {kid.raw.tobytes()!r}, expected root {self._root.kid!r}"
                )

        with _stage("key_material"):
            key_fields = find_fields(JsonReader(inner.payload.view()), N_FIELD, E_FIELD, ALG_FIELD)
            if key_fields[ALG_FIELD].raw != SUPPORTED_ALG:
                raise SignatureVerificationError(
                    f"unsupported signing key algorithm {key_fields[ALG_FIELD].raw.tobytes()!r}"
                )
            modulus = decode_into(_field_span(inner.payload, key_fields[N_FIELD]), arena["key_modulus"])
            exponent = decode_into(_field_span(inner.payload, key_fields[E_FIELD]), arena["key_exponent"])
            signing_key = PublicKey(modulus.tobytes(), exponent.tobytes())

        with _stage("verify_signing_key"):
            rs256_verify(
                inner_encoded.signing_input.view(),
                inner.signature.view(),
                self._root.public_key(),
                arena["calculation"],
            )

        with _stage("verify_manifest_signature"):
            rs256_verify(
                outer_encoded.signing_input.view(),
                outer.signature.view(),
                signing_key,
                arena["calculation"],
            )

        with _stage("verify_content_digest"):
            computed = sha256_into(manifest, arena["manifest_digest"])
            claim = find_field(JsonReader(outer.payload.view()), SHA256_FIELD)
            claimed = decode_into(_field_span(outer.payload, claim), arena["claimed_digest"])
            if claimed.length != SHA256_SIZE:
                raise ContentDigestMismatchError(f"claimed digest is {claimed.length} bytes, expected {SHA256_SIZE}")
            if not hmac.compare_digest(computed.view(), claimed.view()):
                raise ContentDigestMismatchError("manifest SHA-256 does not match the signed claim")

        logging.info("[JWS] Calculated manifest SHA matches parsed SHA")


_default_verifier = ManifestVerifier()


def verify_manifest(manifest, jws, scratch) -> VerificationOutcome:
    """Verify ``manifest`` against its detached ``jws`` using the built-in root key."""
    return _default_verifier.verify(manifest, jws, scratch)


__all__ = ["ManifestVerifier", "verify_manifest", "DecodedMessage"]
