"""Failure taxonomy for manifest verification.

Every collaborator failure (base64, JSON tokenizer, RSA backend) is translated
into exactly one of these kinds at the call site that observed it. The
orchestrator stamps the failing stage on the way out.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    STRUCTURAL_FORMAT = "structural_format"
    BUFFER_CAPACITY = "buffer_capacity"
    DECODE = "decode"
    FIELD_NOT_FOUND = "field_not_found"
    TRUST_ANCHOR_MISMATCH = "trust_anchor_mismatch"
    SIGNATURE_VERIFICATION = "signature_verification"
    CONTENT_DIGEST_MISMATCH = "content_digest_mismatch"


class ManifestVerificationError(Exception):
    kind: ErrorKind

    def __init__(self, detail: str, stage: str | None = None):
        super().__init__(detail)
        self.detail = detail
        self.stage = stage


class StructuralFormatError(ManifestVerificationError):
    kind = ErrorKind.STRUCTURAL_FORMAT


class BufferCapacityError(ManifestVerificationError):
    kind = ErrorKind.BUFFER_CAPACITY


class DecodeError(ManifestVerificationError):
    kind = ErrorKind.DECODE


class FieldNotFoundError(ManifestVerificationError):
    kind = ErrorKind.FIELD_NOT_FOUND


class TrustAnchorMismatchError(ManifestVerificationError):
    kind = ErrorKind.TRUST_ANCHOR_MISMATCH


class SignatureVerificationError(ManifestVerificationError):
    kind = ErrorKind.SIGNATURE_VERIFICATION


class ContentDigestMismatchError(ManifestVerificationError):
    kind = ErrorKind.CONTENT_DIGEST_MISMATCH


__all__ = [
    "ErrorKind",
    "ManifestVerificationError",
    "StructuralFormatError",
    "BufferCapacityError",
    "DecodeError",
    "FieldNotFoundError",
    "TrustAnchorMismatchError",
    "SignatureVerificationError",
    "ContentDigestMismatchError",
]
