"""Bounds-checked spans and the fixed-layout scratch arena.

A ``Span`` is an (origin, offset, length) view into a caller-owned buffer.
The ``ScratchArena`` carves one writable buffer into the disjoint named
regions the verifier decodes into, in a fixed order:

    outer_header | outer_payload | outer_signature |
    inner_header | inner_payload | inner_signature |
    key_modulus | key_exponent | manifest_digest | claimed_digest | calculation

Region sizes are sized for RSA-3072 signatures over SHA-256.
"""
from __future__ import annotations

from dataclasses import dataclass

from ..errors import BufferCapacityError

RSA3072_SIZE = 384
SHA256_SIZE = 32
# Byte offset of the digest inside a recovered SHA-256 DigestInfo block
PKCS7_PAYLOAD_OFFSET = 19

JWS_HEADER_SIZE = 1400
JWS_PAYLOAD_SIZE = 60
JWS_SIGNATURE_SIZE = 400
JWK_HEADER_SIZE = 48
JWK_PAYLOAD_SIZE = 700
JWK_SIGNATURE_SIZE = 500
SIGNING_KEY_E_SIZE = 10
SHA_CALCULATION_SCRATCH_SIZE = RSA3072_SIZE + SHA256_SIZE

REGION_LAYOUT: tuple[tuple[str, int], ...] = (
    ("outer_header", JWS_HEADER_SIZE),
    ("outer_payload", JWS_PAYLOAD_SIZE),
    ("outer_signature", JWS_SIGNATURE_SIZE),
    ("inner_header", JWK_HEADER_SIZE),
    ("inner_payload", JWK_PAYLOAD_SIZE),
    ("inner_signature", JWK_SIGNATURE_SIZE),
    ("key_modulus", RSA3072_SIZE),
    ("key_exponent", SIGNING_KEY_E_SIZE),
    ("manifest_digest", SHA256_SIZE),
    ("claimed_digest", SHA256_SIZE),
    ("calculation", SHA_CALCULATION_SCRATCH_SIZE),
)

SCRATCH_BUFFER_SIZE = sum(size for _, size in REGION_LAYOUT)


@dataclass(frozen=True, eq=False)
class Span:
    origin: memoryview
    offset: int
    length: int

    def __post_init__(self):
        if self.offset < 0 or self.length < 0 or self.offset + self.length > len(self.origin):
            raise BufferCapacityError(
                f"span [{self.offset}, {self.offset + self.length}) exceeds buffer of {len(self.origin)} bytes"
            )

    @classmethod
    def wrap(cls, buffer) -> "Span":
        view = memoryview(buffer).cast("B")
        return cls(view, 0, len(view))

    @property
    def end(self) -> int:
        return self.offset + self.length

    def view(self) -> memoryview:
        return self.origin[self.offset:self.end]

    def tobytes(self) -> bytes:
        return self.view().tobytes()

    def sub(self, start: int, length: int) -> "Span":
        if start < 0 or length < 0 or start + length > self.length:
            raise BufferCapacityError(
                f"sub-span [{start}, {start + length}) exceeds span of {self.length} bytes"
            )
        return Span(self.origin, self.offset + start, length)

    def __len__(self) -> int:
        return self.length

    def __repr__(self) -> str:
        return f"Span(offset={self.offset}, length={self.length})"


class ScratchArena:
    def __init__(self, buffer):
        view = memoryview(buffer).cast("B")
        if view.readonly:
            raise BufferCapacityError("scratch arena must be writable")
        if len(view) < SCRATCH_BUFFER_SIZE:
            raise BufferCapacityError(
                f"scratch arena of {len(view)} bytes is smaller than required {SCRATCH_BUFFER_SIZE}"
            )
        self._regions: dict[str, Span] = {}
        offset = 0
        for name, size in REGION_LAYOUT:
            self._regions[name] = Span(view, offset, size)
            offset += size

    def __getitem__(self, name: str) -> Span:
        return self._regions[name]


__all__ = [
    "Span",
    "ScratchArena",
    "SCRATCH_BUFFER_SIZE",
    "REGION_LAYOUT",
    "RSA3072_SIZE",
    "SHA256_SIZE",
    "PKCS7_PAYLOAD_OFFSET",
    "SHA_CALCULATION_SCRATCH_SIZE",
]
