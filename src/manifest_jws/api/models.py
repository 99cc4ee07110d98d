from __future__ import annotations

from pydantic import BaseModel, Field


class VerifyRequest(BaseModel):
    manifest: str = Field(min_length=1)  # raw manifest text, hashed exactly as sent
    jws: str = Field(min_length=1)  # compact serialization


class RootKeyInfo(BaseModel):
    kid: str
    modulus_bits: int
    exponent_b64: str
