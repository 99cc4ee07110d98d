from __future__ import annotations

import base64
import hashlib

from ..jws.arena import SHA256_SIZE, Span


def sha256_into(data, dest: Span) -> Span:
    """Write SHA-256(data) into the first 32 bytes of ``dest``."""
    if dest.length < SHA256_SIZE:
        raise ValueError(f"digest destination holds {dest.length} bytes, need {SHA256_SIZE}")
    out = dest.sub(0, SHA256_SIZE)
    out.view()[:] = hashlib.sha256(data).digest()
    return out


def sha256_b64(data: bytes) -> str:
    return base64.b64encode(hashlib.sha256(data).digest()).decode()


__all__ = ["sha256_into", "sha256_b64"]
