"""Base64 adapter that decodes into bounded spans.

Unpadded input is accepted by re-adding the implied padding. The signature
segment of a compact JWS is normalized to the standard alphabet in place
before decoding; header, payload and key parts go through a decoder that
tolerates either alphabet.
"""
from __future__ import annotations

import base64
import binascii

from ..errors import DecodeError
from .arena import Span

_URL_TO_STD = bytes.maketrans(b"-_", b"+/")


def swap_url_alphabet(span: Span) -> None:
    view = span.view()
    view[:] = view.tobytes().translate(_URL_TO_STD)


def decode(data, *, tolerant: bool = True) -> bytes:
    raw = bytes(data)
    text = raw.rstrip(b"=")
    if len(text) % 4 == 1:
        raise DecodeError(f"base64 input of {len(text)} characters cannot be decoded")
    if len(raw) != len(text) and len(raw) - len(text) != -len(text) % 4:
        raise DecodeError(f"base64 input has {len(raw) - len(text)} padding characters")
    text += b"=" * (-len(text) % 4)
    if tolerant:
        text = text.translate(_URL_TO_STD)
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"invalid base64 input: {e}") from e


def decode_into(src: Span, dest: Span, *, tolerant: bool = True) -> Span:
    """Decode ``src`` into the start of ``dest`` and return the written span."""
    raw = decode(src.view(), tolerant=tolerant)
    if len(raw) > dest.length:
        raise DecodeError(f"decoded {len(raw)} bytes do not fit destination of {dest.length}")
    out = dest.sub(0, len(raw))
    out.view()[:] = raw
    return out


def decode_signature_into(src: Span, dest: Span) -> Span:
    swap_url_alphabet(src)
    return decode_into(src, dest, tolerant=False)


def b64url_encode(data: bytes) -> bytes:
    return base64.urlsafe_b64encode(data).rstrip(b"=")


__all__ = ["swap_url_alphabet", "decode", "decode_into", "decode_signature_into", "b64url_encode"]
