from __future__ import annotations

from dataclasses import dataclass

from ..errors import StructuralFormatError
from .arena import Span

_DOT = ord(".")


@dataclass(frozen=True)
class SignedMessage:
    """Header, payload and signature spans of one compact JWS."""

    header: Span
    payload: Span
    signature: Span

    @property
    def signing_input(self) -> Span:
        # header "." payload, contiguous in the origin buffer
        return Span(self.header.origin, self.header.offset, self.payload.end - self.header.offset)


def split_compact(message: Span) -> SignedMessage:
    """Split ``header.payload.signature`` without copying.

    Requires exactly two separators and a non-empty signature segment.
    """
    first = second = -1
    dots = 0
    for index, byte in enumerate(message.view()):
        if byte != _DOT:
            continue
        dots += 1
        if dots == 1:
            first = index
        elif dots == 2:
            second = index
        else:
            raise StructuralFormatError("compact JWS has more than two separators")
    if dots != 2:
        raise StructuralFormatError(f"compact JWS needs two separators, found {dots}")
    if second >= message.length - 1:
        raise StructuralFormatError("compact JWS has an empty signature segment")
    return SignedMessage(
        header=message.sub(0, first),
        payload=message.sub(first + 1, second - first - 1),
        signature=message.sub(second + 1, message.length - second - 1),
    )


__all__ = ["SignedMessage", "split_compact"]
