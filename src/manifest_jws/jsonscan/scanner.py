from __future__ import annotations

from dataclasses import dataclass

from ..errors import FieldNotFoundError
from .reader import JsonReader, JsonReaderError, TokenType


@dataclass(frozen=True)
class FieldValue:
    token_type: TokenType
    start: int
    end: int
    raw: memoryview


def find_fields(reader: JsonReader, *names: bytes) -> dict[bytes, FieldValue]:
    """Locate ``names`` among the members of the object at the reader.

    The reader must be positioned before (or on) the object's begin token.
    Only direct members are considered; values of other members are skipped
    whole. The first occurrence of a name wins. Raises FieldNotFoundError if
    the object or document ends, or the tokenizer fails, before every name
    has been seen.
    """
    pending = set(names)
    found: dict[bytes, FieldValue] = {}
    try:
        if reader.token_type is None and not reader.next_token():
            raise FieldNotFoundError(_missing(names, found))
        if reader.token_type != TokenType.BEGIN_OBJECT:
            raise FieldNotFoundError(f"expected a JSON object; {_missing(names, found)}")
        while pending:
            if not reader.next_token() or reader.token_type == TokenType.END_OBJECT:
                break
            match = next((n for n in pending if reader.token_is_text_equal(n)), None)
            if match is None:
                reader.skip_children()
                continue
            if not reader.next_token():
                break
            start, end = reader.token_bounds()
            found[match] = FieldValue(reader.token_type, start, end, reader.token_slice())
            pending.discard(match)
            reader.skip_children()
    except JsonReaderError as e:
        raise FieldNotFoundError(f"{_missing(names, found)} ({e})") from e
    if pending:
        raise FieldNotFoundError(_missing(names, found))
    return found


def find_field(reader: JsonReader, name: bytes) -> FieldValue:
    return find_fields(reader, name)[name]


def _missing(names: tuple[bytes, ...], found: dict[bytes, FieldValue]) -> str:
    missing = [n.decode(errors="replace") for n in names if n not in found]
    return "missing JSON field(s): " + ", ".join(missing)


__all__ = ["FieldValue", "find_fields", "find_field"]
