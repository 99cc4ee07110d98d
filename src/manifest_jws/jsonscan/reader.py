"""Pull tokenizer over a JSON document held in a byte buffer.

The reader never materializes values: each token is reported as a type plus
the (start, end) offsets of its text in the buffer. String tokens exclude
their quotes and keep escapes undecoded. It supports exactly what the field
scanner needs: advance, inspect the token type, compare the token text and
skip the children of a composite value.

Re-initialize a new reader to restart over the same buffer.
"""
from __future__ import annotations

import re
from enum import Enum


class TokenType(str, Enum):
    BEGIN_OBJECT = "begin_object"
    END_OBJECT = "end_object"
    BEGIN_ARRAY = "begin_array"
    END_ARRAY = "end_array"
    PROPERTY_NAME = "property_name"
    STRING = "string"
    NUMBER = "number"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"


class JsonReaderError(ValueError):
    pass


_WS = b" \t\r\n"
_STRING_BODY_RE = re.compile(rb'(?:[^"\\\x00-\x1f]|\\(?:["\\/bfnrt]|u[0-9a-fA-F]{4}))*"')
_NUMBER_RE = re.compile(rb"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_LITERALS = {
    ord("t"): (b"true", TokenType.TRUE),
    ord("f"): (b"false", TokenType.FALSE),
    ord("n"): (b"null", TokenType.NULL),
}

# parser states
_VALUE, _NAME, _AFTER_VALUE, _DONE = range(4)


class JsonReader:
    def __init__(self, data):
        self._buf = memoryview(data).cast("B")
        self._pos = 0
        self._stack: list[int] = []
        self._state = _VALUE
        self._allow_close = False
        self.token_type: TokenType | None = None
        self._tok_start = 0
        self._tok_end = 0

    @property
    def depth(self) -> int:
        return len(self._stack)

    def token_slice(self) -> memoryview:
        return self._buf[self._tok_start:self._tok_end]

    def token_bounds(self) -> tuple[int, int]:
        return self._tok_start, self._tok_end

    def token_is_text_equal(self, text: bytes) -> bool:
        if self.token_type not in (TokenType.PROPERTY_NAME, TokenType.STRING):
            return False
        return self.token_slice() == text

    def next_token(self) -> bool:
        """Advance to the next token; False once the document is complete."""
        self._skip_ws()
        if self._state == _DONE:
            if self._pos < len(self._buf):
                raise JsonReaderError(f"trailing data at offset {self._pos}")
            return False
        c = self._peek()
        if self._state == _AFTER_VALUE:
            if c in (ord("}"), ord("]")):
                return self._close(c)
            if c != ord(","):
                raise JsonReaderError(f"expected ',' at offset {self._pos}")
            self._pos += 1
            self._skip_ws()
            self._state = _NAME if self._stack[-1] == ord("{") else _VALUE
            self._allow_close = False
            c = self._peek()
        if c in (ord("}"), ord("]")):
            if not self._allow_close:
                raise JsonReaderError(f"unexpected {chr(c)!r} at offset {self._pos}")
            return self._close(c)
        if self._state == _NAME:
            if c != ord('"'):
                raise JsonReaderError(f"expected property name at offset {self._pos}")
            self._read_string(TokenType.PROPERTY_NAME)
            self._skip_ws()
            if self._peek() != ord(":"):
                raise JsonReaderError(f"expected ':' at offset {self._pos}")
            self._pos += 1
            self._state = _VALUE
            self._allow_close = False
            return True
        return self._read_value(c)

    def skip_children(self) -> None:
        """Leave the reader on the last token of the current value.

        On a property name the reader first moves to its value. On a begin
        token it advances to the matching end token. Scalars are left alone.
        """
        if self.token_type == TokenType.PROPERTY_NAME:
            self._require_next()
        if self.token_type not in (TokenType.BEGIN_OBJECT, TokenType.BEGIN_ARRAY):
            return
        depth = self.depth
        while self.depth >= depth:
            self._require_next()

    def _require_next(self) -> None:
        if not self.next_token():
            raise JsonReaderError("unexpected end of document")

    def _read_value(self, c: int) -> bool:
        start = self._pos
        if c in (ord("{"), ord("[")):
            self._stack.append(c)
            self._pos += 1
            self._set_token(TokenType.BEGIN_OBJECT if c == ord("{") else TokenType.BEGIN_ARRAY, start, self._pos)
            self._state = _NAME if c == ord("{") else _VALUE
            self._allow_close = True
            return True
        if c == ord('"'):
            self._read_string(TokenType.STRING)
        elif c == ord("-") or ord("0") <= c <= ord("9"):
            m = _NUMBER_RE.match(self._buf, start)
            if not m:
                raise JsonReaderError(f"invalid number at offset {start}")
            self._pos = m.end()
            self._set_token(TokenType.NUMBER, start, self._pos)
        elif c in _LITERALS:
            word, kind = _LITERALS[c]
            if self._buf[start:start + len(word)] != word:
                raise JsonReaderError(f"invalid literal at offset {start}")
            self._pos += len(word)
            self._set_token(kind, start, self._pos)
        else:
            raise JsonReaderError(f"unexpected {chr(c)!r} at offset {start}")
        self._value_done()
        return True

    def _read_string(self, kind: TokenType) -> None:
        m = _STRING_BODY_RE.match(self._buf, self._pos + 1)
        if not m:
            raise JsonReaderError(f"unterminated or invalid string at offset {self._pos}")
        self._set_token(kind, self._pos + 1, m.end() - 1)
        self._pos = m.end()

    def _close(self, c: int) -> bool:
        opener = ord("{") if c == ord("}") else ord("[")
        if not self._stack or self._stack[-1] != opener:
            raise JsonReaderError(f"mismatched {chr(c)!r} at offset {self._pos}")
        self._stack.pop()
        self._set_token(TokenType.END_OBJECT if c == ord("}") else TokenType.END_ARRAY, self._pos, self._pos + 1)
        self._pos += 1
        self._value_done()
        return True

    def _value_done(self) -> None:
        self._state = _AFTER_VALUE if self._stack else _DONE

    def _set_token(self, kind: TokenType, start: int, end: int) -> None:
        self.token_type = kind
        self._tok_start = start
        self._tok_end = end

    def _peek(self) -> int:
        if self._pos >= len(self._buf):
            raise JsonReaderError("unexpected end of input")
        return self._buf[self._pos]

    def _skip_ws(self) -> None:
        while self._pos < len(self._buf) and self._buf[self._pos] in _WS:
            self._pos += 1


__all__ = ["JsonReader", "JsonReaderError", "TokenType"]
