"""
Recursive-descent decoder for bencoded data.

The decoder walks an immutable byte buffer with an explicit position. Every
primitive (peek, advance, take) raises DecodeError instead of running past the
end of the buffer, so truncated or hostile input can only ever fail with a
DecodeError and never yields a partial tree.
"""

import logging

from hermes.torrent.errors import DecodeError
from hermes.torrent.value import ByteString, Dictionary, Integer, List, Value

logger = logging.getLogger(__name__)

TOKEN_DICT = ord("d")
TOKEN_END = ord("e")
TOKEN_LIST = ord("l")
TOKEN_INTEGER = ord("i")
TOKEN_DELIMITER = ord(":")
TOKEN_MINUS = ord("-")

DIGITS = frozenset(b"0123456789")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

MAX_DEPTH = 256  # lists and dictionaries
MAX_DIGITS = 64


class Decoder:
    __slots__ = ("_data", "_index", "_depth")

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._index = 0
        self._depth = 0

    @property
    def position(self) -> int:
        return self._index

    def at_end(self) -> bool:
        return self._index >= len(self._data)

    def peek(self) -> int:
        if self.at_end():
            raise DecodeError("Unexpected end of input", self._index)
        return self._data[self._index]

    def advance(self) -> int:
        token = self.peek()
        self._index += 1
        return token

    def take(self, n: int) -> bytes:
        end = self._index + n
        if end > len(self._data):
            raise DecodeError(
                f"Expected {n} bytes but only {len(self._data) - self._index} remain",
                self._index,
            )
        chunk = self._data[self._index : end]
        self._index = end
        return chunk

    def decode(self) -> Value:
        """Decode one value starting at the current position."""
        token = self.peek()

        if token == TOKEN_DICT:
            return self._decode_dictionary()
        if token == TOKEN_LIST:
            return self._decode_list()
        if token == TOKEN_INTEGER:
            return self._decode_integer()
        if token in DIGITS:
            return self._decode_string()

        raise DecodeError(f"Invalid token {bytes([token])!r}", self._index)

    def _read_digits(self, terminator: int, allow_sign: bool) -> int:
        start = self._index
        negative = False
        if allow_sign and self.peek() == TOKEN_MINUS:
            negative = True
            self.advance()

        digits = bytearray()
        while (token := self.peek()) != terminator:
            if token not in DIGITS:
                raise DecodeError(f"Unexpected byte {bytes([token])!r} in number", self._index)
            digits.append(token)
            self.advance()

        if not digits:
            raise DecodeError("Empty number", start)
        if len(digits) > MAX_DIGITS:
            raise DecodeError("Number too long", start)

        self.advance()  # terminator
        number = int(digits)
        return -number if negative else number

    def _decode_integer(self) -> Integer:
        start = self._index
        self.advance()  # 'i'
        number = self._read_digits(TOKEN_END, allow_sign=True)
        if not INT64_MIN <= number <= INT64_MAX:
            raise DecodeError("Integer does not fit in 64 bits", start)
        return Integer(number)

    def _decode_string(self) -> ByteString:
        length = self._read_digits(TOKEN_DELIMITER, allow_sign=False)
        return ByteString(self.take(length))

    def _enter(self):
        self._depth += 1
        if self._depth > MAX_DEPTH:
            raise DecodeError(f"Nesting deeper than {MAX_DEPTH} levels", self._index)

    def _decode_list(self) -> List:
        self._enter()
        self.advance()  # 'l'

        items = []
        while self.peek() != TOKEN_END:
            items.append(self.decode())

        self.advance()
        self._depth -= 1
        return List(items)

    def _decode_dictionary(self) -> Dictionary:
        start = self._index
        self._enter()
        self.advance()  # 'd'

        entries = {}
        while (token := self.peek()) != TOKEN_END:
            key_offset = self._index
            if token not in DIGITS:
                raise DecodeError("Dictionary key is not a byte string", key_offset)
            raw_key = self._decode_string().value
            try:
                key = raw_key.decode("utf-8")
            except UnicodeDecodeError:
                raise DecodeError("Dictionary key is not valid UTF-8", key_offset) from None
            entries[key] = self.decode()

        self.advance()
        self._depth -= 1
        return Dictionary(entries, raw=memoryview(self._data)[start : self._index])


def decode(data: bytes, strict: bool = False) -> Value:
    """
    Decode a single bencoded value.

    Bytes following the first complete value are ignored unless `strict` is set,
    in which case they are reported as a DecodeError.
    """
    decoder = Decoder(data)
    value = decoder.decode()
    if not decoder.at_end():
        if strict:
            raise DecodeError("Trailing data after value", decoder.position)
        logger.debug(
            f"Ignoring {len(data) - decoder.position} trailing bytes after bencoded value"
        )
    return value


def decode_dictionary(data: bytes, strict: bool = False) -> Dictionary:
    """Decode a metainfo document, whose top-level value must be a dictionary."""
    if not data or data[0] != TOKEN_DICT:
        raise DecodeError("Top-level value is not a dictionary", 0)
    return decode(data, strict=strict)
