"""
Decoded bencoding values.

Bencoding has exactly four kinds of values and each one gets a class here:

- Integer:    i<digits>e            -> Integer(42)
- ByteString: <length>:<raw bytes>  -> ByteString(b"spam")
- List:       l<values>e            -> List([...])
- Dictionary: d<key><value>...e     -> Dictionary({"key": ...})

Dictionary keys are kept as text since every metainfo key is ASCII and the
assembler looks fields up by name. Values are built once by the decoder and
never modified afterwards. A decoded Dictionary also keeps a view of the exact
bytes it was decoded from, which is what the info hash is computed over.
"""

from types import MappingProxyType


class Value:
    __slots__ = ("value",)

    def __init__(self, value):
        object.__setattr__(self, "value", value)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.value == other.value

    def __repr__(self):
        return f"{type(self).__name__}({self.value!r})"


class Integer(Value):
    __slots__ = ()

    def __init__(self, value: int):
        super().__init__(value)


class ByteString(Value):
    __slots__ = ()

    def __init__(self, value: bytes):
        super().__init__(bytes(value))

    def text(self) -> str:
        # invalid UTF-8 becomes U+FFFD
        return self.value.decode("utf-8", errors="replace")


class List(Value):
    __slots__ = ()

    def __init__(self, value: list[Value]):
        super().__init__(tuple(value))

    def __iter__(self):
        return iter(self.value)

    def __len__(self):
        return len(self.value)


class Dictionary(Value):
    __slots__ = ("raw",)

    def __init__(self, value: dict[str, Value], raw: memoryview | None = None):
        super().__init__(MappingProxyType(dict(value)))
        object.__setattr__(self, "raw", raw)

    def __repr__(self):
        return f"Dictionary({dict(self.value)!r})"

    def __contains__(self, key: str):
        return key in self.value

    def __len__(self):
        return len(self.value)

    def get(self, key: str) -> Value | None:
        return self.value.get(key)

