"""Runtime object model for Monkey.

Every runtime value is a MonkeyObject subclass exposing ``type()`` (an
ObjectType discriminant) and ``inspect()`` (human readable rendering).
Integer, Boolean and String are immutable and Hashable; they derive the
HashKey used to index Hash values.

TRUE, FALSE and NULL are singletons; the evaluator never builds new
Boolean or Null instances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from monkey.errors import MonkeyTypeError


class ObjectType(Enum):
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    NULL = "NULL"
    STRING = "STRING"
    ARRAY = "ARRAY"
    HASH = "HASH"
    RETURN_VALUE = "RETURN_VALUE"
    ERROR = "ERROR"
    FUNCTION = "FUNCTION"
    BUILTIN = "BUILTIN"
    QUOTE = "QUOTE"
    MACRO = "MACRO"

    def __str__(self) -> str:
        return self.value


class MonkeyObject:
    __slots__ = ()

    def type(self) -> ObjectType:
        raise NotImplementedError

    def inspect(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.inspect()


@dataclass(frozen=True)
class HashKey:
    type: ObjectType
    value: int


class Hashable(MonkeyObject):
    """Marker base for values usable as Hash keys."""

    __slots__ = ()

    def hash_key(self) -> HashKey:
        raise NotImplementedError


# FNV-1a, 64 bit
FNV_OFFSET_BASIS = 0xCBF29CE484222325
FNV_PRIME = 0x100000001B3
MASK64 = 0xFFFFFFFFFFFFFFFF


def fnv1a_64(data: bytes) -> int:
    h = FNV_OFFSET_BASIS
    for b in data:
        h ^= b
        h = (h * FNV_PRIME) & MASK64
    return h


def hash_key_of(obj: MonkeyObject) -> HashKey:
    """Return the HashKey of ``obj``; unhashable values are a usage error."""
    if not isinstance(obj, Hashable):
        raise MonkeyTypeError(f"unusable as hash key: {obj.type()}")
    return obj.hash_key()


# -------------------------------
# Scalars
# -------------------------------
@dataclass(frozen=True, slots=True)
class Integer(Hashable):
    value: int

    def type(self) -> ObjectType:
        return ObjectType.INTEGER

    def inspect(self) -> str:
        return str(self.value)

    def hash_key(self) -> HashKey:
        return HashKey(ObjectType.INTEGER, self.value)


@dataclass(frozen=True, slots=True)
class Boolean(Hashable):
    value: bool

    def type(self) -> ObjectType:
        return ObjectType.BOOLEAN

    def inspect(self) -> str:
        return "true" if self.value else "false"

    def hash_key(self) -> HashKey:
        return HashKey(ObjectType.BOOLEAN, 1 if self.value else 0)


class Null(MonkeyObject):
    __slots__ = ()

    def type(self) -> ObjectType:
        return ObjectType.NULL

    def inspect(self) -> str:
        return "null"

    def __repr__(self) -> str:
        return "NULL"


@dataclass(frozen=True, slots=True)
class String(Hashable):
    value: str

    def type(self) -> ObjectType:
        return ObjectType.STRING

    def inspect(self) -> str:
        return self.value

    def hash_key(self) -> HashKey:
        return HashKey(ObjectType.STRING, fnv1a_64(self.value.encode("utf-8")))


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


def native_bool_to_boolean(value: bool) -> Boolean:
    return TRUE if value else FALSE


# -------------------------------
# Aggregates
# -------------------------------
@dataclass(slots=True)
class Array(MonkeyObject):
    elements: list[MonkeyObject] = field(default_factory=list)

    def type(self) -> ObjectType:
        return ObjectType.ARRAY

    def inspect(self) -> str:
        return "[" + ", ".join(e.inspect() for e in self.elements) + "]"


@dataclass(frozen=True, slots=True)
class HashPair:
    key: MonkeyObject
    value: MonkeyObject


@dataclass(slots=True)
class Hash(MonkeyObject):
    pairs: dict[HashKey, HashPair] = field(default_factory=dict)

    def type(self) -> ObjectType:
        return ObjectType.HASH

    def inspect(self) -> str:
        items = (f"{p.key.inspect()}: {p.value.inspect()}" for p in self.pairs.values())
        return "{" + ", ".join(items) + "}"

    def get(self, key: MonkeyObject) -> MonkeyObject | None:
        pair = self.pairs.get(hash_key_of(key))
        return pair.value if pair is not None else None

    def put(self, key: MonkeyObject, value: MonkeyObject) -> None:
        self.pairs[hash_key_of(key)] = HashPair(key, value)


# -------------------------------
# Control-flow carriers
# -------------------------------
@dataclass(frozen=True, slots=True)
class ReturnValue(MonkeyObject):
    value: MonkeyObject

    def type(self) -> ObjectType:
        return ObjectType.RETURN_VALUE

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass(frozen=True, slots=True)
class Error(MonkeyObject):
    message: str

    def type(self) -> ObjectType:
        return ObjectType.ERROR

    def inspect(self) -> str:
        return f"ERROR: {self.message}"


def new_error(message: str) -> Error:
    return Error(message)


def is_error(obj: MonkeyObject | None) -> bool:
    return obj is not None and obj.type() is ObjectType.ERROR


# -------------------------------
# Syntax as data
# -------------------------------
@dataclass(frozen=True, slots=True)
class Quote(MonkeyObject):
    node: object

    def type(self) -> ObjectType:
        return ObjectType.QUOTE

    def inspect(self) -> str:
        return f"QUOTE({self.node})"
