"""Emitter manipulators and the small value types they are built from."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, auto


class EmitterManip(IntEnum):
    # general
    AUTO = 0
    TAG_BY_KIND = auto()
    NEWLINE = auto()
    # output character set
    EMIT_NON_ASCII = auto()
    ESCAPE_NON_ASCII = auto()
    ESCAPE_AS_JSON = auto()
    # strings
    SINGLE_QUOTED = auto()
    DOUBLE_QUOTED = auto()
    LITERAL = auto()
    # nulls
    LOWER_NULL = auto()
    UPPER_NULL = auto()
    CAMEL_NULL = auto()
    TILDE_NULL = auto()
    # bools
    YES_NO_BOOL = auto()
    TRUE_FALSE_BOOL = auto()
    ON_OFF_BOOL = auto()
    UPPER_CASE = auto()
    LOWER_CASE = auto()
    CAMEL_CASE = auto()
    LONG_BOOL = auto()
    SHORT_BOOL = auto()
    # integers
    DEC = auto()
    HEX = auto()
    OCT = auto()
    # documents
    BEGIN_DOC = auto()
    END_DOC = auto()
    # sequences
    BEGIN_SEQ = auto()
    END_SEQ = auto()
    FLOW = auto()
    BLOCK = auto()
    # maps
    BEGIN_MAP = auto()
    END_MAP = auto()
    KEY = auto()
    VALUE = auto()
    LONG_KEY = auto()


class TagType(Enum):
    VERBATIM = auto()
    PRIMARY_HANDLE = auto()
    NAMED_HANDLE = auto()


@dataclass(frozen=True)
class Indent:
    value: int


@dataclass(frozen=True)
class Alias:
    content: str


@dataclass(frozen=True)
class Anchor:
    content: str


@dataclass(frozen=True)
class Tag:
    prefix: str
    content: str
    type: TagType


@dataclass(frozen=True)
class Comment:
    content: str


@dataclass(frozen=True)
class Precision:
    """Float and double precisions; -1 leaves that one unchanged."""

    float_precision: int
    double_precision: int


def verbatim_tag(content: str) -> Tag:
    return Tag("", content, TagType.VERBATIM)


def local_tag(content: str, prefix: str | None = None) -> Tag:
    """A primary-handle tag, or a named-handle tag when a prefix is given."""
    if prefix is None:
        return Tag("", content, TagType.PRIMARY_HANDLE)
    return Tag(prefix, content, TagType.NAMED_HANDLE)


def secondary_tag(content: str) -> Tag:
    return Tag("", content, TagType.NAMED_HANDLE)


def float_precision(n: int) -> Precision:
    return Precision(n, -1)


def double_precision(n: int) -> Precision:
    return Precision(-1, n)


def precision(n: int) -> Precision:
    return Precision(n, n)