"""Node kinds, emitter styles and null recognition."""

from __future__ import annotations

from enum import IntEnum

NULL_ANCHOR = 0

_NULL_STRINGS = frozenset({"", "~", "null", "Null", "NULL"})


class NodeType(IntEnum):
    UNDEFINED = 0
    NULL = 1
    SCALAR = 2
    SEQUENCE = 3
    MAP = 4


class EmitterStyle(IntEnum):
    DEFAULT = 0
    BLOCK = 1
    FLOW = 2


class EmitterNodeType(IntEnum):
    NO_TYPE = 0
    PROPERTY = 1
    SCALAR = 2
    FLOW_SEQ = 3
    BLOCK_SEQ = 4
    FLOW_MAP = 5
    BLOCK_MAP = 6


def is_null_string(text: str) -> bool:
    """Whether a plain scalar spells null."""
    return text in _NULL_STRINGS