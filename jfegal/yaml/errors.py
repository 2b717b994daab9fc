"""Source positions, the YAML error hierarchy and a recursion depth guard."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

YAML_DIRECTIVE_ARGS = "YAML directives must have exactly one argument"
YAML_VERSION = "bad YAML version: "
YAML_MAJOR_VERSION = "YAML major version too large"
REPEATED_YAML_DIRECTIVE = "repeated YAML directive"
TAG_DIRECTIVE_ARGS = "TAG directives must have exactly two arguments"
REPEATED_TAG_DIRECTIVE = "repeated TAG directive"
CHAR_IN_TAG_HANDLE = "illegal character found while scanning tag handle"
TAG_WITH_NO_SUFFIX = "tag handle with no suffix"
END_OF_VERBATIM_TAG = "end of verbatim tag not found"
END_OF_MAP = "end of map not found"
END_OF_MAP_FLOW = "end of map flow not found"
END_OF_SEQ = "end of sequence not found"
END_OF_SEQ_FLOW = "end of sequence flow not found"
MULTIPLE_TAGS = "cannot assign multiple tags to the same node"
MULTIPLE_ANCHORS = "cannot assign multiple anchors to the same node"
MULTIPLE_ALIASES = "cannot assign multiple aliases to the same node"
ALIAS_CONTENT = "aliases can't have any content, *including* tags"
INVALID_HEX = "bad character found while scanning hex number"
INVALID_UNICODE = "invalid unicode: "
INVALID_ESCAPE = "unknown escape character: "
UNKNOWN_TOKEN = "unknown token"
DOC_IN_SCALAR = "illegal document indicator in scalar"
EOF_IN_SCALAR = "illegal EOF in scalar"
CHAR_IN_SCALAR = "illegal character in scalar"
UNEXPECTED_SCALAR = "unexpected scalar"
UNEXPECTED_FLOW = "plain value cannot start with flow indicator character"
TAB_IN_INDENTATION = "illegal tab when looking for indentation"
FLOW_END = "illegal flow end"
BLOCK_ENTRY = "illegal block entry"
MAP_KEY = "illegal map key"
MAP_VALUE = "illegal map value"
ALIAS_NOT_FOUND = "alias not found after *"
ANCHOR_NOT_FOUND = "anchor not found after &"
CHAR_IN_ALIAS = "illegal character found while scanning alias"
CHAR_IN_ANCHOR = "illegal character found while scanning anchor"
ZERO_INDENT_IN_BLOCK = "cannot set zero indentation for a block scalar"
CHAR_IN_BLOCK = "unexpected character in block scalar"
AMBIGUOUS_ANCHOR = "cannot assign the same alias to multiple nodes"
UNKNOWN_ANCHOR = "the referenced anchor is not defined: "

INVALID_NODE = (
    "invalid node; this may result from using a map iterator as a sequence "
    "iterator, or vice-versa"
)
INVALID_SCALAR = "invalid scalar"
KEY_NOT_FOUND = "key not found"
BAD_CONVERSION = "bad conversion"
BAD_DEREFERENCE = "bad dereference"
BAD_SUBSCRIPT = "operator[] call on a scalar"
BAD_PUSHBACK = "appending to a non-sequence"
BAD_INSERT = "inserting in a non-convertible-to-map"

UNMATCHED_GROUP_TAG = "unmatched group tag"
UNEXPECTED_END_SEQ = "unexpected end sequence token"
UNEXPECTED_END_MAP = "unexpected end map token"
SINGLE_QUOTED_CHAR = "invalid character in single-quoted string"
INVALID_ANCHOR = "invalid anchor"
INVALID_ALIAS = "invalid alias"
INVALID_TAG = "invalid tag"
BAD_FILE = "bad file"


@dataclass(frozen=True)
class Mark:
    """A position in YAML input; all -1 means "no position"."""

    pos: int = 0
    line: int = 0
    column: int = 0

    @classmethod
    def null(cls) -> "Mark":
        return cls(-1, -1, -1)

    def is_null(self) -> bool:
        return self.pos == -1 and self.line == -1 and self.column == -1


def _describes_key(key: Any) -> bool:
    if isinstance(key, bool):
        return False
    return isinstance(key, (str, int, float))


def key_not_found_message(key: Any) -> str:
    """Message for a missing map key; strings and numbers are quoted in."""
    if _describes_key(key):
        return f"{KEY_NOT_FOUND}: {key}"
    return KEY_NOT_FOUND


def bad_subscript_message(key: Any) -> str:
    """Message for subscripting a scalar; strings and numbers are quoted in."""
    if _describes_key(key):
        return f'{BAD_SUBSCRIPT} (key: "{key}")'
    return BAD_SUBSCRIPT


def invalid_node_message(key: str) -> str:
    """Message for using an invalid node, naming the first missing key."""
    if not key:
        return INVALID_NODE
    return f'invalid node; first invalid key: "{key}"'


class YamlError(Exception):
    """Base of all YAML errors, carrying the mark and the bare message."""

    def __init__(self, mark: Mark, msg: str) -> None:
        self.mark = mark
        self.msg = msg
        super().__init__(self._describe(mark, msg))

    @staticmethod
    def _describe(mark: Mark, msg: str) -> str:
        if mark.is_null():
            return msg
        return f"yaml: error at line {mark.line + 1}, column {mark.column + 1}: {msg}"


class ParserError(YamlError):
    """Malformed YAML input."""


class RepresentationError(YamlError):
    """A well-formed document used in a way its shape does not allow."""


class InvalidScalar(RepresentationError):
    def __init__(self, mark: Mark | None = None) -> None:
        super().__init__(mark or Mark.null(), INVALID_SCALAR)


class KeyNotFound(RepresentationError):
    def __init__(self, mark: Mark | None, key: Any) -> None:
        self.key = key
        super().__init__(mark or Mark.null(), key_not_found_message(key))


class InvalidNode(RepresentationError):
    def __init__(self, key: str = "") -> None:
        self.key = key
        super().__init__(Mark.null(), invalid_node_message(key))


class BadConversion(RepresentationError):
    def __init__(self, mark: Mark | None = None, kind: Any = None) -> None:
        self.kind = kind
        super().__init__(mark or Mark.null(), BAD_CONVERSION)


class BadDereference(RepresentationError):
    def __init__(self) -> None:
        super().__init__(Mark.null(), BAD_DEREFERENCE)


class BadSubscript(RepresentationError):
    def __init__(self, mark: Mark | None, key: Any) -> None:
        self.key = key
        super().__init__(mark or Mark.null(), bad_subscript_message(key))


class BadPushback(RepresentationError):
    def __init__(self) -> None:
        super().__init__(Mark.null(), BAD_PUSHBACK)


class BadInsert(RepresentationError):
    def __init__(self) -> None:
        super().__init__(Mark.null(), BAD_INSERT)


class EmitterError(YamlError):
    def __init__(self, msg: str) -> None:
        super().__init__(Mark.null(), msg)


class BadFile(YamlError):
    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(Mark.null(), f"{BAD_FILE}: {filename}")


class DeepRecursion(ParserError):
    """Raised when nesting passes the limit of a DepthGuard."""

    def __init__(self, depth: int, mark: Mark, msg: str) -> None:
        self.depth = depth
        super().__init__(mark, msg)


class DepthGuard:
    """Counts nesting depth and refuses to go to max_depth or beyond."""

    def __init__(self, max_depth: int = 2000) -> None:
        self.max_depth = max_depth
        self.depth = 0

    @contextmanager
    def guard(self, mark: Mark, message: str) -> Iterator[int]:
        self.depth += 1
        try:
            if self.max_depth <= self.depth:
                raise DeepRecursion(self.depth, mark, message)
            yield self.depth
        finally:
            self.depth -= 1