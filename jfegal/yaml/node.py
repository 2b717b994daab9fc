"""YAML document nodes with shared, reference-like semantics, and loading."""

from __future__ import annotations

import copy
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Union, get_args, get_origin

import yaml

from jfegal.yaml.binary import Binary, decode_base64
from jfegal.yaml.convert import decode_float, decode_integer, encode_scalar
from jfegal.yaml.errors import (
    BadConversion,
    BadFile,
    BadInsert,
    BadPushback,
    BadSubscript,
    DeepRecursion,
    DepthGuard,
    InvalidNode,
    Mark,
    ParserError,
)
from jfegal.yaml.style import EmitterStyle, NodeType, is_null_string

_NULL_TAG = "tag:yaml.org,2002:null"
_TRUE_WORDS = ("y", "yes", "true", "on")
_FALSE_WORDS = ("n", "no", "false", "off")
_FAIL = object()


@dataclass(eq=False)
class _Data:
    """The shared storage behind one or more Node handles."""

    type: NodeType = NodeType.NULL
    scalar: str = ""
    tag: str = ""
    style: EmitterStyle = EmitterStyle.DEFAULT
    mark: Mark = field(default_factory=Mark.null)
    items: list = field(default_factory=list)
    pairs: list = field(default_factory=list)

    def set_type(self, kind: NodeType) -> None:
        if kind == self.type:
            return
        self.type = kind
        if kind is NodeType.SCALAR:
            self.scalar = ""
        elif kind is NodeType.SEQUENCE:
            self.items = []
        elif kind is NodeType.MAP:
            self.pairs = []

    def assign(self, other: "_Data") -> None:
        self.type = other.type
        self.scalar = other.scalar
        self.tag = other.tag
        self.style = other.style
        self.mark = other.mark
        self.items = other.items
        self.pairs = other.pairs

    def convert_to_map(self) -> None:
        if self.type is NodeType.SEQUENCE:
            pairs = [(_scalar_data(str(index)), item) for index, item in enumerate(self.items)]
            self.items = []
            self.type = NodeType.MAP
            self.pairs = pairs
        elif self.type is not NodeType.MAP:
            self.set_type(NodeType.MAP)


def _scalar_data(text: str) -> _Data:
    return _Data(type=NodeType.SCALAR, scalar=text)


def _encode(value: Any) -> _Data:
    if isinstance(value, Node):
        return value._require()
    if value is None:
        return _Data()
    if isinstance(value, dict):
        data = _Data(type=NodeType.MAP)
        data.pairs = [(_encode(k), _encode(v)) for k, v in value.items()]
        return data
    if isinstance(value, (list, tuple)):
        data = _Data(type=NodeType.SEQUENCE)
        data.items = [_encode(item) for item in value]
        return data
    return _scalar_data(encode_scalar(value))


def _is_index(key: Any) -> bool:
    return isinstance(key, int) and not isinstance(key, bool) and key >= 0


def _key_text(key: Any) -> str:
    if isinstance(key, bool):
        return "1" if key else "0"
    if isinstance(key, (str, int, float)):
        return str(key)
    if isinstance(key, Node) and key._data is not None and key._data.type is NodeType.SCALAR:
        return key._data.scalar
    return ""


def _key_matches(stored: _Data, key: Any) -> bool:
    if isinstance(key, Node):
        return key._data is stored
    if type(key) not in (str, int, float, bool):
        return False
    value = _convert(stored, type(key))
    return value is not _FAIL and value == key


def _flexible(text: str, word: str) -> bool:
    return text in (word, word.upper(), word.capitalize())


def _decode_bool(text: str) -> Any:
    if any(_flexible(text, word) for word in _TRUE_WORDS):
        return True
    if any(_flexible(text, word) for word in _FALSE_WORDS):
        return False
    return _FAIL


def _convert(data: _Data, kind: Any) -> Any:
    """Decode data as kind; _FAIL when its shape or text does not fit."""
    is_scalar = data.type is NodeType.SCALAR
    if kind is Node:
        return Node._wrap(data)
    if kind is str:
        return data.scalar if is_scalar else _FAIL
    if kind is bool:
        return _decode_bool(data.scalar) if is_scalar else _FAIL
    if kind is int or kind is float:
        if not is_scalar:
            return _FAIL
        try:
            return decode_integer(data.scalar) if kind is int else decode_float(data.scalar)
        except BadConversion:
            return _FAIL
    if kind is Binary or kind is bytes:
        if not is_scalar:
            return _FAIL
        try:
            raw = decode_base64(data.scalar)
        except ValueError:
            return _FAIL
        if not raw and data.scalar:
            return _FAIL
        return Binary(raw) if kind is Binary else raw
    if kind is type(None):
        return None if data.type is NodeType.NULL else _FAIL

    origin = get_origin(kind) or kind
    args = get_args(kind)
    if origin is list:
        if data.type is not NodeType.SEQUENCE:
            return _FAIL
        element = args[0] if args else Node
        return [Node._wrap(item).as_(element) for item in data.items]
    if origin is tuple:
        if data.type is not NodeType.SEQUENCE:
            return _FAIL
        if not args or (len(args) == 2 and args[1] is Ellipsis):
            element = args[0] if args else Node
            return tuple(Node._wrap(item).as_(element) for item in data.items)
        if len(data.items) != len(args):
            return _FAIL
        return tuple(Node._wrap(item).as_(k) for item, k in zip(data.items, args))
    if origin is dict:
        if data.type is not NodeType.MAP:
            return _FAIL
        key_kind, value_kind = args if args else (str, Node)
        return {
            Node._wrap(k).as_(key_kind): Node._wrap(v).as_(value_kind)
            for k, v in data.pairs
        }
    raise TypeError(f"cannot convert a node to {kind!r}")


class Node:
    """A handle on a YAML value; handles obtained from one another share data.

    A lookup that misses yields an invalid node: it is false, ``get`` returns
    the fallback, and most other uses raise InvalidNode naming the missing key.
    """

    __slots__ = ("_data", "_invalid_key")

    def __init__(self, value: Any = None) -> None:
        if isinstance(value, Node):
            self._data = value._data
            self._invalid_key = value._invalid_key
            return
        if isinstance(value, NodeType):
            data = _Data()
            data.set_type(value)
        else:
            data = _encode(value)
        self._data: _Data | None = data
        self._invalid_key = ""

    @classmethod
    def _wrap(cls, data: _Data) -> "Node":
        node = cls.__new__(cls)
        node._data = data
        node._invalid_key = ""
        return node

    @classmethod
    def _zombie(cls, key: str) -> "Node":
        node = cls.__new__(cls)
        node._data = None
        node._invalid_key = key
        return node

    def _require(self) -> _Data:
        if self._data is None:
            raise InvalidNode(self._invalid_key)
        return self._data

    # kind and properties

    @property
    def node_type(self) -> NodeType:
        return self._require().type

    @property
    def mark(self) -> Mark:
        return self._require().mark

    @property
    def scalar(self) -> str:
        return self._require().scalar

    @property
    def tag(self) -> str:
        return self._require().tag

    @tag.setter
    def tag(self, value: str) -> None:
        self._require().tag = value

    @property
    def style(self) -> EmitterStyle:
        return self._require().style

    @style.setter
    def style(self, value: EmitterStyle) -> None:
        self._require().style = value

    def is_defined(self) -> bool:
        if self._data is None:
            return False
        return self._data.type is not NodeType.UNDEFINED

    def is_null(self) -> bool:
        return self.node_type is NodeType.NULL

    def is_scalar(self) -> bool:
        return self.node_type is NodeType.SCALAR

    def is_sequence(self) -> bool:
        return self.node_type is NodeType.SEQUENCE

    def is_map(self) -> bool:
        return self.node_type is NodeType.MAP

    def __bool__(self) -> bool:
        return self.is_defined()

    # conversion

    def as_(self, kind: Any) -> Any:
        """Convert to kind, raising BadConversion when the node does not fit.

        ``int`` reads a 32-bit signed integer; bare ``list`` and ``dict`` give
        nodes as elements (with string keys), while ``list[int]``,
        ``dict[str, int]`` or ``tuple[int, str]`` convert the elements too.
        """
        data = self._require()
        if kind is str:
            if data.type is NodeType.UNDEFINED:
                raise InvalidNode(self._invalid_key)
            if data.type is NodeType.NULL:
                return "null"
            if data.type is not NodeType.SCALAR:
                raise BadConversion(data.mark, str)
            return data.scalar
        value = _convert(data, kind)
        if value is _FAIL:
            raise BadConversion(data.mark, kind)
        return value

    def get(self, kind: Any, fallback: Any) -> Any:
        """Convert to kind, or return fallback if the node is invalid or does not fit."""
        data = self._data
        if data is None:
            return fallback
        if kind is str:
            if data.type is NodeType.NULL:
                return "null"
            if data.type is not NodeType.SCALAR:
                return fallback
            return data.scalar
        value = _convert(data, kind)
        return fallback if value is _FAIL else value

    def is_(self, other: "Node") -> bool:
        """Whether both handles refer to the same data."""
        if self._data is None or other._data is None:
            raise InvalidNode(self._invalid_key)
        return self._data is other._data

    # size and iteration

    def __len__(self) -> int:
        data = self._require()
        if data.type is NodeType.SEQUENCE:
            return len(data.items)
        if data.type is NodeType.MAP:
            return len(data.pairs)
        return 0

    def __iter__(self) -> Iterator["Node"]:
        """Elements of a sequence, or keys of a map."""
        data = self._data
        if data is None:
            return
        if data.type is NodeType.SEQUENCE:
            for item in list(data.items):
                yield Node._wrap(item)
        elif data.type is NodeType.MAP:
            for key, _ in list(data.pairs):
                yield Node._wrap(key)

    def items(self) -> Iterator[tuple["Node", "Node"]]:
        """Key and value pairs of a map, in document order."""
        data = self._data
        if data is None or data.type is not NodeType.MAP:
            return
        for key, value in list(data.pairs):
            yield Node._wrap(key), Node._wrap(value)

    # indexing

    def __getitem__(self, key: Any) -> "Node":
        data = self._require()
        if isinstance(key, Node):
            key._require()
        if data.type is NodeType.SCALAR:
            raise BadSubscript(data.mark, key)
        if data.type is NodeType.SEQUENCE:
            if _is_index(key) and key < len(data.items):
                return Node._wrap(data.items[key])
        elif data.type is NodeType.MAP:
            for stored, value in data.pairs:
                if _key_matches(stored, key):
                    return Node._wrap(value)
        return Node._zombie(_key_text(key))

    def __setitem__(self, key: Any, value: Any) -> None:
        data = self._require()
        if isinstance(key, Node):
            key._require()
        if data.type is NodeType.SCALAR:
            raise BadSubscript(data.mark, key)
        length = len(data.items) if data.type is NodeType.SEQUENCE else 0
        if data.type is not NodeType.MAP and _is_index(key) and key <= length:
            data.set_type(NodeType.SEQUENCE)
            if key == len(data.items):
                data.items.append(_assigned(None, value))
            else:
                data.items[key] = _assigned(data.items[key], value)
            return
        data.convert_to_map()
        for index, (stored, current) in enumerate(data.pairs):
            if _key_matches(stored, key):
                data.pairs[index] = (stored, _assigned(current, value))
                return
        data.pairs.append((_encode(key), _assigned(None, value)))

    def remove(self, key: Any) -> bool:
        """Remove a sequence element or the first matching map entry."""
        data = self._require()
        if isinstance(key, Node):
            key._require()
        if data.type is NodeType.SEQUENCE:
            if _is_index(key) and key < len(data.items):
                del data.items[key]
                return True
            return False
        if data.type is NodeType.MAP:
            for index, (stored, _) in enumerate(data.pairs):
                if _key_matches(stored, key):
                    del data.pairs[index]
                    return True
        return False

    def append(self, value: Any) -> None:
        """Append to a sequence; a null node becomes a sequence first."""
        data = self._require()
        if data.type in (NodeType.UNDEFINED, NodeType.NULL):
            data.set_type(NodeType.SEQUENCE)
        elif data.type is not NodeType.SEQUENCE:
            raise BadPushback()
        data.items.append(_encode(value))

    def force_insert(self, key: Any, value: Any) -> None:
        """Add a map entry without looking for an existing one."""
        data = self._require()
        if data.type is NodeType.SCALAR:
            raise BadInsert()
        data.convert_to_map()
        data.pairs.append((_encode(key), _encode(value)))

    def __repr__(self) -> str:
        data = self._data
        if data is None:
            return f"Node(<invalid key={self._invalid_key!r}>)"
        if data.type is NodeType.SCALAR:
            return f"Node({data.scalar!r})"
        if data.type is NodeType.SEQUENCE:
            return f"Node(<sequence of {len(data.items)}>)"
        if data.type is NodeType.MAP:
            return f"Node(<map of {len(data.pairs)}>)"
        return f"Node(<{data.type.name.lower()}>)"


def _assigned(existing: _Data | None, value: Any) -> _Data:
    if isinstance(value, Node):
        return value._require()
    new = _encode(value)
    if existing is None:
        return new
    existing.assign(new)
    return existing


def _mark_of(node: Any) -> Mark:
    start = getattr(node, "start_mark", None)
    if start is None:
        return Mark.null()
    return Mark(start.index, start.line, start.column)


def _style_of(node: Any) -> EmitterStyle:
    if node.flow_style is True:
        return EmitterStyle.FLOW
    if node.flow_style is False:
        return EmitterStyle.BLOCK
    return EmitterStyle.DEFAULT


class _Builder:
    """Turns one composed document into shared node data, keeping aliases shared."""

    def __init__(self) -> None:
        self._memo: dict[int, _Data] = {}
        self._guard = DepthGuard()

    def build(self, node: Any) -> _Data:
        known = self._memo.get(id(node))
        if known is not None:
            return known
        mark = _mark_of(node)
        with self._guard.guard(mark, "nesting too deep"):
            data = _Data(tag=node.tag or "", mark=mark)
            self._memo[id(node)] = data
            if isinstance(node, yaml.ScalarNode):
                if node.tag == _NULL_TAG and node.style is None and is_null_string(node.value):
                    data.set_type(NodeType.NULL)
                else:
                    data.set_type(NodeType.SCALAR)
                    data.scalar = node.value
            elif isinstance(node, yaml.SequenceNode):
                data.set_type(NodeType.SEQUENCE)
                data.style = _style_of(node)
                data.items = [self.build(child) for child in node.value]
            else:
                data.set_type(NodeType.MAP)
                data.style = _style_of(node)
                data.pairs = [(self.build(k), self.build(v)) for k, v in node.value]
        return data


def _parser_error(exc: yaml.YAMLError) -> ParserError:
    problem_mark = getattr(exc, "problem_mark", None)
    mark = Mark.null() if problem_mark is None else _mark_of_position(problem_mark)
    message = getattr(exc, "problem", None) or str(exc)
    return ParserError(mark, message)


def _mark_of_position(position: Any) -> Mark:
    return Mark(position.index, position.line, position.column)


def _documents(source: Union[str, bytes], first_only: bool) -> list[Node]:
    try:
        composed = yaml.compose_all(source, Loader=yaml.SafeLoader)
        if first_only:
            first = next(composed, None)
            return [Node() if first is None else Node._wrap(_Builder().build(first))]
        return [Node._wrap(_Builder().build(document)) for document in composed]
    except yaml.YAMLError as exc:
        raise _parser_error(exc) from exc
    except RecursionError as exc:
        raise DeepRecursion(
            sys.getrecursionlimit(), Mark.null(), "nesting too deep"
        ) from exc


def _read(path: Union[str, os.PathLike]) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise BadFile(os.fspath(path)) from exc


def load(text: Union[str, bytes]) -> Node:
    """Load the first YAML document; empty input gives a null node."""
    return _documents(text, first_only=True)[0]


def load_file(path: Union[str, os.PathLike]) -> Node:
    """Load the first YAML document of a file; raises BadFile if unreadable."""
    return _documents(_read(path), first_only=True)[0]


def load_all(text: Union[str, bytes]) -> list[Node]:
    """Load every YAML document in the input."""
    return _documents(text, first_only=False)


def load_all_from_file(path: Union[str, os.PathLike]) -> list[Node]:
    """Load every YAML document of a file; raises BadFile if unreadable."""
    return _documents(_read(path), first_only=False)


def clone(node: Node) -> Node:
    """A deep copy sharing nothing with the original, aliases kept internal."""
    return Node._wrap(copy.deepcopy(node._require()))