"""Binary scalars and their base64 text form."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

_WHITESPACE = " \t\n\v\f\r"


def encode_base64(data: bytes) -> str:
    """Encode bytes as padded base64 text."""
    return base64.b64encode(bytes(data)).decode("ascii")


def decode_base64(text: str) -> bytes:
    """Decode base64 text, ignoring whitespace.

    Raises ValueError when the text holds anything else than base64.
    """
    compact = "".join(ch for ch in text if ch not in _WHITESPACE)
    try:
        return base64.b64decode(compact.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise ValueError(f"invalid base64 text: {text!r}") from exc


@dataclass
class Binary:
    """A block of binary data held by a YAML node."""

    data: bytes = b""

    def __post_init__(self) -> None:
        self.data = bytes(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return self.data

    @property
    def size(self) -> int:
        return len(self.data)

    def swap(self, data: bytes) -> bytes:
        """Take new contents and return the previous ones."""
        previous = self.data
        self.data = bytes(data)
        return previous