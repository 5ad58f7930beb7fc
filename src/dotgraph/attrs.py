"""Attribute values and attribute stores for DOT graph elements."""

from __future__ import annotations

import math
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Union

_ID_RE = re.compile(r"^[_A-Za-z][_A-Za-z0-9]*$")
_NUMERAL_RE = re.compile(r"^-?(\.[0-9]+|[0-9]+(\.[0-9]*)?)$")
_QUOTE_RE = re.compile(r'(\\*)(["\n])')
_TRAILING_BACKSLASHES_RE = re.compile(r"\\+\Z")
_ESCAPES = {'"': '\\"', "\n": "\\n"}

DOT_KEYWORDS = frozenset({"node", "edge", "graph", "digraph", "subgraph", "strict"})


@dataclass(frozen=True)
class HTML:
    """An HTML-like label, emitted between angle brackets."""

    text: str


@dataclass(frozen=True)
class Raw:
    """A literal emitted into the DOT text unchanged."""

    text: str


Value = Union[str, int, float, bool, HTML, Raw, None]


def needs_quotes(text: str) -> bool:
    """Return True if ``text`` is not a bare DOT identifier or numeral."""
    if text.lower() in DOT_KEYWORDS:
        return True
    return not (_ID_RE.match(text) or _NUMERAL_RE.match(text))


def _even_backslashes(run: str) -> str:
    return run + "\\" if len(run) % 2 else run


def quote(text: str) -> str:
    """Escape a string and wrap it in double quotes.

    Backslashes stay as written so Graphviz escapes such as ``\\l`` and
    ``\\N`` keep working. A run of them directly before a quote, a newline
    or the end of the string is padded to an even length so it cannot
    escape what follows.
    """
    escaped = _QUOTE_RE.sub(lambda m: _even_backslashes(m.group(1)) + _ESCAPES[m.group(2)], text)
    escaped = _TRAILING_BACKSLASHES_RE.sub(lambda m: _even_backslashes(m.group(0)), escaped)
    return f'"{escaped}"'


def quote_if_necessary(text: str) -> str:
    """Quote ``text`` only when DOT requires it."""
    return quote(text) if needs_quotes(text) else text


def _float_to_gv(value: float) -> str:
    """Write a float in positional notation; DOT numerals have no exponent."""
    if not math.isfinite(value):
        return quote(repr(value))
    return quote_if_necessary(format(Decimal(repr(value)), "f"))


@dataclass(frozen=True)
class AttrValue:
    """The value of an attribute, rendered by kind."""

    raw: Value = None

    def to_gv(self) -> str:
        """Return the DOT literal for this value."""
        value = self.raw
        if value is None:
            return '""'
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float):
            return _float_to_gv(value)
        if isinstance(value, HTML):
            return f"<{value.text}>"
        if isinstance(value, Raw):
            return value.text
        return quote_if_necessary(str(value))

    def __str__(self) -> str:
        if self.raw is None:
            return ""
        if isinstance(self.raw, (HTML, Raw)):
            return self.raw.text
        return str(self.raw)


class Attr:
    """A named attribute owned by one attribute store."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._value = AttrValue()

    @property
    def name(self) -> str:
        return self._name

    @property
    def value(self) -> AttrValue:
        return self._value

    @value.setter
    def value(self, value: Value | AttrValue) -> None:
        self.set(value)

    def set(self, value: Value | AttrValue) -> Attr:
        """Overwrite the value and return this attribute."""
        self._value = value if isinstance(value, AttrValue) else AttrValue(value)
        return self

    def to_gv(self) -> str:
        return f"{quote_if_necessary(self._name)} = {self._value.to_gv()}"

    def __repr__(self) -> str:
        return f"Attr({self._name!r}, {self._value.raw!r})"


class Attrs:
    """Insertion-ordered mapping of attribute name to :class:`Attr`.

    ``get`` creates missing attributes, so reading a name registers it.
    Attributes are never removed; only their values change.
    """

    def __init__(self, values: Mapping[str, Value] | None = None) -> None:
        self._attrs: dict[str, Attr] = {}
        if values:
            self.update(values)

    def get(self, name: str) -> Attr:
        attr = self._attrs.get(name)
        if attr is None:
            attr = Attr(name)
            self._attrs[name] = attr
        return attr

    def list(self) -> list[Attr]:
        return list(self._attrs.values())

    def update(self, values: Mapping[str, Value]) -> Attrs:
        for name, value in values.items():
            self.get(name).set(value)
        return self

    def is_empty(self) -> bool:
        return not self._attrs

    def to_dict(self) -> dict[str, str]:
        """Return attribute values as plain strings, in insertion order."""
        return {name: str(attr.value) for name, attr in self._attrs.items()}

    def to_gv(self) -> str:
        """Render ``[k = v, ...]``, or an empty string for an empty store."""
        if not self._attrs:
            return ""
        return "[" + ", ".join(attr.to_gv() for attr in self._attrs.values()) + "]"

    def __contains__(self, name: object) -> bool:
        return name in self._attrs

    def __len__(self) -> int:
        return len(self._attrs)

    def __iter__(self) -> Iterator[Attr]:
        return iter(list(self._attrs.values()))
