"""Command templates for gm invocations.

A template mixes two kinds of substitution points:

* ``:name`` placeholders, bound to values (file names, option arguments);
* ``{{marker}}`` structural insertion points, filled with already rendered
  command-line fragments such as the option list.

``render`` substitutes both in a single pass over the original template, so
text coming from a value or a fragment is never matched again.
"""

from __future__ import annotations

import enum
import os
import re
from typing import Any, Iterable, Mapping, Sequence, Union

Scalar = Union[int, str, bytes, enum.Enum, "os.PathLike[str]"]
Value = Union[Scalar, Sequence[Scalar]]
Bindings = Union[Mapping[str, Value], Iterable[tuple[str, Value]]]

_MARKER = r"\{\{(?P<marker>\w+)\}\}"
_UNBOUND = r":(?P<unbound>[A-Za-z_]\w*)"
_SHELL_SPECIALS = re.compile(r'([\\"$`])')


class UnboundPlaceholderError(ValueError):
    """Raised when a template still has placeholders after rendering."""

    def __init__(self, template: str, names: Sequence[str]) -> None:
        self.template = template
        self.names = tuple(names)
        super().__init__(f"Unbound placeholders {', '.join(self.names)} in template {template!r}")


def stringify(value: Any) -> Any:
    """Return the command-line text of a scalar value."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, bytes):
        return os.fsdecode(value)
    if isinstance(value, os.PathLike):
        return os.fspath(value)
    return value


def quote(text: str) -> str:
    """Wrap ``text`` in double quotes, escaping what the shell still expands."""
    return '"' + _SHELL_SPECIALS.sub(r"\\\1", text) + '"'


def _render_value(value: Value, escape: bool) -> str:
    if isinstance(value, (list, tuple)):
        items = [stringify(item) for item in value]
    else:
        items = [stringify(value)]
    if escape:
        return " ".join(quote(str(item)) for item in items)
    return " ".join(str(item) for item in items)


def _ordered(bindings: Bindings | None) -> dict[str, Value]:
    pairs = bindings.items() if isinstance(bindings, Mapping) else (bindings or ())
    ordered: dict[str, Value] = {}
    for key, value in pairs:
        # first binding for a key wins, like sequential substitution would
        ordered.setdefault(str(stringify(key)), value)
    return ordered


def _pattern(keys: Iterable[str]) -> re.Pattern[str]:
    names = sorted(set(keys), key=len, reverse=True)
    alternatives = [_MARKER]
    if names:
        alternatives.append(":(?P<key>" + "|".join(re.escape(name) for name in names) + ")")
    alternatives.append(_UNBOUND)
    return re.compile("|".join(alternatives))


def _substitute(
    template: str,
    values: Mapping[str, Value],
    fragments: Mapping[str, str] | None,
    escape: bool,
) -> tuple[str, list[str]]:
    unresolved: list[str] = []

    def substitute(match: re.Match[str]) -> str:
        marker = match.group("marker")
        if marker is not None:
            if fragments is None:
                return match.group(0)
            if marker in fragments:
                return fragments[marker]
            unresolved.append(match.group(0))
            return match.group(0)
        key = match.groupdict().get("key")
        if key is not None:
            return _render_value(values[key], escape)
        unresolved.append(match.group(0))
        return match.group(0)

    return _pattern(values).sub(substitute, template), unresolved


def render(
    template: str,
    bindings: Bindings | None = None,
    *,
    fragments: Mapping[str, str] | None = None,
    escape: bool = False,
    strict: bool = True,
) -> str:
    """Fill ``{{marker}}`` points with ``fragments`` and ``:name`` points with ``bindings``.

    With ``strict`` set, any placeholder or marker left without a value raises
    ``UnboundPlaceholderError``. Otherwise it passes through literally.
    """
    rendered, unresolved = _substitute(template, _ordered(bindings), fragments or {}, escape)
    if strict and unresolved:
        raise UnboundPlaceholderError(template, unresolved)
    return rendered


def bind(template: str, bindings: Bindings, *, escape: bool = False, strict: bool = False) -> str:
    """Bind ``:name`` placeholders only; keys absent from the template are ignored."""
    rendered, unresolved = _substitute(template, _ordered(bindings), None, escape)
    if strict and unresolved:
        raise UnboundPlaceholderError(template, unresolved)
    return rendered


def splice(template: str, fragments: Mapping[str, str]) -> str:
    """Replace ``{{marker}}`` insertion points, leaving ``:name`` placeholders alone.

    An empty fragment also removes the whitespace in front of its marker.
    """

    def substitute(match: re.Match[str]) -> str:
        name = match.group("marker")
        if name not in fragments:
            return match.group(0)
        if not fragments[name]:
            return ""
        return match.group("space") + fragments[name]

    return re.sub(r"(?P<space>\s*)" + _MARKER, substitute, template)
