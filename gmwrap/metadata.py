"""Explicit identify support.

``gm identify -format`` is asked to print every requested field as
``name: value`` with the fields separated by ``SEPARATOR``. ``parse_explicit``
turns that text back into a record.
"""

from __future__ import annotations

import logging
from typing import Iterable

from gmwrap.types import MALFORMED_FIELD, MetadataRecord, MetadataResult, MetadataValue

LOGGER = logging.getLogger("gmwrap.metadata")

SEPARATOR = "--SEP--"
FIELD_DELIMITER = ": "
NUMERIC_FIELDS = frozenset({"width", "height"})

FORMAT_CHARS: dict[str, str] = {
    "class": "%r",
    "colors": "%k",
    "comment": "%c",
    "compression": "%C",
    "depth": "%q",
    "directory": "%d",
    "extension": "%e",
    "filename": "%f",
    "format": "%m",
    "height": "%h",
    "label": "%l",
    "page_geometry": "%g",
    "quality": "%Q",
    "scenes": "%n",
    "signature": "%#",
    "size": "%b",
    "transparency": "%A",
    "type": "%m",
    "units": "%U",
    "width": "%w",
    "x_resolution": "%x",
    "y_resolution": "%y",
}


def format_string(fields: Iterable[str]) -> str:
    """Build the ``-format`` argument requesting ``fields``."""
    parts: list[str] = []
    for name in fields:
        try:
            escape = FORMAT_CHARS[name]
        except KeyError as exc:
            raise ValueError(
                f"Unknown metadata field '{name}'. Available fields: {', '.join(sorted(FORMAT_CHARS))}"
            ) from exc
        parts.append(f"{name}{FIELD_DELIMITER}{escape}")
    if not parts:
        raise ValueError("At least one metadata field is required.")
    return SEPARATOR.join(parts)


def converted_value(key: str, value: str) -> MetadataValue:
    if key in NUMERIC_FIELDS:
        return int(value)
    return value


def parse_explicit(text: str) -> MetadataResult:
    """Parse ``format_string`` shaped identify output into a ``MetadataResult``."""
    # gm may wrap long output, so line breaks carry no meaning here
    cleaned = text.replace("\r", "").replace("\n", "")
    record: MetadataRecord = {}
    for part in cleaned.split(SEPARATOR):
        key, sep, value = part.partition(FIELD_DELIMITER)
        if not sep:
            LOGGER.warning(
                "Malformed metadata field",
                extra={"structured_data": {"part": part}},
            )
            return MetadataResult(error=MALFORMED_FIELD, output=text)
        try:
            record[key] = converted_value(key, value)
        except ValueError:
            LOGGER.warning(
                "Non-numeric metadata value",
                extra={"structured_data": {"field": key, "value": value}},
            )
            return MetadataResult(error=MALFORMED_FIELD, output=text)
    return MetadataResult(record=record)
