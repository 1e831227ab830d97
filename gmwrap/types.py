from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, NotRequired, TypedDict, Union

COMMAND_NOT_FOUND = "command_not_found"
FILE_NOT_FOUND = "file_not_found"
NO_IMAGE_RETURNED = "no_image_returned"
UNABLE_TO_OPEN = "unable_to_open"
UNCLASSIFIED = "unclassified"
MALFORMED_FIELD = "malformed_field"

ErrorKind = Literal[
    "command_not_found",
    "file_not_found",
    "no_image_returned",
    "unable_to_open",
    "unclassified",
    "malformed_field",
]

MetadataValue = Union[str, int]
MetadataRecord = dict[str, MetadataValue]


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a gm invocation that is not expected to print anything."""

    error: ErrorKind | None = None
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class MetadataResult:
    """Outcome of an explicit identify call."""

    record: MetadataRecord = field(default_factory=dict)
    error: ErrorKind | None = None
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


class CompletedCommand(TypedDict):
    """Raw outcome of running one shell command."""

    command: str
    returncode: int
    output: str


class CommandSummary(TypedDict):
    """JSON summary printed by the CLI for a single operation."""

    operation: str
    ok: bool
    error: NotRequired[str]
    output: NotRequired[str]
    metadata: NotRequired[MetadataRecord]


__all__ = [
    "COMMAND_NOT_FOUND",
    "CommandResult",
    "CommandSummary",
    "CompletedCommand",
    "ErrorKind",
    "FILE_NOT_FOUND",
    "MALFORMED_FIELD",
    "MetadataRecord",
    "MetadataResult",
    "MetadataValue",
    "NO_IMAGE_RETURNED",
    "UNABLE_TO_OPEN",
    "UNCLASSIFIED",
]
