from __future__ import annotations

from gmwrap.types import (
    COMMAND_NOT_FOUND,
    FILE_NOT_FOUND,
    NO_IMAGE_RETURNED,
    UNABLE_TO_OPEN,
    UNCLASSIFIED,
    CommandResult,
    ErrorKind,
)

# Order matters: the first substring found in the output decides the kind.
ERROR_RULES: tuple[tuple[str, ErrorKind], ...] = (
    ("command not found", COMMAND_NOT_FOUND),
    ("No such file", FILE_NOT_FOUND),
    ("Request did not return an image", NO_IMAGE_RETURNED),
    ("unable to open image", UNABLE_TO_OPEN),
)


def classify(output: str) -> ErrorKind | None:
    """Return the kind of the first known error message found in ``output``."""
    for needle, kind in ERROR_RULES:
        if needle in output:
            return kind
    return None


def parse_result(
    output: str,
    returncode: int | None = None,
    *,
    check_exit_status: bool = False,
) -> CommandResult:
    """Map the captured output of a gm command onto a ``CommandResult``.

    Silence is success. Text matching no rule is an unclassified error that
    carries the text itself.
    """
    kind = classify(output)
    if kind is not None:
        return CommandResult(error=kind, output=output)
    if output:
        return CommandResult(error=UNCLASSIFIED, output=output)
    if check_exit_status and returncode:
        return CommandResult(error=UNCLASSIFIED, output=f"exit status {returncode}")
    return CommandResult()
