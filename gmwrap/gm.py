"""Functions for interacting with GraphicsMagick.

Every operation renders one ``gm`` command line, runs it and reads back the
text it printed. GraphicsMagick prints nothing on success for the commands
that write images, so any output is treated as an error (see
``gmwrap.classify``).

Example::

    from gmwrap import gm
    from gmwrap.options import opt

    result = gm.convert("in.jpg", "out.png", [opt("resize", 100, 100), opt("strip")])
    if not result.ok:
        print(result.error, result.output)

    # {'filename': 'in.jpg', 'width': 640, 'height': 480, 'type': 'JPEG'}
    gm.identify_explicit("in.jpg", ["filename", "width", "height", "type"]).record
"""

from __future__ import annotations

import logging
import os
import shlex
from typing import Sequence

from gmwrap import executor
from gmwrap.classify import classify, parse_result
from gmwrap.config import Settings, load_config, resolve_binary
from gmwrap.metadata import format_string, parse_explicit
from gmwrap.options import Option, render_options
from gmwrap.template import Bindings, render, splice
from gmwrap.types import CommandResult, MetadataResult

LOGGER = logging.getLogger("gmwrap.gm")

FilePath = str | bytes | os.PathLike[str]

IDENTIFY_EXPLICIT_TEMPLATE = "identify -format :format_string :file"
IDENTIFY_TEMPLATE = "identify {{options}} :file"
COMPOSITE_TEMPLATE = "composite {{options}} :input_file :output_file"
CONVERT_TEMPLATE = "convert {{options}} :input_file {{output_options}} :output_file"
MOGRIFY_TEMPLATE = "mogrify {{options}} :file"
MONTAGE_TEMPLATE = "montage {{options}} :input_file :output_file"
VERSION_TEMPLATE = "version"


def _settings(settings: Settings | None) -> Settings:
    return settings if settings is not None else load_config()


def build_command(
    template: str,
    bindings: Bindings = (),
    options: Sequence[Option] = (),
    output_options: Sequence[Option] = (),
    *,
    settings: Settings | None = None,
) -> str:
    """Render the full shell command, binary included, for ``template``."""
    settings = _settings(settings)
    fragments = {
        "options": render_options(options, strict=settings.strict),
        "output_options": render_options(output_options, strict=settings.strict),
    }
    template = splice(template, {name: "" for name, fragment in fragments.items() if not fragment})
    rendered = render(template, bindings, fragments=fragments, escape=True, strict=settings.strict)
    return f"{shlex.quote(resolve_binary(settings))} {rendered}"


def _run(command: str, settings: Settings) -> CommandResult:
    completed = executor.run_command(command)
    result = parse_result(
        completed["output"],
        completed["returncode"],
        check_exit_status=settings.check_exit_status,
    )
    if not result.ok:
        LOGGER.error(
            "gm command failed",
            extra={"structured_data": {"command": command, "error": result.error}},
        )
    return result


def identify_explicit(
    file: FilePath,
    fields: Sequence[str],
    *,
    settings: Settings | None = None,
) -> MetadataResult:
    """Return the requested image characteristics as a record.

    ``width`` and ``height`` come back as integers, every other field as text.
    """
    settings = _settings(settings)
    bindings = [("file", file), ("format_string", format_string(fields))]
    command = build_command(IDENTIFY_EXPLICIT_TEMPLATE, bindings, settings=settings)
    completed = executor.run_command(command)
    output = completed["output"]
    kind = classify(output)
    if kind is not None:
        LOGGER.error(
            "gm identify failed",
            extra={"structured_data": {"command": command, "error": kind}},
        )
        return MetadataResult(error=kind, output=output)
    return parse_explicit(output)


def identify(file: FilePath, options: Sequence[Option] = (), *, settings: Settings | None = None) -> str:
    """Return the raw text printed by ``gm identify``."""
    settings = _settings(settings)
    command = build_command(IDENTIFY_TEMPLATE, [("file", file)], options, settings=settings)
    return executor.run_command(command)["output"]


def composite(
    file: FilePath,
    base_file: FilePath,
    output_file: FilePath,
    options: Sequence[Option] = (),
    *,
    settings: Settings | None = None,
) -> CommandResult:
    settings = _settings(settings)
    bindings = [("input_file", (file, base_file)), ("output_file", output_file)]
    return _run(build_command(COMPOSITE_TEMPLATE, bindings, options, settings=settings), settings)


def convert(
    file: FilePath,
    output_file: FilePath,
    options: Sequence[Option] = (),
    output_options: Sequence[Option] = (),
    *,
    settings: Settings | None = None,
) -> CommandResult:
    """Convert ``file`` into ``output_file``.

    ``options`` go before the input file and ``output_options`` between the
    input and output files, where gm applies them to the loaded image.
    """
    settings = _settings(settings)
    bindings = [("input_file", file), ("output_file", output_file)]
    command = build_command(CONVERT_TEMPLATE, bindings, options, output_options, settings=settings)
    return _run(command, settings)


def mogrify(file: FilePath, options: Sequence[Option], *, settings: Settings | None = None) -> CommandResult:
    """Transform ``file`` in place."""
    settings = _settings(settings)
    return _run(build_command(MOGRIFY_TEMPLATE, [("file", file)], options, settings=settings), settings)


def montage(
    files: Sequence[FilePath],
    output_file: FilePath,
    options: Sequence[Option] = (),
    *,
    settings: Settings | None = None,
) -> CommandResult:
    settings = _settings(settings)
    bindings = [("input_file", tuple(files)), ("output_file", output_file)]
    return _run(build_command(MONTAGE_TEMPLATE, bindings, options, settings=settings), settings)


def version(*, settings: Settings | None = None) -> str:
    """Return the raw text printed by ``gm version``."""
    settings = _settings(settings)
    return executor.run_command(build_command(VERSION_TEMPLATE, settings=settings))["output"]
