"""Thin command-line shim over GraphicsMagick's ``gm`` tool."""

from gmwrap.gm import composite, convert, identify, identify_explicit, mogrify, montage, version
from gmwrap.options import Bare, Valued, opt
from gmwrap.types import CommandResult, MetadataResult

__all__ = [
    "Bare",
    "CommandResult",
    "MetadataResult",
    "Valued",
    "composite",
    "convert",
    "identify",
    "identify_explicit",
    "mogrify",
    "montage",
    "opt",
    "version",
]
