from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Union

from gmwrap.template import Bindings, Value, bind, quote


@dataclass(frozen=True)
class Bare:
    """A switch without an argument, e.g. ``-strip``."""

    switch: str

    def render(self, *, strict: bool = True) -> str:
        return self.switch


@dataclass(frozen=True)
class Valued:
    """A switch whose argument is produced by binding values into ``template``."""

    switch: str
    template: str
    bindings: tuple[tuple[str, Value], ...] = ()

    def __post_init__(self) -> None:
        pairs: Bindings = self.bindings
        if isinstance(pairs, Mapping):
            pairs = pairs.items()
        object.__setattr__(self, "bindings", tuple((str(key), value) for key, value in pairs))

    def render(self, *, strict: bool = True) -> str:
        argument = bind(self.template, self.bindings, strict=strict)
        return f"{self.switch} {quote(argument)}"


Option = Union[Bare, Valued]


def render_options(options: Iterable[Option], *, strict: bool = True) -> str:
    """Render options left to right into one space separated fragment."""
    return " ".join(option.render(strict=strict) for option in options)


# name -> variants of (switch, argument template, parameter names)
CATALOG: dict[str, tuple[tuple[str, str | None, tuple[str, ...]], ...]] = {
    "+adjoin": (("+adjoin", None, ()),),
    "adjoin": (("-adjoin", None, ()),),
    "append": (("-append", None, ()),),
    "+append": (("+append", None, ()),),
    "auto-orient": (("-auto-orient", None, ()),),
    "equalize": (("-equalize", None, ()),),
    "flatten": (("-flatten", None, ()),),
    "flip": (("-flip", None, ()),),
    "flop": (("-flop", None, ()),),
    "monochrome": (("-monochrome", None, ()),),
    "negate": (("-negate", None, ()),),
    "normalize": (("-normalize", None, ()),),
    "strip": (("-strip", None, ()),),
    "trim": (("-trim", None, ()),),
    "verbose": (("-verbose", None, ()),),
    "background": (("-background", ":color", ("color",)),),
    "blur": (("-blur", ":radiusx:sigma", ("radius", "sigma")),),
    "colorspace": (("-colorspace", ":colorspace", ("colorspace",)),),
    "crop": (
        ("-crop", ":widthx:height", ("width", "height")),
        ("-crop", ":widthx:height+:x_offset+:y_offset", ("width", "height", "x_offset", "y_offset")),
    ),
    "density": (("-density", ":widthx:height", ("width", "height")),),
    "dissolve": (("-dissolve", ":percent", ("percent",)),),
    "draw": (("-draw", ":primitive", ("primitive",)),),
    "edge": (("-edge", ":radius", ("radius",)),),
    "extent": (("-extent", ":widthx:height", ("width", "height")),),
    "fill": (("-fill", ":color", ("color",)),),
    "font": (("-font", ":font", ("font",)),),
    "geometry": (
        ("-geometry", ":widthx:height", ("width", "height")),
        ("-geometry", ":widthx:height+:x_offset+:y_offset", ("width", "height", "x_offset", "y_offset")),
    ),
    "gravity": (("-gravity", ":gravity", ("gravity",)),),
    "interlace": (("-interlace", ":interlace", ("interlace",)),),
    "pointsize": (("-pointsize", ":size", ("size",)),),
    "+profile": (("+profile", ":profile", ("profile",)),),
    "quality": (("-quality", ":quality", ("quality",)),),
    "resize": (
        ("-resize", ":widthx:height", ("width", "height")),
        ("-resize", ":widthx:height:modifier", ("width", "height", "modifier")),
    ),
    "rotate": (("-rotate", ":degrees", ("degrees",)),),
    "sharpen": (("-sharpen", ":radiusx:sigma", ("radius", "sigma")),),
    "size": (("-size", ":widthx:height", ("width", "height")),),
    "thumbnail": (("-thumbnail", ":widthx:height", ("width", "height")),),
    "tile": (("-tile", ":columnsx:rows", ("columns", "rows")),),
    "type": (("-type", ":type", ("type",)),),
}


def opt(name: str, *args: Value) -> Option:
    """Build a catalogued option, e.g. ``opt("resize", 100, 50)``."""
    try:
        variants = CATALOG[name]
    except KeyError as exc:
        raise ValueError(f"Unknown option '{name}'. Available options: {', '.join(sorted(CATALOG))}") from exc
    for switch, template, params in variants:
        if len(params) != len(args):
            continue
        if template is None:
            return Bare(switch)
        return Valued(switch, template, tuple(zip(params, args)))
    arities = ", ".join(str(len(params)) for _, _, params in variants)
    raise ValueError(f"Option '{name}' takes {arities} argument(s), got {len(args)}")


def parse_option_spec(spec: str) -> Option:
    """Parse ``name`` or ``name=arg1,arg2`` into a catalogued option."""
    name, sep, raw_args = spec.partition("=")
    name = name.strip()
    if not name:
        raise ValueError(f"Empty option name in {spec!r}")
    args = tuple(arg.strip() for arg in raw_args.split(",")) if sep else ()
    return opt(name, *args)
