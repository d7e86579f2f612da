"""Splitting and building file names with ``/`` separators."""

from __future__ import annotations

from dataclasses import replace

from .pathname import PathName, format_grist, split_file, split_grist

__all__ = ["parse_path", "build_path", "parent_path"]

_DELIM = "/"


def parse_path(file: str) -> PathName:
    """Split ``file`` into grist, directory, base, suffix and member."""
    grist, rest = split_grist(file)
    directory = ""
    slash = rest.rfind(_DELIM)
    if slash >= 0:
        # The directory of "/x" is "/", not "".
        directory = rest[:slash] or _DELIM
        rest = rest[slash + 1 :]
    base, suffix, member = split_file(rest)
    return PathName(
        grist=grist, dir=directory, base=base, suffix=suffix, member=member
    )


def build_path(name: PathName, binding: bool = False) -> str:
    """Join the parts of ``name`` back into a file name."""
    parts = [format_grist(name.grist)]
    if (
        name.root
        and name.root != "."
        and not name.dir.startswith(_DELIM)
    ):
        parts.append(name.root + _DELIM)
    if name.dir:
        parts.append(name.dir)
        if (name.base or name.suffix) and name.dir != _DELIM:
            parts.append(_DELIM)
    parts.append(name.base)
    parts.append(name.suffix)
    if name.member:
        parts.append(f"({name.member})")
    return "".join(parts)


def parent_path(name: PathName) -> PathName:
    """Return the name of the directory holding ``name``."""
    return replace(name, base="", suffix="", member="")