"""Splitting and building file names with ``:`` separators."""

from __future__ import annotations

from dataclasses import replace
from enum import IntEnum

from .pathname import PathName, format_grist, split_file, split_grist

__all__ = ["parse_path", "build_path", "parent_path"]

_DELIM = ":"


class _Dir(IntEnum):
    EMPTY = 0  # ""
    DOT = 1  # :
    DOTDOT = 2  # ::
    ABS = 3  # dira:dirb:
    REL = 4  # :dira:dirb:


class _Act(IntEnum):
    DIR = 0  # take dir
    ROOT = 1  # take root
    CAT = 2  # prepend root to dir
    DTDR = 3  # :: of relative dir
    DDDD = 4  # make it ::: (../..)
    EMPTY = 5  # leave it empty


_GRID = (
    # dir:   EMPTY      DOT        DOTDOT     ABS       REL
    (_Act.EMPTY, _Act.DIR, _Act.DIR, _Act.DIR, _Act.DIR),  # root EMPTY
    (_Act.ROOT, _Act.DIR, _Act.DIR, _Act.DIR, _Act.DIR),  # root DOT
    (_Act.ROOT, _Act.ROOT, _Act.DDDD, _Act.DIR, _Act.DTDR),  # root DOTDOT
    (_Act.ROOT, _Act.ROOT, _Act.ROOT, _Act.DIR, _Act.CAT),  # root ABS
    (_Act.ROOT, _Act.ROOT, _Act.ROOT, _Act.DIR, _Act.CAT),  # root REL
)


def _kind(text: str) -> _Dir:
    if not text:
        return _Dir.EMPTY
    if text == _DELIM:
        return _Dir.DOT
    if text == _DELIM * 2:
        return _Dir.DOTDOT
    if text.startswith(_DELIM):
        return _Dir.REL
    return _Dir.ABS


def parse_path(file: str) -> PathName:
    """Split ``file`` into grist, directory, base, suffix and member."""
    grist, rest = split_grist(file)
    directory = ""
    colon = rest.rfind(_DELIM)
    if colon >= 0:
        length = colon
        scan = colon
        while scan > 0:
            scan -= 1
            if rest[scan] != _DELIM:
                break
        # A volume name or a run of colons keeps its last colon.
        if scan == 0:
            length += 1
        directory = rest[:length]
        rest = rest[colon + 1 :]
    base, suffix, member = split_file(rest)
    return PathName(
        grist=grist, dir=directory, base=base, suffix=suffix, member=member
    )


def build_path(name: PathName, binding: bool = False) -> str:
    """Join the parts of ``name`` back into a file name, combining root and dir."""
    out = format_grist(name.grist)
    action = _GRID[_kind(name.root)][_kind(name.dir)]

    if action == _Act.DTDR:
        out += _DELIM + name.dir
    elif action == _Act.DIR:
        out += name.dir
    elif action == _Act.ROOT:
        out += name.root
    elif action == _Act.CAT:
        out += name.root
        if out.endswith(_DELIM):
            out = out[:-1]
        out += name.dir
    elif action == _Act.DDDD:
        out += _DELIM * 3

    if (
        action != _Act.EMPTY
        and not out.endswith(_DELIM)
        and (name.base or name.suffix)
    ):
        out += _DELIM

    out += name.base + name.suffix
    if name.member:
        out += f"({name.member})"
    return out


def parent_path(name: PathName) -> PathName:
    """Return the name of the directory holding ``name``."""
    return replace(name, base="", suffix="", member="")