"""Splitting and building VMS file names such as ``dev:[dir.sub]file.ext``."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum

from .pathname import PathName, format_grist, split_file, split_grist

__all__ = ["parse_path", "build_path", "parent_path"]

_TOP = "[000000]"


class _Dir(IntEnum):
    EMPTY = 0  # empty string
    DEV = 1  # dev:
    DEVDIR = 2  # dev:[dir]
    DOTDIR = 3  # [.dir]
    DASHDIR = 4  # [-] or [-.dir]
    ABSDIR = 5  # [dir]
    ROOT = 6  # [000000] or dev:[000000]


class _Act(IntEnum):
    DIR = 0  # take just dir
    ROOT = 1  # take just root
    VAD = 2  # root's dev: + [abs]
    DRD = 3  # root's dev:[dir] + [.rel]
    VRD = 4  # root's dev: + [.rel] made [abs]
    DDD = 5  # root's dev:[dir] + . + [dir]


_D, _R, _VAD, _DRD, _VRD, _DDD = _Act

_GRID = (
    # dir:  EMPTY DEV DEVDIR DOTDIR DASH  ABSDIR ROOT
    (_D, _D, _D, _D, _D, _D, _D),  # root EMPTY
    (_R, _D, _D, _VRD, _VAD, _VAD, _VAD),  # root DEV
    (_R, _D, _D, _DRD, _VAD, _VAD, _VAD),  # root DEVDIR
    (_R, _D, _D, _DRD, _D, _D, _D),  # root DOTDIR
    (_R, _D, _D, _DRD, _DDD, _D, _D),  # root DASHDIR
    (_R, _D, _D, _DRD, _D, _D, _D),  # root ABSDIR
    (_R, _D, _D, _VRD, _D, _D, _D),  # root ROOT
)


@dataclass(frozen=True)
class _DirInfo:
    kind: _Dir
    dev: str
    dir: str


def _dir_info(text: str) -> _DirInfo:
    text = text.split("\0", 1)[0]
    if not text:
        return _DirInfo(_Dir.EMPTY, "", "")
    colon = text.find(":")
    if colon >= 0:
        dev, directory = text[: colon + 1], text[colon + 1 :]
        kind = _Dir.DEVDIR if directory.startswith("[") else _Dir.DEV
    else:
        dev, directory = "", text
        if text.startswith("[]"):
            kind = _Dir.EMPTY
        elif text.startswith("[."):
            kind = _Dir.DOTDIR
        elif text.startswith("[-"):
            kind = _Dir.DASHDIR
        else:
            kind = _Dir.ABSDIR
    if directory == _TOP:
        kind = _Dir.ROOT
    return _DirInfo(kind, dev, directory)


def parse_path(file: str) -> PathName:
    """Split ``file`` into grist, directory, base, suffix and member."""
    grist, rest = split_grist(file)
    directory = ""
    close = rest.find("]")
    if close < 0:
        close = rest.find(":")
    if close >= 0:
        directory = rest[: close + 1]
        rest = rest[close + 1 :]
    base, suffix, member = split_file(rest)
    return PathName(
        grist=grist, dir=directory, base=base, suffix=suffix, member=member
    )


def _climb(out: str) -> str:
    """Turn the trailing directory of ``out`` into its parent directory."""
    for index in range(len(out) - 1, -1, -1):
        char = out[index]
        if char == ".":
            return out[:index] + "]"
        if char == "-":
            if index > 0 and out[index - 1] == ".":
                index -= 1
            return out[:index] + "]"
        if char == "[":
            if out[index + 1 : index + 2] == "]":
                return out[: index + 2]
            return out[:index] + _TOP
    return out


def build_path(name: PathName, binding: bool = False) -> str:
    """Join the parts of ``name`` back into a file name, combining root and dir.

    With ``binding`` set, a name without a suffix gets a trailing ``.`` so
    that no default extension is applied to it.
    """
    out = format_grist(name.grist)
    root = _dir_info(name.root)
    directory = _dir_info(name.dir)
    action = _GRID[root.kind][directory.kind]

    if action == _Act.DIR:
        out += name.dir
    elif action == _Act.ROOT:
        out += name.root
    elif action == _Act.VAD:
        out += root.dev + directory.dir
    elif action in (_Act.DRD, _Act.DDD):
        out += name.root
        if out.endswith("]"):
            out = out[:-1]
        if action == _Act.DDD:
            out += "."
        out += directory.dir[1:]
    elif action == _Act.VRD:
        out += root.dev + "[" + directory.dir[2:]

    if out.endswith("]") and name.parent:
        out = _climb(out)

    out += name.base
    if name.suffix:
        out += name.suffix
    elif binding and name.base:
        out += "."
    if name.member:
        out += f"({name.member})"
    return out


def parent_path(name: PathName) -> PathName:
    """Return the name of the directory holding ``name``.

    A name with a file part loses it; a bare directory is marked so that
    building it climbs to the enclosing directory.
    """
    if name.base:
        return replace(name, base="", suffix="", member="")
    return replace(name, parent=True)