"""File names split into grist, root, directory, base, suffix and member.

A name has the shape ``<grist>dir/base.suffix(member)``.  The grist tells
apart targets that would otherwise share a name and never shows up in a
bound file name.  The member names an entry of an archive.  The root is
never parsed out of a name; it is supplied later to relocate the directory.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

__all__ = ["PathName", "format_grist", "split_file", "split_grist"]


@dataclass(frozen=True)
class PathName:
    """A file name broken into its parts.

    ``parent`` is set when the name stands for the parent of a directory
    that has no file part; only the VMS rules make use of it.
    """

    grist: str = ""
    root: str = ""
    dir: str = ""
    base: str = ""
    suffix: str = ""
    member: str = ""
    parent: bool = False

    def with_root(self, root: str) -> PathName:
        """Return a copy that is relocated under ``root``."""
        return replace(self, root=root)

    def without_grist(self) -> PathName:
        """Return a copy with the grist removed."""
        return replace(self, grist="")


def split_grist(file: str) -> tuple[str, str]:
    """Split a leading ``<grist>`` off ``file``.

    The grist comes back without its closing ``>``, as it is kept internally.
    """
    if file.startswith("<"):
        close = file.find(">")
        if close >= 0:
            return file[:close], file[close + 1 :]
    return "", file


def split_file(file: str) -> tuple[str, str, str]:
    """Split the file part of a name into ``(base, suffix, member)``."""
    member = ""
    end = len(file)
    paren = file.find("(")
    if paren >= 0 and file.endswith(")"):
        member = file[paren + 1 : -1]
        end = paren
    stem = file[:end]
    dot = stem.rfind(".")
    if dot < 0:
        return stem, "", member
    return stem[:dot], stem[dot:], member


def format_grist(grist: str) -> str:
    """Return the grist wrapped in ``<`` and ``>`` where they are missing."""
    if not grist:
        return ""
    text = grist if grist.startswith("<") else "<" + grist
    return text if text.endswith(">") else text + ">"