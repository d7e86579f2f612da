"""Binding a target name to a file along ``$(LOCATE)`` or ``$(SEARCH)``."""

from __future__ import annotations

from .path_unix import build_path, parse_path
from .timestamp import TimestampCache
from .variables import VariableTable

__all__ = ["search"]


def search(
    target: str, variables: VariableTable, stamps: TimestampCache
) -> tuple[str, float]:
    """Return the bound file name of ``target`` and its modification time.

    With ``LOCATE`` set, the target is placed under its first directory
    whether it exists or not.  Otherwise each ``SEARCH`` directory is tried
    in turn, and the first existing file wins.  Failing both, the name
    itself is used.  The time is 0 for a missing file.
    """
    name = parse_path(target).without_grist()

    locate = variables.get("LOCATE")
    if locate:
        bound = build_path(name.with_root(locate[0]), True)
        return bound, stamps.timestamp(bound)

    for root in variables.get("SEARCH"):
        bound = build_path(name.with_root(root), True)
        time = stamps.timestamp(bound)
        if time:
            return bound, time

    bound = build_path(name.with_root(""), True)
    return bound, stamps.timestamp(bound)