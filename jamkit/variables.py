"""Multi-valued variables of the build language.

Every variable holds a list of strings.  An unset variable and a variable
set to an empty list are the same thing.
"""

from __future__ import annotations

import os
from enum import IntEnum
from typing import Iterable

__all__ = ["SetMode", "VariableTable"]

_PATH_ENDINGS = ("PATH", "Path", "path")
_IGNORED_ENTRIES = frozenset({"OS=Windows_NT"})


class SetMode(IntEnum):
    """How a new value combines with the previous one."""

    SET = 0  # override previous value
    APPEND = 1  # append to previous value
    DEFAULT = 2  # set only if no previous value


def _as_list(value: Iterable[str] | str | None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


class VariableTable:
    """The table of user defined variables."""

    def __init__(self) -> None:
        self._values: dict[str, list[str]] = {}

    def __contains__(self, symbol: object) -> bool:
        return bool(self._values.get(symbol))  # type: ignore[arg-type]

    def define(self, entries: Iterable[str]) -> None:
        """Load ``NAME=value`` settings, such as the process environment.

        Values of names ending in ``PATH`` are split at the path separator,
        all others at single blanks.  Entries without ``=`` are ignored, and
        so is ``OS=Windows_NT``, which must not override the notion of OS.
        """
        for entry in entries:
            if entry in _IGNORED_ENTRIES:
                continue
            name, sep, value = entry.partition("=")
            if not sep:
                continue
            splitter = os.pathsep if name.endswith(_PATH_ENDINGS) else " "
            self.set(name, value.split(splitter), SetMode.SET)

    def get(self, symbol: str) -> list[str]:
        """Return a copy of the value of ``symbol``; empty if unset."""
        return list(self._values.get(symbol, ()))

    def set(
        self,
        symbol: str,
        value: Iterable[str] | str | None,
        mode: SetMode = SetMode.SET,
    ) -> None:
        """Set ``symbol`` to ``value`` according to ``mode``."""
        new = _as_list(value)
        mode = SetMode(mode)
        current = self._values.setdefault(symbol, [])
        if mode == SetMode.SET:
            self._values[symbol] = new
        elif mode == SetMode.APPEND:
            self._values[symbol] = current + new
        elif not current:
            self._values[symbol] = new

    def swap(self, symbol: str, value: Iterable[str] | str | None) -> list[str]:
        """Give ``symbol`` the new ``value`` and return its old one."""
        old = self._values.get(symbol, [])
        self._values[symbol] = _as_list(value)
        return old