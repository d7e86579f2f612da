"""Routing of command output lines to destinations by regular expression rules.

Each rule pairs a pattern with a destination (a file name, or one of the
special names ``stdout``, ``stderr`` and ``nul``).  A line that matches a rule
is written to the rule's destination, either verbatim or rewritten through a
replacement pattern in which ``$N`` stands for match group *N* and ``$$`` for
a literal dollar sign.

Rule flags:

``p``
    keep checking later rules after this one matched.
``dN``
    treat group *N* (1-8, default 1) as a dependency file name: the name is
    normalised and only the first occurrence of each distinct name is output.
"""

from __future__ import annotations

import sys
import warnings
from collections import deque
from dataclasses import dataclass, field
from typing import IO, Union

from .regex import Match, Regex
from .regex_compile import RegexError

__all__ = [
    "MAX_DESTINATIONS",
    "MAX_FILENAME",
    "MAX_RULES",
    "FilterError",
    "FilterRule",
    "OutputFilter",
    "simplify_filename",
]

MAX_DESTINATIONS = 8
MAX_RULES = 32
MAX_FILENAME = 260
_MAX_PARENTS = 16

Piece = Union[str, int]


class FilterError(ValueError):
    """Raised when a filter rule cannot be added."""


def _lower(char: str) -> str:
    return char.lower() if char.isascii() else char


def _normalise_separators(name: str) -> str:
    out: list[str] = []
    first = name[0]
    last = "/" if first == "\\" else _lower(first)
    out.append(last)
    for char in name[1:]:
        dot_segment = last == "." and len(out) > 1 and out[-2] == "/"
        if char == "\\":
            if dot_segment:
                out.pop()
                last = "/"
            elif last != "/":
                out.append("/")
                last = "/"
            else:
                continue
        elif char == "/" and dot_segment:
            out.pop()
            last = "/"
            continue
        elif char != "/" or last != "/":
            last = _lower(char)
            out.append(last)
        else:
            continue
        if len(out) >= MAX_FILENAME:
            raise ValueError(f"file name too long: {name!r}")
    return "".join(out)


def _resolve_parents(text: str) -> str:
    parents: deque[int] = deque(maxlen=_MAX_PARENTS)
    pos = text.find("/")
    while pos != -1:
        if pos < len(text) - 2 and text[pos + 1 : pos + 3] == "..":
            if parents:
                start = parents.pop()
                text = text[:start] + text[pos + 3 :]
                pos = start
                if pos >= len(text):
                    break
                continue
        else:
            parents.append(pos)
        pos = text.find("/", pos + 1)
    return text


def simplify_filename(name: str) -> str:
    """Normalise a file name: lower case, ``/`` separators, no ``.`` or ``..`` steps.

    Raises :class:`ValueError` when the name does not fit the classic
    260-character limit.
    """
    if not name:
        return ""
    return _resolve_parents(_normalise_separators(name))


def _parse_flags(flags: str) -> tuple[bool, int | None]:
    proceed = False
    dep_group: int | None = None
    chars = iter(flags)
    for char in chars:
        if char == "p":
            proceed = True
        elif char == "d":
            digit = next(chars, "")
            dep_group = int(digit) if digit and digit in "12345678" else 1
        else:
            raise FilterError(f"unknown regexp flag: <{char}>")
    return proceed, dep_group


def _parse_replacement(replacement: str) -> tuple[Piece, ...]:
    pieces: list[Piece] = []
    literal: list[str] = []
    index = 0
    while True:
        dollar = replacement.find("$", index)
        if dollar < 0:
            literal.append(replacement[index:])
            break
        literal.append(replacement[index:dollar])
        following = replacement[dollar + 1 : dollar + 2]
        if following == "$":
            literal.append("$")
        elif following and following in "0123456789":
            pieces.append("".join(literal))
            literal = []
            pieces.append(int(following))
        else:
            raise FilterError(
                f"bad replace pattern <{replacement}> <{replacement[dollar:]}>"
            )
        index = dollar + 2
    pieces.append("".join(literal))
    return tuple(piece for piece in pieces if piece != "")


@dataclass
class FilterRule:
    """One pattern with its destination and rewriting options."""

    regex: Regex
    destination: int
    proceed: bool = False
    dep_group: int | None = None
    replacement: tuple[Piece, ...] | None = None
    seen: set[str] = field(default_factory=set)

    def render(self, line: str, match: Match, dep_name: str | None) -> str:
        """Return the text this rule writes for a matched line."""
        if self.replacement is None:
            return line
        parts: list[str] = []
        for piece in self.replacement:
            if isinstance(piece, str):
                parts.append(piece)
            elif dep_name is not None and piece == self.dep_group:
                parts.append(dep_name)
            else:
                parts.append(match.group(piece) or "")
        return "".join(parts)


class OutputFilter:
    """An ordered set of rules that route output lines to destinations."""

    def __init__(self) -> None:
        self.destinations: list[str] = []
        self.rules: list[FilterRule] = []
        self._streams: list[IO[str] | None] = []
        self._owned: set[int] = set()

    def _destination_index(self, name: str) -> int:
        folded = name.lower()
        for index, existing in enumerate(self.destinations):
            if existing.lower() == folded:
                return index
        if len(self.destinations) >= MAX_DESTINATIONS:
            raise FilterError(f"no more room in destinations when adding <{name}>")
        return len(self.destinations)

    def add_rule(
        self,
        destination: str,
        pattern: str,
        flags: str = "",
        replacement: str | None = None,
    ) -> FilterRule:
        """Add a rule sending lines that match ``pattern`` to ``destination``."""
        if len(self.rules) >= MAX_RULES:
            raise FilterError(f"no more room for rule re=<{pattern}>")
        index = self._destination_index(destination)
        try:
            regex = Regex(pattern)
        except RegexError as exc:
            raise FilterError(f"cannot compile re=<{pattern}>: {exc}") from exc
        proceed, dep_group = _parse_flags(flags)
        pieces = None if replacement is None else _parse_replacement(replacement)

        if index == len(self.destinations):
            self.destinations.append(destination)
            self._streams.append(None)
        rule = FilterRule(
            regex=regex,
            destination=index,
            proceed=proceed,
            dep_group=dep_group,
            replacement=pieces,
        )
        self.rules.append(rule)
        return rule

    def prepare(self) -> None:
        """Open every destination that is not open yet."""
        for index, name in enumerate(self.destinations):
            folded = name.lower()
            if folded == "nul":
                self._streams[index] = None
            elif folded == "stdout":
                self._streams[index] = sys.stdout
            elif folded == "stderr":
                self._streams[index] = sys.stderr
            elif self._streams[index] is None:
                try:
                    self._streams[index] = open(name, "w")
                except OSError:
                    warnings.warn(
                        f"cannot open <{name}> for write, redirected to NUL",
                        RuntimeWarning,
                        stacklevel=2,
                    )
                else:
                    self._owned.add(index)

    def process_line(self, line: str) -> bool:
        """Apply the rules to ``line``; return True if a rule consumed it."""
        for rule in self.rules:
            match = rule.regex.search(line)
            if match is None:
                continue
            stream = self._streams[rule.destination]
            dep_name: str | None = None
            if rule.dep_group is not None:
                raw = match.group(rule.dep_group) or ""
                try:
                    dep_name = simplify_filename(raw)
                except ValueError:
                    dep_name = raw
                if dep_name in rule.seen:
                    stream = None
                else:
                    rule.seen.add(dep_name)
            if stream is not None:
                stream.write(rule.render(line, match, dep_name) + "\n")
            if not rule.proceed:
                return True
        return False

    def close(self) -> None:
        """Close the files this filter opened and drop all rules."""
        for index in self._owned:
            stream = self._streams[index]
            if stream is not None:
                stream.close()
        self._owned.clear()
        self._streams.clear()
        self.destinations.clear()
        self.rules.clear()

    def __enter__(self) -> OutputFilter:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()