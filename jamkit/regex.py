"""Matching of compiled V8-style regular expressions against strings."""

from __future__ import annotations

from dataclasses import dataclass

from .regex_compile import NSUBEXP, Op, Program, RegexError, compile_program

__all__ = ["Match", "Regex", "compile_regex"]


def _is_word(char: str) -> bool:
    return char == "_" or (char.isascii() and char.isalnum())


@dataclass(frozen=True)
class Match:
    """The outcome of a successful search: the subject and the group spans."""

    string: str
    spans: tuple[tuple[int, int] | None, ...]

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self.spans):
            raise IndexError(f"no such group: {index}")

    def span(self, index: int = 0) -> tuple[int, int] | None:
        """Return ``(start, end)`` of a group, or ``None`` if it did not take part."""
        self._check(index)
        return self.spans[index]

    def group(self, index: int = 0) -> str | None:
        """Return the text of a group, or ``None`` if it did not take part."""
        span = self.span(index)
        if span is None:
            return None
        start, end = span
        return self.string[start:end]


class _Matcher:
    """Backtracking interpreter for one attempt at one starting point."""

    def __init__(self, program: Program, text: str) -> None:
        self.nodes = program.nodes
        self.text = text
        self.pos = 0
        self.starts: list[int | None] = [None] * NSUBEXP
        self.ends: list[int | None] = [None] * NSUBEXP

    def char(self, index: int) -> str:
        return self.text[index] if index < len(self.text) else ""

    def attempt(self, start: int) -> bool:
        self.pos = start
        self.starts = [None] * NSUBEXP
        self.ends = [None] * NSUBEXP
        if self.match(0):
            self.starts[0] = start
            self.ends[0] = self.pos
            return True
        return False

    def match(self, scan: int | None) -> bool:
        nodes = self.nodes
        while scan is not None:
            node = nodes[scan]
            following = node.next
            op = node.op
            current = self.char(self.pos)

            if op == Op.BOL:
                if self.pos != 0:
                    return False
            elif op == Op.EOL:
                if current != "":
                    return False
            elif op == Op.WORDA:
                if not _is_word(current):
                    return False
                if self.pos > 0 and _is_word(self.text[self.pos - 1]):
                    return False
            elif op == Op.WORDZ:
                if _is_word(current):
                    return False
            elif op == Op.ANY:
                if current == "":
                    return False
                self.pos += 1
            elif op == Op.EXACTLY:
                literal = node.operand
                if not literal or not self.text.startswith(literal, self.pos):
                    return False
                self.pos += len(literal)
            elif op == Op.ANYOF:
                if current == "" or current not in node.operand:
                    return False
                self.pos += 1
            elif op == Op.ANYBUT:
                if current == "" or current in node.operand:
                    return False
                self.pos += 1
            elif op in (Op.NOTHING, Op.BACK):
                pass
            elif op == Op.OPEN:
                save = self.pos
                if not self.match(following):
                    return False
                if self.starts[node.group] is None:
                    self.starts[node.group] = save
                return True
            elif op == Op.CLOSE:
                save = self.pos
                if not self.match(following):
                    return False
                if self.ends[node.group] is None:
                    self.ends[node.group] = save
                return True
            elif op == Op.BRANCH:
                if following is None or nodes[following].op != Op.BRANCH:
                    following = scan + 1
                else:
                    branch: int | None = scan
                    while branch is not None and nodes[branch].op == Op.BRANCH:
                        save = self.pos
                        if self.match(branch + 1):
                            return True
                        self.pos = save
                        branch = nodes[branch].next
                    return False
            elif op in (Op.STAR, Op.PLUS):
                return self.repeat_then(scan, following)
            elif op == Op.END:
                return True
            else:
                return False
            scan = following
        return False

    def repeat_then(self, scan: int, following: int | None) -> bool:
        if following is None:
            return False
        next_node = self.nodes[following]
        next_char = next_node.operand[:1] if next_node.op == Op.EXACTLY else ""
        minimum = 0 if self.nodes[scan].op == Op.STAR else 1
        save = self.pos
        count = self.count_repeats(scan + 1)
        while count >= minimum:
            if next_char == "" or self.char(self.pos) == next_char:
                if self.match(following):
                    return True
            count -= 1
            self.pos = save + count
        return False

    def count_repeats(self, index: int) -> int:
        node = self.nodes[index]
        start = self.pos
        scan = start
        text = self.text
        if node.op == Op.ANY:
            scan = len(text)
        elif node.op == Op.EXACTLY:
            first = node.operand[:1]
            while scan < len(text) and text[scan] == first:
                scan += 1
        elif node.op == Op.ANYOF:
            while scan < len(text) and text[scan] in node.operand:
                scan += 1
        elif node.op == Op.ANYBUT:
            while scan < len(text) and text[scan] not in node.operand:
                scan += 1
        self.pos = scan
        return scan - start


class Regex:
    """A compiled pattern that can be searched for in strings."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self.program = compile_program(pattern)

    def __repr__(self) -> str:
        return f"Regex({self.pattern!r})"

    def search(self, string: str) -> Match | None:
        """Find the leftmost match in ``string``; text after a NUL is ignored."""
        if string is None:
            raise RegexError("NULL parameter")
        text = string.split("\0", 1)[0]
        program = self.program

        if program.must is not None and program.must not in text:
            return None

        matcher = _Matcher(program, text)
        if program.anchored:
            candidates = iter((0,))
        elif program.start:
            candidates = (
                index for index, char in enumerate(text) if char == program.start
            )
        else:
            candidates = iter(range(len(text) + 1))

        for start in candidates:
            if matcher.attempt(start):
                spans = tuple(
                    None if begin is None or end is None else (begin, end)
                    for begin, end in zip(matcher.starts, matcher.ends)
                )
                return Match(string=string, spans=spans)
        return None


def compile_regex(pattern: str) -> Regex:
    """Compile ``pattern`` into a :class:`Regex`."""
    return Regex(pattern)