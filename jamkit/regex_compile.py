"""Compilation of V8-style regular expressions into a node program.

The program is a flat sequence of nodes.  Every node carries an opcode and
the index of the node that follows it (``None`` at the end of a chain).  The
operand node of ``BRANCH``, ``STAR`` and ``PLUS`` is the node stored directly
after it.  ``EXACTLY``, ``ANYOF`` and ``ANYBUT`` carry their literal text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, IntFlag

NSUBEXP = 10
MAX_PROGRAM_SIZE = 32767

__all__ = [
    "MAX_PROGRAM_SIZE",
    "NSUBEXP",
    "Node",
    "Op",
    "Program",
    "RegexError",
    "compile_program",
]


class RegexError(ValueError):
    """Raised when a pattern cannot be compiled."""


class Op(IntEnum):
    """Node opcodes."""

    END = 0
    BOL = 1
    EOL = 2
    ANY = 3
    ANYOF = 4
    ANYBUT = 5
    BRANCH = 6
    BACK = 7
    EXACTLY = 8
    NOTHING = 9
    STAR = 10
    PLUS = 11
    WORDA = 12
    WORDZ = 13
    OPEN = 20
    CLOSE = 30


_STRING_OPS = (Op.EXACTLY, Op.ANYOF, Op.ANYBUT)


class _Flag(IntFlag):
    WORST = 0
    HASWIDTH = 1
    SIMPLE = 2
    SPSTART = 4


@dataclass(frozen=True)
class Node:
    """One instruction of a compiled program."""

    op: Op
    next: int | None = None
    operand: str = ""
    group: int = 0


@dataclass(frozen=True)
class Program:
    """A compiled pattern with the hints used to speed up matching."""

    nodes: tuple[Node, ...]
    start: str = ""
    anchored: bool = False
    must: str | None = None
    group_count: int = 0

    @property
    def size(self) -> int:
        """Size of the program in the classic byte encoding."""
        total = 1
        for node in self.nodes:
            total += 3
            if node.op in _STRING_OPS:
                total += len(node.operand) + 1
        return total


class _Cell:
    __slots__ = ("op", "delta", "operand", "group")

    def __init__(self, op: Op, group: int = 0) -> None:
        self.op = op
        self.delta = 0
        self.operand = ""
        self.group = group


_MULT = ("*", "+", "?")
_BRANCH_STOP = ("", ")", "\n", "|")
_MAGIC_AFTER = (".", "[", "(", ")", "|", "\n", "$", "^", "")


class _Compiler:
    def __init__(self, pattern: str) -> None:
        self.text = pattern.split("\0", 1)[0]
        self.pos = 0
        self.npar = 1
        self.cells: list[_Cell] = []

    # -- input -------------------------------------------------------

    def peek(self, ahead: int = 0) -> str:
        index = self.pos + ahead
        if 0 <= index < len(self.text):
            return self.text[index]
        return ""

    def take(self) -> str:
        char = self.peek()
        self.pos += 1
        return char

    # -- code emission -----------------------------------------------

    def emit(self, op: Op, group: int = 0) -> int:
        self.cells.append(_Cell(op, group))
        return len(self.cells) - 1

    def insert(self, op: Op, at: int) -> None:
        self.cells.insert(at, _Cell(op))

    def next_of(self, index: int) -> int | None:
        delta = self.cells[index].delta
        return None if delta == 0 else index + delta

    def tail(self, start: int, target: int) -> None:
        scan = start
        while (following := self.next_of(scan)) is not None:
            scan = following
        self.cells[scan].delta = target - scan

    def optail(self, start: int | None, target: int) -> None:
        if start is None or self.cells[start].op != Op.BRANCH:
            return
        self.tail(start + 1, target)

    # -- grammar -----------------------------------------------------

    def reg(self, paren: bool) -> tuple[int, _Flag]:
        flags = _Flag.HASWIDTH
        parno = 0
        ret: int | None = None
        if paren:
            if self.npar >= NSUBEXP:
                raise RegexError("too many ()")
            parno = self.npar
            self.npar += 1
            ret = self.emit(Op.OPEN, parno)

        branch, branch_flags = self.branch()
        if ret is not None:
            self.tail(ret, branch)
        else:
            ret = branch
        if not branch_flags & _Flag.HASWIDTH:
            flags &= ~_Flag.HASWIDTH
        flags |= branch_flags & _Flag.SPSTART

        while self.peek() in ("|", "\n"):
            self.pos += 1
            branch, branch_flags = self.branch()
            self.tail(ret, branch)
            if not branch_flags & _Flag.HASWIDTH:
                flags &= ~_Flag.HASWIDTH
            flags |= branch_flags & _Flag.SPSTART

        ender = self.emit(Op.CLOSE, parno) if paren else self.emit(Op.END)
        self.tail(ret, ender)

        scan: int | None = ret
        while scan is not None:
            self.optail(scan, ender)
            scan = self.next_of(scan)

        if paren:
            if self.take() != ")":
                raise RegexError("unmatched ()")
        elif self.peek() != "":
            if self.peek() == ")":
                raise RegexError("unmatched ()")
            raise RegexError("junk on end")
        return ret, flags

    def branch(self) -> tuple[int, _Flag]:
        flags = _Flag.WORST
        ret = self.emit(Op.BRANCH)
        chain: int | None = None
        while self.peek() not in _BRANCH_STOP:
            latest, piece_flags = self.piece()
            flags |= piece_flags & _Flag.HASWIDTH
            if chain is None:
                flags |= piece_flags & _Flag.SPSTART
            else:
                self.tail(chain, latest)
            chain = latest
        if chain is None:
            self.emit(Op.NOTHING)
        return ret, flags

    def piece(self) -> tuple[int, _Flag]:
        ret, atom_flags = self.atom()
        op = self.peek()
        if op not in _MULT:
            return ret, atom_flags

        if not atom_flags & _Flag.HASWIDTH and op != "?":
            raise RegexError("*+ operand could be empty")
        flags = _Flag.SPSTART if op != "+" else _Flag.HASWIDTH
        simple = bool(atom_flags & _Flag.SIMPLE)

        if op == "*" and simple:
            self.insert(Op.STAR, ret)
        elif op == "*":
            self.insert(Op.BRANCH, ret)
            self.optail(ret, self.emit(Op.BACK))
            self.optail(ret, ret)
            self.tail(ret, self.emit(Op.BRANCH))
            self.tail(ret, self.emit(Op.NOTHING))
        elif op == "+" and simple:
            self.insert(Op.PLUS, ret)
        elif op == "+":
            following = self.emit(Op.BRANCH)
            self.tail(ret, following)
            self.tail(self.emit(Op.BACK), ret)
            self.tail(following, self.emit(Op.BRANCH))
            self.tail(ret, self.emit(Op.NOTHING))
        else:
            self.insert(Op.BRANCH, ret)
            self.tail(ret, self.emit(Op.BRANCH))
            following = self.emit(Op.NOTHING)
            self.tail(ret, following)
            self.optail(ret, following)

        self.pos += 1
        if self.peek() in _MULT:
            raise RegexError("nested *?+")
        return ret, flags

    def atom(self) -> tuple[int, _Flag]:
        char = self.take()
        if char == "^":
            return self.emit(Op.BOL), _Flag.WORST
        if char == "$":
            return self.emit(Op.EOL), _Flag.WORST
        if char == ".":
            return self.emit(Op.ANY), _Flag.HASWIDTH | _Flag.SIMPLE
        if char == "[":
            return self.char_class(), _Flag.HASWIDTH | _Flag.SIMPLE
        if char == "(":
            ret, flags = self.reg(True)
            return ret, flags & (_Flag.HASWIDTH | _Flag.SPSTART)
        if char in _BRANCH_STOP:
            raise RegexError("internal urp")
        if char in _MULT:
            raise RegexError("?+* follows nothing")
        if char == "\\":
            quoted = self.take()
            if quoted == "":
                raise RegexError("trailing \\")
            if quoted == "<":
                return self.emit(Op.WORDA), _Flag.WORST
            if quoted == ">":
                return self.emit(Op.WORDZ), _Flag.WORST
        return self.exact()

    def char_class(self) -> int:
        if self.peek() == "^":
            ret = self.emit(Op.ANYBUT)
            self.pos += 1
        else:
            ret = self.emit(Op.ANYOF)
        chars: list[str] = []
        if self.peek() in ("]", "-"):
            chars.append(self.take())
        while self.peek() not in ("", "]"):
            if self.peek() == "-":
                self.pos += 1
                if self.peek() in ("]", ""):
                    chars.append("-")
                else:
                    low = ord(self.text[self.pos - 2]) + 1
                    high = ord(self.peek())
                    if low > high + 1:
                        raise RegexError("invalid [] range")
                    chars.extend(chr(code) for code in range(low, high + 1))
                    self.pos += 1
            else:
                chars.append(self.take())
        self.cells[ret].operand = "".join(chars)
        if self.peek() != "]":
            raise RegexError("unmatched []")
        self.pos += 1
        return ret

    def exact(self) -> tuple[int, _Flag]:
        self.pos -= 1
        ret = self.emit(Op.EXACTLY)
        chars: list[str] = []
        backup: int | None = None
        while True:
            char = self.take()
            after = self.peek()
            if after in _MAGIC_AFTER:
                chars.append(char)
                break
            if after in _MULT:
                if backup is None:
                    chars.append(char)
                else:
                    self.pos = backup
                break
            if after == "\\":
                chars.append(char)
                if self.peek(1) in ("", "<", ">"):
                    break
                backup = self.pos
                self.pos += 1
                continue
            chars.append(char)
            backup = self.pos
        self.cells[ret].operand = "".join(chars)
        flags = _Flag.HASWIDTH
        if backup is None:
            flags |= _Flag.SIMPLE
        return ret, flags

    # -- result ------------------------------------------------------

    def finish(self, flags: _Flag) -> Program:
        nodes = tuple(
            Node(
                op=cell.op,
                next=self.next_of(index),
                operand=cell.operand,
                group=cell.group,
            )
            for index, cell in enumerate(self.cells)
        )
        start = ""
        anchored = False
        must: str | None = None
        first_next = nodes[0].next
        if first_next is not None and nodes[first_next].op == Op.END:
            scan: int | None = 1
            head = nodes[1]
            if head.op == Op.EXACTLY:
                start = head.operand[:1]
            elif head.op == Op.BOL:
                anchored = True
            if flags & _Flag.SPSTART:
                longest = 0
                while scan is not None:
                    node = nodes[scan]
                    if node.op == Op.EXACTLY and len(node.operand) >= longest:
                        must = node.operand
                        longest = len(node.operand)
                    scan = node.next
        return Program(
            nodes=nodes,
            start=start,
            anchored=anchored,
            must=must,
            group_count=self.npar - 1,
        )


def compile_program(pattern: str) -> Program:
    """Compile ``pattern`` into a :class:`Program`.

    Raises :class:`RegexError` with the classic diagnostic on bad input.
    """
    if pattern is None:
        raise RegexError("NULL argument")
    compiler = _Compiler(pattern)
    _, flags = compiler.reg(False)
    size = 1 + sum(
        3 + (len(cell.operand) + 1 if cell.op in _STRING_OPS else 0)
        for cell in compiler.cells
    )
    if size >= MAX_PROGRAM_SIZE:
        raise RegexError("regexp too big")
    return compiler.finish(flags)