"""The tokenizer of the build language.

The scanner reads a stack of include sources.  The most recently included
source is read first; when it runs out an ``EOF`` token is produced and
scanning continues with the source below it on the next call.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import IO, Iterable, Iterator

__all__ = ["KEYWORDS", "ScanMode", "Scanner", "Token", "TokenType"]

BIGGEST_TOKEN = 10240
_SPACE = frozenset(" \t\n\v\f\r")


class TokenType(Enum):
    """Kinds of tokens."""

    EOF = auto()
    ARG = auto()
    STRING = auto()
    BANG = auto()
    BANG_EQUALS = auto()
    AMPER = auto()
    AMPERAMPER = auto()
    LPAREN = auto()
    RPAREN = auto()
    PLUS_EQUALS = auto()
    COLON = auto()
    SEMIC = auto()
    LANGLE = auto()
    LANGLE_EQUALS = auto()
    EQUALS = auto()
    RANGLE = auto()
    RANGLE_EQUALS = auto()
    QUESTION_EQUALS = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    ACTIONS = auto()
    BIND = auto()
    BREAK = auto()
    CASE = auto()
    CONTINUE = auto()
    DEFAULT = auto()
    ELSE = auto()
    EXISTING = auto()
    FOR = auto()
    IF = auto()
    IGNORE = auto()
    IN = auto()
    INCLUDE = auto()
    LOCAL = auto()
    MAXLINE = auto()
    ON = auto()
    PIECEMEAL = auto()
    QUIETLY = auto()
    RETURN = auto()
    RULE = auto()
    SWITCH = auto()
    TOGETHER = auto()
    UPDATED = auto()
    WHILE = auto()
    LBRACE = auto()
    BAR = auto()
    BARBAR = auto()
    RBRACE = auto()


KEYWORDS: dict[str, TokenType] = {
    "!": TokenType.BANG,
    "!=": TokenType.BANG_EQUALS,
    "&": TokenType.AMPER,
    "&&": TokenType.AMPERAMPER,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "+=": TokenType.PLUS_EQUALS,
    ":": TokenType.COLON,
    ";": TokenType.SEMIC,
    "<": TokenType.LANGLE,
    "<=": TokenType.LANGLE_EQUALS,
    "=": TokenType.EQUALS,
    ">": TokenType.RANGLE,
    ">=": TokenType.RANGLE_EQUALS,
    "?=": TokenType.QUESTION_EQUALS,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "actions": TokenType.ACTIONS,
    "bind": TokenType.BIND,
    "break": TokenType.BREAK,
    "case": TokenType.CASE,
    "continue": TokenType.CONTINUE,
    "default": TokenType.DEFAULT,
    "else": TokenType.ELSE,
    "existing": TokenType.EXISTING,
    "for": TokenType.FOR,
    "if": TokenType.IF,
    "ignore": TokenType.IGNORE,
    "in": TokenType.IN,
    "include": TokenType.INCLUDE,
    "local": TokenType.LOCAL,
    "maxline": TokenType.MAXLINE,
    "on": TokenType.ON,
    "piecemeal": TokenType.PIECEMEAL,
    "quietly": TokenType.QUIETLY,
    "return": TokenType.RETURN,
    "rule": TokenType.RULE,
    "switch": TokenType.SWITCH,
    "together": TokenType.TOGETHER,
    "updated": TokenType.UPDATED,
    "while": TokenType.WHILE,
    "{": TokenType.LBRACE,
    "|": TokenType.BAR,
    "||": TokenType.BARBAR,
    "}": TokenType.RBRACE,
}


class ScanMode(IntEnum):
    """What the scanner looks for."""

    NORMAL = 0  # normal parsing
    STRING = 1  # look only for the matching }
    PUNCT = 2  # only punctuation keywords


@dataclass(frozen=True)
class Token:
    """A token: its kind and its text."""

    type: TokenType
    string: str = ""

    def __str__(self) -> str:
        if self.type is TokenType.EOF:
            return "EOF"
        if self.type is TokenType.ARG:
            return f"argument {self.string}"
        if self.type is TokenType.STRING:
            return f'string "{self.string}"'
        return f"keyword {self.string}"


_EOF = Token(TokenType.EOF)


class _Include:
    def __init__(
        self, name: str, lines: Iterable[str], handle: IO[str] | None
    ) -> None:
        self.name = name
        self.lines: Iterator[str] = iter(lines)
        self.handle = handle
        self.text = ""
        self.pos = 0
        self.line = 0

    def close(self) -> None:
        if self.handle is not None:
            self.handle.close()


def _is_alpha(char: str) -> bool:
    return char.isascii() and char.isalpha()


class Scanner:
    """Turns the text of included sources into tokens."""

    def __init__(self) -> None:
        self._stack: list[_Include] = []
        self.mode = ScanMode.NORMAL
        self.errors: list[str] = []
        self._last = _EOF

    @property
    def any_errors(self) -> bool:
        """True if any error has been reported."""
        return bool(self.errors)

    def include_file(self, path: str) -> None:
        """Push a file to be read next; ``-`` means standard input.

        Raises :class:`OSError` when the file cannot be opened.
        """
        if path == "-":
            self._stack.append(_Include(path, sys.stdin, None))
            return
        handle = open(path)
        self._stack.append(_Include(path, handle, handle))

    def include_lines(self, name: str, lines: Iterable[str]) -> None:
        """Push in-memory text, one string per line, to be read next."""
        self._stack.append(_Include(name, lines, None))

    def set_mode(self, mode: ScanMode) -> None:
        """Switch between normal, action-string and punctuation scanning."""
        self.mode = ScanMode(mode)

    def error(self, message: str) -> str:
        """Report an error at the current position and return its text."""
        location = ""
        if self._stack:
            top = self._stack[-1]
            location = f"{top.name}: line {top.line}: "
        text = f"{location}{message} at {self._last}"
        self.errors.append(text)
        print(text)
        return text

    # -- character stream --------------------------------------------

    def _char(self) -> str:
        if not self._stack:
            return ""
        inc = self._stack[-1]
        if inc.pos < len(inc.text):
            inc.pos += 1
            return inc.text[inc.pos - 1]
        for line in inc.lines:
            inc.line += 1
            if line:
                inc.text = line
                inc.pos = 1
                return line[0]
        self._stack.pop()
        inc.close()
        return ""

    def _back(self) -> None:
        self._stack[-1].pos -= 1

    # -- tokens ------------------------------------------------------

    def _eof(self) -> Token:
        self._last = _EOF
        return _EOF

    def next_token(self) -> Token:
        """Return the next token; ``EOF`` marks the end of each include."""
        if not self._stack:
            return self._eof()
        char = self._char()
        if self.mode == ScanMode.STRING:
            return self._scan_string(char)
        return self._scan_word(char)

    def _scan_string(self, char: str) -> Token:
        nest = 1
        buf: list[str] = []
        while char and len(buf) < BIGGEST_TOKEN:
            if char == "{":
                nest += 1
            if char == "}":
                nest -= 1
                if not nest:
                    break
            buf.append(char)
            char = self._char()
        if char:
            self._back()
        if len(buf) == BIGGEST_TOKEN:
            self.error("action block too big")
            return self._eof()
        if nest:
            self.error("unmatched {} in action block")
            return self._eof()
        self._last = Token(TokenType.STRING, "".join(buf))
        return self._last

    def _scan_word(self, char: str) -> Token:
        while True:
            while char and char in _SPACE:
                char = self._char()
            if char != "#":
                break
            char = self._char()
            while char and char != "\n":
                char = self._char()
        if not char:
            return self._eof()

        notkeyword = char == "$"
        inquote = False
        buf: list[str] = []
        while char and len(buf) < BIGGEST_TOKEN and (inquote or char not in _SPACE):
            if char == '"':
                inquote = not inquote
                notkeyword = True
            elif char != "\\":
                buf.append(char)
            else:
                char = self._char()
                if not char:
                    break
                buf.append(char)
                notkeyword = True
            char = self._char()

        if len(buf) == BIGGEST_TOKEN:
            self.error("string too big")
            return self._eof()
        if inquote:
            self.error('unmatched " in string')
            return self._eof()
        if char:
            self._back()

        word = "".join(buf)
        kind = TokenType.ARG
        if not notkeyword and not (
            _is_alpha(word[:1]) and self.mode == ScanMode.PUNCT
        ):
            kind = KEYWORDS.get(word, TokenType.ARG)
        self._last = Token(kind, word)
        return self._last

    def tokens(self) -> Iterator[Token]:
        """Yield tokens up to, not including, the next ``EOF``."""
        while True:
            token = self.next_token()
            if token.type is TokenType.EOF:
                return
            yield token