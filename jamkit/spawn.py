"""Running a command and passing its combined output through an output filter."""

from __future__ import annotations

import codecs
import os
import shlex
import subprocess
import sys
import threading
from enum import IntEnum
from typing import IO, Iterable, Iterator

from .outfilter import OutputFilter

__all__ = [
    "MAX_LINE",
    "READ_SIZE",
    "ExecStatus",
    "filter_stream",
    "spawn",
    "split_lines",
]

READ_SIZE = 16384
MAX_LINE = READ_SIZE // 2

_filter_lock = threading.Lock()


class ExecStatus(IntEnum):
    """Outcome of an executed command."""

    OK = 0
    FAIL = 1
    INTR = 2


def _strip_cr(line: str) -> str:
    return line[:-1] if line.endswith("\r") else line


def split_lines(chunks: Iterable[str]) -> Iterator[str]:
    """Reassemble text chunks into lines.

    Line ends are ``\\n`` with an optional ``\\r`` before or right after it.
    A line longer than :data:`MAX_LINE` characters is cut into pieces.
    Unterminated text at the end is yielded as a last line.
    """
    pending = ""
    for chunk in chunks:
        pending += chunk
        while pending:
            cut = pending.find("\n")
            if cut < 0:
                if len(pending) <= MAX_LINE:
                    break
                yield _strip_cr(pending[:MAX_LINE])
                pending = pending[MAX_LINE:]
                continue
            line = _strip_cr(pending[:cut])
            rest = cut + 1
            if pending[rest : rest + 1] == "\r":
                rest += 1
            pending = pending[rest:]
            yield line
    if pending:
        yield pending


def filter_stream(
    chunks: Iterable[str],
    output_filter: OutputFilter,
    out: IO[str] | None = None,
) -> int:
    """Feed lines through ``output_filter``; write the unconsumed ones to ``out``.

    Returns the number of lines written to ``out``.
    """
    stream = sys.stdout if out is None else out
    passed = 0
    for line in split_lines(chunks):
        with _filter_lock:
            if not output_filter.process_line(line):
                stream.write(line + "\n")
                passed += 1
    stream.flush()
    return passed


def _decode(reader: Iterable[bytes]) -> Iterator[str]:
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    for chunk in reader:
        text = decoder.decode(chunk)
        if text:
            yield text
    tail = decoder.decode(b"", final=True)
    if tail:
        yield tail


def _copy_raw(reader: Iterable[bytes]) -> None:
    stream = sys.stdout
    stream.flush()
    binary = getattr(stream, "buffer", None)
    for chunk in reader:
        if binary is not None:
            binary.write(chunk)
        else:
            stream.write(chunk.decode("utf-8", errors="replace"))
    if binary is not None:
        binary.flush()
    stream.flush()


def _pin_to_one_core(pid: int) -> None:
    if not hasattr(os, "sched_setaffinity"):
        return
    try:
        first = min(os.sched_getaffinity(0))
        os.sched_setaffinity(pid, {first})
    except (OSError, ValueError):
        pass


def spawn(
    program: str,
    params: str = "",
    output_filter: OutputFilter | None = None,
    one_core: bool = False,
) -> int:
    """Run ``program`` with ``params`` and return its exit code.

    Standard output and standard error are merged.  With an output filter the
    lines are routed through it and the rest printed; otherwise the bytes are
    copied to standard output unchanged.  Raises :class:`OSError` when the
    program cannot be started.
    """
    args = [program, *shlex.split(params)]
    try:
        process = subprocess.Popen(
            args, stdout=subprocess.PIPE, stderr=subprocess.STDOUT
        )
    except OSError as exc:
        raise OSError(exc.errno, f"failed exec <{program}> <{params}>") from exc

    if one_core:
        _pin_to_one_core(process.pid)

    with process:
        assert process.stdout is not None
        pipe = process.stdout
        reader = iter(lambda: pipe.read1(READ_SIZE), b"")
        if output_filter is not None:
            output_filter.prepare()
            filter_stream(_decode(reader), output_filter, sys.stdout)
        else:
            _copy_raw(reader)
    return process.wait()