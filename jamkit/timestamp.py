"""Cached modification times of files and archive members.

Looking up a file scans its whole directory once; afterwards every name in
that directory is known, and names not found there are known to be missing.
Archive members, written ``lib.a(member.o)``, are timed from the archive's
member headers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import IntEnum
from pathlib import Path
from typing import Iterator

from .pathname import PathName
from .path_unix import build_path, parent_path, parse_path

__all__ = ["BindProgress", "TimestampCache"]

_AR_MAGIC = b"!<arch>\n"
_AR_HEADER = 60
_AR_INDEXES = (b"/", b"/SYM64/", b"__.SYMDEF", b"__.SYMDEF SORTED")


class BindProgress(IntEnum):
    """What is known about a name."""

    INIT = 0  # never seen
    NOENTRY = 1  # timestamp requested but file never found
    SPOTTED = 2  # file found but not timed yet
    MISSING = 3  # file found but can't get timestamp
    FOUND = 4  # file found and time stamped


@dataclass
class _Binding:
    name: str
    scanned: bool = False
    progress: BindProgress = BindProgress.INIT
    time: float = 0


def _archive_members(path: str) -> Iterator[tuple[str, float]]:
    try:
        data = Path(path).read_bytes()
    except OSError:
        return
    if not data.startswith(_AR_MAGIC):
        return
    pos = len(_AR_MAGIC)
    long_names = b""
    while pos + _AR_HEADER <= len(data):
        header = data[pos : pos + _AR_HEADER]
        if header[58:60] != b"`\n":
            return
        raw = header[:16].rstrip(b" ")
        try:
            date = int(header[16:28].strip() or b"0")
            size = int(header[48:58].strip())
        except ValueError:
            return
        body = pos + _AR_HEADER
        pos = body + size + (size & 1)
        if raw == b"//":
            long_names = data[body : body + size]
            continue
        if raw in _AR_INDEXES:
            continue
        if raw.startswith(b"#1/") and raw[3:].isdigit():
            name = data[body : body + int(raw[3:])].rstrip(b"\0")
        elif raw.startswith(b"/") and raw[1:].isdigit():
            offset = int(raw[1:])
            end = long_names.find(b"\n", offset)
            name = long_names[offset : end if end >= 0 else None].rstrip(b"/")
        else:
            name = raw[:-1] if raw.endswith(b"/") else raw
        yield name.decode("latin-1"), float(date)


class TimestampCache:
    """Remembers which files exist and when they were last modified."""

    def __init__(self) -> None:
        self._bindings: dict[str, _Binding] = {}

    def _enter(self, name: str) -> _Binding:
        binding = self._bindings.get(name)
        if binding is None:
            binding = self._bindings[name] = _Binding(name)
        return binding

    def _record(self, name: str, found: bool, time: float) -> None:
        binding = self._enter(name)
        binding.time = time
        binding.progress = BindProgress.FOUND if found else BindProgress.SPOTTED

    def _scan_directory(self, directory: str) -> None:
        try:
            entries = os.listdir(directory or ".")
        except OSError:
            return
        for entry in entries:
            self._record(build_path(PathName(dir=directory, base=entry)), False, 0)

    def _scan_archive(self, archive: str) -> None:
        for member, time in _archive_members(archive):
            self._record(f"{archive}({member})", True, time)

    def progress(self, name: str) -> BindProgress:
        """Return what is known about ``name`` so far."""
        binding = self._bindings.get(name)
        return BindProgress.INIT if binding is None else binding.progress

    def timestamp(self, target: str) -> float:
        """Return the modification time of ``target``, or 0 if it is missing."""
        binding = self._enter(target)

        if binding.progress == BindProgress.INIT:
            binding.progress = BindProgress.NOENTRY
            name = parse_path(target)

            directory = build_path(parent_path(name.without_grist()))
            holder = self._enter(directory)
            if not holder.scanned:
                self._scan_directory(directory)
                holder.scanned = True

            if name.member:
                archive = build_path(replace(name, grist="", member=""))
                holder = self._enter(archive)
                if not holder.scanned:
                    self._scan_archive(archive)
                    holder.scanned = True

        if binding.progress == BindProgress.SPOTTED:
            try:
                binding.time = os.stat(binding.name).st_mtime
            except OSError:
                binding.progress = BindProgress.MISSING
            else:
                binding.progress = BindProgress.FOUND

        return binding.time if binding.progress == BindProgress.FOUND else 0