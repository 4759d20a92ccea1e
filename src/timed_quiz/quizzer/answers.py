"""Answer sources for `quiz run`."""

from __future__ import annotations

import codecs
import io
import os
import sys
from typing import Optional, TextIO

from rich.console import Console

from .runner import InputProvider


class DescriptorLines:
    """Read answer lines straight from a file descriptor.

    Reads go through ``os.read`` rather than ``sys.stdin`` so a worker thread
    still blocked on input after the deadline holds no lock that interpreter
    shutdown needs. Raises ``EOFError`` once the descriptor is drained.
    """

    def __init__(
        self, fd: int, *, encoding: str = "utf-8", chunk_size: int = 4096
    ) -> None:
        self._fd = fd
        self._chunk_size = chunk_size
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._pending = ""
        self._eof = False

    def __call__(self) -> str:
        while "\n" not in self._pending and not self._eof:
            chunk = os.read(self._fd, self._chunk_size)
            if chunk:
                self._pending += self._decoder.decode(chunk)
            else:
                self._pending += self._decoder.decode(b"", final=True)
                self._eof = True

        if "\n" in self._pending:
            line, self._pending = self._pending.split("\n", 1)
            return line.rstrip("\r")
        if self._pending:
            line, self._pending = self._pending, ""
            return line
        raise EOFError("answer input closed")


def answer_source(
    console: Console, stream: Optional[TextIO] = None
) -> InputProvider:
    """Pick how `quiz run` reads answers from ``stream`` (stdin by default).

    Terminals keep ``console.input`` for line editing; pipes and redirected
    files are read through :class:`DescriptorLines`.
    """

    stream = sys.stdin if stream is None else stream
    if stream is None or stream.isatty():
        return console.input
    try:
        fd = stream.fileno()
    except (AttributeError, OSError, io.UnsupportedOperation):
        return console.input
    return DescriptorLines(fd)
