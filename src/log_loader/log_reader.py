"""
Packet log file reader.

The log is a bare concatenation of IPv4/TCP packets with no file header.
The file is memory-mapped read-only and walked in place.
"""
from __future__ import annotations

import mmap
import os
from typing import Iterator, List, Optional

from models.packet import PacketDescriptor

from .exceptions import IoUnavailable
from .stream_walker import PacketStreamWalker


class LogReader:
    """
    Opens a packet log and hands out walkers over its bytes.

    Usable as a context manager:

        with LogReader("message.log") as reader:
            for packet in reader:
                ...
    """

    def __init__(self, filepath: str):
        self.filepath = filepath
        self.file_handle = None
        self.mmap: Optional[mmap.mmap] = None
        self._file_size = 0
        self._walkers: List[PacketStreamWalker] = []

    @property
    def file_size(self) -> int:
        return self._file_size

    def open(self):
        """Open and map the log. Raises ``IoUnavailable`` on any OS error."""
        try:
            self.file_handle = open(self.filepath, 'rb')
            self._file_size = os.fstat(self.file_handle.fileno()).st_size
            # mmap refuses empty files; an empty log is simply zero packets
            if self._file_size:
                self.mmap = mmap.mmap(self.file_handle.fileno(), 0,
                                      access=mmap.ACCESS_READ)
        except OSError as e:
            self.close()
            raise IoUnavailable(self.filepath, e.strerror or str(e)) from e

    def walk(self) -> PacketStreamWalker:
        """Start a new walk from the first byte of the log."""
        if self.file_handle is None:
            raise RuntimeError("LogReader is not open")
        walker = PacketStreamWalker(self.mmap if self.mmap is not None else b"")
        self._walkers.append(walker)
        return walker

    def __iter__(self) -> Iterator[PacketDescriptor]:
        return self.walk()

    def close(self):
        """Release walkers, the mapping and the file handle."""
        for walker in self._walkers:
            walker.close()
        self._walkers = []
        if self.mmap is not None:
            self.mmap.close()
            self.mmap = None
        if self.file_handle is not None:
            self.file_handle.close()
            self.file_handle = None

    def __enter__(self) -> "LogReader":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
