"""
Server-to-client payload extraction (extract-mode collaborator).
"""
from __future__ import annotations

from typing import BinaryIO, Callable, Iterable, Optional

from models.packet import Direction, PacketDescriptor


class PayloadSink:
    """Appends payload chunks, in packet order, to a binary stream."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self.chunks_written = 0
        self.bytes_written = 0

    def write(self, payload: bytes) -> None:
        self._stream.write(payload)
        self.chunks_written += 1
        self.bytes_written += len(payload)


def extract_server_payload(packets: Iterable[PacketDescriptor],
                           sink: PayloadSink,
                           on_chunk: Optional[Callable[[PacketDescriptor], None]] = None) -> int:
    """
    Write every non-empty server-to-client payload to ``sink``.

    Client-to-server and unrelated packets are skipped. Returns the number
    of packets walked. Errors from the walk propagate after earlier chunks
    have been written.
    """
    walked = 0
    for packet in packets:
        walked += 1
        if packet.direction is not Direction.SERVER_TO_CLIENT or not packet.payload:
            continue
        sink.write(packet.payload)
        if on_chunk is not None:
            on_chunk(packet)
    return walked
