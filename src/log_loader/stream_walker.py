"""
Sequential walker over a raw IPv4/TCP packet log.

Log structure (no file header, no framing):
- Repeated packet units:
  - IPv4 header (20 bytes + options, length = 4 * IHL)
  - TCP header (20 bytes + options, length = 4 * data offset)
  - Payload (ip.total_length minus both header lengths)

The first packet is the client's SYN, so its destination is taken as the
server for the rest of the walk.
"""
from __future__ import annotations

from typing import Iterator, Optional

from decoder.byte_cursor import ByteCursor
from decoder.exceptions import LogFormatError, MalformedHeader, TruncatedHeader
from decoder.header_codec import read_ip_header, read_tcp_header
from models.packet import (
    FIXED_HEADER_LEN,
    MIN_HEADER_WORDS,
    Conversation,
    PacketDescriptor,
)


class PacketStreamWalker:
    """
    Yields one ``PacketDescriptor`` per packet in the buffer.

    Iteration stops cleanly when fewer than 20 bytes are left at a packet
    boundary. Any structural violation raises ``MalformedHeader`` and
    finishes the walk; descriptors already yielded stay valid.
    """

    def __init__(self, data):
        self._cursor = ByteCursor(data)
        self._packet_index = 0
        self._conversation: Optional[Conversation] = None
        self._finished = False
        self._closed = False

    @property
    def conversation(self) -> Optional[Conversation]:
        """Server/client pair, or None before the first packet."""
        return self._conversation

    @property
    def packets_read(self) -> int:
        return self._packet_index

    @property
    def finished(self) -> bool:
        return self._finished

    def __iter__(self) -> Iterator[PacketDescriptor]:
        return self

    def __next__(self) -> PacketDescriptor:
        descriptor = self.next_packet()
        if descriptor is None:
            raise StopIteration
        return descriptor

    def next_packet(self) -> Optional[PacketDescriptor]:
        """Decode the next packet, or return None at end of stream."""
        if self._finished:
            return None
        # Checked before decoding; a short tail at a boundary is not an error
        if self._cursor.remaining < FIXED_HEADER_LEN:
            self._finished = True
            return None

        try:
            descriptor = self._decode_packet()
        except LogFormatError:
            self._finished = True
            raise

        self._packet_index += 1
        return descriptor

    def close(self):
        """Finish the walk and release the underlying buffer."""
        if not self._closed:
            self._finished = True
            self._closed = True
            self._cursor.release()

    def _decode_packet(self) -> PacketDescriptor:
        cursor = self._cursor
        index = self._packet_index
        packet_start = cursor.position

        ip = read_ip_header(cursor)
        if ip.ihl < MIN_HEADER_WORDS:
            raise MalformedHeader(
                f"IHL {ip.ihl} is below the minimum of {MIN_HEADER_WORDS}",
                index, packet_start)

        try:
            cursor.skip(ip.options_length)

            if index == 0:
                self._conversation = Conversation.from_first_packet(ip)

            tcp_start = cursor.position
            tcp = read_tcp_header(cursor)
            if tcp.data_offset < MIN_HEADER_WORDS:
                raise MalformedHeader(
                    f"TCP data offset {tcp.data_offset} is below the minimum "
                    f"of {MIN_HEADER_WORDS}",
                    index, tcp_start)

            payload_length = ip.total_length - (ip.header_length + tcp.header_length)
            if payload_length < 0:
                raise MalformedHeader(
                    f"total length {ip.total_length} is smaller than the "
                    f"{ip.header_length + tcp.header_length} header bytes",
                    index, packet_start)

            direction = self._conversation.classify(ip)

            cursor.skip(tcp.options_length)
            payload_start = cursor.position
            payload = cursor.read_bytes(payload_length)
        except TruncatedHeader as e:
            raise MalformedHeader(f"log ends inside packet ({e})",
                                  index, packet_start) from e

        return PacketDescriptor(
            index=index,
            ip=ip,
            tcp=tcp,
            direction=direction,
            payload_start=payload_start,
            payload_end=payload_start + payload_length,
            payload=payload,
        )
