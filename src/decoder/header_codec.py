"""
Pure IPv4/TCP header decoding.

Every multi-byte field is big-endian on the wire. Only the fixed 20-byte
part of each header is decoded here; options are skipped by the caller
using the header length the record reports.
"""
from __future__ import annotations

import struct

from models.packet import FIXED_HEADER_LEN, IPHeader, TCPHeader

from .byte_cursor import ByteCursor
from .exceptions import TruncatedHeader

_IP_FIXED = struct.Struct("!BBHHHBBHII")
_TCP_FIXED = struct.Struct("!HHIIBBHHH")


def read_ip_header(cursor: ByteCursor) -> IPHeader:
    """Decode an IPv4 fixed header at the cursor and advance past it."""
    if cursor.remaining < FIXED_HEADER_LEN:
        raise TruncatedHeader(FIXED_HEADER_LEN, cursor.remaining)
    return IPHeader(
        version_and_ihl=cursor.read_u8(),
        type_of_service=cursor.read_u8(),
        total_length=cursor.read_u16(),
        identification=cursor.read_u16(),
        flags_and_fragment_offset=cursor.read_u16(),
        time_to_live=cursor.read_u8(),
        protocol=cursor.read_u8(),
        header_checksum=cursor.read_u16(),
        source_address=cursor.read_u32(),
        destination_address=cursor.read_u32(),
    )


def read_tcp_header(cursor: ByteCursor) -> TCPHeader:
    """Decode a TCP fixed header at the cursor and advance past it."""
    if cursor.remaining < FIXED_HEADER_LEN:
        raise TruncatedHeader(FIXED_HEADER_LEN, cursor.remaining)
    return TCPHeader(
        source_port=cursor.read_u16(),
        destination_port=cursor.read_u16(),
        sequence_number=cursor.read_u32(),
        acknowledgment_number=cursor.read_u32(),
        data_offset_and_reserved=cursor.read_u8(),
        control_bits=cursor.read_u8(),
        window=cursor.read_u16(),
        checksum=cursor.read_u16(),
        urgent_pointer=cursor.read_u16(),
    )


def decode_ip_header(data) -> IPHeader:
    """Decode the first 20 bytes of ``data`` as an IPv4 header."""
    return read_ip_header(ByteCursor(data))


def decode_tcp_header(data) -> TCPHeader:
    """Decode the first 20 bytes of ``data`` as a TCP header."""
    return read_tcp_header(ByteCursor(data))


def encode_ip_header(ip: IPHeader) -> bytes:
    return _IP_FIXED.pack(
        ip.version_and_ihl,
        ip.type_of_service,
        ip.total_length,
        ip.identification,
        ip.flags_and_fragment_offset,
        ip.time_to_live,
        ip.protocol,
        ip.header_checksum,
        ip.source_address,
        ip.destination_address,
    )


def encode_tcp_header(tcp: TCPHeader) -> bytes:
    return _TCP_FIXED.pack(
        tcp.source_port,
        tcp.destination_port,
        tcp.sequence_number,
        tcp.acknowledgment_number,
        tcp.data_offset_and_reserved,
        tcp.control_bits,
        tcp.window,
        tcp.checksum,
        tcp.urgent_pointer,
    )


def format_ipv4(address: int) -> str:
    """Render a 32-bit address as dotted decimal, most significant octet first."""
    return "{}.{}.{}.{}".format(
        (address >> 24) & 0xFF,
        (address >> 16) & 0xFF,
        (address >> 8) & 0xFF,
        address & 0xFF,
    )
