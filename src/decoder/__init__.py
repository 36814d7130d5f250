"""
IPv4/TCP header decoding.
"""

from .byte_cursor import ByteCursor
from .exceptions import LogFormatError, MalformedHeader, TruncatedHeader
from .header_codec import (
    decode_ip_header,
    decode_tcp_header,
    encode_ip_header,
    encode_tcp_header,
    format_ipv4,
    read_ip_header,
    read_tcp_header,
)

__all__ = [
    'ByteCursor',
    'LogFormatError',
    'MalformedHeader',
    'TruncatedHeader',
    'decode_ip_header',
    'decode_tcp_header',
    'encode_ip_header',
    'encode_tcp_header',
    'format_ipv4',
    'read_ip_header',
    'read_tcp_header',
]
