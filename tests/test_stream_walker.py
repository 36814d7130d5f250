"""
Tests for walking a raw IPv4/TCP packet log.
"""
import pytest

from decoder.exceptions import MalformedHeader
from decoder.header_codec import format_ipv4
from log_loader.stream_walker import PacketStreamWalker
from models.packet import Direction

from packet_builder import (
    ACK,
    CLIENT,
    SERVER,
    SYN,
    SYN_ACK,
    build_message_log,
    build_packet,
)

THIRD_PARTY = "10.0.0.7"


def _handshake():
    return (
        build_packet(CLIENT, SERVER, flags=SYN)
        + build_packet(SERVER, CLIENT, flags=SYN_ACK)
        + build_packet(CLIENT, SERVER, flags=ACK)
    )


def test_handshake_directions_and_conversation():
    walker = PacketStreamWalker(_handshake())
    assert walker.conversation is None

    first = walker.next_packet()
    conversation = walker.conversation
    assert format_ipv4(conversation.server_address) == SERVER
    assert format_ipv4(conversation.client_address) == CLIENT
    assert first.direction is Direction.CLIENT_TO_SERVER

    second = walker.next_packet()
    third = walker.next_packet()
    assert second.direction is Direction.SERVER_TO_CLIENT
    assert third.direction is Direction.CLIENT_TO_SERVER
    assert walker.conversation == conversation

    assert walker.next_packet() is None
    assert walker.packets_read == 3
    assert [p.index for p in (first, second, third)] == [0, 1, 2]


def test_iterator_protocol_yields_every_packet():
    packets = list(PacketStreamWalker(_handshake()))
    assert [p.tcp.control_bits for p in packets] == [SYN, SYN_ACK, ACK]


def test_payload_length_without_options():
    payload = b"GET / HTTP/1.0\r\n\r\n"
    packet = next(PacketStreamWalker(build_packet(CLIENT, SERVER, payload=payload)))

    assert packet.ip.ihl == 5
    assert packet.tcp.data_offset == 5
    assert packet.payload_length == packet.ip.total_length - 40
    assert packet.payload == payload
    assert (packet.payload_start, packet.payload_end) == (40, 40 + len(payload))


def test_options_are_skipped_before_payload():
    payload = b"data"
    record = build_packet(CLIENT, SERVER, payload=payload,
                          ip_options=b"\x01\x01\x01\x00",
                          tcp_options=b"\x02\x04\x05\xb4" + b"\x01" * 8)
    packet = next(PacketStreamWalker(record))

    assert packet.ip.ihl == 6
    assert packet.tcp.data_offset == 8
    assert packet.payload_start == 20 + 4 + 20 + 12
    assert packet.payload == payload


def test_second_packet_starts_after_declared_total_length():
    first = build_packet(CLIENT, SERVER, payload=b"x" * 7,
                         ip_options=b"\x00" * 8, tcp_options=b"\x01" * 4)
    second = build_packet(SERVER, CLIENT, payload=b"reply")
    packets = list(PacketStreamWalker(first + second))

    assert len(packets) == 2
    assert packets[1].payload_start == len(first) + 40
    assert packets[1].payload == b"reply"


@pytest.mark.parametrize("tail", [b"", b"\x45", b"\x00" * 19])
def test_short_tail_is_end_of_stream(tail):
    walker = PacketStreamWalker(_handshake() + tail)
    assert len(list(walker)) == 3
    assert walker.finished


def test_empty_log_has_no_packets():
    walker = PacketStreamWalker(b"")
    assert walker.next_packet() is None
    assert walker.conversation is None


def test_ihl_below_minimum_is_malformed():
    bad = build_packet(SERVER, CLIENT, ihl=3)
    walker = PacketStreamWalker(_handshake() + bad + build_packet(CLIENT, SERVER))

    good = [walker.next_packet() for _ in range(3)]
    assert all(p is not None for p in good)

    with pytest.raises(MalformedHeader) as excinfo:
        walker.next_packet()
    assert excinfo.value.packet_index == 3
    assert "IHL 3" in str(excinfo.value)

    # No descriptor for the bad packet or anything after it
    assert walker.next_packet() is None
    assert list(walker) == []
    assert walker.packets_read == 3


def test_data_offset_below_minimum_is_malformed():
    walker = PacketStreamWalker(build_packet(CLIENT, SERVER, data_offset=4))
    with pytest.raises(MalformedHeader) as excinfo:
        walker.next_packet()
    assert excinfo.value.packet_index == 0
    assert excinfo.value.offset == 20


def test_negative_payload_length_is_malformed():
    record = build_packet(CLIENT, SERVER, tcp_options=b"\x01" * 12, total_length=40)
    with pytest.raises(MalformedHeader) as excinfo:
        list(PacketStreamWalker(record))
    assert excinfo.value.packet_index == 0
    assert "smaller than the 52 header bytes" in str(excinfo.value)


def test_log_cut_inside_packet_is_malformed():
    record = build_packet(SERVER, CLIENT, payload=b"0123456789")
    walker = PacketStreamWalker(_handshake() + record[:-3])
    assert len([walker.next_packet() for _ in range(3)]) == 3
    with pytest.raises(MalformedHeader) as excinfo:
        walker.next_packet()
    assert excinfo.value.packet_index == 3


def test_log_cut_inside_tcp_header_is_malformed():
    record = build_packet(CLIENT, SERVER)
    with pytest.raises(MalformedHeader):
        list(PacketStreamWalker(record[:30]))


def test_unrelated_traffic_is_tagged_not_dropped():
    log = (
        build_packet(CLIENT, SERVER, flags=SYN)
        + build_packet(THIRD_PARTY, CLIENT, payload=b"noise")
        + build_packet(SERVER, THIRD_PARTY)
        + build_packet(SERVER, CLIENT, flags=SYN_ACK)
    )
    directions = [p.direction for p in PacketStreamWalker(log)]
    assert directions == [
        Direction.CLIENT_TO_SERVER,
        Direction.UNRELATED,
        Direction.UNRELATED,
        Direction.SERVER_TO_CLIENT,
    ]


def test_protocol_and_version_are_not_enforced():
    record = bytearray(build_packet(CLIENT, SERVER))
    record[0] = 0x65   # version 6, IHL 5
    record[9] = 17     # UDP
    packet = next(PacketStreamWalker(bytes(record)))
    assert packet.ip.version == 6
    assert packet.ip.protocol == 17


def test_message_log_payload_boundaries():
    log, server_stream = build_message_log()
    packets = list(PacketStreamWalker(log))

    assert len(packets) == 18
    assert [p.ip.total_length for p in packets][:4] == [60, 60, 52, 1076]
    server_packets = [p for p in packets if p.direction is Direction.SERVER_TO_CLIENT]
    assert len(server_packets) == 8
    assert b"".join(p.payload for p in server_packets) == server_stream
    for p in packets:
        assert log[p.payload_start:p.payload_end] == p.payload


def test_close_stops_walk():
    walker = PacketStreamWalker(_handshake())
    walker.next_packet()
    walker.close()
    assert walker.next_packet() is None
