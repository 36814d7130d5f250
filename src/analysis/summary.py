"""Conversation summary (summary-mode collaborator)."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from decoder.header_codec import format_ipv4
from models.packet import Conversation, Direction, PacketDescriptor


@dataclass
class _DirectionTally:
    packets: int = 0
    payload_bytes: int = 0


@dataclass
class ConversationSummary:
    """
    Accumulates the one-line log summary:

        <server> <client> <first IHL> <first total length> <first data offset> <packets>

    Unrelated packets count towards the total only.
    """
    conversation: Optional[Conversation] = None
    first_ihl: Optional[int] = None
    first_total_length: Optional[int] = None
    first_data_offset: Optional[int] = None
    packet_count: int = 0
    tallies: Dict[Direction, _DirectionTally] = field(
        default_factory=lambda: {d: _DirectionTally() for d in Direction})

    def on_packet(self, packet: PacketDescriptor) -> None:
        if self.packet_count == 0:
            self.conversation = Conversation.from_first_packet(packet.ip)
            self.first_ihl = packet.ip.ihl
            self.first_total_length = packet.ip.total_length
            self.first_data_offset = packet.tcp.data_offset

        self.packet_count += 1
        tally = self.tallies[packet.direction]
        tally.packets += 1
        tally.payload_bytes += packet.payload_length

    @property
    def is_empty(self) -> bool:
        return self.packet_count == 0

    def summary_line(self) -> str:
        if self.conversation is None:
            raise ValueError("no packets observed")
        return "{} {} {} {} {} {}".format(
            format_ipv4(self.conversation.server_address),
            format_ipv4(self.conversation.client_address),
            self.first_ihl,
            self.first_total_length,
            self.first_data_offset,
            self.packet_count,
        )

    def to_dict(self) -> dict:
        return {
            "packets_total": self.packet_count,
            "server_to_client_packets": self.tallies[Direction.SERVER_TO_CLIENT].packets,
            "server_to_client_bytes": self.tallies[Direction.SERVER_TO_CLIENT].payload_bytes,
            "client_to_server_packets": self.tallies[Direction.CLIENT_TO_SERVER].packets,
            "client_to_server_bytes": self.tallies[Direction.CLIENT_TO_SERVER].payload_bytes,
            "unrelated_packets": self.tallies[Direction.UNRELATED].packets,
        }
