"""
CLI command for listing every packet in a log.
"""
import json
from typing import Optional

import click

from decoder.exceptions import MalformedHeader
from decoder.header_codec import format_ipv4
from log_loader.exceptions import IoUnavailable
from log_loader.log_reader import LogReader

from .errors import LogUnreadable, MalformedLog, PacketLogCommand


def format_packet_line(packet) -> str:
    """
    One listing line, e.g.

        128.232.1.219 -> 128.232.9.6   (60 bytes,   Flags: 000010) [SYN]
    """
    src = format_ipv4(packet.ip.source_address)
    dst = format_ipv4(packet.ip.destination_address)
    size = f"({packet.ip.total_length} bytes,"
    label = "-".join(packet.tcp.flag_names) or "NONE"
    return f"{src:<13} -> {dst:<13} {size:<13}Flags: {packet.tcp.flag_bits}) [{label}]"


@click.command(cls=PacketLogCommand)
@click.argument("log_path", type=click.Path())
@click.option("--limit", "limit", type=int, default=0, show_default=True,
              help="Max packets to list (0 = no limit)")
@click.option("--format", "format", type=click.Choice(["table", "jsonl"]),
              default="table", show_default=True, help="Output format")
def dump(log_path: str, limit: int, format: str):
    """
    List the packets of a log with their direction flags.

    Example:
      tcplog dump message.log --limit 5
    """
    count = 0
    try:
        with LogReader(log_path) as reader:
            for packet in reader:
                if format == "table":
                    click.echo(format_packet_line(packet))
                else:
                    click.echo(json.dumps(packet.to_dict(), separators=(",", ":"),
                                          ensure_ascii=True))
                count += 1
                if limit > 0 and count >= limit:
                    break
    except IoUnavailable as e:
        raise LogUnreadable(e.reason)
    except MalformedHeader as e:
        raise MalformedLog(str(e))
