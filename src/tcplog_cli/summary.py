"""
CLI command for the one-line conversation summary.
"""
import json

import click

from analysis.summary import ConversationSummary
from decoder.exceptions import MalformedHeader
from log_loader.exceptions import IoUnavailable
from log_loader.log_reader import LogReader

from .errors import LogUnreadable, MalformedLog, PacketLogCommand


@click.command(cls=PacketLogCommand)
@click.argument("log_path", type=click.Path())
@click.option("--stats", is_flag=True,
              help="Also print per-direction packet/byte counts to stderr")
def summary(log_path: str, stats: bool):
    """
    Print server, client, first IHL, first length, first data offset and
    packet count.

    Example:
      tcplog summary message.log
    """
    result = ConversationSummary()
    try:
        with LogReader(log_path) as reader:
            for packet in reader:
                result.on_packet(packet)
    except IoUnavailable as e:
        raise LogUnreadable(e.reason)
    except MalformedHeader as e:
        raise MalformedLog(str(e))

    if result.is_empty:
        raise MalformedLog("log contains no packets")

    click.echo(result.summary_line())
    if stats:
        click.echo(json.dumps(result.to_dict(), separators=(",", ":")), err=True)
