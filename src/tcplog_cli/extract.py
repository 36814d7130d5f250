"""
CLI command for extracting the server-to-client byte stream.
"""
import click

from analysis.extract import PayloadSink, extract_server_payload
from decoder.exceptions import MalformedHeader
from log_loader.exceptions import IoUnavailable
from log_loader.log_reader import LogReader

from .errors import LogUnreadable, MalformedLog, OutputUnwritable, PacketLogCommand


@click.command(cls=PacketLogCommand)
@click.argument("log_path", type=click.Path())
@click.argument("output_path", type=click.Path())
@click.option("--verbose", "-v", is_flag=True,
              help="Report every payload chunk written on stderr")
def extract(log_path: str, output_path: str, verbose: bool):
    """
    Write the server-to-client payload of the logged conversation to a file.

    Example:
      tcplog extract message.log message.out
    """
    reader = LogReader(log_path)
    try:
        reader.open()
    except IoUnavailable as e:
        raise LogUnreadable(e.reason)

    def report(packet):
        click.echo(f"packet {packet.index}: {packet.payload_length} bytes", err=True)

    try:
        try:
            out = open(output_path, "wb")
        except OSError as e:
            raise OutputUnwritable(e.strerror or str(e))

        with out:
            sink = PayloadSink(out)
            try:
                extract_server_payload(reader, sink, on_chunk=report if verbose else None)
            except MalformedHeader as e:
                raise MalformedLog(str(e))
            except OSError as e:
                raise OutputUnwritable(e.strerror or str(e))

        if verbose:
            click.echo(f"{sink.bytes_written} bytes in {sink.chunks_written} chunks "
                       f"written to {output_path}", err=True)
    finally:
        reader.close()
