"""
tcplog CLI - main entry point.
"""
import click

from .dump import dump
from .extract import extract
from .summary import summary


@click.group()
def cli():
    """tcplog - decode a raw IPv4/TCP conversation log."""
    pass


cli.add_command(summary)
cli.add_command(extract)
cli.add_command(dump)

if __name__ == "__main__":
    cli()
