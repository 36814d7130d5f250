"""
CLI error types and exit codes.

    0  success
    1  wrong arguments
    2  log file unreadable
    3  output file unwritable
    4  log is malformed (partial output may already exist)
"""
import click

EXIT_USAGE = 1
EXIT_LOG_UNREADABLE = 2
EXIT_OUTPUT_UNWRITABLE = 3
EXIT_MALFORMED_LOG = 4


class LogUnreadable(click.ClickException):
    exit_code = EXIT_LOG_UNREADABLE

    def __init__(self, reason):
        super().__init__(f"Unable to open the log file: {reason}")


class OutputUnwritable(click.ClickException):
    exit_code = EXIT_OUTPUT_UNWRITABLE

    def __init__(self, reason):
        super().__init__(f"Unable to open the output file: {reason}")


class MalformedLog(click.ClickException):
    exit_code = EXIT_MALFORMED_LOG

    def __init__(self, reason):
        super().__init__(f"Malformed log: {reason}")


class PacketLogCommand(click.Command):
    """Command whose argument errors exit with status 1 rather than click's 2."""

    def parse_args(self, ctx, args):
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = EXIT_USAGE
            raise
