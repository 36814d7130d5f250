"""
I/O exceptions for packet log files.
"""


class IoUnavailable(Exception):
    """The log could not be opened/read, or an output could not be written."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
