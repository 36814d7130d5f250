"""
Per-log analysis: summary line and payload extraction.
"""

from .extract import PayloadSink, extract_server_payload
from .summary import ConversationSummary

__all__ = [
    'ConversationSummary',
    'PayloadSink',
    'extract_server_payload',
]
