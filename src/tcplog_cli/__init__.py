"""
tcplog command-line interface.
"""
