"""
clipstash

Clipboard history manager: a polling monitor daemon that records every distinct
clipboard value in SQLite, and a terminal browser to filter and re-copy them.
"""

__version__ = "1.0.0"
