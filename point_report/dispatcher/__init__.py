"""
Dispatcher Module

Routes report rows to the classified or pending stream and serializes them.
"""

from .partitioner import Partitioner, StreamType
from .serializer import StreamWriter, format_header, format_row, quote_field

__all__ = [
    "Partitioner",
    "StreamType",
    "StreamWriter",
    "format_header",
    "format_row",
    "quote_field",
]
