"""
Report Serializer

Renders report rows as quoted CSV lines and appends them to the output
streams.
"""

import logging
from typing import Dict, List, Mapping, Optional, TextIO

from .partitioner import StreamType

logger = logging.getLogger(__name__)


def quote_field(value: Optional[str]) -> str:
    """Wrap a value in double quotes, doubling any embedded quote."""
    text = "" if value is None else str(value)
    return '"' + text.replace('"', '""') + '"'


def format_row(record: Mapping[str, Optional[str]], columns: List[str]) -> str:
    """Render one row in column order; missing values render as ""."""
    return ",".join(quote_field(record.get(column)) for column in columns)


def format_header(columns: List[str]) -> str:
    return ",".join(columns)


class StreamWriter:
    """
    Writes report rows to one text stream per StreamType.

    The header line goes out once per stream when the writer is created; each
    row is appended whole with a single write.
    """

    def __init__(self, streams: Mapping[StreamType, TextIO], columns: List[str]):
        """
        Initialize the writer and emit the headers.

        Args:
            streams: Open text stream for each stream type
            columns: Ordered output columns shared by all streams
        """
        self.streams = dict(streams)
        self.columns = list(columns)
        self.rows_written: Dict[StreamType, int] = {stream: 0 for stream in self.streams}

        header = format_header(self.columns) + "\n"
        for out in self.streams.values():
            out.write(header)

        logger.info(f"StreamWriter initialized for {len(self.streams)} stream(s), "
                    f"{len(self.columns)} columns")

    def write(self, stream: StreamType, record: Mapping[str, Optional[str]]) -> None:
        """
        Append a row to a stream.

        Raises:
            KeyError: If the writer has no such stream
        """
        out = self.streams[stream]
        out.write(format_row(record, self.columns) + "\n")
        self.rows_written[stream] += 1

    def counts(self) -> Dict[str, int]:
        return {stream.value: count for stream, count in self.rows_written.items()}
