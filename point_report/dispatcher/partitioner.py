"""
Report Partitioner

Routes each report row to the classified or the pending (unclassified) stream.
"""

import logging
from enum import Enum
from typing import Mapping

logger = logging.getLogger(__name__)


class StreamType(str, Enum):
    """Output streams of a point report."""
    CLASSIFIED = "classified"
    UNCLASSIFIED = "unclassified"


class Partitioner:
    """
    A row is unclassified when its point is flagged unused or still carries
    the generic uncategorized point type. Everything else is classified.
    """

    def __init__(self, uncategorized_type: str = "Point"):
        self.uncategorized_type = uncategorized_type

    def classify(self, record: Mapping[str, str]) -> StreamType:
        """
        Pick the stream for a row.

        Args:
            record: Row with at least pointUnused and pointType

        Returns:
            StreamType
        """
        if record.get("pointUnused") == "true":
            return StreamType.UNCLASSIFIED
        if record.get("pointType") == self.uncategorized_type:
            return StreamType.UNCLASSIFIED
        return StreamType.CLASSIFIED
