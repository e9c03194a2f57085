"""
Report Module

Column sets, record building and run summary for the CSV reports.
"""

from .builder import RecordBuilder
from .columns import COLUMN_SETS, get_columns
from .summary import RunSummary

__all__ = ["RecordBuilder", "COLUMN_SETS", "get_columns", "RunSummary"]
