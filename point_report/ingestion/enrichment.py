"""
Point Enrichment

Indexes the two side-channel datasets keyed by point id: classification
confidence (with the "unused" flag) and unit corrections.
"""

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, Mapping, Optional

logger = logging.getLogger(__name__)

# Column order of the legacy headerless tab-separated confidence export
LEGACY_CONFIDENCE_FIELDS = [
    "id",
    "name",
    "description",
    "type",
    "tag_confidence",
    "type_confidence",
    "confidence_level",
]

TRUE_VALUES = {"true", "1", "yes"}


@dataclass(frozen=True)
class ConfidenceEntry:
    """Classification confidence for one point."""
    type_confidence: str = ""
    confidence_level: str = ""
    unused: bool = False


@dataclass(frozen=True)
class UnitCorrection:
    """Unit the point carried before it was corrected."""
    previous_unit: str = ""


EMPTY_CONFIDENCE = ConfidenceEntry()
EMPTY_UNIT_CORRECTION = UnitCorrection()


def _text(value: Optional[str]) -> str:
    return value.strip() if isinstance(value, str) else ""


class EnrichmentIndex:
    """
    Lookup maps from point id to enrichment data.

    A point missing from a source gets that source's empty entry. When a point
    id repeats within a source, the last row wins.
    """

    def __init__(
        self,
        confidence: Optional[Dict[str, ConfidenceEntry]] = None,
        unit_corrections: Optional[Dict[str, UnitCorrection]] = None
    ):
        self.confidence_map = confidence or {}
        self.unit_correction_map = unit_corrections or {}

    @classmethod
    def build(
        cls,
        confidence_rows: Iterable[Mapping[str, Optional[str]]] = (),
        unit_correction_rows: Iterable[Mapping[str, Optional[str]]] = ()
    ) -> "EnrichmentIndex":
        """
        Build the index from already parsed rows.

        Args:
            confidence_rows: Rows with id, type_confidence, confidence_level, unused
            unit_correction_rows: Rows with id, prev_unit

        Returns:
            EnrichmentIndex
        """
        confidence: Dict[str, ConfidenceEntry] = {}
        for row in confidence_rows:
            point_id = _text(row.get("id"))
            if not point_id:
                continue
            confidence[point_id] = ConfidenceEntry(
                type_confidence=_text(row.get("type_confidence")),
                confidence_level=_text(row.get("confidence_level")),
                unused=_text(row.get("unused")).lower() in TRUE_VALUES
            )

        unit_corrections: Dict[str, UnitCorrection] = {}
        for row in unit_correction_rows:
            point_id = _text(row.get("id"))
            if not point_id:
                continue
            unit_corrections[point_id] = UnitCorrection(
                previous_unit=_text(row.get("prev_unit"))
            )

        logger.info(f"Found {len(confidence)} confidence entries")
        logger.info(f"Found {len(unit_corrections)} unit corrections")
        return cls(confidence, unit_corrections)

    def confidence(self, point_id: str) -> ConfidenceEntry:
        return self.confidence_map.get(point_id, EMPTY_CONFIDENCE)

    def unit_correction(self, point_id: str) -> UnitCorrection:
        return self.unit_correction_map.get(point_id, EMPTY_UNIT_CORRECTION)

    def is_unused(self, point_id: str) -> bool:
        return self.confidence(point_id).unused


def read_confidence_file(path: Path) -> Iterator[Dict[str, Optional[str]]]:
    """
    Read confidence rows from a side file.

    Headed CSV files are read by column name. Files ending in .tsv or .txt use
    the legacy headerless tab-separated layout (see LEGACY_CONFIDENCE_FIELDS);
    those are plain tab splits, so quote characters are kept as data.
    A leading UTF-8 byte order mark is ignored.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Confidence file not found: {path}")

    logger.info(f"Reading confidence file: {path}")
    with open(path, newline="", encoding="utf-8-sig") as f:
        if path.suffix.lower() in (".tsv", ".txt"):
            reader = csv.DictReader(
                f,
                fieldnames=LEGACY_CONFIDENCE_FIELDS,
                delimiter="\t",
                quoting=csv.QUOTE_NONE
            )
        else:
            reader = csv.DictReader(f)
        yield from reader


def read_unit_corrections_file(path: Path) -> Iterator[Dict[str, Optional[str]]]:
    """
    Read unit correction rows (id, prev_unit) from a headed CSV file.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Unit corrections file not found: {path}")

    logger.info(f"Reading unit corrections file: {path}")
    with open(path, newline="", encoding="utf-8-sig") as f:
        yield from csv.DictReader(f)
