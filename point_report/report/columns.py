"""
Report Column Sets

Ordered column lists for the CSV reports. Downstream tooling reads the
reports positionally, so the order of each list is part of its contract.
"""

from typing import Dict, List

# Richer report: categories, unit corrections, confidence
CLASSIFIED_COLUMNS: List[str] = [
    "mappedPointId",
    "ip",
    "network",
    "instanceId",
    "objectId",
    "mappedThingId",
    "equipmentName",
    "equipmentDescription",
    "equipmentType",
    "equipmentCategory",
    "equipmentManufacturer",
    "equipmentModel",
    "equipmentFirmware",
    "equipmentLocation",
    "pointName",
    "pointDescription",
    "pointType",
    "pointCategory",
    "pointUnit",
    "pointOriginalUnit",
    "pointConfidence",
    "pointConfidenceLevel",
]

# Simpler report: state texts, parent equipment and raw mapping key
BASIC_COLUMNS: List[str] = [
    "mappedPointId",
    "ip",
    "network",
    "instanceId",
    "objectId",
    "mappedThingId",
    "equipmentName",
    "equipmentDescription",
    "equipmentType",
    "equipmentManufacturer",
    "equipmentModel",
    "equipmentFirmware",
    "equipmentLocation",
    "equipmentIsPartOf",
    "equipmentMappingKey",
    "pointName",
    "pointDescription",
    "pointType",
    "pointUnit",
    "pointStateTexts",
    "pointConfidence",
    "pointConfidenceLevel",
]

# Every field the record builder produces
FULL_COLUMNS: List[str] = [
    "mappedPointId",
    "ip",
    "network",
    "instanceId",
    "objectId",
    "mappedThingId",
    "equipmentName",
    "equipmentDescription",
    "equipmentType",
    "equipmentCategory",
    "equipmentManufacturer",
    "equipmentModel",
    "equipmentFirmware",
    "equipmentLocation",
    "equipmentIsPartOf",
    "equipmentMappingKey",
    "equipmentDateCreated",
    "equipmentDateUpdated",
    "pointName",
    "pointDescription",
    "pointType",
    "pointCategory",
    "pointUnit",
    "pointOriginalUnit",
    "pointStateTexts",
    "pointValueMap",
    "pointConfidence",
    "pointConfidenceLevel",
    "pointUnused",
    "pointDateCreated",
    "pointDateUpdated",
    "pointDaysToClassify",
]

# One row per equipment
EQUIPMENT_COLUMNS: List[str] = [
    "mappedThingId",
    "ip",
    "network",
    "instanceId",
    "equipmentName",
    "equipmentDescription",
    "equipmentType",
    "equipmentCategory",
    "equipmentManufacturer",
    "equipmentModel",
    "equipmentFirmware",
    "equipmentLocation",
    "equipmentIsPartOf",
    "equipmentMappingKey",
    "pointCount",
]

COLUMN_SETS: Dict[str, List[str]] = {
    "classified": CLASSIFIED_COLUMNS,
    "basic": BASIC_COLUMNS,
    "full": FULL_COLUMNS,
    "equipment": EQUIPMENT_COLUMNS,
}


def get_columns(name: str) -> List[str]:
    """
    Look up a column set by name.

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return list(COLUMN_SETS[name])
    except KeyError:
        raise ValueError(
            f"Unknown column set: {name} (expected one of {', '.join(COLUMN_SETS)})"
        )
