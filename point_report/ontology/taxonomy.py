"""
Taxonomy Tables

Root categories for equipment and points and the BACnet object type table.
Passed explicitly into the resolver and codec so a deployment can override
them from a JSON file.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


def _default_equipment_roots() -> List[str]:
    return [
        "CAMERA",
        "ELECTRICAL_EQUIPMENT",
        "ELEVATOR",
        "FIRE_SAFETY_EQUIPMENT",
        "FURNITURE",
        "GAS_DISTRIBUTION",
        "HVAC_EQUIPMENT",
        "LIGHTING_EQUIPMENT",
        "METER",
        "MOTOR",
        "PV_PANEL",
        "RELAY",
        "SAFETY_EQUIPMENT",
        "SECURITY_EQUIPMENT",
        "SHADING_EQUIPMENT",
        "SOLAR_THERMAL_COLLECTOR",
        "STEAM_DISTRIBUTION",
        "VALVE",
        "WATER_DISTRIBUTION",
        "WATER_HEATER",
        "WEATHER_STATION",
        "OCCUPANCY_SENSING_DEVICE",
        "BACNET_DEVICE",
        "LIGHTING_CONTROLLER",
        "CONTROLLER",
        "DEVICE",
    ]


def _default_point_roots() -> List[str]:
    return [
        "ALARM",
        "COMMAND",
        "SENSOR",
        "PARAMETER",
        "SETPOINT",
        "STATUS",
        "POINT",
    ]


def _default_object_types() -> Dict[int, str]:
    return {
        0: "analog_input",
        1: "analog_output",
        2: "analog_value",
        3: "binary_input",
        4: "binary_output",
        5: "binary_value",
        6: "calendar",
        7: "command",
        8: "device",
        9: "event_enrollment",
        10: "file",
        11: "group",
        12: "loop",
        13: "multi-state_input",
        14: "multi-state_output",
        15: "notification_class",
        16: "program",
        17: "schedule",
        18: "averaging",
        19: "multi-state_value",
        20: "trend_log",
        21: "life_safety_point",
        22: "life_safety_zone",
        23: "accumulator",
        24: "pulse_converter",
    }


class Taxonomy(BaseModel):
    """Static classification tables for one deployment."""
    equipment_roots: List[str] = Field(default_factory=_default_equipment_roots,
                                       description="Equipment root categories, checked in order")
    point_roots: List[str] = Field(default_factory=_default_point_roots,
                                   description="Point root categories, checked in order")
    object_types: Dict[int, str] = Field(default_factory=_default_object_types,
                                         description="BACnet object type code to name")
    uncategorized_point_type: str = Field("Point", description="Generic leaf type of pending points")
    no_unit_id: str = Field("NO_UNIT", description="Unit id meaning the point has no unit")
    equipment_key_marker: str = "@MAPPED_UG/"
    point_key_marker: str = "MAPPED_UG"

    @classmethod
    def default(cls) -> "Taxonomy":
        return cls()

    @classmethod
    def from_file(cls, file_path: Path) -> "Taxonomy":
        """
        Load a taxonomy override; keys missing from the file keep their defaults.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file is not valid JSON or fails validation
        """
        logger.info(f"Loading taxonomy from: {file_path}")

        if not file_path.exists():
            raise FileNotFoundError(f"Taxonomy file not found: {file_path}")

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in taxonomy file: {e}")

        return cls.model_validate(data)
