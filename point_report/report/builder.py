"""
Record Builder

Flattens one (equipment, point) pair, its decoded address, resolved categories
and enrichment data into a report row.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from ..ingestion.address_codec import AddressKeyCodec, EquipmentAddress
from ..ingestion.enrichment import (
    EMPTY_CONFIDENCE,
    EMPTY_UNIT_CORRECTION,
    ConfidenceEntry,
    UnitCorrection,
)
from ..ingestion.models import Equipment, Point
from .columns import EQUIPMENT_COLUMNS, FULL_COLUMNS

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60

# Characters encodeURIComponent leaves unescaped besides alphanumerics
URI_COMPONENT_SAFE = "-_.!~*'()"


def render_value(value: Any) -> str:
    """Render a field value as text; missing values become empty strings."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparseable timestamp: {value}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def days_between(start: Optional[str], end: Optional[str]) -> Optional[int]:
    """
    Whole days from start to end, truncated toward zero.

    Negative when end precedes start. None when either timestamp is missing.
    """
    start_at = parse_timestamp(start)
    end_at = parse_timestamp(end)
    if start_at is None or end_at is None:
        return None
    return int((end_at - start_at).total_seconds() / SECONDS_PER_DAY)


def _js_numbers(value: Any) -> Any:
    # JSON.stringify writes 1.0 as 1
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {key: _js_numbers(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_js_numbers(item) for item in value]
    return value


def encode_value_map(value_map: Any) -> str:
    """Compact JSON of a value map, percent-encoded like encodeURIComponent."""
    if value_map is None:
        return ""
    encoded = json.dumps(_js_numbers(value_map), separators=(",", ":"), ensure_ascii=False)
    return quote(encoded, safe=URI_COMPONENT_SAFE)


def render_part_of(equipment: Equipment) -> str:
    """Render the first parent equipment as "name (id)"; further parents are dropped."""
    if not equipment.is_part_of:
        return ""
    parent = equipment.is_part_of[0]
    return f"{render_value(parent.name)} ({render_value(parent.id)})"


class RecordBuilder:
    """
    Builds report rows.

    Point rows carry every column of FULL_COLUMNS and equipment rows every
    column of EQUIPMENT_COLUMNS, with an empty string for anything unknown.
    The serializer picks the columns of the active set from them.
    """

    def __init__(self, codec: AddressKeyCodec, no_unit_id: str = "NO_UNIT"):
        """
        Initialize the builder.

        Args:
            codec: Codec used to decode point object ids
            no_unit_id: Unit id that means the point has no unit
        """
        self.codec = codec
        self.no_unit_id = no_unit_id
        logger.info("RecordBuilder initialized")

    def build(
        self,
        equipment: Equipment,
        point: Point,
        address: Optional[EquipmentAddress] = None,
        equipment_category: Optional[str] = None,
        point_category: Optional[str] = None,
        confidence: ConfidenceEntry = EMPTY_CONFIDENCE,
        unit_correction: UnitCorrection = EMPTY_UNIT_CORRECTION,
        unused: bool = False
    ) -> Dict[str, str]:
        """
        Build the row for one point of an equipment.

        Args:
            equipment: Owning equipment
            point: The point
            address: Decoded equipment address, if any
            equipment_category: Resolved equipment root category
            point_category: Resolved point root category
            confidence: Confidence entry for the point
            unit_correction: Unit correction for the point
            unused: Whether the point is excluded from classification

        Returns:
            Row keyed by column name
        """
        fields = self._equipment_fields(equipment, address, equipment_category)

        unit_id = point.unit.id if point.unit else None
        fields.update({
            'mappedPointId': point.id,
            'objectId': self.codec.decode_object_id(point.mapping_key),
            'pointName': point.name,
            'pointDescription': point.description,
            'pointType': point.exact_type,
            'pointCategory': point_category,
            'pointUnit': unit_id if unit_id != self.no_unit_id else None,
            'pointOriginalUnit': unit_correction.previous_unit,
            'pointStateTexts': ",".join(point.state_texts) if point.state_texts is not None else None,
            'pointValueMap': encode_value_map(point.value_map),
            'pointConfidence': confidence.type_confidence,
            'pointConfidenceLevel': confidence.confidence_level,
            'pointUnused': unused,
            'pointDateCreated': point.date_created,
            'pointDateUpdated': point.date_updated,
            'pointDaysToClassify': days_between(equipment.date_updated, point.date_updated),
        })

        return self._project(fields, FULL_COLUMNS)

    def build_equipment(
        self,
        equipment: Equipment,
        address: Optional[EquipmentAddress] = None,
        category: Optional[str] = None
    ) -> Dict[str, str]:
        """Build the equipment-level row, including its point count."""
        fields = self._equipment_fields(equipment, address, category)
        fields['pointCount'] = len(equipment.points or [])
        return self._project(fields, EQUIPMENT_COLUMNS)

    def _equipment_fields(
        self,
        equipment: Equipment,
        address: Optional[EquipmentAddress],
        category: Optional[str]
    ) -> Dict[str, Any]:
        model = equipment.model
        manufacturer = model.manufacturer if model else None

        fields: Dict[str, Any] = {
            'mappedThingId': equipment.id,
            'equipmentName': equipment.name,
            'equipmentDescription': equipment.description,
            'equipmentType': equipment.exact_type,
            'equipmentCategory': category,
            'equipmentManufacturer': manufacturer.name if manufacturer else None,
            'equipmentModel': model.name if model else None,
            'equipmentFirmware': equipment.firmware_version,
            'equipmentLocation': equipment.has_location.name if equipment.has_location else None,
            'equipmentIsPartOf': render_part_of(equipment),
            'equipmentMappingKey': equipment.mapping_key,
            'equipmentDateCreated': equipment.date_created,
            'equipmentDateUpdated': equipment.date_updated,
        }

        # Address fields are only set when the key decoded
        if address:
            fields.update({
                'ip': address.ip,
                'network': address.network,
                'instanceId': address.instance_id,
            })

        return fields

    def _project(self, fields: Dict[str, Any], columns: List[str]) -> Dict[str, str]:
        return {column: render_value(fields.get(column)) for column in columns}
