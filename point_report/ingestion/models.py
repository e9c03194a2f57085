"""
Graph Models

Pydantic models for the equipment ("thing") and point graph returned by the
ontology service. Field aliases follow the service's camelCase JSON so a
snapshot file or a GraphQL response can be validated as-is.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class GraphModel(BaseModel):
    """Base model accepting both the camelCase aliases and field names."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Location(GraphModel):
    """Space an equipment is located in."""
    name: Optional[str] = None


class EquipmentRef(GraphModel):
    """Reference to a parent equipment."""
    id: Optional[str] = None
    name: Optional[str] = None


class Manufacturer(GraphModel):
    name: Optional[str] = None
    description: Optional[str] = None


class EquipmentModel(GraphModel):
    name: Optional[str] = None
    description: Optional[str] = None
    manufacturer: Optional[Manufacturer] = None


class Unit(GraphModel):
    id: Optional[str] = None
    name: Optional[str] = None


class Point(GraphModel):
    """A telemetry point owned by one equipment."""
    id: str = Field(..., description="Unique point identifier")
    exact_type: Optional[str] = Field(None, alias="exactType", description="Taxonomy leaf type")
    name: Optional[str] = None
    description: Optional[str] = None
    mapping_key: Optional[str] = Field(None, alias="mappingKey", description="Opaque address key")
    state_texts: Optional[List[str]] = Field(None, alias="stateTexts")
    unit: Optional[Unit] = None
    date_created: Optional[str] = Field(None, alias="dateCreated")
    date_updated: Optional[str] = Field(None, alias="dateUpdated")
    value_map: Optional[Any] = Field(None, alias="valueMap")
    unused: Optional[bool] = None


class Equipment(GraphModel):
    """A physical asset and the points it owns."""
    id: str = Field(..., description="Unique equipment identifier")
    exact_type: Optional[str] = Field(None, alias="exactType", description="Taxonomy leaf type")
    name: Optional[str] = None
    description: Optional[str] = None
    firmware_version: Optional[str] = Field(None, alias="firmwareVersion")
    mapping_key: Optional[str] = Field(None, alias="mappingKey", description="Opaque address key")
    date_created: Optional[str] = Field(None, alias="dateCreated")
    date_updated: Optional[str] = Field(None, alias="dateUpdated")
    has_location: Optional[Location] = Field(None, alias="hasLocation")
    is_part_of: Optional[List[EquipmentRef]] = Field(None, alias="isPartOf")
    model: Optional[EquipmentModel] = None
    points: Optional[List[Point]] = None


def _validate_points(thing_id: Any, raw_points: List[Any]) -> Tuple[List[Point], int]:
    """Validate points one at a time, dropping the invalid ones."""
    points: List[Point] = []
    skipped = 0
    for idx, raw in enumerate(raw_points):
        try:
            points.append(Point.model_validate(raw))
        except ValidationError as e:
            skipped += 1
            point_id = raw.get("id") if isinstance(raw, dict) else None
            logger.warning(f"Skipping invalid point #{idx} ({point_id}) of thing {thing_id}: "
                           f"{e.error_count()} validation error(s)")
    return points, skipped


class Graph(BaseModel):
    """The materialized input graph for one run."""
    things: List[Equipment] = Field(default_factory=list)
    skipped: int = Field(0, description="Equipment entries rejected during validation")
    skipped_points: int = Field(0, description="Point entries rejected during validation")

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Graph":
        """
        Build a graph from a snapshot or GraphQL payload.

        Accepts ``{"things": [...]}`` or ``{"buildings": [{"things": [...]}]}``,
        optionally wrapped in a ``{"data": ...}`` envelope. Entries that fail
        validation are skipped and counted: an invalid point drops only that
        point, an invalid equipment drops the equipment with all its points.

        Raises:
            ValueError: If the payload has no list of things
        """
        data = payload
        if isinstance(data, dict) and "data" in data and isinstance(data["data"], dict):
            data = data["data"]

        if isinstance(data, dict) and "buildings" in data:
            buildings = data.get("buildings") or []
            if not buildings:
                raise ValueError("Payload contains no buildings")
            data = buildings[0]

        if not isinstance(data, dict) or not isinstance(data.get("things"), list):
            raise ValueError("Payload does not contain a list of things")

        things: List[Equipment] = []
        skipped = 0
        skipped_points = 0
        for idx, raw in enumerate(data["things"]):
            thing_id = raw.get("id") if isinstance(raw, dict) else None
            bad_points = 0
            if isinstance(raw, dict) and isinstance(raw.get("points"), list):
                points, bad_points = _validate_points(thing_id, raw["points"])
                raw = {**raw, "points": points}

            try:
                things.append(Equipment.model_validate(raw))
            except ValidationError as e:
                skipped += 1
                logger.warning(f"Skipping invalid thing #{idx} ({thing_id}): "
                               f"{e.error_count()} validation error(s)")
                continue
            skipped_points += bad_points

        logger.info(f"Loaded graph with {len(things)} things ({skipped} skipped, "
                    f"{skipped_points} points skipped)")
        return cls(things=things, skipped=skipped, skipped_points=skipped_points)
