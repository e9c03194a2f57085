"""
Address Key Codec

Decodes the BACnet network address and object reference embedded in the
opaque mapping keys of equipment and points.

Equipment key:
    msrc://CONYEjT9KGC7AAUkR4GisCkYD@MAPPED_UG/GWVK4aP7uRD5NRianS5PjHnt/10.135.40.6:48808/1220417
Point key:
    msrc://CONYEjT9KGC7AAUkR4GisCkYD@MAPPED_UG/GWVK4aP7uRD5NRianS5PjHnt/10.135.40.6:48808/1220417?object=3:11
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

logger = logging.getLogger(__name__)

# Segment positions after splitting a key on "/"
ADDRESS_SEGMENT = 4
INSTANCE_SEGMENT = 5


@dataclass(frozen=True)
class EquipmentAddress:
    """Network address of a BACnet device decoded from an equipment key."""
    ip: str
    network: str
    instance_id: str
    prefix: str = ""

    def to_key(self) -> str:
        """Re-encode the address onto the key prefix it was decoded from."""
        return f"{self.prefix}/{self.ip}:{self.network}/{self.instance_id}"


class AddressKeyCodec:
    """
    Parses equipment and point mapping keys.

    Keys without the configured marker carry no BACnet address; decoding them
    returns None rather than failing.
    """

    def __init__(
        self,
        object_types: Dict[int, str],
        equipment_marker: str = "@MAPPED_UG/",
        point_marker: str = "MAPPED_UG"
    ):
        """
        Initialize the codec.

        Args:
            object_types: BACnet object type code to name mapping
            equipment_marker: Substring identifying decodable equipment keys
            point_marker: Substring identifying decodable point keys
        """
        self.object_types = object_types
        self.equipment_marker = equipment_marker
        self.point_marker = point_marker

    def decode_equipment_key(self, key: Optional[str]) -> Optional[EquipmentAddress]:
        """
        Decode ip, network (port) and device instance from an equipment key.

        Returns:
            EquipmentAddress, or None if the key carries no address
        """
        if not key or self.equipment_marker not in key:
            return None

        parts = key.split("/")
        if len(parts) <= INSTANCE_SEGMENT or ":" not in parts[ADDRESS_SEGMENT]:
            logger.warning(f"Malformed equipment mapping key: {key}")
            return None

        ip, network = parts[ADDRESS_SEGMENT].split(":", 1)
        return EquipmentAddress(
            ip=ip,
            network=network,
            instance_id=parts[INSTANCE_SEGMENT],
            prefix="/".join(parts[:ADDRESS_SEGMENT])
        )

    def decode_point_key(self, key: Optional[str]) -> Optional[str]:
        """
        Extract the raw object reference (e.g. "3:11") from a point key.

        Returns:
            The "<type>:<index>" reference, or None if absent or malformed
        """
        if not key or self.point_marker not in key:
            return None

        parts = key.split("/")
        try:
            _, object_ref = parts[INSTANCE_SEGMENT].split("=", 1)
        except (IndexError, ValueError):
            logger.debug(f"No object reference in point mapping key: {key}")
            return None

        return object_ref or None

    def render_object_id(self, object_ref: Optional[str]) -> Optional[str]:
        """
        Render a "<type>:<index>" reference as "<type name>/<index>".

        Unknown or non-numeric type codes render as "other".
        """
        if not object_ref or ":" not in object_ref:
            return None

        type_code, index = object_ref.split(":", 1)
        try:
            type_name = self.object_types.get(int(type_code), "other")
        except ValueError:
            type_name = "other"

        return f"{type_name}/{index}"

    def decode_object_id(self, key: Optional[str]) -> Optional[str]:
        """Decode and render the object id of a point key in one step."""
        return self.render_object_id(self.decode_point_key(key))
