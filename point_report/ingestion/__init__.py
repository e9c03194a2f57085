"""
Ingestion Module

Loads the equipment/point graph (snapshot file or GraphQL API), decodes
address keys and indexes the side-channel enrichment data.
"""

from .address_codec import AddressKeyCodec, EquipmentAddress
from .enrichment import EnrichmentIndex, read_confidence_file, read_unit_corrections_file
from .graph_source import OntologyClient, load_snapshot, resolve_auth_header
from .models import Equipment, Graph, Point

__all__ = [
    "AddressKeyCodec",
    "EquipmentAddress",
    "EnrichmentIndex",
    "read_confidence_file",
    "read_unit_corrections_file",
    "OntologyClient",
    "load_snapshot",
    "resolve_auth_header",
    "Equipment",
    "Graph",
    "Point",
]
