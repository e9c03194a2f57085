"""
Report Pipeline

Runs the record transformation over a materialized graph:

1. Decode each equipment's address key
2. Resolve the equipment category
3. For every point: merge enrichment, resolve the point category, build the row
4. Route the row to the classified or pending stream
"""

import logging
from typing import Optional

from .dispatcher.partitioner import Partitioner, StreamType
from .dispatcher.serializer import StreamWriter
from .ingestion.address_codec import AddressKeyCodec
from .ingestion.enrichment import EnrichmentIndex
from .ingestion.models import Graph
from .ontology.hierarchy import TypeHierarchy
from .ontology.resolver import TypeCategoryResolver
from .ontology.taxonomy import Taxonomy
from .report.builder import RecordBuilder
from .report.summary import RunSummary

logger = logging.getLogger(__name__)


class ReportPipeline:
    """
    Classifies the points of a graph and writes the report rows.
    """

    def __init__(self, taxonomy: Taxonomy, hierarchy: TypeHierarchy):
        """
        Initialize the pipeline components from the taxonomy.

        Args:
            taxonomy: Root categories, object types and markers
            hierarchy: Type ancestor lookup
        """
        self.taxonomy = taxonomy
        self.codec = AddressKeyCodec(
            object_types=taxonomy.object_types,
            equipment_marker=taxonomy.equipment_key_marker,
            point_marker=taxonomy.point_key_marker
        )
        self.resolver = TypeCategoryResolver(hierarchy)
        self.builder = RecordBuilder(self.codec, no_unit_id=taxonomy.no_unit_id)
        self.partitioner = Partitioner(taxonomy.uncategorized_point_type)
        logger.info("ReportPipeline initialized")

    def run(
        self,
        graph: Graph,
        writer: StreamWriter,
        enrichment: Optional[EnrichmentIndex] = None
    ) -> RunSummary:
        """
        Write one row per (equipment, point) pair.

        Args:
            graph: Input graph
            writer: Writer with classified and unclassified streams
            enrichment: Confidence and unit correction data

        Returns:
            RunSummary with counts per category and stream
        """
        enrichment = enrichment or EnrichmentIndex()
        summary = RunSummary()
        summary.things.skipped = graph.skipped
        summary.points.skipped = graph.skipped_points

        logger.info(f"Found {len(graph.things)} things")

        for thing in graph.things:
            address = self.codec.decode_equipment_key(thing.mapping_key)
            equipment_category = self.resolver.resolve(thing.exact_type, self.taxonomy.equipment_roots)
            summary.count_thing(equipment_category)

            for point in thing.points or []:
                unused = enrichment.is_unused(point.id) or bool(point.unused)

                point_category = None
                if not unused:
                    point_category = self.resolver.resolve(point.exact_type, self.taxonomy.point_roots)
                summary.count_point(unused, point_category)

                record = self.builder.build(
                    thing,
                    point,
                    address=address,
                    equipment_category=equipment_category,
                    point_category=point_category,
                    confidence=enrichment.confidence(point.id),
                    unit_correction=enrichment.unit_correction(point.id),
                    unused=unused
                )
                writer.write(self.partitioner.classify(record), record)

        summary.rows_written = writer.counts()
        logger.info(f"Report complete: {summary.points.total} points, "
                    f"{summary.points.used} used, {summary.points.unused} unused")
        return summary

    def run_equipment(self, graph: Graph, writer: StreamWriter) -> RunSummary:
        """
        Write one row per equipment to the classified stream.

        Args:
            graph: Input graph
            writer: Writer with a classified stream

        Returns:
            RunSummary with equipment counts
        """
        summary = RunSummary()
        summary.things.skipped = graph.skipped

        logger.info(f"Found {len(graph.things)} things")

        for thing in graph.things:
            address = self.codec.decode_equipment_key(thing.mapping_key)
            category = self.resolver.resolve(thing.exact_type, self.taxonomy.equipment_roots)
            summary.count_thing(category)
            writer.write(StreamType.CLASSIFIED, self.builder.build_equipment(thing, address, category))

        summary.rows_written = writer.counts()
        return summary
