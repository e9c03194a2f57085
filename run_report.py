#!/usr/bin/env python3
"""
Point Report - Main Script

Builds the point classification report for a building:
1. Load confidence and unit correction side files
2. Load the graph from a snapshot file or the GraphQL API
3. Classify equipment and points
4. Write report.<ts>.csv (classified) and report.<ts>.pending.csv

Usage:
    python run_report.py --file snapshot.json --confidenceFile confidence.csv
    python run_report.py --pat <token> --orgId <org> --buildingId <building>
    python run_report.py --file snapshot.json --things
"""

import argparse
import logging
import os
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from point_report.dispatcher.partitioner import StreamType
from point_report.dispatcher.serializer import StreamWriter
from point_report.ingestion.enrichment import (
    EnrichmentIndex,
    read_confidence_file,
    read_unit_corrections_file,
)
from point_report.ingestion.graph_source import (
    DEFAULT_API_URL,
    OntologyClient,
    load_snapshot,
    resolve_auth_header,
)
from point_report.ingestion.models import Graph
from point_report.ontology.hierarchy import StaticTypeHierarchy
from point_report.ontology.taxonomy import Taxonomy
from point_report.pipeline import ReportPipeline
from point_report.report.columns import get_columns

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

JWT_FILE = Path("./jwt.txt")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Equipment and point classification report")
    parser.add_argument("--file", dest="file", help="Graph snapshot JSON file")
    parser.add_argument("--orgId", dest="org_id")
    parser.add_argument("--buildingId", dest="building_id")
    parser.add_argument("--thingIds", dest="thing_ids", help="Comma separated thing ids")
    parser.add_argument("--pat", dest="pat", help="Personal access token")
    parser.add_argument("--jwt", dest="jwt")
    parser.add_argument("--confidenceFile", dest="confidence_file")
    parser.add_argument("--unitCorrectionsFile", dest="unit_corrections_file")
    parser.add_argument("--columns", dest="columns",
                        help="Column set: classified, basic or full (equipment with --things)")
    parser.add_argument("--taxonomyFile", dest="taxonomy_file")
    parser.add_argument("--hierarchyFile", dest="hierarchy_file")
    parser.add_argument("--outputDir", dest="output_dir")
    parser.add_argument("--things", dest="things", action="store_true",
                        help="Write one row per equipment instead of per point")
    return parser.parse_args(argv)


def setup_environment(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Merge command line flags with environment configuration.

    Flags take precedence over environment variables. A JWT is also read
    from ./jwt.txt when none is given otherwise.

    Returns:
        Dictionary with configuration values

    Raises:
        RuntimeError: If no input source is configured or the column set
            does not fit the report mode
    """
    load_dotenv()

    jwt = args.jwt or os.getenv('MAPPED_JWT')
    if not jwt and JWT_FILE.exists():
        jwt = JWT_FILE.read_text(encoding='utf-8').strip()

    config = {
        'file': args.file or os.getenv('REPORT_SNAPSHOT_FILE'),
        'org_id': args.org_id or os.getenv('MAPPED_ORG_ID'),
        'building_id': args.building_id or os.getenv('MAPPED_BUILDING_ID'),
        'thing_ids': [t.strip() for t in args.thing_ids.split(',') if t.strip()] if args.thing_ids else [],
        'pat': args.pat or os.getenv('MAPPED_PAT'),
        'jwt': jwt,
        'api_url': os.getenv('MAPPED_API_URL', DEFAULT_API_URL),
        'confidence_file': args.confidence_file,
        'unit_corrections_file': args.unit_corrections_file,
        'columns': args.columns or os.getenv('REPORT_COLUMNS', 'classified'),
        'taxonomy_file': args.taxonomy_file or os.getenv('REPORT_TAXONOMY_FILE'),
        'hierarchy_file': args.hierarchy_file or os.getenv('REPORT_HIERARCHY_FILE'),
        'output_dir': Path(args.output_dir or os.getenv('REPORT_OUTPUT_DIR', './data')),
        'things': args.things,
    }

    if not config['file']:
        if not (config['pat'] or config['jwt']):
            raise RuntimeError("Must specify either --file or --pat or --jwt")
        if not config['building_id'] and not config['thing_ids']:
            raise RuntimeError("Must specify --buildingId or --thingIds")

    if config['columns'] == 'equipment' and not config['things']:
        raise RuntimeError("Column set 'equipment' is only valid with --things")

    return config


def load_graph(config: Dict[str, Any]) -> Graph:
    """Load the graph from the snapshot file or the GraphQL API."""
    if config['file']:
        return load_snapshot(Path(config['file']))

    logger.info("Using PAT" if config['pat'] else "Using JWT")
    client = OntologyClient(
        auth_header=resolve_auth_header(pat=config['pat'], jwt=config['jwt']),
        org_id=config['org_id'],
        api_url=config['api_url']
    )
    if config['thing_ids']:
        return client.fetch_things(config['thing_ids'])
    return client.fetch_building(config['building_id'])


def load_enrichment(config: Dict[str, Any]) -> EnrichmentIndex:
    confidence_rows = (read_confidence_file(Path(config['confidence_file']))
                       if config['confidence_file'] else [])
    unit_rows = (read_unit_corrections_file(Path(config['unit_corrections_file']))
                 if config['unit_corrections_file'] else [])
    return EnrichmentIndex.build(confidence_rows, unit_rows)


def print_separator(title: str = "") -> None:
    """Print a formatted separator line."""
    if title:
        print(f"\n{'='*70}")
        print(f"  {title}")
        print(f"{'='*70}\n")
    else:
        print(f"{'='*70}")


def main(argv: Optional[List[str]] = None) -> int:
    """Run the report."""
    try:
        config = setup_environment(parse_args(argv))

        taxonomy = (Taxonomy.from_file(Path(config['taxonomy_file']))
                    if config['taxonomy_file'] else Taxonomy.default())
        hierarchy = (StaticTypeHierarchy.from_file(Path(config['hierarchy_file']))
                     if config['hierarchy_file'] else StaticTypeHierarchy.default())
        pipeline = ReportPipeline(taxonomy, hierarchy)

        enrichment = load_enrichment(config)
        graph = load_graph(config)

        output_dir: Path = config['output_dir']
        output_dir.mkdir(parents=True, exist_ok=True)
        timestamp = int(time.time() * 1000)

        if config['things']:
            out_file = output_dir / f"thing-report.{timestamp}.csv"
            with open(out_file, 'w', encoding='utf-8', newline='') as out:
                writer = StreamWriter({StreamType.CLASSIFIED: out}, get_columns('equipment'))
                summary = pipeline.run_equipment(graph, writer)
            logger.info(f"Wrote {out_file}")
        else:
            classified_file = output_dir / f"report.{timestamp}.csv"
            pending_file = output_dir / f"report.{timestamp}.pending.csv"
            with open(classified_file, 'w', encoding='utf-8', newline='') as classified, \
                    open(pending_file, 'w', encoding='utf-8', newline='') as pending:
                writer = StreamWriter(
                    {StreamType.CLASSIFIED: classified, StreamType.UNCLASSIFIED: pending},
                    get_columns(config['columns'])
                )
                summary = pipeline.run(graph, writer, enrichment)
            logger.info(f"Wrote {classified_file} and {pending_file}")

        print_separator("Report Summary")
        print(summary.model_dump_json(indent=2))
        return 0

    except Exception as e:
        logger.error(f"Report failed: {e}", exc_info=True)
        return 1


if __name__ == '__main__':
    sys.exit(main())
