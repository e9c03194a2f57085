"""
Graph Source

Materializes the equipment/point graph either from a cached JSON snapshot or
by querying the ontology service's GraphQL API.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from .models import Graph

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.mapped.com/graphql"

THING_FIELDS = """
        id
        exactType
        name
        description
        firmwareVersion
        mappingKey
        dateCreated
        dateUpdated
        hasLocation {
          name
        }
        isPartOf {
          id
          name
        }
        model {
          name
          description
          manufacturer {
            name
            description
          }
        }
        points {
          id
          name
          description
          exactType
          stateTexts
          valueMap
          mappingKey
          dateCreated
          dateUpdated
          unused
          unit {
            id
            name
          }
        }
"""

POINTS_QUERY = """
  query getPoints($buildingId: String!) {
    buildings(filter: { id: { eq: $buildingId } }) {
      things {%s}
    }
  }
""" % THING_FIELDS

THING_POINTS_QUERY = """
  query getThingPoints($thingIds: [String]!) {
    things(filter: { id: { in: $thingIds } }) {%s}
  }
""" % THING_FIELDS


def load_snapshot(file_path: Path) -> Graph:
    """
    Load the graph from a cached JSON snapshot.

    Args:
        file_path: Path to the snapshot file

    Returns:
        Graph

    Raises:
        FileNotFoundError: If the snapshot file doesn't exist
        ValueError: If the file is not valid JSON or has no things
    """
    logger.info(f"Reading file: {file_path}")

    if not file_path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {file_path}")

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in snapshot file: {e}")

    return Graph.from_payload(payload)


def resolve_auth_header(pat: Optional[str] = None, jwt: Optional[str] = None) -> str:
    """
    Build the Authorization header value; a PAT takes precedence over a JWT.

    Raises:
        RuntimeError: If neither credential is given
    """
    if pat:
        return f"token {pat}"
    if jwt:
        return f"Bearer {jwt.strip()}"
    raise RuntimeError("JWT or PAT is required")


class OntologyClient:
    """
    GraphQL client for the ontology service.
    """

    def __init__(
        self,
        auth_header: str,
        org_id: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 300
    ):
        """
        Initialize the client.

        Args:
            auth_header: Authorization header value (see resolve_auth_header)
            org_id: Organization id sent as X-Mapped-Org-Id
            api_url: GraphQL endpoint
            timeout: Request timeout in seconds
        """
        self.api_url = api_url
        self.timeout = timeout
        self.headers = {"Authorization": auth_header}
        if org_id:
            self.headers["X-Mapped-Org-Id"] = org_id
        logger.info(f"OntologyClient initialized with API URL: {api_url}")

    def request(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        """
        Execute a GraphQL query and return its data.

        Raises:
            requests.RequestException: If the HTTP call fails
            RuntimeError: If the response carries GraphQL errors
        """
        logger.info("Making graphql query")

        response = requests.post(
            self.api_url,
            json={"query": query, "variables": variables},
            headers=self.headers,
            timeout=self.timeout
        )
        response.raise_for_status()

        body = response.json()
        if body.get("errors"):
            messages = "; ".join(err.get("message", str(err)) for err in body["errors"])
            raise RuntimeError(f"GraphQL query failed: {messages}")

        return body.get("data") or {}

    def fetch_building(self, building_id: str) -> Graph:
        """Fetch every thing of a building with its points."""
        data = self.request(POINTS_QUERY, {"buildingId": building_id})
        return Graph.from_payload(data)

    def fetch_things(self, thing_ids: List[str]) -> Graph:
        """Fetch specific things with their points."""
        data = self.request(THING_POINTS_QUERY, {"thingIds": thing_ids})
        return Graph.from_payload(data)
