"""
Test Graph Source

Tests for snapshot loading, graph validation and the GraphQL client.
"""

import json
from unittest.mock import Mock, patch

import pytest
import requests

from point_report.ingestion.graph_source import (
    POINTS_QUERY,
    THING_POINTS_QUERY,
    OntologyClient,
    load_snapshot,
    resolve_auth_header,
)
from point_report.ingestion.models import Graph

THINGS = [
    {
        "id": "thing-1",
        "exactType": "Air_Handling_Unit",
        "name": "AHU-1",
        "points": [{"id": "point-1", "exactType": "Point"}],
    },
    {
        "id": "thing-2",
        "exactType": "Fan",
        "name": "EF-1",
        "points": [],
    },
]


class TestGraphPayload:
    """Test accepted payload shapes."""

    def test_things_payload(self):
        graph = Graph.from_payload({"things": THINGS})

        assert len(graph.things) == 2
        assert graph.things[0].exact_type == "Air_Handling_Unit"
        assert graph.things[0].points[0].id == "point-1"

    def test_building_payload_in_data_envelope(self):
        graph = Graph.from_payload({"data": {"buildings": [{"things": THINGS}]}})
        assert [t.id for t in graph.things] == ["thing-1", "thing-2"]

    def test_invalid_thing_is_skipped(self):
        """Test an entry failing validation is dropped and counted."""
        graph = Graph.from_payload({"things": THINGS + [{"name": "no id"}, "garbage"]})

        assert len(graph.things) == 2
        assert graph.skipped == 2

    def test_invalid_point_drops_only_that_point(self):
        """Test a bad point is skipped while its equipment and siblings are kept."""
        graph = Graph.from_payload({"things": [{
            "id": "thing-1",
            "exactType": "Air_Handling_Unit",
            "points": [
                {"id": "p1", "exactType": "Temperature_Sensor"},
                {"id": "p2", "stateTexts": ["Off", None]},
                {"name": "no id"},
            ],
        }]})

        assert [t.id for t in graph.things] == ["thing-1"]
        assert [p.id for p in graph.things[0].points] == ["p1"]
        assert graph.skipped == 0
        assert graph.skipped_points == 2

    def test_points_of_invalid_thing_not_counted(self):
        graph = Graph.from_payload({"things": [{
            "name": "no id",
            "points": [{"id": "p1"}, {"name": "no id"}],
        }]})

        assert graph.things == []
        assert graph.skipped == 1
        assert graph.skipped_points == 0

    def test_missing_things_is_fatal(self):
        with pytest.raises(ValueError):
            Graph.from_payload({"data": {"sites": []}})
        with pytest.raises(ValueError):
            Graph.from_payload({"buildings": []})


class TestLoadSnapshot:
    """Test loading a cached snapshot file."""

    def test_load_snapshot(self, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps({"data": {"things": THINGS}}))

        graph = load_snapshot(path)

        assert len(graph.things) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_snapshot(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text("{broken")
        with pytest.raises(ValueError):
            load_snapshot(path)


class TestResolveAuthHeader:
    """Test credential to header mapping."""

    def test_pat(self):
        assert resolve_auth_header(pat="abc") == "token abc"

    def test_jwt(self):
        assert resolve_auth_header(jwt="eyJ.x.y\n") == "Bearer eyJ.x.y"

    def test_pat_preferred(self):
        assert resolve_auth_header(pat="abc", jwt="eyJ") == "token abc"

    def test_missing_credentials(self):
        with pytest.raises(RuntimeError):
            resolve_auth_header()


class TestOntologyClient:
    """Test the GraphQL client with a mocked HTTP layer."""

    @patch('point_report.ingestion.graph_source.requests.post')
    def test_fetch_building(self, mock_post):
        mock_response = Mock()
        mock_response.json.return_value = {"data": {"buildings": [{"things": THINGS}]}}
        mock_response.raise_for_status = Mock()
        mock_post.return_value = mock_response

        client = OntologyClient(auth_header="token abc", org_id="org-1",
                                api_url="https://example.test/graphql")
        graph = client.fetch_building("building-1")

        assert len(graph.things) == 2

        args, kwargs = mock_post.call_args
        assert args[0] == "https://example.test/graphql"
        assert kwargs["json"] == {"query": POINTS_QUERY, "variables": {"buildingId": "building-1"}}
        assert kwargs["headers"] == {"Authorization": "token abc", "X-Mapped-Org-Id": "org-1"}

    @patch('point_report.ingestion.graph_source.requests.post')
    def test_fetch_things(self, mock_post):
        mock_response = Mock()
        mock_response.json.return_value = {"data": {"things": THINGS[:1]}}
        mock_response.raise_for_status = Mock()
        mock_post.return_value = mock_response

        client = OntologyClient(auth_header="Bearer jwt")
        graph = client.fetch_things(["thing-1"])

        assert [t.id for t in graph.things] == ["thing-1"]
        _, kwargs = mock_post.call_args
        assert kwargs["json"]["query"] == THING_POINTS_QUERY
        assert kwargs["json"]["variables"] == {"thingIds": ["thing-1"]}
        assert "X-Mapped-Org-Id" not in kwargs["headers"]

    @patch('point_report.ingestion.graph_source.requests.post')
    def test_graphql_errors_raise(self, mock_post):
        mock_response = Mock()
        mock_response.json.return_value = {"errors": [{"message": "Unauthorized"}], "data": None}
        mock_response.raise_for_status = Mock()
        mock_post.return_value = mock_response

        client = OntologyClient(auth_header="token bad")

        with pytest.raises(RuntimeError, match="Unauthorized"):
            client.fetch_building("building-1")

    @patch('point_report.ingestion.graph_source.requests.post')
    def test_http_errors_propagate(self, mock_post):
        mock_response = Mock()
        mock_response.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
        mock_post.return_value = mock_response

        client = OntologyClient(auth_header="token abc")

        with pytest.raises(requests.HTTPError):
            client.fetch_building("building-1")
