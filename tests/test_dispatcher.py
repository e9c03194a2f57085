"""
Test Dispatcher

Tests for partitioning rows into streams and serializing them.
"""

import csv
import io

from point_report.dispatcher.partitioner import Partitioner, StreamType
from point_report.dispatcher.serializer import StreamWriter, format_header, format_row, quote_field
from point_report.report.columns import CLASSIFIED_COLUMNS


class TestPartitioner:
    """Test stream routing."""

    def test_classified(self):
        partitioner = Partitioner()
        record = {"pointType": "Zone_Air_Temperature_Sensor", "pointUnused": "false"}

        assert partitioner.classify(record) == StreamType.CLASSIFIED

    def test_unused_point_is_unclassified(self):
        """Test an unused point is pending whatever its type or category."""
        partitioner = Partitioner()
        record = {
            "pointType": "Zone_Air_Temperature_Sensor",
            "pointCategory": "SENSOR",
            "pointUnused": "true",
        }

        assert partitioner.classify(record) == StreamType.UNCLASSIFIED

    def test_generic_point_type_is_unclassified(self):
        partitioner = Partitioner()
        assert partitioner.classify({"pointType": "Point", "pointUnused": "false"}) == StreamType.UNCLASSIFIED

    def test_custom_uncategorized_type(self):
        partitioner = Partitioner(uncategorized_type="Unknown_Point")

        assert partitioner.classify({"pointType": "Point"}) == StreamType.CLASSIFIED
        assert partitioner.classify({"pointType": "Unknown_Point"}) == StreamType.UNCLASSIFIED


class TestSerializer:
    """Test CSV rendering."""

    def test_quote_field_doubles_quotes(self):
        assert quote_field('He said "hi"') == '"He said ""hi"""'

    def test_missing_values_render_empty(self):
        assert quote_field(None) == '""'
        assert format_row({"a": "x", "b": None}, ["a", "b", "c"]) == '"x","",""'

    def test_row_follows_column_order(self):
        record = {"b": "2", "a": "1", "extra": "ignored"}
        assert format_row(record, ["a", "b"]) == '"1","2"'

    def test_row_column_count(self):
        """Test commas and quotes inside values don't change the field count."""
        record = {column: f'{column}, "quoted"' for column in CLASSIFIED_COLUMNS}

        line = format_row(record, CLASSIFIED_COLUMNS)
        parsed = next(csv.reader([line]))

        assert len(parsed) == len(CLASSIFIED_COLUMNS)
        assert parsed[0] == 'mappedPointId, "quoted"'

    def test_header(self):
        assert format_header(["mappedPointId", "ip"]) == "mappedPointId,ip"


class TestStreamWriter:
    """Test writing to the two streams."""

    def test_header_written_once_per_stream(self):
        classified, pending = io.StringIO(), io.StringIO()
        writer = StreamWriter(
            {StreamType.CLASSIFIED: classified, StreamType.UNCLASSIFIED: pending},
            ["mappedPointId", "pointType"]
        )

        writer.write(StreamType.CLASSIFIED, {"mappedPointId": "p1", "pointType": "Sensor"})
        writer.write(StreamType.CLASSIFIED, {"mappedPointId": "p2", "pointType": "Alarm"})
        writer.write(StreamType.UNCLASSIFIED, {"mappedPointId": "p3", "pointType": "Point"})

        assert classified.getvalue() == (
            "mappedPointId,pointType\n"
            '"p1","Sensor"\n'
            '"p2","Alarm"\n'
        )
        assert pending.getvalue() == (
            "mappedPointId,pointType\n"
            '"p3","Point"\n'
        )
        assert writer.counts() == {"classified": 2, "unclassified": 1}

    def test_empty_streams_still_have_header(self):
        out = io.StringIO()
        StreamWriter({StreamType.CLASSIFIED: out}, ["a", "b"])
        assert out.getvalue() == "a,b\n"
