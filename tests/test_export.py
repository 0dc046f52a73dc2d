"""
Tests for the export stage.
"""
import pytest
from unittest.mock import patch
import sys
import os
import json

# Add src to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from photogps.export import ExportStage
from photogps.exceptions import ExportError
from photogps.models import LocationRecord


@pytest.fixture
def records():
    return [
        LocationRecord(40.00001, -74.00001, altitude=-10.0, timestamp=100, source_path="a.jpg"),
        LocationRecord(40.00002, -74.00002, altitude=None, timestamp=200, source_path="b.jpg"),
        LocationRecord(41.0, -75.0, altitude=3.0, timestamp=300, source_path="c.jpg"),
    ]


class TestExportStage:
    def test_writes_all_outputs(self, records, tmp_path):
        outputs = ExportStage(tmp_path / "out").run(records)

        assert [p.name for p in outputs] == ["data.xlsx", "data.csv", "data.geojson"]
        assert all(p.exists() for p in outputs)

    def test_tabular_keeps_every_record_exactly(self, records, tmp_path):
        ExportStage(tmp_path).run(records)

        lines = (tmp_path / "data.csv").read_text(encoding="utf-8").splitlines()
        assert len(lines) == 4
        assert lines[1].startswith("40.00001,-74.00001,")

    def test_geojson_is_deduplicated(self, records, tmp_path):
        stage = ExportStage(tmp_path)
        stage.run(records)

        collection = json.loads((tmp_path / "data.geojson").read_text(encoding="utf-8"))
        coordinates = [f["geometry"]["coordinates"] for f in collection["features"]]
        assert coordinates == [[-74.0, 40.0, -10.0], [-75.0, 41.0, 3.0]]
        assert len(stage.geo_records) == 2

    def test_geo_precision_setting(self, records, tmp_path):
        stage = ExportStage(tmp_path, {"geo_precision": 6})
        stage.run(records)
        assert len(stage.geo_records) == 3

    def test_reprojection_setting_only_moves_geojson(self, tmp_path):
        beijing = [LocationRecord(39.9, 116.4, timestamp=1, source_path="a.jpg")]

        ExportStage(tmp_path, {"reproject_gcj02": True}).run(beijing)

        feature = json.loads((tmp_path / "data.geojson").read_text(encoding="utf-8"))["features"][0]
        lon, lat = feature["geometry"]["coordinates"]
        assert (lat, lon) != (39.9, 116.4)
        assert (tmp_path / "data.csv").read_text(encoding="utf-8").splitlines()[1].startswith("39.9,116.4,")

    def test_disabled_writers_are_skipped(self, records, tmp_path):
        outputs = ExportStage(tmp_path, {"export_excel": False, "export_csv": False}).run(records)

        assert [p.name for p in outputs] == ["data.geojson"]
        assert not (tmp_path / "data.xlsx").exists()

    def test_writer_failure_is_fatal(self, records, tmp_path):
        with patch("photogps.export.CsvExporter") as mock_csv:
            mock_csv.return_value.save.side_effect = OSError("disk full")

            with pytest.raises(ExportError) as excinfo:
                ExportStage(tmp_path).run(records)

        assert "disk full" in str(excinfo.value)
        assert excinfo.value.path == tmp_path / "data.csv"

    def test_unusable_output_dir_is_fatal(self, records, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        with pytest.raises(ExportError):
            ExportStage(blocker / "out").run(records)
