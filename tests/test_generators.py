import pytest
import sys
import os
import io
import json

import geojson
import openpyxl

# Add src to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from photogps.generators import CsvExporter, ExcelExporter, GeoJsonExporter
from photogps.models import LocationRecord


@pytest.fixture
def records():
    return [
        LocationRecord(40.0, -74.0, altitude=-10.0, timestamp=1682935200, source_path="/photos/a.jpg"),
        LocationRecord(40.5, -73.5, altitude=None, timestamp=None, source_path="/photos/b.jpg"),
    ]


class TestExcelExporter:
    def test_header_row_is_bold_and_shaded(self, records):
        ws = ExcelExporter().build_workbook(records).active

        assert ws.title == "Data"
        assert [c.value for c in ws[1]] == ["Latitude", "Longitude", "Altitude", "Timestamp"]
        for cell in ws[1]:
            assert cell.font.bold is True
            assert cell.fill.fill_type == "solid"
            assert cell.fill.fgColor.rgb.endswith("D3D3D3")

    def test_rows_with_empty_optional_fields(self, records):
        ws = ExcelExporter().build_workbook(records).active

        assert [c.value for c in ws[2]] == [40.0, -74.0, -10.0, 1682935200]
        assert ws["A3"].value == 40.5
        assert ws["C3"].value in ("", None)
        assert ws["D3"].value in ("", None)

    def test_file_info_columns(self, records):
        ws = ExcelExporter(include_file_info=True).build_workbook(records).active

        assert ws["E1"].value == "FileName"
        assert ws["F1"].value == "FilePath"
        assert ws["E2"].value == "a.jpg"
        assert ws["F2"].value == "/photos/a.jpg"

    def test_formula_like_text_is_stored_as_text(self):
        record = LocationRecord(1.0, 2.0, source_path="=HYPERLINK(\"x\").jpg")

        ws = ExcelExporter(include_file_info=True).build_workbook([record]).active
        assert ws["E2"].data_type == "s"
        assert ws["F2"].data_type == "s"

        reloaded = openpyxl.load_workbook(io.BytesIO(ExcelExporter(include_file_info=True).render([record]))).active
        assert reloaded["E2"].value == "=HYPERLINK(\"x\").jpg"
        assert reloaded["E2"].data_type == "s"

    def test_columns_are_sized_to_content(self, records):
        ws = ExcelExporter(include_file_info=True).build_workbook(records).active

        assert ws.column_dimensions["D"].width >= len("1682935200")
        assert ws.column_dimensions["F"].width >= len("/photos/a.jpg")

    def test_render_produces_a_workbook(self, records):
        data = ExcelExporter().render(records)

        ws = openpyxl.load_workbook(io.BytesIO(data)).active
        assert ws.max_row == 3

    def test_save_writes_file(self, records, tmp_path):
        target = ExcelExporter().save(records, tmp_path / "data.xlsx")
        assert target.exists()


class TestCsvExporter:
    def test_header_and_rows(self, records):
        text = CsvExporter().render(records).decode("utf-8")

        assert text.splitlines() == [
            "Latitude,Longitude,Altitude,Timestamp",
            "40.0,-74.0,-10.0,1682935200",
            "40.5,-73.5,,",
        ]

    def test_file_info_columns(self, records):
        lines = CsvExporter(include_file_info=True).render(records).decode("utf-8").splitlines()

        assert lines[0] == "Latitude,Longitude,Altitude,Timestamp,FileName,FilePath"
        assert lines[1].endswith(",a.jpg,/photos/a.jpg")

    def test_empty_sequence_writes_only_header(self):
        assert CsvExporter().render([]).decode("utf-8") == "Latitude,Longitude,Altitude,Timestamp\n"


class TestGeoJsonExporter:
    def test_feature_collection(self, records):
        collection = json.loads(GeoJsonExporter().render(records))

        assert collection["type"] == "FeatureCollection"
        assert len(collection["features"]) == 2
        assert collection["features"][0]["type"] == "Feature"
        assert collection["features"][0]["geometry"]["type"] == "Point"

    def test_longitude_comes_first(self, records):
        feature = GeoJsonExporter().build_feature(records[1])
        assert feature["geometry"]["coordinates"] == [-73.5, 40.5]

    def test_altitude_is_third_coordinate(self, records):
        feature = GeoJsonExporter().build_feature(records[0])
        assert feature["geometry"]["coordinates"] == [-74.0, 40.0, -10.0]

    def test_timestamp_present_only_when_known(self, records):
        collection = json.loads(GeoJsonExporter().render(records))

        assert collection["features"][0]["properties"] == {"timestamp": 1682935200}
        assert collection["features"][1]["properties"] == {}
        assert "timestamp" not in collection["features"][1]["properties"]

    def test_output_is_valid_geojson(self, records):
        collection = geojson.loads(GeoJsonExporter().render(records).decode("utf-8"))

        assert collection.is_valid
        assert isinstance(collection, geojson.FeatureCollection)

    def test_coordinates_keep_full_precision(self):
        record = LocationRecord(40.12345678, -74.87654321)
        feature = GeoJsonExporter().build_feature(record)
        assert feature["geometry"]["coordinates"] == [-74.87654321, 40.12345678]

    def test_non_finite_coordinates_are_rejected(self):
        with pytest.raises(ValueError):
            GeoJsonExporter().render([LocationRecord(float("nan"), 1.0)])

    def test_transform_is_applied(self, records):
        exporter = GeoJsonExporter(transform=lambda lat, lon: (lat + 1.0, lon + 2.0))
        feature = exporter.build_feature(records[0])
        assert feature["geometry"]["coordinates"] == [-72.0, 41.0, -10.0]
