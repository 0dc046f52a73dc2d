"""Export stage: runs the independent writers concurrently over the final records."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .config import DEFAULT_CONFIG
from .constants import CSV_FILENAME, EXCEL_FILENAME, GEOJSON_FILENAME
from .dedup import deduplicate
from .exceptions import ExportError
from .generators import CsvExporter, ExcelExporter, GeoJsonExporter, RecordExporter
from .models import LocationRecord
from .reprojection import wgs84_to_gcj02

logger = logging.getLogger(__name__)


@dataclass
class ExportJob:
    exporter: RecordExporter
    records: Sequence[LocationRecord]
    path: Path


class ExportStage:
    """Writes the spreadsheet, CSV and GeoJSON outputs into ``output_dir``.

    Tabular outputs get every record with exact coordinates; the GeoJSON
    output gets the records de-duplicated at ``geo_precision`` digits.
    """

    def __init__(self, output_dir: Path, settings: Optional[Dict[str, Any]] = None) -> None:
        self.output_dir = Path(output_dir)
        self.settings = {**DEFAULT_CONFIG, **(settings or {})}
        self.geo_records: List[LocationRecord] = []

    def build_jobs(self, records: Sequence[LocationRecord]) -> List[ExportJob]:
        include_file_info = bool(self.settings["include_file_info"])
        jobs: List[ExportJob] = []

        if self.settings["export_excel"]:
            jobs.append(ExportJob(ExcelExporter(include_file_info), records, self.output_dir / EXCEL_FILENAME))
        if self.settings["export_csv"]:
            jobs.append(ExportJob(CsvExporter(include_file_info), records, self.output_dir / CSV_FILENAME))
        if self.settings["export_geojson"]:
            self.geo_records = deduplicate(records, int(self.settings["geo_precision"]))
            transform = wgs84_to_gcj02 if self.settings["reproject_gcj02"] else None
            jobs.append(ExportJob(GeoJsonExporter(transform), self.geo_records, self.output_dir / GEOJSON_FILENAME))
        return jobs

    def run(self, records: Sequence[LocationRecord]) -> List[Path]:
        """Run every writer; the first failure aborts the export.

        Raises:
            ExportError: If any writer fails.
        """
        jobs = self.build_jobs(records)
        if not jobs:
            logger.warning("All exports are disabled; nothing written")
            return []

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExportError(self.output_dir, e) from e

        written: List[Path] = []
        with ThreadPoolExecutor(max_workers=len(jobs)) as executor:
            future_to_job = {
                executor.submit(job.exporter.save, job.records, job.path): job
                for job in jobs
            }
            for future in as_completed(future_to_job):
                job = future_to_job[future]
                try:
                    written.append(future.result())
                except Exception as e:
                    logger.error(f"Export to {job.path} failed: {e}")
                    raise ExportError(job.path, e) from e

        # Report in job order, not completion order
        order = {job.path: i for i, job in enumerate(jobs)}
        return sorted(written, key=lambda p: order[p])
