"""
Photo processor module for PhotoGPS.

This module contains the PhotoProcessor class which handles:
- Parallel metadata extraction using ThreadPoolExecutor
- Per-file failure isolation
- Throttled progress reporting
- Sorting the extracted records by capture time
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .constants import PROCESSING_PROGRESS_INTERVAL
from .extractor import PhotoMetadataAdapter
from .models import ExtractionResult, ExtractionStats, LocationRecord
from .progress import ProgressCallback, ProgressReporter

logger = logging.getLogger(__name__)


def timestamp_sort_key(record: LocationRecord):
    """Records without a timestamp sort before every dated record, epoch 0 included."""
    return (record.timestamp is not None, record.timestamp or 0)


def sort_by_timestamp(records: Iterable[LocationRecord]) -> List[LocationRecord]:
    """Stable ascending sort by timestamp; ties keep their input order."""
    return sorted(records, key=timestamp_sort_key)


class PhotoProcessor:
    """Applies the metadata adapter to many files with bounded parallelism.

    Attributes:
        max_workers: Worker pool size, defaults to the number of CPUs.
        stats: Counters of the last ``process`` call.
    """

    def __init__(
        self,
        adapter: Optional[PhotoMetadataAdapter] = None,
        max_workers: Optional[int] = None,
        progress_callback: Optional[ProgressCallback] = None,
        progress_interval: float = PROCESSING_PROGRESS_INTERVAL,
    ) -> None:
        """Initialize the PhotoProcessor.

        Args:
            adapter: Metadata adapter used for every file.
            max_workers: Number of worker threads (None = os.cpu_count()).
            progress_callback: Optional callback receiving
                              (current, total, message) for progress updates.
            progress_interval: Minimum seconds between two progress updates.
        """
        self._adapter = adapter or PhotoMetadataAdapter()
        self.max_workers = max_workers or os.cpu_count() or 1
        self.progress_callback = progress_callback
        self.progress_interval = progress_interval
        self.stats = ExtractionStats()

    def process(self, paths: Sequence[Path]) -> List[LocationRecord]:
        """Extract a record from every path.

        Failures of individual files never abort the batch; they only yield
        no record. Results are drained in input order and sorted once by
        timestamp.

        Returns:
            Records ordered by ascending timestamp, undated records first.
        """
        paths = list(paths)
        total = len(paths)
        self.stats = ExtractionStats(total=total)
        results: List[Optional[ExtractionResult]] = [None] * total

        progress = ProgressReporter(
            total=total,
            label="Processed",
            interval=self.progress_interval,
            callback=self.progress_callback,
        )

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_index = {
                executor.submit(self._adapter.extract, path): i
                for i, path in enumerate(paths)
            }

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                try:
                    results[index] = future.result()
                except Exception as e:
                    logger.error(f"Error processing {paths[index]}: {e}")
                    results[index] = ExtractionResult.failure(paths[index], e)
                finally:
                    progress.advance()

        progress.finish()

        records: List[LocationRecord] = []
        for result in results:
            if result is None or not result.ok:
                self.stats.failed += 1
                if result is not None:
                    logger.debug(f"Failed: {result.error}")
            elif result.has_record:
                self.stats.extracted += 1
                records.append(result.record)
            else:
                self.stats.skipped += 1

        logger.info(
            f"Extraction finished: {self.stats.extracted} records, "
            f"{self.stats.skipped} without GPS, {self.stats.failed} failed, out of {total} files"
        )
        return sort_by_timestamp(records)
