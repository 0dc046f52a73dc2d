# src/photogps/main.py
"""Pipeline orchestration and interactive console entry point for PhotoGPS."""

import logging
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .config import ConfigManager, DEFAULT_CONFIG
from .constants import APP_TITLE, ConsoleMessages
from .discovery import FileDiscovery
from .exceptions import (
    DirectoryNotFoundError,
    EmptyInputError,
    ExportError,
    NoGPSDataError,
    NoImagesFoundError,
)
from .export import ExportStage
from .extractor import PhotoMetadataAdapter
from .models import PipelineSummary
from .processor import PhotoProcessor
from .progress import ProgressCallback, console_progress

logger = logging.getLogger(__name__)

LOG_DIR = Path.home() / ".photogps_logs"


def setup_logging(log_dir: Path = LOG_DIR, level: int = logging.INFO) -> Optional[Path]:
    """Send the diagnostic log to a rotating file; the console stays for progress output.

    Returns the log file, or None when the log directory cannot be used; the
    run then goes on without a diagnostic log.
    """
    log_file = log_dir / "app.log"
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=5, encoding="utf-8")
    except OSError:
        return None

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[handler],
    )
    return log_file


def run_pipeline(
    input_path_str: str,
    output_path_str: Optional[str] = None,
    settings: Optional[Dict[str, Any]] = None,
    progress_callback: Optional[ProgressCallback] = None,
    adapter: Optional[PhotoMetadataAdapter] = None,
    phase_callback: Optional[Callable[[str], None]] = None,
) -> PipelineSummary:
    """
    Runs discovery, extraction and export strictly one after the other.

    Args:
        input_path_str: Folder to scan recursively.
        output_path_str: Folder for the output files (default: the input
            folder, or the ``output_dir`` setting when set).
        settings: Overrides of DEFAULT_CONFIG.
        progress_callback: Receives (current, total, message) updates.
        adapter: Metadata adapter to use (default: Pillow-backed).
        phase_callback: Receives a heading when each phase starts.

    Returns:
        Summary with per-phase timings and written files.

    Raises:
        DirectoryNotFoundError: If the input folder doesn't exist.
        NoImagesFoundError: If discovery finds no candidate file.
        NoGPSDataError: If no file yields a location.
        ExportError: If any output file cannot be written.
    """
    settings = {**DEFAULT_CONFIG, **(settings or {})}
    input_dir = Path(input_path_str)
    output_dir = Path(output_path_str or settings["output_dir"] or input_dir)

    logger.info(f"Starting pipeline for {input_dir}")
    total_start = time.perf_counter()

    def _phase(message: str) -> None:
        if phase_callback:
            phase_callback(message)

    # Phase 1: discovery
    _phase(ConsoleMessages.DISCOVERING)
    start = time.perf_counter()
    discovery = FileDiscovery(
        filter_extensions=settings["filter_extensions"],
        max_workers=settings["max_workers"],
        progress_callback=progress_callback,
    )
    # Sorted so equal timestamps come out in the same order on every run
    files = sorted(discovery.discover(input_dir))
    discovery_seconds = time.perf_counter() - start

    if not files:
        raise NoImagesFoundError(input_dir)

    # Phase 2: extraction
    _phase(ConsoleMessages.PROCESSING)
    start = time.perf_counter()
    processor = PhotoProcessor(
        adapter=adapter,
        max_workers=settings["max_workers"],
        progress_callback=progress_callback,
    )
    records = processor.process(files)
    processing_seconds = time.perf_counter() - start

    # Validate we have useful records BEFORE generating empty reports
    if not records:
        raise NoGPSDataError(len(files), str(input_dir))

    # Phase 3: export
    _phase(ConsoleMessages.EXPORTING)
    start = time.perf_counter()
    stage = ExportStage(output_dir, settings)
    outputs = stage.run(records)
    export_seconds = time.perf_counter() - start

    logger.info(f"Process completed. {len(records)} locations from {len(files)} files.")
    return PipelineSummary(
        discovered=len(files),
        records=len(records),
        geo_features=len(stage.geo_records),
        discovery_seconds=discovery_seconds,
        processing_seconds=processing_seconds,
        export_seconds=export_seconds,
        total_seconds=time.perf_counter() - total_start,
        outputs=outputs,
    )


def read_folder_path(input_fn: Callable[[str], str] = input) -> str:
    """Prompt for a folder; strips whitespace and the quotes added by drag-and-drop."""
    raw = input_fn(ConsoleMessages.PROMPT) or ""
    return raw.strip().strip('"').strip("'").strip()


def validate_input_dir(text: str) -> Path:
    if not text:
        raise EmptyInputError()
    path = Path(text)
    if not path.is_dir():
        raise DirectoryNotFoundError(path)
    return path


def main(input_fn: Callable[[str], str] = input) -> int:
    """Interactive entry point. Returns the process exit code."""
    setup_logging()
    print(APP_TITLE)
    print("-" * len(APP_TITLE))

    try:
        input_dir = validate_input_dir(read_folder_path(input_fn))
    except (EmptyInputError, DirectoryNotFoundError) as e:
        print(e)
        return 1

    settings = ConfigManager.load_config()
    ConfigManager.save_config(last_input_dir=str(input_dir))

    try:
        summary = run_pipeline(
            str(input_dir),
            settings=settings,
            progress_callback=console_progress,
            phase_callback=print,
        )
    except NoImagesFoundError:
        print(f"\n{ConsoleMessages.NO_PHOTOS}")
        return 0
    except NoGPSDataError as e:
        print(f"\n{e}")
        return 0
    except ExportError as e:
        logger.exception("Export failed")
        print(ConsoleMessages.EXPORT_FAILED.format(e))
        return 1
    except Exception as e:
        logger.exception("Unhandled error")
        print(ConsoleMessages.FATAL.format(e))
        return 1

    print(summary.format())
    return 0
