import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class LocationRecord:
    """Ubicación extraída de una foto. Inmutable una vez creada."""

    latitude: float
    longitude: float
    altitude: Optional[float] = None
    timestamp: Optional[int] = None  # Unix epoch, seconds
    source_path: Optional[str] = None

    @property
    def filename(self) -> str:
        return os.path.basename(self.source_path) if self.source_path else ""

    def __str__(self):
        return f"{self.latitude}, {self.longitude}"


class TagGroupKind(Enum):
    GPS = "gps"
    EXIF = "exif"


@dataclass
class TagGroup:
    """Grupo de etiquetas de metadatos (GPS o EXIF) indexado por id de etiqueta."""

    kind: TagGroupKind
    tags: Dict[int, Any] = field(default_factory=dict)
    descriptions: Dict[int, str] = field(default_factory=dict)

    def get(self, tag: int, default: Any = None) -> Any:
        return self.tags.get(tag, default)

    def description(self, tag: int) -> Optional[str]:
        return self.descriptions.get(tag)

    def __contains__(self, tag: int) -> bool:
        return tag in self.tags


class MetadataGroups:
    """Typed lookup of the tag groups read from one file, keyed by group kind."""

    def __init__(self, groups: Optional[List[TagGroup]] = None):
        self._groups: Dict[TagGroupKind, TagGroup] = {}
        for group in groups or []:
            # First group of a kind wins
            self._groups.setdefault(group.kind, group)

    def get_group(self, kind: TagGroupKind) -> Optional[TagGroup]:
        return self._groups.get(kind)

    def __contains__(self, kind: TagGroupKind) -> bool:
        return kind in self._groups

    def __len__(self) -> int:
        return len(self._groups)


@dataclass
class ExtractionResult:
    """Resultado de procesar un archivo: registro, omitido o error."""

    path: Path
    record: Optional[LocationRecord] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def has_record(self) -> bool:
        return self.record is not None

    @classmethod
    def success(cls, path: Path, record: LocationRecord) -> "ExtractionResult":
        return cls(path=path, record=record)

    @classmethod
    def skipped(cls, path: Path) -> "ExtractionResult":
        return cls(path=path)

    @classmethod
    def failure(cls, path: Path, error: Exception) -> "ExtractionResult":
        return cls(path=path, error=error)


@dataclass
class ExtractionStats:
    total: int = 0
    extracted: int = 0
    skipped: int = 0
    failed: int = 0


@dataclass
class PipelineSummary:
    """Resumen de una ejecución completa del pipeline."""

    discovered: int
    records: int
    geo_features: int
    discovery_seconds: float
    processing_seconds: float
    export_seconds: float
    total_seconds: float
    outputs: List[Path] = field(default_factory=list)

    def format(self) -> str:
        lines = [
            f"\nCompleted in {self.total_seconds:0.2f}s",
            f"- Discovery: {self.discovery_seconds:0.2f}s",
            f"- Processing: {self.processing_seconds:0.2f}s",
            f"- Export: {self.export_seconds:0.2f}s",
            f"- {self.records} locations extracted from {self.discovered} files",
            f"- {self.geo_features} unique locations in the geographic export",
        ]
        lines.extend(f"- Written: {path}" for path in self.outputs)
        return "\n".join(lines)
