"""Data models for nmsweep."""

import json
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field


class MatchRecord(BaseModel):
    """One node_modules directory found by a scan."""

    model_config = ConfigDict(frozen=True)

    absolute_path: str = Field(
        ..., serialization_alias="path", description="Full path to the directory"
    )
    display_name: str = Field(
        ..., serialization_alias="name", description="Short name shown to the user"
    )
    size_bytes: int = Field(
        0, ge=0, serialization_alias="size_in_bytes", description="Total size in bytes"
    )
    size_display: str = Field(
        ..., serialization_alias="size", description="Human-readable size"
    )


class ScanResult(BaseModel):
    """Result of scanning a root directory."""

    model_config = ConfigDict(frozen=True)

    matches: list[MatchRecord] = Field(
        default_factory=list,
        serialization_alias="folders",
        description="Matches sorted by size, largest first",
    )
    total_size_display: str = Field(
        ..., serialization_alias="total_size", description="Formatted sum of all match sizes"
    )

    @property
    def total_bytes(self) -> int:
        """Sum of all match sizes."""
        return sum(m.size_bytes for m in self.matches)

    @property
    def paths(self) -> list[str]:
        return [m.absolute_path for m in self.matches]

    def selected_bytes(self, paths: Iterable[str]) -> int:
        """Sum of the sizes of the matches whose path is in ``paths``."""
        wanted = set(paths)
        return sum(m.size_bytes for m in self.matches if m.absolute_path in wanted)

    def to_wire(self) -> dict[str, Any]:
        """Serialize to ``{folders: [{path, name, size, size_in_bytes}], total_size}``."""
        return self.model_dump(by_alias=True)

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_wire(), indent=indent)


class CleanupResult(BaseModel):
    """Outcome of removing a single path."""

    path: str = Field(..., description="Path that was requested for removal")
    success: bool = Field(True, description="Whether the directory was removed")
    skipped: bool = Field(False, description="Path was missing or not a directory")
    error: Optional[str] = Field(None, description="Error message if removal failed")
    dry_run: bool = Field(False, description="Whether this was a dry run")


class CleanupReport(BaseModel):
    """All outcomes of one batch removal."""

    results: list[CleanupResult] = Field(default_factory=list)

    @property
    def removed_count(self) -> int:
        """Number of directories removed (or that would be, on a dry run)."""
        return sum(1 for r in self.results if r.success and not r.skipped)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def skipped_count(self) -> int:
        return sum(1 for r in self.results if r.skipped)

    @property
    def failures(self) -> list[CleanupResult]:
        return [r for r in self.results if not r.success]
