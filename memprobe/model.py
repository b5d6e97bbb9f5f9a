"""
memprobe.model
AUTHOR: carter-vin

Report schema + deterministic serialization primitives.

Design goals:
- Versioned, stable report envelope ("schema_version" = "1")
- Explicit structure (no accidental serialization via __dict__)
- Deterministic ordering where it matters (attempts keep cascade order)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import json

from memprobe.probes.base import LimitReading
from memprobe.probes.cgroups import DetectionResult
from memprobe.size import format_memory

# Schema constants
SCHEMA_VERSION = "1"


@dataclass(frozen=True)
class Meta:
    """
    Metadata for versioning & traceability
    - schema_version: report schema version
    - tool_version: memprobe version string
    """

    schema_version: str
    tool_version: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "tool_version": self.tool_version,
        }


@dataclass(frozen=True)
class MemoryReport:
    """
    Top-level report
    - total_bytes: 0 when undetected
    - usable_bytes: total minus head room (display only)
    """

    total_bytes: int
    source: str
    head_room: int
    usable_bytes: int
    attempts: tuple[LimitReading, ...]
    meta: Meta

    @property
    def total_human(self) -> str:
        return format_memory(self.total_bytes)

    @property
    def usable_human(self) -> str:
        return format_memory(self.usable_bytes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_bytes": self.total_bytes,
            "total_human": self.total_human,
            "source": self.source,
            "head_room": self.head_room,
            "usable_bytes": self.usable_bytes,
            "usable_human": self.usable_human,
            "attempts": [attempt.to_dict() for attempt in self.attempts],
            "meta": self.meta.to_dict(),
        }


def usable_after_head_room(total_bytes: int, head_room: int) -> int:
    if total_bytes <= 0:
        return 0
    return total_bytes * (100 - head_room) // 100


def validate_report(report: MemoryReport) -> None:
    """
    Validate report structure + content

    Raises ValueError on invalid
    """
    if report.total_bytes < 0:
        raise ValueError("total_bytes must be >= 0")
    if not 0 <= report.head_room <= 100:
        raise ValueError("head_room must be between 0 and 100")
    if report.usable_bytes > report.total_bytes:
        raise ValueError("usable_bytes must not exceed total_bytes")
    if report.meta.schema_version != SCHEMA_VERSION:
        raise ValueError(f"meta.schema_version must be: '{SCHEMA_VERSION}'")
    if not report.meta.tool_version:
        raise ValueError("meta.tool_version must be non-empty")


def build_report(result: DetectionResult, *, head_room: int, tool_version: str) -> MemoryReport:
    """
    Assemble a MemoryReport from a detection result
    """
    report = MemoryReport(
        total_bytes=result.total_bytes,
        source=result.source.value,
        head_room=head_room,
        usable_bytes=usable_after_head_room(result.total_bytes, head_room),
        attempts=result.attempts,
        meta=Meta(schema_version=SCHEMA_VERSION, tool_version=tool_version),
    )

    # validate before returning
    validate_report(report)
    return report


def report_to_json(report: MemoryReport) -> str:
    """
    Serialize a MemoryReport

    Rules:
    - sort_keys=True ensures stable key order
    - separators remove whitespace to avoid formatting drift
    """
    return json.dumps(
        report.to_dict(),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
