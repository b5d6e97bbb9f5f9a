"""
memprobe.logging
AUTHOR: carter-vin

Structured JSON event logging for diagnostics

Contract:
- One JSON object per line to stderr (stdout stays machine-readable)
- Stable event vocabulary (allowlist)
- UTC timestamps only
"""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, TextIO

if TYPE_CHECKING:
    from memprobe.probes.base import LimitReading

# Event types
VALID_EVENT_TYPES = {
    "detect_start",
    "memory_source_failed",
    "memory_source_skipped",
    "memory_detected",
    "memory_undetected",
    "memory_override_applied",
    "memory_override_rejected",
}


def _truncate_message(value: str, *, limit: int = 200) -> str:
    """
    Cap message length to keep events compact
    """
    if len(value) <= limit:
        return value
    return value[:limit] + f"...[truncated {len(value) - limit} chars]"


# Time: current in UTC ISO 8601
def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def emit_event(event_type: str, *, tool_version: str, stream: TextIO | None = None, **fields: Any) -> None:
    """
    Emit structured event line

    Rules:
    - event_type in VALID_EVENT_TYPES
    - event_type, tool_version, timestamp always present
    - sort_keys + compact separators for format
    """
    if event_type not in VALID_EVENT_TYPES:
        raise ValueError(f"invalid event_type: {event_type}")

    if "message" in fields and isinstance(fields["message"], str):
        fields["message"] = _truncate_message(fields["message"])

    payload: dict[str, Any] = {
        "event_type": event_type,
        "utc_now": utc_now_iso(),
        "tool_version": tool_version,
        **fields,
    }

    print(
        json.dumps(
            payload,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        ),
        file=stream if stream is not None else sys.stderr,
    )


def reading_event(reading: LimitReading) -> tuple[str, dict[str, Any]]:
    """
    Map one cascade reading to (event_type, fields)

    - VALUE -> memory_detected with total_bytes
    - ERROR -> memory_source_failed with the swallowed error
    - NOT_PRESENT -> memory_source_skipped
    """
    fields: dict[str, Any] = {"source": reading.source.value}

    if reading.ok:
        fields["total_bytes"] = reading.value
        return "memory_detected", fields

    if reading.error is not None:
        fields["error_type"] = type(reading.error).__name__
        fields["message"] = str(reading.error)
        if "path" in reading.error.context:
            fields["path"] = reading.error.context["path"]
        return "memory_source_failed", fields

    return "memory_source_skipped", fields


class EventLog:
    """
    Version-bound emitter that can be switched off

    Library callers get a disabled log; the CLI enables it with --verbose
    """

    def __init__(self, tool_version: str, *, enabled: bool = True, stream: TextIO | None = None) -> None:
        self.tool_version = tool_version
        self.enabled = enabled
        self.stream = stream

    def emit(self, event_type: str, **fields: Any) -> None:
        if not self.enabled:
            return
        emit_event(event_type, tool_version=self.tool_version, stream=self.stream, **fields)

    def reading(self, reading: LimitReading) -> None:
        event_type, fields = reading_event(reading)
        self.emit(event_type, **fields)
