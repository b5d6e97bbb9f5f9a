"""
memprobe.probes.base
AUTHOR: carter-vin

Light result wrapper -> read failures become data, not control flow

A limit source yields one of:
- VALUE: a usable byte count
- NOT_PRESENT: source readable but reports "no limit"
- ERROR: source missing or unparsable (error kept for diagnostics)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Optional

from memprobe.errors import MemprobeError


class MemorySource(str, enum.Enum):
    """Provenance of a detected byte count."""

    CGROUPS_V2 = "cgroups_v2"
    CGROUPS_V1 = "cgroups_v1"
    HOST_TOTAL = "host_total"
    # Darwin heuristic; not a measurement
    HOST_ESTIMATE = "host_estimate"
    OVERRIDE = "override"
    UNDETECTED = "undetected"


class ReadingStatus(str, enum.Enum):
    VALUE = "value"
    NOT_PRESENT = "not_present"
    ERROR = "error"


@dataclass(frozen=True)
class LimitReading:
    """
    Normalized limit source result
    - value: bytes if status=VALUE, else 0
    - error: the swallowed MemprobeError if status=ERROR
    """

    source: MemorySource
    status: ReadingStatus
    value: int = 0
    error: Optional[MemprobeError] = None

    @property
    def ok(self) -> bool:
        return self.status is ReadingStatus.VALUE

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "source": self.source.value,
            "status": self.status.value,
        }
        if self.ok:
            payload["bytes"] = self.value
        if self.error is not None:
            payload["error_type"] = type(self.error).__name__
            payload["message"] = str(self.error)
        return payload


def run_reader(source: MemorySource, fn: Callable[[], Optional[int]]) -> LimitReading:
    """
    Run a limit reader & collect failure as data

    Reader contract:
    - return int > 0 -> VALUE
    - return None -> NOT_PRESENT
    - raise MemprobeError -> ERROR
    """
    try:
        value = fn()
    except MemprobeError as e:
        return LimitReading(source=source, status=ReadingStatus.ERROR, error=e)

    if value is None:
        return LimitReading(source=source, status=ReadingStatus.NOT_PRESENT)
    return LimitReading(source=source, status=ReadingStatus.VALUE, value=value)
