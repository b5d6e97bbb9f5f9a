"""
memprobe.probes.cgroups
AUTHOR: carter-vin

Container memory detection cascade

Order (first VALUE wins):
1) cgroups v2 memory.max ("max" or integer)
2) cgroups v1 memory.limit_in_bytes (integer)
3) host probe

Policy: NOT_PRESENT and ERROR both mean "try the next source".
detect() never raises; 0 means no information.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from memprobe import __version__
from memprobe.errors import CgroupsAccessError
from memprobe.logging import EventLog
from memprobe.probes.base import LimitReading, MemorySource, ReadingStatus, run_reader
from memprobe.probes.host import HostProbe, select_host_probe
from memprobe.size import TB, is_decimal_integer

CGROUPS_V2_PATH = Path("/sys/fs/cgroup/memory.max")
CGROUPS_V1_PATH = Path("/sys/fs/cgroup/memory/memory.limit_in_bytes")

# Limits above this are "no limit" (v1 reports ~2^63 when unset)
MAX_REALISTIC_MEMORY = 1 * TB

CGROUPS_V2_NO_LIMIT = "max"


@dataclass(frozen=True)
class DetectionResult:
    """
    Cascade outcome
    - total_bytes: detected size, 0 if undetected
    - source: provenance of total_bytes
    - attempts: every source consulted, in order
    """

    total_bytes: int
    source: MemorySource
    attempts: tuple[LimitReading, ...] = ()

    @property
    def detected(self) -> bool:
        return self.total_bytes > 0


def _read_first_line(path: Path) -> str:
    try:
        with path.open(encoding="utf-8") as f:
            line = f.readline()
    except (OSError, UnicodeDecodeError) as e:
        raise CgroupsAccessError(str(path), e) from e

    if not line:
        raise CgroupsAccessError(str(path), EOFError("empty file"))
    return line.strip()


def _parse_limit(path: Path, line: str) -> int:
    if not is_decimal_integer(line):
        cause = ValueError(f"invalid limit: {line!r}")
        raise CgroupsAccessError(str(path), cause) from cause
    return int(line)


@dataclass(frozen=True)
class ContainerMemoryDetector:
    """
    Immutable after construction; safe to reuse and share
    """

    cgroups_v2_path: Path = CGROUPS_V2_PATH
    cgroups_v1_path: Path = CGROUPS_V1_PATH
    host_probe: HostProbe = field(default_factory=select_host_probe)
    max_realistic_memory: int = MAX_REALISTIC_MEMORY
    log_events: bool = False

    def _realistic(self, value: int) -> Optional[int]:
        if value <= 0 or value > self.max_realistic_memory:
            return None
        return value

    def read_cgroups_v2(self) -> Optional[int]:
        """
        Read the v2 limit

        Returns None for "max" or an unrealistic value
        Raises CgroupsAccessError when unreadable or unparsable
        """
        path = Path(self.cgroups_v2_path)
        line = _read_first_line(path)
        if line == CGROUPS_V2_NO_LIMIT:
            return None
        return self._realistic(_parse_limit(path, line))

    def read_cgroups_v1(self) -> Optional[int]:
        """
        Read the v1 limit (integer only, no "max" token)
        """
        path = Path(self.cgroups_v1_path)
        return self._realistic(_parse_limit(path, _read_first_line(path)))

    def probe_cgroups_v2(self) -> LimitReading:
        return run_reader(MemorySource.CGROUPS_V2, self.read_cgroups_v2)

    def probe_cgroups_v1(self) -> LimitReading:
        return run_reader(MemorySource.CGROUPS_V1, self.read_cgroups_v1)

    def probe_host(self) -> LimitReading:
        value = self.host_probe.detect()
        if value > 0:
            return LimitReading(source=self.host_probe.source, status=ReadingStatus.VALUE, value=value)
        return LimitReading(source=self.host_probe.source, status=ReadingStatus.NOT_PRESENT)

    def detect_with_source(self) -> DetectionResult:
        """
        Run the cascade and keep provenance
        """
        events = self.events
        events.emit("detect_start", host_probe=self.host_probe.name)

        attempts: list[LimitReading] = []
        for probe in (self.probe_cgroups_v2, self.probe_cgroups_v1, self.probe_host):
            reading = probe()
            attempts.append(reading)
            events.reading(reading)

            if reading.ok:
                return DetectionResult(total_bytes=reading.value, source=reading.source, attempts=tuple(attempts))

        events.emit("memory_undetected")
        return DetectionResult(total_bytes=0, source=MemorySource.UNDETECTED, attempts=tuple(attempts))

    def detect(self) -> int:
        return self.detect_with_source().total_bytes

    @property
    def events(self) -> EventLog:
        return EventLog(__version__, enabled=self.log_events)
