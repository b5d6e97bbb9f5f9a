"""
memprobe.probes.host
AUTHOR: carter-vin

Host memory probe
- Linux via /proc/meminfo (MemTotal only)
- Darwin: heuristic estimate, not a measurement
- other platforms degrade to 0
- stdlib only
"""

from __future__ import annotations

import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from memprobe.probes.base import MemorySource
from memprobe.size import GB

PROC_MEMINFO = Path("/proc/meminfo")

# Darwin estimate = peak footprint x factor, clamped
DARWIN_FOOTPRINT_FACTOR = 32
DARWIN_MIN_ESTIMATE = 1 * GB
DARWIN_MAX_ESTIMATE = 128 * GB


class HostProbe:
    """
    Host memory strategy

    detect() never raises; 0 means no information
    """

    name: str = "base"
    supported: bool = False
    source: MemorySource = MemorySource.HOST_TOTAL

    def detect(self) -> int:
        raise NotImplementedError


def _parse_mem_total(lines) -> int:
    """
    Return MemTotal in bytes from meminfo lines, 0 if absent
    """
    for line in lines:
        line = line.strip()
        if not line.startswith("MemTotal:"):
            continue
        # "MemTotal:        8062332 kB"
        parts = line.split()
        # unsigned ASCII kB count only; signs and "1_000" are not kernel output
        if len(parts) < 2 or not (parts[1].isascii() and parts[1].isdigit()):
            continue
        return int(parts[1]) * 1024
    return 0


@dataclass(frozen=True)
class LinuxProbe(HostProbe):
    meminfo_path: Path = PROC_MEMINFO

    name = "linux"
    supported = True

    def detect(self) -> int:
        try:
            with Path(self.meminfo_path).open(encoding="utf-8") as f:
                return _parse_mem_total(f)
        except (OSError, UnicodeDecodeError):
            return 0


def _peak_rss_bytes() -> int:
    # ru_maxrss is bytes on Darwin (KiB on Linux)
    import resource

    return int(resource.getrusage(resource.RUSAGE_SELF).ru_maxrss)


@dataclass(frozen=True)
class DarwinHeuristicProbe(HostProbe):
    """
    Best-effort estimate for Darwin-like hosts

    No system-memory query is used: the process footprint is scaled by
    DARWIN_FOOTPRINT_FACTOR and clamped to [1 GB, 128 GB]. Results carry
    the HOST_ESTIMATE source so callers can tell them from real readings.
    """

    footprint: Callable[[], int] = field(default=_peak_rss_bytes)

    name = "darwin"
    supported = True
    source = MemorySource.HOST_ESTIMATE

    def detect(self) -> int:
        try:
            footprint = self.footprint()
        except (OSError, ImportError, ValueError):
            return 0

        if footprint <= 0:
            return 0

        estimate = footprint * DARWIN_FOOTPRINT_FACTOR
        return max(DARWIN_MIN_ESTIMATE, min(estimate, DARWIN_MAX_ESTIMATE))


@dataclass(frozen=True)
class UnsupportedProbe(HostProbe):
    system: str = ""

    name = "unsupported"

    def detect(self) -> int:
        return 0


def select_host_probe(system: str | None = None, *, meminfo_path: Path = PROC_MEMINFO) -> HostProbe:
    """
    Pick the host strategy for a platform.system() value (current host by default)
    """
    if system is None:
        system = platform.system()

    key = system.lower()
    if key == "linux":
        return LinuxProbe(meminfo_path=Path(meminfo_path))
    if key == "darwin":
        return DarwinHeuristicProbe()
    return UnsupportedProbe(system=system)


def detect_host_memory() -> int:
    return select_host_probe().detect()


def is_host_memory_detection_supported(system: str | None = None) -> bool:
    return select_host_probe(system).supported
