"""memprobe.probes package exports."""

from memprobe.probes.base import LimitReading, MemorySource, ReadingStatus
from memprobe.probes.cgroups import ContainerMemoryDetector, DetectionResult
from memprobe.probes.host import (
    DarwinHeuristicProbe,
    HostProbe,
    LinuxProbe,
    UnsupportedProbe,
    detect_host_memory,
    select_host_probe,
)

__all__ = [
    "ContainerMemoryDetector",
    "DarwinHeuristicProbe",
    "DetectionResult",
    "HostProbe",
    "LimitReading",
    "LinuxProbe",
    "MemorySource",
    "ReadingStatus",
    "UnsupportedProbe",
    "detect_host_memory",
    "select_host_probe",
]
