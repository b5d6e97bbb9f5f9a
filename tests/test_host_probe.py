"""
Contract tests for host memory probe strategies
"""

from pathlib import Path

import pytest

from memprobe.probes import host
from memprobe.probes.base import MemorySource
from memprobe.probes.host import (
    DarwinHeuristicProbe,
    LinuxProbe,
    UnsupportedProbe,
    is_host_memory_detection_supported,
    select_host_probe,
)
from memprobe.size import GB

MEMINFO = """MemTotal:        8062332 kB
MemFree:         1234567 kB
MemAvailable:    4567890 kB
"""


def test_linux_probe_reads_mem_total(tmp_path: Path) -> None:
    meminfo = tmp_path / "meminfo"
    meminfo.write_text(MEMINFO, encoding="utf-8")

    assert LinuxProbe(meminfo_path=meminfo).detect() == 8062332 * 1024


def test_linux_probe_finds_mem_total_on_any_line(tmp_path: Path) -> None:
    meminfo = tmp_path / "meminfo"
    meminfo.write_text("MemFree: 10 kB\n  MemTotal:   2048 kB\n", encoding="utf-8")

    assert LinuxProbe(meminfo_path=meminfo).detect() == 2048 * 1024


@pytest.mark.parametrize(
    "contents",
    [
        "",
        "MemFree: 10 kB\n",
        "MemTotal:\n",
        "MemTotal: lots kB\n",
        "MemTotal: -5 kB\n",
        "MemTotal: 0 kB\n",
        "MemTotal: 8_062_332 kB\n",
    ],
)
def test_linux_probe_degrades_to_zero(tmp_path: Path, contents: str) -> None:
    meminfo = tmp_path / "meminfo"
    meminfo.write_text(contents, encoding="utf-8")

    assert LinuxProbe(meminfo_path=meminfo).detect() == 0


def test_linux_probe_missing_file(tmp_path: Path) -> None:
    assert LinuxProbe(meminfo_path=tmp_path / "missing").detect() == 0


@pytest.mark.parametrize(
    ("footprint", "expected"),
    [
        (0, 0),
        (1024, 1 * GB),
        (GB // 8, 4 * GB),
        (16 * GB, 128 * GB),
    ],
)
def test_darwin_heuristic_is_clamped(footprint: int, expected: int) -> None:
    """
    Footprint x32 clamped to [1 GB, 128 GB]; zero footprint means no signal
    """
    probe = DarwinHeuristicProbe(footprint=lambda: footprint)

    assert probe.detect() == expected
    assert probe.source is MemorySource.HOST_ESTIMATE


def test_darwin_heuristic_footprint_failure() -> None:
    def _broken() -> int:
        raise OSError("no rusage")

    assert DarwinHeuristicProbe(footprint=_broken).detect() == 0


def test_select_host_probe_by_platform(tmp_path: Path) -> None:
    linux = select_host_probe("Linux", meminfo_path=tmp_path / "meminfo")
    assert isinstance(linux, LinuxProbe)
    assert linux.meminfo_path == tmp_path / "meminfo"

    assert isinstance(select_host_probe("Darwin"), DarwinHeuristicProbe)

    other = select_host_probe("Windows")
    assert isinstance(other, UnsupportedProbe)
    assert other.detect() == 0


def test_select_host_probe_defaults_to_current_platform(monkeypatch) -> None:
    monkeypatch.setattr(host.platform, "system", lambda: "FreeBSD")

    assert isinstance(select_host_probe(), UnsupportedProbe)
    assert host.detect_host_memory() == 0


def test_supported_platforms() -> None:
    assert is_host_memory_detection_supported("Linux")
    assert is_host_memory_detection_supported("Darwin")
    assert not is_host_memory_detection_supported("Windows")
