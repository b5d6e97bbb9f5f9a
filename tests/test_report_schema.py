"""
Contract tests for report schema stability.

These tests focus on fast, deterministic checks that ensure the report shape
stays stable as the code evolves. If these fail, downstream consumers may break.
"""

import json

import pytest

from memprobe.display import get_renderer
from memprobe.model import SCHEMA_VERSION, build_report, report_to_json
from memprobe.probes.base import LimitReading, MemorySource, ReadingStatus
from memprobe.probes.cgroups import DetectionResult
from memprobe.size import GB


def _result() -> DetectionResult:
    attempts = (
        LimitReading(source=MemorySource.CGROUPS_V2, status=ReadingStatus.NOT_PRESENT),
        LimitReading(source=MemorySource.CGROUPS_V1, status=ReadingStatus.VALUE, value=2 * GB),
    )
    return DetectionResult(total_bytes=2 * GB, source=MemorySource.CGROUPS_V1, attempts=attempts)


def test_report_schema_keys_exist() -> None:
    """
    Ensure the top-level and nested schema keys remain stable.
    """
    report = build_report(_result(), head_room=10, tool_version="0.1.0")

    payload = report.to_dict()

    assert set(payload.keys()) == {
        "total_bytes",
        "total_human",
        "source",
        "head_room",
        "usable_bytes",
        "usable_human",
        "attempts",
        "meta",
    }
    assert set(payload["meta"].keys()) == {"schema_version", "tool_version"}
    assert payload["meta"]["schema_version"] == SCHEMA_VERSION
    assert payload["attempts"][1] == {"source": "cgroups_v1", "status": "value", "bytes": 2 * GB}
    assert payload["usable_bytes"] == 2 * GB * 90 // 100


def test_undetected_report() -> None:
    result = DetectionResult(total_bytes=0, source=MemorySource.UNDETECTED)
    report = build_report(result, head_room=0, tool_version="0.1.0")

    assert report.total_human == "Unknown"
    assert report.usable_bytes == 0

    text = get_renderer("text").render(report)
    assert "No memory limit detected" in text


def test_report_json_is_deterministic() -> None:
    report = build_report(_result(), head_room=0, tool_version="0.1.0")

    first = report_to_json(report)
    assert first == report_to_json(report)
    assert json.loads(first)["source"] == "cgroups_v1"
    assert " " not in first.replace("2.00 GB", "")


def test_unknown_renderer() -> None:
    with pytest.raises(ValueError, match="unknown renderer"):
        get_renderer("yaml")
