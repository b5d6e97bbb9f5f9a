"""
Contract tests for the memprobe CLI surface
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from memprobe.cli import app
from memprobe.size import GB, MB

runner = CliRunner()

# None unsets the variable for the invocation
CLEAN_ENV = {
    "BPL_JVM_TOTAL_MEMORY": None,
    "MEMPROBE_CGROUPS_V2_PATH": None,
    "MEMPROBE_CGROUPS_V1_PATH": None,
    "MEMPROBE_MEMINFO_PATH": None,
    "MEMPROBE_HEAD_ROOM": None,
    "QUIET": None,
}


@pytest.fixture()
def cgroup_args(tmp_path: Path) -> list[str]:
    (tmp_path / "memory.max").write_text("max\n", encoding="utf-8")
    (tmp_path / "memory.limit_in_bytes").write_text(f"{512 * MB}\n", encoding="utf-8")
    return [
        "--cgroups-v2-path",
        str(tmp_path / "memory.max"),
        "--cgroups-v1-path",
        str(tmp_path / "memory.limit_in_bytes"),
        "--meminfo-path",
        str(tmp_path / "missing"),
    ]


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    assert "detect" in result.output
    assert "parse" in result.output


def test_no_command_prints_hint() -> None:
    result = runner.invoke(app, [])

    assert result.exit_code == 0
    assert "memprobe --help" in result.output


def test_detect_quiet_prints_bytes(cgroup_args: list[str]) -> None:
    result = runner.invoke(app, ["detect", "--quiet", *cgroup_args], env=CLEAN_ENV)

    assert result.exit_code == 0
    assert result.output.strip() == str(512 * MB)


def test_detect_json_report(cgroup_args: list[str]) -> None:
    result = runner.invoke(app, ["detect", "--format", "json", "--head-room", "25", *cgroup_args], env=CLEAN_ENV)

    assert result.exit_code == 0

    payload = json.loads(result.output)
    assert payload["total_bytes"] == 512 * MB
    assert payload["total_human"] == "512 MB"
    assert payload["source"] == "cgroups_v1"
    assert payload["usable_bytes"] == 384 * MB
    assert [a["status"] for a in payload["attempts"]] == ["not_present", "value"]
    assert payload["meta"]["schema_version"] == "1"


def test_detect_text_with_override(cgroup_args: list[str]) -> None:
    result = runner.invoke(app, ["detect", "--total-memory", "2G", *cgroup_args], env=CLEAN_ENV)

    assert result.exit_code == 0
    assert "total_memory: 2.00 GB" in result.output
    assert "source: override" in result.output


def test_detect_override_from_env(cgroup_args: list[str]) -> None:
    result = runner.invoke(app, ["detect", "--quiet", *cgroup_args], env={**CLEAN_ENV, "BPL_JVM_TOTAL_MEMORY": "1G"})

    assert result.exit_code == 0
    assert result.output.strip() == str(GB)


def test_detect_rejects_bad_head_room(cgroup_args: list[str]) -> None:
    result = runner.invoke(app, ["detect", "--head-room", "150", *cgroup_args], env=CLEAN_ENV)

    assert result.exit_code == 2
    assert "head-room" in result.output


def test_parse_command() -> None:
    result = runner.invoke(app, ["parse", "1.5G"])

    assert result.exit_code == 0
    assert result.output.strip() == "1610612736"


def test_parse_command_rejects_invalid() -> None:
    result = runner.invoke(app, ["parse", "1X"])

    assert result.exit_code == 2
    assert "unsupported unit" in result.output


def test_format_command() -> None:
    result = runner.invoke(app, ["format", "2048"])

    assert result.exit_code == 0
    assert result.output.strip() == "2 KB"


def test_validate_command() -> None:
    ok = runner.invoke(app, ["validate", "1024"])
    too_big = runner.invoke(app, ["validate", str(2**51)])

    assert ok.exit_code == 0
    assert too_big.exit_code == 2
    assert "exceeds maximum" in too_big.output


def test_negative_byte_counts_need_no_separator() -> None:
    """
    A leading minus is a value, not an option
    """
    formatted = runner.invoke(app, ["format", "-1"])
    negative = runner.invoke(app, ["validate", "-5"])

    assert formatted.exit_code == 0
    assert formatted.output.strip() == "Unknown"
    assert negative.exit_code == 2
    assert "negative memory size not allowed" in negative.output
