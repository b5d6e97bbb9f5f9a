"""
memprobe.config
AUTHOR: carter-vin

Environment-driven configuration + total memory resolution

Precedence:
1) CLI options (applied by the caller via dataclasses.replace)
2) environment variables
3) defaults

Env var overrides matter for:
- buildpack-style launchers that export BPL_JVM_TOTAL_MEMORY
- pointing detection at fixture files in tests and demos
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from memprobe.errors import ConfigurationError, InvalidFormatError
from memprobe.probes.base import MemorySource
from memprobe.probes.cgroups import CGROUPS_V1_PATH, CGROUPS_V2_PATH, ContainerMemoryDetector, DetectionResult
from memprobe.probes.host import PROC_MEMINFO, select_host_probe
from memprobe.size import parse_memory_string

ENV_TOTAL_MEMORY = "BPL_JVM_TOTAL_MEMORY"
ENV_CGROUPS_V2_PATH = "MEMPROBE_CGROUPS_V2_PATH"
ENV_CGROUPS_V1_PATH = "MEMPROBE_CGROUPS_V1_PATH"
ENV_MEMINFO_PATH = "MEMPROBE_MEMINFO_PATH"
ENV_HEAD_ROOM = "MEMPROBE_HEAD_ROOM"
ENV_QUIET = "QUIET"

DEFAULT_HEAD_ROOM = "0"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class MemprobeConfig:
    """
    Resolved settings

    head_room stays a string until validate() so bad env values surface
    as ConfigurationError instead of a crash at load time
    """

    total_memory: Optional[str] = None
    cgroups_v2_path: Path = CGROUPS_V2_PATH
    cgroups_v1_path: Path = CGROUPS_V1_PATH
    meminfo_path: Path = PROC_MEMINFO
    head_room: str = DEFAULT_HEAD_ROOM
    quiet: bool = False

    def validate(self) -> None:
        """
        Raise ConfigurationError on invalid values
        """
        try:
            head_room = int(self.head_room)
        except (TypeError, ValueError):
            head_room = -1
        if head_room < 0 or head_room > 100:
            raise ConfigurationError("head-room", self.head_room, "must be an integer between 0 and 100")

    @property
    def head_room_pct(self) -> int:
        self.validate()
        return int(self.head_room)

    def build_detector(self, *, log_events: bool = False) -> ContainerMemoryDetector:
        return ContainerMemoryDetector(
            cgroups_v2_path=Path(self.cgroups_v2_path),
            cgroups_v1_path=Path(self.cgroups_v1_path),
            host_probe=select_host_probe(meminfo_path=Path(self.meminfo_path)),
            log_events=log_events,
        )


def _env(env: Mapping[str, str], key: str) -> Optional[str]:
    # Empty values count as unset
    value = env.get(key)
    if value is None or not value.strip():
        return None
    return value


def load_config(env: Mapping[str, str] | None = None) -> MemprobeConfig:
    """
    Build config from environment variables
    """
    if env is None:
        env = os.environ

    quiet_raw = _env(env, ENV_QUIET)

    return MemprobeConfig(
        total_memory=_env(env, ENV_TOTAL_MEMORY),
        cgroups_v2_path=Path(_env(env, ENV_CGROUPS_V2_PATH) or CGROUPS_V2_PATH),
        cgroups_v1_path=Path(_env(env, ENV_CGROUPS_V1_PATH) or CGROUPS_V1_PATH),
        meminfo_path=Path(_env(env, ENV_MEMINFO_PATH) or PROC_MEMINFO),
        head_room=(_env(env, ENV_HEAD_ROOM) or DEFAULT_HEAD_ROOM).strip(),
        quiet=quiet_raw is not None and quiet_raw.strip().lower() in _TRUTHY,
    )


def resolve_total_memory(config: MemprobeConfig, detector: ContainerMemoryDetector) -> DetectionResult:
    """
    Decide which total memory to report

    - valid override -> OVERRIDE, detection skipped
    - invalid override -> logged, detected value used
    - no override -> detected value

    Events follow detector.log_events
    """
    if config.total_memory is not None:
        try:
            value = parse_memory_string(config.total_memory)
        except InvalidFormatError as e:
            detector.events.emit(
                "memory_override_rejected",
                input=config.total_memory,
                error_type=type(e).__name__,
                message=str(e),
            )
        else:
            detector.events.emit("memory_override_applied", total_bytes=value)
            return DetectionResult(total_bytes=value, source=MemorySource.OVERRIDE)

    return detector.detect_with_source()
