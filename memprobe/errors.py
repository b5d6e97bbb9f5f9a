"""
memprobe.errors
AUTHOR: carter-vin

Structured error types
- code: stable identifier for log aggregation
- context: diagnostic fields (offending input, attempted path)
"""

from __future__ import annotations

from typing import Any, Optional

INVALID_MEMORY_FORMAT = "INVALID_MEMORY_FORMAT"
CGROUPS_ACCESS_ERROR = "CGROUPS_ACCESS_ERROR"
INVALID_CONFIGURATION = "INVALID_CONFIGURATION"


class MemprobeError(Exception):
    """Base exception for all memprobe errors."""

    code: str = "MEMPROBE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        cause: Optional[BaseException] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.context = dict(context or {})

    def __str__(self) -> str:
        if self.cause is not None:
            return f"[{self.code}] {self.message}: {self.cause}"
        return f"[{self.code}] {self.message}"


class InvalidFormatError(MemprobeError):
    """Memory size string (or byte count) rejected by the size codec."""

    code = INVALID_MEMORY_FORMAT

    def __init__(self, value: str, reason: str) -> None:
        super().__init__(
            f"invalid memory format: {value}",
            cause=ValueError(reason),
            context={"input": value},
        )
        self.value = value
        self.reason = reason


class CgroupsAccessError(MemprobeError):
    """
    cgroups limit file could not be opened or parsed

    Never leaves ContainerMemoryDetector.detect()
    """

    code = CGROUPS_ACCESS_ERROR

    def __init__(self, path: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(
            f"failed to read cgroups at {path}",
            cause=cause,
            context={"path": path},
        )
        self.path = path


class ConfigurationError(MemprobeError):
    code = INVALID_CONFIGURATION

    def __init__(self, parameter: str, value: Any, message: str) -> None:
        super().__init__(
            f"invalid configuration for {parameter}: {message}",
            context={"parameter": parameter, "value": value},
        )
        self.parameter = parameter
        self.value = value
