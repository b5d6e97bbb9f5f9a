"""
memprobe.display
AUTHOR: carter-vin

Renderers for memory reports
"""

from __future__ import annotations

from memprobe.model import MemoryReport, report_to_json


class Renderer:
    name: str = "base"

    def render(self, report: MemoryReport) -> str:
        raise NotImplementedError


def render_text(report: MemoryReport) -> str:
    lines = [
        f"total_memory: {report.total_human}",
        f"total_bytes: {report.total_bytes}",
        f"source: {report.source}",
        f"head_room: {report.head_room}%",
        f"usable_memory: {report.usable_human}",
    ]

    if report.attempts:
        lines.append("")
        lines.append("sources:")
        for attempt in report.attempts:
            line = f"  {attempt.source.value}: {attempt.status.value}"
            if attempt.ok:
                line += f" ({attempt.value})"
            elif attempt.error is not None:
                line += f" ({attempt.error})"
            lines.append(line)

    if report.total_bytes <= 0:
        lines.append("")
        lines.append("No memory limit detected, using system defaults")

    return "\n".join(lines)


class TextRenderer(Renderer):
    name = "text"

    def render(self, report: MemoryReport) -> str:
        return render_text(report)


class JsonRenderer(Renderer):
    name = "json"

    def render(self, report: MemoryReport) -> str:
        return report_to_json(report)


class QuietRenderer(Renderer):
    """Raw byte count only, for scripts."""

    name = "quiet"

    def render(self, report: MemoryReport) -> str:
        return str(report.total_bytes)


_RENDERERS = {
    "text": TextRenderer(),
    "json": JsonRenderer(),
    "quiet": QuietRenderer(),
}


def get_renderer(name: str) -> Renderer:
    if name not in _RENDERERS:
        raise ValueError(f"unknown renderer: {name}")
    return _RENDERERS[name]
