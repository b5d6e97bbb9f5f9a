"""
memprobe.cli
------------
AUTHOR: carter-vin

PURPOSE:
- Report the memory available to this process (container limit, else host)
- Parse / format / validate memory size notation for scripts

Key contract:
- `memprobe --help` shows a Commands section.
- `memprobe detect --quiet` prints only the byte count (0 if undetected).
- Invalid sizes exit with code 2, never a traceback.
"""

from __future__ import annotations

import dataclasses
import platform
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import typer

from memprobe import __version__
from memprobe.config import load_config, resolve_total_memory
from memprobe.display import get_renderer
from memprobe.errors import ConfigurationError, InvalidFormatError
from memprobe.model import build_report
from memprobe.probes.host import select_host_probe
from memprobe.size import format_memory, parse_memory_string, validate_memory_size

# lets "-1" reach integer arguments instead of being read as an option
_SIGNED_ARG = {"ignore_unknown_options": True}

# Explicit multi-command CLI
app = typer.Typer(
    add_completion=False,
    help="memprobe: container-aware memory detection",
)

EXIT_INVALID = 2


# -----------------------------
# DATA CLASSES
# -----------------------------
@dataclass(frozen=True)
class EnvironmentInfo:
    """
    Snapshot of the runtime environment
    - host_probe: strategy selected for this platform
    """

    python_version: str
    os: str
    machine: str
    host_probe: str
    utc_now: str


def collect_environment_info() -> EnvironmentInfo:
    return EnvironmentInfo(
        python_version=sys.version.split()[0],
        os=f"{platform.system()} {platform.release()}",
        machine=platform.machine(),
        host_probe=select_host_probe().name,
        utc_now=datetime.now(timezone.utc).isoformat(),
    )


def _fail(message: str) -> None:
    typer.echo(message, err=True)
    raise typer.Exit(code=EXIT_INVALID)


# -----------------------------
# ROOT COMMAND BEHAVIOR
# -----------------------------
@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """
    Print a short hint when no subcommand is given
    """
    if ctx.invoked_subcommand is None:
        typer.echo("No command provided. Try: memprobe --help")


# -----------------------------
# CLI COMMANDS
# -----------------------------
@app.command()
def version() -> None:
    """
    Print version & runtime env
    """
    env = collect_environment_info()

    typer.echo(f"memprobe v{__version__}")
    typer.echo(f"python={env.python_version}")
    typer.echo(f"os={env.os}")
    typer.echo(f"machine={env.machine}")
    typer.echo(f"host_probe={env.host_probe}")
    typer.echo(f"utc_now={env.utc_now}")


@app.command("detect")
def detect(
    total_memory: Optional[str] = typer.Option(
        None,
        "--total-memory",
        help="Explicit total memory (e.g. 2G, 512M, 1024MB, 2147483648). Overrides detection.",
    ),
    head_room: Optional[str] = typer.Option(
        None,
        "--head-room",
        help="Head room percentage (0-100) withheld from usable memory.",
    ),
    output_format: str = typer.Option(
        "text",
        "--format",
        help="Output format: text or json.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Only print the byte count.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Emit JSON diagnostic events to stderr.",
    ),
    cgroups_v2_path: Optional[str] = typer.Option(None, "--cgroups-v2-path", help="cgroups v2 memory.max file."),
    cgroups_v1_path: Optional[str] = typer.Option(
        None, "--cgroups-v1-path", help="cgroups v1 memory.limit_in_bytes file."
    ),
    meminfo_path: Optional[str] = typer.Option(None, "--meminfo-path", help="Host meminfo file (Linux)."),
) -> None:
    """
    Detect total memory: cgroups v2, then cgroups v1, then host
    """
    if output_format not in {"text", "json"}:
        raise typer.BadParameter("--format must be 'text' or 'json'")

    # CLI options win over env
    overrides = {
        "total_memory": total_memory,
        "head_room": head_room,
        "cgroups_v2_path": cgroups_v2_path,
        "cgroups_v1_path": cgroups_v1_path,
        "meminfo_path": meminfo_path,
    }
    config = load_config()
    config = dataclasses.replace(config, **{k: v for k, v in overrides.items() if v is not None})
    if quiet:
        config = dataclasses.replace(config, quiet=True)

    try:
        config.validate()
    except ConfigurationError as e:
        _fail(str(e))

    detector = config.build_detector(log_events=verbose)
    result = resolve_total_memory(config, detector)

    report = build_report(result, head_room=config.head_room_pct, tool_version=__version__)
    renderer = get_renderer("quiet" if config.quiet else output_format)
    typer.echo(renderer.render(report))


@app.command("parse")
def parse(
    value: str = typer.Argument(..., help="Memory size, e.g. 2G, 512M, 1.5GB."),
) -> None:
    """
    Print the byte count for a memory size string
    """
    try:
        typer.echo(str(parse_memory_string(value)))
    except InvalidFormatError as e:
        _fail(str(e))


@app.command("format", context_settings=_SIGNED_ARG)
def format_cmd(
    value: int = typer.Argument(..., help="Byte count; negative values print Unknown."),
) -> None:
    """
    Print a byte count in human-readable form
    """
    typer.echo(format_memory(value))


@app.command("validate", context_settings=_SIGNED_ARG)
def validate(
    value: int = typer.Argument(..., help="Byte count; negative values are rejected."),
) -> None:
    """
    Exit 0 if the byte count is within supported bounds, 2 otherwise
    """
    try:
        validate_memory_size(value)
    except InvalidFormatError as e:
        _fail(str(e))
    typer.echo("ok")


if __name__ == "__main__":
    app()
