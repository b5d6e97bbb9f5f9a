"""memprobe: container-aware memory detection and memory size notation."""

__version__ = "0.1.0"
