"""harborctl — layered compose orchestration CLI."""

__version__ = "0.2.0"
