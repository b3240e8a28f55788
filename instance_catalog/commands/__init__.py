"""CLI commands for instance-catalog."""

__all__ = [
    "instances",
]
