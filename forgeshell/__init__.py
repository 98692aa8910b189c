"""Command shell toolkit: safety checks, a small shell, executors, workflows and file utilities."""

__version__ = "0.1.0"

__all__ = [
    "executor",
    "globbing",
    "operations",
    "safety",
    "search",
    "shell",
    "walker",
    "watcher",
    "workflow",
]