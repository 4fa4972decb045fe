"""
Video Production CLI Tools

Command-line tools for interacting with the production server.

Tools:
- progress_monitor: Submit a brief and watch stage progress live
"""

from .progress_monitor import ProgressMonitor

__all__ = ["ProgressMonitor"]
