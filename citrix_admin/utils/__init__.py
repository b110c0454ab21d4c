"""
Utilities package for the admin scripts.
"""

from .log_viewer import LogViewer

__all__ = ["LogViewer"]
