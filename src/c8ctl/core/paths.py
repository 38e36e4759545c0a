"""
c8ctl directory structure management.

This module provides centralized path management for runtime directories
following the XDG Base Directory specification.
"""

import os
from pathlib import Path


class C8ctlPaths:
    """Manage c8ctl directory structure following XDG Base Directory specification."""

    @staticmethod
    def get_base_dir() -> Path:
        """Get base c8ctl data directory.

        Resolution order: C8CTL_DATA_DIR, then $XDG_DATA_HOME/c8ctl,
        then ~/.local/share/c8ctl.
        """
        base = os.getenv("C8CTL_DATA_DIR")
        if base:
            return Path(base)
        xdg_data_home = os.getenv("XDG_DATA_HOME")
        if xdg_data_home:
            return Path(xdg_data_home) / "c8ctl"
        return Path.home() / ".local" / "share" / "c8ctl"

    @staticmethod
    def get_logs_dir() -> Path:
        """Get logs directory for deployment logs."""
        return C8ctlPaths.get_base_dir() / "logs"

    @staticmethod
    def ensure_directories() -> None:
        """
        Ensure all required directories exist with proper permissions.

        Creates directories with 0700 permissions.
        """
        C8ctlPaths.get_logs_dir().mkdir(parents=True, exist_ok=True, mode=0o700)
