"""
GrafanaBackup - Point-in-time file backups of Grafana dashboards
"""

__version__ = "1.0.0"

from .core import GrafanaBackup, run_backup
from .errors import BackupError, RunError

__all__ = ["GrafanaBackup", "BackupError", "RunError", "run_backup"]
