"""Configuration loader for GrafanaBackup."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from grafanabackup.errors import BackupError


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults."""

    SUPPORTED_KEYS = {
        "url",
        "api_key",
        "output_root",
        "timeout",
        "retry_count",
        "retry_backoff_seconds",
        "continue_on_error",
        "max_workers",
        "filename_rules",
        "illegal_filename_chars",
        "report_file",
        "open_folder",
        "verbose",
        "log_file",
    }

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise BackupError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise BackupError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise BackupError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise BackupError(f"Unknown configuration keys: {unknown_list}")

        return parsed
