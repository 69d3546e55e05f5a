"""Filesystem helpers for GrafanaBackup."""

import json
import logging
import os
import tempfile
from datetime import datetime
from typing import Any

from grafanabackup.constants import (
    BACKUP_DIR_PREFIX,
    BACKUP_DIR_TIMESTAMP_FORMAT,
    JSON_INDENT,
)


class FileSystemService:
    """Encapsulates file and directory side effects."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    @staticmethod
    def backup_directory_name(started_at: datetime) -> str:
        return f"{BACKUP_DIR_PREFIX}{started_at.strftime(BACKUP_DIR_TIMESTAMP_FORMAT)}"

    def create_backup_directory(self, output_root: str, started_at: datetime) -> str:
        """Creates a fresh run directory named after the start timestamp.

        A directory that already exists is never reused; a numeric suffix is
        appended instead. Raises OSError when the directory cannot be created.
        """
        base_name = self.backup_directory_name(started_at)
        os.makedirs(output_root, exist_ok=True)

        suffix = 1
        while True:
            name = base_name if suffix == 1 else f"{base_name}_{suffix}"
            path = os.path.join(output_root, name)
            try:
                os.mkdir(path)
            except FileExistsError:
                suffix += 1
                continue
            self.logger.debug("Created backup directory: %s", path)
            return path

    def write_json(self, path: str, data: Any):
        directory = os.path.dirname(path) or "."
        fd, temp_path = tempfile.mkstemp(prefix=".dashboard-", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as file_obj:
                json.dump(data, file_obj, indent=JSON_INDENT, ensure_ascii=False)
            os.replace(temp_path, path)
        finally:
            if os.path.exists(temp_path):
                try:
                    os.remove(temp_path)
                except OSError as exc:
                    self.logger.warning("Could not remove temporary file %s: %s", temp_path, exc)
