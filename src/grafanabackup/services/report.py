"""Run report generation service."""

import json
import os
import tempfile
from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from grafanabackup.models import DashboardOutcome


class ReportService:
    """Collects run metadata and per-dashboard outcomes into a JSON report."""

    def __init__(self, report_file: str, logger):
        self.report_file = report_file
        self.logger = logger
        self.report: Dict[str, Any] = {
            "status": "running",
            "endpoint": None,
            "started_at": None,
            "finished_at": None,
            "duration_seconds": None,
            "output_directory": None,
            "backed_up_count": 0,
            "failed_count": 0,
            "dashboards": [],
            "error": None,
        }

    def start_run(self, endpoint: str, started_at: str):
        self.report["status"] = "running"
        self.report["endpoint"] = endpoint
        self.report["started_at"] = started_at

    def set_output_directory(self, output_directory: Optional[str]):
        self.report["output_directory"] = output_directory

    def finalize(
        self,
        status: str,
        finished_at: str,
        outcomes: Iterable[DashboardOutcome],
        error: Optional[str] = None,
    ):
        dashboards = [asdict(outcome) for outcome in outcomes]
        self.report["status"] = status
        self.report["finished_at"] = finished_at
        if self.report.get("started_at"):
            started = datetime.fromisoformat(self.report["started_at"])
            finished = datetime.fromisoformat(finished_at)
            self.report["duration_seconds"] = (finished - started).total_seconds()
        self.report["dashboards"] = dashboards
        self.report["backed_up_count"] = sum(1 for item in dashboards if item["status"] == "success")
        self.report["failed_count"] = sum(1 for item in dashboards if item["status"] == "failed")
        self.report["error"] = error
        self.write()

    def write(self):
        os.makedirs(os.path.dirname(self.report_file) or ".", exist_ok=True)

        fd, temp_path = tempfile.mkstemp(
            prefix="backup-report-",
            suffix=".json",
            dir=os.path.dirname(self.report_file) or ".",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as file_obj:
                json.dump(self.report, file_obj, indent=2, sort_keys=True)
                file_obj.write("\n")
            os.replace(temp_path, self.report_file)
        except OSError as exc:
            self.logger.warning("Could not write report file '%s': %s", self.report_file, exc)
            try:
                os.remove(temp_path)
            except OSError:
                pass
