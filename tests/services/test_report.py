import json

from grafanabackup.models import DashboardOutcome
from grafanabackup.services.report import ReportService


class DummyLogger:
    def warning(self, *_args, **_kwargs):
        return None


def test_report_service_writes_run_outcomes(tmp_path):
    report_file = tmp_path / "reports" / "backup-report.json"
    service = ReportService(str(report_file), logger=DummyLogger())

    service.start_run("https://grafana.example.com", "2026-01-02T03:04:05")
    service.set_output_directory("/backups/GrafanaBackup_20260102_030405")
    service.finalize(
        "partial",
        "2026-01-02T03:04:07",
        [
            DashboardOutcome(uid="a", status="success", title="A", path="/backups/A_backup.json"),
            DashboardOutcome(uid="b", status="failed", error="GET failed: 500"),
        ],
    )

    data = json.loads(report_file.read_text(encoding="utf-8"))

    assert data["status"] == "partial"
    assert data["endpoint"] == "https://grafana.example.com"
    assert data["duration_seconds"] == 2.0
    assert data["backed_up_count"] == 1
    assert data["failed_count"] == 1
    assert data["dashboards"][1]["uid"] == "b"
    assert data["dashboards"][1]["error"] == "GET failed: 500"
