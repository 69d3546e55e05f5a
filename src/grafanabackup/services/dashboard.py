"""Per-dashboard fetch and write-out."""

import json
import os

from grafanabackup.constants import DASHBOARD_PATH, UNTITLED_DASHBOARD
from grafanabackup.errors import PayloadError
from grafanabackup.models import SavedDashboard


class DashboardBackupService:
    """Fetches one dashboard by uid and stores its `dashboard` object."""

    def __init__(self, client, sanitizer, filesystem_service, logger):
        self.client = client
        self.sanitizer = sanitizer
        self.filesystem_service = filesystem_service
        self.logger = logger

    def fetch_dashboard(self, endpoint: str, uid: str) -> dict:
        url = f"{endpoint}{DASHBOARD_PATH.format(uid=uid)}"
        body = self.client.get(url)

        try:
            payload = json.loads(body)
        except (ValueError, UnicodeDecodeError) as exc:
            raise PayloadError(f"Dashboard '{uid}' response is not valid JSON: {exc}") from exc

        dashboard = payload.get("dashboard") if isinstance(payload, dict) else None
        if not isinstance(dashboard, dict):
            raise PayloadError(f"Dashboard '{uid}' response has no 'dashboard' object.")
        return dashboard

    @staticmethod
    def resolve_title(dashboard: dict) -> str:
        title = dashboard.get("title")
        if title is None or str(title) == "":
            return UNTITLED_DASHBOARD
        return str(title)

    def backup_dashboard(self, endpoint: str, uid: str, output_directory: str) -> SavedDashboard:
        dashboard = self.fetch_dashboard(endpoint, uid)
        title = self.resolve_title(dashboard)
        path = os.path.join(output_directory, self.sanitizer.backup_filename(title))

        self.filesystem_service.write_json(path, dashboard)
        self.logger.info("Dashboard '%s' saved to: %s", title, path)
        return SavedDashboard(title=title, path=path)
