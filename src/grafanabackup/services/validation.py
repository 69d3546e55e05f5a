"""Input validation helpers for GrafanaBackup."""

from urllib.parse import urlparse

from grafanabackup.errors import ValidationError
from grafanabackup.errors_catalog import actionable_error


class ValidationService:
    """Validates the Grafana endpoint and credential before a run."""

    def is_url(self, location: str) -> bool:
        parsed = urlparse(location)
        return parsed.scheme.lower() in {"http", "https"} and bool(parsed.netloc)

    def normalize_endpoint(self, endpoint: str, logger) -> str:
        clean_endpoint = (endpoint or "").strip().rstrip("/")
        if not clean_endpoint:
            raise ValidationError(actionable_error("missing_endpoint"))
        if not self.is_url(clean_endpoint):
            raise ValidationError(actionable_error("invalid_endpoint", endpoint=clean_endpoint))

        if urlparse(clean_endpoint).scheme.lower() == "http":
            logger.warning(
                "Using insecure HTTP for Grafana at %s. The API key is sent in clear text.",
                clean_endpoint,
            )

        return clean_endpoint

    def normalize_credential(self, credential: str) -> str:
        clean_credential = (credential or "").strip()
        if not clean_credential:
            raise ValidationError(actionable_error("missing_credential"))
        return clean_credential

    def validate_max_workers(self, max_workers: int) -> int:
        if max_workers < 1:
            raise ValidationError("max_workers must be at least 1.")
        return max_workers
