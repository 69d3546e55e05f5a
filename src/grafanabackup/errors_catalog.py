"""Actionable error catalog for GrafanaBackup."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "missing_endpoint": {
        "what": "Grafana URL is empty.",
        "next": "Pass `--url` or set `url` in the config file.",
    },
    "missing_credential": {
        "what": "Grafana API key is empty.",
        "next": "Pass `--api-key`, set GRAFANA_API_KEY, or set `api_key` in the config file.",
    },
    "invalid_endpoint": {
        "what": "Invalid Grafana URL: {endpoint}",
        "next": "Use an absolute URL such as `https://grafana.example.com`.",
    },
    "directory_create_failed": {
        "what": "Could not create backup directory {path}: {error}",
        "next": "Check that the output root exists and is writable, or choose another `--output-root`.",
    },
    "list_failed": {
        "what": "Could not list dashboards: {error}",
        "next": "Check the Grafana URL and that the API key is valid and has viewer access.",
    },
    "item_failed": {
        "what": "Backup of dashboard '{uid}' failed: {error}",
        "next": "Files written so far remain in the backup directory. "
        "Retry, or use `--continue-on-error` to skip failing dashboards.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
