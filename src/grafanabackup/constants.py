"""Shared constants for GrafanaBackup."""

SEARCH_PATH = "/api/search?query=&"
DASHBOARD_PATH = "/api/dashboards/uid/{uid}"

BACKUP_DIR_PREFIX = "GrafanaBackup_"
BACKUP_DIR_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
BACKUP_FILE_SUFFIX = "_backup.json"
UNTITLED_DASHBOARD = "dashboard_sem_nome"

JSON_INDENT = 2

WINDOWS_ILLEGAL_FILENAME_CHARS = '<>:"/\\|?*' + "".join(chr(code) for code in range(32))
POSIX_ILLEGAL_FILENAME_CHARS = "/\0"

FILENAME_RULES = {
    "windows": WINDOWS_ILLEGAL_FILENAME_CHARS,
    "posix": POSIX_ILLEGAL_FILENAME_CHARS,
}
DEFAULT_FILENAME_RULES = "windows"

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"
