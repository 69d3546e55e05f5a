import json
from datetime import datetime

import pytest

from grafanabackup.services.filesystem import FileSystemService


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


def build_service():
    return FileSystemService(logger=DummyLogger())


def test_create_backup_directory_uses_timestamp_name(tmp_path):
    service = build_service()

    path = service.create_backup_directory(str(tmp_path), datetime(2026, 1, 2, 3, 4, 5))

    assert path == str(tmp_path / "GrafanaBackup_20260102_030405")
    assert (tmp_path / "GrafanaBackup_20260102_030405").is_dir()


def test_create_backup_directory_never_reuses_existing_directory(tmp_path):
    service = build_service()
    started = datetime(2026, 1, 2, 3, 4, 5)

    first = service.create_backup_directory(str(tmp_path), started)
    second = service.create_backup_directory(str(tmp_path), started)

    assert first != second
    assert second.endswith("GrafanaBackup_20260102_030405_2")


def test_create_backup_directory_creates_missing_root(tmp_path):
    service = build_service()
    root = tmp_path / "nested" / "backups"

    path = service.create_backup_directory(str(root), datetime(2026, 1, 2, 3, 4, 5))

    assert root.is_dir()
    assert path.startswith(str(root))


def test_create_backup_directory_fails_when_root_is_a_file(tmp_path):
    service = build_service()
    root = tmp_path / "not-a-dir"
    root.write_text("x", encoding="utf-8")

    with pytest.raises(OSError):
        service.create_backup_directory(str(root), datetime(2026, 1, 2, 3, 4, 5))


def test_write_json_is_indented_utf8_and_overwrites(tmp_path):
    service = build_service()
    target = tmp_path / "Board_backup.json"
    target.write_text("old content", encoding="utf-8")

    service.write_json(str(target), {"title": "Produção", "panels": []})

    text = target.read_text(encoding="utf-8")
    assert json.loads(text) == {"title": "Produção", "panels": []}
    assert "Produção" in text
    assert '\n  "panels"' in text
    assert [item.name for item in tmp_path.iterdir()] == ["Board_backup.json"]


def test_backup_directory_name_is_timestamped():
    name = FileSystemService.backup_directory_name(datetime(2026, 1, 2, 3, 4, 5))

    assert name == "GrafanaBackup_20260102_030405"
