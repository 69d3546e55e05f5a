import pytest

from grafanabackup.errors import BackupError
from grafanabackup.services.config_loader import ConfigLoader


def test_config_loader_loads_yaml_mapping(tmp_path):
    config_file = tmp_path / ".grafanabackup.yml"
    config_file.write_text(
        "url: https://grafana.example.com\nmax_workers: 4\ncontinue_on_error: true\n",
        encoding="utf-8",
    )

    loader = ConfigLoader()
    loaded = loader.load(str(config_file))

    assert loaded["url"] == "https://grafana.example.com"
    assert loaded["max_workers"] == 4
    assert loaded["continue_on_error"] is True


def test_config_loader_returns_empty_mapping_for_empty_file(tmp_path):
    config_file = tmp_path / ".grafanabackup.yml"
    config_file.write_text("", encoding="utf-8")

    assert ConfigLoader().load(str(config_file)) == {}


def test_config_loader_rejects_unknown_keys(tmp_path):
    config_file = tmp_path / ".grafanabackup.yml"
    config_file.write_text("unknown_key: true\n", encoding="utf-8")

    loader = ConfigLoader()

    with pytest.raises(BackupError, match="Unknown configuration keys"):
        loader.load(str(config_file))


def test_config_loader_rejects_missing_file(tmp_path):
    with pytest.raises(BackupError, match="Config file not found"):
        ConfigLoader().load(str(tmp_path / "missing.yml"))
