import logging
import os

import click
from rich.logging import RichHandler

from .constants import DEFAULT_FILENAME_RULES, FILENAME_RULES
from .core import GrafanaBackup
from .errors import BackupError
from .services.config_loader import ConfigLoader


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command()
@click.option(
    "--url",
    required=False,
    envvar="GRAFANA_URL",
    help="Grafana base URL, e.g. https://grafana.example.com (or GRAFANA_URL).",
)
@click.option(
    "--api-key",
    required=False,
    envvar="GRAFANA_API_KEY",
    help="Grafana API key or service account token (or GRAFANA_API_KEY).",
)
@click.option(
    "--output-root",
    required=False,
    type=click.Path(file_okay=False),
    help="Directory where the GrafanaBackup_<timestamp> folder is created (default: current directory).",
)
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help="Path to a YAML configuration file. Defaults to .grafanabackup.yml if present.",
)
@click.option(
    "--timeout",
    required=False,
    type=float,
    default=None,
    help="HTTP request timeout in seconds (default: 30).",
)
@click.option(
    "--retry-count",
    required=False,
    type=int,
    default=None,
    help="Number of retries for transient HTTP failures (default: 0).",
)
@click.option(
    "--retry-backoff-seconds",
    required=False,
    type=float,
    default=None,
    help="Backoff time in seconds between retries.",
)
@click.option(
    "--continue-on-error",
    is_flag=True,
    default=None,
    help="Keep backing up remaining dashboards when one fails instead of aborting.",
)
@click.option(
    "--max-workers",
    required=False,
    type=click.IntRange(min=1),
    default=None,
    help="Dashboards fetched in parallel (default: 1, sequential).",
)
@click.option(
    "--filename-rules",
    required=False,
    type=click.Choice(sorted(FILENAME_RULES)),
    default=None,
    help="Which filesystem's illegal filename characters to replace (default: windows).",
)
@click.option("--report-file", type=click.Path(), help="Write a JSON report of the run to this path.")
@click.option(
    "--open-folder",
    is_flag=True,
    default=None,
    help="Open the backup folder in the file manager when the run ends.",
)
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
def main(
    url,
    api_key,
    output_root,
    config,
    timeout,
    retry_count,
    retry_backoff_seconds,
    continue_on_error,
    max_workers,
    filename_rules,
    report_file,
    open_folder,
    verbose,
    log_file,
):
    """Back up every Grafana dashboard into a timestamped folder of JSON files."""
    logger = logging.getLogger("grafanabackup")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), ".grafanabackup.yml")
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except BackupError as exc:
        raise click.ClickException(str(exc)) from exc

    url = _resolve_option(url, config_values, "url")
    api_key = _resolve_option(api_key, config_values, "api_key")
    output_root = _resolve_option(output_root, config_values, "output_root", default=os.getcwd())
    timeout = float(_resolve_option(timeout, config_values, "timeout", default=30.0))
    retry_count = int(_resolve_option(retry_count, config_values, "retry_count", default=0))
    retry_backoff_seconds = float(
        _resolve_option(
            retry_backoff_seconds,
            config_values,
            "retry_backoff_seconds",
            default=2.0,
        )
    )
    continue_on_error = bool(
        _resolve_option(continue_on_error, config_values, "continue_on_error", default=False)
    )
    max_workers = int(_resolve_option(max_workers, config_values, "max_workers", default=1))
    filename_rules = str(
        _resolve_option(filename_rules, config_values, "filename_rules", default=DEFAULT_FILENAME_RULES)
    )
    illegal_filename_chars = config_values.get("illegal_filename_chars")
    report_file = _resolve_option(report_file, config_values, "report_file")
    open_folder = bool(_resolve_option(open_folder, config_values, "open_folder", default=False))
    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")

    if not url or not str(url).strip():
        raise click.ClickException("Missing required option '--url' (or provide it in config).")
    if not api_key or not str(api_key).strip():
        raise click.ClickException("Missing required option '--api-key' (or provide it in config).")

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    try:
        backup = GrafanaBackup(
            endpoint=url,
            credential=api_key,
            output_root=output_root,
            timeout=timeout,
            retry_count=retry_count,
            retry_backoff_seconds=retry_backoff_seconds,
            abort_on_first_error=not continue_on_error,
            max_workers=max_workers,
            filename_rules=filename_rules,
            illegal_filename_chars=illegal_filename_chars,
            report_file=report_file,
        )
    except BackupError as exc:
        raise click.ClickException(str(exc)) from exc

    exit_code = backup.run()

    if open_folder:
        if backup.output_directory and os.path.isdir(backup.output_directory):
            click.launch(backup.output_directory)
        else:
            logger.warning("No backup folder was created, nothing to open.")

    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
