import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Dict, List, Optional, Tuple

import requests
from rich.console import Console
from rich.table import Table

from .constants import DEFAULT_FILENAME_RULES, STATUS_FAILED, STATUS_SUCCESS
from .errors import BackupError, ListError, PayloadError, RunError, TransportError
from .errors_catalog import actionable_error
from .models import DashboardOutcome, RunResult
from .services.dashboard import DashboardBackupService
from .services.filenames import FilenameSanitizer
from .services.filesystem import FileSystemService
from .services.lister import DashboardLister
from .services.progress import ProgressReporter
from .services.report import ReportService
from .services.transport import GrafanaClient
from .services.validation import ValidationService

console = Console()
logger = logging.getLogger("grafanabackup")

ITEM_ERRORS = (TransportError, PayloadError, OSError)


class GrafanaBackup:
    """One backup run: create directory, list dashboards, fetch and write each."""

    def __init__(
        self,
        endpoint: str,
        credential: str,
        output_root: Optional[str] = None,
        timeout: float = 30.0,
        retry_count: int = 0,
        retry_backoff_seconds: float = 2.0,
        abort_on_first_error: bool = True,
        max_workers: int = 1,
        filename_rules: str = DEFAULT_FILENAME_RULES,
        illegal_filename_chars: Optional[str] = None,
        report_file: Optional[str] = None,
        requests_module=requests,
    ):
        self.validation_service = ValidationService()
        self.endpoint = self.validation_service.normalize_endpoint(endpoint, logger)
        clean_credential = self.validation_service.normalize_credential(credential)
        self.max_workers = self.validation_service.validate_max_workers(max_workers)
        self.output_root = output_root or os.getcwd()
        self.abort_on_first_error = abort_on_first_error

        self.state = "idle"
        self.output_directory: Optional[str] = None
        self.last_result: Optional[RunResult] = None

        self.client = GrafanaClient(
            credential=clean_credential,
            logger=logger,
            timeout=timeout,
            retry_count=retry_count,
            retry_backoff_seconds=retry_backoff_seconds,
            requests_module=requests_module,
        )
        self.filesystem_service = FileSystemService(logger=logger)
        self.sanitizer = FilenameSanitizer.from_rules(filename_rules, illegal_filename_chars)
        self.lister = DashboardLister(client=self.client, logger=logger)
        self.dashboard_service = DashboardBackupService(
            client=self.client,
            sanitizer=self.sanitizer,
            filesystem_service=self.filesystem_service,
            logger=logger,
        )
        self.report_service = ReportService(report_file, logger=logger) if report_file else None

    def _set_state(self, state: str):
        self.state = state
        logger.debug("Run state: %s", state)

    def create_backup_directory(self, started: datetime) -> str:
        try:
            output_directory = self.filesystem_service.create_backup_directory(
                self.output_root,
                started,
            )
        except OSError as exc:
            target = os.path.join(
                self.output_root,
                self.filesystem_service.backup_directory_name(started),
            )
            raise RunError(
                RunError.DIRECTORY_CREATE_FAILED,
                actionable_error("directory_create_failed", path=target, error=str(exc)),
                cause=exc,
            ) from exc

        self.output_directory = output_directory
        self._set_state("directory_created")
        logger.info("Backup directory: %s", output_directory)
        return output_directory

    def list_dashboards(self) -> List[str]:
        self._set_state("listing")
        try:
            return self.lister.list(self.endpoint)
        except (TransportError, ListError) as exc:
            raise RunError(
                RunError.LIST_FAILED,
                actionable_error("list_failed", error=str(exc)),
                cause=exc,
                output_directory=self.output_directory,
            ) from exc

    def backup_dashboard(
        self,
        uid: str,
        output_directory: str,
    ) -> Tuple[DashboardOutcome, Optional[Exception]]:
        try:
            saved = self.dashboard_service.backup_dashboard(self.endpoint, uid, output_directory)
        except ITEM_ERRORS as exc:
            if not self.abort_on_first_error:
                logger.warning("Skipping dashboard '%s': %s", uid, exc)
            return DashboardOutcome(uid=uid, status=STATUS_FAILED, error=str(exc)), exc

        outcome = DashboardOutcome(uid=uid, status=STATUS_SUCCESS, title=saved.title, path=saved.path)
        return outcome, None

    def _item_failed(
        self,
        uid: str,
        exc: Exception,
        outcomes: List[DashboardOutcome],
        output_directory: str,
    ) -> RunError:
        return RunError(
            RunError.ITEM_FAILED,
            actionable_error("item_failed", uid=uid, error=str(exc)),
            uid=uid,
            cause=exc,
            outcomes=outcomes,
            output_directory=output_directory,
        )

    def _process_sequential(
        self,
        uids: List[str],
        output_directory: str,
        outcomes: List[DashboardOutcome],
        reporter,
    ):
        for uid in uids:
            outcome, error = self.backup_dashboard(uid, output_directory)
            outcomes.append(outcome)
            if reporter:
                reporter.processed(outcome)
            if error is not None and self.abort_on_first_error:
                raise self._item_failed(uid, error, outcomes, output_directory) from error

    def _backup_unless_aborted(
        self,
        uid: str,
        output_directory: str,
        abort_event: threading.Event,
    ) -> Optional[Tuple[DashboardOutcome, Optional[Exception]]]:
        # Checked in the worker so a freed thread never starts a queued uid after a failure.
        if abort_event.is_set():
            return None
        outcome, error = self.backup_dashboard(uid, output_directory)
        if error is not None and self.abort_on_first_error:
            abort_event.set()
        return outcome, error

    def _process_concurrent(
        self,
        uids: List[str],
        output_directory: str,
        outcomes: List[DashboardOutcome],
        reporter,
    ):
        results: Dict[int, Tuple[DashboardOutcome, Optional[Exception]]] = {}
        abort_event = threading.Event()
        cancelled = False

        with ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="grafanabackup",
        ) as pool:
            futures = {
                pool.submit(self._backup_unless_aborted, uid, output_directory, abort_event): index
                for index, uid in enumerate(uids)
            }
            for future in as_completed(futures):
                if future.cancelled():
                    continue
                result = future.result()
                if result is None:
                    continue
                outcome, error = result
                results[futures[future]] = result
                if reporter:
                    reporter.processed(outcome)
                if abort_event.is_set() and not cancelled:
                    cancelled = True
                    logger.debug("Cancelling pending dashboards after a failure.")
                    for pending in futures:
                        pending.cancel()

        outcomes.extend(results[index][0] for index in sorted(results))

        if abort_event.is_set():
            first_index = min(index for index, (_, error) in results.items() if error is not None)
            outcome, error = results[first_index]
            raise self._item_failed(outcome.uid, error, outcomes, output_directory) from error

    def backup(self, reporter=None) -> RunResult:
        """Runs the full pipeline and returns the run result.

        Raises RunError on directory creation or listing failures, and on the
        first per-dashboard failure unless abort_on_first_error is disabled.
        """
        started = datetime.now()
        outcomes: List[DashboardOutcome] = []
        self.output_directory = None
        self.last_result = None
        self._set_state("idle")
        if self.report_service:
            self.report_service.start_run(self.endpoint, started.isoformat())

        try:
            output_directory = self.create_backup_directory(started)
            uids = self.list_dashboards()
            if reporter:
                reporter.listed(len(uids))

            self._set_state("processing")
            if self.max_workers > 1:
                self._process_concurrent(uids, output_directory, outcomes, reporter)
            else:
                self._process_sequential(uids, output_directory, outcomes, reporter)
        except RunError as exc:
            self._set_state("failed")
            self._finalize_report("failed", exc.outcomes or outcomes, error=str(exc))
            raise
        except KeyboardInterrupt:
            self._set_state("failed")
            self._finalize_report("aborted", outcomes, error="Operation cancelled by user.")
            raise

        result = RunResult(
            output_directory=output_directory,
            backed_up_count=sum(1 for outcome in outcomes if outcome.succeeded),
            started_at=started.isoformat(),
            finished_at=datetime.now().isoformat(),
            outcomes=tuple(outcomes),
        )
        self._set_state("completed")
        self._finalize_report("success" if not result.failed_count else "partial", outcomes)
        self.last_result = result
        return result

    def _finalize_report(self, status: str, outcomes, error: Optional[str] = None):
        if not self.report_service:
            return
        self.report_service.set_output_directory(self.output_directory)
        self.report_service.finalize(status, datetime.now().isoformat(), outcomes, error=error)

    def _print_failures(self, result: RunResult):
        table = Table(title="Failed dashboards", show_lines=False)
        table.add_column("UID", style="bold")
        table.add_column("Error", style="red")
        for outcome in result.outcomes:
            if not outcome.succeeded:
                table.add_row(outcome.uid, outcome.error or "")
        console.print(table)

    def run(self) -> int:
        try:
            logger.info("Starting Grafana backup of %s", self.endpoint)
            with ProgressReporter(console) as reporter:
                result = self.backup(reporter=reporter)

        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            return 1
        except BackupError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            return 1
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error")
            return 1

        if result.failed_count:
            self._print_failures(result)
            console.print(
                f"[yellow]Backup finished with errors: {result.backed_up_count} saved, "
                f"{result.failed_count} failed. Saved to: {result.output_directory}[/yellow]"
            )
            return 1

        console.print(
            f"[green]Backup completed! {result.backed_up_count} dashboard(s) saved to: "
            f"{result.output_directory}[/green]"
        )
        return 0


def run_backup(endpoint: str, credential: str, output_root: str, **options) -> RunResult:
    """Backs up every dashboard of a Grafana instance into a new directory under output_root."""
    backup = GrafanaBackup(endpoint=endpoint, credential=credential, output_root=output_root, **options)
    return backup.backup()
