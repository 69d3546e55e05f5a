"""Console progress reporting for backup runs."""

from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from grafanabackup.models import DashboardOutcome


class ProgressReporter:
    """Drives a rich progress bar from executor callbacks."""

    def __init__(self, console):
        self.console = console
        self.progress = None
        self.task = None

    def __enter__(self):
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            "•",
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )
        self.progress.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.progress.__exit__(exc_type, exc, tb)
        return False

    def listed(self, total: int):
        self.task = self.progress.add_task("[cyan]Backing up dashboards...", total=total)

    def processed(self, outcome: DashboardOutcome):
        if self.task is None:
            return
        description = f"[cyan]{outcome.title or outcome.uid}"
        self.progress.update(self.task, advance=1, description=description)
