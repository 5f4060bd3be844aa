import time
from dataclasses import dataclass
from typing import List

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..core.models import DispatchResult, DispatchStatus


@dataclass
class ProgressStats:
    total: int = 0
    completed: int = 0
    success: int = 0
    error: int = 0
    timeout: int = 0


class ProgressDisplay:
    """批量下发时的进度显示"""

    def __init__(self, show_details: bool = True):
        self.console = Console()
        self.show_details = show_details
        self.stats = ProgressStats()
        self.results: List[DispatchResult] = []
        self.start_time = time.time()

    def start_execution(self, total_hosts: int, command: str):
        self.stats.total = total_hosts
        self.start_time = time.time()

        self.console.print(
            Panel(
                f"[bold blue]Issuing command to {total_hosts} servers[/bold blue]\n"
                f"Command: [yellow]{escape(command)}[/yellow]",
                title="SSH Batch Dispatch",
                border_style="blue",
            )
        )

    def update_progress(self, completed: int, total: int, result: DispatchResult):
        """更新进度"""
        self.stats.completed = completed
        self.results.append(result)

        if result.status == DispatchStatus.SUCCESS:
            self.stats.success += 1
        elif result.status == DispatchStatus.TIMEOUT:
            self.stats.timeout += 1
        else:
            self.stats.error += 1

        self._display_result(result)
        self.console.print(
            f"Progress: ({completed}/{total}) "
            f"✓{self.stats.success} ✗{self.stats.error} ⏱{self.stats.timeout}",
            highlight=False,
        )

    def _display_result(self, result: DispatchResult):
        if result.status == DispatchStatus.SUCCESS:
            self.console.print(
                f"✅ [green]SSH command sent to {escape(result.alias)}[/green] "
                f"({result.execution_time:.2f}s)"
            )
            return

        color = "yellow" if result.status == DispatchStatus.TIMEOUT else "red"
        self.console.print(
            f"❌ [{color}]{escape(result.alias)}[/{color}] ({result.execution_time:.2f}s)"
        )
        if self.show_details and result.error_message:
            self.console.print(f"   [red]Error: {escape(result.error_message)}[/red]")

    def finish_execution(self):
        """完成执行显示"""
        elapsed = time.time() - self.start_time
        total = self.stats.total or 1

        table = Table(title="Dispatch Summary")
        table.add_column("Metric", style="cyan")
        table.add_column("Count", style="white")
        table.add_column("Percentage", style="white")

        table.add_row("Total Servers", str(self.stats.total), "100.0%")
        table.add_row(
            "✅ Success", str(self.stats.success), f"{self.stats.success / total:.1%}"
        )
        table.add_row("❌ Errors", str(self.stats.error), f"{self.stats.error / total:.1%}")
        table.add_row(
            "⏰ Timeouts", str(self.stats.timeout), f"{self.stats.timeout / total:.1%}"
        )
        table.add_row("⚡ Total Time", f"{elapsed:.2f}s", "-")

        self.console.print(table)


def create_progress_callback(display: ProgressDisplay):
    """创建进度回调函数"""

    def callback(completed: int, total: int, result: DispatchResult):
        display.update_progress(completed, total, result)

    return callback
