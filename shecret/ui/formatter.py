"""输出格式化模块"""

import dataclasses
from enum import Enum
from typing import Any, Dict, List

import marshmallow_dataclass
import yaml
from jinja2 import Template
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box
from rich.markup import escape

from ..core.models import (
    DispatchResult,
    DispatchStatus,
    ReachabilityResult,
    ReachabilityStatus,
    ServerConnection,
    StatusReport,
)

OUTPUT_FORMATS = ["default", "json", "yaml", "template", "none"]

console = Console()


def display_message(kind: str, message: str, style: str = "white"):
    """输出 [KIND] message"""
    console.print(
        f"\n[{style}]\\[{kind.upper()}] {escape(message)}[/{style}]\n",
        highlight=False,
        soft_wrap=True,
    )


def print_connections(connections: List[ServerConnection]):
    """以表格形式输出所有连接"""
    table = Table(box=box.SQUARE)
    table.add_column("id", style="cyan", justify="right")
    table.add_column("user", style="yellow")
    table.add_column("ip", style="green")
    table.add_column("key_path", style="white")
    table.add_column("port", style="blue")
    table.add_column("alias", style="magenta")

    for connection in connections:
        table.add_row(
            str(connection.id),
            connection.user,
            connection.ip,
            connection.key_path,
            str(connection.port),
            connection.alias,
        )

    console.print(table)
    console.print(f"Quantity: {len(connections)}\n")


def _to_dict(result: Any) -> Dict[str, Any]:
    item = dataclasses.asdict(result)
    # 转换枚举值
    for key, value in item.items():
        if isinstance(value, Enum):
            item[key] = value.value
    return item


class OutputFormatter:
    """输出格式化器"""

    def __init__(self, format_type: str = "default", template: str = None):
        self.format_type = format_type.lower()
        self.template = template

    def format_results(self, results: List[Any]) -> str:
        """结构化输出（json/yaml/template）"""
        if self.format_type == "none" or not results:
            return ""
        elif self.format_type == "json":
            return self._format_json(results)
        elif self.format_type == "yaml":
            return self._format_yaml(results)
        elif self.format_type == "template":
            return self._format_template(results)
        raise ValueError(f"Unsupported structured format: {self.format_type}")

    def _format_json(self, results: List[Any]) -> str:
        schema = marshmallow_dataclass.class_schema(type(results[0]))()
        return schema.dumps(results, many=True, indent=2, ensure_ascii=False)

    def _format_yaml(self, results: List[Any]) -> str:
        return yaml.dump(
            [_to_dict(result) for result in results],
            indent=2,
            allow_unicode=True,
            sort_keys=False,
        )

    def _format_template(self, results: List[Any]) -> str:
        if not self.template:
            raise ValueError("A template is required for template output")
        template = Template(self.template, lstrip_blocks=True, trim_blocks=True)
        return "\n".join(template.render(_to_dict(result)) for result in results)

    def print_dispatch_results(self, results: List[DispatchResult]):
        """使用Rich打印命令下发结果"""
        for result in results:
            if result.status == DispatchStatus.SUCCESS:
                border_style = "green"
                status_text = "[green]✅ SUCCESS[/green]"
            elif result.status == DispatchStatus.TIMEOUT:
                border_style = "yellow"
                status_text = "[yellow]⏰ TIMEOUT[/yellow]"
            else:
                border_style = "red"
                status_text = "[red]❌ ERROR[/red]"

            content_lines = [f"{status_text} ({result.execution_time:.2f}s)"]

            if result.exit_code is not None:
                content_lines.append(f"Exit Code: {result.exit_code}")

            if result.stdout:
                content_lines.append("\n[bold]STDOUT:[/bold]")
                content_lines.append(escape(result.stdout.rstrip()))

            if result.stderr:
                content_lines.append("\n[bold red]STDERR:[/bold red]")
                content_lines.append(f"[red]{escape(result.stderr.rstrip())}[/red]")

            if result.error_message:
                content_lines.append(
                    f"\n[bold red]ERROR:[/bold red] [red]{escape(result.error_message)}[/red]"
                )

            console.print(
                Panel(
                    "\n".join(content_lines),
                    title=f"[bold]{result.alias}[/bold]",
                    border_style=border_style,
                    expand=False,
                )
            )

    def print_reachability_results(self, results: List[ReachabilityResult]):
        table = Table(title="Server Status")
        table.add_column("Alias", style="cyan")
        table.add_column("IP", style="blue")
        table.add_column("Status", style="white")
        table.add_column("Time", style="green")

        for result in results:
            if result.status == ReachabilityStatus.ONLINE:
                status_text = "[green]🟢 Online[/green]"
            else:
                status_text = "[red]🔴 Offline[/red]"
            table.add_row(
                result.alias, result.ip, status_text, f"{result.response_time:.3f}s"
            )

        console.print(table)


def print_status_report(report: StatusReport):
    """分别输出在线与离线服务器"""
    if report.online:
        display_message(
            "✅",
            f"Online servers: {report.online}. Quantity: {len(report.online)}",
            "green",
        )
    if report.offline:
        display_message(
            "❌",
            f"Offline servers: {report.offline}. Quantity: {len(report.offline)}",
            "red",
        )
