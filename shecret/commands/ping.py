"""连通性检测命令"""

from typing import Optional, Sequence

import click

from shecret.commands.common import choose_profiles, get_store, handle_errors
from shecret.config.storage import ConnectionStore
from shecret.core.connectivity import ReachabilityChecker, build_report
from shecret.core.models import ReachabilityStatus, StatusReport
from shecret.ui.formatter import (
    OUTPUT_FORMATS,
    OutputFormatter,
    console,
    display_message,
    print_status_report,
)


def check_server_status(
    store: ConnectionStore,
    all_servers: Optional[bool] = None,
    aliases: Sequence[str] = (),
    output_format: str = "default",
    template: str = None,
    count: int = 2,
    timeout: int = 2,
) -> StatusReport:
    """ping 选定的服务器并按在线/离线分组输出"""
    profiles = choose_profiles(
        store, all_servers, aliases, "Check all servers", "Servers to check"
    )
    if not profiles:
        display_message("warning", "No server connections selected", "yellow")
        return StatusReport()

    def progress_callback(completed, total, result):
        icon = "🟢" if result.status == ReachabilityStatus.ONLINE else "🔴"
        console.print(
            f"{icon} {result.alias} ({result.ip}) [{completed}/{total}]",
            highlight=False,
            markup=False,
        )

    checker = ReachabilityChecker(
        count=count,
        timeout=timeout,
        progress_callback=progress_callback if output_format == "default" else None,
    )
    results = checker.check_all(profiles)
    report = build_report(results)

    if output_format == "default":
        print_status_report(report)
    elif output_format != "none":
        click.echo(OutputFormatter(output_format, template).format_results(results))

    return report


@click.command("status")
@click.option("--all/--select", "all_servers", default=None, help="检测所有服务器或交互选择")
@click.option("--alias", "-a", "aliases", multiple=True, help="指定服务器别名")
@click.option("--count", "-c", default=2, type=click.IntRange(1, 10), help="ping 次数")
@click.option("--timeout", "-t", default=2, type=click.IntRange(1, 60), help="ping 超时时间(秒)")
@click.option(
    "--output",
    "-o",
    type=click.Choice(OUTPUT_FORMATS),
    default="default",
    help="输出格式",
)
@click.option("--template", "-T", help="自定义输出模板 (Jinja2)")
@click.pass_context
@handle_errors
def status_command(ctx, all_servers, aliases, count, timeout, output, template):
    """Check server status (online/offline)"""
    if output == "template" and not template:
        raise click.UsageError("--template is required with --output template")

    check_server_status(
        get_store(ctx), all_servers, aliases, output, template, count, timeout
    )
