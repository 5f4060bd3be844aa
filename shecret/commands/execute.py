"""批量命令下发"""

from pathlib import Path
from typing import List, Optional, Sequence

import click

from shecret.commands.common import choose_profiles, get_store, handle_errors
from shecret.config.storage import ConnectionStore
from shecret.core.command import DEFAULT_SSH_COMMAND
from shecret.core.executor import BatchExecutor
from shecret.core.models import DispatchResult, DispatchStatus
from shecret.ui import prompts
from shecret.ui.formatter import OUTPUT_FORMATS, OutputFormatter, display_message
from shecret.ui.progress import ProgressDisplay, create_progress_callback


def issue_command(
    store: ConnectionStore,
    command: str = None,
    all_servers: Optional[bool] = None,
    aliases: Sequence[str] = (),
    timeout: Optional[float] = 30.0,
    output_format: str = "default",
    template: str = None,
    output_file: str = None,
) -> List[DispatchResult]:
    """向多台服务器下发同一条 SSH 命令"""
    if command is None:
        command = prompts.text("SSH command", DEFAULT_SSH_COMMAND)

    profiles = choose_profiles(
        store, all_servers, aliases, "All servers", "Connections"
    )
    if not profiles:
        display_message("warning", "No server connections selected", "yellow")
        return []

    display = None
    progress_callback = None
    if output_format == "default":
        display = ProgressDisplay(show_details=True)
        progress_callback = create_progress_callback(display)
        display.start_execution(len(profiles), command)

    executor = BatchExecutor(timeout=timeout, progress_callback=progress_callback)
    results = executor.run_batch(profiles, command)

    if display:
        display.finish_execution()

    formatter = OutputFormatter(output_format, template)
    if output_format == "default":
        formatter.print_dispatch_results(results)
    elif output_format != "none":
        output_content = formatter.format_results(results)
        if output_file:
            file_path = Path(output_file)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, "w") as f:
                f.write(output_content)
            click.echo(f"Results saved to {output_file}")
        else:
            click.echo(output_content)

    return results


@click.command("exec")
@click.argument("command", required=False)
@click.option("--all/--select", "all_servers", default=None, help="下发到所有服务器或交互选择")
@click.option("--alias", "-a", "aliases", multiple=True, help="指定服务器别名")
@click.option("--timeout", "-t", default=30.0, type=float, help="单条命令超时时间")
@click.option(
    "--output",
    "-o",
    type=click.Choice(OUTPUT_FORMATS),
    default="default",
    help="输出格式",
)
@click.option("--output-file", "-f", help="输出文件路径")
@click.option("--template", "-T", help="自定义输出模板 (Jinja2)")
@click.option("--fail/--no-fail", default=False, help="有服务器失败时返回非零退出码")
@click.pass_context
@handle_errors
def exec_command(
    ctx, command, all_servers, aliases, timeout, output, output_file, template, fail
):
    """Issue SSH command to multiple servers"""
    if output == "template" and not template:
        raise click.UsageError("--template is required with --output template")

    results = issue_command(
        get_store(ctx),
        command,
        all_servers,
        aliases,
        timeout,
        output,
        template,
        output_file,
    )
    if fail and any(r.status != DispatchStatus.SUCCESS for r in results):
        ctx.exit(1)
