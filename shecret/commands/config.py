"""配置导入导出命令"""

from pathlib import Path

import click
from rich.console import Console

from shecret.commands.common import get_store, handle_errors

console = Console()


@click.command("export")
@click.argument("output_file")
@click.option(
    "--format",
    "-f",
    type=click.Choice(["yaml", "json"]),
    default="yaml",
    help="导出格式",
)
@click.pass_context
@handle_errors
def export_command(ctx, output_file, format):
    """Export server connections to a YAML/JSON file"""
    storage = get_store(ctx)
    try:
        count = storage.export_config(Path(output_file), format)
    except OSError as e:
        console.print(f"[red]❌ Export failed: {e}[/red]")
        ctx.exit(1)
    console.print(
        f"[green]✅ {count} server connection(s) exported to {output_file}[/green]",
        soft_wrap=True,
    )


@click.command("import")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
@handle_errors
def import_command(ctx, input_file):
    """Import server connections from a YAML/JSON file"""
    storage = get_store(ctx)
    report = storage.import_config(Path(input_file))

    console.print(
        f"[green]✅ Imported {len(report['imported'])} server connection(s) "
        f"from {input_file}[/green]",
        soft_wrap=True,
    )
    if report["skipped"]:
        console.print(
            f"[yellow]Skipped: {', '.join(report['skipped'])}[/yellow]", soft_wrap=True
        )
