import sqlite3
import ssl
import sys

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text
from rich import box

import shecret
from shecret.config.storage import DB_NAME, DEFAULT_CONFIG_DIR


def version_rows(db_path: str = None):
    rows = [
        ("Program", "shecret"),
        ("Version", shecret.__version__),
        ("Description", shecret.__description__),
        ("License", shecret.__license__),
        ("Python", " ".join(sys.version.split("\n"))),
        ("Platform", sys.platform),
        ("OpenSSL", ssl.OPENSSL_VERSION),
        ("SQLite", sqlite3.sqlite_version),
    ]
    if db_path:
        rows.append(("Database path", str(db_path)))
    return rows


def print_version(db_path: str = None):
    """
    print version
    """
    click.echo("\n".join(f"{key}: {value}" for key, value in version_rows(db_path)))


def print_version_by_rich(db_path: str = None):
    """
    使用 Rich 库输出版本信息
    """
    console = Console()

    table = Table(show_header=False, box=box.ROUNDED, padding=(0, 1))
    table.add_column("Key", style="cyan bold", width=16)
    table.add_column("Value", style="white")
    for key, value in version_rows(db_path):
        table.add_row(key, value)

    title_panel = Panel(
        Text(f"shecret {shecret.__version__}", justify="center", style="bold yellow"),
        subtitle=shecret.__description__,
        subtitle_align="right",
        style="blue",
    )

    console.print()
    console.print(title_panel)
    console.print(Panel(table, title="[b]Version Details[/b]", border_style="yellow"))
    console.print()


@click.command("version")
@click.option("--simple", "-s", is_flag=True, default=False, help="简化版输出")
@click.pass_context
def version_command(ctx, simple):
    """
    打印版本信息
    """
    config_dir = (ctx.find_root().obj or {}).get("config_dir") or DEFAULT_CONFIG_DIR
    db_path = config_dir / DB_NAME
    if simple:
        print_version(db_path)
    else:
        print_version_by_rich(db_path)
