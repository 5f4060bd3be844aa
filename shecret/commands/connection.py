"""连接管理命令"""

import getpass
import os

import click
from rich.markup import escape

from shecret.commands.common import get_store, handle_errors
from shecret.config.storage import ConnectionStore
from shecret.core.models import ConnectionType, ServerConnection
from shecret.errors import ShecretError
from shecret.ui import prompts
from shecret.ui.clipboard import set_clipboard
from shecret.ui.formatter import console, display_message, print_connections

DEFAULT_IP = "0.0.0.0"
DEFAULT_KEY_PATH = "."
DEFAULT_PORT = "22"
DEFAULT_ALIAS = "sample"


def _default_user() -> str:
    return os.environ.get("USER") or getpass.getuser()


def display_connections(store: ConnectionStore):
    print_connections(store.list())


def start_connection(
    store: ConnectionStore,
    alias: str = None,
    connection_type: str = None,
    copy: bool = True,
) -> str:
    """生成 ssh/sftp 连接命令并写入剪贴板"""
    if alias:
        record = store.get(alias)
        if not record:
            raise ShecretError(f"Server connection '{alias}' not found")
    else:
        alias, _ = prompts.select(store.aliases(), "Connection")
        record = store.get(alias)

    if connection_type is None:
        connection_type = prompts.text(
            "Connection type (1 for SFTP)", ConnectionType.SSH.value
        )

    command = record.get_command(ConnectionType.parse(connection_type).value)
    if copy and set_clipboard(command):
        console.print(
            f"[green]\\[OK] Sent to clipboard: {escape(command)}[/green]",
            highlight=False,
            soft_wrap=True,
        )
    else:
        console.print(command, highlight=False, soft_wrap=True)
    return command


def create_server_connection(
    store: ConnectionStore,
    user: str = None,
    ip: str = None,
    key_path: str = None,
    port=None,
    alias: str = None,
) -> ServerConnection:
    """创建服务器连接，缺失的字段交互式输入"""
    user = user or prompts.text("User", _default_user())
    ip = ip or prompts.text("IP", DEFAULT_IP)
    key_path = key_path or prompts.text("Public key path", DEFAULT_KEY_PATH)
    port = port or prompts.text("Port", DEFAULT_PORT)
    alias = alias or prompts.text("Alias", DEFAULT_ALIAS)

    record = ServerConnection(user=user, ip=ip, key_path=key_path, port=port, alias=alias)
    store.add(record)
    display_message("ok", f"Server Connection created: {record.alias}", "green")
    return record


def delete_server_connection(
    store: ConnectionStore, alias: str = None, force: bool = True
) -> int:
    if not alias:
        alias, _ = prompts.select(store.aliases(), "Server connection to delete")

    if not force and not prompts.confirm(
        f"Are you sure you want to delete server connection '{alias}'?"
    ):
        console.print("[yellow]Operation cancelled[/yellow]")
        return 0

    deleted = store.delete(alias)
    if not deleted:
        raise ShecretError(f"Server connection '{alias}' not found")
    display_message("ok", f"Server Connection deleted: {alias}", "green")
    return deleted


def purge_database(store: ConnectionStore, force: bool = False) -> int:
    if not force and not prompts.confirm(
        "Are you sure you want to delete all server connections"
    ):
        return 0

    deleted = store.purge()
    display_message("ok", f"Deleted {deleted} server connection(s)", "green")
    return deleted


@click.command("list")
@click.pass_context
@handle_errors
def list_command(ctx):
    """Display all server connections"""
    display_connections(get_store(ctx))


@click.command("start")
@click.argument("alias", required=False)
@click.option(
    "--type",
    "-t",
    "connection_type",
    type=click.Choice([t.value for t in ConnectionType]),
    help="连接类型",
)
@click.option("--copy/--no-copy", default=True, help="是否写入剪贴板")
@click.pass_context
@handle_errors
def start_command(ctx, alias, connection_type, copy):
    """Start a connection (copy its ssh/sftp command)"""
    start_connection(get_store(ctx), alias, connection_type, copy)


@click.command("add")
@click.option("--user", "-u", help="用户名")
@click.option("--ip", "-i", help="服务器IP")
@click.option("--key-path", "-k", help="私钥文件路径")
@click.option("--port", "-p", type=click.IntRange(1, 65535), help="SSH端口")
@click.option("--alias", "-a", help="别名")
@click.pass_context
@handle_errors
def add_command(ctx, user, ip, key_path, port, alias):
    """Create a server connection"""
    create_server_connection(get_store(ctx), user, ip, key_path, port, alias)


@click.command("delete")
@click.argument("alias", required=False)
@click.option("--force", "-f", is_flag=True, help="强制删除，不询问确认")
@click.pass_context
@handle_errors
def delete_command(ctx, alias, force):
    """Delete a server connection"""
    delete_server_connection(get_store(ctx), alias, force)


@click.command("purge")
@click.option("--force", "-f", is_flag=True, help="强制删除，不询问确认")
@click.pass_context
@handle_errors
def purge_command(ctx, force):
    """Purge database (delete all server connections)"""
    purge_database(get_store(ctx), force)
