"""交互式菜单"""

import logging

import click
from rich.console import Console

import shecret
from shecret.commands.common import get_store
from shecret.commands.connection import (
    create_server_connection,
    delete_server_connection,
    display_connections,
    purge_database,
    start_connection,
)
from shecret.commands.execute import issue_command
from shecret.commands.key import create_ssh_key
from shecret.commands.ping import check_server_status
from shecret.config.storage import ConnectionStore
from shecret.errors import ShecretError
from shecret.ui import prompts
from shecret.ui.formatter import display_message

logger = logging.getLogger(__name__)

CHOICES = [
    "Display all server connections",
    "Start a connection",
    "Create a server connection",
    "Delete a server connection",
    "Purge database (delete all server connections)",
    "Create SSH key",
    "Issue SSH command to multiple servers",
    "Check server status (online/offline)",
    "Exit",
]

# 与 CHOICES 顺序一一对应，最后一项为退出
ACTIONS = [
    display_connections,
    start_connection,
    create_server_connection,
    delete_server_connection,
    purge_database,
    lambda store: create_ssh_key(),
    issue_command,
    check_server_status,
]


def print_banner(store: ConnectionStore):
    console = Console()
    console.print(
        f"\n{shecret.__name__.upper()} - {shecret.__description__}\n"
        f"Authors: {shecret.__author__}\n"
        f"Version: {shecret.__version__}\n"
        f"License: {shecret.__license__}\n"
        f"Database path: {store.db_path}\n",
        highlight=False,
        markup=False,
        soft_wrap=True,
    )


def run_menu(store: ConnectionStore):
    """循环显示菜单直到选择 Exit"""
    print_banner(store)

    while True:
        _, index = prompts.select(CHOICES, "Option")
        if index >= len(ACTIONS):
            break

        try:
            ACTIONS[index](store)
        except ShecretError as e:
            logger.debug(f"Menu action '{CHOICES[index]}' failed: {e}")
            display_message("error", str(e), "red")


@click.command("menu")
@click.pass_context
def menu_command(ctx):
    """Interactive menu (default when no command is given)"""
    run_menu(get_store(ctx))
