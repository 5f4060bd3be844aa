"""命令行命令模块"""

from .config import export_command, import_command
from .connection import (
    add_command,
    delete_command,
    list_command,
    purge_command,
    start_command,
)
from .execute import exec_command
from .key import keygen_command
from .menu import menu_command
from .ping import status_command
from .version import version_command

__all__ = [
    "add_command",
    "delete_command",
    "exec_command",
    "export_command",
    "import_command",
    "keygen_command",
    "list_command",
    "menu_command",
    "purge_command",
    "start_command",
    "status_command",
    "version_command",
]
