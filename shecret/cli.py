"""主命令行接口"""

import logging
from pathlib import Path

import click

import shecret
from shecret.commands.common import get_store
from shecret.commands import (
    add_command,
    delete_command,
    exec_command,
    export_command,
    import_command,
    keygen_command,
    list_command,
    menu_command,
    purge_command,
    start_command,
    status_command,
    version_command,
)
from shecret.commands.menu import run_menu

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def setup_logging(level: str = "WARNING"):
    """为 shecret 日志器挂载一个输出到 stderr 的 handler"""
    logger = logging.getLogger("shecret")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s [%(name)s][%(levelname)s] %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
    return logger


@click.group(invoke_without_command=True)
@click.version_option(version=shecret.__version__)
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    envvar="SHECRET_HOME",
    help="配置目录路径 (默认 ~/.shecret)",
)
@click.option(
    "--log-level",
    "-l",
    default="WARNING",
    envvar="SHECRET_LOG_LEVEL",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="日志级别",
)
@click.pass_context
def cli(ctx, config_dir, log_level):
    """shecret - SSH/SFTP connection manager

    Save server connections, copy their ssh/sftp command lines, issue one
    command to many servers and check which of them are online. Run
    without a command for the interactive menu.
    """
    setup_logging(log_level.upper())
    ctx.ensure_object(dict)
    if config_dir:
        ctx.obj["config_dir"] = Path(config_dir).expanduser()

    if ctx.invoked_subcommand is None:
        run_menu(get_store(ctx))


# 注册子命令
cli.add_command(menu_command, name="menu")
cli.add_command(list_command, name="list")
cli.add_command(start_command, name="start")
cli.add_command(add_command, name="add")
cli.add_command(delete_command, name="delete")
cli.add_command(purge_command, name="purge")
cli.add_command(keygen_command, name="keygen")
cli.add_command(exec_command, name="exec")
cli.add_command(status_command, name="status")
cli.add_command(export_command, name="export")
cli.add_command(import_command, name="import")
cli.add_command(version_command, name="version")


def main():
    """主入口函数"""
    cli()


if __name__ == "__main__":
    main()
