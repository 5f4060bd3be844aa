"""命令公共逻辑"""

import functools
import logging
from typing import List, Optional, Sequence

import click

from shecret.config.storage import ConnectionStore
from shecret.core.models import ServerConnection
from shecret.errors import ShecretError
from shecret.ui import prompts
from shecret.ui.formatter import display_message

logger = logging.getLogger(__name__)


def get_store(ctx: click.Context = None) -> ConnectionStore:
    """从 click 上下文获取（并缓存）连接存储"""
    ctx = ctx or click.get_current_context()
    obj = ctx.find_root().ensure_object(dict)
    if "store" not in obj:
        obj["store"] = ConnectionStore(obj.get("config_dir"))
    return obj["store"]


def handle_errors(func):
    """把 ShecretError 转换为错误提示和退出码 1"""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ShecretError as e:
            display_message("error", str(e), "red")
            raise click.exceptions.Exit(1)

    return wrapper


def choose_profiles(
    store: ConnectionStore,
    all_servers: Optional[bool],
    aliases: Sequence[str],
    question: str,
    title: str,
) -> List[ServerConnection]:
    """确定要操作的服务器

    指定了别名时直接按别名选择；否则根据 all_servers 或交互确认决定
    使用全部服务器还是多选。
    """
    if aliases and all_servers:
        raise click.UsageError("--all cannot be combined with --alias")

    records = store.list()

    if aliases:
        selected = store.select(list(aliases))
        unknown = [alias for alias in aliases if alias not in {r.alias for r in selected}]
        for alias in unknown:
            logger.warning(f"Unknown server connection: {alias}")
            display_message("warning", f"Unknown server connection: {alias}", "yellow")
        return selected

    if all_servers is None:
        all_servers = prompts.confirm(question)

    if all_servers:
        return records

    chosen = prompts.multi_select([r.alias for r in records], title)
    return store.select(chosen)
