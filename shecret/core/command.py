"""SSH 命令拼装"""

from dataclasses import dataclass
from typing import Iterable, List

from shecret.core.models import ConnectionType, ServerConnection

DEFAULT_SSH_COMMAND = "hostname"


@dataclass
class BatchCommand:
    alias: str
    argv: List[str]
    command_line: str = ""


def build_command(profile: ServerConnection, action: str) -> str:
    """ssh -i <key_path> -p <port> <user>@<ip> <action>"""
    base = profile.get_command(ConnectionType.SSH.value)
    return f"{base} {action}" if action else base


def build_argv(profile: ServerConnection, action: str) -> List[str]:
    argv = [
        ConnectionType.SSH.value,
        "-i",
        profile.key_path,
        "-p",
        str(profile.port),
        profile.destination,
    ]
    # 远端命令作为单个参数传给 ssh，保持用户输入原样
    if action:
        argv.append(action)
    return argv


def build_batch(
    profiles: Iterable[ServerConnection], action: str
) -> List[BatchCommand]:
    return [
        BatchCommand(
            alias=profile.alias,
            argv=build_argv(profile, action),
            command_line=build_command(profile, action),
        )
        for profile in profiles
    ]
