import shlex
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ConnectionType(Enum):
    SSH = "ssh"
    SFTP = "sftp"

    @classmethod
    def parse(cls, text: Optional[str]) -> "ConnectionType":
        """除 ssh 以外的任何输入都视为 sftp"""
        if not text or text.strip().lower() == cls.SSH.value:
            return cls.SSH
        return cls.SFTP


def quote_path(path: str) -> str:
    """按 shell 规则转义路径，保留开头的 ~/ 以便展开"""
    if path.startswith("~/"):
        return "~/" + shlex.quote(path[2:])
    return shlex.quote(path)


class DispatchStatus(Enum):
    SUCCESS = "success"
    ERROR = "error"
    TIMEOUT = "timeout"


class ReachabilityStatus(Enum):
    ONLINE = "online"
    OFFLINE = "offline"


@dataclass
class ServerConnection:
    """服务器连接记录"""

    user: str
    ip: str
    key_path: str
    port: int = 22
    alias: str = ""
    id: Optional[int] = None

    def __post_init__(self):
        # 别名为空时复用 user@ip
        if not self.alias:
            self.alias = self.destination

    @property
    def destination(self) -> str:
        return f"{self.user}@{self.ip}"

    def get_command(self, program: str) -> str:
        return (
            f"{program} -i {quote_path(self.key_path)} "
            f"-p {self.port} {self.destination}"
        )


@dataclass
class DispatchResult:
    """单台服务器的命令下发结果"""

    alias: str
    command: str
    status: DispatchStatus = field(metadata={"by_value": True})
    stdout: str = ""
    stderr: str = ""
    exit_code: Optional[int] = None
    error_message: str = ""
    execution_time: float = 0.0


@dataclass
class ReachabilityResult:
    alias: str
    ip: str
    status: ReachabilityStatus = field(
        default=ReachabilityStatus.OFFLINE, metadata={"by_value": True}
    )
    response_time: float = 0.0
    error_message: str = ""


@dataclass
class StatusReport:
    """在线/离线两组别名"""

    online: List[str] = field(default_factory=list)
    offline: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.online) + len(self.offline)
