"""shecret - SSH/SFTP connection manager"""

__version__ = "0.3.0"
__description__ = "SSH/SFTP connection manager"
__author__ = "shecret developers"
__license__ = "MIT"

from .core.command import build_command, build_batch
from .core.connectivity import ReachabilityChecker, build_report
from .core.executor import BatchExecutor
from .config.storage import ConnectionStore
from .core.models import (
    ConnectionType,
    DispatchResult,
    ReachabilityResult,
    ServerConnection,
    StatusReport,
)

__all__ = [
    "BatchExecutor",
    "ConnectionStore",
    "ConnectionType",
    "DispatchResult",
    "ReachabilityChecker",
    "ReachabilityResult",
    "ServerConnection",
    "StatusReport",
    "build_batch",
    "build_command",
    "build_report",
]
