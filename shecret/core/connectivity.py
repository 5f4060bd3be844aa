"""连通性检测模块"""

import subprocess
import sys
import time
import logging
from typing import Callable, List

from shecret.core.models import (
    ReachabilityResult,
    ReachabilityStatus,
    ServerConnection,
    StatusReport,
)

logger = logging.getLogger(__name__)


def ping_argv(ip: str, count: int = 2, timeout: int = 2, platform: str = None) -> List[str]:
    """按操作系统拼装 ping 参数"""
    platform = platform or sys.platform
    if platform.startswith("win"):
        # Windows 的 -w 单位为毫秒
        return ["ping", "-n", str(count), "-w", str(timeout * 1000), ip]
    if platform == "darwin":
        return ["ping", "-c", str(count), "-t", str(count * timeout), "-q", ip]
    return ["ping", "-c", str(count), "-W", str(timeout), "-q", ip]


class ReachabilityChecker:
    """逐台 ping 服务器，按退出码区分在线/离线"""

    def __init__(self, count: int = 2, timeout: int = 2, progress_callback: Callable = None):
        self.count = count
        self.timeout = timeout
        self.progress_callback = progress_callback

    def check_all(self, profiles: List[ServerConnection]) -> List[ReachabilityResult]:
        results = []
        total = len(profiles)

        for completed, profile in enumerate(profiles, start=1):
            result = self.check(profile)
            results.append(result)

            if self.progress_callback:
                self.progress_callback(completed, total, result)

        return results

    def check(self, profile: ServerConnection) -> ReachabilityResult:
        result = ReachabilityResult(alias=profile.alias, ip=profile.ip)
        argv = ping_argv(profile.ip, self.count, self.timeout)
        start_time = time.time()

        try:
            completed = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=self._guard_timeout,
            )
            if completed.returncode == 0:
                result.status = ReachabilityStatus.ONLINE
            else:
                result.error_message = f"ping exited with code {completed.returncode}"

        except subprocess.TimeoutExpired:
            result.error_message = f"ping timeout after {self._guard_timeout}s"

        except OSError as e:
            result.error_message = str(e)
            logger.error(f"Failed to run ping for {profile.alias}: {e}")

        finally:
            result.response_time = time.time() - start_time

        logger.debug(f"{profile.alias} ({profile.ip}) is {result.status.value}")
        return result

    @property
    def _guard_timeout(self) -> float:
        # ping 自身的超时之外再留出余量
        return float(self.count * self.timeout + 5)


def build_report(results: List[ReachabilityResult]) -> StatusReport:
    report = StatusReport()
    for result in results:
        if result.status == ReachabilityStatus.ONLINE:
            report.online.append(result.alias)
        else:
            report.offline.append(result.alias)
    return report
