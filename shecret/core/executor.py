import subprocess
import threading
import time
from typing import Callable, List, Optional
import logging

from shecret.core.command import BatchCommand, build_batch
from shecret.core.models import DispatchResult, DispatchStatus, ServerConnection


class BatchExecutor:
    """批量命令执行器

    所有命令在同一个工作线程中按输入顺序依次执行，调用方等待线程结束后
    才拿到结果。单条命令失败不会中断后续命令，也不会重试。
    """

    def __init__(
        self, timeout: Optional[float] = 30.0, progress_callback: Callable = None
    ):
        self.timeout = timeout
        self.progress_callback = progress_callback
        self.logger = logging.getLogger(__name__)

    def run_batch(
        self, profiles: List[ServerConnection], action: str
    ) -> List[DispatchResult]:
        """向选定的服务器下发同一条命令"""
        return self.run_commands(build_batch(profiles, action))

    def run_commands(self, commands: List[BatchCommand]) -> List[DispatchResult]:
        results: List[DispatchResult] = []
        if not commands:
            return results

        worker = threading.Thread(
            target=self._worker,
            args=(commands, results),
            name="shecret-dispatch",
        )
        worker.start()
        worker.join()

        return results

    def _worker(self, commands: List[BatchCommand], results: List[DispatchResult]):
        total = len(commands)
        for completed, command in enumerate(commands, start=1):
            result = self._execute_single(command)
            results.append(result)

            if self.progress_callback:
                try:
                    self.progress_callback(completed, total, result)
                except Exception as e:
                    self.logger.error(f"Progress callback failed for {command.alias}: {e}")

    def _execute_single(self, command: BatchCommand) -> DispatchResult:
        """执行单条 ssh 命令"""

        result = DispatchResult(
            alias=command.alias,
            command=command.command_line,
            status=DispatchStatus.ERROR,
        )
        start_time = time.time()
        self.logger.debug(f"Dispatching to {command.alias}: {command.command_line}")

        try:
            completed = subprocess.run(
                command.argv,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
            result.stdout = completed.stdout or ""
            result.stderr = completed.stderr or ""
            result.exit_code = completed.returncode
            if completed.returncode == 0:
                result.status = DispatchStatus.SUCCESS
            else:
                result.error_message = f"Command exited with code {completed.returncode}"
                self.logger.warning(
                    f"Command on {command.alias} exited with {completed.returncode}"
                )

        except subprocess.TimeoutExpired:
            result.status = DispatchStatus.TIMEOUT
            result.error_message = f"Command timeout after {self.timeout}s"
            self.logger.warning(f"Timeout executing command on {command.alias}")

        except OSError as e:
            result.error_message = str(e)
            self.logger.error(f"Failed to start ssh for {command.alias}: {e}")

        except Exception as e:
            result.error_message = f"Unexpected error: {e}"
            self.logger.error(f"Unexpected error for {command.alias}: {e}")

        finally:
            result.execution_time = time.time() - start_time

        return result
