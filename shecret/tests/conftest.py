import logging
import subprocess
import threading

import pytest
from click.testing import CliRunner

from shecret.config.storage import ConnectionStore
from shecret.core.models import ServerConnection


@pytest.fixture
def store(tmp_path) -> ConnectionStore:
    return ConnectionStore(tmp_path / "config")


@pytest.fixture
def sample_connections():
    return [
        ServerConnection(user="root", ip="10.0.0.1", key_path="~/.ssh/web", port=22, alias="web"),
        ServerConnection(user="admin", ip="10.0.0.2", key_path="~/.ssh/db", port=2222, alias="db"),
        ServerConnection(user="ops", ip="::1", key_path="/keys/cache key", port=22, alias="cache"),
    ]


@pytest.fixture
def filled_store(store, sample_connections) -> ConnectionStore:
    for connection in sample_connections:
        store.add(connection)
    return store


@pytest.fixture
def runner():
    return CliRunner()


class FakeRun:
    """记录 subprocess.run 调用并按 argv 返回预设结果"""

    def __init__(self, returncodes=None, stdout="", exc=None):
        self.calls = []
        self.threads = []
        self.returncodes = returncodes or {}
        self.stdout = stdout
        self.exc = exc

    def __call__(self, argv, **kwargs):
        self.calls.append((argv, kwargs))
        self.threads.append(threading.current_thread().name)
        if self.exc is not None:
            raise self.exc
        for needle, code in self.returncodes.items():
            if needle in argv:
                if isinstance(code, Exception):
                    raise code
                return subprocess.CompletedProcess(argv, code, stdout="", stderr="boom")
        return subprocess.CompletedProcess(argv, 0, stdout=self.stdout, stderr="")


@pytest.fixture
def fake_run(monkeypatch):
    def install(**kwargs):
        fake = FakeRun(**kwargs)
        monkeypatch.setattr(subprocess, "run", fake)
        return fake

    return install


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("shecret")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
