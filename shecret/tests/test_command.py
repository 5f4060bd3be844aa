import pytest

from shecret.core.command import build_argv, build_batch, build_command
from shecret.core.models import ConnectionType, ServerConnection


class TestServerConnection:
    """测试 ServerConnection"""

    def test_get_command(self):
        connection = ServerConnection(
            user="root", ip="10.0.0.1", key_path="~/.ssh/id", port=2222, alias="web"
        )
        assert connection.get_command("ssh") == "ssh -i ~/.ssh/id -p 2222 root@10.0.0.1"
        assert connection.get_command("sftp").startswith("sftp -i ")

    def test_get_command_plain_key_path(self):
        connection = ServerConnection(user="root", ip="10.0.0.1", key_path="/keys/id")
        assert connection.get_command("ssh") == "ssh -i /keys/id -p 22 root@10.0.0.1"

    def test_default_alias(self):
        connection = ServerConnection(user="root", ip="10.0.0.1", key_path=".")
        assert connection.alias == "root@10.0.0.1"

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("ssh", ConnectionType.SSH),
            ("SSH ", ConnectionType.SSH),
            ("", ConnectionType.SSH),
            (None, ConnectionType.SSH),
            ("1", ConnectionType.SFTP),
            ("sftp", ConnectionType.SFTP),
            ("anything", ConnectionType.SFTP),
        ],
    )
    def test_connection_type_parse(self, text, expected):
        assert ConnectionType.parse(text) == expected


class TestBuildCommand:
    """测试命令拼装"""

    def test_build_command(self, sample_connections):
        web = sample_connections[0]
        assert build_command(web, "uptime") == "ssh -i ~/.ssh/web -p 22 root@10.0.0.1 uptime"

    def test_build_command_without_action(self, sample_connections):
        db = sample_connections[1]
        assert build_command(db, "") == db.get_command("ssh")

    def test_build_argv_keeps_action_as_one_argument(self, sample_connections):
        cache = sample_connections[2]
        argv = build_argv(cache, "df -h | grep '/data'")
        assert argv == [
            "ssh",
            "-i",
            "/keys/cache key",
            "-p",
            "22",
            "ops@::1",
            "df -h | grep '/data'",
        ]

    def test_build_batch_preserves_order(self, sample_connections):
        batch = build_batch(reversed(sample_connections), "hostname")
        assert [c.alias for c in batch] == ["cache", "db", "web"]
        assert batch[-1].command_line == "ssh -i ~/.ssh/web -p 22 root@10.0.0.1 hostname"
        assert batch[-1].argv[-1] == "hostname"

    def test_build_batch_empty(self):
        assert build_batch([], "hostname") == []

    def test_build_command_quotes_key_path(self, sample_connections):
        cache = sample_connections[2]
        assert build_command(cache, "uptime") == "ssh -i '/keys/cache key' -p 22 ops@::1 uptime"
