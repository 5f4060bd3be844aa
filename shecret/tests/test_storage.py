import json
import sqlite3

import pytest
import yaml

from shecret.config.storage import TABLE, ConnectionStore, validate_connection
from shecret.core.models import ServerConnection
from shecret.errors import DuplicateAliasError, InvalidConnectionError


class TestValidateConnection:
    """测试连接校验"""

    @pytest.mark.parametrize("ip", ["10.0.0.1", "0.0.0.0", "::1", "fe80::1", " 192.168.1.1 "])
    def test_valid_ip(self, ip):
        validate_connection(ServerConnection(user="root", ip=ip, key_path=".", alias="a"))

    @pytest.mark.parametrize("ip", ["example.com", "10.0.0", "300.1.1.1", ""])
    def test_invalid_ip(self, ip):
        with pytest.raises(InvalidConnectionError, match="Invalid IP"):
            validate_connection(ServerConnection(user="root", ip=ip, key_path=".", alias="a"))

    @pytest.mark.parametrize("port", [0, 65536, "ssh", None])
    def test_invalid_port(self, port):
        with pytest.raises(InvalidConnectionError, match="Invalid port"):
            validate_connection(
                ServerConnection(user="root", ip="10.0.0.1", key_path=".", port=port, alias="a")
            )

    def test_port_as_string(self):
        validate_connection(
            ServerConnection(user="root", ip="10.0.0.1", key_path=".", port="2222", alias="a")
        )

    def test_empty_key_path(self):
        with pytest.raises(InvalidConnectionError, match="key_path"):
            validate_connection(ServerConnection(user="root", ip="10.0.0.1", key_path=" ", alias="a"))


class TestConnectionStore:
    """测试 ConnectionStore"""

    def test_creates_database(self, tmp_path):
        store = ConnectionStore(tmp_path / "nested" / "dir")
        assert store.db_path.exists()
        assert store.db_path.name == "shecret.db3"
        assert store.list() == []

    def test_add_and_list_in_insertion_order(self, filled_store):
        connections = filled_store.list()
        assert [c.alias for c in connections] == ["web", "db", "cache"]
        assert [c.id for c in connections] == sorted(c.id for c in connections)
        assert connections[1].port == 2222
        assert connections[1].user == "admin"

    def test_add_returns_id(self, store):
        connection = ServerConnection(user="root", ip="10.0.0.9", key_path=".", alias="x")
        new_id = store.add(connection)
        assert new_id == connection.id
        assert store.get("x").id == new_id

    def test_add_normalises_record(self, store):
        connection = ServerConnection(
            user=" root ", ip=" 10.0.0.9 ", key_path=".", port="2200", alias=" box "
        )
        store.add(connection)

        assert (connection.user, connection.ip, connection.port, connection.alias) == (
            "root",
            "10.0.0.9",
            2200,
            "box",
        )
        assert store.get("box") == connection

    def test_add_rejects_invalid_ip(self, store):
        with pytest.raises(InvalidConnectionError, match="Invalid IP: nope"):
            store.add(ServerConnection(user="root", ip="nope", key_path=".", alias="x"))
        assert store.list() == []

    def test_add_rejects_duplicate_alias(self, filled_store):
        with pytest.raises(DuplicateAliasError):
            filled_store.add(
                ServerConnection(user="root", ip="10.0.0.9", key_path=".", alias="web")
            )
        assert len(filled_store.list()) == 3

    def test_get_missing(self, filled_store):
        assert filled_store.get("missing") is None

    def test_aliases(self, filled_store):
        assert filled_store.aliases() == ["web", "db", "cache"]

    def test_select_uses_given_order(self, filled_store):
        selected = filled_store.select(["cache", "missing", "web"])
        assert [c.alias for c in selected] == ["cache", "web"]

    def test_delete(self, filled_store):
        assert filled_store.delete("db") == 1
        assert filled_store.aliases() == ["web", "cache"]
        assert filled_store.delete("db") == 0

    def test_purge(self, filled_store):
        assert filled_store.purge() == 3
        assert filled_store.list() == []
        assert filled_store.purge() == 0

    def test_reads_legacy_string_ports(self, store):
        # 旧版本数据库中端口按字符串保存，且允许重复别名
        conn = sqlite3.connect(store.db_path)
        conn.execute(
            f"INSERT INTO {TABLE} (user, ip, key_path, port, alias) VALUES (?, ?, ?, ?, ?)",
            ("root", "10.0.0.1", ".", "22", "dup"),
        )
        conn.execute(
            f"INSERT INTO {TABLE} (user, ip, key_path, port, alias) VALUES (?, ?, ?, ?, ?)",
            ("root", "10.0.0.2", ".", "22", "dup"),
        )
        conn.commit()
        conn.close()

        assert store.get("dup").ip == "10.0.0.1"
        assert store.get("dup").port == 22
        assert [c.ip for c in store.select(["dup"])] == ["10.0.0.1"]
        assert store.delete("dup") == 2


class TestImportExport:
    """测试导入导出"""

    def test_export_yaml(self, filled_store, tmp_path):
        output = tmp_path / "connections.yaml"
        assert filled_store.export_config(output) == 3

        data = yaml.safe_load(output.read_text())
        assert [c["alias"] for c in data["connections"]] == ["web", "db", "cache"]
        assert "id" not in data["connections"][0]
        assert data["connections"][1]["port"] == 2222

    def test_export_json(self, filled_store, tmp_path):
        output = tmp_path / "connections.json"
        filled_store.export_config(output, "json")

        data = json.loads(output.read_text())
        assert data["connections"][2]["ip"] == "::1"

    @pytest.mark.parametrize("suffix, fmt", [(".yaml", "yaml"), (".json", "json")])
    def test_import_into_empty_store(self, filled_store, tmp_path, suffix, fmt):
        output = tmp_path / f"connections{suffix}"
        filled_store.export_config(output, fmt)

        target = ConnectionStore(tmp_path / "other")
        report = target.import_config(output)

        assert report == {"imported": ["web", "db", "cache"], "skipped": []}
        assert [c.alias for c in target.list()] == ["web", "db", "cache"]
        assert target.get("db").key_path == "~/.ssh/db"

    def test_import_skips_existing_and_invalid(self, filled_store, tmp_path):
        source = tmp_path / "connections.yaml"
        source.write_text(
            yaml.dump(
                {
                    "connections": [
                        {"user": "root", "ip": "10.0.0.1", "key_path": ".", "alias": "web"},
                        {"user": "root", "ip": "bad-ip", "key_path": ".", "alias": "bad"},
                        {"user": "root", "ip": "10.0.0.7", "key_path": ".", "alias": "new"},
                        {"user": "root", "alias": "incomplete"},
                    ]
                }
            )
        )

        report = filled_store.import_config(source)

        assert report["imported"] == ["new"]
        assert report["skipped"] == ["web", "bad", "incomplete"]
        assert filled_store.get("new").port == 22

    def test_import_plain_list(self, store, tmp_path):
        source = tmp_path / "connections.json"
        source.write_text(
            json.dumps([{"user": "u", "ip": "10.1.1.1", "key_path": "k", "port": 2200, "alias": "a"}])
        )

        assert store.import_config(source)["imported"] == ["a"]
        assert store.get("a").port == 2200

    def test_import_empty_file(self, store, tmp_path):
        source = tmp_path / "empty.yaml"
        source.write_text("")
        assert store.import_config(source) == {"imported": [], "skipped": []}

    @pytest.mark.parametrize(
        "name, content",
        [
            ("broken.yaml", "connections: [ {user: a"),
            ("broken.json", '{"connections": ['),
        ],
    )
    def test_import_malformed_file(self, store, tmp_path, name, content):
        source = tmp_path / name
        source.write_text(content)

        with pytest.raises(InvalidConnectionError, match="Cannot read"):
            store.import_config(source)
        assert store.list() == []

    def test_import_non_utf8_file(self, store, tmp_path):
        source = tmp_path / "latin1.yaml"
        source.write_bytes(b"connections:\n  - user: \xe9\xff\n")

        with pytest.raises(InvalidConnectionError, match="Cannot read"):
            store.import_config(source)


class TestLegacyDatabase:
    """测试旧位置数据库的迁移"""

    @pytest.fixture
    def locations(self, tmp_path, monkeypatch):
        from shecret.config import storage

        legacy = tmp_path / "home" / "shecret.db3"
        default_dir = tmp_path / "home" / ".shecret"
        legacy.parent.mkdir()
        monkeypatch.setattr(storage, "LEGACY_DB_PATH", legacy)
        monkeypatch.setattr(storage, "DEFAULT_CONFIG_DIR", default_dir)
        return legacy, default_dir

    def test_copies_legacy_database(self, locations, sample_connections):
        legacy, default_dir = locations
        old = ConnectionStore(legacy.parent, db_name=legacy.name)
        old.add(sample_connections[0])

        store = ConnectionStore()

        assert store.db_path == default_dir / "shecret.db3"
        assert store.aliases() == ["web"]
        assert legacy.exists()

    def test_keeps_existing_default_database(self, locations, sample_connections):
        legacy, default_dir = locations
        ConnectionStore(legacy.parent, db_name=legacy.name).add(sample_connections[0])
        ConnectionStore(default_dir).add(sample_connections[1])

        assert ConnectionStore().aliases() == ["db"]

    def test_explicit_directory_ignores_legacy_database(self, locations, sample_connections, tmp_path):
        legacy, _ = locations
        ConnectionStore(legacy.parent, db_name=legacy.name).add(sample_connections[0])

        assert ConnectionStore(tmp_path / "custom").list() == []
