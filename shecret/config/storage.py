"""连接配置存储管理"""

import ipaddress
import json
import logging
import shutil
import sqlite3
from contextlib import contextmanager
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from shecret.core.models import ServerConnection
from shecret.errors import DuplicateAliasError, InvalidConnectionError

logger = logging.getLogger(__name__)

TABLE = "server_connections"
DEFAULT_CONFIG_DIR = Path.home() / ".shecret"
DB_NAME = "shecret.db3"
# 早期版本把数据库放在家目录下
LEGACY_DB_PATH = Path.home() / DB_NAME

# 另一个进程持有写锁时短暂重试
_retry_locked = retry(
    retry=retry_if_exception_type(sqlite3.OperationalError),
    stop=stop_after_attempt(3),
    wait=wait_fixed(0.2),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)


def validate_connection(connection: ServerConnection) -> None:
    """校验连接字段，不合法时抛出 InvalidConnectionError"""
    try:
        ipaddress.ip_address(str(connection.ip).strip())
    except ValueError:
        raise InvalidConnectionError(f"Invalid IP: {connection.ip}")

    try:
        port = int(connection.port)
    except (TypeError, ValueError):
        raise InvalidConnectionError(f"Invalid port: {connection.port}")
    if not 1 <= port <= 65535:
        raise InvalidConnectionError(f"Invalid port: {connection.port}")

    for name in ("user", "key_path", "alias"):
        if not str(getattr(connection, name) or "").strip():
            raise InvalidConnectionError(f"{name} must not be empty")


class ConnectionStore:
    """服务器连接存储（SQLite）"""

    def __init__(self, config_dir: Path = None, db_name: str = DB_NAME):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.db_path = self.config_dir / db_name
        if config_dir is None:
            self._migrate_legacy_database()
        self._init_database()

    def _migrate_legacy_database(self):
        """默认位置没有数据库时，复制旧位置的数据库"""
        if self.db_path.exists() or not LEGACY_DB_PATH.is_file():
            return
        shutil.copy2(LEGACY_DB_PATH, self.db_path)
        logger.info(f"Copied legacy database {LEGACY_DB_PATH} to {self.db_path}")

    @_retry_locked
    def _init_database(self):
        """初始化数据库"""
        with self._get_connection() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {TABLE} (
                    id INTEGER PRIMARY KEY,
                    user VARCHAR(255) NOT NULL,
                    ip VARCHAR(255) NOT NULL,
                    key_path VARCHAR(255) NOT NULL,
                    port VARCHAR(5) NOT NULL,
                    alias VARCHAR(255) NOT NULL
                )
            """
            )
            conn.commit()

    @contextmanager
    def _get_connection(self):
        """获取数据库连接"""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    @_retry_locked
    def add(self, connection: ServerConnection) -> int:
        """添加服务器连接"""
        validate_connection(connection)
        connection.user = connection.user.strip()
        connection.ip = str(connection.ip).strip()
        connection.port = int(connection.port)
        connection.alias = connection.alias.strip()
        if self.get(connection.alias):
            raise DuplicateAliasError(connection.alias)

        with self._get_connection() as conn:
            cursor = conn.execute(
                f"""
                INSERT INTO {TABLE} (user, ip, key_path, port, alias)
                VALUES (?, ?, ?, ?, ?)
            """,
                (
                    connection.user,
                    connection.ip,
                    connection.key_path,
                    str(connection.port),
                    connection.alias,
                ),
            )
            conn.commit()
            connection.id = cursor.lastrowid

        logger.info(f"Server connection created: {connection.alias}")
        return connection.id

    @_retry_locked
    def get(self, alias: str) -> Optional[ServerConnection]:
        """按别名获取服务器连接"""
        with self._get_connection() as conn:
            row = conn.execute(
                f"SELECT * FROM {TABLE} WHERE alias = ? ORDER BY id LIMIT 1", (alias,)
            ).fetchone()

            if not row:
                return None

            return self._row_to_connection(row)

    @_retry_locked
    def list(self) -> List[ServerConnection]:
        """按创建顺序列出所有服务器连接"""
        with self._get_connection() as conn:
            rows = conn.execute(f"SELECT * FROM {TABLE} ORDER BY id").fetchall()

            return [self._row_to_connection(row) for row in rows]

    def aliases(self) -> List[str]:
        return [connection.alias for connection in self.list()]

    def select(self, aliases: List[str]) -> List[ServerConnection]:
        """按给定别名顺序挑选服务器连接，未知别名忽略"""
        by_alias: Dict[str, ServerConnection] = {}
        for connection in self.list():
            by_alias.setdefault(connection.alias, connection)

        return [by_alias[alias] for alias in aliases if alias in by_alias]

    @_retry_locked
    def delete(self, alias: str) -> int:
        """按别名删除服务器连接"""
        with self._get_connection() as conn:
            cursor = conn.execute(f"DELETE FROM {TABLE} WHERE alias = ?", (alias,))
            conn.commit()
            deleted = cursor.rowcount

        logger.info(f"Deleted {deleted} server connection(s) with alias {alias}")
        return deleted

    @_retry_locked
    def purge(self) -> int:
        """删除所有服务器连接"""
        with self._get_connection() as conn:
            cursor = conn.execute(f"DELETE FROM {TABLE}")
            conn.commit()
            deleted = cursor.rowcount

        logger.info(f"Purged {deleted} server connection(s)")
        return deleted

    # 辅助方法
    def _row_to_connection(self, row) -> ServerConnection:
        """数据库行转换为服务器连接"""
        port = row["port"]
        try:
            port = int(port)
        except (TypeError, ValueError):
            # 旧数据中端口按字符串保存
            pass

        return ServerConnection(
            id=row["id"],
            user=row["user"],
            ip=row["ip"],
            key_path=row["key_path"],
            port=port,
            alias=row["alias"],
        )

    # 导入导出方法
    def export_config(self, output_file: Path, format: str = "yaml") -> int:
        """导出所有服务器连接，返回导出的条数"""
        connections = self.list()
        data = {
            "connections": [
                {k: v for k, v in asdict(c).items() if k != "id"} for c in connections
            ]
        }

        with open(output_file, "w") as f:
            if format.lower() == "json":
                json.dump(data, f, indent=2, ensure_ascii=False)
            else:  # yaml
                yaml.dump(data, f, indent=2, allow_unicode=True, sort_keys=False)

        return len(connections)

    def import_config(self, input_file: Path) -> Dict[str, List[str]]:
        """导入服务器连接，已存在或不合法的条目会被跳过"""
        input_file = Path(input_file)
        try:
            with open(input_file, "r", encoding="utf-8") as f:
                if input_file.suffix.lower() == ".json":
                    data = json.load(f)
                else:  # yaml
                    data = yaml.safe_load(f)
        except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidConnectionError(f"Cannot read {input_file}: {e}")

        report: Dict[str, List[str]] = {"imported": [], "skipped": []}
        for item in self._connection_items(data):
            try:
                connection = ServerConnection(
                    user=item["user"],
                    ip=item["ip"],
                    key_path=item["key_path"],
                    port=item.get("port", 22),
                    alias=item.get("alias", ""),
                )
                self.add(connection)
                report["imported"].append(connection.alias)
            except (KeyError, TypeError, InvalidConnectionError, DuplicateAliasError) as e:
                alias = item.get("alias", "?") if isinstance(item, dict) else "?"
                logger.warning(f"Failed to import server connection {alias}: {e}")
                report["skipped"].append(alias)

        return report

    @staticmethod
    def _connection_items(data: Any) -> List[Dict[str, Any]]:
        if not data:
            return []
        if isinstance(data, dict):
            return data.get("connections") or []
        if isinstance(data, list):
            return data
        raise InvalidConnectionError("Unsupported configuration file layout")
