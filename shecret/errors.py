"""异常定义"""


class ShecretError(Exception):
    """所有可向用户展示的错误的基类"""


class InvalidConnectionError(ShecretError):
    """连接配置字段不合法"""


class DuplicateAliasError(ShecretError):
    """别名已存在"""

    def __init__(self, alias: str):
        super().__init__(f"Server connection '{alias}' already exists")
        self.alias = alias


class KeyExistsError(ShecretError):
    """密钥文件已存在"""

    def __init__(self, path):
        super().__init__(f"SSH key {path} already exists")
        self.path = path


class NoChoicesError(ShecretError):
    """没有可供选择的条目"""
