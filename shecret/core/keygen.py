"""SSH 密钥生成"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import paramiko
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from shecret.errors import KeyExistsError, ShecretError

logger = logging.getLogger(__name__)

KDF_ROUNDS = 100


@dataclass
class GeneratedKey:
    private_path: Path
    public_path: Path
    public_key: str
    fingerprint: str


def create_key(
    name: str,
    directory: Union[str, Path] = ".",
    passphrase: Optional[str] = None,
    comment: Optional[str] = None,
    rounds: int = KDF_ROUNDS,
) -> GeneratedKey:
    """生成 OpenSSH 格式的 ed25519 密钥对，等价于
    ``ssh-keygen -a 100 -t ed25519 -f <name> -C <name>``
    """
    if not name:
        raise ShecretError("SSH key name must not be empty")

    directory = Path(directory)
    private_path = directory / name
    public_path = private_path.with_name(f"{private_path.name}.pub")
    for path in (private_path, public_path):
        if path.exists():
            raise KeyExistsError(path)

    key = Ed25519PrivateKey.generate()
    if passphrase:
        encryption = (
            serialization.PrivateFormat.OpenSSH.encryption_builder()
            .kdf_rounds(rounds)
            .build(passphrase.encode("utf-8"))
        )
    else:
        encryption = serialization.NoEncryption()

    private_bytes = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.OpenSSH,
        encryption_algorithm=encryption,
    )
    public_key = key.public_key().public_bytes(
        encoding=serialization.Encoding.OpenSSH,
        format=serialization.PublicFormat.OpenSSH,
    ).decode("ascii")
    public_line = f"{public_key} {comment or name}"

    try:
        directory.mkdir(parents=True, exist_ok=True)
        fd = os.open(private_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(fd, "wb") as f:
            f.write(private_bytes)
        with open(public_path, "w") as f:
            f.write(public_line + "\n")

        # 用 paramiko 回读一次，确认密钥可被 ssh 客户端加载
        loaded = paramiko.Ed25519Key(filename=str(private_path), password=passphrase)
        fingerprint = loaded.fingerprint
    except (OSError, paramiko.SSHException) as e:
        for path in (private_path, public_path):
            if path.exists():
                path.unlink()
        raise ShecretError(f"Error creating SSH key: {e}") from e

    logger.info(f"SSH key created: {private_path} ({fingerprint})")
    return GeneratedKey(
        private_path=private_path,
        public_path=public_path,
        public_key=public_line,
        fingerprint=fingerprint,
    )
