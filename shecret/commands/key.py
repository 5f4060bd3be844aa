"""SSH 密钥命令"""

import click

from shecret.commands.common import handle_errors
from shecret.core.keygen import GeneratedKey, create_key
from shecret.ui import prompts
from shecret.ui.formatter import console, display_message

DEFAULT_KEY_NAME = "sample"


def create_ssh_key(
    name: str = None, directory: str = ".", passphrase: str = None
) -> GeneratedKey:
    """在指定目录（默认当前目录）生成 SSH 密钥"""
    name = name or prompts.text("SSH key name", DEFAULT_KEY_NAME)
    key = create_key(name, directory, passphrase=passphrase)

    display_message("ok", f"SSH key created: {key.private_path}", "green")
    console.print(f"Fingerprint: {key.fingerprint}", highlight=False, markup=False)
    console.print(key.public_key, highlight=False, markup=False, soft_wrap=True)
    return key


@click.command("keygen")
@click.argument("name", required=False)
@click.option(
    "--directory",
    "-d",
    default=".",
    type=click.Path(file_okay=False),
    help="密钥保存目录",
)
@click.option("--passphrase", "-p", default=None, help="私钥口令")
@handle_errors
def keygen_command(name, directory, passphrase):
    """Create SSH key (ed25519)"""
    create_ssh_key(name, directory, passphrase)
