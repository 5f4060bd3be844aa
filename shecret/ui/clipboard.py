import logging

import pyperclip

logger = logging.getLogger(__name__)


def set_clipboard(content: str) -> bool:
    """写入系统剪贴板，失败时返回 False"""
    try:
        pyperclip.copy(content)
    except pyperclip.PyperclipException as e:
        logger.warning(f"Clipboard is not available: {e}")
        return False
    return True
