"""交互式输入"""

from typing import List, Sequence, Tuple

import click
from rich.console import Console

from shecret.errors import NoChoicesError

console = Console()


def confirm(question: str, default: bool = True) -> bool:
    return click.confirm(question, default=default)


def text(prompt: str, default: str = None) -> str:
    return click.prompt(prompt, default=default, type=str)


def _print_items(items: Sequence[str], title: str):
    console.print(f"[bold]{title}[/bold]")
    for index, item in enumerate(items, start=1):
        console.print(f"  [cyan]{index:>2}[/cyan]. {item}")


def select(items: Sequence[str], title: str) -> Tuple[str, int]:
    """单选，返回 (条目, 下标)"""
    if not items:
        raise NoChoicesError(f"Nothing to choose for: {title}")

    _print_items(items, title)
    choice = click.prompt(
        title, default=1, type=click.IntRange(1, len(items)), show_default=True
    )
    return items[choice - 1], choice - 1


def parse_selection(answer: str, size: int) -> List[int]:
    """解析多选输入，例如 ``1,3-5`` 或 ``all``，返回去重后的下标"""
    answer = answer.strip().lower()
    if answer in ("all", "*"):
        return list(range(size))

    indexes: List[int] = []
    for part in answer.replace(" ", "").split(","):
        if not part:
            continue
        if "-" in part:
            start, end = part.split("-", 1)
            numbers = range(int(start), int(end) + 1)
        else:
            numbers = [int(part)]

        for number in numbers:
            if not 1 <= number <= size:
                raise ValueError(f"{number} is out of range 1-{size}")
            if number - 1 not in indexes:
                indexes.append(number - 1)

    return indexes


def multi_select(items: Sequence[str], title: str) -> List[str]:
    """多选，返回选中的条目（按选择顺序）"""
    if not items:
        raise NoChoicesError(f"Nothing to choose for: {title}")

    _print_items(items, title)
    while True:
        answer = click.prompt(f"{title} (e.g. 1,3-4 or all)", default="", show_default=False)
        try:
            return [items[i] for i in parse_selection(answer, len(items))]
        except ValueError as e:
            console.print(f"[red]Invalid selection: {e}[/red]")
