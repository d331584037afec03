"""
Console Output

Shared rich console for user-facing lines. Diagnostics go through
``logging`` instead.
"""

from rich.console import Console

console = Console(highlight=False)


def print_line(message: str, output: Console | None = None) -> None:
    """Print one plain line, never wrapped and never parsed as markup."""
    (output or console).print(message, markup=False, soft_wrap=True)
