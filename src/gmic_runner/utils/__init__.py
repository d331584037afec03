"""
Utility Modules
"""

from gmic_runner.utils.cancellation import CancellationBridge, CancellationToken
from gmic_runner.utils.console import console, print_line

__all__ = [
    "CancellationBridge",
    "CancellationToken",
    "console",
    "print_line",
]
