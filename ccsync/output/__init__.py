# CCSync Output Module
# Rich console output and diff display

from ccsync.output.console import Console, ConsolePrompt, create_console
from ccsync.output.diff import render, show_diff

__all__ = [
    "Console",
    "ConsolePrompt",
    "create_console",
    "render",
    "show_diff",
]
