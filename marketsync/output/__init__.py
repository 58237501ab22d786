# Marketsync Output Module
# Rich console output

from marketsync.output.console import Console, create_console

__all__ = [
    "Console",
    "create_console",
]
