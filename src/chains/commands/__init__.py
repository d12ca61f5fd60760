from chains.commands.plugin import SearchPlugin
from chains.commands.registry import CommandRegistry

__all__ = [
    "CommandRegistry",
    "SearchPlugin",
]
