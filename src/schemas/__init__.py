from .command import CommandKind, LogicalCommand

__all__ = [
    "CommandKind",
    "LogicalCommand",
]
