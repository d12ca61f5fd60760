from chains.runnables.logging import command_record, tap

__all__ = [
    # Logging
    "tap",
    "command_record",
]
