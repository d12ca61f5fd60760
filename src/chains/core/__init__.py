from chains.core.pipeline import Pipeline, Stage
from chains.core.state import CommandState, Handler

__all__ = [
    # Pipeline
    "Pipeline",
    "Stage",
    # State types
    "CommandState",
    "Handler",
]
