"""
Run context management using ContextVar so every log line of a rebalance run
can carry its identity.
"""

from contextvars import ContextVar
from dataclasses import dataclass
from typing import Optional


@dataclass
class RunInfo:
    run_id: str
    source: str
    strategy: Optional[str] = None


current_run: ContextVar[Optional[RunInfo]] = ContextVar('current_run', default=None)


def set_current_run(run: RunInfo) -> None:
    """Set the current run in the context."""
    current_run.set(run)


def get_current_run() -> Optional[RunInfo]:
    """Get the current run from the context."""
    return current_run.get()


def clear_current_run() -> None:
    """Clear the current run from the context."""
    current_run.set(None)
