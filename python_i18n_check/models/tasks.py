"""
Task structures used by the stage runner.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Awaitable, Callable, Dict, List

from .messages import MessageCatalog

if TYPE_CHECKING:
    from ..services.error_reporter import ErrorReporter


@dataclass
class RunContext:
    """State shared by all sub-tasks of one run."""
    reporter: ErrorReporter
    # One catalog per domain, filled by the extraction stage
    catalogs: Dict[str, MessageCatalog] = field(default_factory=dict)


@dataclass
class SubTask:
    """Smallest schedulable unit of work inside a stage."""
    title: str
    run: Callable[[RunContext], Awaitable[None]]


@dataclass
class Stage:
    """One phase of a run.

    build is called when the stage starts so that it can see what earlier
    stages left in the context.
    """
    title: str
    build: Callable[[RunContext], List[SubTask]]
    concurrent: bool = False
    exit_on_error: bool = False
    enabled: bool = True
