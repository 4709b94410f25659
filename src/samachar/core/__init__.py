"""Core pipeline logic."""

from samachar.core.classifier import Classification, classify
from samachar.core.orchestrator import (
    CycleOrchestrator,
    CycleReport,
    CycleState,
    get_orchestrator,
    set_orchestrator,
)
from samachar.core.pipeline import ArticlePipeline, ProcessOutcome
from samachar.core.store import ArticleStore
from samachar.core.task_queue import TaskQueue

__all__ = [
    "ArticlePipeline",
    "ArticleStore",
    "Classification",
    "CycleOrchestrator",
    "CycleReport",
    "CycleState",
    "ProcessOutcome",
    "TaskQueue",
    "classify",
    "get_orchestrator",
    "set_orchestrator",
]
