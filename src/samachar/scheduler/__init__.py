"""Scheduled jobs."""

from samachar.scheduler.tasks import create_scheduler, cycle_task, shutdown_scheduler

__all__ = ["create_scheduler", "cycle_task", "shutdown_scheduler"]
