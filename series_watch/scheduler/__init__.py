"""Scheduling helpers."""

from .apsched_adapter import CYCLE_JOB_ID, APSchedulerAdapter, build_trigger

__all__ = ["APSchedulerAdapter", "CYCLE_JOB_ID", "build_trigger"]
