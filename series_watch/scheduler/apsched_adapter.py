"""Run the reconciliation cycle on an APScheduler schedule."""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.base import BaseTrigger
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from ..config import ScheduleConfig, ScheduleType
from ..logging_conf import configure_logging

CYCLE_JOB_ID = "watch::cycle"


def build_trigger(schedule: ScheduleConfig) -> BaseTrigger:
    """Translate a ``ScheduleConfig`` into an APScheduler trigger."""

    value = schedule.value
    if schedule.type is ScheduleType.CRON:
        return CronTrigger.from_crontab(str(value))
    if schedule.type is ScheduleType.INTERVAL:
        kwargs = value if isinstance(value, dict) else {"seconds": float(value)}
        return IntervalTrigger(**kwargs)
    if schedule.type is ScheduleType.ONCE:
        # No value means "as soon as the scheduler starts".
        run_date = datetime.fromisoformat(str(value)) if value else datetime.now()
        return DateTrigger(run_date=run_date)
    raise ValueError(f"Unknown schedule type: {schedule.type}")


class APSchedulerAdapter:
    """Own a blocking scheduler holding the single cycle job."""

    def __init__(self) -> None:
        self.scheduler = BlockingScheduler()
        self.logger = configure_logging().bind(component="scheduler")
        self.started = False

    def schedule_cycle(self, schedule: ScheduleConfig, callback: Callable[[], object]) -> None:
        # A slow cycle must never overlap the next one; missed runs collapse into one.
        self.scheduler.add_job(
            callback,
            trigger=build_trigger(schedule),
            id=CYCLE_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.logger.info("cycle_job_scheduled", schedule=schedule.model_dump(mode="json"))

    def start(self) -> None:
        """Block until ``shutdown`` is called or the process is interrupted."""

        if self.started:
            return
        self.started = True
        self.logger.info("scheduler_started")
        self.scheduler.start()

    def shutdown(self) -> None:
        if not self.started:
            return
        self.scheduler.shutdown(wait=False)
        self.started = False
        self.logger.info("scheduler_stopped")


__all__ = ["APSchedulerAdapter", "CYCLE_JOB_ID", "build_trigger"]
