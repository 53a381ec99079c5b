import logging
import threading
from typing import Optional

import schedule

from . import config

LOGGER = logging.getLogger(__name__)

STATUS_TAG = "status-check"
REFRESH_TAG = "refresh"


class BoardScheduler:
    """
    Liveness check and full refetch on independent fixed intervals.
    Uses its own ``schedule.Scheduler`` so stopping never touches other jobs.
    """

    def __init__(
        self,
        board,
        status_interval: int = config.STATUS_INTERVAL_SECONDS,
        refresh_interval: int = config.REFRESH_INTERVAL_SECONDS,
        tick_seconds: float = 1.0,
    ):
        self.board = board
        self.status_interval = status_interval
        self.refresh_interval = refresh_interval
        self.tick_seconds = tick_seconds
        self.scheduler = schedule.Scheduler()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _run_safely(self, name: str, task):
        try:
            task()
        except Exception as e:
            # One failed tick must not kill the loop; the next interval retries
            LOGGER.error("❌ Scheduled %s crashed: %s", name, e)

    def schedule_jobs(self):
        self.scheduler.clear()
        self.scheduler.every(self.status_interval).seconds.do(
            self._run_safely, "status check", self.board.check_status
        ).tag(STATUS_TAG)
        self.scheduler.every(self.refresh_interval).seconds.do(
            self._run_safely, "refresh", self.board.refresh
        ).tag(REFRESH_TAG)
        LOGGER.info(
            "🤖 Status check every %ss, refresh every %ss.",
            self.status_interval, self.refresh_interval,
        )

    def run_pending(self):
        self.scheduler.run_pending()

    def run_forever(self):
        while not self._stop.is_set():
            self.scheduler.run_pending()
            self._stop.wait(self.tick_seconds)

    def start(self, refresh_now: bool = True) -> threading.Thread:
        if self._thread and self._thread.is_alive():
            return self._thread

        self._stop.clear()
        self.schedule_jobs()
        if refresh_now:
            self._run_safely("refresh", self.board.refresh)

        self._thread = threading.Thread(target=self.run_forever, name="bidboard-scheduler", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self, timeout: float = 5.0):
        self._stop.set()
        self.scheduler.clear()
        if self._thread:
            self._thread.join(timeout)
            self._thread = None
        LOGGER.info("Scheduler stopped.")

    @property
    def jobs(self):
        return list(self.scheduler.jobs)
