# model/job.py
import logging
import time
from typing import Callable, Optional
from config.settings import settings
from core.polling import retry_not_ready
from model.entity import Entity
from util.enums import DispatchState
from util.errors import NotReadyError, TimeoutExceededError
from util.functions import join_path, to_float
from util.types import AttributeValue

logger = logging.getLogger(__name__)


class Job(Entity):
    """
    A search job. The server creates jobs asynchronously: until the first
    successful refresh every accessor raises NotReadyError. The library does
    not retry on its own; callers use wait_until_ready() or their own loop.

    Predicates are recomputed from the current snapshot on every call.
    """

    def get(self, key: str, default: Optional[AttributeValue] = None) -> Optional[AttributeValue]:
        if not self.is_fresh:
            raise NotReadyError(f"job {self.name} has no properties yet")
        return super().get(key, default)

    # ---------------- State model ----------------

    @property
    def dispatch_state(self) -> DispatchState:
        return DispatchState(self._str("dispatchState") or DispatchState.QUEUED.value)

    def is_done(self) -> bool:
        return self.dispatch_state == DispatchState.DONE or self._bool("isDone")

    def is_failed(self) -> bool:
        return self.dispatch_state == DispatchState.FAILED or self._bool("isFailed")

    def is_paused(self) -> bool:
        return self.dispatch_state == DispatchState.PAUSED or self._bool("isPaused")

    def is_finalized(self) -> bool:
        return self._bool("isFinalized")

    def is_zombie(self) -> bool:
        # the search process went away before the job completed
        return self._bool("isZombie") and not self.is_done()

    def is_preview_enabled(self) -> bool:
        return self._bool("isPreviewEnabled")

    def is_realtime_search(self) -> bool:
        return self._bool("isRealTimeSearch")

    def is_saved(self) -> bool:
        return self._bool("isSaved")

    def is_saved_search(self) -> bool:
        return self._bool("isSavedSearch")

    # ---------------- Control ----------------

    def cancel(self) -> None:
        """Delete the job; afterwards it no longer resolves."""
        logger.info("job.cancel sid=%s", self.name)
        self.delete()

    def pause(self) -> None:
        self._control("pause")

    def unpause(self) -> None:
        self._control("unpause")

    def finalize(self) -> None:
        self._control("finalize")

    def _control(self, action: str) -> None:
        logger.info("job.control sid=%s action=%s", self.name, action)
        self._session.post(join_path(self.path, "control"), self.namespace, action=action)

    # ---------------- Bounded waits ----------------

    def wait_until_ready(
        self,
        max_attempts: Optional[int] = None,
        delay: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "Job":
        retry_not_ready(
            self.refresh,
            max_attempts=settings.NOT_READY_MAX_ATTEMPTS if max_attempts is None else max_attempts,
            delay=settings.NOT_READY_DELAY_SECONDS if delay is None else delay,
            sleep=sleep,
            what=f"job {self.name}",
        )
        return self

    def wait_until_done(
        self,
        max_attempts: Optional[int] = None,
        delay: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "Job":
        """Refresh until DONE or FAILED; TimeoutExceededError after max_attempts."""
        attempts = settings.NOT_READY_MAX_ATTEMPTS if max_attempts is None else max_attempts
        if attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        pause = settings.NOT_READY_DELAY_SECONDS if delay is None else delay
        for attempt in range(1, attempts + 1):
            try:
                self.refresh()
                if self.is_done() or self.is_failed():
                    return self
            except NotReadyError:
                logger.debug("job.wait.not_ready sid=%s attempt=%d", self.name, attempt)
            if attempt < attempts:
                sleep(pause)
        raise TimeoutExceededError(f"job {self.name} did not finish after {attempts} attempts")

    # ---------------- Properties ----------------

    @property
    def sid(self) -> Optional[str]:
        return self._str("sid")

    @property
    def cursor_time(self) -> Optional[str]:
        return self._str("cursorTime")

    @property
    def delegate(self) -> Optional[str]:
        return self._str("delegate")

    @property
    def disk_usage(self) -> int:
        return self._int("diskUsage")

    @property
    def done_progress(self) -> float:
        return self._float("doneProgress")

    @property
    def drop_count(self) -> int:
        return self._int("dropCount")

    @property
    def earliest_time(self) -> Optional[str]:
        return self._str("earliestTime")

    @property
    def latest_time(self) -> Optional[str]:
        return self._str("latestTime")

    @property
    def event_available_count(self) -> int:
        return self._int("eventAvailableCount")

    @property
    def event_count(self) -> int:
        return self._int("eventCount")

    @property
    def event_field_count(self) -> int:
        return self._int("eventFieldCount")

    @property
    def event_is_streaming(self) -> bool:
        return self._bool("eventIsStreaming")

    @property
    def event_is_truncated(self) -> bool:
        return self._bool("eventIsTruncated")

    @property
    def event_search(self) -> Optional[str]:
        return self._str("eventSearch")

    @property
    def event_sorting(self) -> Optional[str]:
        return self._str("eventSorting")

    @property
    def keywords(self) -> Optional[str]:
        return self._str("keywords")

    @property
    def label(self) -> Optional[str]:
        return self._str("label")

    @property
    def num_previews(self) -> int:
        return self._int("numPreviews")

    @property
    def priority(self) -> int:
        return self._int("priority")

    @property
    def remote_search(self) -> Optional[str]:
        return self._str("remoteSearch")

    @property
    def report_search(self) -> Optional[str]:
        return self._str("reportSearch")

    @property
    def result_count(self) -> int:
        return self._int("resultCount")

    @property
    def result_is_streaming(self) -> bool:
        return self._bool("resultIsStreaming")

    @property
    def result_preview_count(self) -> int:
        return self._int("resultPreviewCount")

    @property
    def run_duration(self) -> float:
        return self._float("runDuration")

    @property
    def scan_count(self) -> int:
        return self._int("scanCount")

    @property
    def search(self) -> Optional[str]:
        return self._str("search")

    @property
    def search_earliest_time(self) -> Optional[float]:
        value = self.get("searchEarliestTime")
        return None if value is None else to_float(value)

    @property
    def search_latest_time(self) -> Optional[float]:
        value = self.get("searchLatestTime")
        return None if value is None else to_float(value)

    @property
    def status_buckets(self) -> int:
        return self._int("statusBuckets")

    @property
    def ttl(self) -> int:
        return self._int("ttl")
