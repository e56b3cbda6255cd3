"""Bounded polling of a build job until it reaches a terminal state."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

from preview_pages.github_access.host_protocol import PreviewBuildHost

from .collection_contracts import JobFailedError, JobTimeoutError
from .unit_logging import UnitLogAdapter

DEFAULT_POLL_PARALLELISM = 5
DEFAULT_MAX_ATTEMPTS = 20
DEFAULT_INTERVAL_SECONDS = 15.0


class JobState(str, Enum):
    """Progress of one job wait."""

    PENDING = "pending"
    COMPLETED_SUCCESS = "completed_success"
    COMPLETED_FAILURE = "completed_failure"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class JobWaitOutcome:
    """Terminal state of one job wait and the number of status requests made."""

    state: JobState
    attempts: int


class PollingGate:
    """Process-wide cap on concurrent in-flight polls.

    Construct one per pass and hand the same instance to every waiter.
    """

    def __init__(self, limit: int = DEFAULT_POLL_PARALLELISM) -> None:
        if limit <= 0:
            raise ValueError("Polling gate limit must be greater than zero.")
        self.limit = limit
        self._semaphore = threading.BoundedSemaphore(limit)

    @contextmanager
    def slot(self) -> Iterator[None]:
        with self._semaphore:
            yield


def wait_for_job_completion(  # pylint: disable=too-many-arguments
    host: PreviewBuildHost,
    repo: str,
    job_id: int,
    gate: PollingGate,
    log: UnitLogAdapter,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> JobWaitOutcome:
    """Poll ``job_id`` until it completes or ``max_attempts`` polls have been spent.

    Each attempt holds one gate slot for the status request and, when the job
    is still pending, for the sleep that follows it. A job completing on
    attempt k costs k requests and k - 1 sleeps; a timeout costs
    ``max_attempts`` of each.
    """
    state = JobState.PENDING
    attempts = 0
    while state is JobState.PENDING and attempts < max_attempts:
        attempts += 1
        with gate.slot():
            job = host.get_job(repo, job_id)
            if job.get("status") == "completed":
                state = (
                    JobState.COMPLETED_SUCCESS
                    if job.get("conclusion") == "success"
                    else JobState.COMPLETED_FAILURE
                )
            else:
                log.info("Waiting for job #%s to complete...", job_id)
                sleep(interval_seconds)

    if state is JobState.PENDING:
        state = JobState.TIMED_OUT
        log.error("Job #%s did not complete within the timeout period.", job_id)
    elif state is JobState.COMPLETED_FAILURE:
        log.error("Job #%s did not complete successfully.", job_id)
    return JobWaitOutcome(state=state, attempts=attempts)


def ensure_job_succeeded(outcome: JobWaitOutcome, job_id: int) -> None:
    """Turn a non-successful wait into the matching unit failure."""
    if outcome.state is JobState.COMPLETED_SUCCESS:
        return
    if outcome.state is JobState.TIMED_OUT:
        raise JobTimeoutError(f"Job #{job_id} did not complete after {outcome.attempts} polls")
    raise JobFailedError(f"Job #{job_id} did not complete successfully")
