# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/athena/api/jobs.py

from __future__ import annotations

import logging
import time
import uuid
from enum import Enum
from typing import Any, Callable, List, Optional, Type, TypeVar

from pydantic import BaseModel

from athena.config.models import AthenaConfig
from athena.api import resources, transport
from athena.api.errors import AthenaDecodeError, JobFailedError, JobTimeoutError
from athena.api.models import JobStatus
from athena.observers.dispatcher import EventBus
from athena.observers.interface import Observer
from athena.observers.events import (
    new_ctx,
    JobSubmitted,
    JobPolled,
    JobSucceeded,
    JobFailed,
    JobTimedOut,
    ManagedObjectResolved,
)

log = logging.getLogger("athena")

JOB_STATUS_RESOURCE_TYPE = "jobStatus"

JOB_SUCCESS = "Successful"
JOB_FAILED = "Failed"
TERMINAL_STATES = (JOB_SUCCESS, JOB_FAILED)

POLLING_INTERVAL_MS = 5000
POLLING_TIMEOUT_MS = 3_600_000

M = TypeVar("M", bound=BaseModel)


class JobPhase(str, Enum):
    NEW = "NEW"
    SUBMITTED = "SUBMITTED"
    POLLING = "POLLING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"


def get_job_status(config: AthenaConfig, job_id: int) -> JobStatus:
    log.debug("athena.apiClient: GetJobStatus %s", job_id)
    return resources.get_by_id(config, JOB_STATUS_RESOURCE_TYPE, job_id, JobStatus)


def check_for_job_errors(job_status: JobStatus) -> None:
    if job_status.job_state == JOB_SUCCESS:
        return
    details = job_status.error_details
    raise JobFailedError(
        job_type=job_status.job_type or "",
        job_id=job_status.id,
        messages=details.messages() if details else [],
        code=details.code if details else None,
    )


class JobRunner:
    """
    Drives one mutating call through the service's job protocol:

      submit  -> POST/PUT/DELETE, response body is the initial JobStatus
      poll    -> GET jobStatus/{id}/ until "Successful" or "Failed"
      resolve -> GET the job's managedObject link (create flows only)

    A runner tracks a single job; build a new one per operation.
    ``sleep`` and ``clock`` are injectable so the loop can be driven without
    real delays.
    """

    def __init__(
        self,
        config: AthenaConfig,
        *,
        interval_ms: int = POLLING_INTERVAL_MS,
        timeout_ms: int = POLLING_TIMEOUT_MS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        observers: Optional[List[Observer]] = None,
        run_id: Optional[str] = None,
    ):
        self.config = config
        self.interval_ms = interval_ms
        self.timeout_ms = timeout_ms
        self._sleep = sleep
        self._clock = clock
        self.bus = EventBus(observers or [])
        self.run_id = run_id or str(uuid.uuid4())

        self.phase = JobPhase.NEW
        self.polls = 0
        self._started: Optional[float] = None

    # -----------------------
    # helpers
    # -----------------------
    def _elapsed_ms(self) -> int:
        return int((self._clock() - self._started) * 1000)

    def _ctx(self) -> dict:
        # stamped per event
        return new_ctx(self.config.host_header(), self.run_id)

    # -----------------------
    # protocol steps
    # -----------------------
    def submit(self, method: str, url: str, body: Optional[Any] = None) -> JobStatus:
        """
        Send the mutating request. Any failure here aborts the protocol.
        """
        if method == "DELETE":
            body = None
        self._started = self._clock()

        with transport.new_session(self.config) as session:
            res = transport.send(session, self.config, method, url, body)
            job_status = resources.parse(transport.decode(res), JobStatus)

        self.phase = JobPhase.SUBMITTED
        log.info("Submitted %s %s as job %s", method, url, job_status.id)
        self.bus.emit(JobSubmitted(method=method, url=url, job_id=job_status.id, **self._ctx()))
        return job_status

    def wait_for_job(self, job_id: int) -> JobStatus:
        """
        Poll until the job is terminal. Sleeps after each non-terminal check.

        Raises JobTimeoutError once the budget (measured from submission) is spent.
        """
        if self._started is None:
            self._started = self._clock()
        self.phase = JobPhase.POLLING

        while True:
            job_status = get_job_status(self.config, job_id)
            self.polls += 1
            elapsed = self._elapsed_ms()
            log.debug(
                "job %s state=%r attempt=%d elapsed_ms=%d",
                job_id, job_status.job_state, self.polls, elapsed,
            )
            self.bus.emit(JobPolled(
                job_id=job_id,
                job_state=job_status.job_state,
                attempt=self.polls,
                elapsed_ms=elapsed,
                **self._ctx(),
            ))

            if job_status.job_state in TERMINAL_STATES:
                return job_status

            self._sleep(self.interval_ms / 1000)
            if self._elapsed_ms() > self.timeout_ms:
                self.phase = JobPhase.TIMED_OUT
                log.error("job %s still %r after %d ms", job_id, job_status.job_state, self.timeout_ms)
                self.bus.emit(JobTimedOut(job_id=job_id, timeout_ms=self.timeout_ms, **self._ctx()))
                raise JobTimeoutError(job_id, self._elapsed_ms())

    def run(self, method: str, url: str, body: Optional[Any] = None) -> JobStatus:
        """
        submit + poll + surface job errors. Returns the successful JobStatus.
        """
        submitted = self.submit(method, url, body)
        job_status = self.wait_for_job(submitted.id)

        try:
            check_for_job_errors(job_status)
        except JobFailedError as exc:
            self.phase = JobPhase.FAILED
            log.error("%s", exc)
            self.bus.emit(JobFailed(
                job_id=exc.job_id,
                job_type=exc.job_type,
                messages=exc.messages,
                **self._ctx(),
            ))
            raise

        self.phase = JobPhase.SUCCEEDED
        self.bus.emit(JobSucceeded(
            job_id=job_status.id,
            job_type=job_status.job_type,
            polls=self.polls,
            duration_ms=self._elapsed_ms(),
            **self._ctx(),
        ))
        return job_status

    def run_and_fetch(self, method: str, url: str, body: Any, model: Type[M]) -> M:
        """
        Full create flow: run the job, then hydrate its managed object into ``model``.
        """
        job_status = self.run(method, url, body)

        href = job_status.managed_object_href()
        if not href:
            raise AthenaDecodeError(
                f"athena.apiClient: Job {job_status.job_type} ({job_status.id}) succeeded without a managedObject link"
            )
        managed_url = transport.url_from_href(self.config, href)
        entity = resources.get_url(self.config, managed_url, model)
        self.bus.emit(ManagedObjectResolved(job_id=job_status.id, url=managed_url, **self._ctx()))
        return entity
