# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/athena/api/errors.py
from typing import List, Optional


class AthenaError(RuntimeError):
    """Base class for OneFuse API failures."""


class AthenaTransportError(AthenaError):
    """Connection, DNS or TLS failure before a response was received."""


class AthenaHTTPError(AthenaError):
    """The service answered with a status >= 400. The body is the message."""

    def __init__(self, status_code: int, body: str):
        super().__init__(body)
        self.status_code = status_code
        self.body = body


class AthenaDecodeError(AthenaError):
    """A response body was not the JSON we expected."""


class AthenaNotFoundError(AthenaError):
    """A name lookup returned an empty collection."""


class RequestConstructionError(AthenaError):
    """Caller supplied invalid or ambiguous references; nothing was sent."""


class AthenaNotImplementedError(AthenaError):
    pass


class JobFailedError(AthenaError):
    """A job reached the terminal "Failed" state."""

    def __init__(
        self,
        job_type: str,
        job_id: int,
        messages: List[str],
        code: Optional[int] = None,
    ):
        self.job_type = job_type
        self.job_id = job_id
        self.messages = messages
        self.code = code
        super().__init__(
            f"Job {job_type} ({job_id}) failed with message {messages}"
            + (f" (code {code})" if code is not None else "")
        )


class JobTimeoutError(AthenaError):
    """A job stayed non-terminal for the whole polling budget."""

    def __init__(self, job_id: int, elapsed_ms: int):
        self.job_id = job_id
        self.elapsed_ms = elapsed_ms
        super().__init__("Timed out while waiting for job to complete.")
