# tests/conftest.py
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

import pytest
import requests

from athena.config.models import AthenaConfig

BASE = "https://onefuse.test:443/api/v3/onefuse"


# ---- Fakes for requests ----

class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        return json.loads(self.text)


@dataclass
class Call:
    method: str
    url: str
    body: Any
    timeout: Any
    headers: dict
    auth: Any
    verify: Any
    at: float


class FakeClock:
    """Fake monotonic clock; sleep() advances it."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeServer:
    """
    Canned responses keyed by (method, url). A route with several responses
    hands them out in order and then repeats the last one.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []
        self.clock: Optional[FakeClock] = None

    def add(self, method: str, url: str, *responses):
        self.routes[(method, url)] = list(responses)

    def handle(self, session, method, url, data=None, timeout=None):
        self.calls.append(Call(
            method=method,
            url=url,
            body=json.loads(data) if data else None,
            timeout=timeout,
            headers=dict(session.headers),
            auth=session.auth,
            verify=session.verify,
            at=self.clock() if self.clock else 0.0,
        ))
        queue = self.routes.get((method, url))
        if not queue:
            return FakeResponse(404, text=f"no route for {method} {url}")
        resp = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(resp, Exception):
            raise resp
        return resp

    def calls_to(self, method: str, url: str):
        return [c for c in self.calls if c.method == method and c.url == url]


class FakeSession:
    def __init__(self, server: FakeServer):
        self.server = server
        self.headers = {}
        self.auth = None
        self.verify = True
        self.closed = False

    def request(self, method, url, data=None, timeout=None):
        return self.server.handle(self, method, url, data=data, timeout=timeout)

    def close(self):
        self.closed = True

    def __enter__(self): return self
    def __exit__(self, *a):
        self.close()
        return False


@pytest.fixture
def server(monkeypatch) -> FakeServer:
    srv = FakeServer()
    monkeypatch.setattr(requests, "Session", lambda: FakeSession(srv))
    return srv


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> AthenaConfig:
    return AthenaConfig(
        scheme="https",
        address="onefuse.test",
        port="443",
        user="admin",
        password="secret",
    )


def ok(payload: Any) -> FakeResponse:
    return FakeResponse(200, payload)


def job(id: int, state: str, **extra) -> dict:
    body = {"id": id, "jobState": state, "jobType": "Create IPAM Reservation"}
    body.update(extra)
    return body
