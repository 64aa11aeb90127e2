"""Shared pytest fixtures: an in-memory splunkd served through httpx.MockTransport."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional
from urllib.parse import parse_qs, unquote

import httpx
import pytest

from service.service import Service
from service.session import Session

ADMIN = ("admin", "changeme")

JOB_STATES = ["QUEUED", "PARSING", "RUNNING", "FINALIZING", "DONE"]


def _feed(*entries: dict) -> httpx.Response:
    return httpx.Response(200, json={"entry": list(entries)})


def _entry(name: str, content: dict, sharing: str = "system") -> dict:
    return {
        "name": name,
        "content": content,
        "acl": {"owner": "nobody", "app": "system", "sharing": sharing},
    }


def _error(status: int, text: str) -> httpx.Response:
    return httpx.Response(status, json={"messages": [{"type": "ERROR", "text": text}]})


@dataclass
class FakeJob:
    sid: str
    search: str
    not_ready_reads: int
    script: list[str]
    step: int = 0
    paused: bool = False
    extra: dict = field(default_factory=dict)

    def content(self) -> dict:
        state = "PAUSED" if self.paused else self.script[min(self.step, len(self.script) - 1)]
        self.step += 1
        return {
            "sid": self.sid,
            "search": self.search,
            "dispatchState": state,
            "isDone": state == "DONE",
            "isFailed": state == "FAILED",
            "isPaused": self.paused,
            "isFinalized": False,
            "isZombie": False,
            "doneProgress": 1.0 if state == "DONE" else 0.5,
            "eventCount": "42",
            "resultCount": 7,
            "runDuration": "0.25",
            "ttl": 600,
            "cursorTime": "2026-10-18T00:00:00.000+00:00",
            "priority": 5,
            "isSaved": "0",
            "performance": {"command.search": {"duration_secs": 0.1}},
            **self.extra,
        }


class FakeSplunkd:
    """
    Just enough of the management API for the client: login, users, jobs,
    server info, capabilities and restart. Paths are accepted under both
    /services and /servicesNS/<owner>/<app>.
    """

    def __init__(self) -> None:
        self.credentials = {ADMIN[0]: ADMIN[1]}
        self.tokens: set[str] = set()
        self.users: dict[str, dict] = {
            "admin": {"roles": ["admin"], "realname": "Administrator", "email": "", "tz": ""},
        }
        self.jobs: dict[str, FakeJob] = {}
        self.job_not_ready_reads = 0
        self.job_script = list(JOB_STATES)
        self.requests: list[httpx.Request] = []
        self.down = False
        self.unavailable = False
        self.on_restart: Optional[Callable[[], None]] = None
        self._ids = itertools.count(1)

    # ---------------- transport ----------------

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)
        if self.unavailable:
            return _error(503, "splunkd is starting")

        path = unquote(request.url.path)
        if path == "/services/auth/login":
            return self._login(request)

        auth = request.headers.get("Authorization", "")
        if not auth.startswith("Splunk ") or auth[len("Splunk "):] not in self.tokens:
            return _error(401, "call not properly authenticated")

        rel = self._relative(path)
        if rel is None:
            return _error(404, f"unknown path {path}")
        return self._route(request.method, rel, request)

    @staticmethod
    def _relative(path: str) -> Optional[str]:
        parts = path.strip("/").split("/")
        if parts[0] == "services":
            return "/".join(parts[1:])
        if parts[0] == "servicesNS" and len(parts) >= 3:
            return "/".join(parts[3:])
        return None

    @staticmethod
    def _form(request: httpx.Request) -> dict[str, list[str]]:
        return parse_qs(request.content.decode("utf-8"))

    def _login(self, request: httpx.Request) -> httpx.Response:
        form = self._form(request)
        user = (form.get("username") or [""])[0]
        password = (form.get("password") or [""])[0]
        if self.credentials.get(user) != password:
            return _error(401, "Login failed")
        token = f"token-{next(self._ids)}"
        self.tokens.add(token)
        return httpx.Response(200, json={"sessionKey": token})

    # ---------------- routes ----------------

    def _route(self, method: str, rel: str, request: httpx.Request) -> httpx.Response:
        parts = rel.split("/")
        if rel == "authentication/users":
            if method == "GET":
                return _feed(*(_entry(n, u) for n, u in self.users.items()))
            if method == "POST":
                return self._create_user(request)
        if rel.startswith("authentication/users/") and len(parts) == 3:
            return self._user(method, parts[2], request)
        if rel == "search/jobs":
            if method == "GET":
                return _feed(*(_entry(j.sid, {"sid": j.sid, "dispatchState": "RUNNING"}, "global") for j in self.jobs.values()))
            if method == "POST":
                return self._create_job(request)
        if rel.startswith("search/jobs/"):
            return self._job(method, parts[2:], request)
        if rel == "server/info" and method == "GET":
            return _feed(_entry("server-info", {
                "build": "abc123",
                "cpu_arch": "x86_64",
                "guid": "GUID-1",
                "isFree": "0",
                "isTrial": True,
                "licenseKeys": ["KEY1", "KEY2"],
                "licenseState": "OK",
                "serverName": "fake-splunkd",
                "version": "9.2.0",
                "rtsearch_enabled": True,
            }))
        if rel == "authorization/capabilities" and method == "GET":
            return _feed(_entry("capabilities", {"capabilities": ["search", "rtsearch", "restart_splunkd"]}))
        if rel == "server/control/restart" and method == "POST":
            self.tokens.clear()
            if self.on_restart is not None:
                self.on_restart()
            return httpx.Response(200, json={"messages": [{"type": "INFO", "text": "Restarting"}]})
        return _error(404, f"no handler for {method} {rel}")

    def _create_user(self, request: httpx.Request) -> httpx.Response:
        form = self._form(request)
        name = form["name"][0].lower()
        if name in self.users:
            return _error(400, f"User {name} already exists")
        user = {
            "roles": form.get("roles", ["user"]),
            "realname": (form.get("realname") or [""])[0],
            "email": (form.get("email") or [""])[0],
            "defaultApp": (form.get("defaultApp") or ["launcher"])[0],
            "tz": (form.get("tz") or [""])[0],
        }
        self.users[name] = user
        return httpx.Response(201, json={"entry": [_entry(name, user)]})

    def _user(self, method: str, name: str, request: httpx.Request) -> httpx.Response:
        if name not in self.users:
            return _error(404, f"User {name} does not exist")
        if method == "DELETE":
            del self.users[name]
            return _feed()
        if method == "POST":
            for key, values in self._form(request).items():
                self.users[name][key] = values if key == "roles" else values[0]
        return _feed(_entry(name, self.users[name]))

    def _create_job(self, request: httpx.Request) -> httpx.Response:
        form = self._form(request)
        sid = f"1760745600.{next(self._ids)}"
        self.jobs[sid] = FakeJob(
            sid=sid,
            search=form["search"][0],
            not_ready_reads=self.job_not_ready_reads,
            script=list(self.job_script),
        )
        return httpx.Response(201, json={"sid": sid})

    def _job(self, method: str, parts: list[str], request: httpx.Request) -> httpx.Response:
        job = self.jobs.get(parts[0])
        if job is None:
            return _error(404, f"Unknown sid {parts[0]}")
        if parts[1:] == ["control"] and method == "POST":
            action = self._form(request)["action"][0]
            job.paused = action == "pause"
            job.extra["lastAction"] = action
            return httpx.Response(200, json={"messages": [{"type": "INFO", "text": action}]})
        if method == "DELETE":
            del self.jobs[job.sid]
            return httpx.Response(200, json={"messages": []})
        if job.not_ready_reads > 0:
            job.not_ready_reads -= 1
            return httpx.Response(204)
        return _feed(_entry(job.sid, job.content(), "global"))


@pytest.fixture
def server() -> FakeSplunkd:
    return FakeSplunkd()


@pytest.fixture
def session(server: FakeSplunkd):
    s = Session("localhost", 8089, "https", transport=server.transport())
    yield s
    s.close()


@pytest.fixture
def logged_in(session: Session) -> Session:
    session.login(*ADMIN)
    return session


@pytest.fixture
def service(server: FakeSplunkd):
    svc = Service("localhost", 8089, "https", transport=server.transport())
    svc.login(*ADMIN)
    yield svc
    svc.close()


@pytest.fixture
def fresh_root_logger():
    """Root logger with init_logger() not yet applied; restored afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    inited = getattr(root, "_splunkrest_inited", False)
    root._splunkrest_inited = False  # type: ignore[attr-defined]
    yield root
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
    root.setLevel(level)
    root._splunkrest_inited = inited  # type: ignore[attr-defined]
