# util/enums.py
from enum import Enum
from typing import NamedTuple
from httpx import codes


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class Sharing(str, Enum):
    USER = "user"
    APP = "app"
    GLOBAL = "global"
    SYSTEM = "system"


class DispatchState(str, Enum):
    QUEUED = "QUEUED"
    PARSING = "PARSING"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"
    FINALIZING = "FINALIZING"
    DONE = "DONE"
    FAILED = "FAILED"

    # any state this client does not list
    UNKNOWN = "UNKNOWN"

    @classmethod
    def _missing_(cls, value: object) -> "DispatchState":
        return cls.UNKNOWN


class Freshness(str, Enum):
    STALE = "stale"
    FRESH = "fresh"


class RestartPhase(str, Enum):
    DRAIN = "drain"
    RECOVERY = "recovery"
    READY = "ready"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    NOT_LOGGED_IN = ErrorInfo("Not logged in", codes.UNAUTHORIZED)
    LOGIN_FAILED = ErrorInfo("Login failed", codes.UNAUTHORIZED)
    NOT_FOUND = ErrorInfo("Resource not found", codes.NOT_FOUND)
    NOT_READY = ErrorInfo("Resource not ready", codes.NO_CONTENT)
    REQUEST_FAILED = ErrorInfo("Request failed", codes.BAD_GATEWAY)
    TIMED_OUT = ErrorInfo("Operation timed out", codes.GATEWAY_TIMEOUT)
