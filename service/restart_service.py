# service/restart_service.py
import logging
import time
from typing import Optional
import httpx
from config.settings import settings
from core.polling import Clock, Deadline, Sleeper, poll_until
from core.probe import PortProbe, make_port_probe
from service.session import Session
from util.constants import ExternalURIs
from util.enums import ErrorMessage, RestartPhase
from util.errors import AuthenticationError, RequestFailedError
from util.timing import timed

logger = logging.getLogger(__name__)


class RestartService:
    """
    Restart the server and block until it serves authenticated requests again.

    The server gives no notification, so the port is sniffed directly:
      1. drain:    wait for the port to stop accepting connections
      2. recovery: wait for it to accept connections again
      3. ready:    log in again at a slower interval until it succeeds
    All three share one wall-clock budget; drain may use at most
    `drain_share` of it. Exhausting a phase raises TimeoutExceededError and
    the session is left logged out.
    """

    def __init__(
        self,
        session: Session,
        *,
        probe: Optional[PortProbe] = None,
        sleep: Sleeper = time.sleep,
        clock: Clock = time.monotonic,
        probe_interval: Optional[float] = None,
        ready_interval: Optional[float] = None,
        drain_share: Optional[float] = None,
    ) -> None:
        self._session = session
        self._probe = probe or make_port_probe(settings.PROBE_CONNECT_TIMEOUT_SECONDS)
        self._sleep = sleep
        self._clock = clock
        self._probe_interval = (
            settings.RESTART_PROBE_INTERVAL_SECONDS if probe_interval is None else probe_interval
        )
        self._ready_interval = (
            settings.RESTART_READY_INTERVAL_SECONDS if ready_interval is None else ready_interval
        )
        self._drain_share = settings.RESTART_DRAIN_SHARE if drain_share is None else drain_share

    def restart(self) -> httpx.Response:
        logger.warning("restart.requested host=%s port=%d", self._session.host, self._session.port)
        return self._session.post(ExternalURIs.RESTART)

    def restart_and_await(self, timeout: Optional[float] = None) -> None:
        if not self._session.has_credentials:
            raise AuthenticationError(ErrorMessage.NOT_LOGGED_IN.value.message)

        budget = settings.RESTART_TIMEOUT_SECONDS if timeout is None else timeout
        self.restart()
        overall = Deadline(budget, clock=self._clock)

        try:
            self._phase(
                RestartPhase.DRAIN,
                lambda: not self._reachable(),
                overall.child(self._drain_share),
                self._probe_interval,
            )
            self._phase(RestartPhase.RECOVERY, self._reachable, overall, self._probe_interval)
            self._phase(RestartPhase.READY, self._try_login, overall, self._ready_interval)
        except Exception:
            # any token from before the restart is dead
            self._session.token = None
            raise
        logger.info("restart.done budget=%.1fs used=%.1fs", budget, budget - overall.remaining())

    def _phase(self, phase: RestartPhase, condition, deadline: Deadline, interval: float) -> None:
        with timed(logger, "restart.phase", phase=phase.value):
            attempts = poll_until(
                condition,
                deadline=deadline,
                interval=interval,
                sleep=self._sleep,
                what=f"restart {phase.value}",
            )
        logger.info("restart.phase.ok phase=%s attempts=%d", phase.value, attempts)

    def _reachable(self) -> bool:
        return self._probe(self._session.host, self._session.port)

    def _try_login(self) -> bool:
        try:
            self._session.relogin()
        except httpx.TransportError as e:
            logger.debug("restart.ready.transport err=%s", type(e).__name__)
            return False
        except RequestFailedError as e:
            if e.http_status < 500:
                raise
            logger.debug("restart.ready.status status=%d", e.http_status)
            return False
        return True
