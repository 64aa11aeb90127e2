# service/service.py
import logging
from typing import Any, Optional
import httpx
from config.settings import settings
from core.feed import FeedParser, first_entry, parse_feed
from model.info import ServiceInfo
from model.namespace import NamespaceLike
from repository.job_repository import JobCollection
from repository.user_repository import UserCollection
from service.restart_service import RestartService
from service.session import Session
from util.constants import ExternalURIs
from util.errors import NotFoundError
from util.logger import init_logger

logger = logging.getLogger(__name__)


class Service:
    """
    Entry point: one Session per instance, plus accessors for the endpoints
    the client knows how to model. Several Service objects (e.g. against
    different hosts) coexist without sharing state.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        scheme: Optional[str] = None,
        *,
        namespace: NamespaceLike = None,
        parser: FeedParser = parse_feed,
        session: Optional[Session] = None,
        restarter: Optional[RestartService] = None,
        **session_kwargs: Any,
    ) -> None:
        self.session = session or Session(host, port, scheme, **session_kwargs)
        self.namespace = namespace
        self._parser = parser
        self._restarter = restarter or RestartService(self.session)

    @property
    def host(self) -> str:
        return self.session.host

    @property
    def port(self) -> int:
        return self.session.port

    # ---------------- Session pass-through ----------------

    def login(self, username: Optional[str] = None, password: Optional[str] = None) -> "Service":
        self.session.login(username, password)
        return self

    def logout(self) -> None:
        self.session.logout()

    def fullpath(self, path: str, namespace: NamespaceLike = None) -> str:
        return self.session.fullpath(path, namespace)

    def get(self, path: str, namespace: NamespaceLike = None, **params: Any) -> httpx.Response:
        return self.session.get(path, namespace, **params)

    def post(self, path: str, namespace: NamespaceLike = None, **body: Any) -> httpx.Response:
        return self.session.post(path, namespace, **body)

    def delete(self, path: str, namespace: NamespaceLike = None) -> httpx.Response:
        return self.session.delete(path, namespace)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "Service":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ---------------- Collections ----------------

    @property
    def jobs(self) -> JobCollection:
        return JobCollection(self.session, self.namespace, self._parser)

    @property
    def users(self) -> UserCollection:
        return UserCollection(self.session, self.namespace, self._parser)

    # ---------------- Metadata ----------------

    @property
    def info(self) -> ServiceInfo:
        info = ServiceInfo(self.session, ExternalURIs.SERVER_INFO, "server-info", parser=self._parser)
        return info.refresh()  # type: ignore[return-value]

    @property
    def capabilities(self) -> list[str]:
        res = self.session.get(ExternalURIs.CAPABILITIES)
        entries = self._parser(res.content)
        try:
            entry = first_entry(entries, "capabilities")
        except LookupError:
            raise NotFoundError("capabilities endpoint returned no entry") from None
        caps = entry.attributes.get("capabilities") or []
        return list(caps) if isinstance(caps, list) else [str(caps)]

    # ---------------- Restart ----------------

    def restart(self) -> httpx.Response:
        return self._restarter.restart()

    def restart_and_await(self, timeout: Optional[float] = None) -> None:
        self._restarter.restart_and_await(timeout)


def connect(
    username: Optional[str] = None,
    password: Optional[str] = None,
    *,
    configure_logging: bool = False,
    **kwargs: Any,
) -> Service:
    """
    Build a Service from settings (overridable via kwargs) and log in.
    Scripts pass configure_logging=True to get the stdout/file handlers.
    """
    if configure_logging:
        init_logger()
    service = Service(**kwargs)
    service.login(
        username if username is not None else settings.SPLUNK_USERNAME,
        password if password is not None else settings.SPLUNK_PASSWORD,
    )
    logger.info("service.connected host=%s port=%d", service.host, service.port)
    return service
