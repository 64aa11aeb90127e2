# service/session.py
import logging
from typing import Any, Mapping, Optional
import httpx
from config.settings import settings
from core.namespace import resolve
from model.namespace import NamespaceLike
from util.constants import AUTH_HEADER, AUTH_SCHEME, OUTPUT_MODE, ExternalURIs
from util.enums import ErrorMessage
from util.errors import AuthenticationError, error_for_status
from util.timing import timed
from util.types import Args

logger = logging.getLogger(__name__)


class Session:
    """
    Connection coordinates plus an auth token for one management endpoint.

    Every request resolves its path against a namespace, attaches the token and
    maps non-2xx statuses onto the error taxonomy. A Session is not safe to
    share between threads without external locking.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        scheme: Optional[str] = None,
        *,
        token: Optional[str] = None,
        verify: Optional[bool] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.host: str = host or settings.SPLUNK_HOST
        self.port: int = int(port or settings.SPLUNK_PORT)
        self.scheme: str = scheme or settings.SPLUNK_SCHEME
        self.token: Optional[str] = token
        self._username: Optional[str] = None
        self._password: Optional[str] = None
        self._client = httpx.Client(
            base_url=self.base_url,
            verify=settings.SPLUNK_VERIFY_TLS if verify is None else verify,
            timeout=settings.HTTP_TIMEOUT_SECONDS if timeout is None else timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    @property
    def has_credentials(self) -> bool:
        return self._username is not None and self._password is not None

    # ---------------- Auth ----------------

    def login(self, username: Optional[str] = None, password: Optional[str] = None) -> None:
        """
        Exchange credentials for a session token. Credentials are kept so the
        session can log in again after a server restart. No retry.
        Rejected credentials -> AuthenticationError; a 5xx -> RequestFailedError.
        """
        username = username if username is not None else self._username
        password = password if password is not None else self._password
        if username is None or password is None:
            raise AuthenticationError(ErrorMessage.LOGIN_FAILED.value.message)

        with timed(logger, "session.login", user=username):
            res = self._client.post(
                ExternalURIs.LOGIN,
                data={"username": username, "password": password, "output_mode": OUTPUT_MODE},
            )

        if res.is_server_error:
            logger.warning("session.login.unavailable status=%d", res.status_code)
            raise error_for_status(res.status_code, _server_message(res))
        if not res.is_success:
            logger.warning("session.login.rejected user=%s status=%d", username, res.status_code)
            raise AuthenticationError(
                _server_message(res) or ErrorMessage.LOGIN_FAILED.value.message
            )

        token = _json(res).get("sessionKey")
        if not token:
            logger.warning("session.login.no_token user=%s", username)
            raise AuthenticationError(ErrorMessage.LOGIN_FAILED.value.message)

        self.token = str(token)
        self._username, self._password = username, password
        logger.info("session.login.ok user=%s", username)

    def relogin(self) -> None:
        self.login()

    def logout(self) -> None:
        """Drop the token. Idempotent; credentials are forgotten too."""
        if self.token is not None:
            logger.info("session.logout user=%s", self._username)
        self.token = None
        self._username = self._password = None

    # ---------------- Requests ----------------

    def fullpath(self, path: str, namespace: NamespaceLike = None) -> str:
        """Absolute paths (leading '/') are used verbatim; the rest are resolved."""
        if path.startswith("/"):
            return path
        return resolve(path, namespace)

    def request(
        self,
        method: str,
        path: str,
        namespace: NamespaceLike = None,
        body: Optional[Args] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Response:
        """
        Perform one authenticated round trip and return the raw response.
        401 -> AuthenticationError, 404 -> NotFoundError, other non-2xx ->
        RequestFailedError. Transport failures propagate as httpx errors.
        """
        if self.token is None:
            raise AuthenticationError()

        url = self.fullpath(path, namespace)
        query = {"output_mode": OUTPUT_MODE, **(params or {})}
        with timed(logger, "http.request", method=method, path=url):
            res = self._client.request(
                method,
                url,
                params=query,
                data=_form(body) if body is not None else None,
                headers={AUTH_HEADER: f"{AUTH_SCHEME} {self.token}"},
            )

        if res.is_success:
            return res

        logger.info("http.request.failed method=%s path=%s status=%d", method, url, res.status_code)
        raise error_for_status(res.status_code, _server_message(res))

    def get(self, path: str, namespace: NamespaceLike = None, **params: Any) -> httpx.Response:
        return self.request("GET", path, namespace, params=params)

    def post(self, path: str, namespace: NamespaceLike = None, **body: Any) -> httpx.Response:
        return self.request("POST", path, namespace, body=body)

    def delete(self, path: str, namespace: NamespaceLike = None) -> httpx.Response:
        return self.request("DELETE", path, namespace)

    # ---------------- Lifecycle ----------------

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def _form(body: Args) -> dict[str, Any]:
    # httpx sends list values as repeated form fields, in insertion order
    out: dict[str, Any] = {}
    for key, value in body.items():
        if isinstance(value, bool):
            out[key] = "1" if value else "0"
        elif isinstance(value, (list, tuple)):
            out[key] = [str(v) for v in value]
        else:
            out[key] = str(value)
    return out


def _json(res: httpx.Response) -> dict:
    try:
        data = res.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _server_message(res: httpx.Response) -> Optional[str]:
    messages = _json(res).get("messages") or []
    texts = [str(m.get("text")) for m in messages if isinstance(m, dict) and m.get("text")]
    return "; ".join(texts) or None
