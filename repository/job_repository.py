# repository/job_repository.py
import logging
from typing import TYPE_CHECKING, Any, Optional
from core.feed import FeedParser, parse_feed
from model.job import Job
from model.namespace import NamespaceLike
from repository.collection import Collection
from util.constants import ExternalURIs
from util.enums import Freshness
from util.errors import NotReadyError, RequestFailedError
from util.types import Args

if TYPE_CHECKING:
    from service.session import Session

logger = logging.getLogger(__name__)


class JobCollection(Collection[Job]):
    item = Job

    def __init__(
        self,
        session: "Session",
        namespace: NamespaceLike = None,
        parser: FeedParser = parse_feed,
    ) -> None:
        super().__init__(session, ExternalURIs.JOBS, namespace, parser)

    # ---------------- Core CRUD ----------------

    def create(self, query: str, args: Optional[Args] = None, **kwargs: Any) -> Job:  # type: ignore[override]
        """
        Dispatch a search. The job is named by the sid the server hands back.

        An immediate refresh follows. If the server has not materialized the
        job yet it is returned stale and its accessors raise NotReadyError
        until a later refresh() (or wait_until_ready()) succeeds.
        """
        body: dict[str, Any] = {"search": query, **(args or {}), **kwargs}
        res = self._session.post(self.path, self.namespace, **body)
        self.freshness = Freshness.STALE

        try:
            sid = res.json().get("sid")
        except ValueError:
            sid = None
        if not sid:
            raise RequestFailedError(res.status_code, "job dispatch returned no sid")

        job = self._new(str(sid))
        try:
            job.refresh()
        except NotReadyError:
            logger.info("job.create.not_ready sid=%s", sid)
        else:
            logger.info("job.create.ok sid=%s state=%s", sid, job.dispatch_state.value)
        return job
