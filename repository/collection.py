# repository/collection.py
import logging
from typing import TYPE_CHECKING, Any, Generic, Iterator, Optional, TypeVar
from core.feed import FeedEntry, FeedParser, parse_feed
from model.entity import Entity
from model.namespace import Namespace, NamespaceLike
from util.enums import Freshness
from util.errors import NotFoundError
from util.functions import join_path
from util.types import Args

if TYPE_CHECKING:
    from service.session import Session

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Entity)


class Collection(Generic[E]):
    """
    Namespace-scoped directory of entities under one endpoint.

    Flow:
    - The listing is fetched lazily on first read and after any create/remove.
    - refresh() swaps the whole name -> entity map; values() hands out a copy.
    - Not safe for concurrent create + enumerate from several threads.
    """

    item: type[Entity] = Entity

    def __init__(
        self,
        session: "Session",
        path: str,
        namespace: NamespaceLike = None,
        parser: FeedParser = parse_feed,
    ) -> None:
        self._session = session
        self.path = path
        self.namespace: Namespace = Namespace.of(namespace)
        self._parser = parser
        self._items: dict[str, E] = {}
        self.freshness = Freshness.STALE

    # ---------------- Sync ----------------

    def refresh(self) -> "Collection[E]":
        res = self._session.get(self.path, self.namespace, count=-1)
        entries = self._parser(res.content)
        self._items = {e.name: self._hydrate(e) for e in entries}
        self.freshness = Freshness.FRESH
        logger.debug("collection.refresh path=%s count=%d", self.path, len(self._items))
        return self

    def _ensure_fresh(self) -> None:
        if self.freshness != Freshness.FRESH:
            self.refresh()

    def _hydrate(self, entry: FeedEntry) -> E:
        return self.item.from_entry(  # type: ignore[return-value]
            self._session,
            self._entity_path(entry.name),
            entry,
            self.namespace,
            self._parser,
            collection=self,
        )

    def _entity_path(self, name: str) -> str:
        return join_path(self.path, name)

    def _new(self, name: str) -> E:
        return self.item(  # type: ignore[return-value]
            self._session,
            self._entity_path(name),
            name,
            self.namespace,
            self._parser,
            collection=self,
        )

    def evict(self, name: str) -> None:
        """Forget `name` locally and re-list on the next read."""
        self._items.pop(name, None)
        self.freshness = Freshness.STALE

    # ---------------- Reads ----------------

    def get(self, name: str) -> E:
        self._ensure_fresh()
        try:
            return self._items[name]
        except KeyError:
            raise NotFoundError(f"{self.path}/{name} not found") from None

    def __getitem__(self, name: str) -> E:
        return self.get(name)

    def contains(self, name: str) -> bool:
        self._ensure_fresh()
        return name in self._items

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)

    def keys(self) -> list[str]:
        self._ensure_fresh()
        return list(self._items)

    def values(self) -> list[E]:
        self._ensure_fresh()
        return list(self._items.values())

    def __iter__(self) -> Iterator[E]:
        return iter(self.values())

    def __len__(self) -> int:
        self._ensure_fresh()
        return len(self._items)

    # ---------------- Writes ----------------

    def create(self, name: str, args: Optional[Args] = None, **kwargs: Any) -> E:
        """
        POST `name` plus the property bag, then refresh the new entity.
        The returned entity is fresh unless the server reports it not ready.
        """
        body: dict[str, Any] = {"name": name, **(args or {}), **kwargs}
        res = self._session.post(self.path, self.namespace, **body)
        self.freshness = Freshness.STALE

        created = self._created_name(res.content) or name
        entity = self._new(created)
        entity.refresh()
        logger.info("collection.create path=%s name=%s", self.path, created)
        return entity

    def _created_name(self, body: bytes) -> Optional[str]:
        entries = self._parser(body)
        return entries[0].name if len(entries) == 1 and entries[0].name else None

    def remove(self, name: str) -> None:
        """DELETE `name`; an already-absent name is a no-op."""
        try:
            self._session.delete(self._entity_path(name), self.namespace)
            logger.info("collection.remove path=%s name=%s", self.path, name)
        except NotFoundError:
            logger.debug("collection.remove.absent path=%s name=%s", self.path, name)
        self.evict(name)
