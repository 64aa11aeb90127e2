# model/entity.py
import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterator, Optional
from httpx import codes
from core.feed import FeedEntry, FeedParser, first_entry, parse_feed
from model.namespace import Namespace, NamespaceLike
from util import functions
from util.enums import Freshness
from util.errors import NotFoundError, NotReadyError
from util.types import AttributeValue, Attributes

if TYPE_CHECKING:
    from repository.collection import Collection
    from service.session import Session

logger = logging.getLogger(__name__)

_EMPTY: Attributes = MappingProxyType({})


class Entity:
    """
    A named, namespace-scoped handle over a snapshot of server attributes.

    The snapshot is read-only and only ever replaced whole by refresh(), so a
    half-updated entity is never observable. Nothing is cached beyond the last
    refresh; accessors read the snapshot and never do I/O.
    """

    def __init__(
        self,
        session: "Session",
        path: str,
        name: str,
        namespace: NamespaceLike = None,
        parser: FeedParser = parse_feed,
        collection: Optional["Collection"] = None,
    ) -> None:
        self._session = session
        self._collection = collection
        self.path = path
        self.name = name
        self.namespace: Namespace = Namespace.of(namespace)
        self._parser = parser
        self._attributes: Attributes = _EMPTY
        self.acl: Optional[Namespace] = None
        self.freshness = Freshness.STALE

    # ---------------- Sync ----------------

    def refresh(self) -> "Entity":
        """GET the entity and atomically replace its attribute snapshot."""
        res = self._session.get(self.path, self.namespace)
        if res.status_code == codes.NO_CONTENT:
            logger.debug("entity.not_ready name=%s path=%s", self.name, self.path)
            raise NotReadyError(f"{self.name} is not ready yet")

        entries = self._parser(res.content)
        try:
            entry = first_entry(entries, self.name)
        except LookupError:
            raise NotFoundError(f"{self.path} returned no entry for {self.name}") from None
        self._load(entry)
        return self

    def _load(self, entry: FeedEntry) -> None:
        self._attributes = MappingProxyType(dict(entry.attributes))
        self.acl = entry.namespace
        self.freshness = Freshness.FRESH

    @classmethod
    def from_entry(
        cls,
        session: "Session",
        path: str,
        entry: FeedEntry,
        namespace: NamespaceLike = None,
        parser: FeedParser = parse_feed,
        collection: Optional["Collection"] = None,
    ) -> "Entity":
        entity = cls(session, path, entry.name, namespace, parser, collection)
        entity._load(entry)
        return entity

    def update(self, **args: Any) -> "Entity":
        """POST new property values, then refresh."""
        self._session.post(self.path, self.namespace, **args)
        return self.refresh()

    def delete(self) -> None:
        self._session.delete(self.path, self.namespace)
        self._attributes = _EMPTY
        self.freshness = Freshness.STALE
        if self._collection is not None:
            self._collection.evict(self.name)

    # ---------------- Attribute access ----------------

    @property
    def attributes(self) -> Attributes:
        return self._attributes

    @property
    def is_fresh(self) -> bool:
        return self.freshness == Freshness.FRESH

    def get(self, key: str, default: Optional[AttributeValue] = None) -> Optional[AttributeValue]:
        return self._attributes.get(key, default)

    def __getitem__(self, key: str) -> AttributeValue:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __contains__(self, key: object) -> bool:
        return key in self._attributes

    def keys(self) -> Iterator[str]:
        return iter(self._attributes.keys())

    def _bool(self, key: str) -> bool:
        return functions.to_bool(self.get(key))

    def _int(self, key: str) -> int:
        return functions.to_int(self.get(key))

    def _float(self, key: str) -> float:
        return functions.to_float(self.get(key))

    def _str(self, key: str) -> Optional[str]:
        return functions.to_str(self.get(key))

    def _list(self, key: str) -> list[str]:
        return functions.to_list(self.get(key))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, path={self.path!r}, {self.freshness.value})"

