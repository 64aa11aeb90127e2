# core/feed.py
import json
from typing import Any, Mapping, Optional, Protocol
from pydantic import BaseModel, ConfigDict
from model.namespace import Namespace
from util.enums import ErrorMessage, Sharing
from util.errors import RequestFailedError
from util.types import AttributeValue


class FeedEntry(BaseModel):
    """One entry of a management feed: its name, flattened content, and ACL scope."""

    model_config = ConfigDict(frozen=True)

    name: str
    attributes: dict[str, AttributeValue]
    namespace: Optional[Namespace] = None


class FeedParser(Protocol):
    def __call__(self, body: bytes) -> tuple[FeedEntry, ...]: ...


def parse_feed(body: bytes) -> tuple[FeedEntry, ...]:
    """
    Parse an `output_mode=json` feed body into entries.
    An empty body (or one with no "entry" list) yields (). A body that is not
    JSON raises RequestFailedError (502): the server answered but said nothing usable.
    """
    if not body or not body.strip():
        return ()
    try:
        doc = json.loads(body)
    except ValueError as e:
        raise RequestFailedError(
            ErrorMessage.REQUEST_FAILED.value.http_status, f"malformed feed body: {e}"
        ) from e
    if not isinstance(doc, dict):
        return ()
    entries = doc.get("entry") or []
    return tuple(_entry(e) for e in entries if isinstance(e, dict))


def _entry(raw: Mapping[str, Any]) -> FeedEntry:
    content = raw.get("content")
    attributes: dict[str, AttributeValue] = {}
    if isinstance(content, Mapping):
        _flatten(content, "", attributes)
    return FeedEntry(
        name=str(raw.get("name") or ""),
        attributes=attributes,
        namespace=_acl_namespace(raw.get("acl")),
    )


def _flatten(node: Mapping[str, Any], prefix: str, out: dict[str, AttributeValue]) -> None:
    for key, value in node.items():
        name = f"{prefix}{key}"
        if value is None:
            continue
        if isinstance(value, Mapping):
            _flatten(value, f"{name}.", out)
        elif isinstance(value, (list, tuple)):
            out[name] = [_scalar(v) for v in value if v is not None]
        elif isinstance(value, (bool, int, float, str)):
            out[name] = value
        else:
            out[name] = str(value)


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return str(value)


def _acl_namespace(acl: Any) -> Optional[Namespace]:
    if not isinstance(acl, Mapping):
        return None
    return Namespace(
        owner=acl.get("owner"),
        app=acl.get("app"),
        sharing=_sharing(acl.get("sharing")),
    )


def _sharing(value: Any) -> Optional[Sharing]:
    try:
        return Sharing(value)
    except ValueError:
        return None


def first_entry(entries: tuple[FeedEntry, ...], name: str) -> FeedEntry:
    """Pick the entry matching `name`, falling back to the only entry present."""
    for e in entries:
        if e.name == name:
            return e
    if len(entries) == 1:
        return entries[0]
    raise LookupError(name)
