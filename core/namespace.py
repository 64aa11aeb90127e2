# core/namespace.py
from typing import Final
from model.namespace import Namespace, NamespaceLike
from util.constants import PathSegments
from util.enums import Sharing

_SHARED: Final[frozenset[Sharing]] = frozenset({Sharing.APP, Sharing.GLOBAL})


def resolve(relative_path: str, namespace: NamespaceLike = None) -> str:
    """
    Map a relative resource path plus a namespace onto an absolute path.

    - No owner, app or sharing at all -> /services/<path>
    - sharing unset or "user": owner/app pass through, "-" when missing
    - sharing "app"/"global": owner forced to "nobody"
    - sharing "system": owner "nobody", app "system"
    """
    ns = Namespace.of(namespace)
    if ns.is_default:
        return f"{PathSegments.SERVICES}/{relative_path}"

    owner, app = _scope(ns)
    return f"{PathSegments.SERVICES_NS}/{owner}/{app}/{relative_path}"


def _scope(ns: Namespace) -> tuple[str, str]:
    wildcard = PathSegments.WILDCARD
    if ns.sharing == Sharing.SYSTEM:
        return PathSegments.NOBODY, PathSegments.SYSTEM
    if ns.sharing in _SHARED:
        return PathSegments.NOBODY, ns.app if ns.app is not None else wildcard
    # sharing unset or "user"
    return (
        ns.owner if ns.owner is not None else wildcard,
        ns.app if ns.app is not None else wildcard,
    )
