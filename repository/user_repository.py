# repository/user_repository.py
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence, Union
from core.feed import FeedParser, parse_feed
from model.namespace import NamespaceLike
from model.user import User
from repository.collection import Collection
from util.constants import ExternalURIs
from util.types import Args

if TYPE_CHECKING:
    from service.session import Session


class UserCollection(Collection[User]):
    """
    Users under authentication/users. The server lower-cases user names, so
    the entity returned by create() carries the name the server reports.
    """

    item = User

    def __init__(
        self,
        session: "Session",
        namespace: NamespaceLike = None,
        parser: FeedParser = parse_feed,
    ) -> None:
        super().__init__(session, ExternalURIs.USERS, namespace, parser)

    def create(  # type: ignore[override]
        self,
        name: str,
        password: Union[str, Args, None] = None,
        roles: Union[str, Sequence[str], None] = None,
        args: Optional[Args] = None,
        **kwargs: Any,
    ) -> User:
        """
        create(name, args) with a raw property bag, or
        create(name, password, roles, args) with one or more roles.
        """
        if isinstance(password, Mapping):
            password, args = None, password
        body: dict[str, Any] = dict(args or {})
        if password is not None:
            body["password"] = password
        if roles is not None:
            body["roles"] = [roles] if isinstance(roles, str) else list(roles)
        body.update(kwargs)
        return super().create(name, body)
