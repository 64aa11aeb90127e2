# model/namespace.py
from typing import Optional
from pydantic import BaseModel, ConfigDict
from util.enums import Sharing


class Namespace(BaseModel):
    """
    (owner, app, sharing) scoping for a resource.

    None means "not specified". An empty string is a specified value and is
    passed through as-is, so Namespace(owner="") is not the default namespace.
    """

    model_config = ConfigDict(frozen=True)

    owner: Optional[str] = None
    app: Optional[str] = None
    sharing: Optional[Sharing] = None

    @property
    def is_default(self) -> bool:
        return self.owner is None and self.app is None and self.sharing is None

    @classmethod
    def of(cls, value: "NamespaceLike") -> "Namespace":
        """Accept None, a Namespace, or a plain {"owner", "app", "sharing"} dict."""
        if value is None:
            return DEFAULT_NAMESPACE
        if isinstance(value, Namespace):
            return value
        return cls.model_validate(dict(value))


DEFAULT_NAMESPACE = Namespace()

NamespaceLike = Optional[Namespace | dict]
