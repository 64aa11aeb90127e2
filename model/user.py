# model/user.py
from typing import Optional
from model.entity import Entity


class User(Entity):
    @property
    def roles(self) -> list[str]:
        return self._list("roles")

    @property
    def real_name(self) -> Optional[str]:
        return self._str("realname")

    @property
    def email(self) -> Optional[str]:
        return self._str("email")

    @property
    def default_app(self) -> Optional[str]:
        return self._str("defaultApp")

    @property
    def tz(self) -> Optional[str]:
        # empty string means "use the server's zone"
        return self._str("tz") or None
