# model/info.py
from typing import Optional
from model.entity import Entity


class ServiceInfo(Entity):
    """Read-only view of server/info."""

    @property
    def build(self) -> Optional[str]:
        return self._str("build")

    @property
    def cpu_arch(self) -> Optional[str]:
        return self._str("cpu_arch")

    @property
    def guid(self) -> Optional[str]:
        return self._str("guid")

    @property
    def license_keys(self) -> list[str]:
        return self._list("licenseKeys")

    @property
    def license_labels(self) -> list[str]:
        return self._list("license_labels")

    @property
    def license_signature(self) -> Optional[str]:
        return self._str("licenseSignature")

    @property
    def license_state(self) -> Optional[str]:
        return self._str("licenseState")

    @property
    def master_guid(self) -> Optional[str]:
        return self._str("master_guid")

    @property
    def mode(self) -> Optional[str]:
        return self._str("mode")

    @property
    def os_build(self) -> Optional[str]:
        return self._str("os_build")

    @property
    def os_name(self) -> Optional[str]:
        return self._str("os_name")

    @property
    def os_version(self) -> Optional[str]:
        return self._str("os_version")

    @property
    def server_name(self) -> Optional[str]:
        return self._str("serverName")

    @property
    def version(self) -> Optional[str]:
        return self._str("version")

    def is_free(self) -> bool:
        return self._bool("isFree")

    def is_trial(self) -> bool:
        return self._bool("isTrial")

    def is_rt_search_enabled(self) -> bool:
        return self._bool("rtsearch_enabled")
