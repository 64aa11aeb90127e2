class PathSegments:
    SERVICES = "/services"
    SERVICES_NS = "/servicesNS"
    WILDCARD = "-"
    NOBODY = "nobody"
    SYSTEM = "system"


class ExternalURIs:
    LOGIN = PathSegments.SERVICES + "/auth/login"
    JOBS = "search/jobs"
    USERS = "authentication/users"
    SERVER_INFO = "server/info"
    RESTART = "server/control/restart"
    CAPABILITIES = "authorization/capabilities"


AUTH_HEADER = "Authorization"
AUTH_SCHEME = "Splunk"
OUTPUT_MODE = "json"
