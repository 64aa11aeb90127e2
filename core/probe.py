# core/probe.py
import socket
from typing import Callable

PortProbe = Callable[[str, int], bool]


def make_port_probe(connect_timeout: float = 1.0) -> PortProbe:
    """
    Build a raw TCP reachability check. It opens a connection and closes it
    straight away; no bytes are exchanged.
    """

    def probe(host: str, port: int) -> bool:
        try:
            with socket.create_connection((host, port), timeout=connect_timeout):
                return True
        except OSError:
            return False

    return probe
