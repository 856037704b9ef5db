from __future__ import annotations

import socket
from dataclasses import dataclass
from typing import Any, Optional, Tuple

SERVICE_PORT = "80"


@dataclass(frozen=True)
class Target:
    host: str
    port: str = SERVICE_PORT


@dataclass(frozen=True)
class Candidate:
    family: int
    socktype: int
    proto: int
    sockaddr: Tuple[Any, ...]

    @property
    def address(self) -> str:
        return self.sockaddr[0]


@dataclass
class ProbeResult:
    """
    Outcome of one run. On success the result owns the open socket,
    release it with close() or by using the result as a context manager.
    """

    ok: bool
    target: Target
    address: Optional[str] = None
    sock: Optional[socket.socket] = None
    tries: int = 0
    errno: int = 0

    def close(self) -> None:
        if self.sock is not None:
            self.sock.close()
            self.sock = None

    def __enter__(self) -> "ProbeResult":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
