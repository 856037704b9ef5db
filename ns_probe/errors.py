from __future__ import annotations

import errno as _errno
import os


class NsError(Exception):
    """Base class for everything the probe reports."""


class UsageError(NsError):
    def __init__(self, message: str = "", code: int = 1):
        super().__init__(message)
        self.code = code


class ResolutionError(NsError):
    def __init__(self, host: str, reason: str):
        super().__init__(f"Failed resolving hostname {host}: {reason}")
        self.host = host
        self.reason = reason


class SocketError(NsError):
    def __init__(self, errno: int, strerror: str):
        super().__init__(f"Error creating client socket: {strerror}")
        self.errno = errno
        self.strerror = strerror


class ReverseLookupError(NsError):
    pass


class ConnectError(NsError):
    def __init__(self, address: str, errno: int):
        super().__init__(f"Failed connecting to {address}: {os.strerror(errno)}")
        self.address = address
        self.errno = errno

    @classmethod
    def from_errno(cls, address: str, errno: int) -> "ConnectError":
        # still in progress when the wait ran out
        if errno == _errno.EINPROGRESS:
            return ConnectTimeoutError(address, errno)
        return cls(address, errno)


class ConnectTimeoutError(ConnectError):
    pass
