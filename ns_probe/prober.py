from __future__ import annotations

import errno
import logging
import os
import select
import socket
import struct
from typing import Optional

from .errors import ConnectError, ConnectTimeoutError, ReverseLookupError, SocketError
from .models import Candidate, ProbeResult, Target
from .resolver import Resolver

log = logging.getLogger("ns")

SOCKET_TIMEOUT_MS = 10000
# poll() takes a C int of milliseconds
MAX_TIMEOUT_MS = 2**31 - 1


def set_timeouts(sock: socket.socket, timeout_ms: int) -> None:
    """Apply timeout_ms as both the kernel send and receive timeout."""
    # struct timeval, seconds + microseconds
    tv = struct.pack("ll", timeout_ms // 1000, (timeout_ms % 1000) * 1000)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVTIMEO, tv)
    except OSError as e:
        log.warning("Failed setting receive timeout socket option: %s", e.strerror)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_SNDTIMEO, tv)
    except OSError as e:
        log.warning("Failed setting send timeout socket option: %s", e.strerror)


def wait_writable(sock: socket.socket, timeout_ms: int) -> bool:
    p = select.poll()
    p.register(sock, select.POLLOUT)
    return bool(p.poll(timeout_ms))


def pending_error(sock: socket.socket) -> int:
    try:
        return sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
    except OSError as e:
        return e.errno or errno.EIO


def connect_candidate(sock: socket.socket, candidate: Candidate, timeout_ms: int) -> int:
    """
    Connect sock to the candidate, return 0 on success or an errno.

    Blocking sockets with SO_SNDTIMEO set can still report EINPROGRESS,
    in that case wait for writability and read back the pending error.
    """
    set_timeouts(sock, timeout_ms)

    err = sock.connect_ex(candidate.sockaddr)
    if err == 0:
        log.info("Connected.")
        return 0

    if err != errno.EINPROGRESS:
        return err

    log.info("Waiting (%d sec) for three-way handshake to complete ...", timeout_ms // 1000)
    if not wait_writable(sock, timeout_ms):
        return errno.EINPROGRESS

    err = pending_error(sock)
    if err == 0:
        log.info("Connected.")
    return err


def _open_socket(candidate: Candidate) -> socket.socket:
    try:
        return socket.socket(candidate.family, socket.SOCK_STREAM)
    except OSError as e:
        raise SocketError(e.errno, e.strerror or str(e)) from e


def probe(
    target: Target,
    connect: bool = False,
    timeout_ms: int = SOCKET_TIMEOUT_MS,
    resolver: Optional[Resolver] = None,
) -> ProbeResult:
    """
    Resolve target and walk its addresses in resolver order.

    Resolve-only mode stops at the first address that reverse resolves.
    Connect mode stops at the first address that accepts a connection.
    Raises ResolutionError or SocketError, both fatal for the run.
    """
    if resolver is None:
        resolver = Resolver()

    candidates = resolver.resolve(target)
    for c in candidates:
        log.debug("Candidate %s (family %d)", c.address, c.family)

    tries = 0
    err = 0

    for i, candidate in enumerate(candidates):
        last = i == len(candidates) - 1
        sock = _open_socket(candidate)
        try:
            address = resolver.reverse(candidate)
        except ReverseLookupError as e:
            log.debug("Reverse lookup failed for %s: %s", candidate.address, e)
            sock.close()
            tries += 1
            err = 0
            continue

        log.info("Found %s on address %s:%s", target.host, address, target.port)
        if not connect:
            return ProbeResult(ok=True, target=target, address=address, sock=sock, tries=tries)

        try:
            err = connect_candidate(sock, candidate, timeout_ms)
        except BaseException:
            sock.close()
            raise

        if err == 0:
            return ProbeResult(ok=True, target=target, address=address, sock=sock, tries=tries)

        sock.close()
        tries += 1
        if last:
            break
        failure = ConnectError.from_errno(address, err)
        if isinstance(failure, ConnectTimeoutError):
            log.warning("Failed connecting to %s, retrying ...", address)
        else:
            log.warning("%s", failure)

    reason = os.strerror(err) if err else "no usable address"
    log.warning("Failed connecting to %s: %s", target.host, reason)
    log.debug("Gave up on %s after %d attempt(s)", target.host, tries)
    return ProbeResult(ok=False, target=target, address=None, tries=tries, errno=err)
