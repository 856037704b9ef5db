from __future__ import annotations

import logging
import socket
from typing import List

from .errors import ResolutionError, ReverseLookupError
from .models import Candidate, Target

log = logging.getLogger("ns")


class Resolver:
    """
    Thin wrapper around the system resolver.
    Build one per run so every lookup starts from a fresh context:
      - any address family (IPv4 or IPv6)
      - stream sockets only
      - numeric service only, no service name lookup
    """

    def __init__(
        self,
        family: int = socket.AF_UNSPEC,
        socktype: int = socket.SOCK_STREAM,
        flags: int = socket.AI_NUMERICSERV,
    ):
        self.family = family
        self.socktype = socktype
        self.flags = flags

    def resolve(self, target: Target) -> List[Candidate]:
        try:
            infos = socket.getaddrinfo(
                target.host, target.port, self.family, self.socktype, 0, self.flags
            )
        except socket.gaierror as e:
            raise ResolutionError(target.host, e.strerror or str(e)) from e
        except UnicodeError as e:
            # idna refuses the name before it ever reaches the resolver
            raise ResolutionError(target.host, str(e)) from e

        if not infos:
            raise ResolutionError(target.host, "No address associated with hostname")

        # Keep resolver order, it is not ours to sort
        candidates = [
            Candidate(family=fam, socktype=stype, proto=proto, sockaddr=sa)
            for fam, stype, proto, _canon, sa in infos
        ]
        log.debug("Resolved %s to %d address(es)", target.host, len(candidates))
        return candidates

    def reverse(self, candidate: Candidate) -> str:
        try:
            host, _serv = socket.getnameinfo(
                candidate.sockaddr, socket.NI_NUMERICHOST | socket.NI_NUMERICSERV
            )
        except OSError as e:
            raise ReverseLookupError(str(e)) from e
        return host
