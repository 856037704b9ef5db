import socket

import pytest

from ns_probe.errors import ReverseLookupError
from ns_probe.logger import create_logger
from ns_probe.models import Candidate
from ns_probe.resolver import Resolver


def make_candidate(port: int, host: str = "127.0.0.1") -> Candidate:
    return Candidate(
        family=socket.AF_INET,
        socktype=socket.SOCK_STREAM,
        proto=socket.IPPROTO_TCP,
        sockaddr=(host, port),
    )


class FakeResolver(Resolver):
    """Hands out fixed candidates, optionally failing reverse lookups by port."""

    def __init__(self, candidates, no_reverse=()):
        super().__init__()
        self.candidates = list(candidates)
        self.no_reverse = set(no_reverse)

    def resolve(self, target):
        return list(self.candidates)

    def reverse(self, candidate):
        if candidate.sockaddr[1] in self.no_reverse:
            raise ReverseLookupError("no name")
        return super().reverse(candidate)


@pytest.fixture
def console(capsys):
    """Attach the console logger from the test body, where capsys streams are live."""

    def attach():
        create_logger()
        return capsys

    return attach


@pytest.fixture
def listener():
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.bind(("127.0.0.1", 0))
    srv.listen(8)
    yield srv.getsockname()[1]
    srv.close()


@pytest.fixture
def closed_port():
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port
