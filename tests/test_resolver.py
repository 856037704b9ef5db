import socket

import pytest

from ns_probe.errors import ResolutionError, ReverseLookupError
from ns_probe.models import Target
from ns_probe.resolver import Resolver

from conftest import make_candidate


def test_resolves_numeric_host_to_stream_candidate():
    candidates = Resolver().resolve(Target("127.0.0.1", "8080"))

    assert candidates
    first = candidates[0]
    assert first.family == socket.AF_INET
    assert first.socktype == socket.SOCK_STREAM
    assert first.sockaddr == ("127.0.0.1", 8080)
    assert first.address == "127.0.0.1"


def test_query_uses_unspec_family_and_numeric_service(monkeypatch):
    seen = {}

    def fake(host, port, family, socktype, proto, flags):
        seen.update(host=host, port=port, family=family, socktype=socktype, flags=flags)
        return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", ("192.0.2.1", 80))]

    monkeypatch.setattr(socket, "getaddrinfo", fake)
    Resolver().resolve(Target("example.test"))

    assert seen == {
        "host": "example.test",
        "port": "80",
        "family": socket.AF_UNSPEC,
        "socktype": socket.SOCK_STREAM,
        "flags": socket.AI_NUMERICSERV,
    }


def test_keeps_resolver_order(monkeypatch):
    infos = [
        (socket.AF_INET6, socket.SOCK_STREAM, 6, "", ("2001:db8::1", 80, 0, 0)),
        (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("192.0.2.9", 80)),
        (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("192.0.2.1", 80)),
    ]
    monkeypatch.setattr(socket, "getaddrinfo", lambda *a: infos)

    addrs = [c.address for c in Resolver().resolve(Target("multi.test"))]
    assert addrs == ["2001:db8::1", "192.0.2.9", "192.0.2.1"]


def test_resolver_error_keeps_diagnostic(monkeypatch):
    def fake(*a):
        raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")

    monkeypatch.setattr(socket, "getaddrinfo", fake)

    with pytest.raises(ResolutionError) as exc:
        Resolver().resolve(Target("nosuch.invalid"))

    assert exc.value.host == "nosuch.invalid"
    assert str(exc.value) == "Failed resolving hostname nosuch.invalid: Name or service not known"


def test_no_addresses_is_a_resolution_error(monkeypatch):
    monkeypatch.setattr(socket, "getaddrinfo", lambda *a: [])

    with pytest.raises(ResolutionError, match="empty.test"):
        Resolver().resolve(Target("empty.test"))


def test_non_numeric_port_fails_resolution():
    with pytest.raises(ResolutionError):
        Resolver().resolve(Target("127.0.0.1", "http"))


def test_reverse_is_numeric():
    assert Resolver().reverse(make_candidate(80)) == "127.0.0.1"


def test_reverse_failure(monkeypatch):
    def fake(*a):
        raise socket.gaierror(socket.EAI_FAIL, "Non-recoverable failure in name resolution")

    monkeypatch.setattr(socket, "getnameinfo", fake)

    with pytest.raises(ReverseLookupError):
        Resolver().reverse(make_candidate(80))
