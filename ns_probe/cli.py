from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .errors import NsError, UsageError
from .logger import create_logger
from .models import SERVICE_PORT, Target
from .prober import MAX_TIMEOUT_MS, SOCKET_TIMEOUT_MS, probe

USAGE = (
    "Usage: ns [-ch?] [-v] [-t MSEC] [FQDN] [PORT]\n"
    "\n"
    "Options:\n"
    "  -c       Attempt to connect\n"
    "  -t MSEC  Connect timeout in milliseconds (default: 10000)\n"
    "  -v       Verbose, show debug messages\n"
    "  -h,-?    This help text\n"
)


class _Parser(argparse.ArgumentParser):
    # argparse exits on its own, we want our usage text and exit codes
    def error(self, message):
        raise UsageError(message)


def _timeout(value: str) -> int:
    try:
        ms = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid timeout: {value}")
    if ms < 1 or ms > MAX_TIMEOUT_MS:
        raise argparse.ArgumentTypeError(f"timeout out of range: {value}")
    return ms


def build_parser() -> argparse.ArgumentParser:
    p = _Parser(prog="ns", add_help=False)
    p.add_argument("-c", dest="connect", action="store_true", help="Attempt to connect")
    p.add_argument("-h", "-?", dest="help", action="store_true", help="This help text")
    p.add_argument("-v", dest="verbose", action="store_true", help="Show debug messages")
    p.add_argument("-t", dest="timeout", type=_timeout, default=SOCKET_TIMEOUT_MS,
                   help="Connect timeout in milliseconds")
    p.add_argument("host", nargs="?", help="Hostname or address")
    p.add_argument("port", nargs="?", default=SERVICE_PORT, help="Numeric port (default: 80)")
    return p


def usage(rc: int) -> int:
    print(USAGE)
    return rc


def _asks_help(arg: str) -> bool:
    # -h, -? or a cluster of flags like -ch
    if not arg.startswith("-") or arg.startswith("--"):
        return False
    flags = set(arg[1:])
    return bool(flags) and flags <= set("chv?") and bool(flags & {"h", "?"})


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Help wins over everything else on the command line, then unknown
    flags and a missing host are usage errors. Surplus positionals are
    ignored.
    """
    if argv is None:
        argv = sys.argv[1:]
    if any(_asks_help(a) for a in argv):
        return argparse.Namespace(help=True)

    args, extra = build_parser().parse_known_args(argv)
    if any(a.startswith("-") for a in extra):
        raise UsageError(f"unrecognized arguments: {' '.join(extra)}")
    if not args.host:
        raise UsageError("missing host")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    try:
        args = parse_args(argv)
    except UsageError as e:
        return usage(e.code)

    if args.help:
        return usage(0)

    log = create_logger(args.verbose)
    target = Target(host=args.host, port=args.port)

    try:
        result = probe(target, connect=args.connect, timeout_ms=args.timeout)
    except NsError as e:
        log.error("%s", e)
        return 1

    with result:
        return 0 if result.ok else 1


def run() -> None:
    sys.exit(main())
