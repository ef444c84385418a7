"""
Command line helper: log in once, perform one request, print the result.

Example::

    proxmox-session --insecure --username root@pam --path /version
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional, Tuple

from .config import CONFIG_ENV_VAR, Config, load_config
from .errors import ProxmoxError
from .log import setup_logging
from .session import SUPPORTED_METHODS, QueryParams, Session
from .transport import build_transport

PASSWORD_ENV_VAR = "PROXMOX_PASSWORD"


def _key_value(raw: str) -> Tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {raw!r}")
    return key, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Authenticate against a Proxmox VE API and perform a single request."
    )
    parser.add_argument(
        "--config",
        default=os.getenv(CONFIG_ENV_VAR),
        help=f"Path to a JSON config file (default: ${CONFIG_ENV_VAR})",
    )
    parser.add_argument("--url", help="API base URL, e.g. https://127.0.0.1:8006/api2/json")
    parser.add_argument("--username", "-username", help="The username to authenticate with")
    parser.add_argument(
        "--password",
        "-password",
        default=os.getenv(PASSWORD_ENV_VAR),
        help=f"The password to authenticate with (default: ${PASSWORD_ENV_VAR})",
    )
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="Skip TLS certificate verification",
    )
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    parser.add_argument(
        "--method",
        default="GET",
        type=str.upper,
        choices=SUPPORTED_METHODS,
        help="HTTP method (default: %(default)s)",
    )
    parser.add_argument("--path", "-path", default="", help="The path to query (e.g. /version)")
    parser.add_argument(
        "--param",
        action="append",
        default=[],
        type=_key_value,
        metavar="KEY=VALUE",
        help="Query parameter, may be repeated",
    )
    parser.add_argument("--log-level", help="Logging level (default: WARNING)")
    return parser


def resolve_config(args: argparse.Namespace) -> Config:
    """Load the config file, if any, and apply command line overrides."""
    cfg = load_config(args.config) if args.config else Config()
    if args.url:
        cfg.proxmox.base_url = args.url
    if args.insecure:
        cfg.proxmox.verify_ssl = False
    if args.timeout is not None:
        cfg.proxmox.timeout = args.timeout
    if args.username:
        cfg.auth.username = args.username
    if args.password is not None:
        cfg.auth.password = args.password
    if args.log_level:
        cfg.logging.level = args.log_level.upper()
    return cfg


def connect(cfg: Config, transport: Optional[Any] = None) -> Session:
    """Log in with the configured credentials and return the session."""
    if transport is None:
        transport = build_transport(verify_ssl=cfg.proxmox.verify_ssl)
    return Session.login(
        transport,
        cfg.proxmox.base_url,
        cfg.auth.credentials(),
        timeout=cfg.proxmox.timeout,
        verify=cfg.proxmox.verify_ssl,
    )


def main(argv: Optional[List[str]] = None, transport: Optional[Any] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    params: QueryParams = dict(args.param)

    try:
        cfg = resolve_config(args)
        setup_logging(cfg.logging)
        session = connect(cfg, transport)
        result: Dict[str, Any] = session.do(args.method, args.path, params)
    except ProxmoxError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
