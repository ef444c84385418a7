"""
Configuration loading for the proxmox-session CLI and embedding scripts.

The JSON file uses the same three sections as other Proxmox tooling::

    {
        "proxmox": {"host": "pve.local", "port": 8006, "verify_ssl": false},
        "auth": {"username": "root@pam", "password_env_var": "PVE_PASSWORD"},
        "logging": {"level": "INFO", "format": "%(message)s"}
    }

``proxmox.base_url`` may be given instead of ``host``/``port``.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .errors import ConfigurationError
from .session import QueryParams

CONFIG_ENV_VAR = "PROXMOX_SESSION_CONFIG"
DEFAULT_BASE_URL = "https://127.0.0.1:8006/api2/json"
DEFAULT_PORT = 8006
DEFAULT_TIMEOUT = 30.0
DEFAULT_USERNAME = "root@pam"
DEFAULT_LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

LOG = logging.getLogger("proxmox_session.config")


@dataclass
class ProxmoxConfig:
    base_url: str = DEFAULT_BASE_URL
    verify_ssl: bool = True
    timeout: Optional[float] = DEFAULT_TIMEOUT


@dataclass
class AuthConfig:
    username: str = DEFAULT_USERNAME
    password: Optional[str] = None
    password_env_var: Optional[str] = None

    def credentials(self) -> QueryParams:
        """Return the login parameters, resolving the password from the environment if needed."""
        password = self.password
        if password is None and self.password_env_var:
            password = os.getenv(self.password_env_var)
            if password is None:
                raise ConfigurationError(f"Environment variable {self.password_env_var} is not set")
        if password is None:
            raise ConfigurationError("No password or password_env_var configured")
        return {"username": self.username, "password": password}


@dataclass
class LoggingConfig:
    level: str = "WARNING"
    format: str = DEFAULT_LOG_FORMAT


@dataclass
class Config:
    proxmox: ProxmoxConfig = field(default_factory=ProxmoxConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"Config section '{name}' must be an object")
    return section


def _base_url(proxmox: Dict[str, Any]) -> str:
    if proxmox.get("base_url"):
        return str(proxmox["base_url"])
    if proxmox.get("host"):
        return f"https://{proxmox['host']}:{proxmox.get('port', DEFAULT_PORT)}/api2/json"
    return DEFAULT_BASE_URL


def _verify_ssl(proxmox: Dict[str, Any]) -> bool:
    value = proxmox.get("verify_ssl", True)
    if not isinstance(value, bool):
        raise ConfigurationError(f"proxmox.verify_ssl must be true or false, got {value!r}")
    return value


def _timeout(proxmox: Dict[str, Any]) -> Optional[float]:
    value = proxmox.get("timeout", DEFAULT_TIMEOUT)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigurationError(f"proxmox.timeout must be a positive number, got {value!r}")
    return float(value)


def parse_config(data: Dict[str, Any]) -> Config:
    """Build a :class:`Config` from an already decoded mapping."""
    if not isinstance(data, dict):
        raise ConfigurationError("Config root must be a JSON object")
    proxmox = _section(data, "proxmox")
    auth = _section(data, "auth")
    log = _section(data, "logging")

    return Config(
        proxmox=ProxmoxConfig(
            base_url=_base_url(proxmox),
            verify_ssl=_verify_ssl(proxmox),
            timeout=_timeout(proxmox),
        ),
        auth=AuthConfig(
            username=auth.get("username", DEFAULT_USERNAME),
            password=auth.get("password"),
            password_env_var=auth.get("password_env_var"),
        ),
        logging=LoggingConfig(
            level=str(log.get("level", "WARNING")).upper(),
            format=log.get("format", DEFAULT_LOG_FORMAT),
        ),
    )


def load_config(config_path: str) -> Config:
    """Load and validate a JSON config file."""
    if not os.path.isfile(config_path):
        raise ConfigurationError(f"Config file not found: {config_path}")

    LOG.debug("Loading config from %s", config_path)
    with open(config_path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid JSON in {config_path}: {exc}") from exc
    return parse_config(data)
