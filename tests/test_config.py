import json
from pathlib import Path

import pytest

from proxmox_session.config import DEFAULT_BASE_URL, Config, load_config, parse_config
from proxmox_session.errors import ConfigurationError


def _write_config(tmp_path: Path, config) -> Path:
    cfg_path = tmp_path / "config.json"
    cfg_path.write_text(json.dumps(config))
    return cfg_path


def test_load_config_from_host_and_port(tmp_path):
    cfg_path = _write_config(
        tmp_path,
        {
            "proxmox": {"host": "pve.local", "port": 8443, "verify_ssl": False, "timeout": 10},
            "auth": {"username": "api@pve", "password": "secret"},
            "logging": {"level": "info", "format": "%(message)s"},
        },
    )

    cfg = load_config(str(cfg_path))

    assert cfg.proxmox.base_url == "https://pve.local:8443/api2/json"
    assert cfg.proxmox.verify_ssl is False
    assert cfg.proxmox.timeout == 10
    assert cfg.auth.credentials() == {"username": "api@pve", "password": "secret"}
    assert cfg.logging.level == "INFO"
    assert cfg.logging.format == "%(message)s"


def test_explicit_base_url_wins(tmp_path):
    cfg_path = _write_config(
        tmp_path,
        {"proxmox": {"base_url": "https://10.0.0.5:8006/api2/json", "host": "ignored"}},
    )
    assert load_config(str(cfg_path)).proxmox.base_url == "https://10.0.0.5:8006/api2/json"


def test_defaults():
    cfg = parse_config({})
    assert cfg.proxmox.base_url == DEFAULT_BASE_URL
    assert cfg.proxmox.verify_ssl is True
    assert cfg.auth.username == "root@pam"
    assert cfg == Config()


def test_password_from_environment(monkeypatch):
    monkeypatch.setenv("PVE_TEST_PASSWORD", "from-env")
    cfg = parse_config({"auth": {"username": "root@pam", "password_env_var": "PVE_TEST_PASSWORD"}})

    assert cfg.auth.credentials()["password"] == "from-env"


def test_missing_password_env_var(monkeypatch):
    monkeypatch.delenv("PVE_TEST_PASSWORD", raising=False)
    cfg = parse_config({"auth": {"password_env_var": "PVE_TEST_PASSWORD"}})

    with pytest.raises(ConfigurationError):
        cfg.auth.credentials()


def test_no_password_configured():
    with pytest.raises(ConfigurationError):
        Config().auth.credentials()


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_config(str(tmp_path / "nope.json"))


def test_invalid_json(tmp_path):
    cfg_path = tmp_path / "config.json"
    cfg_path.write_text("{not json")

    with pytest.raises(ConfigurationError):
        load_config(str(cfg_path))


def test_section_must_be_object():
    with pytest.raises(ConfigurationError):
        parse_config({"proxmox": ["pve.local"]})


@pytest.mark.parametrize("value", ["false", 0, None])
def test_verify_ssl_must_be_boolean(value):
    with pytest.raises(ConfigurationError):
        parse_config({"proxmox": {"verify_ssl": value}})


@pytest.mark.parametrize("value", ["30", True, 0, -5])
def test_timeout_must_be_positive_number(value):
    with pytest.raises(ConfigurationError):
        parse_config({"proxmox": {"timeout": value}})


def test_timeout_may_be_disabled():
    assert parse_config({"proxmox": {"timeout": None}}).proxmox.timeout is None
