from pathlib import Path
import textwrap

import pytest

from athena.config.loader import ConfigError, load_config

ENV_VARS = (
    "ATHENA_SCHEME", "ATHENA_ADDRESS", "ATHENA_PORT", "ATHENA_USER",
    "ATHENA_PASSWORD", "ATHENA_VERIFY_SSL", "ATHENA_REQUEST_TIMEOUT", "ATHENA_CONFIG_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


def _env(monkeypatch, **values):
    for k, v in values.items():
        monkeypatch.setenv(f"ATHENA_{k.upper()}", v)


def test_environment_only(monkeypatch):
    _env(monkeypatch, address="onefuse.test", port="443", user="admin", password="secret")

    cfg = load_config()

    assert cfg.scheme == "https"
    assert cfg.verify_ssl is True
    assert cfg.base_url() == "https://onefuse.test:443"
    assert "secret" not in repr(cfg)


def test_verify_ssl_and_timeout_from_env(monkeypatch):
    _env(monkeypatch, address="a", port="80", user="u", password="p",
         scheme="http", verify_ssl="false", request_timeout="5")

    cfg = load_config()

    assert cfg.scheme == "http"
    assert cfg.verify_ssl is False
    assert cfg.request_timeout_seconds == 5.0


def test_yaml_file_wins_over_environment(monkeypatch, tmp_path: Path):
    _env(monkeypatch, address="from-env", port="443", user="admin", password="env-secret")
    monkeypatch.setenv("ONEFUSE_PW", "file-secret")
    f = tmp_path / "athena.yaml"
    f.write_text(textwrap.dedent("""
        athena:
          address: onefuse.lab
          port: 8443
          password: ${ONEFUSE_PW}
          user: ""
          verify_ssl: false
    """))

    cfg = load_config(f)

    assert cfg.address == "onefuse.lab"
    assert cfg.port == "8443"
    assert cfg.password == "file-secret"
    assert cfg.user == "admin"          # empty values in the file do not override
    assert cfg.verify_ssl is False


def test_config_file_from_environment(monkeypatch, tmp_path: Path):
    f = tmp_path / "athena.yaml"
    f.write_text("address: x\nport: '1'\nuser: u\npassword: p\n")
    monkeypatch.setenv("ATHENA_CONFIG_FILE", str(f))

    assert load_config().address == "x"


def test_missing_required_values():
    with pytest.raises(ConfigError) as ei:
        load_config()
    assert "address" in str(ei.value)


def test_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yaml")


def test_frozen(monkeypatch):
    _env(monkeypatch, address="a", port="1", user="u", password="p")
    cfg = load_config()
    with pytest.raises(Exception):
        cfg.address = "b"
