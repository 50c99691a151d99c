import argparse

import pytest

from pgexec.config import (
    DRIVERNAME,
    ConnectionSpec,
    is_conninfo,
    normalize_db_url,
    parse_port,
    redact_url,
    resolve_target,
    resolve_url,
)
from pgexec.errors import ConfigError


def test_spec_immutable():
    """Verify ConnectionSpec is frozen (immutable)."""
    spec = ConnectionSpec(url="postgres://localhost/db")

    with pytest.raises(Exception):  # FrozenInstanceError
        spec.url = "other"


def test_from_args_maps_db_flag_to_database():
    ns = argparse.Namespace(url=None, host="h", port="5432", user="u", password="pw", db="app")
    spec = ConnectionSpec.from_args(ns)
    assert spec == ConnectionSpec(url="", host="h", port="5432", user="u", password="pw", database="app")
    assert not spec.uses_url


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("postgres://u@h/db", f"{DRIVERNAME}://u@h/db"),
        ("postgresql://u@h/db", f"{DRIVERNAME}://u@h/db"),
        ("postgresql+psycopg2://u@h/db", f"{DRIVERNAME}://u@h/db"),
        (f"{DRIVERNAME}://u@h/db", f"{DRIVERNAME}://u@h/db"),
    ],
)
def test_normalize_db_url(raw, expected):
    assert normalize_db_url(raw) == expected


def test_redact_url_hides_password():
    assert redact_url("postgres://bob:s3cret@db:5432/app") == "postgres://bob:***@db:5432/app"


def test_url_takes_precedence_over_discrete_fields():
    # port is garbage, but must never be looked at when url is set
    spec = ConnectionSpec(
        url="  postgres://bob:pw@db.example:6543/app \n",
        host="ignored",
        port="not-a-port",
        user="ignored",
        password="ignored",
        database="ignored",
    )
    url = resolve_url(spec)
    assert url.drivername == DRIVERNAME
    assert url.host == "db.example"
    assert url.port == 6543
    assert url.username == "bob"
    assert url.database == "app"


def test_discrete_fields_build_url():
    spec = ConnectionSpec(host="h", port=" 5433 ", user="alice", password="pw", database="shop")
    url = resolve_url(spec)
    assert url.drivername == DRIVERNAME
    assert (url.host, url.port, url.username, url.password, url.database) == ("h", 5433, "alice", "pw", "shop")


def test_blank_discrete_fields_become_none():
    url = resolve_url(ConnectionSpec(port="5432"))
    assert url.host is None
    assert url.username is None
    assert url.database is None


def test_whitespace_url_falls_back_to_discrete_fields():
    url = resolve_url(ConnectionSpec(url="   ", host="h", port="5432"))
    assert url.host == "h"


@pytest.mark.parametrize("port", ["", "abc", "54a", "5_432", "1.5", "65536", "-1"])
def test_bad_port_raises_config_error(port):
    with pytest.raises(ConfigError):
        resolve_url(ConnectionSpec(host="h", port=port))


@pytest.mark.parametrize("port,expected", [("0", 0), ("5432", 5432), ("\t65535\n", 65535)])
def test_parse_port_accepts_u16(port, expected):
    assert parse_port(port) == expected


def test_malformed_url_raises_config_error():
    with pytest.raises(ConfigError) as ei:
        resolve_url(ConnectionSpec(url="not a url at all"))
    assert "Invalid connection URL" in str(ei.value)


@pytest.mark.parametrize("url", ["postgres://u:p@h:abc/db", "postgresql://h:99x/db"])
def test_bad_port_inside_url_raises_config_error(url):
    with pytest.raises(ConfigError) as ei:
        resolve_url(ConnectionSpec(url=url))
    assert "Invalid connection URL" in str(ei.value)


def test_conninfo_string_is_passed_through_verbatim():
    dsn = "host=localhost port=5432 dbname=app user=bob"
    target = resolve_target(ConnectionSpec(url=f"  {dsn}  ", port="not-a-port"))

    assert target.connect_args == {"conninfo": dsn}
    assert target.url.drivername == DRIVERNAME
    assert target.url.host is None


def test_conninfo_describe_hides_password():
    target = resolve_target(ConnectionSpec(url="host=db password=s3cret dbname=app"))
    assert "s3cret" not in target.describe()
    assert "password=***" in target.describe()


def test_malformed_conninfo_raises_config_error():
    with pytest.raises(ConfigError) as ei:
        resolve_target(ConnectionSpec(url="host=db dbname='unterminated"))
    assert "Invalid connection string" in str(ei.value)


def test_url_target_has_no_connect_args():
    target = resolve_target(ConnectionSpec(url="postgres://u@h/db"))
    assert target.connect_args == {}
    assert is_conninfo("host=h") and not is_conninfo("postgres://u@h/db?sslmode=require")
