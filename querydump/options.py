"""Connection option resolution.

Options are layered: built-in defaults, then ~/.my.cnf, then an explicit
config file, then command-line values. Only values that are set override the
previous layer.
"""
from __future__ import annotations

import configparser
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .errors import ConfigurationError
from .schemas import ClientOptions

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3306
# Escaping only holds for utf8 and single-byte encodings, so output is always utf8
DEFAULT_CHARSET = "utf8"


def default_options_file() -> Path:
    return Path(os.environ.get("HOME", "~")).expanduser() / ".my.cnf"


def parse_options_file(path) -> ClientOptions:
    parser = configparser.ConfigParser(allow_no_value=True, interpolation=None, strict=False)
    try:
        with open(path, encoding="utf-8") as f:
            parser.read_file(f)
    except (OSError, configparser.Error) as e:
        raise ConfigurationError(f"Unable to read {path}: {e}") from e

    if not parser.has_section("client"):
        raise ConfigurationError(f"Unable to parse {path}")
    section = parser["client"]

    port = section.get("port")
    if port:
        try:
            port = int(port)
        except ValueError:
            raise ConfigurationError(f"Invalid port value in {path}")

    try:
        return ClientOptions(
            host=section.get("host"),
            user=section.get("user"),
            password=_unquote(section.get("password")),
            database=section.get("database"),
            port=port or None,
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid port value in {path}") from e


def _unquote(value: Optional[str]) -> Optional[str]:
    # the mysql client accepts password="..." in option files
    if value and len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def resolve_options(
    host: Optional[str] = None,
    user: Optional[str] = None,
    database: Optional[str] = None,
    port: Optional[int] = None,
    config_file: Optional[str] = None,
    defaults_file: Optional[Path] = None,
) -> ClientOptions:
    """Merge defaults, ~/.my.cnf, the optional config file and CLI values."""
    options = ClientOptions(host=DEFAULT_HOST, port=DEFAULT_PORT)

    my_cnf = defaults_file if defaults_file is not None else default_options_file()
    if my_cnf.exists():
        options = options.extend(parse_options_file(my_cnf))

    if config_file:
        options = options.extend(parse_options_file(config_file))

    try:
        cli = ClientOptions(host=host, user=user, database=database, port=port, charset=DEFAULT_CHARSET)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid connection options: {e}") from e
    return options.extend(cli)
