# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Load SMTP settings from an INI file with environment variable fallbacks.

The library API needs no configuration; these settings feed the command
line defaults.

Environment variables (all prefixed with MIME_MAILER_):
  MIME_MAILER_CONFIG - Path to the INI file (default: mime_mailer.ini)
  MIME_MAILER_LOG_LEVEL - Logging level (default: WARNING)
  MIME_MAILER_SERVER - SMTP server as host:port
  MIME_MAILER_USER - SMTP username
  MIME_MAILER_PASSWORD - SMTP password
  MIME_MAILER_TIMEOUT - SMTP command timeout in seconds (default: 10)
  MIME_MAILER_START_TLS - auto, yes or no (default: auto)
  MIME_MAILER_FROM - Default From address

Config file sections/keys:
  [smtp] server, user, password, timeout, start_tls
  [message] from
  [logging] level
"""

from __future__ import annotations

import configparser
import os
from pathlib import Path
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError
from .logger import logger

DEFAULT_CONFIG_PATH = "mime_mailer.ini"
ENV_PREFIX = "MIME_MAILER_"
DEFAULT_LOG_LEVEL = "WARNING"


class SMTPSettings(BaseModel):
    """Validated SMTP defaults.

    Attributes:
        server: SMTP server as ``host:port``.
        user: SMTP authentication username.
        password: SMTP authentication password.
        timeout: Timeout in seconds for each SMTP command.
        start_tls: ``None`` for opportunistic STARTTLS, otherwise forced on or off.
        from_addr: Default sender address.
        log_level: Logging level name.
    """

    model_config = ConfigDict(extra="forbid")

    server: Annotated[
        Optional[str],
        Field(default=None, min_length=1, max_length=255, description="SMTP server host:port"),
    ]
    user: Annotated[
        Optional[str],
        Field(default=None, max_length=255, description="SMTP username"),
    ]
    password: Annotated[
        Optional[str],
        Field(default=None, max_length=255, description="SMTP password"),
    ]
    timeout: Annotated[
        float,
        Field(default=10.0, gt=0, description="SMTP command timeout in seconds"),
    ]
    start_tls: Annotated[
        Optional[bool],
        Field(default=None, description="Force STARTTLS on/off, None for opportunistic"),
    ]
    from_addr: Annotated[
        Optional[str],
        Field(default=None, max_length=998, description="Default From header"),
    ]
    log_level: Annotated[
        str,
        Field(default=DEFAULT_LOG_LEVEL, description="Logging level"),
    ]

    @field_validator("start_tls", mode="before")
    @classmethod
    def _parse_start_tls(cls, value):
        if value is None or isinstance(value, bool):
            return value
        normalized = str(value).strip().lower()
        if normalized in {"", "auto"}:
            return None
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
        raise ValueError(f"expected auto, yes or no, got {value!r}")

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.strip().upper()


def load_settings(config_path: Optional[str] = None) -> SMTPSettings:
    """Read settings from ``config_path`` (or ``MIME_MAILER_CONFIG``) and the environment.

    Values in the INI file win over environment variables. A missing file
    is only an error when its path was given explicitly.

    Raises:
        ConfigurationError: If the file is missing or unreadable, or a value is invalid.
    """
    explicit = config_path or os.getenv(f"{ENV_PREFIX}CONFIG")
    path = Path(explicit or DEFAULT_CONFIG_PATH).expanduser()
    parser = configparser.ConfigParser()
    if path.exists():
        try:
            parser.read(path)
        except configparser.Error as exc:
            raise ConfigurationError(f"Invalid config file {path}: {exc}") from exc
        logger.debug("Loaded configuration from %s", path)
    elif explicit:
        raise ConfigurationError(f"Config file not found: {path}")

    def get(section: str, option: str, env: str) -> Optional[str]:
        if parser.has_option(section, option):
            return parser.get(section, option)
        return os.getenv(f"{ENV_PREFIX}{env}")

    raw = {
        "server": get("smtp", "server", "SERVER"),
        "user": get("smtp", "user", "USER"),
        "password": get("smtp", "password", "PASSWORD"),
        "timeout": get("smtp", "timeout", "TIMEOUT"),
        "start_tls": get("smtp", "start_tls", "START_TLS"),
        "from_addr": get("message", "from", "FROM"),
        "log_level": get("logging", "level", "LOG_LEVEL"),
    }
    values = {key: value for key, value in raw.items() if value is not None}
    try:
        return SMTPSettings(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in {path}: {exc}") from exc
