"""Shared configuration for hostprov.

Centralizes the system paths and command defaults used by modules.
``Settings`` carries them into each operation so callers (and tests) can
override any of them without touching the process environment.
"""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping

DEFAULT_SUDO = "sudo"
RESOLV_CONF = "/etc/resolv.conf"
APT_SOURCES_LIST = "/etc/apt/sources.list"
APACHE_SITES_AVAILABLE_DIR = "/etc/apache2/sites-available"
APACHE_LOG_DIR = "/var/log/apache2"
SUEXEC_BINARY = "/usr/lib/apache2/suexec"
SUEXEC_ALLOW_LIST = "/etc/apache2/suexec/www-data"
MYSQL_CNF = "/etc/mysql/my.cnf"
MYSQL_USER = "root"
DEFAULT_CHARSET = "utf8"
DEFAULT_COLLATION = "utf8_general_ci"
CGI_URL_PREFIX = "/cgi-bin/"
CGI_DIR_NAME = ".cgi-bin"
PHP_CGI_ACTION = "php-fcgi"
PHP_FCGI_CHILDREN = 4
PHP_FCGI_MAX_REQUESTS = 200
DIR_PERMS = 0o755
EXEC_PERMS = 0o755


@dataclass(frozen=True)
class Settings:
    sudo: str = DEFAULT_SUDO
    php: str | None = None
    resolv_conf: Path = field(default_factory=lambda: Path(RESOLV_CONF))
    apt_sources: Path = field(default_factory=lambda: Path(APT_SOURCES_LIST))
    apache_sites_available: Path = field(
        default_factory=lambda: Path(APACHE_SITES_AVAILABLE_DIR)
    )
    apache_log_dir: Path = field(default_factory=lambda: Path(APACHE_LOG_DIR))
    suexec_binary: Path = field(default_factory=lambda: Path(SUEXEC_BINARY))
    suexec_allow_list: Path = field(
        default_factory=lambda: Path(SUEXEC_ALLOW_LIST)
    )
    mysql_cnf: Path = field(default_factory=lambda: Path(MYSQL_CNF))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from ``SUDO`` and ``PHP`` in *environ*.

        An unset or empty ``SUDO`` falls back to ``sudo``, as the shell
        helpers always did; pass ``Settings(sudo="")`` explicitly to run
        commands without a prefix.
        """
        env = os.environ if environ is None else environ
        sudo = env.get("SUDO") or DEFAULT_SUDO
        php = env.get("PHP") or None
        return cls(sudo=sudo, php=php)

    @property
    def sudo_argv(self) -> list[str]:
        return shlex.split(self.sudo)

    def with_php(self, php: str | None) -> "Settings":
        return replace(self, php=php)
