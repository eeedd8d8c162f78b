"""Apache site creation with SuExec + FastCGI wiring.

Steps, in order, all fail-fast with no rollback:
1. create <document_path>/.cgi-bin/ (0755)
2. render the vhost config, adding the PHP handler block when PHP is set
3. write the php-fcgi wrapper (PHP only)
4. write sites-available/<name> (overwrites; does not enable the site)
5. chown -R user:group the CGI dir
6. allow the document root in the SuExec allow-list
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from config import CGI_DIR_NAME, DIR_PERMS, EXEC_PERMS, PHP_CGI_ACTION, Settings
from modules.utils import ArgumentError, log, require_argument, run_cmd, write_text_atomic
from .suexec import ensure_allowed
from .vhost import (
    VhostConfig,
    close_block,
    fastcgi_block,
    php_block,
    php_wrapper_script,
    vhost_block,
)

OPERATION = "apache-sites-create"


@dataclass(frozen=True)
class SiteSpec:
    name: str
    document_path: str
    user: str
    group: str
    php: str | None = None

    @classmethod
    def build(
        cls,
        name: str | None,
        path: str | None = None,
        user: str | None = None,
        group: str | None = None,
        php: str | None = None,
    ) -> "SiteSpec":
        name = require_argument(name, "a site name", OPERATION)
        user = user or name
        return cls(
            name=name,
            document_path=path or f"/{name}",
            user=user,
            group=group or user,
            php=php or None,
        )

    @property
    def cgi_system_path(self) -> str:
        return f"{self.document_path.rstrip('/')}/{CGI_DIR_NAME}/"

    def config_path(self, settings: Settings) -> Path:
        return settings.apache_sites_available / self.name


@dataclass(frozen=True)
class SiteResult:
    config_path: Path
    cgi_path: Path
    wrapper_path: Path | None
    allow_list_updated: bool


def build_config(spec: SiteSpec, settings: Settings, php: str | None) -> VhostConfig:
    conf = VhostConfig()
    conf.add("fastcgi", fastcgi_block(settings.suexec_binary))
    conf.add(
        "vhost",
        vhost_block(
            spec.name,
            spec.document_path,
            spec.user,
            spec.group,
            spec.cgi_system_path,
            settings.apache_log_dir,
        ),
    )
    if php:
        conf.add("php", php_block())
    conf.add("close", close_block(), gap=0)
    return conf


def ensure_cgi_dir(spec: SiteSpec) -> Path:
    cgi_path = Path(spec.cgi_system_path)
    cgi_path.mkdir(parents=True, exist_ok=True)
    # mkdir(mode=) is masked by the umask
    os.chmod(cgi_path, DIR_PERMS)
    log(f"PASS: CGI dir ready {cgi_path}")
    return cgi_path


def write_php_wrapper(spec: SiteSpec, php: str) -> Path:
    wrapper = Path(spec.cgi_system_path) / PHP_CGI_ACTION
    write_text_atomic(
        wrapper, php_wrapper_script(spec.cgi_system_path, php), mode=EXEC_PERMS
    )
    log(f"PASS: Wrote {wrapper} -> {php}")
    return wrapper


def create_site(spec: SiteSpec, settings: Settings) -> SiteResult:
    if not spec.name:
        raise ArgumentError("a site name", OPERATION)
    php = spec.php or settings.php

    cgi_path = ensure_cgi_dir(spec)
    conf = build_config(spec, settings, php)
    wrapper = write_php_wrapper(spec, php) if php else None

    config_path = spec.config_path(settings)
    write_text_atomic(config_path, conf.render())
    log(f"PASS: Wrote Apache config {config_path} ({', '.join(conf.names())})")

    run_cmd(
        ["chown", "-R", f"{spec.user}:{spec.group}", str(cgi_path)],
        sudo=settings.sudo_argv,
    )
    updated = ensure_allowed(settings.suexec_allow_list, spec.document_path)
    return SiteResult(config_path, cgi_path, wrapper, updated)
