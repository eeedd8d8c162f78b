"""Virtual-host config builder.

A config is an ordered list of named text sections rendered once at the
end, so callers can check for one section (e.g. ``php``) without parsing
the whole file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from config import (
    CGI_URL_PREFIX,
    PHP_CGI_ACTION,
    PHP_FCGI_CHILDREN,
    PHP_FCGI_MAX_REQUESTS,
)

FASTCGI_POLICY = (
    "-pass-header HTTP_AUTHORIZATION -autoUpdate -killInterval 120 -idle-timeout 30"
)


@dataclass
class Section:
    name: str
    text: str
    # blank lines emitted before this section
    gap: int = 1


@dataclass
class VhostConfig:
    sections: list[Section] = field(default_factory=list)

    def add(self, name: str, text: str, gap: int = 1) -> "VhostConfig":
        if self.has(name):
            raise ValueError(f"duplicate vhost section: {name}")
        self.sections.append(Section(name, text.rstrip("\n"), gap))
        return self

    def has(self, name: str) -> bool:
        return any(s.name == name for s in self.sections)

    def section(self, name: str) -> str:
        for s in self.sections:
            if s.name == name:
                return s.text
        raise KeyError(name)

    def names(self) -> list[str]:
        return [s.name for s in self.sections]

    def render(self) -> str:
        out = ""
        for i, s in enumerate(self.sections):
            if i:
                out += "\n" * (s.gap + 1)
            out += s.text
        return out + "\n"


def fastcgi_block(suexec_binary: Path) -> str:
    return (
        "<IfModule mod_fastcgi.c>\n"
        f"  FastCgiWrapper {suexec_binary}\n"
        f"  FastCgiConfig  {FASTCGI_POLICY}\n"
        "</IfModule>"
    )


def vhost_block(
    name: str,
    document_path: str,
    user: str,
    group: str,
    cgi_system_path: str,
    log_dir: Path,
) -> str:
    # Options All / AllowOverride All are kept as-is; hardening is left to
    # the site owner.
    return (
        "<VirtualHost *:80>\n"
        f"  DocumentRoot {document_path}\n"
        "\n"
        "  LogLevel debug\n"
        f"  ErrorLog {log_dir}/error.{name}.log\n"
        f"  CustomLog {log_dir}/access.{name}.log combined\n"
        "\n"
        f"  SuexecUserGroup {user} {group}\n"
        f"  ScriptAlias {CGI_URL_PREFIX} {cgi_system_path}\n"
        "\n"
        f"  <Directory {document_path}>\n"
        "    Options All\n"
        "    AllowOverride All\n"
        "  </Directory>"
    )


def php_block(action: str = PHP_CGI_ACTION) -> str:
    url = f"{CGI_URL_PREFIX}{action}"
    return (
        "  <IfModule mod_fastcgi.c>\n"
        f"    <Location {url}>\n"
        "      SetHandler fastcgi-script\n"
        "      Options +ExecCGI +FollowSymLinks\n"
        "      Order Allow,Deny\n"
        "      Allow from all\n"
        "    </Location>\n"
        f"    AddHandler {action} .php\n"
        f"    Action     {action} {url}\n"
        "  </IfModule>"
    )


def close_block() -> str:
    return "</VirtualHost>"


def php_wrapper_script(cgi_system_path: str, php: str) -> str:
    return (
        "#!/bin/bash\n"
        "\n"
        f"export PHP_FCGI_CHILDREN={PHP_FCGI_CHILDREN}\n"
        f"export PHP_FCGI_MAX_REQUESTS={PHP_FCGI_MAX_REQUESTS}\n"
        "\n"
        f'export PHPRC="{cgi_system_path}php.ini"\n'
        "\n"
        f"exec {php}\n"
    )
