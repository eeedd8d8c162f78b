"""apt mirror selection and unattended package installs.

SRP: only sources.list edits and apt-get invocations live here.
"""

from __future__ import annotations

import re
from typing import Iterable

from config import Settings
from modules.utils import (
    ArgumentError,
    log,
    require_argument,
    run_cmd,
    write_text_atomic,
)

ARCHIVE_HOST_RE = re.compile(r"\w+\.archive\.ubuntu\.com")
SECURITY_HOST_RE = re.compile(r"security\.ubuntu\.com")

APT_INSTALL_OPTIONS = [
    "-o", "Dpkg::Options::=--force-confdef",
    "-o", "Dpkg::Options::=--force-confold",
    "-f", "-y", "-q",
]


def rewrite_mirror(text: str, country: str) -> str:
    mirror = f"{country}.archive.ubuntu.com"
    text = ARCHIVE_HOST_RE.sub(mirror, text)
    return SECURITY_HOST_RE.sub(mirror, text)


def pick_mirror(country: str, settings: Settings) -> bool:
    """Point every Ubuntu archive/security host at <country>.archive."""
    require_argument(country, "a country code", "apt-mirror-pick")
    path = settings.apt_sources
    text = path.read_text()
    updated = rewrite_mirror(text, country)
    if updated == text:
        log(f"INFO: {path} already uses {country} mirror")
        return False
    write_text_atomic(path, updated)
    log(f"PASS: Switched {path} to {country}.archive.ubuntu.com")
    return True


def update_packages(settings: Settings) -> None:
    run_cmd(["apt-get", "-q", "update"], sudo=settings.sudo_argv)


def install_argv(packages: Iterable[str]) -> list[str]:
    pkgs = [p for p in packages if p]
    if not pkgs:
        raise ArgumentError("at least one package", "apt-packages-install")
    return [
        "env",
        "DEBIAN_FRONTEND=noninteractive",
        "apt-get",
        *APT_INSTALL_OPTIONS,
        "install",
        *pkgs,
    ]


def install_packages(packages: Iterable[str], settings: Settings) -> None:
    pkgs = list(packages)
    run_cmd(install_argv(pkgs), sudo=settings.sudo_argv)
    log(f"PASS: Installed {' '.join(pkgs)}")

