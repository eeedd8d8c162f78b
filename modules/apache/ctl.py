"""Apache module/site toggles and restart. Changes need a restart."""

from __future__ import annotations

from typing import Iterable

from config import Settings
from modules.utils import ArgumentError, log, run_cmd


def _toggle(
    tool: str, names: Iterable[str], what: str, operation: str, settings: Settings
) -> None:
    items = [n for n in names if n]
    if not items:
        raise ArgumentError(what, operation)
    run_cmd([tool, *items], sudo=settings.sudo_argv)
    log(f"PASS: {tool} {' '.join(items)}")


def enable_modules(names: Iterable[str], settings: Settings) -> None:
    _toggle("a2enmod", names, "at least one module", "apache-modules-enable", settings)


def disable_modules(names: Iterable[str], settings: Settings) -> None:
    _toggle("a2dismod", names, "at least one module", "apache-modules-disable", settings)


def enable_sites(names: Iterable[str], settings: Settings) -> None:
    _toggle("a2ensite", names, "at least one site", "apache-sites-enable", settings)


def disable_sites(names: Iterable[str], settings: Settings) -> None:
    _toggle("a2dissite", names, "at least one site", "apache-sites-disable", settings)


def restart(settings: Settings) -> None:
    run_cmd(["service", "apache2", "restart"], sudo=settings.sudo_argv)
