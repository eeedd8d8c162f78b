#!/usr/bin/env python3
"""CLI for one-shot Ubuntu host provisioning.

Inputs: a command named after the provisioning step plus positional args.
Side effects: edits resolv.conf, sources.list, Apache site configs, the
SuExec allow-list and my.cnf; runs apt-get, a2enmod/a2ensite, service and
mysql. Every step fails fast; nothing is rolled back.
"""

from __future__ import annotations

import sys
from typing import Callable

from config import Settings
from modules import apt, nameservers
from modules.apache import ctl as apache_ctl
from modules.apache.site import SiteSpec, create_site
from modules.mysql import db as mysql_db
from modules.mysql.restore import restore_database
from modules.utils import guarded, init_logging, log, status_fail, status_pass

# ─── CONFIG ──────────────────────────────────────────────────────────────
FLAG_DATABASE = "--database"
FLAG_BACKUPS = "--backups"
FLAG_NO_RESTART = "--no-restart"


def _pad(args: list[str], n: int) -> list[str | None]:
    return (list(args) + [None] * n)[:n]


# ─── Commands ────────────────────────────────────────────────────────────
def cmd_nameservers_local_purge(args: list[str], settings: Settings) -> None:
    nameservers.purge_local(settings)


def cmd_nameservers_append(args: list[str], settings: Settings) -> None:
    (ip,) = _pad(args, 1)
    nameservers.append(ip or "", settings)


def cmd_apt_mirror_pick(args: list[str], settings: Settings) -> None:
    (country,) = _pad(args, 1)
    apt.pick_mirror(country or "", settings)


def cmd_apt_packages_update(args: list[str], settings: Settings) -> None:
    apt.update_packages(settings)


def cmd_apt_packages_install(args: list[str], settings: Settings) -> None:
    apt.install_packages(args, settings)


def cmd_apache_sites_create(args: list[str], settings: Settings) -> None:
    name, path, user, group = _pad(args, 4)
    spec = SiteSpec.build(name, path, user, group, php=settings.php)
    create_site(spec, settings)


def cmd_apache_restart(args: list[str], settings: Settings) -> None:
    apache_ctl.restart(settings)


def cmd_mysql_database_create(args: list[str], settings: Settings) -> None:
    name, charset, collation = _pad(args, 3)
    mysql_db.create_database(name or "", charset, collation)


def cmd_mysql_database_restore(args: list[str], settings: Settings) -> None:
    name, directory = _pad(args, 2)
    restore_database(name or "", directory or "")


def cmd_mysql_remote_access_allow(args: list[str], settings: Settings) -> None:
    mysql_db.allow_remote_access(settings)


def cmd_mysql_restart(args: list[str], settings: Settings) -> None:
    mysql_db.restart(settings)


COMMANDS: dict[str, Callable[[list[str], Settings], int | None]] = {
    "nameservers-local-purge": cmd_nameservers_local_purge,
    "nameservers-append": cmd_nameservers_append,
    "apt-mirror-pick": cmd_apt_mirror_pick,
    "apt-packages-update": cmd_apt_packages_update,
    "apt-packages-install": cmd_apt_packages_install,
    "apache-modules-enable": apache_ctl.enable_modules,
    "apache-modules-disable": apache_ctl.disable_modules,
    "apache-sites-enable": apache_ctl.enable_sites,
    "apache-sites-disable": apache_ctl.disable_sites,
    "apache-sites-create": cmd_apache_sites_create,
    "apache-restart": cmd_apache_restart,
    "mysql-database-create": cmd_mysql_database_create,
    "mysql-database-restore": cmd_mysql_database_restore,
    "mysql-remote-access-allow": cmd_mysql_remote_access_allow,
    "mysql-restart": cmd_mysql_restart,
}


# ─── Orchestration ───────────────────────────────────────────────────────
def provision_site(
    spec: SiteSpec,
    settings: Settings,
    database: str | None = None,
    backups: str | None = None,
    restart: bool = True,
) -> None:
    """Create, enable and (optionally) back a site with a restored database."""
    create_site(spec, settings)
    status_pass(f"apache site {spec.name} written")
    apache_ctl.enable_sites([spec.name], settings)
    status_pass(f"apache site {spec.name} enabled")
    if database:
        mysql_db.create_database(database)
        status_pass(f"database {database}")
        if backups:
            if restore_database(database, backups):
                status_pass(f"database {database} restored")
            else:
                log(f"INFO: restore of {database} skipped")
    if restart:
        apache_ctl.restart(settings)
        status_pass("apache restart")


def cmd_site_provision(args: list[str], settings: Settings) -> int | None:
    flags = [a for a in args if a.startswith("--")]
    positional = [a for a in args if not a.startswith("--")]
    database = None
    backups = None
    restart = True
    for f in flags:
        if f.startswith(f"{FLAG_DATABASE}="):
            database = f.split("=", 1)[1]
        elif f.startswith(f"{FLAG_BACKUPS}="):
            backups = f.split("=", 1)[1]
        elif f == FLAG_NO_RESTART:
            restart = False
        else:
            status_fail(f"unknown flag {f} for site-provision")
            return 2
    name, path, user, group = _pad(positional, 4)
    spec = SiteSpec.build(name, path, user, group, php=settings.php)
    provision_site(
        spec,
        settings,
        database=database,
        backups=backups,
        restart=restart,
    )
    return None


COMMANDS["site-provision"] = cmd_site_provision


def usage() -> str:
    return "usage: hostprov.py <command> [args...]\ncommands: " + ", ".join(
        sorted(COMMANDS)
    )


def run(command: str, args: list[str], settings: Settings) -> int:
    handler = COMMANDS.get(command)
    if handler is None:
        status_fail(f"unknown command {command}")
        return 2

    def action() -> int:
        rc = handler(args, settings)
        if rc:
            return rc
        status_pass(command)
        return 0

    return guarded(action)


def main(argv: list[str]) -> int:
    init_logging(None)
    if not argv or argv[0] in ("-h", "--help"):
        print(usage(), file=sys.stderr)
        return 2
    return run(argv[0], argv[1:], Settings.from_env())


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
